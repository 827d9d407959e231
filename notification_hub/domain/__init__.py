"""Domain layer of the notification hub."""
