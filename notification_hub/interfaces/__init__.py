"""Interfaces exposed to clients of the notification hub."""
