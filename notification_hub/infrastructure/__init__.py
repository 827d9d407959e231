"""Infrastructure adapters: transport, dispatcher, REST client and desktop."""
