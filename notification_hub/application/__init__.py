"""Application layer: use cases built on the domain and infrastructure."""
