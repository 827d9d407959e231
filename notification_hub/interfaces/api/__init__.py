"""HTTP and websocket surface for the local console UI."""
