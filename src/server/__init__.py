"""HTTP and WebSocket adapter for the elevator bank."""
