"""HTTP API of the service container."""
