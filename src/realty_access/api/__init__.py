"""HTTP surface: shared dependencies, health checks and the versioned API."""
