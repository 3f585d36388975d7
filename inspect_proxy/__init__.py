"""Read-only HTTP gateway to Docker container metadata and the host address."""

__version__ = "1.0.0"
