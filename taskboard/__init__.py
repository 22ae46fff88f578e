"""Multi-user task manager with REST and GraphQL APIs."""

__version__ = "1.0.0"
