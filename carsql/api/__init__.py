"""HTTP API: catalog metadata and analytical query endpoints."""
