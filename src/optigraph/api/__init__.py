"""HTTP API for the admin dashboard."""
