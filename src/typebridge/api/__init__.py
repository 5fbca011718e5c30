"""Admin HTTP API — monitoring and API key administration endpoints."""
