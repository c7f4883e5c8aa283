"""HTTP API: FastAPI app factory, engine manager, routes."""
