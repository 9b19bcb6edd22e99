"""HTTP API server: FastAPI app, pydantic schemas, and the in-memory job store."""
