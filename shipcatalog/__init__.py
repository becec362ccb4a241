"""Ship catalogue backend: validation, rating and query pipeline behind a FastAPI API."""
