"""API router package.

This package contains the HTTP route modules for the FastAPI API service.

Most code should import the composed router via:

    from baseball_stats_api.routes import router

The actual composition lives in `baseball_stats_api/routes/api_router.py`.
"""

from .api_router import router
