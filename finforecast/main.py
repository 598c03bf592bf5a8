"""Entry-point: ``python -m finforecast.main`` starts the HTTP server.

Re-exports the FastAPI ``app`` so ``uvicorn finforecast.main:app`` also works.
"""

from finforecast.server import app  # noqa: F401 – re-export for uvicorn

if __name__ == "__main__":
    import logging
    import uvicorn
    from finforecast.config import settings

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        "finforecast.main:app",
        host=settings.fastapi_host,
        port=settings.fastapi_port,
        reload=(settings.app_env == "development"),
    )
