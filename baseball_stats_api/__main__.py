"""Run the API with uvicorn: `python -m baseball_stats_api` or `baseball-stats-api`."""

import uvicorn

from .settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("baseball_stats_api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
