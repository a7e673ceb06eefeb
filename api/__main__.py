"""Entry point for running the API with ``python -m api``."""
from __future__ import annotations

import uvicorn

from shared.config import get_settings


def main() -> None:
    """Launch the FastAPI app under Uvicorn."""

    settings = get_settings()
    uvicorn.run("api.main:app", host=settings.api_host, port=settings.api_port, reload=False)


if __name__ == "__main__":
    main()
