"""
Entry point for running the NebulaQuery API with uvicorn.
Configure OPENAI_API_KEY, NASA_API_KEY, HOST, and PORT via environment variables or a .env file.
"""
from __future__ import annotations

import uvicorn

from nebulaquery.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        "nebulaquery.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
