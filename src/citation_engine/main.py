"""Entrypoint: serve the citation API with uvicorn."""

import uvicorn

from citation_engine.api.app import create_app
from citation_engine.config.settings import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
