"""Run the API server: ``python -m sheets_api``."""

import uvicorn

from sheets_api.config.settings import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "sheets_api.api.main:app",
        host=settings.fastapi_host,
        port=settings.fastapi_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
