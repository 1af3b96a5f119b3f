"""Run the proxy with uvicorn: ``python -m paysession``."""

import uvicorn

from paysession.shared.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        "paysession.api_gateway.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
