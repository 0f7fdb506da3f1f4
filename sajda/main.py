"""Sajda daemon entry point"""
import sys

import uvicorn
from loguru import logger

from .api import create_app
from .config import Settings, settings
from .service import SajdaService


def setup_logging(config: Settings) -> None:
    """stderr at the configured level plus a rotating file in the data dir."""
    logger.remove()
    logger.configure(extra={"module": "main"})
    logger.add(
        sys.stderr,
        level=config.log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
               "<cyan>{extra[module]}</cyan> - {message}",
    )
    log_dir = config.data_dir.expanduser() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_dir / "sajda.log",
        level=config.log_level,
        rotation="5 MB",
        retention=3,
        encoding="utf-8",
    )


def main():
    setup_logging(settings)
    logger.info(f"Starting Sajda on {settings.host}:{settings.port}")
    if settings.coordinates is None:
        logger.warning("No SAJDA_LATITUDE/SAJDA_LONGITUDE set; waiting for POST /location")

    app = create_app(SajdaService(settings))
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
