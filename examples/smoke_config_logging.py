from __future__ import annotations

import logging

from config_binder import ConfigLoader, read_settings
from config_binder.logging import init_logging


class BaseConfig:
    DEBUG: bool = False


class AppConfig(BaseConfig):
    HOST: str = "127.0.0.1"
    PORT: int = 0
    RATIO: float = 1.0


def main() -> None:
    settings = read_settings("examples/config.yaml")
    init_logging(settings.logging)

    config = AppConfig()
    report = ConfigLoader.from_settings(settings.loader, config).load()

    logger = logging.getLogger("smoke")
    logger.info("Loaded host=%s port=%s debug=%s ratio=%s", config.HOST, config.PORT, config.DEBUG, config.RATIO)
    logger.info("Unknown keys=%s", ", ".join(report.unknown) or "-")


if __name__ == "__main__":
    main()
