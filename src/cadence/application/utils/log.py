import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str | int = "INFO") -> logging.Logger:
    """
    Configure the `cadence` package logger and return it.

    Idempotent: calling it again only changes the level.
    """
    logger = logging.getLogger("cadence")
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    if not any(getattr(h, "_cadence", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._cadence = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
