import logging
import sys

_HANDLER_NAME = "app-stdout"


def setup_logging(level: str | None = "INFO") -> None:
    """Configure the `app` logger and its children.

    Framework loggers (uvicorn, botocore) are left untouched. Calling this
    again only updates the level.
    """
    log_level = getattr(logging, str(level or "INFO").upper(), logging.INFO)
    logger = logging.getLogger("app")
    logger.setLevel(log_level)
    if any(handler.get_name() == _HANDLER_NAME for handler in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.handlers = [handler]
    logger.propagate = False
