import logging, json, sys, time, os

ENV_LOG_LEVEL = "CONFIDENTIAL_LOG_LEVEL"


def get_logger(name="Confidential", level=None, to_file=None):
    """
    Structured JSON logger shared by every confidential_core component.

    The level defaults to $CONFIDENTIAL_LOG_LEVEL (INFO when unset).
    Handlers are attached once per logger name.
    """
    logger = logging.getLogger(name)
    if level is None:
        level = os.getenv(ENV_LOG_LEVEL, "INFO").upper()
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt=json.dumps({
                "ts": "%(asctime)s",
                "level": "%(levelname)s",
                "name": "%(name)s",
                "msg": "%(message)s"
            }),
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
        formatter.converter = time.gmtime  # UTC
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def key_tag(hex_key: str, width: int = 10) -> str:
    """Abbreviate a hex key or address for log lines."""
    if hex_key is None:
        return "<none>"
    if len(hex_key) <= width:
        return hex_key
    return hex_key[:width] + "..."
