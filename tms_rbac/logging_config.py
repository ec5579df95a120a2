import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from tms_rbac.config import settings

LOGGER_NAME = "tms_rbac"

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

def configure_logging(level: str | None = None, json_logs: bool | None = None) -> logging.Logger:
    """Attach a single stream handler to the service's logger tree.

    Safe to call more than once: an existing handler is replaced, not duplicated.
    """
    level = (level or settings.log_level).upper()
    json_logs = settings.log_json if json_logs is None else json_logs

    if json_logs:
        formatter: logging.Formatter = JsonFormatter(JSON_FORMAT)
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger(LOGGER_NAME)
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))
    root.propagate = False
    return root

def get_logger(name: str) -> logging.Logger:
    # module loggers hang off the service logger so one handler serves all
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
