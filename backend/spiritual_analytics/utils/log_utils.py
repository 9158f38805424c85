import logging
from typing import Union

_HANDLER_MARKER = '_spiritual_analytics_handler'


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configure the root logger with a single console handler.

    Idempotent: calling it again only updates the level, it never stacks
    duplicate handlers. `level` may be numeric or a name such as "DEBUG".
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers:
        if getattr(handler, _HANDLER_MARKER, False):
            handler.setLevel(level)
            return

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    console_handler.setLevel(level)
    setattr(console_handler, _HANDLER_MARKER, True)
    root_logger.addHandler(console_handler)
