"""Logging utilities for pinme modules."""

import logging


def get_logger(name: str) -> logging.Logger:
    """Return the logger for one pinme component.

    Names outside the package are moved under ``pinme.`` so that
    ``pinme.setup_logging()`` and the CLI's ``--verbose`` handler reach
    them. Records always go up to the root logger. As long as nothing has
    configured logging, the component stays quiet below WARNING so library
    users do not get upload chatter on stderr.

    Args:
        name: Component name, e.g. 'upload' or 'pinme.history'

    Returns:
        The ``pinme.*`` logger
    """
    if not name.startswith('pinme'):
        name = f'pinme.{name}'
    logger = logging.getLogger(name)
    logger.propagate = True

    if not logging.getLogger().handlers:
        logger.setLevel(logging.WARNING)

    return logger
