"""Structured logging for the recruitment workbench.

Modules obtain loggers through :func:`get_logger`, naming the component they
belong to so every record can be filtered by layer::

    logger = get_logger(__name__, component="parsing")
    logger.info("Parsed résumé", extra={"event": "parsing.resume.parsed"})
"""

import logging
from typing import Optional, Union


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges a fixed component field with per-call extras."""

    def process(self, msg, kwargs):
        # Per-call extras win over the adapter defaults
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Get a logger, optionally tagging every record with a component.

    Args:
        name: Logger name (typically __name__)
        component: Layer identifier such as "extraction" or "matching"

    Returns:
        Plain logger when no component is given, otherwise an adapter
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger
