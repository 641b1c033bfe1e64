"""Event bus factories.

``GatewayConfig.eventbus_init_module`` names a module exposing
``factory(config, logger)``. This module is the default one.
"""

import importlib
import logging

from eventgate.config import GatewayConfig
from eventgate.exceptions import ConfigError
from eventgate.utils.logging_config import get_logger

from . import EventBus
from .bus import EventBus as ConcreteEventBus
from .producer import LoggingProducer
from .validation import validate_event_meta

logger = get_logger(__name__)


def factory(config: GatewayConfig, logger: logging.Logger) -> ConcreteEventBus:
    """Create an event bus that checks event metadata and logs produced events."""
    logger.info(
        "Creating default event bus",
        extra={"error_stream": config.error_stream},
    )
    return ConcreteEventBus(validate=validate_event_meta, produce=LoggingProducer())


def load_event_bus(config: GatewayConfig) -> EventBus:
    """Instantiate the event bus named by the configuration.

    Args:
        config: Gateway configuration

    Returns:
        The event bus built by the configured module's ``factory``

    Raises:
        ConfigError: If the module cannot be imported or has no factory
    """
    module_name = config.eventbus_init_module
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Could not import event bus module {module_name}: {e}") from e

    create = getattr(module, "factory", None)
    if not callable(create):
        raise ConfigError(f"Event bus module {module_name} has no factory function")

    logger.debug(
        "Loading event bus",
        extra={
            "module_name": module.__name__,
            "module_file": getattr(module, "__file__", "unknown"),
        },
    )
    return create(config, get_logger(f"eventbus.{module_name}"))
