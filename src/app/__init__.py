# =============================================================================
# Application Entry Point
# =============================================================================
# Builds the Lambda handler function from controllers and listeners:
#
#     from src.app import create_handler
#
#     lambda_handler = create_handler(
#         controllers=[ItemsController],
#         listeners=[S3UploadListener],
#     )
# =============================================================================

import logging
from typing import Any, Callable, Dict, Optional, Sequence

from src.runtime.config import DispatcherConfig, log_level
from src.runtime.dispatch import Dispatcher

logger = logging.getLogger(__name__)

LambdaHandler = Callable[[Any, Any], Any]


def configure_logging(level: Optional[str] = None) -> None:
    """Set the root log level (LOG_LEVEL env var, default INFO)."""
    level = (level or log_level()).upper()
    logging.basicConfig(level=level)
    logging.getLogger().setLevel(level)


def create_handler(
    controllers: Sequence[type] = (),
    listeners: Optional[Sequence[type]] = None,
    cors: Any = None,
    container: Any = None,
    config: Optional[DispatcherConfig] = None,
) -> LambdaHandler:
    """
    Create a Lambda handler.

    Args:
        controllers: Controller classes (at least one)
        listeners: Listener classes
        cors: dict or CorsConfig; None reads CORS_* from the environment
        container: Resolver for handler instances (defaults to a new Container)
        config: DispatcherConfig, used instead of the keyword arguments

    Returns:
        handler(event, context) suitable as the Lambda entry point

    Raises:
        RuntimeConfigurationError: invalid controller/listener lists
    """
    configure_logging()

    if config is not None:
        dispatcher = Dispatcher.from_config(config)
    else:
        dispatcher = Dispatcher(
            controllers=controllers,
            listeners=listeners,
            cors=cors,
            container=container,
        )

    def lambda_handler(event: Any, context: Any = None) -> Any:
        return dispatcher.dispatch(event, context)

    lambda_handler.dispatcher = dispatcher
    return lambda_handler


def create_handler_from_options(options: Dict[str, Any]) -> LambdaHandler:
    """create_handler() from a plain options dict (controllers/listeners/cors/container)."""
    return create_handler(config=DispatcherConfig.from_dict(options))


__all__ = [
    "configure_logging",
    "create_handler",
    "create_handler_from_options",
]
