"""Logfire observability for the ELC Library MCP server."""

import logging

import logfire

from .config import ObservabilityConfig

logger = logging.getLogger(__name__)


def initialize_observability(config: ObservabilityConfig | None = None) -> None:
    """Configure Logfire once at server start."""
    config = config or ObservabilityConfig()

    if not config.enabled:
        logger.debug("Observability disabled via configuration")
        return

    logfire.configure(
        token=config.token or None,
        service_name=config.service_name,
        environment=config.environment,
        send_to_logfire=config.send_to_logfire and bool(config.token),
        console=None if config.console_output else False,
    )
    logger.info("Observability initialized (environment=%s)", config.environment)


__all__ = [
    "ObservabilityConfig",
    "initialize_observability",
]
