"""Core library utilities: logging and the base exception hierarchy."""

from splist.core.logging import (
    configure_logging,
    generate_operation_id,
    get_logger,
    reset_logging,
)

__all__ = ["configure_logging", "generate_operation_id", "get_logger", "reset_logging"]
