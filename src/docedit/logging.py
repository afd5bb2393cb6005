"""Logging configuration using loguru with document context support."""

from __future__ import annotations

import sys
from contextvars import ContextVar
from typing import Any

from loguru import logger

# Context variables for operation-scoped data
document_id_ctx: ContextVar[str | None] = ContextVar("document_id", default=None)
operation_ctx: ContextVar[str | None] = ContextVar("operation", default=None)


def get_document_context() -> dict[str, Any]:
    """Get current document context for logging."""
    return {
        "document_id": document_id_ctx.get(),
        "operation": operation_ctx.get(),
    }


def format_record(_record: dict) -> str:
    """Format log record with document context."""
    document_id = document_id_ctx.get()
    operation = operation_ctx.get()

    context_parts = []
    if operation:
        context_parts.append(f"op={operation}")
    if document_id:
        context_parts.append(f"doc={document_id[:12]}")

    context_str = " ".join(context_parts)
    if context_str:
        context_str = f"[{context_str}] "

    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        f"{context_str}"
        "<level>{message}</level>\n"
        "{exception}"
    )


def setup_logging(json_logs: bool = False, log_level: str = "INFO") -> None:
    """Configure loguru for docedit.

    Args:
        json_logs: If True, output logs as JSON lines
        log_level: Minimum log level to output
    """
    logger.remove()

    if json_logs:
        logger.add(
            sys.stderr,
            format="{message}",
            level=log_level,
            serialize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format=format_record,
            level=log_level,
            colorize=True,
        )


def set_document_context(document_id: str | None = None, operation: str | None = None) -> None:
    """Set document context for the current operation."""
    if document_id:
        document_id_ctx.set(document_id)
    if operation:
        operation_ctx.set(operation)


def clear_document_context() -> None:
    """Clear document context after an operation completes."""
    document_id_ctx.set(None)
    operation_ctx.set(None)


__all__ = [
    "clear_document_context",
    "document_id_ctx",
    "get_document_context",
    "logger",
    "operation_ctx",
    "set_document_context",
    "setup_logging",
]
