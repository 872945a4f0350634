"""Utility helpers for logging configuration."""

from .logging_utils import InterceptHandler, configure_json_logging

__all__ = ["InterceptHandler", "configure_json_logging"]
