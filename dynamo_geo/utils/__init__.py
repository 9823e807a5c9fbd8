"""
Utility modules for the DynamoDB Geo Query system.

This module provides logging setup and helpers used throughout the system.
"""

from .logging_setup import setup_logging, get_logger, log_performance

__all__ = ["setup_logging", "get_logger", "log_performance"]
