"""
Logging configuration and utilities for the stock-data access layer.
"""
from .config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
