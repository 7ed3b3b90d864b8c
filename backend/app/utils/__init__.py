# backend/app/utils/__init__.py
"""
Cross-cutting utilities.

- logging: Logging setup with correlation ID support
- context: Correlation ID storage
- number_format: Lenient parsing of formatted numbers scraped from HTML

Usage:
    from app.utils import setup_logging, get_logger
    from app.utils import unformat_number
"""

from app.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
)
from app.utils.logging import setup_logging, get_logger
from app.utils.number_format import unformat_number

__all__ = [
    "setup_logging",
    "get_logger",
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "unformat_number",
]
