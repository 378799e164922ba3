"""
Data quality error classifications for stock documents.

Two conditions are distinguished: the requested entity does not exist at any
checked location, or it exists but fails structural or numeric validation.
Both carry the entity name and the symbol so callers can render an
actionable message.
"""

from typing import Optional, Dict, Any


class DataQualityError(Exception):
    """Base class for missing or malformed stock data."""

    def __init__(self, message: str, entity: Optional[str] = None,
                 symbol: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.entity = entity
        self.symbol = symbol
        self.context = context or {}
        self.recoverable = True


class NotFoundError(DataQualityError):
    """The requested entity does not exist at any checked location."""

    def __init__(self, entity: str, symbol: Optional[str] = None, **kwargs):
        message = f"{entity} not found"
        if symbol:
            message = f"{message}: {symbol}"
        super().__init__(message, entity=entity, symbol=symbol, **kwargs)


class InvalidDataError(DataQualityError):
    """A located entity exists but fails structural or numeric validation."""

    def __init__(self, entity: str, detail: Optional[str] = None,
                 symbol: Optional[str] = None, raw_value: Any = None, **kwargs):
        message = f"Invalid or missing {entity}"
        if detail:
            message = f"{message}: {detail}"
        if symbol:
            message = f"{message} ({symbol})"
        super().__init__(message, entity=entity, symbol=symbol, **kwargs)
        self.detail = detail
        self.raw_value = raw_value
