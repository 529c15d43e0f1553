"""
Custom exceptions for the lifeform TSP optimizer.
"""

from typing import Any, Optional


class TSPException(Exception):
    """Base exception for the optimizer."""

    def __init__(self, message: str = "", details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidConfigurationError(TSPException):
    """Raised when configuration parameters or inputs are invalid."""

    def __init__(self, parameter: str = None, value: Any = None, expected: str = None):
        """
        Args:
            parameter: Parameter name
            value: Invalid value
            expected: Expected value or range
        """
        message = "Invalid configuration parameter"
        details = {}

        if parameter:
            details["parameter"] = parameter
        if value is not None:
            details["value"] = value
        if expected:
            details["expected"] = expected

        if parameter:
            message += f": {parameter} = {value}"
            if expected:
                message += f" (expected: {expected})"

        super().__init__(message, details)
        self.parameter = parameter
        self.value = value
        self.expected = expected


class InvalidPointError(TSPException):
    """Raised when a point carries non-finite coordinates."""

    def __init__(self, index: int = None, x: float = None, y: float = None):
        message = "Invalid point"
        details = {}
        if index is not None:
            details["index"] = index
            message += f" at index {index}"
        if x is not None or y is not None:
            details["x"] = x
            details["y"] = y
            message += f": ({x}, {y})"
        super().__init__(message, details)


class InvariantViolationError(TSPException):
    """Raised when the evolution engine reaches a state it must never be in."""

    def __init__(self, reason: str = None, details: Optional[dict] = None):
        message = "Invariant violated"
        if reason:
            message += f": {reason}"
        super().__init__(message, details)


class DatasetNotFoundError(TSPException):
    """Raised when a TSPLIB file cannot be found."""

    def __init__(self, path: str = None):
        message = "Dataset not found"
        details = {}
        if path:
            details["path"] = str(path)
            message += f": '{path}'"
        super().__init__(message, details)
