"""Structured action results"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ...core.exceptions import ValidationFailure

VALIDATION_MESSAGE = "Missing or invalid information in required fields."


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PERMISSION = "permission"
    AUTH = "auth"
    PROVIDER = "provider"
    INTERNAL = "internal"


class ActionResult(BaseModel):
    """Outcome of a mutating action"""
    success: bool
    message: str
    data: Optional[Dict[str, Any]] = None
    error: Optional[ErrorKind] = None


class ValidationResult(BaseModel):
    """Field-level validation failure"""
    error: ErrorKind = ErrorKind.VALIDATION
    field_errors: Dict[str, List[str]] = Field(default_factory=dict)
    message: str = VALIDATION_MESSAGE
    success: bool = False

    @classmethod
    def from_failure(cls, failure: ValidationFailure) -> "ValidationResult":
        return cls(field_errors=failure.field_errors)


def failure(message: str, error: ErrorKind, data: Optional[Dict[str, Any]] = None) -> ActionResult:
    return ActionResult(success=False, message=message, error=error, data=data)


def action_error(logger: logging.Logger, error: Exception, default_message: str) -> ActionResult:
    """Log an unexpected failure and turn it into a user-safe result"""
    logger.error("Action error: %s", default_message, exc_info=error)
    return failure(default_message, ErrorKind.INTERNAL)
