"""
Error handling module for the ScaledJob admission webhook.

This module provides the error hierarchy used to separate rejected resources
from malformed admission invocations.
"""

from .operator_errors import (
    AdmissionContextError,
    OperatorError,
    ScaledJobAdmissionDenied,
    TriggerValidationError,
    ValidationError,
)

__all__ = [
    "OperatorError",
    "ValidationError",
    "TriggerValidationError",
    "ScaledJobAdmissionDenied",
    "AdmissionContextError",
]
