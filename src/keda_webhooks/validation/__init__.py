"""
Validation package - admission decisions for ScaledJob resources.

Contains:
- scaledjob: the decision engine for create, update and delete requests
- triggers: the trigger validator protocol and the default implementation
"""

from .scaledjob import (
    is_removing_finalizer,
    specs_equal,
    validate_create,
    validate_delete,
    validate_update,
)
from .triggers import ScaleTriggersValidator, TriggerValidator

__all__ = [
    "ScaleTriggersValidator",
    "TriggerValidator",
    "is_removing_finalizer",
    "specs_equal",
    "validate_create",
    "validate_delete",
    "validate_update",
]
