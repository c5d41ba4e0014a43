"""
Models package - Pydantic models for type-safe resource handling.

Defines data models for:
- ScaledJob custom resources and their triggers
- Admission requests, operations and decisions
"""
