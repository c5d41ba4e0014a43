"""
Tests package - Test suite for the ScaledJob admission webhook.

Contains:
- unit/: Unit tests for individual components
- fixtures/: Sample ScaledJob resources
"""
