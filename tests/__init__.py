"""
Test suite for the creator pricing engine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
