"""
Test suite for bonding-curve-engine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
