"""
Shelfwise Test Suite

Tests are organized into:
- unit/: Unit tests for individual components
- integration/: End-to-end runs of the command-line interface
- factories.py: Builders for domain records
"""
