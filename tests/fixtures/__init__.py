"""Shared test fixtures package.

Provides sample resources and an in-memory snapshot backend for all test
suites. This package contains only helpers; pytest fixtures live in
conftest.py files.
"""
