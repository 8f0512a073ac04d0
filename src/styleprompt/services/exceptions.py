"""Shared service-layer exceptions."""

from __future__ import annotations


class InvariantViolation(Exception):
    """Programming error: a helper was called with inputs it cannot honour."""
