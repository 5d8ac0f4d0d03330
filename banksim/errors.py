# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# errors.py
# -----------------------------------------------------------------------------
# Purpose:
#   Exception types raised by the simulation engine.
#
# Design notes:
#   - Each error subclasses the builtin it refines so callers that already
#     catch IndexError / ZeroDivisionError / AssertionError keep working.
#
# Usage:
#   from banksim.errors import EmptyQueueError, NoDataError, InvariantViolation
# -----------------------------------------------------------------------------

from __future__ import annotations

class EmptyQueueError(IndexError):
    """Raised when an event is requested from an empty Future Event List."""

class NoDataError(ZeroDivisionError):
    """Raised when an average is requested before any client was served."""

class InvariantViolation(AssertionError):
    """Internal state is inconsistent (e.g. departure from an idle station)."""
