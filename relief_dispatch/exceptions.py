# relief-smart-dispatch/relief_dispatch/exceptions.py
"""Exceptions raised by the Relief Smart Dispatch optimizer."""


class DispatchError(Exception):
    """Base class for all optimizer errors."""


class ValidationError(DispatchError, ValueError):
    """A zone, drone, base or input file was rejected at insertion time."""


class InsufficientInputError(DispatchError):
    """optimize() was called without a base or without any zones."""
