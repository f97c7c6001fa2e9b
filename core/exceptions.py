#!/usr/bin/env python3
"""
Error taxonomy for the matching core.

- ValidationError: malformed input, rejected before any mutation
- NotFoundError: referenced listing/prospect/match does not exist
- ConflictError: duplicate pair or transition out of a terminal state
- TransientStoreError: the store call failed; safe to retry the unit
"""


class MatchingError(Exception):
    """Base exception for matching core errors."""
    pass


class ValidationError(MatchingError):
    """Raised when input to a scoring or transition call is malformed."""
    pass


class NotFoundError(MatchingError):
    """Raised when a referenced entity does not exist."""
    pass


class ConflictError(MatchingError):
    """Raised on duplicate pairs or transitions out of a terminal state."""
    pass


class TransientStoreError(MatchingError):
    """Raised when the underlying store is unavailable or timed out."""
    pass
