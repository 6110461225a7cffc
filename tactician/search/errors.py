"""
Search Errors - Failures raised by the search engine.

Only internal-invariant violations are raised. Domain outcomes such as
"no goal reachable" are returned as data (see SearchResult).
"""

from __future__ import annotations


class SearchError(Exception):
    """Base class for search engine failures."""


class CorruptHistoryError(SearchError):
    """Raised when path reconstruction cannot walk back to the start state."""

    def __init__(self, state: object, steps: int):
        self.state = state
        self.steps = steps
        super().__init__(
            f"History does not lead back to the start state "
            f"(stuck at {state!r} after {steps} step(s))"
        )


class SearchNotStartedError(SearchError):
    """Raised when step() is called before start()."""
