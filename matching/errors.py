"""
Matching Errors

Contract breaches and invariant failures are raised, never recovered.
"""

from typing import Dict


class MatchingError(Exception):
    """Base class for matching engine errors."""


class PreconditionViolation(MatchingError):
    """A caller broke a guarantee the pipeline is supposed to provide."""


class InvariantViolation(MatchingError):
    """A calculator produced an impossible intermediate value."""


class ComparisonCancelled(MatchingError):
    """A comparison observed the cancel signal and stopped."""


class ComparisonFailed(MatchingError):
    """One or more catalog-pair comparisons failed."""

    def __init__(self, failures: Dict[str, BaseException]):
        self.failures = failures
        details = "; ".join(f"{pair}: {exc!r}" for pair, exc in failures.items())
        super().__init__(f"{len(failures)} comparison(s) failed: {details}")
