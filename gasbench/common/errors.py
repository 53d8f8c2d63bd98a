"""
Error kinds raised by the gas benchmark.
"""

from typing import Optional


class GasBenchError(Exception):
    """Base class for benchmark errors."""


class EmptySequence(GasBenchError, ValueError):
    """A statistic was requested over zero samples."""

    def __init__(self, message: str = "cannot reduce an empty sample sequence"):
        super().__init__(message)


class MalformedOutcome(GasBenchError):
    """An operation outcome does not carry a usable gas cost."""

    def __init__(self, label: str, outcome, reason: str = "missing gasUsed"):
        self.label = label
        self.outcome = outcome
        self.reason = reason
        super().__init__(f"Malformed outcome for '{label}': {reason}")


class OperationFailed(GasBenchError):
    """A contract capability was rejected or could not complete.

    Never recovered locally: measuring gas on a partially failed scenario is
    meaningless, so this aborts the whole run.
    """

    def __init__(self, operation: str, unit_id: Optional[int] = None, reason: str = ""):
        self.operation = operation
        self.unit_id = unit_id
        self.reason = reason
        target = f" (unit {unit_id})" if unit_id is not None else ""
        super().__init__(f"{operation}{target} failed: {reason}")
