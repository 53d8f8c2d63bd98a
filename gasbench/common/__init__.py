"""
Common utilities for the gas benchmark.
"""

from .errors import GasBenchError, EmptySequence, MalformedOutcome, OperationFailed
from .phase_manager import OwnershipPhase, PhaseManager, PhaseRoles

__all__ = [
    'GasBenchError', 'EmptySequence', 'MalformedOutcome', 'OperationFailed',
    'OwnershipPhase', 'PhaseManager', 'PhaseRoles',
]
