"""
Phase manager for ownership phases and the pre-state each measured scenario starts from.
"""

import logging
from enum import Enum
from typing import Dict, List, NamedTuple

from gasbench.configuration import (
    PHASE_TAGS,
    OMNIBUS_INDEX,
    FIRST_RECIPIENT_INDEX,
    SECOND_RECIPIENT_INDEX,
)

logger = logging.getLogger(__name__)


class OwnershipPhase(Enum):
    """Pre-state of a collection before measurement."""

    MINTED = "minted"
    DISTRIBUTED = "distributed"

    @property
    def tag(self) -> str:
        """Label tag for this phase (e.g. 'omnibus', 'users')."""
        return PHASE_TAGS[self.value]


class PhaseRoles(NamedTuple):
    """Accounts playing the from/to roles in a measured call."""

    source: str
    destination: str


class PhaseManager:
    """Establishes ownership phases on freshly deployed collections."""

    def __init__(self, runner, accounts: List[str]):
        """Initialize the phase manager.

        Args:
            runner: Bulk runner used for unmeasured distribution transfers
            accounts: Ordered participant accounts (omnibus first)
        """
        self.runner = runner
        self.accounts = list(accounts)
        self._roles: Dict[OwnershipPhase, PhaseRoles] = {
            OwnershipPhase.MINTED: PhaseRoles(
                self.accounts[OMNIBUS_INDEX], self.accounts[FIRST_RECIPIENT_INDEX]
            ),
            OwnershipPhase.DISTRIBUTED: PhaseRoles(
                self.accounts[FIRST_RECIPIENT_INDEX], self.accounts[SECOND_RECIPIENT_INDEX]
            ),
        }

    @property
    def omnibus(self) -> str:
        return self.accounts[OMNIBUS_INDEX]

    def roles(self, phase: OwnershipPhase) -> PhaseRoles:
        """Get the source/destination accounts for a phase."""
        return self._roles[phase]

    async def establish(self, collection, size: int, phase: OwnershipPhase) -> PhaseRoles:
        """Bring a fresh collection into the phase's pre-state.

        Mints ``size`` units to the omnibus account and, for the distributed
        phase, moves every unit to the first recipient without measuring.

        Args:
            collection: Freshly deployed asset collection
            size: Number of units to mint
            phase: Target ownership phase

        Returns:
            Roles for the measured call
        """
        await collection.mint(size)

        if phase is OwnershipPhase.DISTRIBUTED:
            await self.runner.transfer_all(
                collection,
                size,
                self.omnibus,
                self.accounts[FIRST_RECIPIENT_INDEX],
                measure=False,
            )

        logger.debug(f"Established phase {phase.value} with {size} units")
        return self.roles(phase)

    def __repr__(self) -> str:
        return f"PhaseManager(accounts={len(self.accounts)})"
