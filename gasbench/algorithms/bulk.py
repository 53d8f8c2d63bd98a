"""
Bulk operation runners that act on every unit of a collection, one unit at a time.
"""

import logging
from typing import Awaitable, Callable, Optional

from gasbench.configuration import PROGRESS_INTERVAL
from gasbench.persistence.collector import CostCollector
from gasbench.systems.base import AssetCollection, Outcome

logger = logging.getLogger(__name__)


class BulkRunner:
    """Runs transfer/safe-transfer/approve/burn over units 1..count.

    Units are processed strictly in increasing id order and each call is
    awaited before the next one is issued, since every call may depend on
    ownership state left by the previous one. Measured runs route every
    outcome through the bound collector, so each unit yields its own sample.
    """

    def __init__(self, collector: CostCollector, progress_interval: Optional[int] = None):
        """Initialize the runner.

        Args:
            collector: Cost collector receiving measured outcomes
            progress_interval: Log progress every N units; 0 disables progress
                logging (default: from configuration)
        """
        if progress_interval is None:
            progress_interval = PROGRESS_INTERVAL
        if progress_interval < 0:
            raise ValueError(f"progress_interval must not be negative, got {progress_interval}")
        self.collector = collector
        self.progress_interval = progress_interval

    async def _run_all(
        self,
        operation: str,
        count: int,
        invoke: Callable[[int], Awaitable[Outcome]],
        measure: bool,
        label: Optional[str],
    ) -> int:
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ValueError(f"count must be a positive integer, got {count!r}")
        if measure and not label:
            raise ValueError("a label is required for measured runs")

        for unit_id in range(1, count + 1):
            outcome = await invoke(unit_id)
            if measure:
                self.collector.collect(label, outcome)

            if self.progress_interval and unit_id % self.progress_interval == 0:
                logger.info(f"{operation}: {unit_id}/{count} units")

        logger.debug(
            f"{operation} completed for {count} units"
            + (f" (measured as '{label}')" if measure else "")
        )
        return count

    async def transfer_all(self, collection: AssetCollection, count: int, from_account: str,
                           to_account: str, measure: bool = False, label: str = None) -> int:
        """Transfer every unit from ``from_account`` to ``to_account``."""
        return await self._run_all(
            "transferFrom", count,
            lambda unit_id: collection.transfer(from_account, to_account, unit_id),
            measure, label,
        )

    async def safe_transfer_all(self, collection: AssetCollection, count: int, from_account: str,
                                to_account: str, measure: bool = False, label: str = None) -> int:
        """Safe-transfer every unit from ``from_account`` to ``to_account``."""
        return await self._run_all(
            "safeTransferFrom", count,
            lambda unit_id: collection.safe_transfer(from_account, to_account, unit_id),
            measure, label,
        )

    async def approve_all(self, collection: AssetCollection, count: int, owner: str,
                          spender: str, measure: bool = False, label: str = None) -> int:
        """Approve ``spender`` for every unit held by ``owner``."""
        return await self._run_all(
            "approve", count,
            lambda unit_id: collection.approve(owner, spender, unit_id),
            measure, label,
        )

    async def burn_all(self, collection: AssetCollection, count: int, owner: str,
                       measure: bool = False, label: str = None) -> int:
        """Burn every unit held by ``owner``."""
        return await self._run_all(
            "burn", count,
            lambda unit_id: collection.burn(owner, unit_id),
            measure, label,
        )
