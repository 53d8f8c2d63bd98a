"""
Cost collector that extracts gas usage from operation outcomes into a sample store.
"""

import logging
from collections.abc import Mapping

from gasbench.common.errors import MalformedOutcome
from gasbench.persistence.base import SampleStore

logger = logging.getLogger(__name__)

GAS_USED_FIELD = "gasUsed"


class CostCollector:
    """Records the gas cost of each completed operation under a label."""

    def __init__(self, store: SampleStore):
        """Bind the collector to the store it mutates.

        Args:
            store: Sample store shared across the run
        """
        self.store = store
        self.collected = 0

    @staticmethod
    def extract_cost(label: str, outcome) -> int:
        """Extract the gas cost from a receipt-like outcome.

        Accepts web3 receipts (AttributeDict), plain dicts and objects with a
        ``gasUsed`` attribute.

        Args:
            label: Scenario label, for error reporting
            outcome: Operation outcome

        Returns:
            Gas used by the operation

        Raises:
            MalformedOutcome: If the cost is missing or not a non-negative integer
        """
        if isinstance(outcome, Mapping):
            if GAS_USED_FIELD not in outcome:
                raise MalformedOutcome(label, outcome)
            cost = outcome[GAS_USED_FIELD]
        elif hasattr(outcome, GAS_USED_FIELD):
            cost = getattr(outcome, GAS_USED_FIELD)
        else:
            raise MalformedOutcome(label, outcome)

        if isinstance(cost, bool) or not isinstance(cost, int):
            raise MalformedOutcome(label, outcome, f"gasUsed is not an integer: {cost!r}")
        if cost < 0:
            raise MalformedOutcome(label, outcome, f"gasUsed is negative: {cost}")
        return cost

    def collect(self, label: str, outcome) -> None:
        """Record one outcome's gas cost under ``label``."""
        cost = self.extract_cost(label, outcome)
        self.store.record(label, cost)
        self.collected += 1
        logger.debug(f"Collected {cost} gas for '{label}'")
