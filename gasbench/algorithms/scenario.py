"""
Scenario driver that measures every operation across collection sizes and ownership phases.
"""

import time
import logging
from typing import List, Optional, Sequence

from gasbench.algorithms.bulk import BulkRunner
from gasbench.common.phase_manager import OwnershipPhase, PhaseManager
from gasbench.configuration import (
    COLLECTION_SIZES,
    MIN_PARTICIPANTS,
    OPERATION_NAMES,
    PHASE_TAGS,
    LABEL_FORMAT,
    LABEL_FORMAT_PER_SIZE,
)
from gasbench.persistence.base import SampleStore
from gasbench.persistence.collector import CostCollector
from gasbench.systems.base import CollectionFactory

logger = logging.getLogger(__name__)

MEASURED_OPERATIONS = ("transfer", "safe_transfer", "approve", "burn")


def make_label(operation: str, phase_tag: str, size: Optional[int] = None) -> str:
    """Build a scenario label such as 'transferFrom (omnibus)'.

    Args:
        operation: Operation kind key (see OPERATION_NAMES)
        phase_tag: Phase tag, e.g. 'omnibus' or 'users'
        size: Collection size to include in the label, if splitting by size
    """
    name = OPERATION_NAMES[operation]
    if size is None:
        return LABEL_FORMAT.format(operation=name, phase=phase_tag)
    return LABEL_FORMAT_PER_SIZE.format(operation=name, phase=phase_tag, size=size)


def plan_labels(sizes: Sequence[int], phases: Sequence[OwnershipPhase],
                split_by_size: bool = False, measure_mint: bool = False) -> List[str]:
    """List the labels a run over this matrix records into, in recording order."""
    labels = []
    for size in sizes:
        label_size = size if split_by_size else None
        if measure_mint:
            labels.append(make_label("mint", PHASE_TAGS["minted"], label_size))
        for phase in phases:
            for operation in MEASURED_OPERATIONS:
                labels.append(make_label(operation, phase.tag, label_size))
    # Unsplit labels repeat across sizes
    return list(dict.fromkeys(labels))


class ScenarioDriver:
    """Runs the {collection size} x {ownership phase} x {operation} matrix."""

    def __init__(
        self,
        factory: CollectionFactory,
        accounts: Sequence[str],
        store: SampleStore,
        sizes: Optional[Sequence[int]] = None,
        phases: Optional[Sequence[OwnershipPhase]] = None,
        split_by_size: bool = False,
        measure_mint: bool = False,
    ):
        """Initialize the scenario driver.

        Args:
            factory: Deploys a fresh collection for every scenario
            accounts: Ordered participant accounts; omnibus first, then two recipients
            store: Sample store shared across the whole run
            sizes: Collection sizes to measure (default: from configuration)
            phases: Ownership phases to measure (default: all)
            split_by_size: Record each size under its own labels
            measure_mint: Also record the cost of minting each collection
        """
        if len(accounts) < MIN_PARTICIPANTS:
            raise ValueError(
                f"At least {MIN_PARTICIPANTS} accounts are required, got {len(accounts)}"
            )

        self.sizes: List[int] = list(COLLECTION_SIZES) if sizes is None else list(sizes)
        if not self.sizes:
            raise ValueError("At least one collection size is required")
        for size in self.sizes:
            if isinstance(size, bool) or not isinstance(size, int) or size < 1:
                raise ValueError(f"Collection sizes must be positive integers, got {size!r}")

        self.factory = factory
        self.accounts = list(accounts)
        self.store = store
        self.phases: List[OwnershipPhase] = list(OwnershipPhase) if phases is None else list(phases)
        if not self.phases:
            raise ValueError("At least one ownership phase is required")
        self.split_by_size = split_by_size
        self.measure_mint = measure_mint

        self.collector = CostCollector(store)
        self.runner = BulkRunner(self.collector)
        self.phase_manager = PhaseManager(self.runner, self.accounts)

        logger.info(
            f"Initialized scenario driver: sizes={self.sizes}, "
            f"phases={[p.value for p in self.phases]}"
        )

    def label_for(self, operation: str, phase_tag: str, size: int) -> str:
        return make_label(operation, phase_tag, size if self.split_by_size else None)

    def planned_labels(self) -> List[str]:
        """Labels a full run records into, in recording order."""
        return plan_labels(self.sizes, self.phases, self.split_by_size, self.measure_mint)

    async def run(self) -> SampleStore:
        """Run the full matrix.

        Returns:
            The sample store passed at construction
        """
        start_time = time.time()
        for size in self.sizes:
            await self.run_size(size)

        logger.info(
            f"Scenario matrix completed in {time.time() - start_time:.1f}s: "
            f"{self.store.total_samples()} samples across {len(self.store)} labels"
        )
        return self.store

    async def run_size(self, size: int) -> None:
        """Run every phase and operation for one collection size."""
        logger.info(f"=== Collection size {size} ===")

        if self.measure_mint:
            await self.run_mint(size)

        for phase in self.phases:
            for operation in MEASURED_OPERATIONS:
                await self.run_scenario(size, phase, operation)

    async def run_mint(self, size: int) -> None:
        """Measure minting a reservation of ``size`` units on a fresh collection."""
        collection = await self.factory.deploy()
        outcome = await collection.mint(size)
        self.collector.collect(self.label_for("mint", PHASE_TAGS["minted"], size), outcome)

    async def run_scenario(self, size: int, phase: OwnershipPhase, operation: str) -> str:
        """Measure one operation on a freshly prepared collection.

        Args:
            size: Collection size
            phase: Ownership phase to start from
            operation: One of MEASURED_OPERATIONS

        Returns:
            Label the samples were recorded under
        """
        if operation not in MEASURED_OPERATIONS:
            raise ValueError(f"Unknown operation: {operation}")

        label = self.label_for(operation, phase.tag, size)
        logger.info(f"Measuring '{label}' over {size} units")

        collection = await self.factory.deploy()
        roles = await self.phase_manager.establish(collection, size, phase)

        if operation == "transfer":
            await self.runner.transfer_all(
                collection, size, roles.source, roles.destination, measure=True, label=label
            )
        elif operation == "safe_transfer":
            await self.runner.safe_transfer_all(
                collection, size, roles.source, roles.destination, measure=True, label=label
            )
        elif operation == "approve":
            await self.runner.approve_all(
                collection, size, roles.source, roles.destination, measure=True, label=label
            )
        else:
            await self.runner.burn_all(
                collection, size, roles.source, measure=True, label=label
            )

        return label
