"""
In-memory fixed-cost ERC-721 collection for dry runs and tests.

Units minted in a batch are implicitly owned by the omnibus account until
their first transfer, which is what keeps minting at a fixed cost. Gas is
charged from a deterministic storage-access schedule, so cold (first write)
and warm (rewrite) slots produce different costs the way they do on chain.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Set

from gasbench.common.errors import OperationFailed
from gasbench.systems.base import AssetCollection, CollectionFactory, Outcome

logger = logging.getLogger(__name__)

# Gas schedule
TX_BASE = 21000
CALL_OVERHEAD = 2500
COLD_SLOAD = 2100
SSTORE_SET = 20000
SSTORE_RESET = 2900
RECEIVER_CHECK = 2600

DEFAULT_ACCOUNT_COUNT = 10


class SimulatedCollection(AssetCollection):
    """Single simulated collection with ownership and approval bookkeeping."""

    def __init__(self, omnibus: str, name: str = "", symbol: str = ""):
        self.omnibus = omnibus
        self.name = name
        self.symbol = symbol
        self.minted = 0
        self.owners: Dict[int, str] = {}
        self.approvals: Dict[int, str] = {}
        self.balances: Dict[str, int] = {}
        self.burned: Set[int] = set()
        self.block_number = 0

    def owner_of(self, unit_id: int) -> str:
        if unit_id < 1 or unit_id > self.minted or unit_id in self.burned:
            raise OperationFailed("ownerOf", unit_id, "nonexistent token")
        return self.owners.get(unit_id, self.omnibus)

    def _receipt(self, sender: str, gas_used: int) -> Outcome:
        self.block_number += 1
        return {
            'transactionHash': f"0x{self.block_number:064x}",
            'blockNumber': self.block_number,
            'from': sender,
            'gasUsed': gas_used,
            'status': 1,
        }

    def _require_owner(self, operation: str, account: str, unit_id: int) -> None:
        if unit_id < 1 or unit_id > self.minted or unit_id in self.burned:
            raise OperationFailed(operation, unit_id, "nonexistent token")
        owner = self.owners.get(unit_id, self.omnibus)
        if owner != account:
            raise OperationFailed(operation, unit_id, f"{account} is not the owner")

    def _write_cost(self, was_set: bool) -> int:
        return SSTORE_RESET if was_set else SSTORE_SET

    async def mint(self, count: int) -> Outcome:
        await asyncio.sleep(0)
        if count < 1:
            raise OperationFailed("mint", None, "count must be positive")
        # Supply counter and omnibus balance; individual owners stay implicit
        gas = TX_BASE + CALL_OVERHEAD
        gas += self._write_cost(self.minted > 0)
        gas += self._write_cost(self.balances.get(self.omnibus, 0) > 0)
        self.minted += count
        self.balances[self.omnibus] = self.balances.get(self.omnibus, 0) + count
        return self._receipt(self.omnibus, gas)

    def _move(self, operation: str, from_account: str, to_account: str, unit_id: int) -> int:
        self._require_owner(operation, from_account, unit_id)
        if not to_account:
            raise OperationFailed(operation, unit_id, "transfer to the zero address")

        gas = TX_BASE + CALL_OVERHEAD + COLD_SLOAD
        gas += self._write_cost(unit_id in self.owners)
        if unit_id in self.approvals:
            gas += SSTORE_RESET
            del self.approvals[unit_id]
        gas += SSTORE_RESET
        gas += self._write_cost(self.balances.get(to_account, 0) > 0)

        self.owners[unit_id] = to_account
        self.balances[from_account] -= 1
        self.balances[to_account] = self.balances.get(to_account, 0) + 1
        return gas

    async def transfer(self, from_account: str, to_account: str, unit_id: int) -> Outcome:
        await asyncio.sleep(0)
        gas = self._move("transferFrom", from_account, to_account, unit_id)
        return self._receipt(from_account, gas)

    async def safe_transfer(self, from_account: str, to_account: str, unit_id: int) -> Outcome:
        await asyncio.sleep(0)
        gas = self._move("safeTransferFrom", from_account, to_account, unit_id)
        return self._receipt(from_account, gas + RECEIVER_CHECK)

    async def approve(self, owner: str, spender: str, unit_id: int) -> Outcome:
        await asyncio.sleep(0)
        self._require_owner("approve", owner, unit_id)
        if spender == owner:
            raise OperationFailed("approve", unit_id, "approval to current owner")

        gas = TX_BASE + CALL_OVERHEAD + COLD_SLOAD
        gas += self._write_cost(unit_id in self.approvals)
        self.approvals[unit_id] = spender
        return self._receipt(owner, gas)

    async def burn(self, owner: str, unit_id: int) -> Outcome:
        await asyncio.sleep(0)
        self._require_owner("burn", owner, unit_id)

        gas = TX_BASE + CALL_OVERHEAD + COLD_SLOAD
        # Implicit omnibus ownership needs a tombstone write
        gas += self._write_cost(unit_id in self.owners)
        if unit_id in self.approvals:
            gas += SSTORE_RESET
            del self.approvals[unit_id]
        gas += SSTORE_RESET

        self.owners.pop(unit_id, None)
        self.burned.add(unit_id)
        self.balances[owner] -= 1
        return self._receipt(owner, gas)


class SimulatedCollectionFactory(CollectionFactory):
    """Deploys simulated collections for a fixed set of generated accounts."""

    def __init__(self, name: str = "", symbol: str = "", accounts: Optional[List[str]] = None,
                 account_count: int = DEFAULT_ACCOUNT_COUNT):
        self.name = name
        self.symbol = symbol
        self._accounts = list(accounts) if accounts else [
            f"0x{index + 1:040x}" for index in range(account_count)
        ]
        self.deployed: List[SimulatedCollection] = []

        logger.info(f"Initialized simulated collections with {len(self._accounts)} accounts")

    async def accounts(self) -> List[str]:
        return list(self._accounts)

    async def deploy(self) -> SimulatedCollection:
        collection = SimulatedCollection(self._accounts[0], self.name, self.symbol)
        self.deployed.append(collection)
        return collection
