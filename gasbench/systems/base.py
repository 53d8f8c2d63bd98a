"""
Async base classes for token collections and the factories that deploy them.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Mapping

logger = logging.getLogger(__name__)

# Receipt-like mapping carrying at least "gasUsed"
Outcome = Mapping[str, Any]


class AssetCollection(ABC):
    """Capability set of one deployed ERC-721 style collection.

    Every capability acts on a single unit (except mint), completes before
    returning and yields the transaction receipt. A rejected or failed call
    raises OperationFailed.
    """

    @abstractmethod
    async def mint(self, count: int) -> Outcome:
        """Mint ``count`` units (ids 1..count) to the omnibus account."""

    @abstractmethod
    async def transfer(self, from_account: str, to_account: str, unit_id: int) -> Outcome:
        """Unsafe ownership transfer (transferFrom), sent by ``from_account``."""

    @abstractmethod
    async def safe_transfer(self, from_account: str, to_account: str, unit_id: int) -> Outcome:
        """Receiver-checked ownership transfer (safeTransferFrom), sent by ``from_account``."""

    @abstractmethod
    async def approve(self, owner: str, spender: str, unit_id: int) -> Outcome:
        """Grant ``spender`` the right to transfer ``unit_id``, sent by ``owner``."""

    @abstractmethod
    async def burn(self, owner: str, unit_id: int) -> Outcome:
        """Destroy ``unit_id``, sent by ``owner``."""


class CollectionFactory(ABC):
    """Deploys fresh collections; used as an async context manager."""

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Release client resources."""

    @abstractmethod
    async def accounts(self) -> List[str]:
        """Ordered participant accounts, omnibus first."""

    @abstractmethod
    async def deploy(self) -> AssetCollection:
        """Deploy a new, empty collection owned by the omnibus account."""
