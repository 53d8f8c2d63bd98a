"""
ERC-721 collections deployed and driven through a web3 JSON-RPC client.
"""

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp
from web3 import AsyncWeb3, AsyncHTTPProvider
from web3.exceptions import ContractLogicError, Web3Exception

from gasbench.common.errors import OperationFailed
from gasbench.configuration import (
    RPC_URL,
    CONTRACT_ARTIFACT,
    RECEIPT_TIMEOUT_SECONDS,
    TOKEN_NAME,
    TOKEN_SYMBOL,
)
from gasbench.systems.base import AssetCollection, CollectionFactory, Outcome

logger = logging.getLogger(__name__)

SAFE_TRANSFER_SIGNATURE = "safeTransferFrom(address,address,uint256)"

# Node rejections, receipt timeouts and HTTP transport failures
CLIENT_ERRORS = (Web3Exception, ValueError, aiohttp.ClientError, asyncio.TimeoutError)


def load_artifact(path: str) -> Dict[str, Any]:
    """Load a hardhat/truffle contract artifact.

    Args:
        path: Path to the artifact JSON

    Returns:
        Dictionary with 'abi' and 'bytecode'
    """
    with open(path, 'r') as f:
        artifact = json.load(f)

    missing = [key for key in ('abi', 'bytecode') if not artifact.get(key)]
    if missing:
        raise ValueError(f"Artifact {path} is missing {', '.join(missing)}")

    return {'abi': artifact['abi'], 'bytecode': artifact['bytecode']}


class Web3AssetCollection(AssetCollection):
    """Deployed ERC-721 contract driven from unlocked node accounts."""

    def __init__(self, w3: AsyncWeb3, contract, omnibus: str,
                 receipt_timeout: float = RECEIPT_TIMEOUT_SECONDS):
        self.w3 = w3
        self.contract = contract
        self.omnibus = omnibus
        self.receipt_timeout = receipt_timeout

    @property
    def address(self) -> str:
        return self.contract.address

    async def _transact(self, operation: str, call, sender: str,
                        unit_id: Optional[int] = None) -> Outcome:
        """Send a contract call and wait for its receipt.

        Args:
            operation: Contract method name, for error reporting
            call: Bound contract function
            sender: Account the transaction is sent from
            unit_id: Unit the call acts on, if any

        Returns:
            Transaction receipt

        Raises:
            OperationFailed: If the call reverts, the node rejects it or the
                receipt does not arrive in time
        """
        try:
            tx_hash = await call.transact({'from': sender})
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.receipt_timeout
            )
        except ContractLogicError as e:
            raise OperationFailed(operation, unit_id, f"reverted: {e}") from e
        except CLIENT_ERRORS as e:
            raise OperationFailed(operation, unit_id, str(e) or type(e).__name__) from e

        if receipt.get('status', 1) == 0:
            raise OperationFailed(operation, unit_id, f"transaction {tx_hash.hex()} reverted")

        return receipt

    async def mint(self, count: int) -> Outcome:
        return await self._transact(
            "mint", self.contract.functions.mint(count), self.omnibus
        )

    async def transfer(self, from_account: str, to_account: str, unit_id: int) -> Outcome:
        call = self.contract.functions.transferFrom(from_account, to_account, unit_id)
        return await self._transact("transferFrom", call, from_account, unit_id)

    async def safe_transfer(self, from_account: str, to_account: str, unit_id: int) -> Outcome:
        # safeTransferFrom is overloaded; select the variant without calldata
        function = self.contract.get_function_by_signature(SAFE_TRANSFER_SIGNATURE)
        call = function(from_account, to_account, unit_id)
        return await self._transact("safeTransferFrom", call, from_account, unit_id)

    async def approve(self, owner: str, spender: str, unit_id: int) -> Outcome:
        call = self.contract.functions.approve(spender, unit_id)
        return await self._transact("approve", call, owner, unit_id)

    async def burn(self, owner: str, unit_id: int) -> Outcome:
        call = self.contract.functions.burn(unit_id)
        return await self._transact("burn", call, owner, unit_id)


class Web3CollectionFactory(CollectionFactory):
    """Deploys the benchmarked contract on a development node."""

    def __init__(
        self,
        rpc_url: str = None,
        artifact_path: str = None,
        name: str = None,
        symbol: str = None,
        accounts: Optional[List[str]] = None,
        receipt_timeout: float = None,
        w3: Optional[AsyncWeb3] = None,
    ):
        self.rpc_url = rpc_url or RPC_URL
        self.artifact_path = artifact_path or CONTRACT_ARTIFACT
        self.name = name or TOKEN_NAME
        self.symbol = symbol or TOKEN_SYMBOL
        self.receipt_timeout = receipt_timeout or RECEIPT_TIMEOUT_SECONDS
        self.w3 = w3 or AsyncWeb3(AsyncHTTPProvider(self.rpc_url))
        self._accounts = [AsyncWeb3.to_checksum_address(a) for a in accounts] if accounts else None
        self._artifact: Optional[Dict[str, Any]] = None

        logger.info(f"Initialized web3 collection factory for {self.rpc_url}")

    async def __aenter__(self):
        """Async context manager entry."""
        if not await self.w3.is_connected():
            raise ConnectionError(f"Cannot reach JSON-RPC endpoint {self.rpc_url}")
        self._artifact = load_artifact(self.artifact_path)
        logger.info(f"Loaded contract artifact {self.artifact_path}")
        return self

    async def close(self) -> None:
        disconnect = getattr(self.w3.provider, 'disconnect', None)
        if disconnect is not None:
            await disconnect()

    async def accounts(self) -> List[str]:
        if self._accounts is None:
            try:
                self._accounts = list(await self.w3.eth.accounts)
            except CLIENT_ERRORS as e:
                raise OperationFailed("eth_accounts", None, str(e) or type(e).__name__) from e
            logger.info(f"Using {len(self._accounts)} node accounts")
        return list(self._accounts)

    async def deploy(self) -> Web3AssetCollection:
        if self._artifact is None:
            self._artifact = load_artifact(self.artifact_path)

        accounts = await self.accounts()
        omnibus = accounts[0]
        factory = self.w3.eth.contract(
            abi=self._artifact['abi'], bytecode=self._artifact['bytecode']
        )

        try:
            tx_hash = await factory.constructor(omnibus, self.name, self.symbol).transact(
                {'from': omnibus}
            )
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.receipt_timeout
            )
        except CLIENT_ERRORS as e:
            raise OperationFailed("deploy", None, str(e) or type(e).__name__) from e

        if receipt.get('status', 1) == 0 or not receipt.get('contractAddress'):
            raise OperationFailed("deploy", None, "contract creation reverted")

        contract = self.w3.eth.contract(
            address=receipt['contractAddress'], abi=self._artifact['abi']
        )
        logger.debug(f"Deployed collection at {receipt['contractAddress']}")
        return Web3AssetCollection(self.w3, contract, omnibus, self.receipt_timeout)
