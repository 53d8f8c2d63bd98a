"""
Tests for the web3-backed collection with a mocked client.
"""

import asyncio
import json
import os
import sys
import tempfile
import unittest
from unittest.mock import AsyncMock, MagicMock

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import aiohttp
from web3.exceptions import ContractLogicError, TimeExhausted

from gasbench.common.errors import OperationFailed
from gasbench.persistence.base import SampleStore
from gasbench.persistence.collector import CostCollector
from gasbench.systems.web3_erc721 import (
    Web3AssetCollection,
    Web3CollectionFactory,
    load_artifact,
    SAFE_TRANSFER_SIGNATURE,
)

OMNIBUS = "0x" + "1" * 40
USER_A = "0x" + "2" * 40
USER_B = "0x" + "3" * 40
TX_HASH = b"\xab" * 32


def make_w3(receipt):
    w3 = MagicMock()
    w3.eth.wait_for_transaction_receipt = AsyncMock(return_value=receipt)
    return w3


def make_call():
    call = MagicMock()
    call.transact = AsyncMock(return_value=TX_HASH)
    return call


class TestWeb3AssetCollection(unittest.IsolatedAsyncioTestCase):
    """Test capability calls and failure mapping."""

    def setUp(self):
        self.receipt = {'status': 1, 'gasUsed': 51400, 'transactionHash': TX_HASH}
        self.w3 = make_w3(self.receipt)
        self.contract = MagicMock()
        self.collection = Web3AssetCollection(self.w3, self.contract, OMNIBUS, receipt_timeout=30)

    async def test_transfer_sends_from_owner(self):
        """Test transferFrom is sent by the from account and returns the receipt."""
        call = make_call()
        self.contract.functions.transferFrom.return_value = call

        receipt = await self.collection.transfer(OMNIBUS, USER_A, 7)

        self.contract.functions.transferFrom.assert_called_once_with(OMNIBUS, USER_A, 7)
        call.transact.assert_awaited_once_with({'from': OMNIBUS})
        self.w3.eth.wait_for_transaction_receipt.assert_awaited_once_with(TX_HASH, timeout=30)
        self.assertEqual(receipt['gasUsed'], 51400)

    async def test_safe_transfer_uses_overload(self):
        """Test the three-argument safeTransferFrom overload is selected."""
        function = MagicMock(return_value=make_call())
        self.contract.get_function_by_signature.return_value = function

        await self.collection.safe_transfer(USER_A, USER_B, 3)

        self.contract.get_function_by_signature.assert_called_once_with(SAFE_TRANSFER_SIGNATURE)
        function.assert_called_once_with(USER_A, USER_B, 3)
        function.return_value.transact.assert_awaited_once_with({'from': USER_A})

    async def test_approve_burn_and_mint(self):
        """Test approve, burn and mint senders and arguments."""
        for name in ('approve', 'burn', 'mint'):
            getattr(self.contract.functions, name).return_value = make_call()

        await self.collection.approve(USER_A, USER_B, 5)
        await self.collection.burn(USER_A, 5)
        await self.collection.mint(100)

        self.contract.functions.approve.assert_called_once_with(USER_B, 5)
        self.contract.functions.approve.return_value.transact.assert_awaited_once_with({'from': USER_A})
        self.contract.functions.burn.assert_called_once_with(5)
        self.contract.functions.burn.return_value.transact.assert_awaited_once_with({'from': USER_A})
        self.contract.functions.mint.assert_called_once_with(100)
        self.contract.functions.mint.return_value.transact.assert_awaited_once_with({'from': OMNIBUS})

    async def test_receipt_feeds_collector(self):
        """Test a web3 receipt is accepted by the cost collector."""
        self.contract.functions.burn.return_value = make_call()
        store = SampleStore()
        CostCollector(store).collect("burn (omnibus)", await self.collection.burn(OMNIBUS, 1))
        self.assertEqual(store.samples("burn (omnibus)"), [51400])

    async def test_reverted_status(self):
        """Test a status-0 receipt raises OperationFailed."""
        self.w3.eth.wait_for_transaction_receipt.return_value = {'status': 0, 'gasUsed': 30000}
        self.contract.functions.burn.return_value = make_call()

        with self.assertRaises(OperationFailed) as ctx:
            await self.collection.burn(OMNIBUS, 9)
        self.assertEqual(ctx.exception.operation, "burn")
        self.assertEqual(ctx.exception.unit_id, 9)

    async def test_contract_logic_error(self):
        """Test a revert during gas estimation raises OperationFailed."""
        call = MagicMock()
        call.transact = AsyncMock(side_effect=ContractLogicError("execution reverted"))
        self.contract.functions.transferFrom.return_value = call

        with self.assertRaises(OperationFailed) as ctx:
            await self.collection.transfer(USER_A, USER_B, 1)
        self.assertIsInstance(ctx.exception.__cause__, ContractLogicError)
        self.w3.eth.wait_for_transaction_receipt.assert_not_awaited()

    async def test_receipt_timeout(self):
        """Test a receipt timeout surfaces as OperationFailed."""
        self.w3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("no receipt")
        self.contract.functions.approve.return_value = make_call()

        with self.assertRaises(OperationFailed):
            await self.collection.approve(OMNIBUS, USER_A, 1)

    async def test_rpc_error(self):
        """Test node-side rejections surface as OperationFailed."""
        call = MagicMock()
        call.transact = AsyncMock(side_effect=ValueError({'message': 'sender account not recognized'}))
        self.contract.functions.mint.return_value = call

        with self.assertRaises(OperationFailed):
            await self.collection.mint(1)

    async def test_transport_error(self):
        """Test a dropped HTTP connection surfaces as OperationFailed."""
        call = MagicMock()
        call.transact = AsyncMock(side_effect=aiohttp.ServerDisconnectedError())
        self.contract.functions.transferFrom.return_value = call

        with self.assertRaises(OperationFailed) as ctx:
            await self.collection.transfer(OMNIBUS, USER_A, 4)
        self.assertIsInstance(ctx.exception.__cause__, aiohttp.ClientError)
        self.assertEqual(ctx.exception.unit_id, 4)

    async def test_receipt_wait_cancelled_by_timeout(self):
        """Test an asyncio timeout while waiting for a receipt surfaces as OperationFailed."""
        self.w3.eth.wait_for_transaction_receipt.side_effect = asyncio.TimeoutError()
        self.contract.functions.burn.return_value = make_call()

        with self.assertRaises(OperationFailed):
            await self.collection.burn(OMNIBUS, 2)


class TestWeb3CollectionFactory(unittest.IsolatedAsyncioTestCase):
    """Test artifact loading and deployment."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.artifact_path = os.path.join(self.tmpdir.name, "FixedCostNFT.json")
        with open(self.artifact_path, 'w') as f:
            json.dump({'contractName': 'FixedCostNFT', 'abi': [{'type': 'constructor'}],
                       'bytecode': '0x6080'}, f)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_load_artifact(self):
        """Test artifact loading keeps abi and bytecode."""
        artifact = load_artifact(self.artifact_path)
        self.assertEqual(artifact['bytecode'], '0x6080')
        self.assertEqual(artifact['abi'], [{'type': 'constructor'}])

    def test_load_artifact_requires_bytecode(self):
        """Test artifacts without bytecode are rejected."""
        path = os.path.join(self.tmpdir.name, "Interface.json")
        with open(path, 'w') as f:
            json.dump({'abi': []}, f)
        with self.assertRaises(ValueError):
            load_artifact(path)

    async def test_deploy(self):
        """Test deployment from the omnibus account."""
        receipt = {'status': 1, 'contractAddress': '0x' + 'c' * 40, 'gasUsed': 1500000}
        w3 = make_w3(receipt)
        w3.is_connected = AsyncMock(return_value=True)
        w3.provider.disconnect = AsyncMock()
        accounts = asyncio.get_running_loop().create_future()
        accounts.set_result([OMNIBUS, USER_A, USER_B])
        w3.eth.accounts = accounts
        w3.eth.contract.return_value.constructor.return_value = make_call()

        async with Web3CollectionFactory(artifact_path=self.artifact_path, w3=w3,
                                         name="Non Fungible Token", symbol="NFT") as factory:
            self.assertEqual(await factory.accounts(), [OMNIBUS, USER_A, USER_B])
            collection = await factory.deploy()

        w3.eth.contract.return_value.constructor.assert_called_once_with(
            OMNIBUS, "Non Fungible Token", "NFT"
        )
        w3.eth.contract.assert_called_with(address=receipt['contractAddress'],
                                           abi=[{'type': 'constructor'}])
        self.assertEqual(collection.omnibus, OMNIBUS)
        w3.provider.disconnect.assert_awaited_once()

    async def test_deploy_reverted(self):
        """Test a failed contract creation raises OperationFailed."""
        w3 = make_w3({'status': 0, 'contractAddress': None})
        w3.eth.contract.return_value.constructor.return_value = make_call()
        factory = Web3CollectionFactory(artifact_path=self.artifact_path, w3=w3, accounts=[OMNIBUS])

        with self.assertRaises(OperationFailed):
            await factory.deploy()

    async def test_accounts_transport_error(self):
        """Test a failed account lookup surfaces as OperationFailed."""
        w3 = MagicMock()
        accounts = asyncio.get_running_loop().create_future()
        accounts.set_exception(aiohttp.ClientConnectionError("connection refused"))
        w3.eth.accounts = accounts
        factory = Web3CollectionFactory(artifact_path=self.artifact_path, w3=w3)

        with self.assertRaises(OperationFailed) as ctx:
            await factory.accounts()
        self.assertEqual(ctx.exception.operation, "eth_accounts")

    async def test_unreachable_endpoint(self):
        """Test entering the factory fails when the node is unreachable."""
        w3 = MagicMock()
        w3.is_connected = AsyncMock(return_value=False)
        w3.provider.disconnect = AsyncMock()

        with self.assertRaises(ConnectionError):
            async with Web3CollectionFactory(artifact_path=self.artifact_path, w3=w3):
                pass


if __name__ == '__main__':
    unittest.main()
