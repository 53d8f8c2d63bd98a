"""
Configuration constants for the ERC-721 gas benchmark.

This module contains all configuration parameters including:
- Chain client endpoint and contract artifact location
- Token deployment parameters
- Scenario matrix (collection sizes, participant accounts)
- Report labels and progress/timeout settings
"""

import os
from typing import Dict, List

# =============================================================================
# CHAIN CLIENT CONFIGURATION
# =============================================================================

# JSON-RPC endpoint of a development node with unlocked accounts (hardhat, ganache)
RPC_URL: str = os.getenv("GASBENCH_RPC_URL", "http://127.0.0.1:8545")

# Compiled contract artifact (hardhat/truffle JSON with "abi" and "bytecode")
CONTRACT_ARTIFACT: str = os.getenv(
    "GASBENCH_ARTIFACT",
    "artifacts/contracts/FixedCostNFT.sol/FixedCostNFT.json",
)

# Optional comma-separated override of the node's account list
ACCOUNTS_OVERRIDE: str = os.getenv("GASBENCH_ACCOUNTS", "")

# Matches the test runner timeout used for the 1000-unit collections
RECEIPT_TIMEOUT_SECONDS: int = 1200

# =============================================================================
# TOKEN PARAMETERS
# =============================================================================

TOKEN_NAME: str = "Non Fungible Token"
TOKEN_SYMBOL: str = "NFT"

# =============================================================================
# SCENARIO MATRIX
# =============================================================================

COLLECTION_SIZES: List[int] = [1, 100, 1000]

# One omnibus (source) account plus two recipient accounts
MIN_PARTICIPANTS: int = 3
OMNIBUS_INDEX: int = 0
FIRST_RECIPIENT_INDEX: int = 1
SECOND_RECIPIENT_INDEX: int = 2

# =============================================================================
# REPORT LABELS
# =============================================================================

# Operation kind -> contract method name used in labels
OPERATION_NAMES: Dict[str, str] = {
    "transfer": "transferFrom",
    "safe_transfer": "safeTransferFrom",
    "approve": "approve",
    "burn": "burn",
    "mint": "mint",
}

# Ownership phase -> label tag
PHASE_TAGS: Dict[str, str] = {
    "minted": "omnibus",
    "distributed": "users",
}

LABEL_FORMAT: str = "{operation} ({phase})"
LABEL_FORMAT_PER_SIZE: str = "{operation} ({phase}, n={size})"

# =============================================================================
# PROGRESS AND OUTPUT
# =============================================================================

PROGRESS_INTERVAL: int = 100  # Log progress every N units
DEFAULT_BACKEND: str = "web3"
DEFAULT_REPORT_FORMAT: str = "text"
