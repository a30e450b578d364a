"""Built-in FHEVM example catalog.

Paths are relative to the example repository root (``FactoryConfig.catalog_root``).
"""

from __future__ import annotations

from typing import Any

_OPENZEPPELIN_NPM: dict[str, str] = {
    "@openzeppelin/confidential-contracts": "^0.3.0",
    "@openzeppelin/contracts": "^5.4.0",
}

_ERC20_MOCK = "contracts/openzeppelin/mocks/ERC20Mock.sol"


EXAMPLES: dict[str, dict[str, Any]] = {
    "fhe-counter": {
        "primary_asset": "contracts/basic/FHECounter.sol",
        "test_asset": "test/basic/FHECounter.ts",
        "description": (
            "Confidential counter implementation using FHEVM, compared with a "
            "standard counter to highlight encryption benefits."
        ),
        "category": "Basic",
        "display_title": "FHE Counter",
    },
    "encrypt-single-value": {
        "primary_asset": "contracts/basic/encrypt/EncryptSingleValue.sol",
        "test_asset": "test/basic/encrypt/EncryptSingleValue.ts",
        "description": (
            "FHE encryption mechanism with single values, including common "
            "pitfalls and best practices for developers."
        ),
        "category": "Basic - Encryption",
        "display_title": "Encrypt Single Value",
    },
    "encrypt-multiple-values": {
        "primary_asset": "contracts/basic/encrypt/EncryptMultipleValues.sol",
        "test_asset": "test/basic/encrypt/EncryptMultipleValues.ts",
        "description": "Encrypting and handling multiple values in a single transaction efficiently.",
        "category": "Basic - Encryption",
        "display_title": "Encrypt Multiple Values",
    },
    "user-decrypt-single-value": {
        "primary_asset": "contracts/basic/decrypt/UserDecryptSingleValue.sol",
        "test_asset": "test/basic/decrypt/UserDecryptSingleValue.ts",
        "description": (
            "FHE user decryption mechanism for single values, with common "
            "pitfalls and correct implementation patterns."
        ),
        "category": "Basic - Decryption",
        "display_title": "User Decrypt Single Value",
    },
    "user-decrypt-multiple-values": {
        "primary_asset": "contracts/basic/decrypt/UserDecryptMultipleValues.sol",
        "test_asset": "test/basic/decrypt/UserDecryptMultipleValues.ts",
        "description": "Decrypting multiple encrypted values for a user in a single operation.",
        "category": "Basic - Decryption",
        "display_title": "User Decrypt Multiple Values",
    },
    "public-decrypt-single-value": {
        "primary_asset": "contracts/basic/decrypt/PublicDecryptSingleValue.sol",
        "test_asset": "test/basic/decrypt/PublicDecryptSingleValue.ts",
        "description": "Publicly decrypting a single encrypted value on-chain for transparent results.",
        "category": "Basic - Decryption",
        "display_title": "Public Decrypt Single Value",
    },
    "public-decrypt-multiple-values": {
        "primary_asset": "contracts/basic/decrypt/PublicDecryptMultipleValues.sol",
        "test_asset": "test/basic/decrypt/PublicDecryptMultipleValues.ts",
        "description": (
            "Publicly decrypting multiple encrypted values in a single "
            "transaction for batch transparency."
        ),
        "category": "Basic - Decryption",
        "display_title": "Public Decrypt Multiple Values",
    },
    "fhe-add": {
        "primary_asset": "contracts/basic/fhe-operations/FHEAdd.sol",
        "test_asset": "test/basic/fhe-operations/FHEAdd.ts",
        "description": "Addition operations on encrypted values using FHE.add() for homomorphic computation.",
        "category": "FHE Operations",
        "display_title": "FHE Add Operation",
    },
    "fhe-if-then-else": {
        "primary_asset": "contracts/basic/fhe-operations/FHEIfThenElse.sol",
        "test_asset": "test/basic/fhe-operations/FHEIfThenElse.ts",
        "description": (
            "Conditional operations on encrypted values using FHE.select() for "
            "encrypted branching logic."
        ),
        "category": "FHE Operations",
        "display_title": "FHE If-Then-Else",
    },
    "fhe-arithmetic": {
        "primary_asset": "contracts/basic/fhe-operations/FHEArithmetic.sol",
        "test_asset": "test/basic/fhe-operations/FHEArithmetic.ts",
        "description": (
            "Comprehensive example demonstrating all FHE arithmetic operations: "
            "add, sub, mul, div, rem, min, max."
        ),
        "category": "FHE Operations",
        "display_title": "FHE Arithmetic Operations",
    },
    "fhe-comparison": {
        "primary_asset": "contracts/basic/fhe-operations/FHEComparison.sol",
        "test_asset": "test/basic/fhe-operations/FHEComparison.ts",
        "description": (
            "Demonstrates all FHE comparison operations: eq, ne, gt, lt, ge, le, "
            "and the select function for encrypted conditionals."
        ),
        "category": "FHE Operations",
        "display_title": "FHE Comparison Operations",
    },
    "fhe-access-control": {
        "primary_asset": "contracts/concepts/FHEAccessControl.sol",
        "test_asset": "test/concepts/FHEAccessControl.ts",
        "description": (
            "Critical access control patterns in FHEVM: FHE.allow, FHE.allowThis, "
            "FHE.allowTransient. Includes common mistakes and correct implementations."
        ),
        "category": "Concepts",
        "display_title": "FHE Access Control",
    },
    "fhe-input-proof": {
        "primary_asset": "contracts/concepts/FHEInputProof.sol",
        "test_asset": "test/concepts/FHEInputProof.ts",
        "description": (
            "Explains input proof validation in FHEVM: what proofs are, why they "
            "are needed, and how to use them with single and batched inputs."
        ),
        "category": "Concepts",
        "display_title": "FHE Input Proofs",
    },
    "fhe-handles": {
        "primary_asset": "contracts/concepts/FHEHandles.sol",
        "test_asset": "test/concepts/FHEHandles.ts",
        "description": (
            "Understanding FHE handles: creation, computation, immutability, and "
            "symbolic execution in mock mode."
        ),
        "category": "Concepts",
        "display_title": "FHE Handles & Lifecycle",
    },
    "fhe-anti-patterns": {
        "primary_asset": "contracts/concepts/FHEAntiPatterns.sol",
        "test_asset": "test/concepts/FHEAntiPatterns.ts",
        "description": (
            "Common FHE mistakes and their correct alternatives. Covers branching, "
            "permissions, require/revert, re-encryption, loops and noise."
        ),
        "category": "Concepts",
        "display_title": "FHE Anti-Patterns",
    },
    "erc7984": {
        "primary_asset": "contracts/openzeppelin/ERC7984.sol",
        "test_asset": "test/openzeppelin/ERC7984.ts",
        "description": (
            "Confidential token (ERC7984) with mint/burn functionality using "
            "OpenZeppelin's library powered by ZAMA's FHEVM."
        ),
        "category": "OpenZeppelin",
        "display_title": "ERC7984 Tutorial",
        "extra_dependencies": _OPENZEPPELIN_NPM,
    },
    "erc7984-erc20-wrapper": {
        "primary_asset": "contracts/openzeppelin/ERC7984ERC20Wrapper.sol",
        "test_asset": "test/openzeppelin/ERC7984ERC20Wrapper.ts",
        "description": (
            "Wrapping standard ERC20 tokens into confidential ERC7984 tokens to "
            "enable privacy for any existing ERC20."
        ),
        "category": "OpenZeppelin",
        "display_title": "ERC7984 to ERC20 Wrapper",
        "auxiliary_assets": [_ERC20_MOCK],
        "extra_dependencies": _OPENZEPPELIN_NPM,
    },
    "swap-erc7984-to-erc20": {
        "primary_asset": "contracts/openzeppelin/SwapERC7984ToERC20.sol",
        "test_asset": "test/openzeppelin/SwapERC7984ToERC20.ts",
        "description": (
            "Swapping between confidential ERC7984 and ERC20 tokens using the v0.9 "
            "decryption API (makePubliclyDecryptable + checkSignatures)."
        ),
        "category": "OpenZeppelin",
        "display_title": "Swap ERC7984 to ERC20",
        "auxiliary_assets": [_ERC20_MOCK],
        "extra_dependencies": _OPENZEPPELIN_NPM,
    },
    "swap-erc7984-to-erc7984": {
        "primary_asset": "contracts/openzeppelin/SwapERC7984ToERC7984.sol",
        "test_asset": "test/openzeppelin/SwapERC7984ToERC7984.ts",
        "description": (
            "Fully confidential atomic swap between two ERC7984 tokens where both "
            "input and output amounts remain encrypted."
        ),
        "category": "OpenZeppelin",
        "display_title": "Swap ERC7984 to ERC7984",
        "extra_dependencies": _OPENZEPPELIN_NPM,
    },
    "vesting-wallet": {
        "primary_asset": "contracts/openzeppelin/VestingWallet.sol",
        "test_asset": "test/openzeppelin/VestingWallet.ts",
        "description": (
            "Linear vesting wallet for ERC7984 tokens where vested amounts remain "
            "encrypted for privacy."
        ),
        "category": "OpenZeppelin",
        "display_title": "Vesting Wallet",
        "extra_dependencies": _OPENZEPPELIN_NPM,
    },
    "blind-auction": {
        "primary_asset": "contracts/advanced/BlindAuction.sol",
        "test_asset": "test/advanced/BlindAuction.ts",
        "description": (
            "Encrypted blind auction where bids remain confidential. Uses FHE.gt() "
            "and FHE.select() to find the winner without revealing losing bids."
        ),
        "category": "Advanced",
        "display_title": "Blind Auction",
    },
    "hidden-voting": {
        "primary_asset": "contracts/advanced/HiddenVoting.sol",
        "test_asset": "test/advanced/HiddenVoting.ts",
        "description": (
            "Encrypted voting mechanism with homomorphic tallying. Individual votes "
            "remain private while final counts are revealed."
        ),
        "category": "Advanced",
        "display_title": "Hidden Voting",
    },
}


CATEGORIES: dict[str, dict[str, Any]] = {
    "basic": {
        "name": "Basic FHEVM Examples",
        "description": (
            "Fundamental FHEVM operations including encryption, decryption, "
            "and basic FHE operations"
        ),
        "entries": [
            "fhe-counter",
            "encrypt-single-value",
            "encrypt-multiple-values",
            "user-decrypt-single-value",
            "user-decrypt-multiple-values",
            "public-decrypt-single-value",
            "public-decrypt-multiple-values",
            "fhe-add",
            "fhe-if-then-else",
        ],
    },
    "concepts": {
        "name": "Critical Concepts",
        "description": "Access control, input proofs, handles, and anti-patterns",
        "entries": [
            "fhe-access-control",
            "fhe-input-proof",
            "fhe-handles",
            "fhe-anti-patterns",
        ],
    },
    "operations": {
        "name": "FHE Operations",
        "description": "Arithmetic, comparison, and conditional operations",
        "entries": ["fhe-add", "fhe-arithmetic", "fhe-comparison", "fhe-if-then-else"],
    },
    "openzeppelin": {
        "name": "OpenZeppelin Confidential Contracts",
        "description": "ERC7984 confidential token standard, wrappers, swaps, and vesting",
        "entries": [
            "erc7984",
            "erc7984-erc20-wrapper",
            "swap-erc7984-to-erc20",
            "swap-erc7984-to-erc7984",
            "vesting-wallet",
        ],
    },
    "advanced": {
        "name": "Advanced Examples",
        "description": "Complex FHE applications: blind auctions, encrypted voting systems",
        "entries": ["blind-auction", "hidden-voting"],
    },
}


CATALOG: dict[str, Any] = {"examples": EXAMPLES, "categories": CATEGORIES}
