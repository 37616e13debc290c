"""
Trophy Hub Configuration - TRUE CONSTANTS ONLY

This file contains ONLY values that are fixed by the protocol and never change:
- Contract identity (name/version written at instantiation and migration)
- Bootstrap reply wiring for the trophy NFT contract
- Storage namespaces
- Metadata presence rules (CIP-68 style)

Deployment-specific values (the NFT contract code id) are NOT here.
They arrive in the InstantiateMsg and are read at runtime.
"""

# =============================================================================
# CONTRACT IDENTITY
# =============================================================================

CONTRACT_NAME: bytes = b"trophy-hub"
CONTRACT_VERSION: bytes = b"0.2.0"


# =============================================================================
# NFT CONTRACT BOOTSTRAP
# =============================================================================
# The hub instantiates its NFT contract once, as a sub-message, and expects
# exactly one reply carrying the deployed address.

INSTANTIATE_NFT_REPLY_ID: int = 0
NFT_CONTRACT_LABEL: str = "trophy-nft"

REPLY_EVENT_TYPE: str = "instantiate_contract"
REPLY_ADDRESS_ATTRIBUTE: str = "contract_address"


# =============================================================================
# STORAGE NAMESPACES
# =============================================================================
# The legacy namespace is only read (and emptied) by migration.

NAMESPACE_CONTRACT_INFO: bytes = b"contract_info"
NAMESPACE_CONTRACT_VERSION: bytes = b"contract_version"
NAMESPACE_TROPHIES: bytes = b"trophies"
NAMESPACE_TROPHIES_LEGACY: bytes = b"trophies_legacy"
NAMESPACE_CLAIMS: bytes = b"claims"


# =============================================================================
# METADATA PRESENCE RULES
# =============================================================================
# CIP-68 NFTs (label 222) require a name and an image in the metadata map.
# Reference: https://cips.cardano.org/cip/CIP-0068/

REQUIRED_METADATA_KEYS = (b"name", b"image")


# =============================================================================
# QUERY PAGINATION
# =============================================================================

DEFAULT_QUERY_LIMIT: int = 10
MAX_QUERY_LIMIT: int = 30
