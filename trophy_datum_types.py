"""
Trophy Hub Datum Types - Shared Data Structures for the hub and its NFT contract

This file contains the canonical definitions of every record the hub persists,
every message it accepts and every message it emits.
All hub modules MUST import these types to ensure compatibility.

CRITICAL: Changing a CONSTR_ID or the field order of a persisted datum breaks
decoding of existing storage. Schema changes go through a legacy type plus a
migration step (see legacy_migration.py).

Conventions:
- Identities are the UTF-8 bytes of the canonical address string
- Identity, key and signature fields are ByteString, so they may exceed 64 bytes
- Public keys and signatures are carried as base64 text
- Optional values are closed unions (NoX / SomeX), never None
"""

from opshin.prelude import *
from dataclasses import fields
from pycardano.serialization import ByteString


@dataclass
class LongBytesDatum(PlutusData):
    """
    Datum whose ByteString fields also accept plain bytes.
    PlutusData rejects bare bytes fields over 64 bytes; ByteString values
    encode as chunked CBOR byte strings instead.
    """

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type is ByteString and isinstance(value, (bytes, bytearray)):
                setattr(self, f.name, ByteString(bytes(value)))
        super().__post_init__()


# =============================================================================
# CONTRACT-WIDE DATUMS (singletons)
# =============================================================================

@dataclass
class NoNftContract(PlutusData):
    """The NFT contract has not replied yet."""
    CONSTR_ID = 0


@dataclass
class SomeNftContract(LongBytesDatum):
    """Address of the instantiated NFT contract. Set once, never changed."""
    CONSTR_ID = 1
    address: ByteString


NftContract = Union[NoNftContract, SomeNftContract]


@dataclass
class ContractInfo(PlutusData):
    """
    Hub-wide state, also returned verbatim by the ContractInfo query.

    Fields:
        nft: NFT contract address, unset until the bootstrap reply arrives
        trophy_count: Number of trophies created; the next id is count + 1
    """
    CONSTR_ID = 0
    nft: NftContract
    trophy_count: int


@dataclass
class ContractVersion(PlutusData):
    """Name and version of the code that last wrote the storage."""
    CONSTR_ID = 0
    contract: bytes
    version: bytes


# =============================================================================
# MINT RULES
# =============================================================================

@dataclass
class ByMinter(LongBytesDatum):
    """Only `minter` may mint, to any list of owners."""
    CONSTR_ID = 0
    minter: ByteString          # identity, need not be the creator


@dataclass
class BySignature(LongBytesDatum):
    """Anyone holding a signature of their own address by `public_key` may mint once."""
    CONSTR_ID = 1
    public_key: ByteString      # base64 SEC1 secp256k1 key


MintRule = Union[ByMinter, BySignature]


# =============================================================================
# EXPIRY / SUPPLY CAP
# =============================================================================

@dataclass
class NoExpiry(PlutusData):
    """Minting never closes."""
    CONSTR_ID = 0


@dataclass
class ExpiresAtHeight(PlutusData):
    """Minting closes once the chain reaches `height`."""
    CONSTR_ID = 1
    height: int


@dataclass
class ExpiresAtTime(PlutusData):
    """Minting closes once block time reaches `time`."""
    CONSTR_ID = 2
    time: int                   # POSIX ms


Expiry = Union[NoExpiry, ExpiresAtHeight, ExpiresAtTime]


@dataclass
class NoSupplyCap(PlutusData):
    """Unlimited instances."""
    CONSTR_ID = 0


@dataclass
class SupplyCap(PlutusData):
    """At most `limit` instances, ever."""
    CONSTR_ID = 1
    limit: int


MaxSupply = Union[NoSupplyCap, SupplyCap]


# =============================================================================
# METADATA
# =============================================================================

@dataclass
class TrophyMetadata(PlutusData):
    """
    Descriptive record attached to a trophy (CIP-68 style maps).

    Fields:
        metadata: name, image, description, animation_url, ... -> value
        attributes: trait_type -> value
    """
    CONSTR_ID = 0
    metadata: Dict[bytes, bytes]
    attributes: Dict[bytes, bytes]


# =============================================================================
# TROPHY DATUMS
# =============================================================================

@dataclass
class TrophyInfo(LongBytesDatum):
    """
    Current trophy record - one per trophy id, never deleted.

    Fields:
        creator: Identity that created the trophy (immutable)
        rule: Who may mint (immutable)
        metadata: Descriptive record (creator may edit)
        expiry: Minting deadline (immutable)
        max_supply: Instance cap (immutable)
        current_supply: Instances minted so far; serials are 1..current_supply
    """
    CONSTR_ID = 0
    creator: ByteString
    rule: MintRule
    metadata: TrophyMetadata
    expiry: Expiry
    max_supply: MaxSupply
    current_supply: int


@dataclass
class LegacyTrophyInfo(LongBytesDatum):
    """
    Trophy record written before mint rules existed.
    Only read (and removed) by migration.
    """
    CONSTR_ID = 0
    creator: ByteString
    metadata: TrophyMetadata
    instance_count: int


@dataclass
class ClaimRecord(PlutusData):
    """A BySignature claim. Presence alone means the claimant already minted."""
    CONSTR_ID = 0
    serial: int                 # serial minted for the claimant


# =============================================================================
# ENTRY POINT MESSAGES
# =============================================================================

@dataclass
class EmptyMsg(PlutusData):
    """Payload with no fields (NFT contract init, hub migration)."""
    CONSTR_ID = 0


@dataclass
class InstantiateMsg(PlutusData):
    """Deploy the hub. The NFT contract is instantiated from `nft_code_id`."""
    CONSTR_ID = 0
    nft_code_id: int


@dataclass
class CreateTrophy(PlutusData):
    """Create a new trophy; the caller becomes its creator."""
    CONSTR_ID = 0
    rule: MintRule
    metadata: TrophyMetadata
    expiry: Expiry
    max_supply: MaxSupply


@dataclass
class EditTrophy(PlutusData):
    """Replace a trophy's metadata (creator only)."""
    CONSTR_ID = 1
    trophy_id: int
    metadata: TrophyMetadata


@dataclass
class MintByMinter(PlutusData):
    """Mint one instance per owner, in order (ByMinter trophies)."""
    CONSTR_ID = 2
    trophy_id: int
    owners: List[bytes]


@dataclass
class MintBySignature(LongBytesDatum):
    """Mint one instance to the caller (BySignature trophies)."""
    CONSTR_ID = 3
    trophy_id: int
    signature: ByteString       # base64 compact r||s


TrophyHubCommand = Union[CreateTrophy, EditTrophy, MintByMinter, MintBySignature]


# =============================================================================
# QUERIES / RESPONSES
# =============================================================================

@dataclass
class QueryContractInfo(PlutusData):
    """-> ContractInfo"""
    CONSTR_ID = 0


@dataclass
class QueryTrophyInfo(PlutusData):
    """-> TrophyInfo"""
    CONSTR_ID = 1
    trophy_id: int


@dataclass
class QueryClaimStatus(LongBytesDatum):
    """-> ClaimStatusResponse"""
    CONSTR_ID = 2
    trophy_id: int
    claimant: ByteString


@dataclass
class QueryTrophies(PlutusData):
    """-> TrophiesResponse. start_after = 0 starts at the first trophy; limit = 0 uses the default."""
    CONSTR_ID = 3
    start_after: int
    limit: int


TrophyHubQuery = Union[QueryContractInfo, QueryTrophyInfo, QueryClaimStatus, QueryTrophies]


@dataclass
class ClaimStatusResponse(PlutusData):
    CONSTR_ID = 0
    claimed: int                # 1 = claimed, 0 = not claimed
    serial: int                 # 0 when not claimed


@dataclass
class TrophyEntry(PlutusData):
    CONSTR_ID = 0
    trophy_id: int
    info: TrophyInfo


@dataclass
class TrophiesResponse(PlutusData):
    CONSTR_ID = 0
    trophies: List[TrophyEntry]


# =============================================================================
# NFT CONTRACT MESSAGES (emitted by the hub)
# =============================================================================

@dataclass
class NftMint(PlutusData):
    """
    Mint len(owners) tokens of `trophy_id`.
    owners[i] receives serial start_serial + i.
    """
    CONSTR_ID = 0
    trophy_id: int
    start_serial: int
    owners: List[bytes]
