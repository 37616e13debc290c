"""
Trophy Hub State - typed access to the hub's storage.

Each datum lives under a namespaced key and is stored as its PlutusData CBOR.
Keys follow the length-prefixed namespace layout:

    len(namespace) [2 bytes, big endian] || namespace || key

Integer keys are 8-byte big endian, so a prefix range walks ids in order.
"""
from typing import Generic, Iterator, Optional, Tuple, Type, TypeVar

from trophy_config import (
    NAMESPACE_CLAIMS,
    NAMESPACE_CONTRACT_INFO,
    NAMESPACE_CONTRACT_VERSION,
    NAMESPACE_TROPHIES,
    NAMESPACE_TROPHIES_LEGACY,
)
from trophy_datum_types import (
    ClaimRecord,
    ContractInfo,
    ContractVersion,
    LegacyTrophyInfo,
    TrophyInfo,
)
from trophy_host import Storage

D = TypeVar("D")


# =============================================================================
# KEY ENCODING
# =============================================================================

def namespace_prefix(namespace: bytes) -> bytes:
    return len(namespace).to_bytes(2, "big") + namespace


def encode_id(trophy_id: int) -> bytes:
    return trophy_id.to_bytes(8, "big")


def decode_id(raw: bytes) -> int:
    return int.from_bytes(raw, "big")


def claim_key(trophy_id: int, claimant: bytes) -> bytes:
    """(trophy id, claimant); the id part is itself length-prefixed."""
    return namespace_prefix(encode_id(trophy_id)) + claimant


# =============================================================================
# ITEM / MAP
# =============================================================================

class Item(Generic[D]):
    """A single datum stored under its namespace."""

    def __init__(self, namespace: bytes, datum_type: Type[D]) -> None:
        self.key = namespace_prefix(namespace)
        self.datum_type = datum_type

    def may_load(self, storage: Storage) -> Optional[D]:
        raw = storage.get(self.key)
        if raw is None:
            return None
        return self.datum_type.from_cbor(raw)

    def save(self, storage: Storage, value: D) -> None:
        storage.set(self.key, value.to_cbor())


class Map(Generic[D]):
    """Datums keyed by raw bytes under a shared namespace."""

    def __init__(self, namespace: bytes, datum_type: Type[D]) -> None:
        self.prefix = namespace_prefix(namespace)
        self.datum_type = datum_type

    def may_load(self, storage: Storage, key: bytes) -> Optional[D]:
        raw = storage.get(self.prefix + key)
        if raw is None:
            return None
        return self.datum_type.from_cbor(raw)

    def has(self, storage: Storage, key: bytes) -> bool:
        return storage.get(self.prefix + key) is not None

    def save(self, storage: Storage, key: bytes, value: D) -> None:
        storage.set(self.prefix + key, value.to_cbor())

    def remove(self, storage: Storage, key: bytes) -> None:
        storage.remove(self.prefix + key)

    def range(self, storage: Storage, start_after: Optional[bytes] = None) -> Iterator[Tuple[bytes, D]]:
        """(key, datum) pairs in ascending key order, strictly after start_after."""
        for full_key, raw in storage.range(self.prefix):
            key = full_key[len(self.prefix):]
            if start_after is not None and key <= start_after:
                continue
            yield key, self.datum_type.from_cbor(raw)


# =============================================================================
# HUB STATE
# =============================================================================

class State:
    """All storage the hub owns."""

    def __init__(self) -> None:
        self.contract_info: Item[ContractInfo] = Item(NAMESPACE_CONTRACT_INFO, ContractInfo)
        self.contract_version: Item[ContractVersion] = Item(NAMESPACE_CONTRACT_VERSION, ContractVersion)
        self.trophies: Map[TrophyInfo] = Map(NAMESPACE_TROPHIES, TrophyInfo)
        self.trophies_legacy: Map[LegacyTrophyInfo] = Map(NAMESPACE_TROPHIES_LEGACY, LegacyTrophyInfo)
        self.claims: Map[ClaimRecord] = Map(NAMESPACE_CLAIMS, ClaimRecord)


STATE = State()
