"""
Trophy Registry - creates trophies and edits their metadata.

Trophy ids are dense and 1-based: the n-th trophy ever created gets id n.
Only `metadata` is editable after creation, and only by the creator.

Operations:
- create_trophy: Allocate the next id and store a fresh TrophyInfo
- edit_trophy: Replace metadata (creator only)
- get_trophy: Load a trophy or fail with NotFound
- list_trophies: Page through trophies in id order
"""
import logging
from typing import List

from trophy_config import DEFAULT_QUERY_LIMIT, MAX_QUERY_LIMIT, REQUIRED_METADATA_KEYS
from trophy_datum_types import (
    ContractInfo,
    Expiry,
    MaxSupply,
    MintRule,
    NoNftContract,
    SupplyCap,
    TrophyEntry,
    TrophyInfo,
    TrophyMetadata,
)
from trophy_errors import InvalidRequest, NotFound, Unauthorized
from trophy_host import Storage
from trophy_state import STATE, decode_id, encode_id

logger = logging.getLogger(__name__)


# =============================================================================
# HELPERS
# =============================================================================

def load_contract_info(storage: Storage) -> ContractInfo:
    """Contract info, or the pre-bootstrap default if nothing was written yet."""
    info = STATE.contract_info.may_load(storage)
    if info is None:
        return ContractInfo(nft=NoNftContract(), trophy_count=0)
    return info


def validate_metadata(metadata: TrophyMetadata) -> None:
    """Presence rules only: every required key must map to a non-empty value."""
    for key in REQUIRED_METADATA_KEYS:
        if not metadata.metadata.get(key):
            raise InvalidRequest(f"metadata is missing `{key.decode()}`")


def validate_max_supply(max_supply: MaxSupply) -> None:
    if isinstance(max_supply, SupplyCap) and max_supply.limit <= 0:
        raise InvalidRequest("max supply must be positive")


# =============================================================================
# OPERATIONS
# =============================================================================

def create_trophy(
    storage: Storage,
    creator: bytes,
    rule: MintRule,
    metadata: TrophyMetadata,
    expiry: Expiry,
    max_supply: MaxSupply,
) -> int:
    """Store a new trophy with zero supply. Returns its id."""
    validate_metadata(metadata)
    validate_max_supply(max_supply)

    info = load_contract_info(storage)
    trophy_id = info.trophy_count + 1

    trophy = TrophyInfo(
        creator=creator,
        rule=rule,
        metadata=metadata,
        expiry=expiry,
        max_supply=max_supply,
        current_supply=0,
    )
    STATE.trophies.save(storage, encode_id(trophy_id), trophy)
    STATE.contract_info.save(storage, ContractInfo(nft=info.nft, trophy_count=trophy_id))

    logger.info("Created trophy %d (creator=%s, rule=%s)", trophy_id, creator.decode(errors="replace"), type(rule).__name__)
    return trophy_id


def get_trophy(storage: Storage, trophy_id: int) -> TrophyInfo:
    trophy = STATE.trophies.may_load(storage, encode_id(trophy_id))
    if trophy is None:
        raise NotFound(f"trophy {trophy_id} not found")
    return trophy


def edit_trophy(storage: Storage, caller: bytes, trophy_id: int, metadata: TrophyMetadata) -> TrophyInfo:
    """Replace the metadata of a trophy. Every other field is carried over as is."""
    trophy = get_trophy(storage, trophy_id)
    if caller != trophy.creator.value:
        raise Unauthorized("caller is not creator")
    validate_metadata(metadata)

    updated = TrophyInfo(
        creator=trophy.creator,
        rule=trophy.rule,
        metadata=metadata,
        expiry=trophy.expiry,
        max_supply=trophy.max_supply,
        current_supply=trophy.current_supply,
    )
    STATE.trophies.save(storage, encode_id(trophy_id), updated)

    logger.info("Edited metadata of trophy %d", trophy_id)
    return updated


def list_trophies(storage: Storage, start_after: int, limit: int) -> List[TrophyEntry]:
    """Trophies with id > start_after, ascending. limit 0 = default, capped at the max."""
    if limit <= 0:
        limit = DEFAULT_QUERY_LIMIT
    limit = min(limit, MAX_QUERY_LIMIT)

    start = encode_id(start_after) if start_after > 0 else None
    entries = []
    for key, trophy in STATE.trophies.range(storage, start_after=start):
        if len(entries) >= limit:
            break
        entries.append(TrophyEntry(trophy_id=decode_id(key), info=trophy))
    return entries
