"""
Legacy Migration - upgrades trophies written before mint rules existed.

Legacy schema:   LegacyTrophyInfo(creator, metadata, instance_count)
Current schema:  TrophyInfo(creator, rule, metadata, expiry, max_supply, current_supply)

Upgrade per id:
- rule = ByMinter(creator)   (legacy trophies were minted by their creator)
- expiry = NoExpiry, max_supply = NoSupplyCap
- current_supply = instance_count

The legacy record is removed once handled, and an id that already holds a
current record is never overwritten. Running the migration again is a no-op.
"""
import logging

from trophy_config import CONTRACT_NAME, CONTRACT_VERSION
from trophy_datum_types import (
    ByMinter,
    ContractInfo,
    ContractVersion,
    LegacyTrophyInfo,
    NoExpiry,
    NoNftContract,
    NoSupplyCap,
    TrophyInfo,
)
from trophy_host import Storage
from trophy_state import STATE, decode_id

logger = logging.getLogger(__name__)


def upgrade_trophy(legacy: LegacyTrophyInfo) -> TrophyInfo:
    return TrophyInfo(
        creator=legacy.creator,
        rule=ByMinter(minter=legacy.creator),
        metadata=legacy.metadata,
        expiry=NoExpiry(),
        max_supply=NoSupplyCap(),
        current_supply=legacy.instance_count,
    )


def migrate_legacy_trophies(storage: Storage) -> int:
    """
    Move every legacy trophy to the current schema. Returns how many records
    were written.

    trophy_count is only touched when ContractInfo is missing altogether; it is
    then set to the highest legacy id, which for dense ids is the record count.
    """
    migrated = 0
    highest_id = 0
    for key, legacy in STATE.trophies_legacy.range(storage):
        trophy_id = decode_id(key)
        highest_id = max(highest_id, trophy_id)

        if STATE.trophies.has(storage, key):
            logger.debug("Trophy %d already in current schema, dropping legacy record", trophy_id)
        else:
            STATE.trophies.save(storage, key, upgrade_trophy(legacy))
            migrated += 1
        STATE.trophies_legacy.remove(storage, key)

    if highest_id > 0 and STATE.contract_info.may_load(storage) is None:
        STATE.contract_info.save(storage, ContractInfo(nft=NoNftContract(), trophy_count=highest_id))
        logger.info("Derived trophy count %d from legacy records", highest_id)

    STATE.contract_version.save(storage, ContractVersion(contract=CONTRACT_NAME, version=CONTRACT_VERSION))

    logger.info("Migrated %d legacy trophies", migrated)
    return migrated
