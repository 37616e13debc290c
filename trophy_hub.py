"""
Trophy Hub - issues trophies and authorizes minting of their NFTs.

Entry points:
- instantiate: Initialize hub state and deploy the trophy NFT contract
- reply: Record the NFT contract address (one-shot)
- execute: CreateTrophy / EditTrophy / MintByMinter / MintBySignature
- query: ContractInfo / TrophyInfo / ClaimStatus / Trophies (CBOR encoded)
- migrate: Upgrade legacy trophy records to the current schema

All state-changing entry points are atomic: a raised error discards every
write made during the call.
"""
from legacy_migration import migrate_legacy_trophies
from mint_authorization import claim_status, mint_by_minter, mint_by_signature
from nft_bootstrap import handle_reply, init_hub
from trophy_datum_types import (
    CreateTrophy,
    EditTrophy,
    EmptyMsg,
    InstantiateMsg,
    MintByMinter,
    MintBySignature,
    QueryClaimStatus,
    QueryContractInfo,
    QueryTrophies,
    QueryTrophyInfo,
    TrophiesResponse,
    TrophyHubCommand,
    TrophyHubQuery,
)
from trophy_host import Deps, Env, MessageInfo, Reply, Response, entry_point
from trophy_registry import create_trophy, edit_trophy, get_trophy, list_trophies, load_contract_info


# =============================================================================
# INSTANTIATE / REPLY
# =============================================================================

@entry_point
def instantiate(deps: Deps, env: Env, info: MessageInfo, msg: InstantiateMsg) -> Response:
    return init_hub(deps.storage, info.sender, msg.nft_code_id)


@entry_point
def reply(deps: Deps, env: Env, msg: Reply) -> Response:
    return handle_reply(deps.storage, msg)


# =============================================================================
# EXECUTE
# =============================================================================

@entry_point
def execute(deps: Deps, env: Env, info: MessageInfo, msg: TrophyHubCommand) -> Response:
    """
    Trophy hub commands.

    CREATE: Anyone may create a trophy and becomes its creator.
    EDIT: Creator replaces the metadata.
    MINT BY MINTER: The rule's minter mints to a list of owners.
    MINT BY SIGNATURE: A claimant mints once with a signature of their address.
    """
    # ==========================================================================
    # CREATE TROPHY
    # ==========================================================================
    if isinstance(msg, CreateTrophy):
        trophy_id = create_trophy(deps.storage, info.sender, msg.rule, msg.metadata, msg.expiry, msg.max_supply)
        return (
            Response()
            .add_attribute("action", "create_trophy")
            .add_attribute("trophy_id", trophy_id)
        )

    # ==========================================================================
    # EDIT TROPHY
    # ==========================================================================
    elif isinstance(msg, EditTrophy):
        edit_trophy(deps.storage, info.sender, msg.trophy_id, msg.metadata)
        return (
            Response()
            .add_attribute("action", "edit_trophy")
            .add_attribute("trophy_id", msg.trophy_id)
        )

    # ==========================================================================
    # MINT BY MINTER
    # ==========================================================================
    elif isinstance(msg, MintByMinter):
        return mint_by_minter(deps.storage, env, info.sender, msg.trophy_id, msg.owners)

    # ==========================================================================
    # MINT BY SIGNATURE
    # ==========================================================================
    elif isinstance(msg, MintBySignature):
        return mint_by_signature(deps.storage, deps.api, env, info.sender, msg.trophy_id, msg.signature.value)

    else:
        raise TypeError(f"unknown command: {msg!r}")


# =============================================================================
# QUERY
# =============================================================================

def query(deps: Deps, env: Env, msg: TrophyHubQuery) -> bytes:
    """Read-only. Answers are CBOR encoded datums."""
    if isinstance(msg, QueryContractInfo):
        return load_contract_info(deps.storage).to_cbor()

    elif isinstance(msg, QueryTrophyInfo):
        return get_trophy(deps.storage, msg.trophy_id).to_cbor()

    elif isinstance(msg, QueryClaimStatus):
        return claim_status(deps.storage, msg.trophy_id, msg.claimant.value).to_cbor()

    elif isinstance(msg, QueryTrophies):
        entries = list_trophies(deps.storage, msg.start_after, msg.limit)
        return TrophiesResponse(trophies=entries).to_cbor()

    else:
        raise TypeError(f"unknown query: {msg!r}")


# =============================================================================
# MIGRATE
# =============================================================================

@entry_point
def migrate(deps: Deps, env: Env, msg: EmptyMsg) -> Response:
    migrated = migrate_legacy_trophies(deps.storage)
    return (
        Response()
        .add_attribute("action", "migrate")
        .add_attribute("migrated", migrated)
    )
