"""
Mint Authorization Engine - decides who may mint a trophy and emits the mint.

Two request shapes, one state machine:

MintByMinter (rule = ByMinter):
    1. trophy exists                            NotFound
    2. rule is ByMinter and caller is minter    RuleMismatch
    3. not expired                              Expired
    4. supply + len(owners) <= cap              SupplyExceeded
    5. serials current+1 .. current+n, supply += n
    6. one NftMint to the NFT contract

MintBySignature (rule = BySignature):
    1. trophy exists                            NotFound
    2. rule is BySignature                      RuleMismatch
    3. not expired / supply + 1 <= cap          Expired / SupplyExceeded
    4. caller has not claimed yet               AlreadyMinted
    5. signature over caller's address valid    SignatureInvalid
    6. claim recorded, supply += 1, NftMint for the caller

Checks run in exactly this order; the first failure is the reported error.
Writes only happen after every check passed, and the host discards them if
the call fails later on.
"""
import logging
from typing import List

from signature_verifier import verify
from trophy_datum_types import (
    ByMinter,
    BySignature,
    ClaimRecord,
    ClaimStatusResponse,
    ExpiresAtHeight,
    ExpiresAtTime,
    NftMint,
    NoExpiry,
    NoSupplyCap,
    SomeNftContract,
    SupplyCap,
    TrophyInfo,
)
from trophy_errors import (
    AlreadyMinted,
    BootstrapFailed,
    Expired,
    InvalidRequest,
    RuleMismatch,
    SignatureInvalid,
    SupplyExceeded,
)
from trophy_host import Api, Env, Response, Storage, WasmExecute
from trophy_registry import get_trophy, load_contract_info
from trophy_state import STATE, claim_key, encode_id

logger = logging.getLogger(__name__)


# =============================================================================
# HELPERS
# =============================================================================

def is_expired(trophy: TrophyInfo, env: Env) -> bool:
    """At or past the deadline counts as expired."""
    expiry = trophy.expiry
    if isinstance(expiry, NoExpiry):
        return False
    elif isinstance(expiry, ExpiresAtHeight):
        return env.block_height >= expiry.height
    elif isinstance(expiry, ExpiresAtTime):
        return env.block_time >= expiry.time
    else:
        raise TypeError(f"unknown expiry: {expiry!r}")


def supply_available(trophy: TrophyInfo, amount: int) -> bool:
    """Can `amount` more instances be minted without passing the cap?"""
    max_supply = trophy.max_supply
    if isinstance(max_supply, NoSupplyCap):
        return True
    elif isinstance(max_supply, SupplyCap):
        return trophy.current_supply + amount <= max_supply.limit
    else:
        raise TypeError(f"unknown max supply: {max_supply!r}")


def assert_mintable(trophy: TrophyInfo, env: Env, amount: int) -> None:
    if is_expired(trophy, env):
        raise Expired("minting time has elapsed")
    if not supply_available(trophy, amount):
        raise SupplyExceeded("max supply exceeded")


def with_supply(trophy: TrophyInfo, current_supply: int) -> TrophyInfo:
    """Copy of the trophy with a new supply; every other field unchanged."""
    return TrophyInfo(
        creator=trophy.creator,
        rule=trophy.rule,
        metadata=trophy.metadata,
        expiry=trophy.expiry,
        max_supply=trophy.max_supply,
        current_supply=current_supply,
    )


def nft_mint_msg(storage: Storage, mint: NftMint) -> WasmExecute:
    """Address the mint to the NFT contract. Fails if it was never bootstrapped."""
    nft = load_contract_info(storage).nft
    if not isinstance(nft, SomeNftContract):
        raise BootstrapFailed("nft contract address not set")
    return WasmExecute(contract_addr=nft.address.value, msg=mint.to_cbor())


def mint_response(storage: Storage, action: str, mint: NftMint) -> Response:
    return (
        Response()
        .add_message(nft_mint_msg(storage, mint))
        .add_attribute("action", action)
        .add_attribute("trophy_id", mint.trophy_id)
        .add_attribute("start_serial", mint.start_serial)
        .add_attribute("count", len(mint.owners))
    )


# =============================================================================
# MINT BY MINTER
# =============================================================================

def mint_by_minter(storage: Storage, env: Env, caller: bytes, trophy_id: int, owners: List[bytes]) -> Response:
    if len(owners) == 0:
        raise InvalidRequest("owners must not be empty")

    trophy = get_trophy(storage, trophy_id)

    rule = trophy.rule
    if isinstance(rule, ByMinter):
        if caller != rule.minter.value:
            raise RuleMismatch("caller is not minter")
    elif isinstance(rule, BySignature):
        raise RuleMismatch("minting rule is not `ByMinter`")
    else:
        raise TypeError(f"unknown mint rule: {rule!r}")

    amount = len(owners)
    assert_mintable(trophy, env, amount)

    start_serial = trophy.current_supply + 1
    STATE.trophies.save(storage, encode_id(trophy_id), with_supply(trophy, trophy.current_supply + amount))

    mint = NftMint(trophy_id=trophy_id, start_serial=start_serial, owners=list(owners))
    response = mint_response(storage, "mint_by_minter", mint)

    logger.info("Minted %d instance(s) of trophy %d starting at serial %d", amount, trophy_id, start_serial)
    return response


# =============================================================================
# MINT BY SIGNATURE
# =============================================================================

def mint_by_signature(storage: Storage, api: Api, env: Env, caller: bytes, trophy_id: int, signature: bytes) -> Response:
    trophy = get_trophy(storage, trophy_id)

    rule = trophy.rule
    if isinstance(rule, BySignature):
        public_key = rule.public_key.value
    elif isinstance(rule, ByMinter):
        raise RuleMismatch("minting rule is not `BySignature`")
    else:
        raise TypeError(f"unknown mint rule: {rule!r}")

    assert_mintable(trophy, env, 1)

    key = claim_key(trophy_id, caller)
    if STATE.claims.has(storage, key):
        raise AlreadyMinted("caller has already minted this trophy")

    # The signed message is always the caller's own address
    if not verify(api, public_key, caller, signature):
        raise SignatureInvalid("signature verification failed")

    serial = trophy.current_supply + 1
    STATE.claims.save(storage, key, ClaimRecord(serial=serial))
    STATE.trophies.save(storage, encode_id(trophy_id), with_supply(trophy, serial))

    mint = NftMint(trophy_id=trophy_id, start_serial=serial, owners=[caller])
    response = mint_response(storage, "mint_by_signature", mint)

    logger.info("Trophy %d claimed by %s with serial %d", trophy_id, caller.decode(errors="replace"), serial)
    return response


# =============================================================================
# CLAIM STATUS
# =============================================================================

def claim_status(storage: Storage, trophy_id: int, claimant: bytes) -> ClaimStatusResponse:
    get_trophy(storage, trophy_id)
    record = STATE.claims.may_load(storage, claim_key(trophy_id, claimant))
    if record is None:
        return ClaimStatusResponse(claimed=0, serial=0)
    return ClaimStatusResponse(claimed=1, serial=record.serial)
