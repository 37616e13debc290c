"""Shared builders for the trophy hub tests."""
from base64 import b64decode, b64encode

from coincurve import PrivateKey

from trophy_datum_types import (
    ByMinter,
    CreateTrophy,
    NoExpiry,
    NoSupplyCap,
    TrophyInfo,
    TrophyMetadata,
    QueryTrophyInfo,
)
from trophy_host import SECP256K1_ORDER, Event, Reply, SubMsgResult, mock_env, mock_info
from trophy_hub import execute, query


def mock_metadata(name: bytes = b"Test Trophy") -> TrophyMetadata:
    return TrophyMetadata(
        metadata={
            b"name": name,
            b"image": b"ipfs://image",
            b"description": b"This is a test",
            b"animation_url": b"ipfs://video",
        },
        attributes={},
    )


def mock_reply(reply_id: int = 0, address: str = "nft") -> Reply:
    event = Event("instantiate_contract").add_attribute("contract_address", address)
    return Reply(id=reply_id, result=SubMsgResult(events=[event]))


def create_msg(rule=None, expiry=None, max_supply=None) -> CreateTrophy:
    return CreateTrophy(
        rule=rule if rule is not None else ByMinter(minter=b"minter"),
        metadata=mock_metadata(),
        expiry=expiry if expiry is not None else NoExpiry(),
        max_supply=max_supply if max_supply is not None else NoSupplyCap(),
    )


def create_trophy(deps, creator: str = "creator", **kwargs) -> int:
    res = execute(deps, mock_env(), mock_info(creator), create_msg(**kwargs))
    return int(res.attribute("trophy_id"))


def query_trophy(deps, trophy_id: int) -> TrophyInfo:
    return TrophyInfo.from_cbor(query(deps, mock_env(), QueryTrophyInfo(trophy_id=trophy_id)))


def public_key_b64(key: PrivateKey) -> bytes:
    return b64encode(key.public_key.format(compressed=True))


def sign_claim(key: PrivateKey, claimant: str) -> bytes:
    """Compact r||s signature over sha256(claimant), base64."""
    signature = key.sign_recoverable(claimant.encode("utf-8"))
    return b64encode(signature[:64])


def high_s(signature_b64: bytes) -> bytes:
    """The (r, n - s) twin of a base64 compact signature, also base64."""
    signature = b64decode(signature_b64)
    s = int.from_bytes(signature[32:], "big")
    return b64encode(signature[:32] + (SECP256K1_ORDER - s).to_bytes(32, "big"))
