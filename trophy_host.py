"""
Trophy Hub Host - the execution environment the hub's entry points run in.

The hub itself only sees:
- Deps: byte-keyed Storage + Api (crypto primitives)
- Env: block height, block time and own address
- MessageInfo: who sent the message
and answers with a Response carrying messages for other contracts.

Calls are sequential. Every state-changing entry point is wrapped by
@entry_point, which runs it inside a storage transaction: if the call raises,
every write it made is discarded and the error is re-raised to the caller.

Mock helpers at the bottom build an environment for tests and local runs.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from functools import wraps
from typing import Dict, Iterator, List, Optional, Tuple, Union

from coincurve import PublicKey
from coincurve.ecdsa import cdata_to_der, deserialize_compact

logger = logging.getLogger(__name__)

SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_ORDER = SECP256K1_ORDER // 2


# =============================================================================
# STORAGE
# =============================================================================

class Storage:
    """In-memory key-value store with all-or-nothing transactions."""

    def __init__(self) -> None:
        self._data: Dict[bytes, bytes] = {}

    def get(self, key: bytes) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        self._data[key] = value

    def remove(self, key: bytes) -> None:
        self._data.pop(key, None)

    def range(self, prefix: bytes) -> Iterator[Tuple[bytes, bytes]]:
        """
        Iterate (key, value) pairs under prefix in ascending key order.
        Keys are collected up front, so removing while iterating is safe.
        """
        keys = sorted(k for k in self._data if k.startswith(prefix))
        for key in keys:
            value = self._data.get(key)
            if value is not None:
                yield key, value

    def dump(self) -> Dict[bytes, bytes]:
        """Copy of the full contents."""
        return dict(self._data)

    @contextmanager
    def transaction(self):
        saved = dict(self._data)
        try:
            yield self
        except Exception:
            self._data = saved
            logger.debug("Transaction rolled back (%d keys restored)", len(saved))
            raise


# =============================================================================
# API (crypto primitives)
# =============================================================================

class Api:
    """Primitives the host exposes to contracts."""

    def secp256k1_verify(self, message_hash: bytes, signature: bytes, public_key: bytes) -> bool:
        """
        Verify a compact (r||s) secp256k1 ECDSA signature over a 32-byte digest.
        High-S signatures are normalized to low-S first, so (r, s) and (r, n - s)
        verify alike. Malformed input is a failed verification, never an exception.
        """
        if len(message_hash) != 32:
            return False
        if len(signature) != 64:
            return False
        if len(public_key) != 33 and len(public_key) != 65:
            return False
        try:
            der = cdata_to_der(deserialize_compact(normalize_s(signature)))
            return PublicKey(public_key).verify(der, message_hash, hasher=None)
        except (ValueError, TypeError):
            return False


def normalize_s(signature: bytes) -> bytes:
    """Compact r||s with s folded into the lower half of the curve order."""
    s = int.from_bytes(signature[32:], "big")
    if SECP256K1_HALF_ORDER < s < SECP256K1_ORDER:
        return signature[:32] + (SECP256K1_ORDER - s).to_bytes(32, "big")
    return signature


@dataclass
class Deps:
    storage: Storage
    api: Api


# =============================================================================
# ENVIRONMENT
# =============================================================================

@dataclass
class Env:
    block_height: int
    block_time: int             # POSIX ms
    contract_address: bytes


@dataclass
class MessageInfo:
    sender: bytes


# =============================================================================
# MESSAGES TO OTHER CONTRACTS
# =============================================================================

REPLY_NEVER = "never"
REPLY_ON_SUCCESS = "success"


@dataclass
class WasmExecute:
    """Execute `msg` (encoded) on an already deployed contract."""
    contract_addr: bytes
    msg: bytes
    funds: List[Tuple[str, int]] = field(default_factory=list)


@dataclass
class WasmInstantiate:
    """Deploy a new contract from stored code."""
    admin: bytes
    code_id: int
    msg: bytes
    label: str
    funds: List[Tuple[str, int]] = field(default_factory=list)


WasmMsg = Union[WasmExecute, WasmInstantiate]


@dataclass
class SubMsg:
    msg: WasmMsg
    id: int = 0
    reply_on: str = REPLY_NEVER

    @classmethod
    def new(cls, msg: WasmMsg) -> "SubMsg":
        """Fire-and-forget message, no reply."""
        return cls(msg=msg)

    @classmethod
    def reply_on_success(cls, msg: WasmMsg, reply_id: int) -> "SubMsg":
        return cls(msg=msg, id=reply_id, reply_on=REPLY_ON_SUCCESS)


@dataclass
class Event:
    type: str
    attributes: List[Tuple[str, str]] = field(default_factory=list)

    def add_attribute(self, key: str, value: str) -> "Event":
        self.attributes.append((key, value))
        return self

    def attribute(self, key: str) -> Optional[str]:
        for k, v in self.attributes:
            if k == key:
                return v
        return None


@dataclass
class SubMsgResult:
    """Outcome of a sub-message. `error` is None on success."""
    events: List[Event] = field(default_factory=list)
    data: Optional[bytes] = None
    error: Optional[str] = None

    @property
    def is_ok(self) -> bool:
        return self.error is None


@dataclass
class Reply:
    id: int
    result: SubMsgResult


@dataclass
class Response:
    messages: List[SubMsg] = field(default_factory=list)
    attributes: List[Tuple[str, str]] = field(default_factory=list)

    def add_message(self, msg: WasmMsg) -> "Response":
        self.messages.append(SubMsg.new(msg))
        return self

    def add_submessage(self, sub_msg: SubMsg) -> "Response":
        self.messages.append(sub_msg)
        return self

    def add_attribute(self, key: str, value) -> "Response":
        self.attributes.append((key, str(value)))
        return self

    def attribute(self, key: str) -> Optional[str]:
        for k, v in self.attributes:
            if k == key:
                return v
        return None


# =============================================================================
# ENTRY POINTS
# =============================================================================

def entry_point(fn):
    """Run a state-changing entry point atomically: all writes or none."""
    @wraps(fn)
    def wrapper(deps: Deps, *args, **kwargs):
        try:
            with deps.storage.transaction():
                return fn(deps, *args, **kwargs)
        except Exception as err:
            logger.warning("%s failed, state rolled back: %s", fn.__name__, err)
            raise
    return wrapper


# =============================================================================
# MOCKS
# =============================================================================

MOCK_CONTRACT_ADDR: bytes = b"cosmos2contract"
MOCK_BLOCK_HEIGHT: int = 12345
MOCK_BLOCK_TIME: int = 1571797419879     # POSIX ms


def mock_dependencies() -> Deps:
    return Deps(storage=Storage(), api=Api())


def mock_env(block_height: int = MOCK_BLOCK_HEIGHT, block_time: int = MOCK_BLOCK_TIME) -> Env:
    return Env(block_height=block_height, block_time=block_time, contract_address=MOCK_CONTRACT_ADDR)


def mock_info(sender: str) -> MessageInfo:
    """Sender given as its canonical address string."""
    return MessageInfo(sender=sender.encode("utf-8"))
