"""
NFT Bootstrap - one-shot instantiation of the trophy NFT contract.

At instantiation the hub sends exactly one sub-message deploying its NFT
contract (admin = instantiator, empty init payload) and asks for a reply on
success under a fixed id. The reply carries the deployed address in the
`contract_address` attribute of the `instantiate_contract` event.

One-shot: the address goes from unset to set exactly once. A second reply,
a reply under another id, or a reply without the attribute is rejected.
"""
import logging

from trophy_config import (
    CONTRACT_NAME,
    CONTRACT_VERSION,
    INSTANTIATE_NFT_REPLY_ID,
    NFT_CONTRACT_LABEL,
    REPLY_ADDRESS_ATTRIBUTE,
    REPLY_EVENT_TYPE,
)
from trophy_datum_types import (
    ContractInfo,
    ContractVersion,
    EmptyMsg,
    NoNftContract,
    SomeNftContract,
)
from trophy_errors import BootstrapFailed
from trophy_host import Reply, Response, Storage, SubMsg, WasmInstantiate
from trophy_registry import load_contract_info
from trophy_state import STATE

logger = logging.getLogger(__name__)


# =============================================================================
# INSTANTIATE
# =============================================================================

def instantiate_nft_msg(admin: bytes, nft_code_id: int) -> SubMsg:
    """Sub-message deploying the NFT contract, replied to on success."""
    return SubMsg.reply_on_success(
        WasmInstantiate(
            admin=admin,
            code_id=nft_code_id,
            msg=EmptyMsg().to_cbor(),
            label=NFT_CONTRACT_LABEL,
        ),
        INSTANTIATE_NFT_REPLY_ID,
    )


def init_hub(storage: Storage, sender: bytes, nft_code_id: int) -> Response:
    STATE.contract_info.save(storage, ContractInfo(nft=NoNftContract(), trophy_count=0))
    STATE.contract_version.save(storage, ContractVersion(contract=CONTRACT_NAME, version=CONTRACT_VERSION))

    logger.info("Instantiating NFT contract from code %d", nft_code_id)
    return (
        Response()
        .add_submessage(instantiate_nft_msg(sender, nft_code_id))
        .add_attribute("action", "instantiate")
        .add_attribute("nft_code_id", nft_code_id)
    )


# =============================================================================
# REPLY
# =============================================================================

def parse_nft_address(reply: Reply) -> bytes:
    """Deployed address from the reply events."""
    if not reply.result.is_ok:
        raise BootstrapFailed(f"nft contract instantiation failed: {reply.result.error}")
    for event in reply.result.events:
        if event.type == REPLY_EVENT_TYPE:
            address = event.attribute(REPLY_ADDRESS_ATTRIBUTE)
            if address:
                return address.encode("utf-8")
    raise BootstrapFailed("cannot find `contract_address` attribute")


def record_nft_contract(storage: Storage, address: bytes) -> ContractInfo:
    """The single unset -> set transition of the NFT address."""
    info = load_contract_info(storage)
    if isinstance(info.nft, SomeNftContract):
        raise BootstrapFailed("nft contract address already set")
    updated = ContractInfo(nft=SomeNftContract(address=address), trophy_count=info.trophy_count)
    STATE.contract_info.save(storage, updated)
    return updated


def handle_reply(storage: Storage, reply: Reply) -> Response:
    if reply.id != INSTANTIATE_NFT_REPLY_ID:
        raise BootstrapFailed(f"unknown reply id: {reply.id}")

    address = parse_nft_address(reply)
    record_nft_contract(storage, address)

    logger.info("NFT contract deployed at %s", address.decode())
    return (
        Response()
        .add_attribute("action", "set_nft_contract")
        .add_attribute("nft", address.decode())
    )
