import pytest

from helpers import create_trophy, mock_reply, query_trophy
from trophy_datum_types import (
    ContractInfo,
    ContractVersion,
    EmptyMsg,
    InstantiateMsg,
    MintByMinter,
    NoNftContract,
    QueryContractInfo,
    SomeNftContract,
)
from trophy_errors import BootstrapFailed
from trophy_host import (
    Event,
    Reply,
    SubMsg,
    SubMsgResult,
    WasmInstantiate,
    mock_dependencies,
    mock_env,
    mock_info,
)
from trophy_hub import execute, instantiate, query, reply
from trophy_state import STATE


def query_contract_info(deps) -> ContractInfo:
    return ContractInfo.from_cbor(query(deps, mock_env(), QueryContractInfo()))


def test_proper_instantiation():
    deps = mock_dependencies()
    res = instantiate(deps, mock_env(), mock_info("deployer"), InstantiateMsg(nft_code_id=123))

    expected = SubMsg.reply_on_success(
        WasmInstantiate(
            admin=b"deployer",
            code_id=123,
            msg=EmptyMsg().to_cbor(),
            label="trophy-nft",
        ),
        0,
    )
    assert res.messages == [expected]
    assert query_contract_info(deps) == ContractInfo(nft=NoNftContract(), trophy_count=0)
    assert STATE.contract_version.may_load(deps.storage) == ContractVersion(contract=b"trophy-hub", version=b"0.2.0")


def test_proper_init_hook():
    deps = mock_dependencies()
    reply(deps, mock_env(), mock_reply())

    assert query_contract_info(deps) == ContractInfo(nft=SomeNftContract(address=b"nft"), trophy_count=0)


def test_reply_after_instantiate():
    deps = mock_dependencies()
    instantiate(deps, mock_env(), mock_info("deployer"), InstantiateMsg(nft_code_id=123))
    res = reply(deps, mock_env(), mock_reply(address="terra1nft"))

    assert res.attribute("nft") == "terra1nft"
    assert query_contract_info(deps).nft == SomeNftContract(address=b"terra1nft")


def test_unknown_reply_id_rejected():
    deps = mock_dependencies()
    with pytest.raises(BootstrapFailed, match="unknown reply id"):
        reply(deps, mock_env(), mock_reply(reply_id=7))

    assert query_contract_info(deps).nft == NoNftContract()


def test_reply_without_address_attribute_rejected():
    deps = mock_dependencies()
    event = Event("instantiate_contract").add_attribute("code_id", "123")
    with pytest.raises(BootstrapFailed, match="contract_address"):
        reply(deps, mock_env(), Reply(id=0, result=SubMsgResult(events=[event])))


def test_reply_with_address_in_other_event_rejected():
    deps = mock_dependencies()
    event = Event("wasm").add_attribute("contract_address", "nft")
    with pytest.raises(BootstrapFailed):
        reply(deps, mock_env(), Reply(id=0, result=SubMsgResult(events=[event])))


def test_failed_instantiation_reply_rejected():
    deps = mock_dependencies()
    with pytest.raises(BootstrapFailed, match="out of gas"):
        reply(deps, mock_env(), Reply(id=0, result=SubMsgResult(error="out of gas")))


def test_second_reply_does_not_overwrite(deps):
    with pytest.raises(BootstrapFailed, match="already set"):
        reply(deps, mock_env(), mock_reply(address="impostor"))

    assert query_contract_info(deps).nft == SomeNftContract(address=b"nft")


def test_mint_without_nft_contract_rolls_back():
    deps = mock_dependencies()
    instantiate(deps, mock_env(), mock_info("deployer"), InstantiateMsg(nft_code_id=123))
    trophy_id = create_trophy(deps)

    before = deps.storage.dump()
    msg = MintByMinter(trophy_id=trophy_id, owners=[b"alice"])
    with pytest.raises(BootstrapFailed, match="not set"):
        execute(deps, mock_env(), mock_info("minter"), msg)

    assert deps.storage.dump() == before
    assert query_trophy(deps, trophy_id).current_supply == 0
