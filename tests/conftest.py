import pytest
from coincurve import PrivateKey

from helpers import mock_reply
from trophy_host import mock_dependencies, mock_env
from trophy_hub import reply


@pytest.fixture
def deps():
    """Hub whose NFT contract replied with address `nft`."""
    deps = mock_dependencies()
    reply(deps, mock_env(), mock_reply())
    return deps


@pytest.fixture
def trophy_key():
    return PrivateKey()


@pytest.fixture
def other_key():
    return PrivateKey()
