import pytest

from trophy_datum_types import ClaimRecord
from trophy_host import Response, Storage, entry_point, mock_dependencies
from trophy_state import Map, encode_id


def test_transaction_commits():
    storage = Storage()
    with storage.transaction():
        storage.set(b"a", b"1")
    assert storage.get(b"a") == b"1"


def test_transaction_rolls_back_on_error():
    storage = Storage()
    storage.set(b"a", b"1")

    with pytest.raises(RuntimeError):
        with storage.transaction():
            storage.set(b"a", b"2")
            storage.set(b"b", b"3")
            storage.remove(b"a")
            raise RuntimeError("boom")

    assert storage.dump() == {b"a": b"1"}


def test_entry_point_is_atomic():
    @entry_point
    def write_then_fail(deps):
        deps.storage.set(b"k", b"v")
        raise ValueError("rejected")

    @entry_point
    def write(deps):
        deps.storage.set(b"k", b"v")
        return Response().add_attribute("action", "write")

    deps = mock_dependencies()
    with pytest.raises(ValueError, match="rejected"):
        write_then_fail(deps)
    assert deps.storage.get(b"k") is None

    assert write(deps).attribute("action") == "write"
    assert deps.storage.get(b"k") == b"v"


def test_map_range_in_id_order():
    storage = Storage()
    records = Map(b"records", ClaimRecord)
    for trophy_id in (256, 2, 1):
        records.save(storage, encode_id(trophy_id), ClaimRecord(serial=trophy_id))

    assert [r.serial for _, r in records.range(storage)] == [1, 2, 256]
    assert [r.serial for _, r in records.range(storage, start_after=encode_id(1))] == [2, 256]


def test_map_namespaces_do_not_overlap():
    storage = Storage()
    short = Map(b"claim", ClaimRecord)
    long = Map(b"claims", ClaimRecord)
    long.save(storage, b"x", ClaimRecord(serial=1))

    assert list(short.range(storage)) == []
    assert not short.has(storage, b"sx")
