# ---------------------------------------------------------------------------
# Unit Tests: Snapshot persistence and storage slots
#
# This test suite validates how the store is seeded from, and written
# back to, its durable key-value slot:
#   - a well-formed snapshot overrides the sample dataset
#   - absent or malformed snapshots fall back to the sample dataset and
#     light mode without raising
#   - records with unexpected status text or missing fields still load
#   - reload() replaces records only when the slot holds something usable
#   - round-tripping records through the slot yields the same derived view
#   - the local-file and S3 slots read/write the expected locations
#
# S3 access is mocked to keep the tests offline and deterministic.
# ---------------------------------------------------------------------------
import json

import pytest
from botocore.exceptions import ClientError

from conftest import FIXED_TODAY, make_coi
from coi_tracker.config import Settings
from coi_tracker.services.persistence import SnapshotPersistence
from coi_tracker.services.query import compute_view
from coi_tracker.services.storage import LocalFileSlot, MemorySlot, S3Slot, get_slot
from coi_tracker.services.store import COIStore, create_store


@pytest.mark.parametrize("raw", [
    '{"cois": {"not": "a list"}, "isDarkMode": true}',
    '{"cois": [1, 2], "isDarkMode": false}',
    '{"isDarkMode": true}',
    '{"cois": [], "isDarkMode": "yes"}',
    "[1, 2, 3]",
    "{not json",
])
def test_malformed_snapshot_falls_back_to_seed(raw):
    store = COIStore(persistence=SnapshotPersistence(MemorySlot(raw)))
    assert len(store.cois) == 10
    assert store.is_dark_mode is False


def test_valid_snapshot_overrides_seed():
    raw = json.dumps({
        "cois": [make_coi(7).model_dump(by_alias=True)],
        "isDarkMode": True,
    })
    store = COIStore(persistence=SnapshotPersistence(MemorySlot(raw)))
    assert [c.id for c in store.cois] == [7]
    assert store.is_dark_mode is True


def test_out_of_set_status_keeps_every_record(slot):
    first = make_coi(7).model_dump(by_alias=True)
    second = make_coi(8).model_dump(by_alias=True)
    second["status"] = "Pending Review"
    second["reminderStatus"] = "Sent (90d)"
    slot.data = json.dumps({"cois": [first, second], "isDarkMode": True})

    store = COIStore(persistence=SnapshotPersistence(slot))
    assert [c.id for c in store.cois] == [7, 8]
    assert store.get(8).status == "Pending Review"
    assert store.is_dark_mode is True

    store.set_dark_mode(False)
    saved = json.loads(slot.data)
    assert [c["id"] for c in saved["cois"]] == [7, 8]
    assert saved["cois"][1]["status"] == "Pending Review"


def test_record_missing_fields_still_loads(slot):
    slot.data = json.dumps({"cois": [{"id": 3, "property": "Elm", "status": "Active"}]})
    store = COIStore(persistence=SnapshotPersistence(slot))
    coi = store.get(3)
    assert coi.property == "Elm"
    assert coi.tenant_name == ""
    assert store.is_dark_mode is False


def test_unreadable_record_is_skipped(slot):
    good = make_coi(1).model_dump(by_alias=True)
    slot.data = json.dumps({"cois": [good, {"property": "no id"}], "isDarkMode": False})
    store = COIStore(persistence=SnapshotPersistence(slot))
    assert [c.id for c in store.cois] == [1]


def test_construction_does_not_write(slot):
    COIStore(persistence=SnapshotPersistence(slot))
    assert slot.data is None


def test_dark_mode_is_written_through(make_store, slot):
    store = make_store([make_coi(1)])
    store.set_dark_mode(True)
    assert json.loads(slot.data)["isDarkMode"] is True


def test_round_trip_gives_same_view(make_store, slot):
    store = make_store([make_coi(1, property="b"), make_coi(2, property="a", status="Expired")])
    store.create({
        "property": "c",
        "tenantName": "T",
        "tenantEmail": "t@example.com",
        "unit": "1",
        "coiName": "X",
        "expiryDate": "2025-06-20",
        "status": "Active",
        "reminderStatus": "N/A",
    })

    reloaded = make_store()
    filters = store.filters.model_copy(update={"status": "Active"})
    fresh = compute_view(store.cois, filters, store.date_range_filter, store.sort_config, FIXED_TODAY)
    again = compute_view(reloaded.cois, filters, reloaded.date_range_filter, reloaded.sort_config, FIXED_TODAY)
    assert [c.model_dump() for c in fresh] == [c.model_dump() for c in again]
    assert reloaded.cois == store.cois


def test_reload_replaces_records(make_store, slot):
    store = make_store([make_coi(1)])
    other = SnapshotPersistence(slot)
    other.save([make_coi(1), make_coi(2, status="Expired")], True)

    store.set_filters(status="Expired")
    assert store.reload() is True
    assert [c.id for c in store.cois] == [1, 2]
    assert store.is_dark_mode is True
    assert [c.id for c in store.filtered_cois] == [2]


def test_reload_with_broken_slot_keeps_state(make_store, slot):
    store = make_store([make_coi(1), make_coi(2)])
    slot.data = "{broken"
    assert store.reload() is False
    assert [c.id for c in store.cois] == [1, 2]


def test_reload_with_empty_slot_keeps_state(make_store, slot):
    store = make_store([make_coi(4)])
    slot.data = None
    assert store.load_from_storage() is False
    assert [c.id for c in store.cois] == [4]


def test_read_failure_is_treated_as_absent(mocker):
    slot = MemorySlot()
    mocker.patch.object(slot, "read", side_effect=OSError("boom"))
    assert SnapshotPersistence(slot).load() is None


def test_save_reports_failure(mocker):
    slot = MemorySlot()
    mocker.patch.object(slot, "write", side_effect=RuntimeError("quota"))
    assert SnapshotPersistence(slot).save([make_coi(1)], False) is False


# ---------------------------------------------------------------------------
# Slots
# ---------------------------------------------------------------------------


def test_local_slot_round_trip(tmp_path):
    slot = LocalFileSlot(str(tmp_path / "data"), "coi-store")
    assert slot.read() is None
    slot.write('{"cois": [], "isDarkMode": false}')
    assert (tmp_path / "data" / "coi-store.json").exists()
    assert slot.read() == '{"cois": [], "isDarkMode": false}'
    slot.write("{}")
    assert slot.read() == "{}"


def test_create_store_with_local_slot(tmp_path):
    settings = Settings(storage_backend="local", local_storage_dir=str(tmp_path), rows_per_page=25)
    store = create_store(settings)
    assert store.rows_per_page == 25
    store.set_dark_mode(True)

    again = create_store(settings)
    assert again.is_dark_mode is True
    assert len(again.cois) == 10


def test_get_slot_requires_bucket_for_s3():
    with pytest.raises(RuntimeError):
        get_slot(Settings(storage_backend="s3"))


def test_get_slot_memory_backend():
    assert isinstance(get_slot(Settings(storage_backend="memory")), MemorySlot)


def test_s3_slot_writes_object(mocker):
    client = mocker.MagicMock()
    mocker.patch("coi_tracker.services.storage.boto3.client", return_value=client)

    slot = S3Slot("bucket", "coi-store", prefix="state/")
    slot.write("{}")

    client.put_object.assert_called_once_with(
        Bucket="bucket",
        Key="state/coi-store.json",
        Body=b"{}",
        ContentType="application/json",
    )
    assert slot.describe() == "s3://bucket/state/coi-store.json"


def test_s3_slot_missing_key_reads_none(mocker):
    client = mocker.MagicMock()
    client.get_object.side_effect = ClientError({"Error": {"Code": "NoSuchKey"}}, "GetObject")
    mocker.patch("coi_tracker.services.storage.boto3.client", return_value=client)

    assert S3Slot("bucket", "coi-store").read() is None


def test_s3_slot_other_errors_propagate(mocker):
    client = mocker.MagicMock()
    client.get_object.side_effect = ClientError({"Error": {"Code": "AccessDenied"}}, "GetObject")
    mocker.patch("coi_tracker.services.storage.boto3.client", return_value=client)

    with pytest.raises(ClientError):
        S3Slot("bucket", "coi-store").read()


def test_s3_slot_reads_body(mocker):
    client = mocker.MagicMock()
    client.get_object.return_value = {"Body": mocker.MagicMock(read=lambda: b'{"cois": []}')}
    mocker.patch("coi_tracker.services.storage.boto3.client", return_value=client)

    assert S3Slot("bucket", "coi-store", region="us-east-2").read() == '{"cois": []}'
