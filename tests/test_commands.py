import pytest

from commands import (
    Assign, Create, Delete, Unassign, UpdateFields, UpdateLocation, UpdateStatus, apply,
)
from conftest import TODAY, make_draft


def test_create_returns_updated_collection(db):
    result = apply(db, Create(make_draft(1)))

    assert result.applied
    assert result.asset_id == 7
    assert len(result.assets) == 7
    assert result.assets[-1]["Asset Name"] == "Monitor 1"


def test_create_failure_is_reported(db):
    result = apply(db, Create(make_draft(1, **{"Asset Type": None})))
    assert not result.applied
    assert result.asset_id is None
    assert len(result.assets) == 6


def test_assign_then_unassign_round_trip(db):
    for asset in db.list_assets():
        assigned = apply(db, Assign(asset["ID"], "Asha Rao", "EMP-4001"))
        row = db.get_asset_by_id(asset["ID"])
        assert assigned.applied
        assert (row["Status"], row["Employee Name"], row["Assigned Date"]) == ("Assigned", "Asha Rao", TODAY)

        returned = apply(db, Unassign(asset["ID"]))
        row = db.get_asset_by_id(asset["ID"])
        assert returned.applied
        assert row["Status"] == "Available"
        assert row["Employee Name"] is None
        assert row["Employee ID"] is None
        assert row["Assigned Date"] is None


def test_stale_id_leaves_collection_unchanged(db):
    before = db.list_assets()
    for command in (
        Assign(42, "Nobody"), Unassign(42), UpdateStatus(42, "Sold"),
        UpdateLocation(42, "Kolkata WH"), UpdateFields(42, {"Brand": "HP"}), Delete(42),
    ):
        result = apply(db, command)
        assert not result.applied
        assert result.asset_id == 42
        assert result.assets == before


def test_update_commands(db):
    apply(db, UpdateStatus(2, "Sold"))
    apply(db, UpdateLocation(2, "Trichy WH"))
    result = apply(db, UpdateFields(2, {"Brand": "Lenovo Group", "Model": "X1 Gen 11"}))

    row = next(a for a in result.assets if a["ID"] == 2)
    assert row["Status"] == "Sold"
    assert row["Asset Location"] == "Trichy WH"
    assert row["Brand"] == "Lenovo Group"
    assert row["Model"] == "X1 Gen 11"


def test_delete_removes_record(db):
    result = apply(db, Delete(4))
    assert result.applied
    assert [a["ID"] for a in result.assets] == [1, 2, 3, 5, 6]


def test_unknown_command_type(db):
    with pytest.raises(TypeError):
        apply(db, object())
