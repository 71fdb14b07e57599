from datetime import date

import pytest

from conftest import TODAY, make_draft
from database import AssetType
from query import DateRange, QueryParams, page_window, run_query


def _names(result):
    return [r["Asset Name"] for r in result.rows]


def _ids(db, **params):
    return {r["ID"] for r in run_query(db, QueryParams(**params)).rows}


def test_default_query_returns_everything(db):
    result = run_query(db)

    assert result.total_count == 6
    assert [r["ID"] for r in result.rows] == [1, 2, 3, 4, 5, 6]
    assert result.page == 1
    assert result.total_pages == 1

    agg = result.aggregates
    assert (agg.total, agg.assigned, agg.available, agg.scrap) == (6, 3, 2, 1)
    assert agg.allocated_in_range == 0


def test_search_apple_finds_brand_matches(db):
    result = run_query(db, QueryParams(search="Apple"))
    assert _names(result) == ['MacBook Pro 16"', "iPad Pro"]


@pytest.mark.parametrize("term, expected", [
    ("jane", ["iPad Pro"]),
    ("emp-1003", ["Dell XPS 13"]),
    ("ast-004", ["Surface Pro"]),
    ("TPX1", ["ThinkPad X1"]),
    ("hyderabad", ["ThinkPad X1"]),
    ("scrap", ["Galaxy Tab S9"]),
])
def test_search_is_case_insensitive_across_fields(db, term, expected):
    assert _names(run_query(db, QueryParams(search=term))) == expected


@pytest.mark.parametrize("term", ["Élodie", "élodie", "ÉLODIE", "MÜLLER", "müller"])
def test_search_folds_non_ascii_case(db, term):
    db.assign(2, "Élodie Müller", "EMP-9001")
    assert _names(run_query(db, QueryParams(search=term))) == ["ThinkPad X1"]


def test_search_does_not_look_at_configuration(db):
    assert run_query(db, QueryParams(search="512GB SSD")).total_count == 0


def test_search_wildcards_are_literal(db):
    assert run_query(db, QueryParams(search="%")).total_count == 0
    assert run_query(db, QueryParams(search="_")).total_count == 0


def test_categorical_filters_are_anded(db):
    result = run_query(db, QueryParams(brand="Apple", asset_type="Tablet"))
    assert _names(result) == ["iPad Pro"]

    result = run_query(db, QueryParams(asset_type=AssetType.LAPTOP, location="Mumbai Office"))
    assert _names(result) == ['MacBook Pro 16"', "Dell XPS 13"]

    result = run_query(db, QueryParams(configuration="16GB RAM, 512GB SSD"))
    assert _names(result) == ['MacBook Pro 16"', "Surface Pro"]


def test_date_range_keeps_undated_assets(db):
    january = DateRange(date(2024, 1, 1), date(2024, 1, 31))
    result = run_query(db, QueryParams(date_range=january))

    assert [r["ID"] for r in result.rows] == [1, 2, 3, 4]
    assert result.aggregates.allocated_in_range == 2


def test_date_range_is_inclusive(db):
    one_day = DateRange(date(2024, 2, 1), date(2024, 2, 1))
    result = run_query(db, QueryParams(date_range=one_day))

    assert "Dell XPS 13" in _names(result)
    assert "Galaxy Tab S9" not in _names(result)
    assert result.aggregates.allocated_in_range == 1


def test_half_open_range_filters_nothing(db):
    result = run_query(db, QueryParams(date_range=DateRange(start=date(2024, 2, 1))))
    assert result.total_count == 6
    assert result.aggregates.allocated_in_range == 0


def test_combined_filters_equal_intersection_of_single_filters(db):
    filters = {
        "search": "a",
        "asset_type": "Laptop",
        "date_range": DateRange(date(2024, 1, 1), date(2024, 1, 31)),
        "location": "Mumbai Office",
    }
    combined = _ids(db, **filters)
    separate = [_ids(db, **{k: v}) for k, v in filters.items()]

    assert combined == set.intersection(*separate)
    assert combined == {1}


def test_aggregates_cover_every_status(db):
    db.update_status(4, "Sold")
    db.update_status(2, "Others")
    agg = run_query(db).aggregates

    assert agg.assigned + agg.available + agg.scrap <= agg.total
    assert sum(agg.status_counts.values()) == agg.total
    assert agg.status_counts["Sold"] == 1
    assert agg.status_counts["Others"] == 1


def test_legacy_scrap_statuses_count_as_scrap(db):
    db.update_status(1, "Scrap")
    db.update_status(2, "Damage")
    assert run_query(db).aggregates.scrap == 3


def test_aggregates_ignore_pagination(db):
    result = run_query(db, QueryParams(page_size=2, page=2))

    assert [r["ID"] for r in result.rows] == [3, 4]
    assert result.total_pages == 3
    assert result.aggregates.total == 6
    assert result.aggregates.assigned == 3


def test_aggregates_follow_filters(db):
    agg = run_query(db, QueryParams(asset_type="Tablet")).aggregates
    assert (agg.total, agg.assigned, agg.available, agg.scrap) == (3, 1, 1, 1)


def test_pagination_of_150_assets(empty_db):
    for n in range(150):
        empty_db.add_asset(make_draft(n))

    first = run_query(empty_db, QueryParams(page=1, page_size=100))
    second = run_query(empty_db, QueryParams(page=2, page_size=100))
    third = run_query(empty_db, QueryParams(page=3, page_size=100))

    assert len(first.rows) == 100
    assert len(second.rows) == 50
    assert second.rows[0]["ID"] == 101
    assert third.rows == []
    assert third.page == 2
    assert third.total_pages == 2
    assert third.total_count == 150


def test_page_below_one_reads_first_page(db):
    result = run_query(db, QueryParams(page=0, page_size=4))
    assert result.page == 1
    assert [r["ID"] for r in result.rows] == [1, 2, 3, 4]


def test_unpaginated_query(db):
    result = run_query(db, QueryParams(page=5, page_size=None))
    assert len(result.rows) == 6
    assert result.page == 1


@pytest.mark.parametrize("total, page, size, expected", [
    (0, 1, 100, (1, 0, 0, 100)),
    (150, 3, 100, (2, 2, 200, 100)),
    (100, 1, 100, (1, 1, 0, 100)),
    (5, 2, None, (1, 1, 0, None)),
])
def test_page_window(total, page, size, expected):
    assert page_window(total, page, size) == expected


@pytest.mark.parametrize("size", [0, -5])
def test_page_window_rejects_non_positive_size(size):
    with pytest.raises(ValueError):
        page_window(10, 1, size)


def test_assigned_asset_is_found_by_its_id(db):
    db.assign(4, "Ravi Kumar", "EMP-3001")
    result = run_query(db, QueryParams(search="AST-004"))

    assert len(result.rows) == 1
    asset = result.rows[0]
    assert asset["Status"] == "Assigned"
    assert asset["Employee Name"] == "Ravi Kumar"
    assert asset["Assigned Date"] == TODAY


def test_no_matches_is_an_empty_page(db):
    result = run_query(db, QueryParams(search="does-not-exist"))
    assert result.rows == []
    assert result.total_count == 0
    assert result.total_pages == 0
    assert result.page == 1
