"""Search, filtering, pagination and summary counts over the asset store.

Every dashboard interaction re-runs :func:`run_query` against the session's
:class:`database.Database`. Filters are independent predicates AND-ed in a
fixed order (search, assigned-date range, categorical), the total is counted
over the filtered set, and only then is the requested page sliced out.
"""

import enum
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import String, func, or_

import config
from database import Asset, AssetStatus, SCRAP_STATUSES, SEARCH_FOLD_FUNCTION

SEARCH_COLUMNS = (
    Asset.name, Asset.asset_tag, Asset.brand, Asset.serial_number,
    Asset.assigned_to, Asset.employee_id, Asset.status, Asset.location
)

CATEGORY_FILTERS = (
    ("asset_type", Asset.asset_type),
    ("brand", Asset.brand),
    ("configuration", Asset.configuration),
    ("location", Asset.location),
)


@dataclass(frozen=True)
class DateRange:
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None


@dataclass
class QueryParams:
    search: str = ""
    asset_type: str = config.FILTER_ALL
    brand: str = config.FILTER_ALL
    configuration: str = config.FILTER_ALL
    location: str = config.FILTER_ALL
    date_range: Optional[DateRange] = None
    page: int = 1
    page_size: Optional[int] = config.PAGE_SIZE


@dataclass
class Aggregates:
    total: int = 0
    assigned: int = 0
    available: int = 0
    scrap: int = 0
    allocated_in_range: int = 0
    status_counts: Dict[str, int] = field(default_factory=dict)


@dataclass
class QueryResult:
    rows: List[dict]
    total_count: int
    page: int
    total_pages: int
    aggregates: Aggregates


def _plain(value):
    return value.value if isinstance(value, enum.Enum) else value


def search_clause(term):
    if not term:
        return None
    needle = term.casefold()
    fold = getattr(func, SEARCH_FOLD_FUNCTION)
    return or_(*[
        fold(column, type_=String).contains(needle, autoescape=True)
        for column in SEARCH_COLUMNS
    ])


def date_clause(date_range):
    # A half-open range filters nothing, and undated assets always pass
    if date_range is None or not date_range.is_complete:
        return None
    return or_(
        Asset.assigned_date.is_(None),
        Asset.assigned_date.between(date_range.start, date_range.end)
    )


def category_clauses(params):
    clauses = []
    for attr, column in CATEGORY_FILTERS:
        value = _plain(getattr(params, attr))
        if value is None or value == config.FILTER_ALL:
            continue
        clauses.append(column == value)
    return clauses


def build_filters(params):
    """Filter clauses in application order: search, date range, categories."""
    clauses = [search_clause(params.search), date_clause(params.date_range)]
    clauses.extend(category_clauses(params))
    return [c for c in clauses if c is not None]


def page_window(total, page, page_size):
    """Return (reported_page, total_pages, offset, limit) for a result of `total` rows.

    A page_size of None disables pagination. Pages past the end produce an
    offset beyond the data, so the slice comes back empty; the reported page
    is still clamped into range.
    """
    if page_size is None:
        return 1, 1, 0, None
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    requested = max(1, int(page or 1))
    total_pages = math.ceil(total / page_size)
    reported = min(requested, max(total_pages, 1))
    return reported, total_pages, (requested - 1) * page_size, page_size


def compute_aggregates(session, clauses, date_range, total):
    rows = (
        session.query(Asset.status, func.count(Asset.id))
        .filter(*clauses)
        .group_by(Asset.status)
        .all()
    )
    counts = {status: n for status, n in rows}

    in_range = 0
    if date_range is not None and date_range.is_complete:
        in_range = (
            session.query(Asset)
            .filter(*clauses)
            .filter(Asset.assigned_date.between(date_range.start, date_range.end))
            .count()
        )

    return Aggregates(
        total=total,
        assigned=counts.get(AssetStatus.ASSIGNED.value, 0),
        available=counts.get(AssetStatus.AVAILABLE.value, 0),
        scrap=sum(counts.get(s.value, 0) for s in SCRAP_STATUSES),
        allocated_in_range=in_range,
        status_counts=counts
    )


def run_query(db, params=None):
    params = params or QueryParams()
    clauses = build_filters(params)
    session = db.get_session()
    try:
        query = session.query(Asset).filter(*clauses)
        total = query.count()
        aggregates = compute_aggregates(session, clauses, params.date_range, total)
        page, total_pages, offset, limit = page_window(total, params.page, params.page_size)

        query = query.order_by(Asset.id)
        if limit is not None:
            query = query.offset(offset).limit(limit)
        rows = [a.to_dict() for a in query.all()]
    finally:
        session.close()

    return QueryResult(
        rows=rows,
        total_count=total,
        page=page,
        total_pages=total_pages,
        aggregates=aggregates
    )
