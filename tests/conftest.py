from datetime import date

import pytest

import config
from database import Database

TODAY = date(2024, 3, 1)


def _today():
    return TODAY


@pytest.fixture
def db():
    """Store seeded with the six sample assets and a fixed clock."""
    return Database(today=_today)


@pytest.fixture
def strict_db():
    return Database(consistency_mode=config.CONSISTENCY_STRICT, today=_today)


@pytest.fixture
def empty_db():
    return Database(seed=False, today=_today)


def make_draft(n, **overrides):
    draft = {
        "Asset Name": f"Monitor {n}",
        "Asset Type": "Monitor",
        "Brand": "LG",
        "Model": "27UL500",
        "Configuration": "27in 4K",
        "Serial Number": f"LG-{n:04d}",
    }
    draft.update(overrides)
    return draft
