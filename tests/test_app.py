from pathlib import Path

from streamlit.testing.v1 import AppTest

APP_PATH = str(Path(__file__).resolve().parent.parent / "app.py")


def _run():
    return AppTest.from_file(APP_PATH, default_timeout=30).run()


def _metrics(at):
    return {m.label: m.value for m in at.metric}


def test_dashboard_shows_seed_summary():
    at = _run()

    assert not at.exception
    metrics = _metrics(at)
    assert metrics["Total Inventory"] == "6"
    assert metrics["Allocated"] == "3"
    assert metrics["Available Stock"] == "2"
    assert metrics["Scrap/Damage"] == "1"


def test_search_narrows_summary():
    at = _run()
    at.text_input(key="search").input("Apple").run()

    assert not at.exception
    assert _metrics(at)["Total Inventory"] == "2"


def test_brand_filter_narrows_summary():
    at = _run()
    at.selectbox(key="f_brand").select("Samsung").run()

    assert not at.exception
    metrics = _metrics(at)
    assert metrics["Total Inventory"] == "1"
    assert metrics["Scrap/Damage"] == "1"


def test_other_pages_render():
    at = _run()
    for page in ("Add Asset", "Bulk Operations"):
        at.sidebar.radio[0].set_value(page).run()
        assert not at.exception
