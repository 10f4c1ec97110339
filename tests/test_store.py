from granthub.data.schemas import GrantFilter
from granthub.data import store as store_module
from granthub.data.store import GrantStore

from conftest import make_row


CSV_TEXT = (
    "Source_File,School,Grant ID,Title of Project,Date of Letter ,Year,Amount,Purpose of Grant,Notes\n"
    "Dossier A,Lincoln High,G-1,Robotics,3/15/2020,,\"$1,000\",STEM,first\n"
    "Dossier B,,G-2,Orphan,,2021,$50,Arts,\n"
    "Dossier B,Roosevelt,G-3,Mural,,2021,$500,Arts,\n"
)


def test_load_rows_builds_baseline(store):
    assert store.is_loaded
    assert store.error is None
    assert store.row_count() == 4
    assert store.baseline.filtered is False
    assert store.baseline.metrics.total_grants == 4


def test_inactive_filter_reuses_baseline(store):
    assert store.view() is store.baseline
    assert store.view(GrantFilter()) is store.baseline
    assert store.view(GrantFilter(search="   ")) is store.baseline


def test_filtered_view_is_memoized(store):
    view = store.view(GrantFilter.build(years=["2021", "2020"], search="Lincoln"))
    assert view.filtered
    assert [r.id for r in view.records] == ["G-1-0", "G-3-2"]
    assert view.metrics.total_grants == 2

    again = store.view(GrantFilter.build(years=["2020", "2021"], search="lincoln "))
    assert again is view


def test_reload_clears_cached_views(store):
    f = GrantFilter.build(sources=["Dossier A"])
    before = store.view(f)
    store.load_rows([make_row(source="Dossier A", grant_id="N-1")])
    after = store.view(f)
    assert after is not before
    assert [r.id for r in after.records] == ["N-1-0"]


def test_errors_leave_empty_batch(store):
    store.load_rows([make_row()], ["Unexpected quote on line 7"])
    assert store.error == "Unexpected quote on line 7"
    assert store.records == []
    assert store.baseline.metrics.total_grants == 0


def test_stale_refresh_is_discarded():
    store = GrantStore(source="unused.csv")
    first = store.begin_refresh()
    second = store.begin_refresh()

    assert store.complete_refresh(second, [make_row(grant_id="new")]) is True
    assert store.complete_refresh(first, [make_row(grant_id="old")]) is False
    assert [r.id for r in store.records] == ["new-0"]


def test_load_from_csv(tmp_path):
    path = tmp_path / "grants.csv"
    path.write_text(CSV_TEXT)

    store = GrantStore(source=path).load()

    assert store.error is None
    assert [r.id for r in store.records] == ["G-1-0", "G-3-2"]
    first = store.records[0]
    assert first.date_of_letter == "3/15/2020"
    assert first.year_value == 2020
    assert first.amount == 1000.0
    assert [(f.key, f.value) for f in first.other_fields] == [("Notes", "first")]
    assert store.years() == ["2021", "2020"]
    assert store.sources() == ["Dossier A", "Dossier B"]


def test_load_missing_file_reports_error(tmp_path):
    store = GrantStore(source=tmp_path / "missing.csv").load()
    assert store.is_loaded
    assert store.error
    assert store.records == []


def test_locations_follow_filter(sample_rows):
    store = GrantStore(source="unused.csv").load_rows(sample_rows)
    assert len(store.locations()) == 1
    assert store.locations(GrantFilter.build(sources=["Dossier A"]))[0].grant_count == 1


def test_filtered_view_cache_is_bounded(store, monkeypatch):
    monkeypatch.setattr(store_module, "MAX_CACHED_VIEWS", 3)

    kept = store.view(GrantFilter(search="lincoln"))
    for term in ("a", "b", "c", "d"):
        store.view(GrantFilter(search=term))
        # Touching a view keeps it from being evicted
        assert store.view(GrantFilter(search="lincoln")) is kept

    assert len(store._views) == 3
    assert GrantFilter(search="lincoln").key in store._views
    assert GrantFilter(search="a").key not in store._views


def test_many_distinct_searches_stay_within_cap(store):
    for i in range(store_module.MAX_CACHED_VIEWS + 50):
        store.view(GrantFilter(search=f"term-{i}"))
    assert len(store._views) == store_module.MAX_CACHED_VIEWS
