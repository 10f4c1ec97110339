from granthub.analytics.aggregations import compute_aggregations, compute_locations
from granthub.analytics.common import compare_year_labels

from conftest import make_records, make_row


def test_sample_aggregations(records):
    agg = compute_aggregations(records)

    assert [(y.year, y.total_amount) for y in agg.amount_by_year] == [
        ("2019", 5000), ("2020", 10000), ("2021", 0), ("Spring", 2500),
    ]
    assert [(s.source, s.total_amount, s.grants) for s in agg.amount_by_source] == [
        ("Dossier A", 10000, 2), ("Dossier B", 5000, 1),
    ]
    assert [(p.purpose, p.count, p.amount) for p in agg.top_purposes] == [
        ("STEM", 2, 10000), ("Arts", 1, 5000),
    ]
    assert [(s.school, s.count, s.amount) for s in agg.top_schools] == [
        ("Lincoln High", 2, 10000), ("Roosevelt Middle", 1, 5000), ("Washington Elementary", 1, 2500),
    ]


def test_year_order_numeric_then_labels():
    records = make_records(
        make_row(grant_id="a", year="2021", amount="1"),
        make_row(grant_id="b", year="Spring", amount="1"),
        make_row(grant_id="c", year="1999", amount="1"),
        make_row(grant_id="d", year="Fall", amount="1"),
        make_row(grant_id="e", year="", amount="1"),
    )
    years = [y.year for y in compute_aggregations(records).amount_by_year]
    assert years == ["1999", "2021", "Fall", "Spring"]


def test_year_bucket_uses_year_value():
    records = make_records(
        make_row(grant_id="a", year="2019", amount="100"),
        make_row(grant_id="b", year="2019/20", amount="50"),
    )
    agg = compute_aggregations(records)
    assert [(y.year, y.total_amount) for y in agg.amount_by_year] == [("2019", 150)]


def test_unspecified_buckets_are_excluded():
    records = make_records(make_row(source="", purpose="", year="", amount="10"))
    agg = compute_aggregations(records)
    assert agg.amount_by_year == []
    assert agg.amount_by_source == []
    assert agg.top_purposes == []
    assert [s.school for s in agg.top_schools] == ["Lincoln High"]


def test_sources_truncated_after_sorting():
    rows = [
        make_row(grant_id=f"g{i}", source=f"Dossier {i:02d}", amount=str(i * 10))
        for i in range(1, 16)
    ]
    sources = compute_aggregations(make_records(*rows)).amount_by_source

    assert len(sources) == 12
    assert sources[0].source == "Dossier 15"
    assert sources[-1].source == "Dossier 04"
    amounts = [s.total_amount for s in sources]
    assert amounts == sorted(amounts, reverse=True)


def test_purpose_ties_broken_by_amount():
    records = make_records(
        make_row(grant_id="1", purpose="A", amount="5"),
        make_row(grant_id="2", purpose="A", amount="5"),
        make_row(grant_id="3", purpose="B", amount="25"),
        make_row(grant_id="4", purpose="B", amount="25"),
        make_row(grant_id="5", purpose="C", amount="1"),
        make_row(grant_id="6", purpose="C", amount=""),
        make_row(grant_id="7", purpose="C", amount=""),
    )
    purposes = compute_aggregations(records).top_purposes
    assert [(p.purpose, p.count, p.amount) for p in purposes] == [
        ("C", 3, 1), ("B", 2, 50), ("A", 2, 10),
    ]


def test_school_ties_broken_by_count():
    records = make_records(
        make_row(grant_id="1", school="X", amount="100"),
        make_row(grant_id="2", school="Y", amount="60"),
        make_row(grant_id="3", school="Y", amount="40"),
        make_row(grant_id="4", school="Z", amount="200"),
    )
    schools = compute_aggregations(records).top_schools
    assert [s.school for s in schools] == ["Z", "Y", "X"]


def test_empty_input():
    agg = compute_aggregations([])
    assert agg.amount_by_year == []
    assert agg.amount_by_source == []
    assert agg.top_purposes == []
    assert agg.top_schools == []


def test_compare_year_labels():
    assert compare_year_labels("2019", "2020") < 0
    assert compare_year_labels("Spring", "2020") > 0
    assert compare_year_labels("2020", "Fall") < 0
    assert compare_year_labels("Fall", "Spring") < 0
    assert compare_year_labels("2020", "2020") == 0


def test_locations_group_by_rounded_coordinates(records):
    locations = compute_locations(records)
    assert len(locations) == 1
    loc = locations[0]
    assert loc.id == "40.71280|-74.00600"
    assert loc.grant_count == 2
    assert loc.total_amount == 15000
    assert loc.schools == ["Lincoln High", "Roosevelt Middle"]
    assert loc.sources == ["Dossier A", "Dossier B"]


def test_locations_sorted_by_amount():
    records = make_records(
        make_row(grant_id="1", amount="10", Latitude="1", Longitude="1"),
        make_row(grant_id="2", amount="90", Latitude="2", Longitude="2"),
        make_row(grant_id="3", amount="90", Latitude="3", Longitude="3"),
        make_row(grant_id="4", amount="", Latitude="3", Longitude="3"),
        make_row(grant_id="5", amount="500"),
    )
    locations = compute_locations(records)
    assert [(loc.id, loc.grant_count) for loc in locations] == [
        ("3.00000|3.00000", 2), ("2.00000|2.00000", 1), ("1.00000|1.00000", 1),
    ]
