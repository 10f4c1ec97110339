import pytest

from granthub.data.normalize import normalize_batch
from granthub.data.store import GrantStore


def make_row(
    school="Lincoln High",
    source="Dossier A",
    grant_id="G-1",
    title="Robotics Lab",
    year="2020",
    amount="$1,000",
    requested="",
    disbursed="",
    purpose="STEM",
    letter="",
    date_range="",
    application="",
    **extra,
):
    row = {
        "Source_File": source,
        "School": school,
        "Grant ID": grant_id,
        "Title of Project": title,
        "Date of Letter ": letter,
        "Date range of grant": date_range,
        "Date of application": application,
        "Year": year,
        "Amount": amount,
        "Amount Requested": requested,
        "Full grant amount disbursed": disbursed,
        "Purpose of Grant": purpose,
    }
    row.update(extra)
    return row


def make_records(*rows):
    return normalize_batch(rows)


SAMPLE_ROWS = [
    make_row(school="Lincoln High", source="Dossier A", grant_id="G-1", year="2020",
             amount="$10,000", requested="$20,000", purpose="STEM", Notes="Robotics club",
             Latitude="40.71280", Longitude="-74.00600"),
    make_row(school="Roosevelt Middle", source="Dossier B", grant_id="G-2", year="",
             letter="Letter dated 5/1/2019", amount="$5,000", requested="$5,000", purpose="Arts",
             Latitude="40.712801", Longitude="-74.006001"),
    make_row(school="Lincoln High", source="Dossier A", grant_id="G-3", year="2021",
             amount="N/A", requested="$1,000", purpose="STEM"),
    make_row(school="   ", source="Dossier C", grant_id="G-4", year="2021", amount="$99,999"),
    make_row(school="Washington Elementary", source="", grant_id="", year="Spring",
             amount="$2,500", purpose="", County="Bexar"),
]


@pytest.fixture
def sample_rows():
    return [dict(r) for r in SAMPLE_ROWS]


@pytest.fixture
def records(sample_rows):
    return normalize_batch(sample_rows)


@pytest.fixture
def store(sample_rows):
    return GrantStore(source="unused.csv").load_rows(sample_rows)
