import pandas as pd
import pytest
import requests

import data_collection
from data_collection import fetch_csv, load_crimes, load_raw_csv, load_shootings


class FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")


@pytest.fixture
def fake_get(monkeypatch):
    calls = []

    def install(content: bytes, status_code: int = 200):
        def _get(url, timeout=None):
            calls.append((url, timeout))
            return FakeResponse(content, status_code)
        monkeypatch.setattr(data_collection.requests, "get", _get)
        return calls

    return install


def test_fetch_csv_parses_and_saves_payload(fake_get, tmp_path):
    calls = fake_get(b"County,Year,Murder\nKings,2010,100\n")
    save_path = tmp_path / "raw" / "crimes.csv"

    df = fetch_csv("https://example.org/crimes.csv", save_path=save_path, timeout=5)

    assert calls == [("https://example.org/crimes.csv", 5)]
    assert df.to_dict("records") == [{"County": "Kings", "Year": 2010, "Murder": 100}]
    assert save_path.read_bytes() == b"County,Year,Murder\nKings,2010,100\n"


def test_fetch_failure_is_fatal(fake_get):
    fake_get(b"", status_code=503)

    with pytest.raises(requests.HTTPError):
        fetch_csv("https://example.org/shootings.csv")


def test_network_error_propagates(monkeypatch):
    def _get(url, timeout=None):
        raise requests.ConnectionError("unreachable")
    monkeypatch.setattr(data_collection.requests, "get", _get)

    with pytest.raises(requests.ConnectionError):
        load_crimes("https://example.org/crimes.csv")


def test_load_raw_csv_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_raw_csv(tmp_path / "nope.csv")


def test_load_shootings_keeps_flag_as_text(csv_sources):
    shootings_path, _ = csv_sources

    df = load_shootings(shootings_path)

    assert set(df["STATISTICAL_MURDER_FLAG"].unique()) == {"TRUE", "FALSE"}
    assert df["OCCUR_DATE"].str.count("/").eq(2).all()


def test_load_shootings_from_url(fake_get, raw_shootings):
    fake_get(raw_shootings.to_csv(index=False).encode())

    df = load_shootings("https://example.org/shootings.csv")

    assert len(df) == len(raw_shootings)


def test_missing_columns_rejected(tmp_path):
    path = tmp_path / "crimes.csv"
    pd.DataFrame({"County": ["Kings"], "Year": [2010]}).to_csv(path, index=False)

    with pytest.raises(ValueError, match="Murder"):
        load_crimes(path)
