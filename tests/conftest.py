import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

BORO_NAMES = ["BRONX", "BROOKLYN", "MANHATTAN", "QUEENS", "STATEN ISLAND"]
COUNTIES = ["Bronx", "Kings", "New York", "Queens", "Richmond", "Albany", "Erie"]

AGE_GROUPS = ["18-24", "25-44", "<18", "UNKNOWN", "45-64", "65+", None, "1020"]
SEXES = ["M", "F", "M", "U", None]
RACES = ["BLACK", "WHITE HISPANIC", "BLACK HISPANIC", "UNKNOWN", "WHITE"]
MATCHED_CATEGORIES = [("18-24", "M", "BLACK"), ("25-44", "F", "WHITE HISPANIC")]


def make_shootings(years=range(2006, 2022)) -> pd.DataFrame:
    rows = []
    key = 0
    for year in years:
        for b, boro in enumerate(BORO_NAMES):
            # one borough-year with no incidents at all
            if boro == "STATEN ISLAND" and year == 2009:
                continue
            for k in range(4 + (year * 7 + b * 3) % 9):
                key += 1
                rows.append({
                    "INCIDENT_KEY": 10_000 + key,
                    "OCCUR_DATE": f"{1 + k % 12:02d}/{1 + k % 28:02d}/{year}",
                    "BORO": boro,
                    "PERP_AGE_GROUP": AGE_GROUPS[key % 8],
                    "PERP_SEX": SEXES[key % 5],
                    "PERP_RACE": RACES[(key // 2) % 5],
                    "VIC_AGE_GROUP": AGE_GROUPS[(key + 3) % 8],
                    "VIC_SEX": SEXES[(key + 2) % 5],
                    "VIC_RACE": RACES[(key // 3) % 5],
                    "Latitude": 40.5 + b * 0.1 + k * 0.001,
                    "Longitude": -74.2 + b * 0.1 + k * 0.001,
                    "STATISTICAL_MURDER_FLAG": "TRUE" if (key + year) % 3 == 0 else "FALSE",
                })
        # incidents where perpetrator and victim share a category
        for m, (age, sex, race) in enumerate(MATCHED_CATEGORIES):
            rows.append({
                "INCIDENT_KEY": 90_000 + year * 10 + m,
                "OCCUR_DATE": f"07/{10 + m:02d}/{year}",
                "BORO": "BROOKLYN",
                "PERP_AGE_GROUP": age, "PERP_SEX": sex, "PERP_RACE": race,
                "VIC_AGE_GROUP": age, "VIC_SEX": sex, "VIC_RACE": race,
                "Latitude": 40.65 + m * 0.01,
                "Longitude": -73.95 + m * 0.01,
                "STATISTICAL_MURDER_FLAG": "FALSE",
            })
    return pd.DataFrame(rows)


def make_crimes(years=range(2004, 2022)) -> pd.DataFrame:
    rows = []
    for year in years:
        for i, county in enumerate(COUNTIES):
            rows.append({
                "County": county,
                "Agency": "County Total",
                "Year": year,
                "Index Total": 5000 + i,
                "Murder": 20 + (year * 3 + i * 5) % 17,
            })
    return pd.DataFrame(rows)


@pytest.fixture
def raw_shootings():
    return make_shootings()


@pytest.fixture
def raw_crimes():
    return make_crimes()


@pytest.fixture
def csv_sources(tmp_path, raw_shootings, raw_crimes):
    shootings_path = tmp_path / "shootings.csv"
    crimes_path = tmp_path / "crimes.csv"
    raw_shootings.to_csv(shootings_path, index=False)
    raw_crimes.to_csv(crimes_path, index=False)
    return shootings_path, crimes_path
