"""
report_config.py
Settings shared by every stage of the NYPD shooting incidents report.

Everything here is a plain constant; URLs can be overridden from the
environment so the report can run against a mirror or a local file server.
"""

import os
from pathlib import Path


# ── Data Sources ──────────────────────────────────────────────────────────────

# NYPD Shooting Incident Data (Historic) — data.cityofnewyork.us
SHOOTINGS_URL = os.getenv(
    "SHOOTINGS_URL",
    "https://data.cityofnewyork.us/api/views/833y-fsy8/rows.csv?accessType=DOWNLOAD",
)

# Index Crimes by County and Agency: Beginning 1990 — data.ny.gov
CRIMES_URL = os.getenv(
    "CRIMES_URL",
    "https://data.ny.gov/api/views/ca8h-8gjq/rows.csv?accessType=DOWNLOAD",
)

HTTP_TIMEOUT = int(os.getenv("HTTP_TIMEOUT", "60"))


# ── Paths ─────────────────────────────────────────────────────────────────────

RAW_DIR       = Path("data/raw")
PROCESSED_DIR = Path("data/processed")
FIG_DIR       = PROCESSED_DIR / "figures"


# ── Schemas ───────────────────────────────────────────────────────────────────

SHOOTING_FIELDS = [
    "OCCUR_DATE", "BORO",
    "PERP_AGE_GROUP", "PERP_SEX", "PERP_RACE",
    "VIC_AGE_GROUP", "VIC_SEX", "VIC_RACE",
    "Latitude", "Longitude",
]
FATALITY_FLAG = "STATISTICAL_MURDER_FLAG"
SHOOTING_REQUIRED = SHOOTING_FIELDS + [FATALITY_FLAG]

CRIME_REQUIRED = ["County", "Year", "Murder"]


# ── Boroughs ──────────────────────────────────────────────────────────────────

# Fixed column order for every yearly borough table
BOROUGHS = ["BRONX", "BROOKLYN", "MANHATTAN", "QUEENS", "STATEN_ISLAND"]

# NYPD spells Staten Island with a space
BORO_RENAMES = {"STATEN ISLAND": "STATEN_ISLAND"}

# NY State reports by county; each NYC county is exactly one borough
COUNTY_TO_BOROUGH = {
    "Bronx":    "BRONX",
    "Kings":    "BROOKLYN",
    "New York": "MANHATTAN",
    "Queens":   "QUEENS",
    "Richmond": "STATEN_ISLAND",
}

MURDER_YEARS = (2006, 2020)


# ── Cleaning Rules ────────────────────────────────────────────────────────────

# "<18", "18-24", "25-44", "45-64", "65+" — matched as substrings
AGE_GROUP_MARKERS = ("<", "+", "-")
UNKNOWN_SEX = "U"
UNKNOWN_VALUE = "UNKNOWN"
CATEGORY_SEP = ", "


# ── Modeling ──────────────────────────────────────────────────────────────────

MODEL_DEGREES = (3, 9, 10)
