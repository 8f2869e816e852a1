"""
Data Collection Script
Downloads the NYPD shooting incidents and NY State index crimes CSVs.
"""

import io
import logging
from pathlib import Path

import pandas as pd
import requests

from report_config import (
    CRIMES_URL, CRIME_REQUIRED, FATALITY_FLAG, HTTP_TIMEOUT,
    SHOOTINGS_URL, SHOOTING_REQUIRED,
)

log = logging.getLogger(__name__)

# Read as text so year extraction and the "TRUE" comparison see the source strings
SHOOTING_DTYPES = {"OCCUR_DATE": str, FATALITY_FLAG: str}


def _is_url(source) -> bool:
    return str(source).startswith(("http://", "https://"))


def _check_columns(df: pd.DataFrame, required: list[str], name: str):
    missing_cols = set(required) - set(df.columns)
    if missing_cols:
        raise ValueError(f"{name} dataset is missing expected columns: {sorted(missing_cols)}")


def fetch_csv(url: str, save_path=None, timeout: int = HTTP_TIMEOUT, **read_kwargs) -> pd.DataFrame:
    """
    GET a CSV resource and parse it. When `save_path` is given the raw payload
    is written there first, so the run can be reproduced offline.
    """
    try:
        log.info(f"Downloading: {url}")
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        log.error(f"Failed to download {url}: {e}")
        raise

    if save_path is not None:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        save_path.write_bytes(response.content)
        log.info(f"Raw data saved → {save_path}")

    df = pd.read_csv(io.BytesIO(response.content), low_memory=False, **read_kwargs)
    log.info(f"Loaded {len(df):,} rows × {len(df.columns)} columns")
    return df


def load_raw_csv(filepath, **read_kwargs) -> pd.DataFrame:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {filepath}")

    log.info(f"Loading: {filepath}")
    df = pd.read_csv(path, low_memory=False, **read_kwargs)
    log.info(f"Loaded {len(df):,} rows × {len(df.columns)} columns")
    return df


def _load(source, save_path, **read_kwargs) -> pd.DataFrame:
    if _is_url(source):
        return fetch_csv(source, save_path=save_path, **read_kwargs)
    return load_raw_csv(source, **read_kwargs)


def load_shootings(source=None, save_path=None) -> pd.DataFrame:
    """NYPD shooting incidents, one row per victim."""
    df = _load(source or SHOOTINGS_URL, save_path, dtype=SHOOTING_DTYPES)
    _check_columns(df, SHOOTING_REQUIRED, "Shootings")
    return df


def load_crimes(source=None, save_path=None) -> pd.DataFrame:
    """NY State index crimes, one row per county (and agency) per year."""
    df = _load(source or CRIMES_URL, save_path)
    _check_columns(df, CRIME_REQUIRED, "Crimes")
    return df


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s",
                        datefmt="%H:%M:%S")
    shootings = load_shootings(save_path="data/raw/shootings.csv")
    crimes = load_crimes(save_path="data/raw/crimes.csv")
    print(f"Shootings columns: {list(shootings.columns)}")
    print(f"Crimes columns: {list(crimes.columns)}")
    print(shootings.head())
