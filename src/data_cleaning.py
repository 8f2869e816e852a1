"""
data_cleaning.py
Cleaning of the NYPD shooting incident records for demographic analysis.

Design principles:
- Every transformation is logged with before/after counts
- Malformed rows are dropped, never reported as errors, but always counted
- Functions are pure (input → output), no global state
"""

import json
import logging

import numpy as np
import pandas as pd

from report_config import (
    AGE_GROUP_MARKERS, SHOOTING_FIELDS, UNKNOWN_SEX, UNKNOWN_VALUE,
)

log = logging.getLogger(__name__)


# ── Audit Trail ───────────────────────────────────────────────────────────────

class AuditTrail:
    """Tracks every cleaning decision with before/after row counts and change stats."""

    def __init__(self, total_rows: int):
        self.total_rows = total_rows
        self.steps: list[dict] = []

    def record(self, step: str, description: str, changed: int, detail: str = "",
               total: int | None = None):
        total = self.total_rows if total is None else total
        pct = changed / total * 100 if total else 0.0
        self.steps.append({
            "step": step,
            "description": description,
            "rows_affected": changed,
            "pct_affected": round(pct, 2),
            "detail": detail,
        })
        log.info(f"[{step}] {description} → {changed:,} rows affected ({pct:.1f}%) {detail}")

    def save(self, path: str):
        class _NumpyEncoder(json.JSONEncoder):
            """Convert numpy int/float types to native Python before serialising."""
            def default(self, obj):
                if isinstance(obj, np.integer):
                    return int(obj)
                if isinstance(obj, np.floating):
                    return float(obj)
                if isinstance(obj, np.ndarray):
                    return obj.tolist()
                return super().default(obj)

        with open(path, "w") as f:
            json.dump({"total_rows": self.total_rows, "steps": self.steps}, f,
                      indent=2, cls=_NumpyEncoder)
        log.info(f"Audit trail saved → {path}")

    def summary(self):
        print("\n" + "=" * 65)
        print("CLEANING AUDIT SUMMARY")
        print("=" * 65)
        print(f"{'Step':<30} {'Affected':>10} {'%':>7}  Description")
        print("-" * 65)
        for s in self.steps:
            print(f"{s['step']:<30} {s['rows_affected']:>10,} {s['pct_affected']:>6.1f}%  {s['description']}")
        print("=" * 65)


def record_step(audit: AuditTrail | None, *args, **kwargs):
    if audit is not None:
        audit.record(*args, **kwargs)


# ── Helpers ───────────────────────────────────────────────────────────────────

def extract_year(dates: pd.Series) -> pd.Series:
    """
    OCCUR_DATE is "month/day/year"; keep only the year segment.
    Unparseable dates become <NA>.
    """
    year = dates.astype("string").str.split("/").str[-1].str.strip()
    return pd.to_numeric(year, errors="coerce").astype("Int64")


def _has_age_marker(ages: pd.Series) -> pd.Series:
    # Substring test: any hyphenated value passes, not just the named buckets
    ages = ages.astype("string")
    mask = pd.Series(False, index=ages.index)
    for marker in AGE_GROUP_MARKERS:
        mask |= ages.str.contains(marker, regex=False).fillna(False).astype(bool)
    return mask


# ── Step 1: Project ───────────────────────────────────────────────────────────

def select_fields(df: pd.DataFrame, audit: AuditTrail | None = None) -> pd.DataFrame:
    dropped = [c for c in df.columns if c not in SHOOTING_FIELDS]
    record_step(audit, "Project fields", f"Kept {len(SHOOTING_FIELDS)} fields", 0,
                f"({len(dropped)} columns dropped)")
    return df[SHOOTING_FIELDS].copy()


# ── Step 2: Occurrence Year ───────────────────────────────────────────────────

def parse_occurrence_year(df: pd.DataFrame, audit: AuditTrail | None = None) -> pd.DataFrame:
    year = extract_year(df["OCCUR_DATE"])
    record_step(audit, "Occurrence year", "Year extracted from OCCUR_DATE", int(year.isna().sum()),
                "(unparseable dates → NA)")
    df = df.drop(columns="OCCUR_DATE")
    df.insert(0, "Year", year)
    return df


# ── Step 3: Demographic Filter ────────────────────────────────────────────────

def filter_demographics(df: pd.DataFrame, audit: AuditTrail | None = None) -> pd.DataFrame:
    """
    Keep records whose perpetrator and victim both carry an age-group bucket
    and a known sex.
    """
    before = len(df)
    # Missing sex passes here and is dropped in step 5
    keep = (
        _has_age_marker(df["PERP_AGE_GROUP"])
        & ~df["PERP_SEX"].isin([UNKNOWN_SEX])
        & _has_age_marker(df["VIC_AGE_GROUP"])
        & ~df["VIC_SEX"].isin([UNKNOWN_SEX])
    )
    df = df[keep]
    record_step(audit, "Demographic filter", "Rows without age bucket or with sex 'U' removed",
                before - len(df))
    return df


# ── Step 4: UNKNOWN → NA ──────────────────────────────────────────────────────

def mark_unknowns(df: pd.DataFrame, audit: AuditTrail | None = None) -> pd.DataFrame:
    is_unknown = df.isin([UNKNOWN_VALUE])
    record_step(audit, "UNKNOWN → NA", f"Literal '{UNKNOWN_VALUE}' values nulled",
                int(is_unknown.any(axis=1).sum()))
    return df.mask(is_unknown)


# ── Step 5: Drop Incomplete ───────────────────────────────────────────────────

def drop_incomplete(df: pd.DataFrame, audit: AuditTrail | None = None) -> pd.DataFrame:
    before = len(df)
    df = df.dropna()
    record_step(audit, "Drop incomplete", "Rows with any missing field removed", before - len(df))
    df = df.astype({"Year": int, "Latitude": float, "Longitude": float})
    return df.reset_index(drop=True)


# ── Cleaner ───────────────────────────────────────────────────────────────────

def clean_shootings(raw: pd.DataFrame, audit: AuditTrail | None = None) -> pd.DataFrame:
    """
    Raw shooting incidents → cleaned records with Year, BORO, perpetrator and
    victim demographics, Latitude and Longitude. Every field of a returned
    row is present; failing rows are dropped whole.
    """
    log.info(f"Cleaning {len(raw):,} shooting records")
    df = select_fields(raw, audit)
    df = parse_occurrence_year(df, audit)
    df = filter_demographics(df, audit)
    df = mark_unknowns(df, audit)
    df = drop_incomplete(df, audit)
    log.info(f"Cleaned shootings: {len(df):,} rows ({len(df)/max(len(raw), 1)*100:.1f}% retained)")
    return df
