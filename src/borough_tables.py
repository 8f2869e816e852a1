"""
borough_tables.py
Aggregations and long-to-wide reshapes behind the report tables:
victim/perpetrator category counts, yearly fatal shootings and murders per
borough, and the share of murders committed by shooting.
"""

import logging
import math
import re

import pandas as pd

from data_cleaning import AuditTrail, extract_year, record_step
from report_config import (
    BOROUGHS, BORO_RENAMES, CATEGORY_SEP, COUNTY_TO_BOROUGH, FATALITY_FLAG, MURDER_YEARS,
)

log = logging.getLogger(__name__)

COUNTY_PATTERN = "|".join(re.escape(c) for c in COUNTY_TO_BOROUGH)


# ── Categories ────────────────────────────────────────────────────────────────

def category_key(df: pd.DataFrame, role: str) -> pd.Series:
    """"<age-group>, <sex>, <race>" for role "VIC" or "PERP"."""
    parts = [df[f"{role}_{field}"].astype(str) for field in ("AGE_GROUP", "SEX", "RACE")]
    return parts[0].str.cat(parts[1:], sep=CATEGORY_SEP)


def aggregate_categories(clean: pd.DataFrame, audit: AuditTrail | None = None) -> pd.DataFrame:
    """
    Victim and perpetrator counts per demographic category.

    Categories attested in only one role are dropped (inner join), so neither
    count column ever holds a zero.
    """
    victims = category_key(clean, "VIC").value_counts().rename("Victims")
    perps   = category_key(clean, "PERP").value_counts().rename("Perpetrators")

    table = (
        pd.concat([victims, perps], axis=1, join="inner")
        .rename_axis("Category")
        .reset_index()
        .sort_values("Category", ignore_index=True)
    )
    one_sided = len(victims.index.union(perps.index)) - len(table)
    record_step(audit, "Category join", "Categories seen in only one role dropped", one_sided,
                f"({len(table)} categories kept)", total=len(victims.index.union(perps.index)))
    return table


# ── Yearly Borough Tables ─────────────────────────────────────────────────────

def add_borough_total(table: pd.DataFrame) -> pd.DataFrame:
    """
    Seed absent borough columns and cells with 0, fix the column order and
    recompute Total from the five boroughs. Any incoming Total is discarded.
    """
    table = table.drop(columns="Total", errors="ignore")
    table = table.reindex(columns=BOROUGHS).fillna(0).astype(int)
    table["Total"] = table[BOROUGHS].sum(axis=1)
    return table


def pivot_boroughs(long: pd.DataFrame, value: str) -> pd.DataFrame:
    """
    Long (Year, Borough, value) rows → one row per Year, one column per
    borough, summing duplicate cells.
    """
    unknown = ~long["Borough"].isin(BOROUGHS)
    if unknown.any():
        log.warning(f"Ignoring {unknown.sum():,} rows with unrecognised borough: "
                    f"{sorted(long.loc[unknown, 'Borough'].astype(str).unique())}")
        long = long[~unknown]
    if long.empty:
        return add_borough_total(pd.DataFrame(index=pd.Index([], name="Year", dtype=int)))

    wide = long.pivot_table(index="Year", columns="Borough", values=value,
                            aggfunc="sum", fill_value=0)
    wide.columns.name = None
    wide = add_borough_total(wide).sort_index()
    wide.index = wide.index.astype(int)
    wide.index.name = "Year"
    return wide


def fatal_shootings_by_borough(raw: pd.DataFrame, audit: AuditTrail | None = None) -> pd.DataFrame:
    """
    Yearly fatal shootings per borough, from the raw (uncleaned) incidents.
    A row is fatal when its murder flag reads "TRUE" as text.
    """
    year = extract_year(raw["OCCUR_DATE"])
    # Case-insensitive on purpose: "true" and an already-parsed True count as "TRUE"
    flag = raw[FATALITY_FLAG].astype("string").str.strip().str.upper()
    fatal = (flag == "TRUE").fillna(False).astype(bool) & year.notna()

    long = (
        pd.DataFrame({
            "Year": year[fatal].astype(int),
            "Borough": raw.loc[fatal, "BORO"].replace(BORO_RENAMES),
        })
        .groupby(["Year", "Borough"])
        .size()
        .reset_index(name="Shootings")
    )
    record_step(audit, "Fatal shootings", "Rows flagged TRUE kept for borough pivot",
                int(fatal.sum()), total=len(raw))
    return pivot_boroughs(long, "Shootings")


def murders_by_borough(crimes: pd.DataFrame, audit: AuditTrail | None = None) -> pd.DataFrame:
    """
    Yearly murders per NYC borough from the NY State county index crimes,
    restricted to MURDER_YEARS.
    """
    county = crimes["County"].astype("string")
    year = pd.to_numeric(crimes["Year"], errors="coerce")
    first, last = MURDER_YEARS

    keep = county.str.contains(COUNTY_PATTERN).fillna(False).astype(bool) & year.between(first, last)
    subset = crimes.loc[keep, ["Year", "County", "Murder"]]
    record_step(audit, "NYC county murders", f"County rows for {first}–{last} kept",
                int(keep.sum()), total=len(crimes))

    murders = pd.to_numeric(subset["Murder"].astype(str).str.replace(",", ""), errors="coerce")
    if murders.isna().any():
        log.warning(f"{murders.isna().sum():,} non-numeric murder counts treated as 0")

    long = pd.DataFrame({
        "Year": year[keep].astype(int),
        "Borough": county[keep].str.extract(f"({COUNTY_PATTERN})", expand=False)
                               .map(COUNTY_TO_BOROUGH),
        "Murders": murders.fillna(0).astype(int),
    })
    return pivot_boroughs(long, "Murders")


# ── Shooting / Murder Ratio ───────────────────────────────────────────────────

def shooting_percentage(shootings, murders) -> float:
    """shootings / murders × 100 rounded to 2 places; NaN when there were no murders."""
    if murders == 0:
        return math.nan
    return round(float(shootings) / float(murders) * 100, 2)


def format_ratio(shootings, murders) -> str:
    pct = shooting_percentage(shootings, murders)
    if math.isnan(pct):
        return f"{int(shootings)} / NA"
    return f"{int(shootings)} / {pct}%"


def shooting_share_of_murders(fatal: pd.DataFrame, murders: pd.DataFrame) -> pd.DataFrame:
    """Numeric percentage of murders committed by shooting, per borough and citywide."""
    joined = fatal.join(murders, how="inner", lsuffix="_shootings", rsuffix="_murders")
    share = pd.DataFrame(index=joined.index)
    for col in BOROUGHS + ["Total"]:
        share[col] = [
            shooting_percentage(s, m)
            for s, m in zip(joined[f"{col}_shootings"], joined[f"{col}_murders"])
        ]
    return share.rename(columns={"Total": "CITYWIDE"})


def join_shooting_murder_ratio(fatal: pd.DataFrame, murders: pd.DataFrame,
                               audit: AuditTrail | None = None) -> pd.DataFrame:
    """
    Join the yearly fatal-shooting and murder tables on Year.

    Each borough cell reads "<shootings> / <pct>%". Murders and
    Murders_By_Shooting carry the citywide totals. Years missing from either
    side are dropped.
    """
    joined = fatal.join(murders, how="inner", lsuffix="_shootings", rsuffix="_murders")
    unmatched = len(fatal.index.symmetric_difference(murders.index))
    record_step(audit, "Ratio join", "Years present in only one table dropped", unmatched,
                f"({len(joined)} years kept)", total=len(fatal.index.union(murders.index)))

    ratio = pd.DataFrame(index=joined.index)
    for boro in BOROUGHS:
        shootings, deaths = joined[f"{boro}_shootings"], joined[f"{boro}_murders"]
        zero = deaths == 0
        if zero.any():
            log.warning(f"{boro}: no murders recorded in {list(joined.index[zero])}; "
                        "shooting share left undefined")
        ratio[boro] = [format_ratio(s, m) for s, m in zip(shootings, deaths)]

    ratio["Murders"] = joined["Total_murders"].astype(int)
    ratio["Murders_By_Shooting"] = joined["Total_shootings"].astype(int)
    return ratio
