"""
run_report.py
End-to-end NYPD shooting incidents report: download, clean, reshape, model,
draw. A single `run_report()` call reproduces every table and figure.
"""

import argparse
import logging
from pathlib import Path

import pandas as pd

from borough_tables import (
    aggregate_categories, fatal_shootings_by_borough, join_shooting_murder_ratio,
    murders_by_borough, shooting_share_of_murders,
)
from data_cleaning import AuditTrail, clean_shootings
from data_collection import load_crimes, load_shootings
from eda import run_eda
from report_config import MODEL_DEGREES, PROCESSED_DIR, RAW_DIR
from trend_modeling import fit_models, prediction_table, summarize_fits

# ── Logging Setup ─────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger(__name__)

# Tables indexed by Year keep the index in their CSV
YEAR_INDEXED = {
    "fatal_shootings_by_borough", "murders_by_borough",
    "shooting_murder_ratio", "shooting_share",
}


def build_tables(shootings_raw: pd.DataFrame, crimes_raw: pd.DataFrame,
                 audit: AuditTrail | None = None, degrees=MODEL_DEGREES) -> dict:
    """Every report table, computed in order from the two raw datasets."""
    clean = clean_shootings(shootings_raw, audit)
    categories = aggregate_categories(clean, audit)

    fatal = fatal_shootings_by_borough(shootings_raw, audit)
    murders = murders_by_borough(crimes_raw, audit)
    ratio = join_shooting_murder_ratio(fatal, murders, audit)
    share = shooting_share_of_murders(fatal, murders)

    fits = fit_models(ratio, degrees)
    return {
        "cleaned_shootings": clean,
        "category_counts": categories,
        "fatal_shootings_by_borough": fatal,
        "murders_by_borough": murders,
        "shooting_murder_ratio": ratio,
        "shooting_share": share,
        "model_predictions": prediction_table(ratio, fits),
        "model_summary": summarize_fits(ratio, fits),
    }


def save_tables(tables: dict, output_dir) -> list:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for name, table in tables.items():
        path = output_dir / f"{name}.csv"
        table.to_csv(path, index=name in YEAR_INDEXED)
        paths.append(path)
    log.info(f"{len(paths)} tables saved → {output_dir}/")
    return paths


def run_report(
    shootings_source=None,
    crimes_source=None,
    output_dir=PROCESSED_DIR,
    make_figures: bool = True,
    save_raw: bool = False,
) -> dict:
    """
    End-to-end report. Call this to fully reproduce every table and figure.

    Parameters
    ----------
    shootings_source : URL or local CSV path (defaults to the NYC Open Data URL)
    crimes_source    : URL or local CSV path (defaults to the data.ny.gov URL)
    output_dir       : directory for the CSV tables, audit.json and figures/
    make_figures     : draw the report figures
    save_raw         : keep a copy of the downloaded CSVs under data/raw

    Returns
    -------
    dict of table name → DataFrame
    """
    log.info("=" * 60)
    log.info("NYPD SHOOTING INCIDENTS — REPORT PIPELINE START")
    log.info("=" * 60)

    output_dir = Path(output_dir)
    shootings_raw = load_shootings(shootings_source,
                                   save_path=RAW_DIR / "shootings.csv" if save_raw else None)
    crimes_raw = load_crimes(crimes_source,
                             save_path=RAW_DIR / "crimes.csv" if save_raw else None)

    audit = AuditTrail(total_rows=len(shootings_raw))
    tables = build_tables(shootings_raw, crimes_raw, audit)

    save_tables(tables, output_dir)
    audit.save(output_dir / "audit.json")
    audit.summary()

    if make_figures:
        run_eda(tables, fig_dir=output_dir / "figures")

    log.info(f"Report years: {tables['shooting_murder_ratio'].index.min()}–"
             f"{tables['shooting_murder_ratio'].index.max()}")
    return tables


def main(argv=None):
    parser = argparse.ArgumentParser(description="NYPD shooting incidents report")
    parser.add_argument("--shootings", type=str, default=None,
                        help="URL or path of the NYPD shooting incidents CSV")
    parser.add_argument("--crimes", type=str, default=None,
                        help="URL or path of the NY State index crimes CSV")
    parser.add_argument("--output-dir", type=str, default=str(PROCESSED_DIR),
                        help="Directory for tables, audit trail and figures")
    parser.add_argument("--no-figures", action="store_true",
                        help="Skip drawing figures")
    parser.add_argument("--save-raw", action="store_true",
                        help="Keep downloaded CSVs under data/raw")
    args = parser.parse_args(argv)

    run_report(
        shootings_source=args.shootings,
        crimes_source=args.crimes,
        output_dir=args.output_dir,
        make_figures=not args.no_figures,
        save_raw=args.save_raw,
    )


# ── Entry Point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    main()
