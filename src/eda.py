"""
eda.py
Descriptive figures for the NYPD shooting incidents report.

Design principles:
- Every plot answers one question the report discusses
- Visuals are publication-ready (labeled, titled, sourced)
- Figures are drawn from the finished tables, never from ad-hoc reshapes
"""

import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import pandas as pd
import seaborn as sns
import warnings
from pathlib import Path

from report_config import BOROUGHS, FIG_DIR

warnings.filterwarnings("ignore")

# ── Style ─────────────────────────────────────────────────────────────────────
PALETTE  = "YlOrRd"
ACCENT   = "#D62728"   # red — draws attention to key findings
NEUTRAL  = "#4C72B0"   # blue — standard bars
BG_GRAY  = "#F7F7F7"
BORO_COLORS = dict(zip(BOROUGHS, sns.color_palette("tab10", len(BOROUGHS))))

plt.rcParams.update({
    "figure.facecolor": BG_GRAY,
    "axes.facecolor":   BG_GRAY,
    "axes.spines.top":  False,
    "axes.spines.right": False,
    "axes.labelsize":   11,
    "axes.titlesize":   13,
    "axes.titleweight": "bold",
    "xtick.labelsize":  9,
    "ytick.labelsize":  9,
    "font.family":      "sans-serif",
})

SHOOTING_SOURCE = "Source: NYPD Shooting Incident Data (Historic) / data.cityofnewyork.us"
CRIME_SOURCE    = "Source: NYPD shootings + NY State Index Crimes by County / data.ny.gov"


# ── Helpers ───────────────────────────────────────────────────────────────────

def _save(fig: plt.Figure, name: str, fig_dir=None):
    fig_dir = Path(fig_dir or FIG_DIR)
    fig_dir.mkdir(parents=True, exist_ok=True)
    path = fig_dir / f"{name}.png"
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"  ✓ Saved → {path}")
    return path


def _source_note(ax, note=SHOOTING_SOURCE):
    ax.annotate(note, xy=(0, -0.12), xycoords="axes fraction",
                fontsize=7, color="gray")


def _banner(title: str):
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


def fmt_thousands(ax, axis="y"):
    fmt = mticker.FuncFormatter(lambda x, _: f"{x:,.0f}")
    if axis == "y":
        ax.yaxis.set_major_formatter(fmt)
    else:
        ax.xaxis.set_major_formatter(fmt)


# ── Figure 1: Victim vs Perpetrator Categories ────────────────────────────────

def plot_category_counts(categories: pd.DataFrame, top_n: int = 15, fig_dir=None):
    """
    Q: Which age/sex/race categories appear most as victims and as perpetrators?
    Only categories attested in both roles are in the table.
    """
    _banner("FIGURE 1 | VICTIM vs PERPETRATOR CATEGORIES")

    top = (
        categories.assign(Combined=categories["Victims"] + categories["Perpetrators"])
        .nlargest(top_n, "Combined")
        .sort_values("Combined")
    )
    long = top.melt(id_vars="Category", value_vars=["Victims", "Perpetrators"],
                    var_name="Role", value_name="Count")

    fig, ax = plt.subplots(figsize=(12, max(5, 0.45 * len(top))))
    sns.barplot(data=long, y="Category", x="Count", hue="Role", ax=ax,
                palette={"Victims": NEUTRAL, "Perpetrators": ACCENT})
    ax.set_title(f"Top {len(top)} Categories: Victims vs Perpetrators\n(age group, sex, race)")
    ax.set_xlabel("Number of Records")
    ax.set_ylabel("")
    fmt_thousands(ax, axis="x")
    _source_note(ax)

    plt.tight_layout()
    path = _save(fig, "01_category_counts", fig_dir)

    if not categories.empty:
        top_vic = categories.loc[categories["Victims"].idxmax()]
        top_perp = categories.loc[categories["Perpetrators"].idxmax()]
        print(f"  Most common victim category: {top_vic['Category']} ({top_vic['Victims']:,})")
        print(f"  Most common perpetrator category: {top_perp['Category']} ({top_perp['Perpetrators']:,})")
    return path


# ── Figure 2: Incident Map ────────────────────────────────────────────────────

def plot_incident_map(clean: pd.DataFrame, fig_dir=None):
    """
    Q: Where do shootings with a known perpetrator cluster?
    """
    _banner("FIGURE 2 | INCIDENT LOCATIONS")

    fig, ax = plt.subplots(figsize=(9, 9))
    for boro, grp in clean.groupby("BORO"):
        color = BORO_COLORS.get(str(boro).replace(" ", "_"), "gray")
        ax.scatter(grp["Longitude"], grp["Latitude"], s=4, alpha=0.4,
                   color=color, label=f"{boro} ({len(grp):,})")
    ax.set_title("Shooting Incidents by Borough\n(cleaned records only)")
    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_aspect("equal", adjustable="datalim")
    ax.legend(markerscale=4, fontsize=8)
    _source_note(ax)

    plt.tight_layout()
    path = _save(fig, "02_incident_map", fig_dir)

    if not clean.empty:
        counts = clean["BORO"].value_counts()
        print(f"  Borough with most cleaned incidents: {counts.idxmax()} ({counts.max():,})")
    return path


# ── Figure 3: Fatal Shootings by Borough ──────────────────────────────────────

def plot_fatal_shootings_by_borough(fatal: pd.DataFrame, fig_dir=None):
    """
    Q: How have fatal shootings moved year over year in each borough?
    """
    _banner("FIGURE 3 | FATAL SHOOTINGS BY BOROUGH")

    fig, axes = plt.subplots(1, 2, figsize=(15, 6))
    fig.suptitle("Fatal Shootings per Year", fontsize=14, fontweight="bold")

    ax = axes[0]
    for boro in BOROUGHS:
        ax.plot(fatal.index, fatal[boro], marker="o", linewidth=2,
                color=BORO_COLORS[boro], label=boro.replace("_", " ").title())
    ax.set_title("By Borough")
    ax.set_xlabel("Year")
    ax.set_ylabel("Fatal Shootings")
    ax.legend(fontsize=8)

    ax = axes[1]
    ax.bar(fatal.index, fatal["Total"], color=NEUTRAL, alpha=0.6, label="Citywide")
    ax.plot(fatal.index, fatal["Total"], marker="o", color=ACCENT, linewidth=2, label="Trend")
    ax.set_title("Citywide Total")
    ax.set_xlabel("Year")
    ax.set_ylabel("Fatal Shootings")
    fmt_thousands(ax)
    ax.legend(fontsize=8)
    _source_note(ax)

    plt.tight_layout()
    path = _save(fig, "03_fatal_shootings_by_borough", fig_dir)

    if not fatal.empty:
        print(f"  Deadliest year: {fatal['Total'].idxmax()} ({fatal['Total'].max():,} fatal shootings)")
        print(f"  Deadliest borough overall: {fatal[BOROUGHS].sum().idxmax()}")
    return path


# ── Figure 4: Shooting Share of Murders ───────────────────────────────────────

def plot_shooting_share_of_murders(share: pd.DataFrame, fig_dir=None):
    """
    Q: What fraction of each borough's murders were shootings?
    Undefined cells (no murders that year) are left as gaps.
    """
    _banner("FIGURE 4 | SHOOTING SHARE OF MURDERS")

    fig, axes = plt.subplots(1, 2, figsize=(15, 6))
    fig.suptitle("Murders Committed by Shooting (%)", fontsize=14, fontweight="bold")

    ax = axes[0]
    for boro in BOROUGHS:
        ax.plot(share.index, share[boro], marker="o", linewidth=1.5,
                color=BORO_COLORS[boro], label=boro.replace("_", " ").title())
    ax.plot(share.index, share["CITYWIDE"], color="black", linestyle="--",
            linewidth=2.5, label="Citywide")
    ax.set_title("By Borough")
    ax.set_xlabel("Year")
    ax.set_ylabel("% of Murders")
    ax.yaxis.set_major_formatter(mticker.PercentFormatter())
    ax.legend(fontsize=8)

    ax = axes[1]
    sns.heatmap(share[BOROUGHS].T, ax=ax, cmap=PALETTE, annot=True, fmt=".0f",
                linewidths=0.3, cbar_kws={"label": "% of Murders"})
    ax.set_title("Borough × Year Heatmap")
    ax.set_xlabel("Year")
    ax.set_ylabel("")
    _source_note(ax, CRIME_SOURCE)

    plt.tight_layout()
    path = _save(fig, "04_shooting_share_of_murders", fig_dir)

    if not share.empty:
        print(f"  Average citywide share: {share['CITYWIDE'].mean():.1f}%")
        print(f"  Highest borough average: {share[BOROUGHS].mean().idxmax()} "
              f"({share[BOROUGHS].mean().max():.1f}%)")
    return path


# ── Figure 5: Polynomial Model Comparison ─────────────────────────────────────

def plot_model_comparison(predictions: pd.DataFrame, summary: pd.DataFrame | None = None,
                          fig_dir=None):
    """
    Q: How closely do degree 3, 9 and 10 polynomials track the yearly count?
    Higher degrees always fit the observed years better; that is not evidence
    they generalise.
    """
    _banner("FIGURE 5 | POLYNOMIAL MODEL COMPARISON")

    degree_cols = [c for c in predictions.columns if c.startswith("Degree_")]
    styles = ["-", "--", ":", "-."]

    fig, ax = plt.subplots(figsize=(12, 6))
    ax.scatter(predictions["Year"], predictions["Murders_By_Shooting"], s=50,
               color="black", zorder=3, label="Actual")
    for i, col in enumerate(degree_cols):
        ax.plot(predictions["Year"], predictions[col], linewidth=2,
                linestyle=styles[i % len(styles)], label=col.replace("_", " "))
    ax.set_title("Citywide Fatal Shootings: Actual vs Polynomial Fits\n(in-sample fitted values)")
    ax.set_xlabel("Year")
    ax.set_ylabel("Fatal Shootings")
    fmt_thousands(ax)
    ax.legend()
    _source_note(ax)

    plt.tight_layout()
    path = _save(fig, "05_model_comparison", fig_dir)

    if summary is not None:
        print(summary.to_string(index=False))
    return path


# ── Pipeline Orchestrator ─────────────────────────────────────────────────────

def run_eda(tables: dict, fig_dir=None) -> list:
    """
    Draw every report figure from the tables produced by run_report.
    Figures are saved to `fig_dir` (FIG_DIR by default).
    """
    paths = [
        plot_category_counts(tables["category_counts"], fig_dir=fig_dir),
        plot_incident_map(tables["cleaned_shootings"], fig_dir=fig_dir),
        plot_fatal_shootings_by_borough(tables["fatal_shootings_by_borough"], fig_dir=fig_dir),
        plot_shooting_share_of_murders(tables["shooting_share"], fig_dir=fig_dir),
        plot_model_comparison(tables["model_predictions"], tables.get("model_summary"),
                              fig_dir=fig_dir),
    ]

    print("\n" + "=" * 60)
    print(f"✓ FIGURES COMPLETE — {len(paths)} figures saved to {paths[0].parent}/")
    print("=" * 60)
    return paths
