"""
trend_modeling.py
Polynomial trend models of the yearly citywide fatal-shooting count.

Each model is an ordinary least-squares fit on an orthogonal polynomial basis
of Year. Predictions are in-sample fitted values at the observed years,
rounded to whole shootings; nothing is forecast beyond the data.
"""

import logging

import numpy as np
import pandas as pd
import statsmodels.api as sm

from report_config import MODEL_DEGREES

log = logging.getLogger(__name__)

TARGET = "Murders_By_Shooting"


def orthogonal_polynomial_basis(x, degree: int) -> np.ndarray:
    """
    Orthonormal polynomial columns of degree 1..`degree` evaluated at `x`.

    Built from the QR decomposition of the centred Vandermonde matrix, the
    same construction as R's poly(). The constant column is dropped; the
    caller adds an intercept.
    """
    x = np.asarray(x, dtype=float)
    if degree < 1:
        raise ValueError(f"degree must be at least 1, got {degree}")
    if degree >= len(np.unique(x)):
        raise ValueError(f"degree {degree} needs more than {len(np.unique(x))} distinct points")

    centred = x - x.mean()
    # Scaling leaves Q unchanged and keeps high powers well conditioned
    scale = np.abs(centred).max()
    vander = np.vander(centred / scale, degree + 1, increasing=True)

    q, r = np.linalg.qr(vander)
    z = q * np.diag(r)
    z = z / np.sqrt((z ** 2).sum(axis=0))
    return z[:, 1:]


def fit_polynomial_trend(years, counts, degree: int):
    """OLS of counts on intercept + orthogonal polynomial of years; returns statsmodels results."""
    basis = orthogonal_polynomial_basis(years, degree)
    X = sm.add_constant(basis, prepend=True, has_constant="add")
    fit = sm.OLS(np.asarray(counts, dtype=float), X).fit(method="qr")
    log.info(f"Degree {degree:>2} fit: SSR={fit.ssr:,.2f}  R²={fit.rsquared:.4f}  "
             f"df_resid={fit.df_resid:.0f}")
    return fit


def _series(ratio: pd.DataFrame) -> pd.Series:
    return ratio[TARGET].sort_index().astype(float)


def fit_models(ratio: pd.DataFrame, degrees=MODEL_DEGREES) -> dict:
    series = _series(ratio)
    return {d: fit_polynomial_trend(series.index.to_numpy(), series.to_numpy(), d) for d in degrees}


def prediction_table(ratio: pd.DataFrame, fits: dict) -> pd.DataFrame:
    """Year, actual count and one rounded prediction column per fitted degree."""
    series = _series(ratio)
    table = pd.DataFrame({"Year": series.index.to_numpy().astype(int),
                          TARGET: series.to_numpy().astype(int)})
    for degree, fit in fits.items():
        # np.rint rounds half to even, same as the percentage rounding
        table[f"Degree_{degree}"] = np.rint(np.asarray(fit.fittedvalues)).astype(int)
    return table


def fit_polynomial_trends(ratio: pd.DataFrame, degrees=MODEL_DEGREES) -> pd.DataFrame:
    return prediction_table(ratio, fit_models(ratio, degrees))


def summarize_fits(ratio: pd.DataFrame, fits: dict) -> pd.DataFrame:
    """One row per degree: residual sum of squares, R², residual df, RMSE of rounded predictions."""
    actual = _series(ratio).to_numpy()
    rows = []
    for degree, fit in fits.items():
        rounded = np.rint(np.asarray(fit.fittedvalues))
        rows.append({
            "Degree": degree,
            "Parameters": int(len(fit.params)),
            "Residual_DF": int(fit.df_resid),
            "SSR": round(float(fit.ssr), 2),
            "R_Squared": round(float(fit.rsquared), 4),
            "RMSE_Rounded": round(float(np.sqrt(np.mean((rounded - actual) ** 2))), 2),
        })
    return pd.DataFrame(rows)
