from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.linear_model import LinearRegression
from sklearn.metrics import r2_score

from .aggregate import MURDERS, SHOOTINGS
from .config import DATE_COL, TIME_COL

log = logging.getLogger(__name__)

CUM_SHOOTINGS = "Cum_Shootings"
CUM_MURDERS = "Cum_Murders"
PRED_MURDERS = "Pred_Murders"


class DegenerateFitError(ValueError):
    """Raised when the predictor cannot support a linear fit."""


@dataclass(frozen=True)
class ModelFit:
    slope: float
    intercept: float
    r_squared: float
    n_obs: int

    def predict(self, x) -> np.ndarray:
        return self.intercept + self.slope * np.asarray(x, dtype=float)


def cumulative_totals(victims: pd.DataFrame) -> pd.DataFrame:
    ordered = victims.sort_values(
        [DATE_COL, TIME_COL],
        na_position="last",
        kind="mergesort",
    ).reset_index(drop=True)
    ordered[CUM_SHOOTINGS] = ordered[SHOOTINGS].cumsum()
    ordered[CUM_MURDERS] = ordered[MURDERS].cumsum()
    return ordered


def fit_murder_model(x: pd.Series, y: pd.Series) -> ModelFit:
    """Ordinary least squares of ``y`` on ``x`` with an intercept."""
    x_values = np.asarray(x, dtype=float)
    y_values = np.asarray(y, dtype=float)
    if x_values.shape[0] < 2:
        raise DegenerateFitError(f"Need at least two observations, got {x_values.shape[0]}")
    if np.all(x_values == x_values[0]):
        raise DegenerateFitError("Predictor has zero variance; the fit is undefined")

    model = LinearRegression()
    model.fit(x_values.reshape(-1, 1), y_values)
    fitted = model.predict(x_values.reshape(-1, 1))
    result = ModelFit(
        slope=float(model.coef_[0]),
        intercept=float(model.intercept_),
        r_squared=float(r2_score(y_values, fitted)),
        n_obs=int(x_values.shape[0]),
    )
    log.info(
        "Fitted murders = %.4f + %.4f * shootings (R^2=%.3f, n=%s)",
        result.intercept,
        result.slope,
        result.r_squared,
        result.n_obs,
    )
    return result


def build_model_frame(victims: pd.DataFrame) -> tuple[pd.DataFrame, ModelFit]:
    frame = cumulative_totals(victims)
    fit = fit_murder_model(frame[CUM_SHOOTINGS], frame[CUM_MURDERS])
    frame[PRED_MURDERS] = fit.predict(frame[CUM_SHOOTINGS])
    return frame, fit
