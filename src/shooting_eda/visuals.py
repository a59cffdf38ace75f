from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

import pandas as pd
import seaborn as sns
from matplotlib import pyplot as plt

from .aggregate import SHOOTINGS
from .modeling import CUM_MURDERS, CUM_SHOOTINGS, PRED_MURDERS

log = logging.getLogger(__name__)

VICTIM_DIMENSIONS = {
    "VIC_SEX": "Victim Sex",
    "VIC_AGE_GROUP": "Victim Age Group",
    "VIC_RACE": "Victim Race",
}
PERP_DIMENSIONS = {
    "PERP_AGE_GROUP": ("Perp_Age_Avail", "Perpetrator Age Group"),
    "PERP_SEX": ("Perp_Sex_Avail", "Perpetrator Sex"),
    "PERP_RACE": ("Perp_Race_Avail", "Perpetrator Race"),
}
INCIDENT_PALETTE = {"Fatal": "#C43F3A", "Non-Fatal": "#1AAAE6"}


def configure_matplotlib() -> None:
    sns.set_theme(style="whitegrid", context="talk")
    plt.rcParams.update({"axes.spines.right": False, "axes.spines.top": False})


def _sum_by(df: pd.DataFrame, columns) -> pd.DataFrame:
    return (
        df.dropna(subset=columns)
        .groupby(columns, observed=True)[SHOOTINGS]
        .sum()
        .reset_index()
    )


def plot_incidents_by_borough(victims: pd.DataFrame, figures_dir: Path) -> Path:
    totals = _sum_by(victims, ["BORO", "Incident_Type"])
    order = (
        totals.groupby("BORO")[SHOOTINGS].sum().sort_values(ascending=False).index.tolist()
    )
    fig, ax = plt.subplots(figsize=(12, 6))
    sns.barplot(
        data=totals,
        x="BORO",
        y=SHOOTINGS,
        hue="Incident_Type",
        order=order,
        palette=INCIDENT_PALETTE,
        ax=ax,
    )
    ax.set_title("Shooting Incidents by Borough")
    ax.set_xlabel("")
    ax.set_ylabel("Incidents")
    ax.legend(title="")
    path = figures_dir / "incidents_by_borough.png"
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def plot_victim_dimension(victims: pd.DataFrame, column: str, figures_dir: Path) -> Path:
    """Victim incident counts for one demographic field, one panel per borough."""
    totals = _sum_by(victims, ["BORO", column])
    order = sorted(totals[column].astype(str).unique())
    totals[column] = totals[column].astype(str)
    grid = sns.catplot(
        data=totals,
        kind="bar",
        x=column,
        y=SHOOTINGS,
        col="BORO",
        col_wrap=3,
        order=order,
        color="#0B5ED7",
        height=4,
        aspect=1.2,
        sharey=False,
    )
    grid.set_titles("{col_name}")
    grid.set_axis_labels(VICTIM_DIMENSIONS.get(column, column), "Incidents")
    grid.set_xticklabels(rotation=45, ha="right")
    grid.figure.suptitle(f"Shooting Incidents by {VICTIM_DIMENSIONS.get(column, column)}", y=1.02)
    path = figures_dir / f"victims_by_{column.lower()}.png"
    grid.figure.tight_layout()
    grid.figure.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(grid.figure)
    return path


def plot_perpetrator_dimension(perps: pd.DataFrame, column: str, figures_dir: Path) -> Path:
    avail_col, label = PERP_DIMENSIONS[column]
    usable = perps[perps[avail_col] == "Yes"]
    counts = usable.groupby(column)[SHOOTINGS].sum().sort_values(ascending=False)
    fig, ax = plt.subplots(figsize=(10, 6))
    sns.barplot(x=counts.index.astype(str), y=counts.values, color="#F1B434", ax=ax)
    ax.set_title(f"Shooting Incidents by {label} (known values only)")
    ax.set_xlabel(label)
    ax.set_ylabel("Incidents")
    ax.tick_params(axis="x", rotation=45)
    path = figures_dir / f"perpetrators_by_{column.lower()}.png"
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def plot_model_fit(model_frame: pd.DataFrame, figures_dir: Path) -> Path:
    fig, ax = plt.subplots(figsize=(12, 6))
    ax.plot(model_frame[CUM_SHOOTINGS], model_frame[CUM_MURDERS], color="#0B5ED7", label="Actual")
    ax.plot(
        model_frame[CUM_SHOOTINGS],
        model_frame[PRED_MURDERS],
        color="#C43F3A",
        linestyle="--",
        label="Predicted",
    )
    ax.set_title("Cumulative Murders vs Cumulative Shootings")
    ax.set_xlabel("Cumulative Shootings")
    ax.set_ylabel("Cumulative Murders")
    ax.legend()
    path = figures_dir / "murders_vs_shootings_model.png"
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)
    return path


def run_eda_outputs(
    victims: pd.DataFrame,
    perps: pd.DataFrame,
    model_frame: pd.DataFrame,
    figures_dir: Path,
) -> Dict[str, str]:
    figures_dir.mkdir(parents=True, exist_ok=True)
    configure_matplotlib()
    outputs = {"incidents_by_borough": str(plot_incidents_by_borough(victims, figures_dir))}
    for column in VICTIM_DIMENSIONS:
        outputs[f"victims_by_{column.lower()}"] = str(plot_victim_dimension(victims, column, figures_dir))
    for column in PERP_DIMENSIONS:
        outputs[f"perpetrators_by_{column.lower()}"] = str(
            plot_perpetrator_dimension(perps, column, figures_dir)
        )
    outputs["model_fit"] = str(plot_model_fit(model_frame, figures_dir))
    log.info("Wrote %s figures to %s", len(outputs), figures_dir)
    return outputs
