from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd

from .config import DATE_COL, TIME_COL, CleaningConfig

log = logging.getLogger(__name__)


def load_raw_data(path: Path, limit: int | None = None) -> pd.DataFrame:
    # Everything stays text: the murder flag is a "true"/"false" string and
    # blanks must survive until recode_blanks.
    df = pd.read_csv(path, nrows=limit, dtype=str, keep_default_na=False)
    log.info("Loaded %s rows x %s columns from %s", f"{len(df):,}", df.shape[1], path)
    return df


def drop_unused_columns(df: pd.DataFrame, config: CleaningConfig) -> pd.DataFrame:
    present = [col for col in config.drop_columns if col in df.columns]
    return df.drop(columns=present)


def parse_occurrence_columns(df: pd.DataFrame, config: CleaningConfig) -> pd.DataFrame:
    df = df.copy()
    df[DATE_COL] = pd.to_datetime(df[DATE_COL], format=config.date_format, errors="coerce")
    df[TIME_COL] = pd.to_datetime(df[TIME_COL], format=config.time_format, errors="coerce").dt.time
    bad_dates = int(df[DATE_COL].isna().sum())
    bad_times = int(df[TIME_COL].isna().sum())
    if bad_dates or bad_times:
        log.warning("Unparseable occurrence values: %s dates, %s times", bad_dates, bad_times)
    return df


def blank_to_missing(series: pd.Series) -> pd.Series:
    return series.where(series.astype(str).str.strip() != "", np.nan)


def recode_blanks(df: pd.DataFrame, config: CleaningConfig) -> pd.DataFrame:
    df = df.copy()
    for col in config.blank_recode_columns:
        if col in df.columns:
            df[col] = blank_to_missing(df[col])
    return df


def drop_sparse_columns(df: pd.DataFrame, config: CleaningConfig) -> pd.DataFrame:
    present = [col for col in config.sparse_columns if col in df.columns]
    for col in present:
        share = blank_to_missing(df[col]).isna().mean() if len(df) else 0.0
        log.info("Dropping sparse column %s (%.1f%% missing)", col, share * 100)
    return df.drop(columns=present)


def clean_dataframe(df: pd.DataFrame, config: CleaningConfig | None = None) -> pd.DataFrame:
    config = config or CleaningConfig()
    df = drop_unused_columns(df, config)
    df = parse_occurrence_columns(df, config)
    df = recode_blanks(df, config)
    df = drop_sparse_columns(df, config)
    return df
