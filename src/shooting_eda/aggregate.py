from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd

from .config import FLAG_COL, LOCATION_KEYS, PERP_FIELDS, VICTIM_FIELDS, SentinelConfig

log = logging.getLogger(__name__)

MURDERS = "Total_Murders"
NON_MURDERS = "Total_NonMurders"
SHOOTINGS = "Total_Shootings"


def _require(df: pd.DataFrame, columns: Iterable[str]) -> None:
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise KeyError(f"Missing columns: {', '.join(missing)}")


def count_outcomes(
    df: pd.DataFrame,
    keys: Sequence[str],
    sentinels: SentinelConfig,
    include_non_fatal: bool = True,
) -> pd.DataFrame:
    """Count fatal, non-fatal and total incidents per key group.

    Flags are matched case-sensitively against the two sentinels. A row whose
    flag is blank or holds any other value counts toward none of the three
    totals, although its group is still emitted.
    """
    keys = list(keys)
    _require(df, keys + [FLAG_COL])
    flags = df[FLAG_COL]
    counted = df[keys].assign(
        **{
            MURDERS: flags.eq(sentinels.fatal_flag).astype(int),
            NON_MURDERS: flags.eq(sentinels.non_fatal_flag).astype(int),
        }
    )
    agg = (
        counted.groupby(keys, dropna=False, sort=False)[[MURDERS, NON_MURDERS]]
        .sum()
        .reset_index()
    )
    agg[SHOOTINGS] = agg[MURDERS] + agg[NON_MURDERS]
    if not include_non_fatal:
        agg = agg.drop(columns=NON_MURDERS)
    return agg


def count_excluded_flags(df: pd.DataFrame, sentinels: SentinelConfig) -> int:
    known = [sentinels.fatal_flag, sentinels.non_fatal_flag]
    return int((~df[FLAG_COL].isin(known)).sum())


def label_incident_type(murders: pd.Series) -> pd.Series:
    return pd.Series(
        np.where(murders > 0, "Fatal", "Non-Fatal"),
        index=murders.index,
        name="Incident_Type",
    )


def label_victim_sex(series: pd.Series, sentinels: SentinelConfig) -> pd.Series:
    return series.replace(dict(sentinels.sex_labels))


def flag_availability(series: pd.Series, bad_codes: Iterable[str]) -> pd.Series:
    unusable = series.isna() | series.isin(list(bad_codes))
    return pd.Series(np.where(unusable, "No", "Yes"), index=series.index)


def aggregate_victims(df: pd.DataFrame, sentinels: SentinelConfig | None = None) -> pd.DataFrame:
    sentinels = sentinels or SentinelConfig()
    keys: List[str] = LOCATION_KEYS + VICTIM_FIELDS
    agg = count_outcomes(df, keys, sentinels)
    agg["Incident_Type"] = label_incident_type(agg[MURDERS])
    agg["VIC_SEX"] = label_victim_sex(agg["VIC_SEX"], sentinels)
    log.info("Victim view: %s groups from %s rows", f"{len(agg):,}", f"{len(df):,}")
    return agg


def aggregate_perpetrators(df: pd.DataFrame, sentinels: SentinelConfig | None = None) -> pd.DataFrame:
    sentinels = sentinels or SentinelConfig()
    keys: List[str] = LOCATION_KEYS + PERP_FIELDS
    agg = count_outcomes(df, keys, sentinels, include_non_fatal=False)
    agg["Perp_Age_Avail"] = flag_availability(agg["PERP_AGE_GROUP"], sentinels.bad_age_codes)
    agg["Perp_Sex_Avail"] = flag_availability(agg["PERP_SEX"], sentinels.unknown_sex_codes)
    agg["Perp_Race_Avail"] = flag_availability(agg["PERP_RACE"], sentinels.unknown_race_codes)
    log.info("Perpetrator view: %s groups from %s rows", f"{len(agg):,}", f"{len(df):,}")
    return agg
