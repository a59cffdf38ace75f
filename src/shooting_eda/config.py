from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

# Data and reports live under the directory the pipeline is run from.
BASE_DIR = Path.cwd()
SOURCE_URL = (
    "https://data.cityofnewyork.us/api/views/833y-fiy8/rows.csv?accessType=DOWNLOAD"
)
RAW_PATH = BASE_DIR / "data" / "raw" / "NYPD_Shooting_Incident_Data__Historic_.csv"
REPORTS_DIR = BASE_DIR / "reports"
SUMMARY_PATH = REPORTS_DIR / "eda_summary.md"
PROFILE_JSON = REPORTS_DIR / "inspection_metrics.json"

DATE_COL = "OCCUR_DATE"
TIME_COL = "OCCUR_TIME"
FLAG_COL = "STATISTICAL_MURDER_FLAG"
LOCATION_KEYS = ["BORO", DATE_COL, TIME_COL, "PRECINCT"]
VICTIM_FIELDS = ["VIC_AGE_GROUP", "VIC_SEX", "VIC_RACE"]
PERP_FIELDS = ["PERP_AGE_GROUP", "PERP_SEX", "PERP_RACE"]
SAMPLE_COLUMNS = [
    "BORO",
    DATE_COL,
    TIME_COL,
    "PRECINCT",
    FLAG_COL,
    "VIC_AGE_GROUP",
]


@dataclass(frozen=True)
class SentinelConfig:
    """Source-specific codes for outcomes and unusable demographic values."""

    fatal_flag: str = "true"
    non_fatal_flag: str = "false"
    bad_age_codes: Tuple[str, ...] = ("UNKNOWN", "(null)", "1020", "940", "224", "1028", "1022")
    unknown_sex_codes: Tuple[str, ...] = ("U", "(null)")
    unknown_race_codes: Tuple[str, ...] = ("UNKNOWN", "(null)")
    sex_labels: Tuple[Tuple[str, str], ...] = (("M", "Male"), ("F", "Female"), ("U", "Unknown"))


@dataclass(frozen=True)
class CleaningConfig:
    drop_columns: Tuple[str, ...] = (
        "INCIDENT_KEY",
        "JURISDICTION_CODE",
        "X_COORD_CD",
        "Y_COORD_CD",
        "Latitude",
        "Longitude",
        "Lon_Lat",
    )
    blank_recode_columns: Tuple[str, ...] = tuple(PERP_FIELDS + VICTIM_FIELDS + ["LOCATION_DESC"])
    # Chosen by inspection of the source; mostly empty in every release.
    sparse_columns: Tuple[str, ...] = (
        "LOCATION_DESC",
        "LOC_OF_OCCUR_DESC",
        "LOC_CLASSFCTN_DESC",
    )
    date_format: str = "%m/%d/%Y"
    time_format: str = "%H:%M:%S"


@dataclass(frozen=True)
class PipelineConfig:
    url: str = SOURCE_URL
    raw_path: Path = RAW_PATH
    reports_dir: Path = REPORTS_DIR
    timeout: float = 60.0
    refresh: bool = False
    limit: int | None = None
    sentinels: SentinelConfig = field(default_factory=SentinelConfig)
    cleaning: CleaningConfig = field(default_factory=CleaningConfig)

    @property
    def figures_dir(self) -> Path:
        return self.reports_dir / "figures"

    @property
    def summary_path(self) -> Path:
        return self.reports_dir / SUMMARY_PATH.name

    @property
    def profile_path(self) -> Path:
        return self.reports_dir / PROFILE_JSON.name


def raw_path_for_url(url: str, raw_dir: Path | None = None) -> Path:
    """Cache location for a source URL; other exports never share the default file."""
    raw_dir = raw_dir or RAW_PATH.parent
    if url == SOURCE_URL:
        return raw_dir / RAW_PATH.name
    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()[:12]
    return raw_dir / f"source_{digest}.csv"
