from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .acquire import SourceUnreachableError, download_source
from .aggregate import aggregate_perpetrators, aggregate_victims, count_excluded_flags
from .cleaning import clean_dataframe, load_raw_data
from .config import REPORTS_DIR, SAMPLE_COLUMNS, SOURCE_URL, PipelineConfig, raw_path_for_url
from .modeling import DegenerateFitError, build_model_frame
from .report import build_summary_markdown, compute_quality_metrics, save_json, summarize_schema
from .visuals import run_eda_outputs

log = logging.getLogger(__name__)


def run_pipeline(config: PipelineConfig) -> dict:
    source = download_source(config.url, config.raw_path, timeout=config.timeout, refresh=config.refresh)
    raw_df = load_raw_data(source, config.limit)
    clean_df = clean_dataframe(raw_df, config.cleaning)

    excluded = count_excluded_flags(clean_df, config.sentinels)
    if excluded:
        log.warning(
            "%s rows have a murder flag outside %r/%r and are excluded from all counts",
            excluded,
            config.sentinels.fatal_flag,
            config.sentinels.non_fatal_flag,
        )
    victims = aggregate_victims(clean_df, config.sentinels)
    perps = aggregate_perpetrators(clean_df, config.sentinels)
    model_frame, fit = build_model_frame(victims)

    figures = run_eda_outputs(victims, perps, model_frame, config.figures_dir)
    metrics = compute_quality_metrics(clean_df, victims, excluded)
    payload = metrics | {
        "figures": figures,
        "model": {
            "slope": fit.slope,
            "intercept": fit.intercept,
            "r_squared": fit.r_squared,
            "n_obs": fit.n_obs,
        },
        "schema": summarize_schema(clean_df, SAMPLE_COLUMNS),
    }
    save_json(payload, config.profile_path)
    config.summary_path.write_text(build_summary_markdown(metrics, fit, figures), encoding="utf-8")
    log.info("Summary written to %s", config.summary_path)
    return payload


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the NYPD shooting incident inspection and EDA pipeline.")
    parser.add_argument("--url", default=SOURCE_URL, help="CSV export to download.")
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Download the source again even when a cached copy exists.",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Optional row limit for debugging.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=60.0,
        help="Download timeout in seconds.",
    )
    parser.add_argument(
        "--raw-path",
        type=Path,
        default=None,
        help="Local CSV cache to read, or to download into. Defaults to a file under data/raw named for --url.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=REPORTS_DIR,
        help="Directory for figures and reports.",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, ...).")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s - %(message)s",
    )
    config = PipelineConfig(
        url=args.url,
        raw_path=args.raw_path or raw_path_for_url(args.url),
        reports_dir=args.output_dir,
        timeout=args.timeout,
        refresh=args.refresh,
        limit=args.limit,
    )
    try:
        run_pipeline(config)
    except (SourceUnreachableError, DegenerateFitError) as exc:
        log.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
