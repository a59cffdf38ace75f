import json

import pytest

from shooting_eda.aggregate import aggregate_perpetrators, aggregate_victims
from shooting_eda.modeling import ModelFit, build_model_frame
from shooting_eda.report import (
    build_summary_markdown,
    compute_quality_metrics,
    describe_missing,
    save_json,
    summarize_schema,
)
from shooting_eda.visuals import run_eda_outputs


@pytest.fixture
def views(clean_df):
    victims = aggregate_victims(clean_df)
    perps = aggregate_perpetrators(clean_df)
    model_frame, fit = build_model_frame(victims)
    return victims, perps, model_frame, fit


def test_run_eda_outputs_writes_every_figure(tmp_path, views):
    victims, perps, model_frame, _ = views
    figures_dir = tmp_path / "figures"
    figures = run_eda_outputs(victims, perps, model_frame, figures_dir)
    assert set(figures) == {
        "incidents_by_borough",
        "victims_by_vic_sex",
        "victims_by_vic_age_group",
        "victims_by_vic_race",
        "perpetrators_by_perp_age_group",
        "perpetrators_by_perp_sex",
        "perpetrators_by_perp_race",
        "model_fit",
    }
    for path in figures.values():
        assert (figures_dir / path.split("/")[-1]).stat().st_size > 0


def test_quality_metrics(clean_df, views):
    victims = views[0]
    metrics = compute_quality_metrics(clean_df, victims, excluded_flags=1)
    assert metrics["records"] == 6
    assert metrics["counted_incidents"] == 5
    assert metrics["counted_murders"] == 2
    assert metrics["excluded_flag_rows"] == 1
    assert metrics["date_min"] == "2020-01-02"
    assert metrics["date_max"] == "2021-12-31"
    assert metrics["top_boroughs"]["BRONX"] == 2
    assert metrics["missing_fraction"]["OCCUR_DATE"] == pytest.approx(round(1 / 6, 4))


def test_summarize_schema_preview(clean_df):
    profile = summarize_schema(clean_df, ["BORO", "OCCUR_DATE", "NOT_A_COLUMN"])
    assert profile["rows"] == 6
    assert profile["sample_columns"] == ["BORO", "OCCUR_DATE"]
    assert len(profile["sample_rows"]) == 5
    assert "OCCUR_DATE" in profile["datetime_columns"]


def test_describe_missing_without_gaps():
    assert describe_missing({"BORO": 0.0}) == "- No missing data detected."


def test_summary_mentions_caveat_and_model(clean_df, views):
    victims = views[0]
    metrics = compute_quality_metrics(clean_df, victims, excluded_flags=1)
    fit = ModelFit(slope=0.2, intercept=1.0, r_squared=0.99, n_obs=6)
    text = build_summary_markdown(metrics, fit, {"model_fit": "reports/figures/model.png"})
    assert "1 rows carry a murder flag" in text
    assert "one murder for every 5.0 shootings" in text
    assert "`reports/figures/model.png`" in text


def test_save_json_creates_parent(tmp_path):
    path = tmp_path / "nested" / "profile.json"
    save_json({"records": 3}, path)
    assert json.loads(path.read_text()) == {"records": 3}


def test_summarize_schema_keeps_literal_nan_text(clean_df):
    df = clean_df.copy()
    df.loc[0, "BORO"] = "nan"
    profile = summarize_schema(df, ["BORO", "OCCUR_DATE", "OCCUR_TIME"])
    rows = profile["sample_rows"]
    assert rows[0]["BORO"] == "nan"
    assert rows[0]["OCCUR_TIME"] == "23:10:00"
    assert rows[2]["BORO"] == "BROOKLYN"


def test_summarize_schema_blanks_missing_values(clean_df):
    profile = summarize_schema(clean_df.iloc[[5]], ["OCCUR_DATE", "OCCUR_TIME", "VIC_RACE"])
    assert profile["sample_rows"] == [{"OCCUR_DATE": "", "OCCUR_TIME": "", "VIC_RACE": ""}]
