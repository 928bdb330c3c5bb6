import sys
import os
import csv
import io
import json
import shutil

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dqdash.report.models import AnalysisReport, normalize_report
from dqdash.reporting import charts
from dqdash.reporting.exporter import Exporter
from tests.fakes import SAMPLE_REPORT

def test_quality_levels():
    assert charts.quality_level(95) == "good"
    assert charts.quality_level(90) == "good"
    assert charts.quality_level(89.9) == "warning"
    assert charts.quality_level(70) == "warning"
    assert charts.quality_level(69.9) == "poor"
    assert charts.quality_level("n/a") == "poor"

def test_quality_scores_skip_non_numeric():
    report = normalize_report({"data_quality": {"completeness": 80, "data_validity": "high"}})
    scores = charts.quality_scores(report)
    assert scores["completeness"] == 80.0
    assert "data validity" not in scores
    assert scores["uniqueness"] == 0.0

def test_charts_from_full_report():
    report = normalize_report(SAMPLE_REPORT)
    pie = charts.plot_data_types(report)
    assert pie.data[0].type == "pie"
    assert sorted(pie.data[0].labels) == ["int64", "object"]

    assert charts.plot_quality_scores(report).data[0].type == "bar"
    missing = charts.plot_missing(report)
    assert missing.data[0].orientation == "h"
    assert charts.plot_outliers(report).data[0].type == "scatter"
    corr = charts.plot_correlations(report)
    assert list(corr.data[0].x) == ["age / income"]

def test_charts_from_empty_report():
    report = normalize_report({})
    assert charts.plot_data_types(report) is None
    assert charts.plot_missing(report) is None
    assert charts.plot_outliers(report) is None
    assert charts.plot_correlations(report) is None
    # default scores are still plotted (all zero)
    assert charts.plot_quality_scores(report) is not None
    assert charts.column_statistics_frame(report).empty

def test_per_column_dtypes_are_counted():
    report = normalize_report({"basic_info": {"data_types": {"a": "int64", "b": "int64", "c": "object"}}})
    pie = charts.plot_data_types(report)
    values = dict(zip(pie.data[0].labels, pie.data[0].values))
    assert values == {"int64": 2, "object": 1}

def test_malformed_entries_are_skipped():
    report = normalize_report({"missing_data": {"columns_with_missing": ["age", {"column": "x"}]},
                               "correlation_matrix": [None, {"var1": "a"}]})
    assert charts.plot_missing(report) is None
    assert charts.plot_correlations(report) is None

def test_recommendation_lines():
    report = normalize_report(SAMPLE_REPORT)
    assert charts.recommendation_lines(report, "critical") == ["Impute age"]
    assert charts.recommendation_lines(report, "optional") == ["Scale income"]
    # empty bucket falls back to generic suggestions
    assert charts.recommendation_lines(report, "moderate") == ["Review outliers in numeric columns",
                                                                "Validate data consistency"]
    critical = charts.recommendation_lines(normalize_report({}), "critical")
    assert critical[0] == "Treat missing values (0%)"

def test_column_statistics_frame():
    df = charts.column_statistics_frame(normalize_report(SAMPLE_REPORT))
    assert list(df.index) == ["age", "income"]
    assert df.loc["age", "mean"] == 30.5

def test_exporter_formats():
    report = normalize_report({"name": "sales.csv", "analysis": SAMPLE_REPORT})

    data = json.loads(Exporter.to_json(report))
    assert data["basic_info"]["total_rows"] == 100
    assert "exported_at" in data

    rows = list(csv.reader(io.StringIO(Exporter.to_csv(report))))
    assert rows[0] == ["column", "mean", "min", "max", "std"]
    assert rows[1] == ["age", "30.5", "18", "70", ""]
    assert rows[2][0] == "income"

    html = Exporter.to_html(report)
    assert "Dataset Quality Report: sales.csv" in html
    assert "Completeness: 98.3%" in html
    assert "Impute age" in html

def test_exporter_escapes_html():
    report = normalize_report({"name": "<script>.csv", "recommendations": {"critical": ["<b>x</b>"]}})
    html = Exporter.to_html(report)
    assert "<script>" not in html
    assert "&lt;b&gt;x&lt;/b&gt;" in html

def test_exporter_save():
    out_dir = "tests/outputs"
    saved = Exporter.save(normalize_report(SAMPLE_REPORT), out_dir=out_dir)
    assert set(saved) == {"analysis.json", "column_statistics.csv", "report.html"}
    for path in saved.values():
        assert os.path.exists(path)

    # Clean up
    shutil.rmtree(out_dir)

def test_null_sub_fields_render_everywhere():
    report = normalize_report({
        "missing_data": {"columns_with_missing": None, "total_missing_percentage": None},
        "duplicates": {"columns_contributing": None},
        "outliers": {"columns_with_outliers": None},
        "recommendations": {"critical": None},
    })
    html = Exporter.to_html(report)
    assert "Missing Values (0% total)" in html
    assert "<li>-</li>" in html
    assert charts.plot_missing(report) is None
    assert charts.plot_outliers(report) is None
    assert charts.recommendation_lines(report, "critical")[0] == "Treat missing values (0%)"
    json.loads(Exporter.to_json(report))

def test_html_tolerates_unnormalized_sections():
    # a report built directly, bypassing normalize_report
    report = AnalysisReport(missing_data={"columns_with_missing": None})
    assert "<li>-</li>" in Exporter.to_html(report)
