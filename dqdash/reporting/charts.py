from typing import Any, Dict, List, Optional

import pandas as pd
import plotly.express as px

from dqdash.report.models import AnalysisReport

COLORS = ["#8884d8", "#82ca9d", "#ffc658", "#ff7300", "#00ff88", "#ff0088"]

QUALITY_COLORS = {
    "good": "#16a34a",     # green
    "warning": "#ca8a04",  # yellow
    "poor": "#dc2626",     # red
}

def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None

def _records(items: Any, *keys: str) -> List[Dict[str, Any]]:
    """Keep the dict entries that carry every key in `keys`."""
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict) and all(k in item for k in keys)]

def _tidy(fig):
    fig.update_layout(margin=dict(l=10, r=10, t=10, b=10))
    return fig

def quality_level(score: Any) -> str:
    value = _number(score) or 0.0
    if value >= 90:
        return "good"
    if value >= 70:
        return "warning"
    return "poor"

def quality_scores(report: AnalysisReport) -> Dict[str, float]:
    scores = {}
    for metric, score in report.data_quality.items():
        value = _number(score)
        if value is not None:
            scores[metric.replace("_", " ")] = value
    return scores

def plot_data_types(report: AnalysisReport):
    data_types = report.basic_info.get("data_types")
    if not isinstance(data_types, dict) or not data_types:
        return None
    # Either {"int64": 3} counts or {"column": "int64"} per-column dtypes
    counts = {}
    for key, value in data_types.items():
        if _number(value) is not None:
            counts[key] = counts.get(key, 0) + _number(value)
        else:
            counts[str(value)] = counts.get(str(value), 0) + 1
    df = pd.DataFrame({"Type": list(counts.keys()), "Count": list(counts.values())})
    fig = px.pie(df, names="Type", values="Count", color_discrete_sequence=COLORS)
    fig.update_traces(textinfo="label+value")
    return _tidy(fig)

def plot_quality_scores(report: AnalysisReport):
    scores = quality_scores(report)
    if not scores:
        return None
    df = pd.DataFrame({"Metric": list(scores.keys()), "Score": list(scores.values())})
    df["Level"] = [quality_level(s) for s in df["Score"]]
    fig = px.bar(df, x="Metric", y="Score", color="Level", color_discrete_map=QUALITY_COLORS, text="Score")
    fig.update_traces(texttemplate="%{text:.1f}%")
    fig.update_layout(yaxis=dict(range=[0, 100]), showlegend=False)
    return _tidy(fig)

def plot_missing(report: AnalysisReport):
    rows = _records(report.missing_data.get("columns_with_missing"), "column", "percentage")
    if not rows:
        return None
    df = pd.DataFrame(rows)
    fig = px.bar(df, x="percentage", y="column", orientation="h",
                 color_discrete_sequence=["#ef4444"], labels={"percentage": "Missing %", "column": "Column"})
    return _tidy(fig)

def plot_outliers(report: AnalysisReport):
    rows = _records(report.outliers.get("columns_with_outliers"), "column", "outlier_count")
    if not rows:
        return None
    df = pd.DataFrame(rows)
    fig = px.scatter(df, x="column", y="outlier_count",
                     color_discrete_sequence=["#fbbf24"], labels={"outlier_count": "Outliers", "column": "Column"})
    fig.update_traces(marker=dict(size=14))
    return _tidy(fig)

def plot_correlations(report: AnalysisReport):
    rows = _records(report.correlation_matrix, "var1", "var2", "correlation")
    if not rows:
        return None
    df = pd.DataFrame(rows)
    df["Pair"] = df["var1"].astype(str) + " / " + df["var2"].astype(str)
    fig = px.bar(df, x="Pair", y="correlation", color_discrete_sequence=["#06b6d4"],
                 labels={"correlation": "Correlation"})
    fig.update_layout(yaxis=dict(range=[-1, 1]))
    return _tidy(fig)

def column_statistics_frame(report: AnalysisReport) -> pd.DataFrame:
    stats = {col: s for col, s in report.column_statistics.items() if isinstance(s, dict)}
    if not stats:
        return pd.DataFrame()
    df = pd.DataFrame.from_dict(stats, orient="index")
    df.index.name = "column"
    return df

def _recommendation_text(item: Any) -> str:
    if isinstance(item, dict):
        return str(item.get("description") or item.get("text") or item)
    return str(item)

def fallback_recommendations(report: AnalysisReport, bucket: str) -> List[str]:
    if bucket == "critical":
        return [
            f"Treat missing values ({report.missing_data.get('total_missing_percentage', 0)}%)",
            f"Remove duplicates ({report.duplicates.get('total_duplicates', 0)} rows)",
        ]
    if bucket == "moderate":
        return ["Review outliers in numeric columns", "Validate data consistency"]
    return ["Normalize numeric columns", "Encode categorical variables"]

def recommendation_lines(report: AnalysisReport, bucket: str) -> List[str]:
    """Suggestions for one severity bucket, derived from the report when the bucket is empty."""
    items = report.recommendations.get(bucket)
    if isinstance(items, list) and items:
        return [_recommendation_text(item) for item in items]
    return fallback_recommendations(report, bucket)
