import copy
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

RECOMMENDATION_BUCKETS = ("critical", "moderate", "optional")
QUALITY_METRICS = ("completeness", "consistency", "validity", "uniqueness")

# Defaults for every section of a report. Dict sections are merged key by key,
# so a payload that only carries part of a section still comes out complete.
SECTION_DEFAULTS: Dict[str, Any] = {
    "basic_info": {"total_rows": 0, "total_columns": 0, "file_size": "0 B", "data_types": {}},
    "missing_data": {"columns_with_missing": [], "total_missing_percentage": 0},
    "duplicates": {"total_duplicates": 0, "percentage": 0, "columns_contributing": []},
    "data_quality": {metric: 0 for metric in QUALITY_METRICS},
    "outliers": {"columns_with_outliers": []},
    "correlation_matrix": [],
    "column_statistics": {},
    "recommendations": {bucket: [] for bucket in RECOMMENDATION_BUCKETS},
}


class AnalysisReport(BaseModel):
    basic_info: Dict[str, Any] = Field(default_factory=lambda: copy.deepcopy(SECTION_DEFAULTS["basic_info"]))
    missing_data: Dict[str, Any] = Field(default_factory=lambda: copy.deepcopy(SECTION_DEFAULTS["missing_data"]))
    duplicates: Dict[str, Any] = Field(default_factory=lambda: copy.deepcopy(SECTION_DEFAULTS["duplicates"]))
    data_quality: Dict[str, Any] = Field(default_factory=lambda: copy.deepcopy(SECTION_DEFAULTS["data_quality"]))
    outliers: Dict[str, Any] = Field(default_factory=lambda: copy.deepcopy(SECTION_DEFAULTS["outliers"]))
    correlation_matrix: List[Any] = Field(default_factory=list)
    column_statistics: Dict[str, Any] = Field(default_factory=dict)
    recommendations: Dict[str, Any] = Field(default_factory=lambda: copy.deepcopy(SECTION_DEFAULTS["recommendations"]))
    analysis_status: str = "unknown"

    # Identifier of a stored analysis, when the backend returns one
    analysis_id: Optional[Union[int, str]] = None
    name: Optional[str] = None


class AnalysisSummary(BaseModel):
    """One entry of the /analyses/ listing."""

    model_config = ConfigDict(extra="allow")

    id: Any = None
    name: Optional[str] = None
    created_at: Optional[str] = None
    analysis_status: Optional[str] = None

    @property
    def label(self) -> str:
        title = self.name or f"Analysis {self.id}"
        if self.created_at:
            return f"{title} ({self.created_at})"
        return title


def _section(payload: Mapping[str, Any], key: str) -> Any:
    default = copy.deepcopy(SECTION_DEFAULTS[key])
    value = payload.get(key)
    if isinstance(default, dict):
        if not isinstance(value, dict):
            return default
        merged = default
        for sub_key, sub_value in value.items():
            sub_default = default.get(sub_key)
            # null or a scalar where a list/dict belongs keeps the default
            if sub_key in default and (sub_value is None or (
                    isinstance(sub_default, (list, dict)) and not isinstance(sub_value, type(sub_default)))):
                continue
            merged[sub_key] = copy.deepcopy(sub_value)
        return merged
    if not isinstance(value, list):
        return default
    return copy.deepcopy(value)


def normalize_report(raw: Any) -> AnalysisReport:
    """
    Turn a raw analysis payload into a fully populated AnalysisReport.

    The payload may be the report itself or wrap it under an "analysis" key
    (the shape the upload endpoint uses, next to the stored id and name).
    Missing or mistyped sections are replaced by their defaults, so any dict
    is accepted. Anything that is not a mapping raises TypeError.
    """
    if isinstance(raw, AnalysisReport):
        return raw
    if not isinstance(raw, Mapping):
        raise TypeError(f"Analysis payload must be a JSON object, got {type(raw).__name__}")

    nested = raw.get("analysis")
    analysis = nested if isinstance(nested, Mapping) and nested else raw

    status = analysis.get("analysis_status") or raw.get("analysis_status") or "unknown"
    analysis_id = raw.get("id", analysis.get("id"))
    if not isinstance(analysis_id, (int, str)) or isinstance(analysis_id, bool):
        analysis_id = None
    name = raw.get("name", analysis.get("name"))

    return AnalysisReport(
        basic_info=_section(analysis, "basic_info"),
        missing_data=_section(analysis, "missing_data"),
        duplicates=_section(analysis, "duplicates"),
        data_quality=_section(analysis, "data_quality"),
        outliers=_section(analysis, "outliers"),
        correlation_matrix=_section(analysis, "correlation_matrix"),
        column_statistics=_section(analysis, "column_statistics"),
        recommendations=_section(analysis, "recommendations"),
        analysis_status=str(status),
        analysis_id=analysis_id,
        name=str(name) if name is not None else None,
    )
