import copy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from dqdash.api.errors import ServerError
from dqdash.api.interface import AnalysisAPI
from dqdash.api.validation import MAX_FILE_SIZE, file_name, validate_csv_file
from dqdash.report.models import AnalysisReport, AnalysisSummary, normalize_report

SAMPLE_ANALYSIS = {
    "basic_info": {
        "total_rows": 1250,
        "total_columns": 6,
        "file_size": "84.2 KB",
        "data_types": {"int64": 2, "float64": 2, "object": 2},
    },
    "missing_data": {
        "columns_with_missing": [
            {"column": "age", "count": 42, "percentage": 3.36},
            {"column": "income", "count": 118, "percentage": 9.44},
            {"column": "city", "count": 7, "percentage": 0.56},
        ],
        "total_missing_percentage": 2.23,
    },
    "duplicates": {"total_duplicates": 15, "percentage": 1.2, "columns_contributing": ["customer_id", "email"]},
    "data_quality": {"completeness": 97.8, "consistency": 88.5, "validity": 92.1, "uniqueness": 98.8},
    "outliers": {
        "columns_with_outliers": [
            {"column": "income", "outlier_count": 23},
            {"column": "age", "outlier_count": 4},
            {"column": "purchases", "outlier_count": 11},
        ]
    },
    "correlation_matrix": [
        {"var1": "income", "var2": "purchases", "correlation": 0.72},
        {"var1": "age", "var2": "income", "correlation": 0.41},
        {"var1": "age", "var2": "purchases", "correlation": -0.18},
    ],
    "column_statistics": {
        "age": {"mean": 41.3, "std": 12.7, "min": 18, "max": 92},
        "income": {"mean": 52340.5, "std": 18210.2, "min": 0, "max": 250000},
        "purchases": {"mean": 7.4, "std": 3.1, "min": 0, "max": 41},
    },
    "recommendations": {
        "critical": [{"description": "Impute missing values in 'income' (9.44%)"}],
        "moderate": [{"description": "Review outliers in 'income'"}, {"description": "Remove 15 duplicate rows"}],
        "optional": [{"description": "Scale numeric columns"}, {"description": "Encode categorical column 'city'"}],
    },
    "analysis_status": "completed",
}

class MockAnalysisClient(AnalysisAPI):
    """Offline client that answers every upload with the same sample report."""

    def __init__(self, max_file_size: int = MAX_FILE_SIZE):
        self.max_file_size = max_file_size
        self._history: List[Dict[str, Any]] = []

    def upload_and_analyze(self, file: Any, name: Optional[str] = None) -> AnalysisReport:
        validate_csv_file(file, max_size=self.max_file_size)
        entry = {
            "id": len(self._history) + 1,
            "name": name or file_name(file),
            "created_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "analysis": copy.deepcopy(SAMPLE_ANALYSIS),
        }
        self._history.append(entry)
        return normalize_report(entry)

    def list_analyses(self) -> List[AnalysisSummary]:
        return [
            AnalysisSummary(id=e["id"], name=e["name"], created_at=e["created_at"],
                            analysis_status=e["analysis"]["analysis_status"])
            for e in self._history
        ]

    def get_analysis(self, analysis_id) -> AnalysisReport:
        for entry in self._history:
            if str(entry["id"]) == str(analysis_id):
                return normalize_report(entry)
        raise ServerError(f"Analysis {analysis_id} not found", status_code=404)

    def check_health(self) -> Dict[str, Any]:
        return {"status": "healthy", "mode": "mock"}
