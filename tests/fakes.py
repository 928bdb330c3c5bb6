"""
Test doubles for the analysis API: an injectable requests session that
returns real `requests.Response` objects, and small upload stand-ins.
"""

import io
import json

import requests


def make_response(status_code=200, body=None, reason=None, raw_text=None):
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason or ("OK" if status_code < 400 else "Error")
    if raw_text is not None:
        response._content = raw_text.encode("utf-8")
    else:
        response._content = json.dumps(body if body is not None else {}).encode("utf-8")
    response.headers["Content-Type"] = "application/json"
    return response


class FakeSession:
    """Records every request; answers from `responses` keyed by (method, path suffix)."""

    def __init__(self, responses=None, error=None):
        self.responses = responses or {}
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        for (m, suffix), response in self.responses.items():
            if m == method and url.endswith(suffix):
                return response
        return make_response(404, {"error": "Not found"}, reason="Not Found")


class FakeUpload(io.BytesIO):
    """Mimics Streamlit's UploadedFile: a BytesIO with a name and a declared size."""

    def __init__(self, name, content=b"a,b\n1,2\n", size=None):
        super().__init__(content)
        self.name = name
        self.size = len(content) if size is None else size


SAMPLE_REPORT = {
    "basic_info": {"total_rows": 100, "total_columns": 3, "file_size": "2.00 MB",
                   "data_types": {"int64": 2, "object": 1}},
    "missing_data": {"columns_with_missing": [{"column": "age", "count": 5, "percentage": 5.0}],
                     "total_missing_percentage": 1.67},
    "duplicates": {"total_duplicates": 2, "percentage": 2.0, "columns_contributing": ["id"]},
    "data_quality": {"completeness": 98.3, "consistency": 75.0, "validity": 60.0, "uniqueness": 98.0},
    "outliers": {"columns_with_outliers": [{"column": "age", "outlier_count": 3}]},
    "correlation_matrix": [{"var1": "age", "var2": "income", "correlation": 0.5}],
    "column_statistics": {"age": {"mean": 30.5, "min": 18, "max": 70}, "income": {"mean": 1000.0, "std": 12.5}},
    "recommendations": {"critical": [{"description": "Impute age"}], "moderate": [], "optional": ["Scale income"]},
    "analysis_status": "completed",
}
