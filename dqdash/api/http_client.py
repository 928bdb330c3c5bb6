from typing import Any, Dict, List, Optional

import pydantic
import requests

from dqdash.api.errors import NetworkError, RequestConfigError, ServerError
from dqdash.api.interface import AnalysisAPI
from dqdash.api.validation import MAX_FILE_SIZE, file_name, validate_csv_file
from dqdash.config import AppConfig, CONFIG
from dqdash.report.models import AnalysisReport, AnalysisSummary, normalize_report
from dqdash.utils import get_logger

logger = get_logger(__name__)

# Transport failures: the request left but nothing usable came back
_NO_RESPONSE_ERRORS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
    requests.exceptions.ChunkedEncodingError,
    requests.exceptions.ContentDecodingError,
)

class HttpAnalysisClient(AnalysisAPI):
    """
    Client for the dataset analysis REST API.
    The session is injected so tests (and the dashboard) decide its lifetime.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None,
                 timeout: float = 30.0, max_file_size: int = MAX_FILE_SIZE):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.max_file_size = max_file_size

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = self._url(path)
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.error(f"{method} {url} timed out: {e}")
            raise NetworkError(f"The request timed out after {self.timeout:g} seconds.", timed_out=True) from e
        except _NO_RESPONSE_ERRORS as e:
            logger.error(f"{method} {url} got no response: {e}")
            raise NetworkError(
                f"Could not connect to the server at {self.base_url}. Check that the API is running."
            ) from e
        except (requests.exceptions.RequestException, ValueError, OSError) as e:
            logger.error(f"Could not build {method} {url}: {e}")
            raise RequestConfigError(f"Request configuration error: {e}") from e

        if not response.ok:
            message = self._error_message(response)
            logger.error(f"{method} {url} -> {response.status_code}: {message}")
            raise ServerError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"{method} {url} returned a body that is not JSON")
            raise ServerError("The server returned a response that is not valid JSON.",
                              status_code=response.status_code) from e

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        reason = response.reason or "Error"
        return f"Error {response.status_code}: {reason}"

    def upload_and_analyze(self, file: Any, name: Optional[str] = None) -> AnalysisReport:
        validate_csv_file(file, max_size=self.max_file_size)
        filename = file_name(file)
        if hasattr(file, "seek"):
            file.seek(0)

        logger.info(f"Sending {filename} for analysis...")
        payload = self._request(
            "POST",
            "/upload/",
            files={"file": (filename, file, "text/csv")},
            data={"name": name or filename},
        )
        if not isinstance(payload, dict):
            raise ServerError("The analysis response is not a JSON object.")

        report = normalize_report(payload)
        logger.info(f"Analysis of {filename} completed (status: {report.analysis_status})")
        return report

    def list_analyses(self) -> List[AnalysisSummary]:
        logger.info("Fetching analysis list...")
        payload = self._request("GET", "/analyses/")
        # Paginated listings wrap the entries in "results"
        if isinstance(payload, dict) and isinstance(payload.get("results"), list):
            payload = payload["results"]
        if not isinstance(payload, list):
            raise ServerError("The analysis list response is not a JSON array.")
        try:
            return [AnalysisSummary(**item) for item in payload if isinstance(item, dict)]
        except pydantic.ValidationError as e:
            raise ServerError(f"Unexpected entry in the analysis list: {e}") from e

    def get_analysis(self, analysis_id) -> AnalysisReport:
        logger.info(f"Fetching analysis {analysis_id}...")
        payload = self._request("GET", f"/analyses/{analysis_id}/")
        if not isinstance(payload, dict):
            raise ServerError("The analysis response is not a JSON object.")
        return normalize_report(payload)

    def check_health(self) -> Dict[str, Any]:
        payload = self._request("GET", "/health/")
        if not isinstance(payload, dict):
            return {"status": payload}
        return payload


def create_client(config: AppConfig = CONFIG, session: Optional[requests.Session] = None) -> AnalysisAPI:
    """Build the client selected by `config.api_mode`."""
    if config.api_mode == "mock":
        from dqdash.api.mock_client import MockAnalysisClient
        return MockAnalysisClient(max_file_size=config.max_upload_bytes)
    if config.api_mode != "live":
        logger.warning(f"API mode '{config.api_mode}' not recognised, using live HTTP client.")

    if session is None:
        session = requests.Session()
        session.headers["Accept"] = "application/json"
        if config.user_agent:
            session.headers["User-Agent"] = config.user_agent
    return HttpAnalysisClient(config.api_url, session=session, timeout=config.timeout,
                              max_file_size=config.max_upload_bytes)
