from typing import Any, Optional

from dqdash.api.errors import ApiError, NetworkError, ServerError, ValidationError
from dqdash.api.interface import AnalysisAPI
from dqdash.api.validation import MAX_FILE_SIZE, file_name, file_size, format_size, validate_csv_file
from dqdash.dashboard.state import ConnectivityState, DashboardState
from dqdash.report.models import normalize_report
from dqdash.utils import get_logger

logger = get_logger(__name__)

NO_FILE_MESSAGE = "Please select a CSV file"
OFFLINE_MESSAGE = "Cannot connect to the API. Check that the server is running."
BUSY_MESSAGE = "An analysis is already running. Wait for it to finish."
SERVER_ERROR_HINT = "Internal server error. Check the backend console for details."
TIMEOUT_HINT = "The analysis is taking too long. Try a smaller file."
ENCODING_HINT = "Encoding error. Save your CSV file with UTF-8 encoding."


def probe_connectivity(client: AnalysisAPI) -> ConnectivityState:
    return ConnectivityState.ONLINE if client.test_connection() else ConnectivityState.OFFLINE


def friendly_error_message(error: Exception) -> str:
    """Swap a few well-known failure messages for copy a user can act on."""
    message = str(error) or "Error while analyzing the dataset"
    lowered = message.lower()
    if isinstance(error, ServerError) and error.status_code is not None:
        if error.status_code >= 500:
            return SERVER_ERROR_HINT
    elif "500" in message:
        return SERVER_ERROR_HINT
    if (isinstance(error, NetworkError) and error.timed_out) or "timeout" in lowered or "timed out" in lowered:
        return TIMEOUT_HINT
    if "decode" in lowered or "encoding" in lowered:
        return ENCODING_HINT
    return message


def is_connection_problem(error: Exception) -> bool:
    if isinstance(error, NetworkError):
        return not error.timed_out
    return "connect" in str(error).lower()


class DashboardController:
    """
    Owns the dashboard state and talks to the analysis client.
    Every method mutates `self.state` in place; rendering only reads it.
    """

    def __init__(self, client: AnalysisAPI, state: Optional[DashboardState] = None,
                 max_file_size: int = MAX_FILE_SIZE):
        self.client = client
        self.state = state if state is not None else DashboardState()
        self.max_file_size = max_file_size

    def startup(self):
        """Probe the API once per session."""
        if self.state.probed:
            return
        self.check_connection()
        self.state.probed = True

    def check_connection(self) -> ConnectivityState:
        self.state.connectivity = probe_connectivity(self.client)
        logger.info(f"API status: {self.state.connectivity.value}")
        return self.state.connectivity

    def retry_connection(self) -> ConnectivityState:
        self.state.upload.loading = True
        try:
            return self.check_connection()
        finally:
            self.state.upload.loading = False

    def select_file(self, file: Any) -> bool:
        if file is None:
            # uploader was cleared
            self.state.upload.file = None
            return False
        try:
            validate_csv_file(file, max_size=self.max_file_size)
        except ValidationError as e:
            # previous file and report stay as they were
            self.state.upload.error = str(e)
            return False

        logger.info(f"Selected file: {file_name(file)} ({format_size(file_size(file))})")
        self.state.upload.file = file
        self.state.upload.error = None
        self.state.report = None
        return True

    def analyze(self) -> bool:
        upload = self.state.upload
        if upload.file is None:
            upload.error = NO_FILE_MESSAGE
            return False
        if self.state.connectivity == ConnectivityState.OFFLINE:
            upload.error = OFFLINE_MESSAGE
            return False
        if upload.loading:
            upload.error = BUSY_MESSAGE
            return False

        upload.loading = True
        upload.error = None
        self.state.report = None
        name = file_name(upload.file)
        try:
            logger.info(f"Starting analysis of {name}")
            result = self.client.upload_and_analyze(upload.file, name)
            self.state.report = normalize_report(result)
            self.state.connectivity = ConnectivityState.ONLINE
            return True
        except ApiError as e:
            logger.error(f"Analysis of {name} failed: {e}")
            upload.error = friendly_error_message(e)
            if is_connection_problem(e):
                self.state.connectivity = ConnectivityState.OFFLINE
            return False
        finally:
            upload.loading = False

    def load_history(self) -> bool:
        try:
            self.state.history = self.client.list_analyses()
            return True
        except ApiError as e:
            logger.error(f"Could not load analysis history: {e}")
            self.state.upload.error = friendly_error_message(e)
            if is_connection_problem(e):
                self.state.connectivity = ConnectivityState.OFFLINE
            return False

    def open_analysis(self, analysis_id) -> bool:
        try:
            self.state.report = self.client.get_analysis(analysis_id)
            self.state.upload.error = None
            return True
        except ApiError as e:
            logger.error(f"Could not load analysis {analysis_id}: {e}")
            self.state.upload.error = friendly_error_message(e)
            if is_connection_problem(e):
                self.state.connectivity = ConnectivityState.OFFLINE
            return False
