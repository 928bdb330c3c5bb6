from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from dqdash.api.errors import ApiError
from dqdash.report.models import AnalysisReport, AnalysisSummary
from dqdash.utils import get_logger

logger = get_logger(__name__)

class AnalysisAPI(ABC):
    @abstractmethod
    def upload_and_analyze(self, file: Any, name: Optional[str] = None) -> AnalysisReport:
        """
        Validate a CSV upload, send it for analysis and return the normalized report.
        Raises:
            ValidationError, NetworkError, ServerError, RequestConfigError
        """
        pass

    @abstractmethod
    def list_analyses(self) -> List[AnalysisSummary]:
        pass

    @abstractmethod
    def get_analysis(self, analysis_id) -> AnalysisReport:
        pass

    @abstractmethod
    def check_health(self) -> Dict[str, Any]:
        pass

    def test_connection(self) -> bool:
        """Liveness probe. Every ApiError counts as 'not reachable'."""
        try:
            self.check_health()
            return True
        except ApiError as e:
            logger.warning(f"Health check failed: {e}")
            return False
