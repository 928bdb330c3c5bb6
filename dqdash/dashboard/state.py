from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from dqdash.report.models import AnalysisReport, AnalysisSummary


class ConnectivityState(str, Enum):
    UNKNOWN = "unknown"
    ONLINE = "online"
    OFFLINE = "offline"


@dataclass
class UploadState:
    file: Any = None
    loading: bool = False
    error: Optional[str] = None


@dataclass
class DashboardState:
    upload: UploadState = field(default_factory=UploadState)
    connectivity: ConnectivityState = ConnectivityState.UNKNOWN
    report: Optional[AnalysisReport] = None
    history: List[AnalysisSummary] = field(default_factory=list)
    probed: bool = False
