from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class DayFilter(str, Enum):
    ALL = "ALL"
    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"


class AOIType(str, Enum):
    GAP = "GAP"
    DWELL = "DWELL"  # declared for loitering detection, not produced yet


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class SignalPoint(BaseModel):
    """One timestamped ping. `time` is zero-padded HH:MM so it sorts as a string."""
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float
    date: str
    time: str
    day: str
    description: Optional[str] = None
    source: Optional[str] = None


class Cluster(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    code: str
    centroid: Tuple[float, float]
    type: str
    probability: int
    window: str
    description: str
    assessment: str = "Pending AI Analysis..."
    risk: str
    color: str
    raw_points: Tuple[SignalPoint, ...]
    count: int
    unique_dates_count: int
    score: int


class AreaOfInterest(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    center: Tuple[float, float]
    radius: int
    label: str
    type: AOIType
    duration: str
    points: Tuple[SignalPoint, ...] = ()
    risk_level: RiskLevel


class ViewState(BaseModel):
    locked_routes: List[str]  # dates, first-appearance order
    show_history: bool


class AnalysisView(BaseModel):
    day: DayFilter
    clusters: List[Cluster]
    aois: List[AreaOfInterest]
    view: ViewState


class AnalysisResult(BaseModel):
    summary: str
    attention_level: RiskLevel
    key_insights: List[str]


class RouteGeometry(BaseModel):
    date: str
    coordinates: List[Tuple[float, float]]
    routed: bool  # False when the straight-line fallback was used
