"""DTOs and schemas for hive telemetry"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Reading(BaseModel):
    """One sensor sample, as stored in the ``readings`` table"""
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    sound_value: Optional[float] = None
    created_at: Optional[datetime] = None


class ReadingIn(BaseModel):
    """Payload accepted from sensors (HTTP and WebSocket ingestion)"""
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    sound_value: Optional[float] = None
    created_at: Optional[datetime] = None

    def to_reading(self) -> Reading:
        return Reading(**self.model_dump())


class Band(BaseModel):
    """Named sound-value interval, half-open ``[low, high)``"""
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    range: tuple[float, float]
    tone: str
    accent: str

    @property
    def low(self) -> float:
        return self.range[0]

    @property
    def high(self) -> float:
        return self.range[1]

    def contains(self, value: float) -> bool:
        return self.low <= value < self.high


class BandState(BaseModel):
    band: Band
    active: bool = False


class MetricView(BaseModel):
    value: Optional[float] = None
    trend_percent: float = 0.0


class ChartSeries(BaseModel):
    labels: list[str] = Field(default_factory=list)
    values: list[float] = Field(default_factory=list)


class ViewModel(BaseModel):
    """Everything a dashboard renders, derived from the live window"""
    latest: Optional[Reading] = None
    temperature: MetricView
    humidity: MetricView
    sound_value: MetricView
    active_band: Optional[Band] = None
    alert_band: Optional[Band] = None
    band_label: str
    last_update: Optional[str] = None
    charts: dict[str, ChartSeries]
    bands: list[BandState]


class FeedStatus(BaseModel):
    status: str
    error: Optional[str] = None
    connected: bool
    loaded: bool
    window_size: int


class HealthResponse(BaseModel):
    """Schema for health check"""
    status: str
    timestamp: str
    active_connections: int
    window_size: int
    feed_status: str


class LatestReadingsResponse(BaseModel):
    count: int
    data: list[Reading]


class StatsResponse(BaseModel):
    total_records: int
    window_size: int
    window_capacity: int
    active_dashboard_connections: int


class ApiInfoResponse(BaseModel):
    """Schema for API info"""
    message: str
    websocket: str
    dashboard: str
    status: str
