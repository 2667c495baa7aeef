"""View model derived from the live window"""
from typing import Optional, Sequence

from models.schemas import (
    BandState,
    ChartSeries,
    MetricView,
    Reading,
    ViewModel,
)
from services.bands import NO_SIGNAL_LABEL, SOUND_BANDS, classify, is_alert
from services.live_window import LiveWindow
from services.trend import calculate_trend

METRICS = ("temperature", "humidity", "sound_value")


def format_label(reading: Reading, index: int) -> str:
    """Chart label: local ``HH:MM`` of the capture time, else ``#<position>``"""
    if reading.created_at:
        return reading.created_at.astimezone().strftime("%H:%M")
    return f"#{index + 1}"


def format_last_update(reading: Optional[Reading]) -> Optional[str]:
    if reading is None:
        return None
    if reading.created_at:
        return reading.created_at.astimezone().strftime("%H:%M:%S")
    return "just now"


def metric_series(readings: Sequence[Reading], metric: str) -> list[float]:
    """Values of one metric, missing values as 0"""
    values = []
    for reading in readings:
        value = getattr(reading, metric)
        values.append(value if value is not None else 0.0)
    return values


def compute_view(readings: Sequence[Reading]) -> ViewModel:
    """Build the dashboard view model from a chronological snapshot"""
    latest = readings[-1] if readings else None
    labels = [format_label(reading, index) for index, reading in enumerate(readings)]

    metrics = {}
    charts = {}
    for metric in METRICS:
        series = metric_series(readings, metric)
        metrics[metric] = MetricView(
            value=getattr(latest, metric) if latest else None,
            trend_percent=calculate_trend(series),
        )
        charts[metric] = ChartSeries(labels=list(labels), values=series)

    active_band = classify(latest.sound_value) if latest else None

    return ViewModel(
        latest=latest,
        active_band=active_band,
        alert_band=active_band if is_alert(active_band) else None,
        band_label=active_band.label if active_band else NO_SIGNAL_LABEL,
        last_update=format_last_update(latest),
        charts=charts,
        bands=[
            BandState(band=band, active=active_band is not None and band.id == active_band.id)
            for band in SOUND_BANDS
        ],
        **metrics,
    )


class MetricsFacade:
    """Recomputes the view model from whatever the window currently holds"""

    def __init__(self, window: LiveWindow):
        self.window = window

    def compute_view(self) -> ViewModel:
        return compute_view(self.window.snapshot())
