"""
Tests for services.metrics module.

Checks the view model the dashboards render: stats, trends, band
classification, alert gating and chart series.
"""
import pytest

from conftest import make_reading
from models.schemas import Reading
from services.live_window import LiveWindow
from services.metrics import MetricsFacade, compute_view, format_label


def window_of(readings):
    window = LiveWindow()
    for reading in readings:
        window.append(reading)
    return window


class TestEmptyWindow:

    def test_defaults(self):
        view = MetricsFacade(LiveWindow()).compute_view()

        assert view.latest is None
        assert view.active_band is None
        assert view.alert_band is None
        assert view.band_label == "No signal"
        assert view.last_update is None
        assert view.temperature.value is None
        assert view.temperature.trend_percent == 0
        assert view.charts["sound_value"].labels == []
        assert not any(state.active for state in view.bands)


class TestStats:

    def test_latest_values(self):
        view = compute_view([
            make_reading(1, temperature=33.0),
            make_reading(2, temperature=35.5, humidity=None, sound_value=120.0),
        ])

        assert view.latest.id == 2
        assert view.temperature.value == 35.5
        assert view.humidity.value is None
        assert view.sound_value.value == 120.0

    def test_trend_over_snapshot(self):
        temperatures = [10, 20, 15, 30, 40, 50]
        readings = [make_reading(i, temperature=t) for i, t in enumerate(temperatures, 1)]

        view = compute_view(readings)

        assert view.temperature.trend_percent == pytest.approx(400)
        assert view.humidity.trend_percent == 0

    def test_missing_latest_value_gives_zero_trend(self):
        view = compute_view([
            make_reading(1, humidity=50.0),
            make_reading(2, humidity=None),
        ])

        assert view.humidity.trend_percent == 0


class TestBands:

    @pytest.mark.parametrize("sound_value, band_id, alert", [
        (100, "low", False),
        (200, "activity", False),
        (450, "communication", True),
        (700, "stress", True),
    ])
    def test_alert_gating(self, sound_value, band_id, alert):
        view = compute_view([make_reading(1, sound_value=sound_value)])

        assert view.active_band.id == band_id
        if alert:
            assert view.alert_band == view.active_band
        else:
            assert view.alert_band is None

    def test_classifies_latest_only(self):
        view = compute_view([
            make_reading(1, sound_value=700),
            make_reading(2, sound_value=100),
        ])

        assert view.active_band.id == "low"
        assert view.alert_band is None

    def test_out_of_range_is_no_signal(self):
        view = compute_view([make_reading(1, sound_value=1200)])

        assert view.active_band is None
        assert view.band_label == "No signal"

    def test_band_label_and_active_flag(self):
        view = compute_view([make_reading(1, sound_value=350)])

        assert view.band_label == "Communication Queen Band"
        active = [state.band.id for state in view.bands if state.active]
        assert active == ["communication"]
        assert len(view.bands) == 4


class TestCharts:

    def test_label_fallback_uses_position(self):
        readings = [
            make_reading(1),
            make_reading(2),
            make_reading(3, timestamped=False),
        ]

        view = compute_view(readings)

        assert view.charts["temperature"].labels[2] == "#3"

    def test_label_is_local_hour_minute(self):
        reading = make_reading(7)
        expected = reading.created_at.astimezone().strftime("%H:%M")

        assert format_label(reading, 0) == expected

    def test_missing_values_plotted_as_zero(self):
        view = compute_view([
            make_reading(1, humidity=55.0),
            make_reading(2, humidity=None),
        ])

        assert view.charts["humidity"].values == [55.0, 0.0]

    def test_series_share_labels(self):
        view = compute_view([make_reading(1), make_reading(2)])

        labels = view.charts["temperature"].labels
        assert view.charts["humidity"].labels == labels
        assert view.charts["sound_value"].labels == labels


class TestLastUpdate:

    def test_without_timestamp(self):
        view = compute_view([Reading(temperature=30.0)])

        assert view.last_update == "just now"

    def test_with_timestamp(self):
        reading = make_reading(3)
        view = compute_view([reading])

        assert view.last_update == reading.created_at.astimezone().strftime("%H:%M:%S")


class TestFacade:

    def test_recomputes_after_append(self):
        window = window_of([make_reading(1, sound_value=100)])
        facade = MetricsFacade(window)
        assert facade.compute_view().active_band.id == "low"

        window.append(make_reading(2, sound_value=650))

        view = facade.compute_view()
        assert view.latest.id == 2
        assert view.alert_band.id == "stress"
