"""
Tests for services.bands module.
"""
import math

import pytest

from services.bands import SOUND_BANDS, band_by_id, classify, is_alert


class TestClassify:
    """Mapping sound values onto the band table."""

    @pytest.mark.parametrize("value, expected", [
        (50, "low"),
        (149.99, "low"),
        (150, "activity"),
        (299.9, "activity"),
        (300, "communication"),
        (599.5, "communication"),
        (600, "stress"),
        (999.99, "stress"),
    ])
    def test_examples(self, value, expected):
        assert classify(value).id == expected

    @pytest.mark.parametrize("value", [None, 0, 0.0, math.nan, 49.99, -100, 1000, 1500])
    def test_no_band(self, value):
        assert classify(value) is None

    def test_partition_covers_range(self):
        value = 50.0
        while value < 1000:
            matches = [band for band in SOUND_BANDS if band.contains(value)]
            assert len(matches) == 1
            assert classify(value) == matches[0]
            value += 7.3

    def test_table_is_ascending_and_contiguous(self):
        for lower, upper in zip(SOUND_BANDS, SOUND_BANDS[1:]):
            assert lower.high == upper.low
        assert SOUND_BANDS[0].low == 50
        assert SOUND_BANDS[-1].high == 1000


class TestAlerts:
    """Alert gating by band id."""

    @pytest.mark.parametrize("band_id, alert", [
        ("low", False),
        ("activity", False),
        ("communication", True),
        ("stress", True),
    ])
    def test_is_alert(self, band_id, alert):
        assert is_alert(band_by_id(band_id)) is alert

    def test_no_band_is_not_alert(self):
        assert is_alert(None) is False

    def test_band_by_id_unknown(self):
        assert band_by_id("swarm") is None
