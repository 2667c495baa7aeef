"""Sound band table and classification"""
import math
from typing import Optional

from models.schemas import Band

PALETTE = {
    "amber": "#ffb703",
    "gold": "#f4a259",
    "orange": "#ef8354",
    "teal": "#34c3b2",
    "red": "#ff5f6d",
}

# Ascending, non-overlapping
SOUND_BANDS: tuple[Band, ...] = (
    Band(
        id="low",
        label="Low Hum Band",
        range=(50, 150),
        tone="Colony calm and clustered. Maintain ventilation.",
        accent=PALETTE["amber"],
    ),
    Band(
        id="activity",
        label="Activity Buzz Band",
        range=(150, 300),
        tone="Workers active. Ensure nectar and brood frames are balanced.",
        accent=PALETTE["gold"],
    ),
    Band(
        id="communication",
        label="Communication Queen Band",
        range=(300, 600),
        tone="Queen piping or waggle signals. Inspect queen cells soon.",
        accent=PALETTE["orange"],
    ),
    Band(
        id="stress",
        label="Intrusion or Stress",
        range=(600, 1000),
        tone="Possible predator, robbing, or overheating. Open hive gently and investigate.",
        accent=PALETTE["red"],
    ),
)

ALERT_BAND_IDS = frozenset({"communication", "stress"})

NO_SIGNAL_LABEL = "No signal"


def is_blank(value: Optional[float]) -> bool:
    """True for None, 0 and NaN: the values treated as "no reading" """
    return not value or math.isnan(value)


def classify(value: Optional[float]) -> Optional[Band]:
    """Return the band whose range contains ``value``, or None"""
    if is_blank(value):
        return None
    for band in SOUND_BANDS:
        if band.contains(value):
            return band
    return None


def is_alert(band: Optional[Band]) -> bool:
    return band is not None and band.id in ALERT_BAND_IDS


def band_by_id(band_id: str) -> Optional[Band]:
    return next((band for band in SOUND_BANDS if band.id == band_id), None)
