"""Application configuration"""
import os

# Live window settings
MAX_POINTS = 60
TREND_WINDOW = 6

# Readings backend
READINGS_TABLE = "readings"
DB_PATH = os.getenv("HIVE_DB_PATH", "readings.db")

# WebSocket settings
HEARTBEAT_INTERVAL_SECONDS = 30
