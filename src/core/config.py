"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DATA_DIR = Path(os.environ.get("CALENDAR_DATA_DIR", str(PROJECT_ROOT / "data")))
DB_PATH = DATA_DIR / "db" / "calendar.db"
OUTPUT_DIR = Path(os.environ.get("CALENDAR_OUTPUT_DIR", str(PROJECT_ROOT / "output")))

# =============================================================================
# STORAGE CONFIGURATION
# =============================================================================

STORAGE_BACKEND = os.environ.get("CALENDAR_STORAGE_BACKEND", "file")  # file | sqlite | memory
STORAGE_KEY = os.environ.get("CALENDAR_STORAGE_KEY", "calendarEvents")
# Unreadable saved values are copied here before anything overwrites them
STORAGE_BACKUP_SUFFIX = ".unreadable"
STORAGE_DIR = DATA_DIR / "storage"

# =============================================================================
# EVENT CONFIGURATION
# =============================================================================

DEFAULT_EVENT_COLOR = "#1a73e8"
TIME_FORMAT = "%H:%M"
DATE_KEY_FORMAT = "%Y-%m-%d"

# Reject events whose end time is not after their start time (off by default)
STRICT_TIME_RANGE = os.environ.get("CALENDAR_STRICT_TIME_RANGE", "false").lower() == "true"

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"
OVERLAP_MESSAGE = "Event times overlap with existing event!"

# =============================================================================
# EXPORT CONFIGURATION
# =============================================================================

EXPORT_FILENAME_PREFIX = "calendar-events"
EXPORT_HEADERS = ["Date", "Start", "End", "Name", "Description", "Color"]

# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# =============================================================================
# API CONFIGURATION
# =============================================================================

API_HOST = os.environ.get("API_HOST", "127.0.0.1")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
