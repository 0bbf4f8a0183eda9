"""
Configuration settings for the commute expense summary service.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

# Round-trip transportation cost per commute day (yen)
ROUND_TRIP_FARE = int(os.getenv("COMMUTE_ROUND_TRIP_FARE", "716"))

# Worksheet layout
WORK_TABLE_SHEET_PATTERN = os.getenv("WORK_TABLE_SHEET_PATTERN", r"^勤務表\d+月$")
HOME_WORK_NOTE = os.getenv("HOME_WORK_NOTE", "自宅作業")

# Attendance block; the column positions below are offsets from its first column (A)
ATTENDANCE_RANGE = "A19:O49"
DATE_COLUMN = 0
WORK_HOURS_COLUMN = 5
NOTE_COLUMN = 14

# Paths
BASE_DIR = Path(__file__).parent
STATIC_DIR = BASE_DIR / "static"
LOG_DIR = BASE_DIR / "logs"
DEFAULT_WORKBOOK = Path(os.getenv("DEFAULT_WORKBOOK", str(STATIC_DIR / "excel" / "work_table.xlsx")))
