"""
Run the InBody tracker CLI.

Usage:
    python run_cli.py [COMMAND] [OPTIONS]

Commands:
    extract    Read an InBody report (image or PDF), review the values and save
    add        Enter a measurement manually
    history    List saved measurements, oldest first
    insights   Change per metric over a window
    attend     Log trained / rest / missed for a day
    adherence  Attendance streak, consistency and risk flags
    dashboard  Insights, trends and adherence in one view

Examples:
    python run_cli.py extract report.jpg --owner alice
    python run_cli.py add --owner alice --weight 80.2 --muscle 35.1 --fat 21.4
    INBODY_OWNER_ID=alice python run_cli.py dashboard --goal lose_fat

Environment variables (all optional):
    INBODY_OWNER_ID     Default owner for every command
    DB_PATH             SQLite database file path (default: inbody.db)
    TESSERACT_CMD       Path to the tesseract binary if not on PATH
    LOG_LEVEL           Logging level (default: INFO)
"""

import sys
from pathlib import Path

# Ensure src/ is importable without an editable install
sys.path.insert(0, str(Path(__file__).parent / "src"))

from inbody_tracker.adapters.cli.main import app

if __name__ == "__main__":
    app()
