"""
Run the InBody tracker REST API.

Usage:
    python run_api.py

Environment variables (all optional):
    JWT_SECRET              Secret used to verify bearer tokens (change in production!)
    JWT_ALGORITHM           Token signature algorithm (default: HS256)
    DB_PATH                 SQLite database file path (default: inbody.db)
    OCR_PROVIDER            OCR backend (default: tesseract)
    OCR_LANGUAGE            Tesseract language pack (default: eng)
    OCR_TIMEOUT_SECONDS     Per-report OCR timeout (default: 60)
    TESSERACT_CMD           Path to the tesseract binary if not on PATH
    UPLOAD_MAX_BYTES        Largest accepted report upload (default: 10 MiB)
    ADHERENCE_WINDOW_DAYS   Attendance summary window (default: 30)
    LOG_LEVEL               Logging level (default: INFO)
"""

import sys
from pathlib import Path

# Ensure src/ is importable without an editable install
sys.path.insert(0, str(Path(__file__).parent / "src"))

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "inbody_tracker.adapters.rest.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
