"""
infrastructure.config - Typed, injectable configuration.

A frozen dataclass that can be constructed from the environment or passed
explicitly in tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Settings:
    """Centralized configuration for the InBody tracker.

    No module-level globals: construct via from_env() or pass explicitly in
    tests.
    """
    project_root: Path

    # Database
    db_path: str = "inbody.db"

    # ── OCR ─────────────────────────────────────────────────────
    # Exactly one provider is active. Allowed: "tesseract"
    ocr_provider: str = "tesseract"
    ocr_language: str = "eng"
    ocr_timeout_seconds: float = 60.0
    # Leave empty to use the tesseract binary found on PATH.
    tesseract_cmd: str = ""
    upload_max_bytes: int = 10 * 1024 * 1024

    # Attendance window for adherence summaries
    adherence_window_days: int = 30

    # JWT issued by the hosted auth service; 'sub' is the owner id.
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, project_root: Optional[Path] = None) -> Settings:
        """Build Settings from the environment (and .env, if present)."""
        from dotenv import load_dotenv
        load_dotenv()

        root = project_root or Path(__file__).resolve().parent.parent.parent.parent

        return cls(
            project_root=root,
            db_path=os.getenv("DB_PATH", "inbody.db"),
            ocr_provider=os.getenv("OCR_PROVIDER", "tesseract"),
            ocr_language=os.getenv("OCR_LANGUAGE", "eng"),
            ocr_timeout_seconds=float(os.getenv("OCR_TIMEOUT_SECONDS", "60")),
            tesseract_cmd=os.getenv("TESSERACT_CMD", ""),
            upload_max_bytes=int(os.getenv("UPLOAD_MAX_BYTES", str(10 * 1024 * 1024))),
            adherence_window_days=int(os.getenv("ADHERENCE_WINDOW_DAYS", "30")),
            jwt_secret=os.getenv("JWT_SECRET", "change-me-in-production"),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
