"""
factory - Composition root for the InBody tracker.

ALL dependency wiring happens here. No other module constructs its own
dependencies. Adapters (CLI, REST) call this factory to get fully
configured services.

Usage:
    from inbody_tracker.factory import ServiceFactory
    from inbody_tracker.infrastructure.config import Settings

    config = Settings.from_env()
    factory = ServiceFactory(config)
    await factory.initialize()  # one-time startup

    store = factory.create_record_store(owner_id)
    await store.load()
    insight = store.get_insights()
"""

from __future__ import annotations

import logging
from typing import Optional

from inbody_tracker.application.services.attendance import AttendanceService
from inbody_tracker.application.services.dashboard import DashboardService
from inbody_tracker.application.services.ingestion import ReportIngestionService
from inbody_tracker.application.services.record_store import RecordStore
from inbody_tracker.domain.ports import Clock, OCRProvider
from inbody_tracker.infrastructure.clock import SystemClock
from inbody_tracker.infrastructure.config import Settings
from inbody_tracker.infrastructure.ocr.tesseract_provider import TesseractOCRProvider
from inbody_tracker.infrastructure.persistence.attendance_repo import SQLiteAttendanceRepository
from inbody_tracker.infrastructure.persistence.body_composition_repo import (
    SQLiteBodyCompositionRepository,
)
from inbody_tracker.infrastructure.persistence.connection import AsyncSQLiteConnection
from inbody_tracker.infrastructure.persistence.migrations import run_migrations

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Composition root: wires all dependencies together.

    Call initialize() once at startup, then create services as needed.
    clock and ocr_provider may be injected (tests); otherwise they are
    built from config.
    """

    def __init__(
        self,
        config: Settings,
        clock: Optional[Clock] = None,
        ocr_provider: Optional[OCRProvider] = None,
    ):
        self._config = config
        self._connection = AsyncSQLiteConnection(config.db_path)
        self._clock = clock or SystemClock()
        self._ocr_provider = ocr_provider or self._build_ocr_provider()

        # Drafts live as long as the process; one service for all requests.
        self._ingestion_service: Optional[ReportIngestionService] = None
        self._initialized = False

    @property
    def config(self) -> Settings:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    async def initialize(self) -> None:
        """One-time startup: run migrations."""
        logger.info("Initializing ServiceFactory...")
        await run_migrations(self._connection)
        logger.info("Database migrations complete (%s)", self._config.db_path)
        logger.info("OCR provider: %s", self._ocr_provider.name)
        self._initialized = True

    # ------------------------------------------------------------------
    # Service creation
    # ------------------------------------------------------------------

    def create_record_store(self, owner_id: str) -> RecordStore:
        """Create an (unloaded) RecordStore for one owner."""
        self._ensure_initialized()
        return RecordStore(
            owner_id=owner_id,
            repository=SQLiteBodyCompositionRepository(self._connection),
            clock=self._clock,
        )

    def get_ingestion_service(self) -> ReportIngestionService:
        """Return the process-wide ReportIngestionService."""
        self._ensure_initialized()
        if self._ingestion_service is None:
            self._ingestion_service = ReportIngestionService(
                provider=self._ocr_provider,
                clock=self._clock,
                record_store_factory=self.create_record_store,
            )
        return self._ingestion_service

    def create_attendance_service(self) -> AttendanceService:
        self._ensure_initialized()
        return AttendanceService(
            repository=SQLiteAttendanceRepository(self._connection),
            clock=self._clock,
            window_days=self._config.adherence_window_days,
        )

    def create_dashboard_service(self) -> DashboardService:
        return DashboardService(
            record_store_factory=self.create_record_store,
            attendance_service=self.create_attendance_service(),
        )

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_ocr_provider(self) -> OCRProvider:
        """Select the single active OCR provider.

        Provider selection via OCR_PROVIDER env var:
          "tesseract" (default) - Tesseract for images, pypdf text layer for PDFs
        """
        provider = self._config.ocr_provider
        if provider != "tesseract":
            raise ValueError(f"Unknown OCR_PROVIDER: {provider!r}")
        return TesseractOCRProvider(
            language=self._config.ocr_language,
            timeout=self._config.ocr_timeout_seconds,
            tesseract_cmd=self._config.tesseract_cmd,
        )

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                "ServiceFactory not initialized. Call await factory.initialize() first."
            )
