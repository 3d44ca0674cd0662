"""Correction sinks for the feedback log

Both sinks are append-only. SqlCorrectionSink persists corrections for later
weight tuning; InMemoryCorrectionSink keeps them in process (tests and
embedded use).
"""

import logging
import threading
from typing import List

from database import SessionFactory, session_scope
from matching.models import CorrectionRecord
from matching.ports import CorrectionSinkPort
from .models import MatchCorrection


logger = logging.getLogger(__name__)


class InMemoryCorrectionSink(CorrectionSinkPort):
    """Sink that keeps corrections in a list, in arrival order."""

    def __init__(self):
        self._records: List[CorrectionRecord] = []
        self._lock = threading.Lock()

    def append(self, record: CorrectionRecord) -> None:
        with self._lock:
            self._records.append(record)

    @property
    def records(self) -> List[CorrectionRecord]:
        with self._lock:
            return list(self._records)


class SqlCorrectionSink(CorrectionSinkPort):
    """Sink that appends corrections to the sku_match_correction table."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def append(self, record: CorrectionRecord) -> None:
        with session_scope(self.session_factory) as session:
            session.add(MatchCorrection(
                food_id=record.food_id,
                platform=record.platform,
                platform_product_id=record.platform_product_id,
                is_correct=record.is_correct,
                recorded_at=record.recorded_at,
            ))

        logger.debug(
            f"Persisted correction for food {record.food_id}",
            extra={"food_id": record.food_id},
        )
