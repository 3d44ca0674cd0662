"""Correction recording for the matcher.

Corrections are accepted and appended to a sink on a background thread.
Recorded corrections do not yet influence scoring; a persistent sink lives
in the feedback module.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from .models import CorrectionRecord
from .ports import CorrectionSinkPort


logger = logging.getLogger(__name__)


class LoggingCorrectionSink(CorrectionSinkPort):
    """Sink that only writes corrections to the log."""

    def append(self, record: CorrectionRecord) -> None:
        logger.info(
            f"Match correction for food {record.food_id}: "
            f"{record.platform.value}/{record.platform_product_id} "
            f"marked {'correct' if record.is_correct else 'incorrect'}",
            extra={
                "food_id": record.food_id,
                "platform": record.platform.value,
                "platform_product_id": record.platform_product_id,
                "is_correct": record.is_correct,
            }
        )


class CorrectionRecorder:
    """Fire-and-forget delivery of corrections to a sink.

    Corrections are appended on a single background thread, so the sink sees
    them in submission order. Sink failures are logged, never raised to the
    caller.
    """

    def __init__(self, sink: CorrectionSinkPort):
        self.sink = sink
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="sku-correction")

    def submit(self, record: CorrectionRecord) -> Optional[Future]:
        """Queue a correction; after close() it is logged and dropped (returns None)."""
        try:
            future = self._executor.submit(self.sink.append, record)
        except RuntimeError:
            logger.warning(
                f"Correction recorder closed, dropping correction for food {record.food_id}",
                extra={"food_id": record.food_id},
            )
            return None
        future.add_done_callback(lambda done: self._log_failure(done, record))
        return future

    def close(self, wait: bool = True) -> None:
        """Stop accepting corrections; with wait=True, flush pending ones."""
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _log_failure(future: Future, record: CorrectionRecord) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(
                f"Failed to append correction for food {record.food_id}: {error}",
                exc_info=error,
                extra={"food_id": record.food_id},
            )
