"""Per-file orchestration: decode, assemble, encode and deliver."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Iterable, List, Optional, Union

from models.results import FileResult, ProcessingStatus, SkippedMeasurement
from services.assembler import ObservationAssembler
from services.decoder import CharsetHook, decode_document
from services.errors import HilltopError
from transport import MessageQueue

logger = logging.getLogger(__name__)


class IngestProcessor:
    """Runs Hilltop files through the pipeline one at a time."""

    def __init__(
        self,
        assembler: ObservationAssembler,
        queue: Optional[MessageQueue] = None,
        charset_hook: Optional[CharsetHook] = None,
        dry_run: bool = False,
    ) -> None:
        self.assembler = assembler
        self.queue = queue
        self.charset_hook = charset_hook
        self.dry_run = dry_run

    def process_file(self, path: Union[str, Path]) -> FileResult:
        """Process a single file; failures are reported in the result."""
        start_time = time.perf_counter()
        file_name = str(path)
        logger.info("processing", extra={"file": file_name})

        agency: Optional[str] = None
        measurement_count = 0
        observation_count = 0
        delivered = 0
        skipped: List[SkippedMeasurement] = []
        status = ProcessingStatus.processed
        error: Optional[str] = None

        try:
            document = decode_document(path, charset_hook=self.charset_hook)
            agency = document.agency
            measurement_count = len(document.measurements)

            assembly = self.assembler.assemble(document)
            observation_count = len(assembly.observations)
            skipped = [
                SkippedMeasurement(kind=item.kind, name=item.name)
                for item in assembly.skipped
            ]

            for observation in assembly.observations:
                body = observation.encode().decode("utf-8")
                logger.debug(body)
                if self.dry_run or self.queue is None:
                    continue
                self.queue.send_message(body)
                delivered += 1
        except HilltopError as exc:
            status = ProcessingStatus.failed
            error = str(exc)
            logger.error(
                "unable to process hilltop file: %s",
                exc,
                extra={"file": file_name, "status": status.value},
            )

        processing_ms = int((time.perf_counter() - start_time) * 1000)
        if status is ProcessingStatus.processed:
            logger.info(
                "completed",
                extra={
                    "file": file_name,
                    "agency": agency,
                    "measurement_count": measurement_count,
                    "observation_count": observation_count,
                    "processing_ms": processing_ms,
                },
            )
        return FileResult(
            path=file_name,
            status=status,
            agency=agency,
            measurement_count=measurement_count,
            observation_count=observation_count,
            delivered_count=delivered,
            skipped=skipped,
            processing_ms=processing_ms,
            error=error,
        )

    def process_files(
        self, paths: Iterable[Union[str, Path]], keep_going: bool = False
    ) -> List[FileResult]:
        """Process files in order, stopping at the first failure unless ``keep_going``."""
        results: List[FileResult] = []
        for path in paths:
            result = self.process_file(path)
            results.append(result)
            if result.status is ProcessingStatus.failed and not keep_going:
                break
        return results
