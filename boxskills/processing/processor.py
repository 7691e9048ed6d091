"""Main file processing orchestrator."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging
import time

from ..box import BoxClient
from ..box.exceptions import BoxError
from ..config import ConfigManager
from ..vision import VisionServiceFactory
from ..vision.base import AnnotationService
from .exceptions import MetadataWriteError
from .metadata import MetadataFormatter, MetadataRecord

logger = logging.getLogger(__name__)


@dataclass
class MetadataWriteResult:
    """Outcome of writing one metadata record.

    Attributes:
        template_key: Template the record targets
        record: Values written (or that would be written in dry-run mode)
        success: Whether the write succeeded
        skipped: Whether the write was skipped (dry run)
        error: Error message if the write failed
        exception: Exception raised by the failed write
    """
    template_key: str
    record: Dict[str, str]
    success: bool
    skipped: bool = False
    error: Optional[str] = None
    exception: Optional[Exception] = field(default=None, repr=False, compare=False)


@dataclass
class ProcessingResult:
    """Result of processing a single file.

    Attributes:
        file_id: Box file ID
        user_id: Box user ID the pipeline acted as
        writes: One result per metadata record, in template order
        annotation_model: Annotation service that produced the annotations
        file_size: Size of the downloaded content in bytes
        processing_time: Time taken to process (seconds)
    """
    file_id: str
    user_id: Optional[str] = None
    writes: List[MetadataWriteResult] = None
    annotation_model: Optional[str] = None
    file_size: int = 0
    processing_time: float = 0.0

    def __post_init__(self):
        if self.writes is None:
            self.writes = []

    @property
    def success(self) -> bool:
        """True when every record was written or deliberately skipped."""
        return all(w.success or w.skipped for w in self.writes)

    def records(self) -> Dict[str, Dict[str, str]]:
        """Map of template key to the record for that template."""
        return {w.template_key: w.record for w in self.writes}


class SkillProcessor:
    """Orchestrates the annotation pipeline for a Box file.

    This class coordinates:
    - File download from Box
    - Image annotation
    - Metadata formatting
    - Concurrent metadata writes, joined into one result
    """

    def __init__(
        self,
        config: ConfigManager,
        annotator: Optional[AnnotationService] = None,
        dry_run: Optional[bool] = None
    ) -> None:
        """Initialize the processor.

        Args:
            config: Configuration manager
            annotator: Annotation service (created from config if not provided)
            dry_run: If True, don't write metadata (defaults to
                ``processing.dry_run``)
        """
        self.config = config
        self.dry_run = config.get("processing.dry_run", False) if dry_run is None else dry_run
        self.max_workers = max(1, config.get("processing.max_workers", 2))

        if annotator:
            self.annotator = annotator
        else:
            self.annotator = VisionServiceFactory.create_from_config(config)

        self.formatter = MetadataFormatter(
            keywords_template=config.get("metadata.keywords_template", "box-skills-keywords-demo"),
            transcripts_template=config.get("metadata.transcripts_template", "box-skills-transcripts-demo"),
            keyword_separator=config.get("metadata.keyword_separator", ", ")
        )

        logger.info(
            f"SkillProcessor initialized: annotator={self.annotator.model_name}, "
            f"dry_run={self.dry_run}"
        )

    def process_file(
        self,
        client: BoxClient,
        file_id: str,
        user_id: Optional[str] = None
    ) -> ProcessingResult:
        """Annotate a file and write its keyword and transcript metadata.

        Args:
            client: Box client acting as the file's owner
            file_id: ID of the file to process
            user_id: ID of the acting user, for reporting

        Returns:
            ProcessingResult with one entry per metadata template

        Raises:
            BoxError: If the file cannot be downloaded
            AnnotationError: If annotation fails
            MetadataWriteError: If any metadata write fails, after all
                writes have finished
        """
        logger.info(f"Processing file: {file_id}")
        start_time = time.time()

        content = client.download_file(file_id)
        file_size = len(content)

        annotation = self.annotator.annotate(content)
        del content

        records = self.formatter.format(annotation.annotations)
        writes = self._write_records(client, file_id, records)

        result = ProcessingResult(
            file_id=file_id,
            user_id=user_id,
            writes=writes,
            annotation_model=annotation.model_used,
            file_size=file_size,
            processing_time=time.time() - start_time
        )

        failures = [w for w in writes if not w.success and not w.skipped]
        if failures:
            failed = ", ".join(w.template_key for w in failures)
            succeeded = [w.template_key for w in writes if w.success]
            logger.error(
                f"Metadata write failed for file {file_id}: {failed} "
                f"(written: {', '.join(succeeded) or 'none'})"
            )
            raise MetadataWriteError(
                f"Failed to write metadata for file {file_id}: {failed}",
                results=writes
            ) from failures[0].exception

        logger.info(
            f"Processed file {file_id} in {result.processing_time:.1f}s "
            f"({len(writes)} metadata record(s){', dry run' if self.dry_run else ''})"
        )
        return result

    def _write_records(
        self,
        client: BoxClient,
        file_id: str,
        records: List[MetadataRecord]
    ) -> List[MetadataWriteResult]:
        """Write all records concurrently and wait for every outcome.

        Returns:
            Results in the same order as ``records``
        """
        if self.dry_run:
            for record in records:
                logger.info(f"[DRY RUN] Would write {record.template_key}: {record.values}")
            return [
                MetadataWriteResult(r.template_key, r.values, success=False, skipped=True)
                for r in records
            ]

        workers = min(self.max_workers, len(records)) or 1
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="metadata") as executor:
            futures = [
                executor.submit(self._write_record, client, file_id, record)
                for record in records
            ]
            return [future.result() for future in futures]

    def _write_record(
        self,
        client: BoxClient,
        file_id: str,
        record: MetadataRecord
    ) -> MetadataWriteResult:
        """Write one record, capturing Box failures in the result."""
        try:
            written = client.create_file_metadata(file_id, record.template_key, record.values)
        except BoxError as e:
            return MetadataWriteResult(
                template_key=record.template_key,
                record=record.values,
                success=False,
                error=str(e),
                exception=e
            )

        return MetadataWriteResult(
            template_key=record.template_key,
            record=written,
            success=True
        )
