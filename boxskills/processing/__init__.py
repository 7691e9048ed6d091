"""Annotation-to-metadata pipeline for boxskills."""

from boxskills.processing.processor import (
    SkillProcessor,
    ProcessingResult,
    MetadataWriteResult,
)
from boxskills.processing.metadata import (
    MetadataFormatter,
    MetadataRecord,
    format_label_annotations,
    format_full_text_annotations,
)
from boxskills.processing.exceptions import ProcessingError, MetadataWriteError

__all__ = [
    "SkillProcessor",
    "ProcessingResult",
    "MetadataWriteResult",
    "MetadataFormatter",
    "MetadataRecord",
    "format_label_annotations",
    "format_full_text_annotations",
    "ProcessingError",
    "MetadataWriteError",
]
