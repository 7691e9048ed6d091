"""Formatting of annotation responses into Box metadata records."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

KEYWORDS_FIELD = "keywords"
TRANSCRIPTS_FIELD = "transcripts"


@dataclass
class MetadataRecord:
    """A flat metadata instance destined for one template.

    Attributes:
        template_key: Metadata template the values are written under
        values: Field name -> string value
    """
    template_key: str
    values: Dict[str, str] = field(default_factory=dict)


def format_label_annotations(
    annotations: Mapping[str, Any],
    separator: str = ", "
) -> Dict[str, str]:
    """Join label descriptions into a keyword string.

    Args:
        annotations: Plain annotation response
        separator: Text placed between descriptions

    Returns:
        ``{"keywords": "cat, dog"}``, or ``{"keywords": ""}`` when the
        response has no labels
    """
    labels = annotations.get("labelAnnotations") or []
    descriptions = [label.get("description") or "" for label in labels]
    return {KEYWORDS_FIELD: separator.join(descriptions)}


def format_full_text_annotations(annotations: Mapping[str, Any]) -> Dict[str, str]:
    """Extract the full document text verbatim.

    Args:
        annotations: Plain annotation response

    Returns:
        ``{"transcripts": text}``, or ``{"transcripts": ""}`` when no text
        was detected
    """
    full_text = annotations.get("fullTextAnnotation") or {}
    return {TRANSCRIPTS_FIELD: full_text.get("text") or ""}


class MetadataFormatter:
    """Builds the metadata records written for an annotated file."""

    def __init__(
        self,
        keywords_template: str = "box-skills-keywords-demo",
        transcripts_template: str = "box-skills-transcripts-demo",
        keyword_separator: str = ", "
    ) -> None:
        if keywords_template == transcripts_template:
            raise ValueError(
                f"Keyword and transcript templates must differ, both are {keywords_template!r}"
            )
        self.keywords_template = keywords_template
        self.transcripts_template = transcripts_template
        self.keyword_separator = keyword_separator

    def format(self, annotations: Mapping[str, Any]) -> List[MetadataRecord]:
        """Format both records (keywords first, then transcripts)."""
        return [
            MetadataRecord(
                self.keywords_template,
                format_label_annotations(annotations, self.keyword_separator)
            ),
            MetadataRecord(
                self.transcripts_template,
                format_full_text_annotations(annotations)
            ),
        ]
