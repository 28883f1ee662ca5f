"""Pure helper functions shared by the bounded contexts."""

from .selectors import (
    SelectorFeatures,
    extract_attributes,
    extract_classes,
    extract_id,
    extract_tag,
    parse_selector,
    subject_compound,
)
from .similarity import levenshtein_distance, overlap_ratio, string_similarity

__all__ = [
    "SelectorFeatures",
    "extract_attributes",
    "extract_classes",
    "extract_id",
    "extract_tag",
    "parse_selector",
    "subject_compound",
    "levenshtein_distance",
    "overlap_ratio",
    "string_similarity",
]
