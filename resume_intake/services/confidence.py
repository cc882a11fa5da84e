"""Heuristic confidence scores for sections and whole documents."""

from typing import Dict, Iterable

from ..models.enums import SectionName
from ..models.results import SectionParseResult

SECTION_WEIGHTS: Dict[SectionName, float] = {
    SectionName.EXPERIENCE: 0.4,
    SectionName.SKILLS: 0.2,
    SectionName.EDUCATION: 0.2,
    SectionName.ACHIEVEMENTS: 0.1,
    SectionName.PERSONAL_INFO: 0.1,
}
DEFAULT_SECTION_WEIGHT = 0.1

BASE_CONFIDENCE = 0.1
HEADING_BONUS = 0.3
ENTRIES_BONUS = 0.4
PER_ENTRY_BONUS = 0.1
MAX_PER_ENTRY_BONUS = 0.2
TEXT_LENGTH_BONUS = 0.1
TEXT_LENGTH_SATURATION = 1000


def calculate_section_confidence(heading_found: bool, entry_count: int) -> float:
    """Score how completely a section was located and structured.

    Args:
        heading_found: Whether the section heading appears in the text
        entry_count: Number of entries kept for the section

    Returns:
        Confidence in [0, 1]
    """
    confidence = BASE_CONFIDENCE
    if heading_found:
        confidence += HEADING_BONUS
        if entry_count > 0:
            confidence += ENTRIES_BONUS + min(PER_ENTRY_BONUS * entry_count, MAX_PER_ENTRY_BONUS)
    return max(0.0, min(confidence, 1.0))


def calculate_overall_confidence(section_results: Iterable[SectionParseResult], raw_text: str) -> float:
    """Weighted average of section confidences plus a text length bonus.

    Args:
        section_results: Per-section reports
        raw_text: Decoded document text

    Returns:
        Confidence in [0, 1]
    """
    weighted_sum = 0.0
    total_weight = 0.0
    for result in section_results:
        weight = SECTION_WEIGHTS.get(result.section, DEFAULT_SECTION_WEIGHT)
        weighted_sum += result.confidence * weight
        total_weight += weight

    average = weighted_sum / total_weight if total_weight > 0 else 0.0
    length_bonus = min(len(raw_text) / TEXT_LENGTH_SATURATION, 1.0) * TEXT_LENGTH_BONUS
    return max(0.0, min(average + length_bonus, 1.0))
