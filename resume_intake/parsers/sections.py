"""Heading detection and section boundaries within raw resume text."""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern

from ..models.enums import SectionName

SECTION_KEYWORDS: Dict[SectionName, str] = {
    SectionName.EXPERIENCE: r'(?:professional\s+)?experience|work\s+history|employment|career',
    SectionName.SKILLS: r'(?:technical\s+)?skills|competencies|expertise|proficiencies',
    SectionName.EDUCATION: r'education|academic|degree|university|college|school',
    SectionName.ACHIEVEMENTS: r'awards|recognition|achievements|honors|certifications',
}

# Headings that close whatever section precedes them
BOUNDARY_KEYWORDS = (
    r'education|experience|skills|certifications|awards|projects|publications|references'
    r'|summary|objective|about|achievements|honors|interests|volunteer'
)

_NEXT_SECTION = re.compile(
    rf'\n[ \t]*(?:(?:{BOUNDARY_KEYWORDS})\b'
    rf'|(?:[A-Za-z]+[ \t]+){{1,2}}(?:{BOUNDARY_KEYWORDS})[ \t]*:?[ \t]*(?=\n|$))',
    re.IGNORECASE
)

# Indexes into the per-section pattern list
_STANDALONE, _LINE_START, _ANYWHERE = range(3)


def _heading_patterns(keywords: str) -> List[Pattern]:
    """Ordered heading regexes for one section, most specific first."""
    return [
        # A heading on its own line, with up to three qualifier words
        # ("WORK EXPERIENCE", "AWARDS & RECOGNITION", "Education:")
        re.compile(
            rf'^[ \t]*(?:[A-Za-z]+[ \t]+){{0,3}}?(?:{keywords})'
            rf'(?:[ \t]*[&/,][ \t&/,A-Za-z]{{0,40}})?[ \t]*:?[ \t]*$',
            re.IGNORECASE | re.MULTILINE
        ),
        # A heading opening a line with content after it ("Skills: Python, Go")
        re.compile(rf'^[ \t]*(?:{keywords})\b', re.IGNORECASE | re.MULTILINE),
        re.compile(rf'(?:{keywords})', re.IGNORECASE),
    ]


SECTION_PATTERNS: Dict[SectionName, List[Pattern]] = {
    section: _heading_patterns(keywords) for section, keywords in SECTION_KEYWORDS.items()
}


@dataclass(frozen=True)
class SectionSpan:
    """Location of a section inside the raw text.
    
    ``start`` is where the heading match begins, ``body_start`` where the
    section content begins and ``end`` where the next section begins.
    """
    section: SectionName
    heading: str
    start: int
    body_start: int
    end: int
    text: str
    body: str


def has_section_heading(text: str, section: SectionName) -> bool:
    """Check whether any heading for ``section`` appears anywhere in ``text``."""
    return SECTION_PATTERNS[section][_ANYWHERE].search(text) is not None


def find_next_section(text: str, position: int) -> int:
    """Find where the section following ``position`` begins.
    
    Args:
        text: Full resume text
        position: Offset inside the current section
        
    Returns:
        Offset of the next section boundary, or ``len(text)`` if none follows
    """
    match = _NEXT_SECTION.search(text, position + 1)
    return match.start() if match else len(text)


def locate_section(text: str, section: SectionName) -> Optional[SectionSpan]:
    """Find the first heading for ``section`` and the text it governs.
    
    Args:
        text: Full resume text
        section: Section to locate
        
    Returns:
        SectionSpan, or None when no heading for the section exists
    """
    for kind, pattern in enumerate(SECTION_PATTERNS[section]):
        match = pattern.search(text)
        if match:
            break
    else:
        return None

    line_start = text.rfind('\n', 0, match.start()) + 1
    line_end = text.find('\n', match.start())
    if line_end == -1:
        line_end = len(text)

    if kind == _STANDALONE:
        start = match.start()
        body_start = min(line_end + 1, len(text))
    elif kind == _LINE_START:
        start = match.start()
        colon = re.match(r'[ \t]*:', text[match.end():line_end])
        body_start = match.end() + colon.end() if colon else line_start
    else:
        start = line_start
        body_start = line_start

    # Search from the end of the heading line so the heading itself never matches
    end = max(find_next_section(text, line_end - 1), body_start)

    return SectionSpan(
        section=section,
        heading=match.group(0).strip(),
        start=start,
        body_start=body_start,
        end=end,
        text=text[start:end],
        body=text[body_start:end],
    )
