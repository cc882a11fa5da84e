"""Section extractors that turn raw resume text into structured entries."""

import re
from datetime import date
from typing import List, Optional, Tuple

from .sections import locate_section
from .vocabulary import DEFAULT_VOCABULARY, KeywordVocabulary
from ..models.base import stable_id
from ..models.enums import AchievementCategory, SectionName, SkillLevel
from ..models.resume import Achievement, Education, Experience, Skill
from ..utils.logging import get_logger

UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_POSITION = "Unknown Position"
UNKNOWN_LOCATION = "Unknown Location"
UNKNOWN_INSTITUTION = "Unknown Institution"
DEFAULT_DEGREE = "Degree"
DEFAULT_FIELD = "Field of Study"

MIN_JOB_ENTRY_LENGTH = 20
MIN_EDUCATION_ENTRY_LENGTH = 10
MIN_ACHIEVEMENT_ENTRY_LENGTH = 10
MIN_ACHIEVEMENT_TITLE_LENGTH = 5
MAX_DESCRIPTION_LENGTH = 500
MAX_ACHIEVEMENT_DESCRIPTION_LENGTH = 200

_MONTH = (
    r'(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|aug(?:ust)?'
    r'|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)\.?'
)
_YEAR = re.compile(r'\b((?:19|20)\d{2})\b')
_DATE_RANGE = re.compile(
    rf'(?:{_MONTH}\s+)?\b((?:19|20)\d{{2}})\s*(?:[-–—]|to)\s*'
    rf'(?:(?:{_MONTH}\s+)?((?:19|20)\d{{2}})\b|present|current|ongoing|now)',
    re.IGNORECASE
)
_YEAR_LEAD = re.compile(rf'^(?:{_MONTH}\s+)?(?:19|20)\d{{2}}\b', re.IGNORECASE)
_MONTH_YEAR = re.compile(rf'\b{_MONTH}\s+(?:19|20)\d{{2}}\b', re.IGNORECASE)
_BULLET = re.compile(r'^[ \t]*[•●▪◦‣∙·*\-–][ \t]+')

_JOB_HEADER = re.compile(
    r'^[A-Z]\S*(?:[ \t]+\S+){0,6}?[ \t]+(?:at|@)[ \t]+\S'
    r'|^[A-Z]\S*(?:[ \t]+\S+){0,6}?[ \t]+[|–—-][ \t]+[A-Z0-9]'
    r'|^[A-Z][^|\n]{1,80}?[ \t]*\|[ \t]*\S'
)
_AT_SEPARATOR = re.compile(r'\s+(?:at|@)\s+|\s*@\s*')
_FIELD_SEPARATOR = re.compile(r'\s+[|–—-]\s+|\s*\|\s*|,\s+')
_LOCATION_LABEL = re.compile(r'\b(?:location|based\s+in)\s*[:–-]\s*(.+)', re.IGNORECASE)
_CITY_STATE = re.compile(r"^[A-Z][A-Za-z .'-]{1,40},\s*(?:[A-Z]{2}\b|[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?$)")
_REMOTE = re.compile(r'^(?:remote|hybrid)\b', re.IGNORECASE)

_INSTITUTION_KEYWORD = re.compile(r'\b(?:University|College|School|Institute|Academy|Polytechnic)\b', re.IGNORECASE)
_INSTITUTION_NAME = re.compile(
    r"([A-Z][^,\n]*?\b(?:University|College|School|Institute|Academy|Polytechnic)\b[^,\n(]*)"
)
_DEGREE = re.compile(
    r"\b(?:(?:Bachelor|Master|Associate|Doctor)(?:'s)?(?:\s+of\s+[A-Z][a-z]+(?:\s+(?:and|&)\s+[A-Z][a-z]+)?)?"
    r"|Doctorate|Ph\.?\s?D\.?|MBA|M\.?D\.|J\.?D\.|B\.S\.|M\.S\.|B\.A\.|M\.A\.|B\.?Sc\.?|M\.?Sc\.?|B\.?Eng\.?|M\.?Eng\.?"
    r"|BSc|MSc|High\s+School\s+Diploma|Diploma|Certificate)(?![A-Za-z])",
    re.IGNORECASE
)
_DEGREE_LABEL = re.compile(r'\b(?:degree|earned|received)[\s:]*([^,\n]+)', re.IGNORECASE)
_FIELD_LABEL = re.compile(r'\b(?:major|field(?:\s+of\s+study)?)\s*[:\-]?\s*([^,\n]+)', re.IGNORECASE)
_FIELD_AFTER_DEGREE = re.compile(r'^\s*(?:degree\b)?\s*(?:in\b|,|-|–|:)?\s*([^,(|\n]+)', re.IGNORECASE)
_GPA = re.compile(r'\b(?:gpa|grade)[\s:]*(\d+(?:\.\d+)?)', re.IGNORECASE)

_ORGANIZATION = re.compile(r'\b(?:from|by|at)\s+([^,\n]+)', re.IGNORECASE)
_TITLE_SEPARATOR = re.compile(r'\s+[-–—|]\s+|,\s+')

_SKILL_SPLIT = re.compile(r'[,;|]')
_SKILL_LABEL = re.compile(r'^[^:]{1,40}:\s*')
MAX_SKILL_WORDS = 5


def _strip_bullet(line: str) -> str:
    return _BULLET.sub('', line).strip()


def _strip_dates(text: str) -> str:
    """Remove date ranges, years and month names from a line."""
    text = _DATE_RANGE.sub(' ', text)
    text = _MONTH_YEAR.sub(' ', text)
    text = _YEAR.sub(' ', text)
    text = re.sub(r'\([^)]*\)', ' ', text)
    return re.sub(r'\s+', ' ', text).strip(" \t|,–—-:;()")


def _is_date_line(line: str) -> bool:
    return bool(_YEAR.search(line)) and not re.search(r'[A-Za-z]{2,}', _strip_dates(line))


def _parse_date_range(text: str, lone_year_is_end: bool = False) -> Tuple[date, Optional[date]]:
    """Read a start/end pair from an entry.

    Args:
        text: Entry text
        lone_year_is_end: Treat a single year as a completion year (start = end)
            instead of a start year

    Returns:
        Tuple of (start date, end date or None for ongoing)
    """
    match = _DATE_RANGE.search(text)
    if match:
        start = date(int(match.group(1)), 1, 1)
        end = date(int(match.group(2)), 1, 1) if match.group(2) else None
    else:
        year = _YEAR.search(text)
        if year:
            start = date(int(year.group(1)), 1, 1)
            end = start if lone_year_is_end else None
        else:
            start = date(date.today().year, 1, 1)
            end = None

    if end is not None and end < start:
        start, end = end, start
    return start, end


class ResumeSectionExtractor:
    """Extracts experience, skills, education and achievements from raw text.

    Every ``extract_*`` method is a pure function of its input text: it never
    raises for malformed content, returns an empty list when the section
    cannot be located, and silently drops entries it cannot identify.
    """

    def __init__(self, vocabulary: Optional[KeywordVocabulary] = None, max_achievements_per_entry: int = 5):
        """Initialize the extractor.

        Args:
            vocabulary: Keyword tables; defaults to the built-in vocabulary
            max_achievements_per_entry: Cap on achievement phrases per job or degree
        """
        self.vocabulary = vocabulary or DEFAULT_VOCABULARY
        self.max_achievements_per_entry = max_achievements_per_entry
        self.logger = get_logger("parser.sections")
        self._action_verbs = {verb.lower() for verb in self.vocabulary.achievement_verbs}

    # Experience

    def extract_experience(self, text: str) -> List[Experience]:
        """Extract work experience entries.

        Args:
            text: Raw resume text

        Returns:
            List of Experience entries in document order
        """
        span = locate_section(text, SectionName.EXPERIENCE)
        if span is None:
            return []

        experiences = []
        for index, lines in enumerate(self._split_job_entries(span.body)):
            entry_text = '\n'.join(lines)
            if len(entry_text) < MIN_JOB_ENTRY_LENGTH:
                continue
            experience = self._parse_job_entry(index, lines)
            if experience is not None:
                experiences.append(experience)

        self.logger.debug(f"Extracted {len(experiences)} experience entries")
        return experiences

    def _is_job_header(self, line: str) -> bool:
        if not _JOB_HEADER.match(line) or _is_date_line(line):
            return False
        first_word = line.split(None, 1)[0].lower()
        return first_word not in self._action_verbs

    def _split_job_entries(self, body: str) -> List[List[str]]:
        """Group section lines into one list per job.

        A title line ("Engineer at Acme", "Engineer | Acme | 2020 - 2022")
        opens a new job once the current one already has a title; a line
        starting with a year opens one once the current job has both a title
        and dates, which supports the year-first layout.
        """
        entries: List[List[str]] = []
        current: List[str] = []
        has_header = has_dates = False

        for raw_line in body.splitlines():
            line = raw_line.strip()
            if not line:
                continue
            is_header = self._is_job_header(line)
            is_year_led = bool(_YEAR_LEAD.match(line))

            if current and ((is_header and has_header) or (is_year_led and has_header and has_dates)):
                entries.append(current)
                current = []
                has_header = has_dates = False

            current.append(line)
            has_header = has_header or is_header
            has_dates = has_dates or is_year_led or bool(_DATE_RANGE.search(line))

        if current:
            entries.append(current)
        return entries

    def _parse_job_entry(self, index: int, lines: List[str]) -> Optional[Experience]:
        header_index = next((i for i, line in enumerate(lines) if self._is_job_header(line)), 0)
        position, company, header_location = self._split_job_header(lines[header_index])
        if not position and not company:
            return None

        entry_text = '\n'.join(lines)
        start_date, end_date = _parse_date_range(entry_text)

        location = header_location
        description_lines = []
        for i, line in enumerate(lines):
            if i == header_index or _is_date_line(line):
                continue
            if not location and not _BULLET.match(line):
                location = self._match_location(line)
                if location:
                    continue
            description_lines.append(_strip_bullet(line))

        company = company or UNKNOWN_COMPANY
        position = position or UNKNOWN_POSITION

        return Experience(
            id=stable_id(SectionName.EXPERIENCE.value, index, company, position, start_date),
            company=company,
            position=position,
            start_date=start_date,
            end_date=end_date,
            location=location or UNKNOWN_LOCATION,
            description=' '.join(description_lines)[:MAX_DESCRIPTION_LENGTH],
            achievements=self.vocabulary.find_achievement_phrases(entry_text, self.max_achievements_per_entry),
            technologies=self.vocabulary.find_technologies(entry_text),
            metrics=[],
        )

    def _split_job_header(self, header: str) -> Tuple[str, str, str]:
        """Split a title line into position, company and trailing location."""
        cleaned = _strip_dates(header)

        at_match = _AT_SEPARATOR.search(cleaned)
        if at_match:
            position = cleaned[:at_match.start()]
            rest = [part for part in _FIELD_SEPARATOR.split(cleaned[at_match.end():]) if part.strip()]
        else:
            parts = [part for part in _FIELD_SEPARATOR.split(cleaned) if part.strip()]
            position = parts[0] if parts else ""
            rest = parts[1:]

        company = rest[0] if rest else ""
        location = ", ".join(rest[1:3]) if len(rest) > 1 else ""
        if location and not self._match_location(location):
            location = ""

        return position.strip(" |,–—-:")[:100], company.strip(" |,–—-:")[:100], location

    @staticmethod
    def _match_location(line: str) -> str:
        label = _LOCATION_LABEL.search(line)
        if label:
            return label.group(1).strip()
        if len(line) <= 60 and (_CITY_STATE.match(line) or _REMOTE.match(line)):
            return line.strip()
        return ""

    # Skills

    def extract_skills(self, text: str) -> List[Skill]:
        """Extract skills from the skills section and the whole-document technology scan.

        Args:
            text: Raw resume text

        Returns:
            List of distinct Skill entries, section entries first
        """
        names: List[str] = []
        span = locate_section(text, SectionName.SKILLS)
        if span is not None:
            names.extend(self._parse_skill_names(span.body))

        # Technical skills are often listed without a labeled section
        names.extend(self.vocabulary.find_technologies(text))

        # Duplicates are exact name matches; "Javascript" and "JavaScript" are both kept
        skills = []
        seen = set()
        for name in names:
            if name in seen:
                continue
            seen.add(name)
            skills.append(Skill(
                id=stable_id(SectionName.SKILLS.value, name),
                name=name,
                category=self.vocabulary.categorize_skill(name),
                level=SkillLevel.INTERMEDIATE,
            ))

        self.logger.debug(f"Extracted {len(skills)} skills")
        return skills

    @staticmethod
    def _parse_skill_names(body: str) -> List[str]:
        """Read comma lists, bullet items and "Label: a, b" lines."""
        names = []
        for raw_line in body.splitlines():
            line = _SKILL_LABEL.sub('', _strip_bullet(raw_line))
            for item in _SKILL_SPLIT.split(line):
                item = item.strip().rstrip('.').strip()
                if 2 < len(item) < 50 and len(item.split()) <= MAX_SKILL_WORDS:
                    names.append(item)
        return names

    # Education

    def extract_education(self, text: str) -> List[Education]:
        """Extract education entries.

        Args:
            text: Raw resume text

        Returns:
            List of Education entries in document order
        """
        span = locate_section(text, SectionName.EDUCATION)
        if span is None:
            return []

        education = []
        for index, lines in enumerate(self._split_education_entries(span.body)):
            if len('\n'.join(lines)) < MIN_EDUCATION_ENTRY_LENGTH:
                continue
            entry = self._parse_education_entry(index, lines)
            if entry is not None:
                education.append(entry)

        self.logger.debug(f"Extracted {len(education)} education entries")
        return education

    @staticmethod
    def _split_education_entries(body: str) -> List[List[str]]:
        """Group section lines into one list per degree.

        A new entry starts at a second institution line, a second degree line,
        or a year-led line once the current entry is identified and dated.
        """
        entries: List[List[str]] = []
        current: List[str] = []
        has_institution = has_degree = has_dates = False

        for raw_line in body.splitlines():
            line = raw_line.strip()
            if not line:
                continue
            is_institution = bool(_INSTITUTION_KEYWORD.search(line))
            is_degree = bool(_DEGREE.search(line))
            is_year_led = bool(_YEAR_LEAD.match(line))

            starts_new = (
                (is_institution and has_institution and not is_degree)
                or (is_degree and has_degree)
                or (is_year_led and has_dates and (has_institution or has_degree))
            )
            if current and starts_new:
                entries.append(current)
                current = []
                has_institution = has_degree = has_dates = False

            current.append(line)
            has_institution = has_institution or is_institution
            has_degree = has_degree or is_degree
            has_dates = has_dates or bool(_YEAR.search(line))

        if current:
            entries.append(current)
        return entries

    def _parse_education_entry(self, index: int, lines: List[str]) -> Optional[Education]:
        entry_text = '\n'.join(lines)

        degree_line_index, degree, field_of_study = self._find_degree(lines)
        institution = self._find_institution(lines, degree_line_index)
        if not institution and not degree:
            return None

        field_match = _FIELD_LABEL.search(entry_text)
        if field_match and not field_of_study:
            field_of_study = _strip_dates(field_match.group(1))

        start_date, end_date = _parse_date_range(entry_text, lone_year_is_end=True)

        gpa = None
        gpa_match = _GPA.search(entry_text)
        if gpa_match:
            value = float(gpa_match.group(1))
            if 0.0 <= value <= 4.0:
                gpa = value
            else:
                self.logger.debug(f"Ignoring implausible GPA {value}")

        institution = institution or UNKNOWN_INSTITUTION
        degree = degree or DEFAULT_DEGREE

        return Education(
            id=stable_id(SectionName.EDUCATION.value, index, institution, degree, start_date),
            institution=institution,
            degree=degree,
            field_of_study=field_of_study or DEFAULT_FIELD,
            start_date=start_date,
            end_date=end_date,
            gpa=gpa,
            achievements=self.vocabulary.find_achievement_phrases(entry_text, self.max_achievements_per_entry),
        )

    @staticmethod
    def _find_degree(lines: List[str]) -> Tuple[Optional[int], str, str]:
        """Locate the degree line and split it into degree and field of study."""
        for i, line in enumerate(lines):
            text = _strip_bullet(line)
            match = _DEGREE.search(text)
            if match:
                degree = match.group(0).strip()
                field_match = _FIELD_AFTER_DEGREE.match(text[match.end():])
                field_of_study = ""
                if field_match:
                    field_of_study = _strip_dates(re.split(r'\bgpa\b|\bfrom\b|\bat\b', field_match.group(1), flags=re.IGNORECASE)[0])
                if _INSTITUTION_KEYWORD.search(field_of_study):
                    field_of_study = ""
                return i, degree, field_of_study
        for i, line in enumerate(lines):
            label = _DEGREE_LABEL.search(line)
            if label:
                return i, _strip_dates(label.group(1)), ""
        return None, "", ""

    @staticmethod
    def _find_institution(lines: List[str], degree_line_index: Optional[int]) -> str:
        """Find the institution name, falling back to the first plain line."""
        for line in lines:
            match = _INSTITUTION_NAME.search(_strip_bullet(line))
            if match:
                name = match.group(1)
                # "B.S. in Physics from Stanford University" -> "Stanford University"
                name = re.split(r'\s+(?:from|at)\s+|\s*@\s*', name)[-1]
                name = _strip_dates(name)
                if name:
                    return name
        for i, line in enumerate(lines):
            if i == degree_line_index or _BULLET.match(line) or _is_date_line(line) or _GPA.search(line):
                continue
            candidate = _strip_dates(line)
            if candidate:
                return candidate[:100]
        return ""

    # Achievements

    def extract_achievements(self, text: str) -> List[Achievement]:
        """Extract awards, recognition and certifications.

        Args:
            text: Raw resume text

        Returns:
            List of Achievement entries in document order
        """
        span = locate_section(text, SectionName.ACHIEVEMENTS)
        if span is None:
            return []

        achievements = []
        for index, lines in enumerate(self._split_achievement_entries(span.body)):
            entry_text = ' '.join(_strip_bullet(line) for line in lines)
            if len(entry_text) < MIN_ACHIEVEMENT_ENTRY_LENGTH:
                continue

            title_line = _strip_bullet(lines[0])
            segments = [segment.strip() for segment in _TITLE_SEPARATOR.split(title_line) if segment.strip()]
            title = segments[0] if segments else title_line
            if len(title) < MIN_ACHIEVEMENT_TITLE_LENGTH:
                continue

            year = _YEAR.search(entry_text)
            achieved_on = date(int(year.group(1)), 1, 1) if year else date(date.today().year, 1, 1)

            achievements.append(Achievement(
                id=stable_id(SectionName.ACHIEVEMENTS.value, index, title),
                title=title,
                description=entry_text[:MAX_ACHIEVEMENT_DESCRIPTION_LENGTH],
                date=achieved_on,
                category=AchievementCategory.RECOGNITION,
                organization=self._find_organization(entry_text, segments[1:]),
            ))

        self.logger.debug(f"Extracted {len(achievements)} achievements")
        return achievements

    @staticmethod
    def _split_achievement_entries(body: str) -> List[List[str]]:
        """Split on bullet markers; without bullets every line is an entry."""
        lines = [line.strip() for line in body.splitlines() if line.strip()]
        if not any(_BULLET.match(line) for line in lines):
            return [[line] for line in lines]

        entries: List[List[str]] = []
        for line in lines:
            if _BULLET.match(line) or not entries:
                entries.append([line])
            else:
                entries[-1].append(line)
        return entries

    @staticmethod
    def _find_organization(entry_text: str, trailing_segments: List[str]) -> Optional[str]:
        match = _ORGANIZATION.search(entry_text)
        if match:
            organization = _strip_dates(match.group(1))
            if organization:
                return organization
        for segment in trailing_segments:
            candidate = _strip_dates(segment)
            if candidate:
                return candidate
        return None


_default_extractor = ResumeSectionExtractor()


def extract_experience(text: str) -> List[Experience]:
    """Extract work experience with the default vocabulary."""
    return _default_extractor.extract_experience(text)


def extract_skills(text: str) -> List[Skill]:
    """Extract skills with the default vocabulary."""
    return _default_extractor.extract_skills(text)


def extract_education(text: str) -> List[Education]:
    """Extract education with the default vocabulary."""
    return _default_extractor.extract_education(text)


def extract_achievements(text: str) -> List[Achievement]:
    """Extract achievements with the default vocabulary."""
    return _default_extractor.extract_achievements(text)
