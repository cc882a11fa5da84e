"""Keyword vocabularies used by the section extractors."""

import re
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Pattern, Tuple

from ..models.enums import SkillCategory

TECHNOLOGIES = (
    "JavaScript", "TypeScript", "Python", "Java", "C#", "C++", "React", "Vue", "Angular",
    "Node.js", "Express", "Django", "Flask", "SQL", "MongoDB", "PostgreSQL", "MySQL",
    "AWS", "Azure", "GCP", "Docker", "Kubernetes", "Git", "REST", "GraphQL", "HTML",
    "CSS", "Tailwind", "Bootstrap", "Next.js", "Nuxt", "Svelte", "Rust", "Go", "PHP",
    "Ruby", "Rails", "Laravel", "Spring", "Hibernate", "JPA", "Elasticsearch", "Redis",
    "RabbitMQ", "Kafka", "Jenkins", "GitLab", "GitHub", "Terraform", "Ansible", "Linux",
    "Windows", "macOS",
)

TECHNICAL_KEYWORDS = (
    "javascript", "python", "java", "react", "node", "sql", "aws", "docker", "git",
    "api", "database", "programming", "coding", "development", "software", "web",
    "mobile", "cloud", "devops", "frontend", "backend", "fullstack",
)

SOFT_KEYWORDS = (
    "communication", "leadership", "teamwork", "problem-solving", "problem solving",
    "critical thinking", "time management", "organization", "collaboration",
    "presentation", "negotiation", "adaptability", "creativity", "analytical",
)

ACHIEVEMENT_VERBS = (
    "achieved", "accomplished", "improved", "increased", "reduced", "led", "managed",
    "delivered", "implemented",
)

ACHIEVEMENT_OUTCOMES = ("resulted in", "led to", "contributed to")


def _keyword_pattern(keyword: str) -> Pattern:
    # Word boundaries that also hold for names ending in symbols (C#, C++, Node.js)
    return re.compile(
        r'(?<![A-Za-z0-9_])' + re.escape(keyword) + r'(?![A-Za-z0-9_+#])',
        re.IGNORECASE
    )


@dataclass(frozen=True)
class KeywordVocabulary:
    """Keyword tables driving technology detection, skill categorisation and
    achievement phrase mining.
    
    Instances are immutable; use :meth:`extended` to derive a customised copy.
    """
    technologies: Tuple[str, ...] = TECHNOLOGIES
    technical_keywords: Tuple[str, ...] = TECHNICAL_KEYWORDS
    soft_keywords: Tuple[str, ...] = SOFT_KEYWORDS
    achievement_verbs: Tuple[str, ...] = ACHIEVEMENT_VERBS
    achievement_outcomes: Tuple[str, ...] = ACHIEVEMENT_OUTCOMES
    _technology_patterns: Tuple[Tuple[str, Pattern], ...] = field(
        init=False, repr=False, compare=False, default=()
    )
    _achievement_patterns: Tuple[Pattern, ...] = field(
        init=False, repr=False, compare=False, default=()
    )

    def __post_init__(self):
        object.__setattr__(self, "_technology_patterns", tuple(
            (technology, _keyword_pattern(technology)) for technology in self.technologies
        ))
        verbs = "|".join(re.escape(verb) for verb in self.achievement_verbs)
        outcomes = "|".join(re.escape(outcome).replace(" ", r"\s+") for outcome in self.achievement_outcomes)
        object.__setattr__(self, "_achievement_patterns", (
            re.compile(rf'\b(?:{verbs})\s+([^.\n]+)', re.IGNORECASE),
            re.compile(rf'\b(?:{outcomes})\s+([^.\n]+)', re.IGNORECASE),
        ))

    def extended(
        self,
        technologies: Iterable[str] = (),
        technical_keywords: Iterable[str] = (),
        soft_keywords: Iterable[str] = ()
    ) -> "KeywordVocabulary":
        """Return a copy with additional keywords appended.
        
        Args:
            technologies: Extra technology names to detect
            technical_keywords: Extra substrings marking a skill as technical
            soft_keywords: Extra substrings marking a skill as soft
            
        Returns:
            New KeywordVocabulary
        """
        return replace(
            self,
            technologies=_merge(self.technologies, technologies),
            technical_keywords=_merge(self.technical_keywords, (k.lower() for k in technical_keywords)),
            soft_keywords=_merge(self.soft_keywords, (k.lower() for k in soft_keywords)),
        )

    def find_technologies(self, text: str) -> List[str]:
        """List every known technology mentioned in ``text``, in vocabulary order."""
        return [technology for technology, pattern in self._technology_patterns if pattern.search(text)]

    def categorize_skill(self, name: str) -> SkillCategory:
        """Classify a skill by keyword containment.
        
        Technical keywords are checked before soft ones; anything matching
        neither list is an industry skill.
        """
        lowered = name.lower()
        if any(keyword in lowered for keyword in self.technical_keywords):
            return SkillCategory.TECHNICAL
        if any(keyword in lowered for keyword in self.soft_keywords):
            return SkillCategory.SOFT
        return SkillCategory.INDUSTRY

    def find_achievement_phrases(self, text: str, limit: int = 5) -> List[str]:
        """Mine short accomplishment phrases from free text.
        
        Args:
            text: Text to scan
            limit: Maximum number of phrases to return
            
        Returns:
            Distinct phrases longer than 10 and shorter than 200 characters
        """
        phrases = []
        for pattern in self._achievement_patterns:
            for match in pattern.finditer(text):
                phrase = match.group(1).strip()
                if 10 < len(phrase) < 200 and phrase not in phrases:
                    phrases.append(phrase)
        return phrases[:limit]


def _merge(existing: Tuple[str, ...], extra: Iterable[str]) -> Tuple[str, ...]:
    merged = list(existing)
    for item in extra:
        item = item.strip()
        if item and item not in merged:
            merged.append(item)
    return tuple(merged)


DEFAULT_VOCABULARY = KeywordVocabulary()
