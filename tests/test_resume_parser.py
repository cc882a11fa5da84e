from datetime import date

import pytest

from resume_intake.models.enums import AchievementCategory, SkillCategory, SkillLevel
from resume_intake.parsers.resume_parser import (
    DEFAULT_FIELD,
    UNKNOWN_COMPANY,
    UNKNOWN_INSTITUTION,
    UNKNOWN_LOCATION,
    ResumeSectionExtractor,
    extract_achievements,
    extract_education,
    extract_experience,
    extract_skills,
)
from resume_intake.parsers.vocabulary import DEFAULT_VOCABULARY

from conftest import NO_SECTIONS_TEXT, SAMPLE_RESUME


# --- Experience ---


def test_experience_at_header_with_present_end():
    text = (
        "EXPERIENCE\nSenior Engineer at Google\n2020 - Present\nMountain View, CA\n"
        "- Led team of engineers\n- Improved performance by 50%"
    )
    experience = extract_experience(text)

    assert len(experience) == 1
    job = experience[0]
    assert "Google" in job.company
    assert "Senior Engineer" in job.position
    assert job.start_date.year == 2020
    assert job.end_date is None
    assert job.is_current
    assert job.location == "Mountain View, CA"


def test_experience_multiple_jobs():
    experience = extract_experience(SAMPLE_RESUME)

    assert [(job.position, job.company) for job in experience] == [
        ("Senior Engineer", "Google"),
        ("Software Engineer", "Acme Corp"),
    ]
    acme = experience[1]
    assert acme.start_date == date(2016, 1, 1)
    assert acme.end_date == date(2020, 1, 1)
    assert acme.location == UNKNOWN_LOCATION
    assert acme.description == "Built REST APIs with Django"
    assert acme.technologies == ["Django", "REST"]


def test_experience_collects_technologies_and_achievements():
    job = extract_experience(SAMPLE_RESUME)[0]
    assert job.technologies == ["Python"]
    assert "team of engineers building Python services" in job.achievements
    assert "performance by 50%" in job.achievements


def test_experience_pipe_separated_headers():
    text = (
        "Experience\n"
        "Senior Software Engineer | TechCorp | 2021 - Present\n"
        "• Built REST APIs serving 1M requests/day\n\n"
        "Software Engineer | StartupXYZ | 2019 - 2021\n"
        "• Developed React frontend components\n"
    )
    experience = extract_experience(text)

    assert [(job.position, job.company) for job in experience] == [
        ("Senior Software Engineer", "TechCorp"),
        ("Software Engineer", "StartupXYZ"),
    ]
    assert experience[0].end_date is None
    assert experience[1].start_date.year == 2019
    assert experience[1].end_date.year == 2021


def test_experience_without_company_gets_placeholder():
    text = "EXPERIENCE\nFreelance consulting for various clients\n2018 - 2019\n"
    experience = extract_experience(text)
    assert len(experience) == 1
    assert experience[0].company == UNKNOWN_COMPANY


def test_experience_end_before_start_is_reordered():
    text = "EXPERIENCE\nEngineer at Initech\n2021 - 2019\n- Maintained the reporting pipeline\n"
    job = extract_experience(text)[0]
    assert job.start_date == date(2019, 1, 1)
    assert job.end_date == date(2021, 1, 1)


def test_experience_missing_section():
    assert extract_experience(NO_SECTIONS_TEXT) == []


def test_experience_dates_are_ordered_for_every_entry():
    for job in extract_experience(SAMPLE_RESUME):
        assert job.end_date is None or job.end_date >= job.start_date


# --- Skills ---


def test_skills_comma_list():
    skills = extract_skills("SKILLS\nJavaScript, React, Node.js, Python, AWS")

    names = [skill.name for skill in skills]
    assert len(set(names)) == len(names) >= 5
    for skill in skills:
        assert skill.category in (SkillCategory.TECHNICAL, SkillCategory.SOFT, SkillCategory.INDUSTRY)
        assert skill.level == SkillLevel.INTERMEDIATE
    javascript = next(skill for skill in skills if skill.name == "JavaScript")
    assert javascript.category == SkillCategory.TECHNICAL


def test_skills_soft_skills():
    skills = extract_skills("SKILLS\nCommunication, Leadership, Teamwork")
    assert {skill.name: skill.category for skill in skills} == {
        "Communication": SkillCategory.SOFT,
        "Leadership": SkillCategory.SOFT,
        "Teamwork": SkillCategory.SOFT,
    }


def test_skills_drop_exact_duplicates_only():
    skills = extract_skills("SKILLS\nPython, Docker, Python\n• Docker")
    assert [skill.name for skill in skills] == ["Python", "Docker"]


def test_skills_differing_in_case_are_kept():
    skills = extract_skills("SKILLS\nJavascript, Project management, project management")

    names = [skill.name for skill in skills]
    assert names == ["Javascript", "Project management", "project management", "JavaScript"]
    assert len({skill.id for skill in skills}) == 4


def test_skills_labeled_lines_and_short_names():
    skills = extract_skills("SKILLS\nLanguages: Python, Go\nTools: Docker; Git\n")
    assert [skill.name for skill in skills] == ["Python", "Docker", "Git", "Go"]


def test_skills_found_without_heading():
    skills = extract_skills("Built backend services in Python and shipped them with Docker.")
    assert [skill.name for skill in skills] == ["Python", "Docker"]


def test_skill_ids_are_unique_and_stable():
    first = extract_skills(SAMPLE_RESUME)
    second = extract_skills(SAMPLE_RESUME)
    ids = [skill.id for skill in first]
    assert len(set(ids)) == len(ids)
    assert ids == [skill.id for skill in second]


def test_extended_vocabulary_finds_new_technology():
    extractor = ResumeSectionExtractor(vocabulary=DEFAULT_VOCABULARY.extended(technologies=["Figma"]))
    skills = extractor.extract_skills("Designed prototypes in Figma for the mobile team.")
    assert [skill.name for skill in skills] == ["Figma"]
    assert skills[0].category == SkillCategory.INDUSTRY


# --- Education ---


def test_education_entry_with_gpa():
    education = extract_education(SAMPLE_RESUME)

    assert len(education) == 1
    entry = education[0]
    assert entry.institution == "Stanford University"
    assert entry.degree == "B.S."
    assert entry.field_of_study == "Computer Science"
    assert entry.start_date == date(2012, 1, 1)
    assert entry.end_date == date(2016, 1, 1)
    assert entry.gpa == 3.8


def test_education_degree_before_institution():
    text = "EDUCATION\nBachelor of Science in Computer Science\nUniversity of California, Berkeley\n2016 - 2020\n"
    entry = extract_education(text)[0]

    assert entry.degree == "Bachelor of Science"
    assert entry.field_of_study == "Computer Science"
    assert entry.institution.startswith("University of California")
    assert entry.start_date.year == 2016
    assert entry.end_date.year == 2020


def test_education_single_year_is_completion_year():
    entry = extract_education("EDUCATION\nHarvard University\nMBA 2018\n")[0]
    assert entry.institution == "Harvard University"
    assert entry.degree == "MBA"
    assert entry.field_of_study == DEFAULT_FIELD
    assert entry.start_date == entry.end_date == date(2018, 1, 1)


def test_education_implausible_gpa_is_dropped():
    text = "EDUCATION\nState University\nB.A. in History\n2010 - 2014\nGPA: 45\n"
    entry = extract_education(text)[0]
    assert entry.gpa is None


def test_education_without_institution_gets_placeholder():
    entry = extract_education("EDUCATION\nBachelor of Arts\n2015\n")[0]
    assert entry.institution == UNKNOWN_INSTITUTION
    assert entry.degree == "Bachelor of Arts"


def test_education_missing_section():
    assert extract_education(NO_SECTIONS_TEXT) == []


# --- Achievements ---


def test_achievement_with_year_suffix():
    achievements = extract_achievements(SAMPLE_RESUME)

    assert len(achievements) == 1
    award = achievements[0]
    assert award.title == "Employee of the Year"
    assert award.date == date(2022, 1, 1)
    assert award.category == AchievementCategory.RECOGNITION
    assert award.organization is None


def test_achievement_organizations():
    text = "AWARDS\n• Best Paper Award from IEEE, 2019\n• Hackathon Winner - Google - 2021\n"
    achievements = extract_achievements(text)

    assert [(a.organization, a.date.year) for a in achievements] == [("IEEE", 2019), ("Google", 2021)]
    assert achievements[1].title == "Hackathon Winner"
    assert len({a.id for a in achievements}) == 2


def test_achievement_lines_without_bullets():
    achievements = extract_achievements("HONORS\nDean's List 2015\nTop\n")
    assert len(achievements) == 1
    assert achievements[0].title.startswith("Dean's List")
    assert achievements[0].date.year == 2015


@pytest.mark.parametrize("extract", [extract_experience, extract_skills, extract_education, extract_achievements])
def test_extractors_handle_empty_text(extract):
    assert extract("") == []
