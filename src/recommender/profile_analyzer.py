"""
Profile analysis - completeness score and improvement suggestions.

Complete profiles get better recommendations, so these insights tell a
candidate what to fill in next. Nothing here is written back to storage.
"""

from dataclasses import dataclass, field
from typing import Optional

from shared.models import CandidateProfile

from .scoring import round_half_up

# Weight distribution, total = 100
COMPLETENESS_WEIGHTS = {
    "basic_info": 20,
    "contact": 10,
    "bio": 10,
    "skills": 20,
    "experience": 15,
    "education": 15,
    "resume": 10,
}

MIN_BIO_LENGTH = 50
FULL_SKILL_COUNT = 5
MIN_SKILL_COUNT = 3

SOFT_SKILLS = ["Communication", "Problem Solving", "Teamwork", "Time Management"]


@dataclass
class ProfileSuggestion:
    """One thing a candidate can add to their profile."""

    field: str
    title: str
    message: str
    impact: str  # critical | high | medium | low
    priority: int


@dataclass
class ProfileInsights:
    profile_completeness: int
    suggestions: list[ProfileSuggestion] = field(default_factory=list)
    suggested_skills: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "profileCompleteness": self.profile_completeness,
            "suggestions": [vars(s) for s in self.suggestions],
            "suggestedSkills": self.suggested_skills,
        }


def _filled(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def calculate_profile_completeness(
    profile: CandidateProfile, has_account: bool = True
) -> int:
    """
    Calculate profile completeness score (0-100).

    Partial credit is given for short bios, a handful of skills, and
    experience or education entries missing their key fields.
    """
    w = COMPLETENESS_WEIGHTS
    score = 0.0

    # Name and email live on the account
    if has_account:
        score += w["basic_info"]

    if _filled(profile.phone_number):
        score += w["contact"] * 0.5
    if _filled(profile.city):
        score += w["contact"] * 0.5

    if profile.bio and len(profile.bio) >= MIN_BIO_LENGTH:
        score += w["bio"]
    elif profile.bio:
        score += w["bio"] * 0.5

    if profile.skills:
        score += w["skills"] * min(len(profile.skills) / FULL_SKILL_COUNT, 1.0)

    if profile.experience:
        complete = any(e.job_title and e.company for e in profile.experience)
        score += w["experience"] if complete else w["experience"] * 0.5

    if profile.education:
        complete = any(e.degree and e.college for e in profile.education)
        score += w["education"] if complete else w["education"] * 0.5

    if _filled(profile.resume_url):
        score += w["resume"]

    return round_half_up(score)


def get_profile_suggestions(profile: CandidateProfile) -> list[ProfileSuggestion]:
    """Suggestions for improving a profile, most important first."""
    suggestions = []
    prefs = profile.preferences

    if len(profile.skills) < MIN_SKILL_COUNT:
        suggestions.append(ProfileSuggestion(
            field="skills",
            title="Add Your Skills",
            message="Add at least 3 skills to get better job recommendations",
            impact="critical",
            priority=1,
        ))

    if not profile.resume_url:
        suggestions.append(ProfileSuggestion(
            field="resume",
            title="Upload Your Resume",
            message="Upload your resume to improve your chances",
            impact="critical",
            priority=2,
        ))

    if not profile.phone_number:
        suggestions.append(ProfileSuggestion(
            field="phoneNumber",
            title="Add Contact Number",
            message="Add your phone number so recruiters can reach you",
            impact="high",
            priority=3,
        ))

    if not profile.bio or len(profile.bio) < MIN_BIO_LENGTH:
        suggestions.append(ProfileSuggestion(
            field="bio",
            title="Write Professional Summary",
            message="Add a compelling bio (minimum 50 characters) to stand out",
            impact="high",
            priority=4,
        ))

    if not profile.experience:
        suggestions.append(ProfileSuggestion(
            field="experience",
            title="Add Work Experience",
            message="Add your work experience, internships, or projects",
            impact="high",
            priority=5,
        ))

    if not profile.city:
        suggestions.append(ProfileSuggestion(
            field="city",
            title="Add Your Location",
            message="Add your city to get location-based job recommendations",
            impact="medium",
            priority=6,
        ))

    if not profile.education:
        suggestions.append(ProfileSuggestion(
            field="education",
            title="Add Education Details",
            message="Add your educational background",
            impact="medium",
            priority=7,
        ))

    if not prefs.preferred_job_type:
        suggestions.append(ProfileSuggestion(
            field="preferences.preferredJobType",
            title="Set Job Type Preference",
            message="Tell us if you prefer Full-time, Part-time, or Internship",
            impact="low",
            priority=8,
        ))

    if not prefs.expected_salary:
        suggestions.append(ProfileSuggestion(
            field="preferences.expectedSalary",
            title="Set Salary Expectations",
            message="Add your minimum salary expectation",
            impact="low",
            priority=9,
        ))

    return suggestions


def suggest_skills(profile: CandidateProfile) -> list[str]:
    """Common soft skills the candidate has not listed, for thin skill sets."""
    if len(profile.skills) >= FULL_SKILL_COUNT:
        return []
    held = {s.lower() for s in profile.skills}
    return [s for s in SOFT_SKILLS if s.lower() not in held]


def analyze_profile(profile: CandidateProfile, has_account: bool = True) -> ProfileInsights:
    return ProfileInsights(
        profile_completeness=calculate_profile_completeness(profile, has_account),
        suggestions=get_profile_suggestions(profile),
        suggested_skills=suggest_skills(profile),
    )
