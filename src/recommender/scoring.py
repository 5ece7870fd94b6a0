"""
Candidate/job match scoring.

Scores a candidate profile against a job posting on four weighted factors
(skills, location, job type, salary) and explains which factors fired.
Both the score and the reasons come from the same breakdown, so they
always agree.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from shared.config import MatchWeights
from shared.models import CandidateProfile, JobPosting

DEFAULT_MATCH_WEIGHTS = MatchWeights()

FALLBACK_REASON = "Based on your profile and job market trends"
MAX_REASON_SKILLS = 3

_DIGITS_RE = re.compile(r"\d+")


@dataclass
class MatchBreakdown:
    """Per-factor contributions of a match score."""

    skills: int = 0
    location: int = 0
    job_type: int = 0
    salary: int = 0
    matched_skills: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.skills + self.location + self.job_type + self.salary


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def normalize_skills(skills: Iterable[str]) -> list[str]:
    """Lowercase, trim and de-duplicate skills, keeping first-seen order."""
    out = []
    seen = set()
    for skill in skills or []:
        if not skill:
            continue
        key = skill.strip().lower()
        if key and key not in seen:
            seen.add(key)
            out.append(key)
    return out


def match_skills(profile_skills: Iterable[str], job_skills: Iterable[str]) -> list[str]:
    """
    Return the profile skills that match any job skill.

    A match is a substring test in either direction, so "script" matches
    "javascript" and "react native" matches "react". This tolerates
    spelling variants at the cost of some false positives ("java" also
    matches "javascript").
    """
    job_norm = normalize_skills(job_skills)
    return [
        skill
        for skill in normalize_skills(profile_skills)
        if any(skill in job_skill or job_skill in skill for job_skill in job_norm)
    ]


def parse_salary(salary: Optional[str]) -> Optional[int]:
    """
    Parse a free-text salary into an absolute amount.

    Takes the first run of digits and reads it as thousands, so "60k-80k"
    gives 60000 and "5-10 LPA" gives 5000. Returns None when there are no
    digits.
    """
    if not salary:
        return None
    match = _DIGITS_RE.search(salary)
    if match is None:
        return None
    return int(match.group(0)) * 1000


def _location_matches(city: Optional[str], location: Optional[str]) -> bool:
    city_n = (city or "").strip().lower()
    location_n = (location or "").strip().lower()
    if not city_n or not location_n:
        return False
    return city_n in location_n or location_n in city_n


def _job_type_matches(preferred: Optional[str], job_type: Optional[str]) -> bool:
    if not preferred or not job_type:
        return False
    preferred_n = preferred.lower()
    return preferred_n == "any" or preferred_n == job_type.lower()


def _salary_matches(expected: float, salary: Optional[str]) -> bool:
    job_salary = parse_salary(salary)
    if job_salary is None:
        return False
    return expected == 0 or job_salary >= expected


def score_breakdown(
    profile: CandidateProfile,
    job: JobPosting,
    weights: MatchWeights = DEFAULT_MATCH_WEIGHTS,
) -> MatchBreakdown:
    """Compute every factor's contribution for a profile/job pair."""
    breakdown = MatchBreakdown()

    # Every listed job skill counts toward the total, duplicates included
    job_skills = [s.strip().lower() for s in job.skills]
    if job_skills:
        matched = match_skills(profile.skills, job_skills)
        # Several profile skills can hit the same job skill; cap at a full match
        ratio = min(len(matched) / len(job_skills), 1.0)
        breakdown.skills = round_half_up(ratio * weights.skills)
        breakdown.matched_skills = matched

    if _location_matches(profile.city, job.location):
        breakdown.location = weights.location

    if _job_type_matches(profile.preferences.preferred_job_type, job.job_type):
        breakdown.job_type = weights.job_type

    if _salary_matches(profile.preferences.expected_salary, job.salary):
        breakdown.salary = weights.salary

    return breakdown


def calculate_match_score(
    profile: CandidateProfile,
    job: JobPosting,
    weights: MatchWeights = DEFAULT_MATCH_WEIGHTS,
) -> int:
    """Match score 0-100 of a job for a candidate."""
    return score_breakdown(profile, job, weights).total


def _display_skill(skill: str) -> str:
    return skill[:1].upper() + skill[1:]


def reasons_from_breakdown(breakdown: MatchBreakdown, job: JobPosting) -> list[str]:
    """Human-readable reasons for every non-zero factor, in fixed order."""
    reasons = []

    if breakdown.skills > 0:
        shown = ", ".join(
            _display_skill(s) for s in breakdown.matched_skills[:MAX_REASON_SKILLS]
        )
        reasons.append(
            f"Matches {len(breakdown.matched_skills)} of your skills: {shown}"
        )

    if breakdown.location > 0:
        reasons.append(f"Located in your preferred area: {job.location}")

    if breakdown.job_type > 0:
        reasons.append(f"Matches your preference: {job.job_type} position")

    if breakdown.salary > 0:
        reasons.append("Salary meets your expectations")

    if not reasons:
        reasons.append(FALLBACK_REASON)

    return reasons


def get_match_reasons(
    profile: CandidateProfile,
    job: JobPosting,
    weights: MatchWeights = DEFAULT_MATCH_WEIGHTS,
) -> list[str]:
    """Explain why a job matches a candidate."""
    return reasons_from_breakdown(score_breakdown(profile, job, weights), job)
