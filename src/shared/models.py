"""
Pydantic models for jobs, candidate profiles and recommendation results.

Field aliases follow the camelCase documents stored by the job portal,
so models can be built straight from MongoDB documents.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class JobType(str, Enum):
    """Employment type of a posting."""

    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    INTERNSHIP = "Internship"


class PreferredJobType(str, Enum):
    """Employment type a candidate is looking for."""

    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    INTERNSHIP = "Internship"
    CONTRACT = "Contract"
    ANY = "Any"


class RemoteWorkPreference(str, Enum):
    REMOTE = "Remote"
    HYBRID = "Hybrid"
    ON_SITE = "On-site"
    ANY = "Any"


class JobStatus(str, Enum):
    """Posting lifecycle status."""

    ACTIVE = "Active"
    CLOSED = "Closed"


def _match_enum(enum_cls: type[Enum], value: Any) -> Any:
    """Case-insensitive lookup of an enum value, None when unknown."""
    if value is None or isinstance(value, enum_cls):
        return value
    text = str(value).strip().lower()
    for member in enum_cls:
        if member.value.lower() == text:
            return member
    return None


def _object_id_to_str(value: Any) -> Any:
    # ObjectId and other id types arrive from the driver
    if value is None or isinstance(value, str):
        return value
    return str(value)


class JobPosting(BaseModel):
    """Job posting as published by a recruiter."""

    id: str = Field(..., alias="_id", description="Job ID")
    title: str = Field(..., description="Job title")
    description: str = Field(default="", description="Full job description")
    company: Optional[str] = Field(default=None, description="Company name")
    skills: list[str] = Field(default_factory=list, description="Required skills")
    location: str = Field(default="", description="Job location")
    job_type: JobType = Field(default=JobType.FULL_TIME, alias="jobType")
    salary: Optional[str] = Field(default=None, description="Free-text salary, e.g. '60k-80k'")
    status: JobStatus = Field(default=JobStatus.ACTIVE)
    posted_by: Optional[str] = Field(default=None, alias="postedBy")
    application_count: int = Field(default=0, alias="applicationCount")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    class Config:
        use_enum_values = True
        populate_by_name = True
        validate_default = True

    @field_validator("id", "posted_by", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        return _object_id_to_str(value)

    @field_validator("skills", mode="before")
    @classmethod
    def _coerce_skills(cls, value: Any) -> Any:
        return value or []


class JobPreferences(BaseModel):
    """Candidate job preferences. Absent values mean "no preference"."""

    preferred_job_type: Optional[PreferredJobType] = Field(
        default=None, alias="preferredJobType"
    )
    expected_salary: float = Field(
        default=0, ge=0, alias="expectedSalary", description="0 means unset"
    )
    remote_work_preference: RemoteWorkPreference = Field(
        default=RemoteWorkPreference.ANY, alias="remoteWorkPreference"
    )
    willing_to_relocate: bool = Field(default=False, alias="willingToRelocate")

    class Config:
        use_enum_values = True
        populate_by_name = True
        validate_default = True

    @field_validator("preferred_job_type", mode="before")
    @classmethod
    def _coerce_job_type(cls, value: Any) -> Any:
        return _match_enum(PreferredJobType, value)

    @field_validator("remote_work_preference", mode="before")
    @classmethod
    def _coerce_remote(cls, value: Any) -> Any:
        return _match_enum(RemoteWorkPreference, value) or RemoteWorkPreference.ANY

    @field_validator("expected_salary", mode="before")
    @classmethod
    def _coerce_salary(cls, value: Any) -> Any:
        return value or 0


class Experience(BaseModel):
    job_title: Optional[str] = Field(default=None, alias="jobTitle")
    company: Optional[str] = None
    start_date: Optional[datetime] = Field(default=None, alias="startDate")
    end_date: Optional[datetime] = Field(default=None, alias="endDate")
    description: Optional[str] = None

    class Config:
        populate_by_name = True


class Education(BaseModel):
    degree: Optional[str] = None
    college: Optional[str] = None
    field: Optional[str] = None
    graduation_year: Optional[int] = Field(default=None, alias="graduationYear")

    class Config:
        populate_by_name = True


class CandidateProfile(BaseModel):
    """Candidate (student) profile used as scoring input."""

    user_id: Optional[str] = Field(default=None, alias="userId")
    skills: list[str] = Field(default_factory=list)
    city: Optional[str] = None
    preferences: JobPreferences = Field(default_factory=JobPreferences)

    # Used by profile analysis only
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    bio: Optional[str] = None
    experience: list[Experience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    resume_url: Optional[str] = Field(default=None, alias="resumeUrl")

    class Config:
        populate_by_name = True

    @field_validator("user_id", mode="before")
    @classmethod
    def _coerce_user_id(cls, value: Any) -> Any:
        return _object_id_to_str(value)

    @field_validator("skills", mode="before")
    @classmethod
    def _dedupe_skills(cls, value: Any) -> Any:
        """Skills are a case-insensitive set; keep the first spelling and order."""
        out: list[str] = []
        seen: set[str] = set()
        for skill in value or []:
            if not isinstance(skill, str):
                continue
            key = skill.strip().lower()
            if key and key not in seen:
                seen.add(key)
                out.append(skill.strip())
        return out

    @field_validator("preferences", mode="before")
    @classmethod
    def _coerce_preferences(cls, value: Any) -> Any:
        return value or {}

    @field_validator("experience", "education", mode="before")
    @classmethod
    def _coerce_lists(cls, value: Any) -> Any:
        return value or []


class ApplicationRecord(BaseModel):
    """A candidate's application to a job. Only the ids are read here."""

    job_id: str = Field(..., alias="jobId")
    student_id: str = Field(..., alias="studentId")

    class Config:
        populate_by_name = True

    @field_validator("job_id", "student_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        return _object_id_to_str(value)


class MatchResult(JobPosting):
    """Job snapshot ranked for a candidate."""

    match_score: int = Field(..., ge=0, le=100, alias="matchScore")
    match_reasons: list[str] = Field(default_factory=list, alias="matchReasons")


class SimilarityResult(JobPosting):
    """Job snapshot ranked against another job."""

    similarity_score: int = Field(..., ge=0, le=100, alias="similarityScore")


class MatchResponse(BaseModel):
    """Envelope returned by the job recommendation endpoints."""

    success: bool = True
    count: int = 0
    message: Optional[str] = None
    data: list[MatchResult] = Field(default_factory=list)


class SimilarityResponse(BaseModel):
    """Envelope returned by the similar jobs endpoint."""

    success: bool = True
    count: int = 0
    data: list[SimilarityResult] = Field(default_factory=list)
