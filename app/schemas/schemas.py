"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

import re
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    recruiter = "recruiter"


class CreditTier(str, Enum):
    beginner = "Beginner"
    intermediate = "Intermediate"
    advanced = "Advanced"
    expert = "Expert"


class CreditSource(str, Enum):
    course = "course"
    project = "project"


class ApplicationStatus(str, Enum):
    """Kanban columns, in board order."""
    wishlist = "wishlist"
    applied = "applied"
    interviewing = "interviewing"
    offered = "offered"
    rejected = "rejected"


class ProjectType(str, Enum):
    paid = "paid"
    unpaid = "unpaid"
    collaborative = "collaborative"


class EventType(str, Enum):
    exam = "exam"
    hackathon = "hackathon"
    deadline = "deadline"
    personal = "personal"
    mentor_meeting = "mentor_meeting"


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=7, max_length=20)
    password: str = Field(..., min_length=8)
    full_name: str = Field(..., min_length=2, max_length=100)
    role: UserRole
    university: Optional[str] = None
    company: Optional[str] = None

    @model_validator(mode="after")
    def require_email_or_phone(self):
        if not self.email and not self.phone:
            raise ValueError("Either email or phone is required")
        return self

class LoginRequest(BaseModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    password: str

    @model_validator(mode="after")
    def require_email_or_phone(self):
        if not self.email and not self.phone:
            raise ValueError("Either email or phone is required")
        return self

class UserResponse(BaseModel):
    user_id: int
    email: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    full_name: str
    avatar_url: Optional[str] = None
    university: Optional[str] = None
    company: Optional[str] = None
    bio: Optional[str] = None
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    leetcode_url: Optional[str] = None
    gfg_url: Optional[str] = None
    total_credits: int = 0
    tier: CreditTier = CreditTier.beginner
    created_at: datetime

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# ============================================================
# PROFILE SCHEMAS
# ============================================================

# A link is accepted when it matches its platform pattern or at least
# mentions the platform key.
PROFILE_LINK_PATTERNS = {
    "github": re.compile(r"^https?://(www\.)?github\.com/[\w-]+/?$", re.IGNORECASE),
    "linkedin": re.compile(r"^https?://(www\.)?linkedin\.com/in/[\w-]+/?$", re.IGNORECASE),
    "leetcode": re.compile(r"^https?://(www\.)?leetcode\.com/[\w-]+/?$", re.IGNORECASE),
    "gfg": re.compile(
        r"^https?://(www\.)?(geeksforgeeks\.org|auth\.geeksforgeeks\.org)/user/[\w-]+/?$",
        re.IGNORECASE
    ),
}

PLATFORM_NAMES = {
    "github": "GitHub",
    "linkedin": "LinkedIn",
    "leetcode": "LeetCode",
    "gfg": "GeeksforGeeks",
}


def is_valid_profile_link(url: str, platform: str) -> bool:
    if not url:
        return True
    return bool(PROFILE_LINK_PATTERNS[platform].match(url)) or platform in url


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    university: Optional[str] = None
    company: Optional[str] = None
    bio: Optional[str] = Field(None, max_length=500)
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    leetcode_url: Optional[str] = None
    gfg_url: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Full name is required")
        return v.strip() if v else v

    @field_validator("github_url", "linkedin_url", "leetcode_url", "gfg_url")
    @classmethod
    def validate_link(cls, v, info):
        platform = info.field_name.removesuffix("_url")
        if v and not is_valid_profile_link(v, platform):
            raise ValueError(f"Please enter a valid {PLATFORM_NAMES[platform]} URL")
        return v


# ============================================================
# COURSE SCHEMAS
# ============================================================

class CourseResponse(BaseModel):
    course_id: int
    title: str
    description: Optional[str] = None
    category: str
    skill_tags: List[str] = []
    credits: int
    duration_hours: int = 0
    university_aligned: bool = False
    image_url: Optional[str] = None
    progress: int = 0
    completed: bool = False

class CourseProgressResponse(BaseModel):
    course_id: int
    progress: int
    completed: bool

class CourseCompletionResponse(BaseModel):
    course_id: int
    credits_awarded: int
    total_credits: int
    tier: CreditTier
    already_completed: bool = False

class CompletedCoursesResponse(BaseModel):
    courses: List[CourseResponse]
    skills: List[str]


# ============================================================
# PROOF GALLERY SCHEMAS
# ============================================================

class ProjectImageResponse(BaseModel):
    image_id: int
    image_url: str
    caption: Optional[str] = None

class ProjectResponse(BaseModel):
    project_id: int
    student_id: int
    title: str
    description: Optional[str] = None
    contribution_summary: Optional[str] = None
    project_type: ProjectType
    tech_stack: List[str] = []
    github_link: Optional[str] = None
    live_link: Optional[str] = None
    credits_earned: int
    images: List[ProjectImageResponse] = []
    created_at: datetime

class ProjectCreatedResponse(BaseModel):
    project: ProjectResponse
    credits_awarded: int
    total_credits: int
    tier: CreditTier


# ============================================================
# CERTIFICATE SCHEMAS
# ============================================================

class CertificateResponse(BaseModel):
    certificate_id: int
    title: str
    issuer: str
    issue_date: Optional[date] = None
    image_url: str
    verified: bool = False
    created_at: datetime


# ============================================================
# APPLICATION (KANBAN) SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=200)
    position: str = Field(..., min_length=1, max_length=200)
    job_description: Optional[str] = None
    notes: Optional[str] = None
    deadline: Optional[date] = None

class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus

class PrepDay(BaseModel):
    day: int
    title: str
    focus: str
    tasks: List[str] = []
    resources: List[str] = []
    timeEstimate: str = ""

class PrepSchedule(BaseModel):
    schedule: List[PrepDay]
    keySkills: List[str] = []
    interviewTips: List[str] = []

class ApplicationResponse(BaseModel):
    application_id: int
    company_name: str
    position: str
    job_description: Optional[str] = None
    status: ApplicationStatus
    notes: Optional[str] = None
    applied_date: Optional[date] = None
    deadline: Optional[date] = None
    ai_prep_schedule: Optional[PrepSchedule] = None
    created_at: datetime
    updated_at: datetime

class BoardColumn(BaseModel):
    status: ApplicationStatus
    title: str
    applications: List[ApplicationResponse]

class BoardResponse(BaseModel):
    columns: List[BoardColumn]
    total: int

class PrepResponse(BaseModel):
    application_id: int
    source: str
    prep_schedule: PrepSchedule


# ============================================================
# CALENDAR SCHEMAS
# ============================================================

class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    event_type: EventType = EventType.personal
    start_date: datetime
    end_date: Optional[datetime] = None

    @model_validator(mode="after")
    def end_not_before_start(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

class EventResponse(BaseModel):
    event_id: int
    title: str
    description: Optional[str] = None
    event_type: EventType
    start_date: datetime
    end_date: Optional[datetime] = None
    created_at: datetime

class EventTypeInfo(BaseModel):
    id: EventType
    label: str


# ============================================================
# MENTOR SCHEMAS
# ============================================================

MIN_AGENDA_LENGTH = 200

class MentorResponse(BaseModel):
    mentor_id: int
    name: str
    title: str
    company: Optional[str] = None
    university: Optional[str] = None
    expertise: List[str] = []
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    available_slots: Dict[str, List[str]] = {}

class BookingCreate(BaseModel):
    day: str = Field(..., description="Weekday name, e.g. 'monday'")
    time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    agenda: str

    @field_validator("agenda")
    @classmethod
    def agenda_min_length(cls, v):
        if len(v) < MIN_AGENDA_LENGTH:
            raise ValueError(
                f"Meeting agenda must be at least {MIN_AGENDA_LENGTH} characters. "
                f"Current: {len(v)}/{MIN_AGENDA_LENGTH}"
            )
        return v

class BookingResponse(BaseModel):
    booking_id: int
    mentor_id: int
    booking_date: datetime
    agenda: str
    status: BookingStatus
    meeting_link: Optional[str] = None
    created_at: datetime
    mentor: Optional[MentorResponse] = None


# ============================================================
# RECRUITER / CANDIDATE SCHEMAS
# ============================================================

class CandidateResponse(BaseModel):
    user_id: int
    full_name: str
    email: Optional[str] = None
    university: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    leetcode_url: Optional[str] = None
    gfg_url: Optional[str] = None
    total_credits: int
    tier: CreditTier
    skills: List[str] = []

class CandidateListResponse(BaseModel):
    candidates: List[CandidateResponse]
    total: int
    order: SortOrder

class CandidateProfileResponse(BaseModel):
    candidate: CandidateResponse
    projects: List[ProjectResponse]
    certificates: List[CertificateResponse]
    completed_courses: int

class TierRange(BaseModel):
    tier: CreditTier
    min_credits: int
    max_credits: Optional[int] = None
    label: str

class CreditRule(BaseModel):
    source: CreditSource
    description: str

class RecruiterOverviewResponse(BaseModel):
    tiers: List[TierRange]
    credit_rules: List[CreditRule]
    tier_counts: Dict[str, int]
    total_students: int


# ============================================================
# CREDIT LEDGER SCHEMAS
# ============================================================

class CreditEventResponse(BaseModel):
    event_id: int
    source_type: CreditSource
    source_id: int
    credits: int
    created_at: datetime

class CreditSummaryResponse(BaseModel):
    total_credits: int
    ledger_total: int
    tier: CreditTier
    events: List[CreditEventResponse]


# ============================================================
# DASHBOARD SCHEMAS
# ============================================================

class StudentDashboardResponse(BaseModel):
    full_name: str
    total_credits: int
    tier: CreditTier
    applications_by_status: Dict[str, int]
    completed_courses: int
    projects: int
    certificates: int
    upcoming_events: int
    pending_bookings: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    detail: str
