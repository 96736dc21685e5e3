"""
Relational schema - SQLAlchemy Core table definitions.

Queries elsewhere are written as raw SQL with text(); these definitions
exist so the schema can be created with metadata.create_all() on
PostgreSQL (production) or SQLite (tests).

List and mapping columns (skill_tags, tech_stack, expertise,
available_slots, ai_prep_schedule) are stored as JSON text, see
app.utils.json_columns.
"""

from sqlalchemy import (
    MetaData, Table, Column, Integer, String, Text, Boolean, DateTime, Date,
    ForeignKey, UniqueConstraint, CheckConstraint, func
)

metadata = MetaData()


users = Table(
    "users", metadata,
    Column("user_id", Integer, primary_key=True),
    Column("email", String(255), unique=True, nullable=True),
    Column("phone", String(20), unique=True, nullable=True),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(20), nullable=False),
    Column("full_name", String(100), nullable=False),
    Column("avatar_url", Text),
    Column("university", String(200)),
    Column("company", String(200)),
    Column("bio", Text),
    Column("github_url", Text),
    Column("linkedin_url", Text),
    Column("leetcode_url", Text),
    Column("gfg_url", Text),
    Column("total_credits", Integer, nullable=False, server_default="0"),
    Column("is_active", Boolean, nullable=False, server_default="1"),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint("role IN ('student', 'recruiter')", name="ck_users_role"),
)


courses = Table(
    "courses", metadata,
    Column("course_id", Integer, primary_key=True),
    Column("title", String(200), nullable=False),
    Column("description", Text),
    Column("category", String(50), nullable=False),
    Column("skill_tags", Text, nullable=False, server_default="[]"),
    Column("credits", Integer, nullable=False),
    Column("duration_hours", Integer, nullable=False, server_default="0"),
    Column("university_aligned", Boolean, nullable=False, server_default="0"),
    Column("image_url", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)


student_courses = Table(
    "student_courses", metadata,
    Column("student_course_id", Integer, primary_key=True),
    Column("student_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
    Column("course_id", Integer, ForeignKey("courses.course_id", ondelete="CASCADE"), nullable=False),
    Column("progress", Integer, nullable=False, server_default="0"),
    Column("completed", Boolean, nullable=False, server_default="0"),
    Column("started_at", DateTime, nullable=False, server_default=func.now()),
    Column("completed_at", DateTime),
    UniqueConstraint("student_id", "course_id", name="uq_student_course"),
    CheckConstraint("progress BETWEEN 0 AND 100", name="ck_student_courses_progress"),
)


projects = Table(
    "projects", metadata,
    Column("project_id", Integer, primary_key=True),
    Column("student_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
    Column("title", String(200), nullable=False),
    Column("description", Text),
    Column("contribution_summary", Text),
    Column("project_type", String(20), nullable=False),
    Column("tech_stack", Text, nullable=False, server_default="[]"),
    Column("github_link", Text),
    Column("live_link", Text),
    Column("credits_earned", Integer, nullable=False, server_default="25"),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint("project_type IN ('paid', 'unpaid', 'collaborative')", name="ck_projects_type"),
)


project_images = Table(
    "project_images", metadata,
    Column("image_id", Integer, primary_key=True),
    Column("project_id", Integer, ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False),
    Column("image_url", Text, nullable=False),
    Column("object_key", Text, nullable=False),
    Column("caption", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)


certificates = Table(
    "certificates", metadata,
    Column("certificate_id", Integer, primary_key=True),
    Column("student_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
    Column("title", String(200), nullable=False),
    Column("issuer", String(200), nullable=False),
    Column("issue_date", Date),
    Column("image_url", Text, nullable=False),
    Column("object_key", Text, nullable=False),
    Column("verified", Boolean, nullable=False, server_default="0"),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)


applications = Table(
    "applications", metadata,
    Column("application_id", Integer, primary_key=True),
    Column("student_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
    Column("company_name", String(200), nullable=False),
    Column("position", String(200), nullable=False),
    Column("job_description", Text),
    Column("status", String(20), nullable=False, server_default="wishlist"),
    Column("notes", Text),
    Column("applied_date", Date),
    Column("deadline", Date),
    Column("ai_prep_schedule", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint(
        "status IN ('wishlist', 'applied', 'interviewing', 'offered', 'rejected')",
        name="ck_applications_status"
    ),
)


calendar_events = Table(
    "calendar_events", metadata,
    Column("event_id", Integer, primary_key=True),
    Column("student_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
    Column("title", String(200), nullable=False),
    Column("description", Text),
    Column("event_type", String(20), nullable=False),
    Column("start_date", DateTime, nullable=False),
    Column("end_date", DateTime),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint(
        "event_type IN ('exam', 'hackathon', 'deadline', 'personal', 'mentor_meeting')",
        name="ck_calendar_events_type"
    ),
)


mentors = Table(
    "mentors", metadata,
    Column("mentor_id", Integer, primary_key=True),
    Column("name", String(100), nullable=False),
    Column("title", String(200), nullable=False),
    Column("company", String(200)),
    Column("university", String(200)),
    Column("expertise", Text, nullable=False, server_default="[]"),
    Column("bio", Text),
    Column("avatar_url", Text),
    Column("available_slots", Text, nullable=False, server_default="{}"),
)


mentor_bookings = Table(
    "mentor_bookings", metadata,
    Column("booking_id", Integer, primary_key=True),
    Column("student_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
    Column("mentor_id", Integer, ForeignKey("mentors.mentor_id", ondelete="CASCADE"), nullable=False),
    Column("booking_date", DateTime, nullable=False),
    Column("agenda", Text, nullable=False),
    Column("status", String(20), nullable=False, server_default="pending"),
    Column("meeting_link", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint(
        "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
        name="ck_mentor_bookings_status"
    ),
)


# Append-only credit ledger. One row per credit-earning source, so the same
# course or project can never be counted twice.
credit_events = Table(
    "credit_events", metadata,
    Column("event_id", Integer, primary_key=True),
    Column("student_id", Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
    Column("source_type", String(20), nullable=False),
    Column("source_id", Integer, nullable=False),
    Column("credits", Integer, nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    UniqueConstraint("student_id", "source_type", "source_id", name="uq_credit_event_source"),
)
