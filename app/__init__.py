"""
BridgeUp
Career platform: students build a credit-ranked profile, recruiters search it.

Architecture:
- PostgreSQL: Structured data (users, courses, projects, applications, credit ledger)
- MongoDB GridFS: Uploaded media (avatars, certificates, project images)
- DeepSeek AI: Interview-prep schedules only, with a local fallback
"""

__version__ = "1.0.0"
