#!/usr/bin/env python3
"""
Catalog Seed Script

Creates the tables if needed, then inserts the starter course catalog and
mentor directory. Rows that already exist (same title / same name) are skipped,
so the script can be re-run safely.

Usage: python scripts/seed_catalog.py
"""
import sys
sys.path.insert(0, '.')

from sqlalchemy import text

from app.db.postgres import get_db_session, init_postgres_schema
from app.utils.json_columns import encode_json

COURSES = [
    {
        "title": "Python Fundamentals", "category": "Programming", "credits": 15,
        "duration_hours": 10, "university_aligned": True,
        "skill_tags": ["Python", "Problem Solving"],
        "description": "Variables, control flow, functions and the standard library."
    },
    {
        "title": "Data Structures & Algorithms", "category": "Computer Science", "credits": 30,
        "duration_hours": 25, "university_aligned": True,
        "skill_tags": ["Algorithms", "Data Structures", "Problem Solving"],
        "description": "Arrays, trees, graphs, sorting and complexity analysis."
    },
    {
        "title": "React for Beginners", "category": "Frontend", "credits": 20,
        "duration_hours": 12, "university_aligned": False,
        "skill_tags": ["React", "JavaScript"],
        "description": "Components, state, hooks and building a small SPA."
    },
    {
        "title": "REST APIs with FastAPI", "category": "Backend", "credits": 20,
        "duration_hours": 12, "university_aligned": False,
        "skill_tags": ["Python", "FastAPI", "REST"],
        "description": "Routing, validation, authentication and testing of HTTP APIs."
    },
    {
        "title": "SQL & Database Design", "category": "Backend", "credits": 20,
        "duration_hours": 14, "university_aligned": True,
        "skill_tags": ["SQL", "PostgreSQL"],
        "description": "Normalization, joins, indexes and transactions."
    },
    {
        "title": "Machine Learning Basics", "category": "AI/ML", "credits": 25,
        "duration_hours": 20, "university_aligned": True,
        "skill_tags": ["Machine Learning", "Python", "Statistics"],
        "description": "Regression, classification, evaluation and overfitting."
    },
    {
        "title": "Cloud Foundations", "category": "Cloud", "credits": 15,
        "duration_hours": 8, "university_aligned": False,
        "skill_tags": ["AWS", "Cloud"],
        "description": "Compute, storage, networking and pricing basics."
    },
    {
        "title": "Docker & CI/CD", "category": "DevOps", "credits": 20,
        "duration_hours": 10, "university_aligned": False,
        "skill_tags": ["Docker", "CI/CD", "Git"],
        "description": "Containers, images, pipelines and automated deploys."
    },
    {
        "title": "UI/UX Design Principles", "category": "Design", "credits": 10,
        "duration_hours": 6, "university_aligned": False,
        "skill_tags": ["Figma", "UI Design"],
        "description": "Layout, typography, colour and usability testing."
    },
    {
        "title": "Professional Communication", "category": "Soft Skills", "credits": 10,
        "duration_hours": 5, "university_aligned": False,
        "skill_tags": ["Communication", "Teamwork"],
        "description": "Writing, presenting and working in teams."
    },
]

MENTORS = [
    {
        "name": "Ananya Rao", "title": "Senior Software Engineer", "company": "Google",
        "university": None, "expertise": ["Backend", "System Design", "Python"],
        "bio": "Builds distributed systems; mentors on interviews and career growth.",
        "available_slots": {"monday": ["10:00", "14:00"], "thursday": ["16:00"]}
    },
    {
        "name": "Rahul Mehta", "title": "Frontend Lead", "company": "Flipkart",
        "university": None, "expertise": ["React", "JavaScript", "UI Design"],
        "bio": "Ships consumer web apps and reviews portfolios.",
        "available_slots": {"tuesday": ["11:00", "15:00"], "saturday": ["10:00"]}
    },
    {
        "name": "Dr. Priya Nair", "title": "Associate Professor", "company": None,
        "university": "IIT Madras", "expertise": ["Machine Learning", "Research", "Statistics"],
        "bio": "Guides students on ML research and higher studies.",
        "available_slots": {"wednesday": ["09:00", "17:00"], "friday": ["15:00"]}
    },
]


def seed_courses(db) -> int:
    inserted = 0
    for course in COURSES:
        exists = db.execute(
            text("SELECT course_id FROM courses WHERE title = :title"),
            {"title": course["title"]}
        ).fetchone()
        if exists:
            continue
        db.execute(
            text("""
                INSERT INTO courses (title, description, category, skill_tags, credits,
                                     duration_hours, university_aligned)
                VALUES (:title, :description, :category, :skill_tags, :credits,
                        :duration_hours, :university_aligned)
            """),
            {**course, "skill_tags": encode_json(course["skill_tags"])}
        )
        inserted += 1
    return inserted


def seed_mentors(db) -> int:
    inserted = 0
    for mentor in MENTORS:
        exists = db.execute(
            text("SELECT mentor_id FROM mentors WHERE name = :name"),
            {"name": mentor["name"]}
        ).fetchone()
        if exists:
            continue
        db.execute(
            text("""
                INSERT INTO mentors (name, title, company, university, expertise, bio, available_slots)
                VALUES (:name, :title, :company, :university, :expertise, :bio, :available_slots)
            """),
            {
                **mentor,
                "expertise": encode_json(mentor["expertise"]),
                "available_slots": encode_json(mentor["available_slots"])
            }
        )
        inserted += 1
    return inserted


def main():
    print("=" * 50)
    print("BRIDGEUP - SEED CATALOG")
    print("=" * 50)

    init_postgres_schema()
    print("\n    ✅ Schema ready")

    with get_db_session() as db:
        courses = seed_courses(db)
        mentors = seed_mentors(db)

    print(f"    ✅ Courses inserted: {courses} (of {len(COURSES)})")
    print(f"    ✅ Mentors inserted: {mentors} (of {len(MENTORS)})")
    print("\n" + "=" * 50)


if __name__ == "__main__":
    main()
