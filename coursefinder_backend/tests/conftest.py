from datetime import time

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import coursefinder.models  # noqa: F401
from coursefinder.core.config import Settings
from coursefinder.models.base import Base
from coursefinder.models.course import Course, CourseLevel, CourseStatus
from coursefinder.models.instructor import Instructor
from coursefinder.models.offering import CourseOffering
from coursefinder.models.prerequisite import CoursePrerequisite
from coursefinder.models.subject import Subject
from coursefinder.services.catalog import SqlCourseCatalog
from coursefinder.services.search import CourseSearchService


def _engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture()
def db():
    engine = _engine()
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture()
def bare_db():
    """Session on a database with no tables, for catalog failure tests."""
    engine = _engine()
    session = sessionmaker(bind=engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture()
def make_subject(db):
    def _make(code: str, title: str, department_name: str | None = None) -> Subject:
        subject = Subject(code=code, title=title, department_name=department_name)
        db.add(subject)
        db.commit()
        return subject

    return _make


@pytest.fixture()
def make_course(db):
    def _make(
        subject_code: str,
        course_number: str,
        title: str,
        credit_hours: int = 3,
        level: CourseLevel = CourseLevel.undergraduate,
        status: CourseStatus = CourseStatus.active,
        description: str | None = None,
        prereqs: list[str] | None = None,
        offerings: list[dict] | None = None,
    ) -> Course:
        course = Course(
            subject_code=subject_code,
            course_number=course_number,
            title=title,
            credit_hours=credit_hours,
            level=level,
            status=status,
            description=description,
        )
        for number in prereqs or []:
            course.prerequisites.append(CoursePrerequisite(required_course_number=number))
        for row in offerings or []:
            course.offerings.append(CourseOffering(**row))
        db.add(course)
        db.commit()
        db.refresh(course)
        return course

    return _make


@pytest.fixture()
def seeded_db(db, make_subject, make_course):
    make_subject("CS", "Computer Science", "Engineering")
    make_subject("HIST", "History", "Humanities")
    make_subject("MATH", "Mathematics", "Science")
    make_subject("SE", "Software Engineering", "Engineering")

    alice = Instructor(name="Alice Smith")
    alan = Instructor(name="Alan Turing")
    grace = Instructor(name="Grace Hopper")
    db.add_all([alice, alan, grace])
    db.commit()

    make_course(
        "CS", "101", "Introduction to Programming",
        description="Learn Python basics",
        offerings=[dict(term="Fall", year=2025, instructor_id=alice.id, max_enrollment=30,
                        current_enrollment=30, days="MWF", start_time=time(9, 0), end_time=time(9, 50))],
    )
    make_course(
        "CS", "201", "Data Structures", credit_hours=4, level=CourseLevel.lower_division,
        description="Lists, trees and graphs", prereqs=["101"],
        offerings=[dict(term="Spring", year=2026, instructor_id=alan.id, max_enrollment=25,
                        current_enrollment=10, days="TR", start_time=time(10, 0), end_time=time(11, 15))],
    )
    make_course(
        "CS", "310", "Algorithms", level=CourseLevel.upper_division,
        description="Design and analysis of algorithms", prereqs=["201", "220"],
        offerings=[dict(term="Fall", year=2025, instructor_id=alan.id, max_enrollment=None,
                        current_enrollment=0, days="TR", start_time=time(13, 0), end_time=time(14, 15))],
    )
    make_course(
        "CS", "610", "Advanced Algorithms", level=CourseLevel.graduate, prereqs=["310"],
        offerings=[dict(term="Fall", year=2025, instructor_id=grace.id, max_enrollment=15,
                        current_enrollment=5, days="MW", start_time=time(18, 0), end_time=time(19, 15))],
    )
    make_course(
        "MATH", "220", "Linear Algebra", credit_hours=4, level=CourseLevel.upper_division,
        description="Vectors and matrices",
        offerings=[dict(term="Spring", year=2026, max_enrollment=40, current_enrollment=12,
                        days="MWF", start_time=time(11, 0), end_time=time(11, 50))],
    )
    make_course("SE", "42", "Seminar", credit_hours=1)
    make_course("HIST", "2XX", "Special Topics in History", status=CourseStatus.inactive)
    return db


@pytest.fixture()
def test_settings():
    return Settings(scoring_concurrency=2, default_page_size=20, max_page_size=50)


@pytest.fixture()
def catalog(seeded_db):
    return SqlCourseCatalog(seeded_db)


@pytest.fixture()
def service(catalog, test_settings):
    return CourseSearchService(catalog, test_settings)


def numbers(result) -> list[str]:
    return [f"{c.subject_code}{c.course_number}" for c in result.courses]


@pytest.fixture()
def course_keys():
    return numbers
