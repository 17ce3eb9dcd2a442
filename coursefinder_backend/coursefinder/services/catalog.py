import logging
import threading
from dataclasses import dataclass
from datetime import time
from typing import Callable, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from coursefinder.core.errors import CatalogQueryError, SearchCancelledError
from coursefinder.models.course import Course, CourseLevel, CourseStatus
from coursefinder.models.instructor import Instructor
from coursefinder.models.offering import CourseOffering
from coursefinder.models.subject import Subject

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrerequisiteRecord:
    required_course_number: str | None
    minimum_grade: str | None = None


@dataclass(frozen=True)
class OfferingRecord:
    term: str
    year: int
    instructor_name: str | None = None
    max_enrollment: int | None = None
    current_enrollment: int = 0
    days: str | None = None
    start_time: time | None = None
    end_time: time | None = None

    @property
    def has_open_seats(self) -> bool:
        return self.max_enrollment is not None and self.max_enrollment > self.current_enrollment


@dataclass(frozen=True)
class CourseRecord:
    id: int
    subject_code: str
    course_number: str
    title: str
    credit_hours: int
    level: CourseLevel = CourseLevel.undergraduate
    status: CourseStatus = CourseStatus.active
    description: str | None = None
    department_name: str | None = None
    prerequisites: tuple[PrerequisiteRecord, ...] = ()
    offerings: tuple[OfferingRecord, ...] = ()


Predicate = Callable[[CourseRecord], bool]


@dataclass(frozen=True)
class SubjectRecord:
    code: str
    title: str
    department_name: str | None = None


@dataclass
class CatalogPage:
    courses: list[CourseRecord]
    total: int


class CourseCatalog(Protocol):
    def query(
        self,
        predicate: Predicate,
        skip: int = 0,
        take: int | None = None,
        cancel: threading.Event | None = None,
    ) -> CatalogPage: ...

    def all_titles(self) -> list[str]: ...

    def all_instructor_names(self) -> list[str]: ...

    def course_titles(self) -> list[str]: ...

    def subjects(self) -> list[SubjectRecord]: ...


def to_record(course: Course) -> CourseRecord:
    subject = course.subject
    return CourseRecord(
        id=course.id,
        subject_code=course.subject_code,
        course_number=course.course_number or "",
        title=course.title or "",
        credit_hours=course.credit_hours or 0,
        level=course.level or CourseLevel.undergraduate,
        status=course.status or CourseStatus.active,
        description=course.description,
        department_name=subject.department_name if subject else None,
        prerequisites=tuple(
            PrerequisiteRecord(
                required_course_number=p.required_course_number,
                minimum_grade=p.minimum_grade,
            )
            for p in course.prerequisites
        ),
        offerings=tuple(
            OfferingRecord(
                term=o.term,
                year=o.year,
                instructor_name=o.instructor.name if o.instructor else None,
                max_enrollment=o.max_enrollment,
                current_enrollment=o.current_enrollment or 0,
                days=o.days,
                start_time=o.start_time,
                end_time=o.end_time,
            )
            for o in course.offerings
        ),
    )


def _check_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise SearchCancelledError("Search was cancelled.", operation="catalog.query")


def _distinct(values) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        if value and value not in seen:
            seen[value] = None
    return list(seen)


class SqlCourseCatalog:
    """Catalog backed by the SQLAlchemy session; predicates run in Python."""

    def __init__(self, db: Session):
        self.db = db

    def query(
        self,
        predicate: Predicate,
        skip: int = 0,
        take: int | None = None,
        cancel: threading.Event | None = None,
    ) -> CatalogPage:
        _check_cancelled(cancel)
        try:
            rows = (
                self.db.query(Course)
                .options(
                    selectinload(Course.subject),
                    selectinload(Course.prerequisites),
                    selectinload(Course.offerings).selectinload(CourseOffering.instructor),
                )
                .order_by(Course.subject_code, Course.course_number, Course.id)
                .all()
            )
        except SQLAlchemyError as exc:
            logger.error("Catalog query failed: %s", exc)
            raise CatalogQueryError(
                f"Catalog query failed: {exc}", operation="catalog.query"
            ) from exc

        matched: list[CourseRecord] = []
        for row in rows:
            _check_cancelled(cancel)
            record = to_record(row)
            if predicate(record):
                matched.append(record)

        end = None if take is None else skip + take
        return CatalogPage(courses=matched[skip:end], total=len(matched))

    def course_titles(self) -> list[str]:
        return _distinct(t for (t,) in self._scalar_rows(Course.title, Course.id))

    def subjects(self) -> list[SubjectRecord]:
        try:
            rows = (
                self.db.query(Subject.code, Subject.title, Subject.department_name)
                .order_by(Subject.code)
                .all()
            )
        except SQLAlchemyError as exc:
            raise CatalogQueryError(
                f"Subject lookup failed: {exc}", operation="catalog.subjects"
            ) from exc
        return [SubjectRecord(code=c, title=t, department_name=d) for c, t, d in rows]

    def all_titles(self) -> list[str]:
        return _distinct([*self.course_titles(), *(s.title for s in self.subjects())])

    def all_instructor_names(self) -> list[str]:
        return _distinct(n for (n,) in self._scalar_rows(Instructor.name, Instructor.id))

    def _scalar_rows(self, column, order_column):
        try:
            return self.db.query(column).order_by(order_column).all()
        except SQLAlchemyError as exc:
            raise CatalogQueryError(
                f"Catalog lookup failed: {exc}", operation="catalog.lookup"
            ) from exc
