from dataclasses import dataclass, field

from coursefinder.core.concurrency import ordered_map
from coursefinder.services.catalog import CourseRecord


@dataclass
class Eligibility:
    course_id: int
    is_eligible: bool
    missing_requirements: list[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        return "valid" if self.is_eligible else "invalid"


def evaluate(course: CourseRecord, completed: set[str]) -> Eligibility:
    missing = [
        f"Course {p.required_course_number}"
        for p in course.prerequisites
        if p.required_course_number is not None and p.required_course_number not in completed
    ]
    return Eligibility(course_id=course.id, is_eligible=not missing, missing_requirements=missing)


def evaluate_all(
    courses: list[CourseRecord],
    completed: set[str] | list[str] | None,
    max_workers: int = 1,
) -> list[Eligibility]:
    """One result per course, in input order, eligible or not."""
    done = set(completed or [])
    return ordered_map(lambda c: evaluate(c, done), courses, max_workers)
