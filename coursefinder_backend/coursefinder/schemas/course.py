from datetime import time

from pydantic import BaseModel

from coursefinder.models.course import CourseLevel, CourseStatus


class PrerequisiteOut(BaseModel):
    required_course_number: str | None = None
    minimum_grade: str | None = None

    model_config = {"from_attributes": True}


class OfferingOut(BaseModel):
    term: str
    year: int
    instructor_name: str | None = None
    max_enrollment: int | None = None
    current_enrollment: int = 0
    days: str | None = None
    start_time: time | None = None
    end_time: time | None = None

    model_config = {"from_attributes": True}


class CourseResponse(BaseModel):
    id: int
    subject_code: str
    course_number: str
    title: str
    description: str | None = None
    credit_hours: int
    level: CourseLevel
    status: CourseStatus
    prerequisites: list[PrerequisiteOut] = []
    offerings: list[OfferingOut] = []

    model_config = {
        "from_attributes": True,
    }
