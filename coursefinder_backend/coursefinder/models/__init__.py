from coursefinder.models.course import Course, CourseLevel, CourseStatus
from coursefinder.models.instructor import Instructor
from coursefinder.models.offering import CourseOffering
from coursefinder.models.prerequisite import CoursePrerequisite
from coursefinder.models.subject import Subject

__all__ = [
    "Course",
    "CourseLevel",
    "CourseStatus",
    "CourseOffering",
    "CoursePrerequisite",
    "Instructor",
    "Subject",
]
