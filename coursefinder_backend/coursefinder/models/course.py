import enum

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from coursefinder.models.base import Base


class CourseLevel(str, enum.Enum):
    undergraduate = "undergraduate"
    lower_division = "lower_division"
    upper_division = "upper_division"
    graduate = "graduate"
    doctoral = "doctoral"
    continuing_education = "continuing_education"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]


_LEVEL_RANK = {level: i for i, level in enumerate(CourseLevel, start=1)}


class CourseStatus(str, enum.Enum):
    under_review = "under_review"
    active = "active"
    inactive = "inactive"


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    subject_code = Column(String, ForeignKey("subjects.code"), nullable=False, index=True)
    course_number = Column(String, nullable=False, index=True)  # e.g., "101", "CS610"
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    credit_hours = Column(Integer, nullable=False, default=3)
    level = Column(Enum(CourseLevel), nullable=False, default=CourseLevel.undergraduate)
    status = Column(Enum(CourseStatus), nullable=False, default=CourseStatus.active)

    subject = relationship("Subject", back_populates="courses")
    prerequisites = relationship(
        "CoursePrerequisite",
        back_populates="course",
        order_by="CoursePrerequisite.id",
        cascade="all, delete-orphan",
    )
    offerings = relationship(
        "CourseOffering",
        back_populates="course",
        order_by="CourseOffering.id",
        cascade="all, delete-orphan",
    )
