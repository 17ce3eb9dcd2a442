from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from coursefinder.models.base import Base


class CoursePrerequisite(Base):
    __tablename__ = "course_prerequisites"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    required_course_number = Column(String, nullable=True)
    minimum_grade = Column(String, nullable=True)

    course = relationship("Course", back_populates="prerequisites")
