from sqlalchemy import Column, ForeignKey, Integer, String, Time
from sqlalchemy.orm import relationship

from coursefinder.models.base import Base


class CourseOffering(Base):
    __tablename__ = "course_offerings"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    term = Column(String, nullable=False)  # e.g., "Fall"
    year = Column(Integer, nullable=False)
    instructor_id = Column(Integer, ForeignKey("instructors.id"), nullable=True)
    max_enrollment = Column(Integer, nullable=True)
    current_enrollment = Column(Integer, default=0)
    days = Column(String, nullable=True)  # e.g., "MWF", "TR"
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)

    course = relationship("Course", back_populates="offerings")
    instructor = relationship("Instructor")
