from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from coursefinder.models.base import Base


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, nullable=False, unique=True, index=True)  # e.g., "CS"
    title = Column(String, nullable=False)
    department_name = Column(String, nullable=True, index=True)

    courses = relationship("Course", back_populates="subject")
