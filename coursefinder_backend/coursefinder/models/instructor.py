from sqlalchemy import Column, Integer, String

from coursefinder.models.base import Base


class Instructor(Base):
    __tablename__ = "instructors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
