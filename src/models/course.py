from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from .base import Base


class CourseModel(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(10), unique=True, index=True, nullable=False)  # e.g. 'OSD-001'
    name = Column(String(255), nullable=False)
    lecturer_id = Column(Integer, ForeignKey("lecturers.id"), index=True, nullable=True)

    lecturer = relationship("LecturerModel", back_populates="courses")
