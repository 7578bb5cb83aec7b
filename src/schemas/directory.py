"""Request schemas for the admin directory routes.

Text fields are optional at the schema level so that blank or missing values
reach the manager, which reports them with a specific message.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AddStudentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_name: Optional[str] = Field(default=None, alias="studentName")


class RenameStudentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_name: Optional[str] = Field(default=None, alias="newName")


class AddLecturerRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class AddCourseRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: Optional[str] = None
    name: Optional[str] = None
    lecturer_id: Optional[int] = Field(default=None, alias="lecturerId")


class AssignLecturerRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_lecturer_id: int = Field(alias="newLecturerId")
