"""Request schemas for code issuance, redemption and enrollment.

Field names on the wire are camelCase; Python attributes are snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field


class GenerateCodeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    course_code: str = Field(alias="courseCode", description="Code of the course, e.g. 'OSD-001'.")
    lecturer_id: int = Field(alias="lecturerId", description="Internal ID of the requesting lecturer.")


class SubmitAttendanceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_id: str = Field(alias="studentId", description="Public student ID, e.g. 'S-001'.")
    course_code: str = Field(alias="courseCode")
    attendance_code: str = Field(alias="attendanceCode", description="Code shown by the lecturer.")


class EnrollRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_db_id: int = Field(alias="studentDbId", description="Internal ID of the student.")
    course_code: str = Field(alias="courseCode")
