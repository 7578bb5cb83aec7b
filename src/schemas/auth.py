from pydantic import BaseModel, ConfigDict, Field


class StudentLoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_id: str = Field(alias="studentId")
    password: str


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_id: str = Field(alias="studentId")
    old_password: str = Field(alias="oldPassword")
    new_password: str = Field(alias="newPassword")


class LecturerLoginRequest(BaseModel):
    username: str
    password: str
