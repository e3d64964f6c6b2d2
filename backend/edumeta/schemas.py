"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
route handlers and tests. JSON fields are camelCase; request bodies
reject unknown fields.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from .models import LessonType, UserRole

WALLET_ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class RequestModel(ApiModel):
    model_config = ConfigDict(extra="forbid")


# users

class CreateUser(RequestModel):
    """Payload for user creation."""
    name: str = Field(min_length=2)
    email: EmailStr
    password: str = Field(min_length=6)
    role: Optional[UserRole] = None
    wallet_address: Optional[str] = Field(default=None, pattern=WALLET_ADDRESS_PATTERN)


class UpdateUser(RequestModel):
    """Partial user update; only provided fields are applied."""
    name: Optional[str] = Field(default=None, min_length=2)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[UserRole] = None
    wallet_address: Optional[str] = Field(default=None, pattern=WALLET_ADDRESS_PATTERN)


class LinkWallet(RequestModel):
    wallet_address: str = Field(pattern=WALLET_ADDRESS_PATTERN)


class UserOut(ApiModel):
    """Public user shape. Never carries the password."""
    id: uuid.UUID
    name: str
    email: str
    role: UserRole
    wallet_address: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# categories

class CreateCategory(RequestModel):
    name: str = Field(min_length=2)
    description: Optional[str] = None


class UpdateCategory(RequestModel):
    name: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None


class CategoryOut(ApiModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# courses

class CreateCourse(RequestModel):
    title: str = Field(min_length=2)
    description: Optional[str] = None
    professor_id: uuid.UUID
    category_id: Optional[uuid.UUID] = None


class UpdateCourse(RequestModel):
    title: Optional[str] = Field(default=None, min_length=2)
    description: Optional[str] = None
    category_id: Optional[uuid.UUID] = None


class CourseOut(ApiModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    professor_id: uuid.UUID
    category_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime


# objectives

class CreateObjective(RequestModel):
    course_id: uuid.UUID
    description: str = Field(min_length=1)


class UpdateObjective(RequestModel):
    description: Optional[str] = Field(default=None, min_length=1)


class ObjectiveOut(ApiModel):
    id: uuid.UUID
    course_id: uuid.UUID
    description: str
    created_at: datetime
    updated_at: datetime


# modules

class CreateModule(RequestModel):
    course_id: uuid.UUID
    title: str = Field(min_length=1)
    description: Optional[str] = None
    position: int = Field(default=0, ge=0)


class UpdateModule(RequestModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    position: Optional[int] = Field(default=None, ge=0)


class ModuleOut(ApiModel):
    id: uuid.UUID
    course_id: uuid.UUID
    title: str
    description: Optional[str] = None
    position: int
    created_at: datetime
    updated_at: datetime


# lessons

class CreateLesson(RequestModel):
    module_id: uuid.UUID
    title: str = Field(min_length=1)
    type: LessonType = LessonType.TEXT
    content: Optional[str] = None
    video_url: Optional[str] = None
    position: int = Field(default=0, ge=0)


class UpdateLesson(RequestModel):
    title: Optional[str] = Field(default=None, min_length=1)
    type: Optional[LessonType] = None
    content: Optional[str] = None
    video_url: Optional[str] = None
    position: Optional[int] = Field(default=None, ge=0)


class LessonOut(ApiModel):
    id: uuid.UUID
    module_id: uuid.UUID
    title: str
    type: LessonType
    content: Optional[str] = None
    video_url: Optional[str] = None
    position: int
    created_at: datetime
    updated_at: datetime


# quizzes

class AnswerIn(RequestModel):
    """Representation of a possible answer in requests."""
    text: str = Field(min_length=1)
    is_correct: bool = False


class QuestionIn(RequestModel):
    """A question with its possible answers; exactly one must be correct."""
    text: str = Field(min_length=1)
    answers: List[AnswerIn] = Field(min_length=2)


class CreateQuiz(RequestModel):
    lesson_id: uuid.UUID
    title: str = Field(min_length=1)
    description: Optional[str] = None
    questions: List[QuestionIn] = Field(default_factory=list)


class UpdateQuiz(RequestModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None


class AnswerOut(ApiModel):
    id: uuid.UUID
    text: str
    is_correct: bool


class QuestionOut(ApiModel):
    id: uuid.UUID
    quiz_id: uuid.UUID
    text: str
    answers: List[AnswerOut] = Field(default_factory=list)


class QuizOut(ApiModel):
    id: uuid.UUID
    lesson_id: uuid.UUID
    title: str
    description: Optional[str] = None
    questions: List[QuestionOut] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


# enrollments

class CreateEnrollment(RequestModel):
    user_id: uuid.UUID
    course_id: uuid.UUID


class UpdateEnrollment(RequestModel):
    is_active: bool


class EnrollmentOut(ApiModel):
    id: uuid.UUID
    user_id: uuid.UUID
    course_id: uuid.UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime


# course progress

class CreateProgress(RequestModel):
    enrollment_id: uuid.UUID
    lesson_id: uuid.UUID


class UpdateProgress(RequestModel):
    is_completed: bool


class ProgressOut(ApiModel):
    id: uuid.UUID
    enrollment_id: uuid.UUID
    lesson_id: uuid.UUID
    is_completed: bool
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


# reviews

class CreateReview(RequestModel):
    """Rating bounds are checked by the review service, not here."""
    user_id: uuid.UUID
    course_id: uuid.UUID
    rating: int
    comment: Optional[str] = None


class UpdateReview(RequestModel):
    rating: Optional[int] = None
    comment: Optional[str] = None


class ReviewOut(ApiModel):
    user_id: uuid.UUID
    course_id: uuid.UUID
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    updated_at: datetime
