"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Each class maps to a table; ownership is expressed with foreign keys and
explicit `ondelete` rules so the database enforces cascades.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, Enum):
    LEARNER = "learner"
    PROFESSOR = "professor"


class LessonType(str, Enum):
    TEXT = "text"
    VIDEO = "video"
    QUIZ = "quiz"


class Timestamped(SQLModel):
    """Columns shared by every table; maintained by the storage layer."""
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False, sa_column_kwargs={"onupdate": utcnow})


class User(Timestamped, table=True):
    """A registered user.

    Fields:
    - `email`: unique login address
    - `password`: salted hash (never store plaintext)
    - `wallet_address`: optional blockchain address, stored lowercase and
      unique when present
    """
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(nullable=False)
    email: str = Field(index=True, nullable=False, unique=True)
    password: str = Field(nullable=False)
    role: UserRole = Field(default=UserRole.LEARNER, nullable=False)
    wallet_address: Optional[str] = Field(default=None, max_length=42, unique=True, index=True)


class Category(Timestamped, table=True):
    """Flat lookup used to classify courses."""
    __tablename__ = "categories"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True, nullable=False, unique=True)
    description: Optional[str] = None


class Course(Timestamped, table=True):
    """A course owned by a professor and optionally filed under a category."""
    __tablename__ = "courses"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str = Field(nullable=False)
    description: Optional[str] = None
    professor_id: uuid.UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    category_id: Optional[uuid.UUID] = Field(default=None, foreign_key="categories.id", ondelete="SET NULL", index=True)


class Objective(Timestamped, table=True):
    """A learning objective of a course."""
    __tablename__ = "objectives"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    course_id: uuid.UUID = Field(foreign_key="courses.id", ondelete="CASCADE", index=True)
    description: str = Field(nullable=False)


class Module(Timestamped, table=True):
    __tablename__ = "modules"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    course_id: uuid.UUID = Field(foreign_key="courses.id", ondelete="CASCADE", index=True)
    title: str = Field(nullable=False)
    description: Optional[str] = None
    position: int = 0


class Lesson(Timestamped, table=True):
    """A lesson inside a module. Lessons of type `quiz` own one `Quiz`."""
    __tablename__ = "lessons"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    module_id: uuid.UUID = Field(foreign_key="modules.id", ondelete="CASCADE", index=True)
    title: str = Field(nullable=False)
    type: LessonType = Field(default=LessonType.TEXT, nullable=False)
    content: Optional[str] = None
    video_url: Optional[str] = None
    position: int = 0


class Quiz(Timestamped, table=True):
    __tablename__ = "quizzes"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    lesson_id: uuid.UUID = Field(foreign_key="lessons.id", ondelete="CASCADE", unique=True)
    title: str = Field(nullable=False)
    description: Optional[str] = None
    questions: List["Question"] = Relationship(
        back_populates="quiz",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Question.created_at"},
    )


class Question(Timestamped, table=True):
    """A question belonging to a `Quiz`."""
    __tablename__ = "questions"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    quiz_id: uuid.UUID = Field(foreign_key="quizzes.id", ondelete="CASCADE", index=True)
    text: str = Field(nullable=False)
    quiz: Optional[Quiz] = Relationship(back_populates="questions")
    answers: List["Answer"] = Relationship(
        back_populates="question",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Answer.created_at"},
    )


class Answer(Timestamped, table=True):
    """Possible answer for a `Question`.

    `is_correct` marks the single correct answer of its question.
    """
    __tablename__ = "answers"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    question_id: uuid.UUID = Field(foreign_key="questions.id", ondelete="CASCADE", index=True)
    text: str = Field(nullable=False)
    is_correct: bool = False
    question: Optional[Question] = Relationship(back_populates="answers")


class Enrollment(Timestamped, table=True):
    """Registration of a user in a course.

    At most one enrollment exists per (user, course) pair. `is_active`
    allows deactivation without losing progress history.
    """
    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("user_id", "course_id", name="uq_enrollments_user_course"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    course_id: uuid.UUID = Field(foreign_key="courses.id", ondelete="CASCADE", index=True)
    is_active: bool = True


class CourseProgress(Timestamped, table=True):
    """Completion of one lesson within one enrollment."""
    __tablename__ = "course_progress"
    __table_args__ = (UniqueConstraint("enrollment_id", "lesson_id", name="uq_course_progress_enrollment_lesson"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    enrollment_id: uuid.UUID = Field(foreign_key="enrollments.id", ondelete="CASCADE", index=True)
    lesson_id: uuid.UUID = Field(foreign_key="lessons.id", ondelete="CASCADE", index=True)
    is_completed: bool = True
    completed_at: Optional[datetime] = None


class Review(Timestamped, table=True):
    """A course review keyed by (user_id, course_id).

    The composite primary key makes a second review by the same user for
    the same course impossible to store.
    """
    __tablename__ = "reviews"

    user_id: uuid.UUID = Field(foreign_key="users.id", ondelete="CASCADE", primary_key=True)
    course_id: uuid.UUID = Field(foreign_key="courses.id", ondelete="CASCADE", primary_key=True)
    rating: int = Field(nullable=False)
    comment: Optional[str] = None
