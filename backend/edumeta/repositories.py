"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (users,
categories, courses, lessons, quizzes, enrollments, ...). Repositories
hold no business rules: they translate operations into queries, shape
projections, pagination and sorting, and perform commits/refreshes
where appropriate. Storage errors are rolled back and re-raised.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlmodel import Session, select

from . import models


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Express a filter bound in UTC, the zone every stored timestamp uses.

    Naive values are taken to be UTC already.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BaseRepository:
    """CRUD operations shared by every UUID-keyed aggregate."""
    model: Any = None

    def __init__(self, session: Session):
        self.session = session

    def _commit(self):
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def _conditions(self, start_date: Optional[datetime], end_date: Optional[datetime], filters: Dict[str, Any]) -> list:
        """Build WHERE clauses for an inclusive `created_at` range and equality filters."""
        conditions = [getattr(self.model, k) == v for k, v in filters.items() if v is not None]
        if start_date:
            conditions.append(self.model.created_at >= as_utc(start_date))
        if end_date:
            conditions.append(self.model.created_at <= as_utc(end_date))
        return conditions

    def _columns(self) -> tuple:
        return (self.model,)

    def _ordering(self) -> tuple:
        # id breaks ties between equal timestamps so pages stay stable
        return (self.model.created_at.desc(), self.model.id)

    def create(self, obj):
        """Persist a new row and return the managed instance."""
        self.session.add(obj)
        self._commit()
        self.session.refresh(obj)
        return obj

    def find_all(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        **filters,
    ) -> Tuple[List[Any], int]:
        """Return `(rows, total)` ordered by `created_at`, newest first.

        Pagination is offset based and only applied when both `page` and
        `limit` are given. `total` ignores pagination but honours filters.
        """
        conditions = self._conditions(start_date, end_date, filters)
        stmt = select(*self._columns()).where(*conditions).order_by(*self._ordering())
        if page and limit:
            stmt = stmt.offset((page - 1) * limit).limit(limit)
        count_stmt = select(func.count()).select_from(self.model).where(*conditions)
        rows = self.session.exec(stmt).all()
        total = self.session.exec(count_stmt).one()
        return list(rows), total

    def find_by_id(self, obj_id: uuid.UUID):
        return self.session.get(self.model, obj_id)

    def update(self, obj_id: uuid.UUID, fields: Dict[str, Any]):
        """Apply `fields` to the row and return it refreshed, or None if absent."""
        obj = self.session.get(self.model, obj_id)
        if obj is None:
            return None
        for key, value in fields.items():
            setattr(obj, key, value)
        obj.updated_at = models.utcnow()
        self.session.add(obj)
        self._commit()
        self.session.refresh(obj)
        return obj

    def delete(self, obj_id: uuid.UUID) -> bool:
        """Hard delete; return True if a row was removed."""
        obj = self.session.get(self.model, obj_id)
        if obj is None:
            return False
        self.session.delete(obj)
        self._commit()
        return True

    def exists(self, obj_id: uuid.UUID) -> bool:
        stmt = select(self.model.id).where(self.model.id == obj_id)
        return self.session.exec(stmt).first() is not None


USER_PUBLIC_COLUMNS = (
    models.User.id,
    models.User.name,
    models.User.email,
    models.User.role,
    models.User.wallet_address,
    models.User.created_at,
    models.User.updated_at,
)


class UserRepository(BaseRepository):
    """Queries for `User` rows.

    Read operations project the public columns only, so the password hash
    never leaves this layer. Wallet addresses are lowercased on every write
    and lookup.
    """
    model = models.User

    def _columns(self) -> tuple:
        return USER_PUBLIC_COLUMNS

    def create(self, user: models.User) -> models.User:
        if user.wallet_address:
            user.wallet_address = user.wallet_address.lower()
        return super().create(user)

    def find_by_id(self, user_id: uuid.UUID):
        stmt = select(*USER_PUBLIC_COLUMNS).where(models.User.id == user_id)
        return self.session.exec(stmt).first()

    def find_by_wallet_address(self, wallet_address: str):
        """Case-insensitive lookup by linked wallet."""
        stmt = select(*USER_PUBLIC_COLUMNS).where(models.User.wallet_address == wallet_address.lower())
        return self.session.exec(stmt).first()

    def update(self, user_id: uuid.UUID, fields: Dict[str, Any]):
        if fields.get("wallet_address"):
            fields = {**fields, "wallet_address": fields["wallet_address"].lower()}
        if super().update(user_id, fields) is None:
            return None
        return self.find_by_id(user_id)

    def link_wallet(self, user_id: uuid.UUID, wallet_address: str):
        """Persist only the wallet address of an existing user."""
        return self.update(user_id, {"wallet_address": wallet_address})

    def email_exists(self, email: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        stmt = select(models.User.id).where(models.User.email == email)
        if exclude_id:
            stmt = stmt.where(models.User.id != exclude_id)
        return self.session.exec(stmt).first() is not None

    def wallet_exists(self, wallet_address: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        stmt = select(models.User.id).where(models.User.wallet_address == wallet_address.lower())
        if exclude_id:
            stmt = stmt.where(models.User.id != exclude_id)
        return self.session.exec(stmt).first() is not None


class CategoryRepository(BaseRepository):
    model = models.Category

    def name_exists(self, name: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        stmt = select(models.Category.id).where(models.Category.name == name)
        if exclude_id:
            stmt = stmt.where(models.Category.id != exclude_id)
        return self.session.exec(stmt).first() is not None


class CourseRepository(BaseRepository):
    model = models.Course


class ObjectiveRepository(BaseRepository):
    model = models.Objective


class ModuleRepository(BaseRepository):
    model = models.Module


class LessonRepository(BaseRepository):
    model = models.Lesson

    def course_id_for(self, lesson_id: uuid.UUID) -> Optional[uuid.UUID]:
        """Return the id of the course a lesson belongs to (via its module)."""
        stmt = (
            select(models.Module.course_id)
            .join(models.Lesson, models.Lesson.module_id == models.Module.id)
            .where(models.Lesson.id == lesson_id)
        )
        return self.session.exec(stmt).first()


class QuizRepository(BaseRepository):
    """Persist quizzes together with their questions and answers."""
    model = models.Quiz

    def create(self, quiz: models.Quiz, questions: Optional[List[Tuple[models.Question, List[models.Answer]]]] = None) -> models.Quiz:
        """Create a quiz and attach the provided `(question, answers)` pairs.

        Everything is committed in one transaction.
        """
        for question, answers in questions or []:
            question.answers = answers
            quiz.questions.append(question)
        return super().create(quiz)

    def exists_for_lesson(self, lesson_id: uuid.UUID, exclude_id: Optional[uuid.UUID] = None) -> bool:
        stmt = select(models.Quiz.id).where(models.Quiz.lesson_id == lesson_id)
        if exclude_id:
            stmt = stmt.where(models.Quiz.id != exclude_id)
        return self.session.exec(stmt).first() is not None


class QuestionRepository(BaseRepository):
    model = models.Question

    def create(self, question: models.Question, answers: List[models.Answer]) -> models.Question:
        """Create a question with its answers in a single commit."""
        question.answers = answers
        return super().create(question)

    def find_in_quiz(self, quiz_id: uuid.UUID, question_id: uuid.UUID) -> Optional[models.Question]:
        stmt = select(models.Question).where(models.Question.id == question_id, models.Question.quiz_id == quiz_id)
        return self.session.exec(stmt).first()


class EnrollmentRepository(BaseRepository):
    model = models.Enrollment

    def pair_exists(self, user_id: uuid.UUID, course_id: uuid.UUID) -> bool:
        stmt = select(models.Enrollment.id).where(
            models.Enrollment.user_id == user_id,
            models.Enrollment.course_id == course_id,
        )
        return self.session.exec(stmt).first() is not None


class ProgressRepository(BaseRepository):
    model = models.CourseProgress

    def pair_exists(self, enrollment_id: uuid.UUID, lesson_id: uuid.UUID) -> bool:
        stmt = select(models.CourseProgress.id).where(
            models.CourseProgress.enrollment_id == enrollment_id,
            models.CourseProgress.lesson_id == lesson_id,
        )
        return self.session.exec(stmt).first() is not None


class ReviewRepository(BaseRepository):
    """Reviews are keyed by `(user_id, course_id)` instead of a UUID."""
    model = models.Review

    def _ordering(self) -> tuple:
        return (models.Review.created_at.desc(), models.Review.user_id, models.Review.course_id)

    @staticmethod
    def _key(user_id: uuid.UUID, course_id: uuid.UUID) -> dict:
        return {"user_id": user_id, "course_id": course_id}

    def find_by_id(self, user_id: uuid.UUID, course_id: uuid.UUID) -> Optional[models.Review]:
        return self.session.get(models.Review, self._key(user_id, course_id))

    def update(self, user_id: uuid.UUID, course_id: uuid.UUID, fields: Dict[str, Any]) -> Optional[models.Review]:
        review = self.find_by_id(user_id, course_id)
        if review is None:
            return None
        for key, value in fields.items():
            setattr(review, key, value)
        review.updated_at = models.utcnow()
        self.session.add(review)
        self._commit()
        self.session.refresh(review)
        return review

    def delete(self, user_id: uuid.UUID, course_id: uuid.UUID) -> bool:
        review = self.find_by_id(user_id, course_id)
        if review is None:
            return False
        self.session.delete(review)
        self._commit()
        return True

    def exists(self, user_id: uuid.UUID, course_id: uuid.UUID) -> bool:
        return self.find_by_id(user_id, course_id) is not None
