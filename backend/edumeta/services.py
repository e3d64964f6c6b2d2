"""Business logic services used by HTTP route handlers.

This module holds small service classes that coordinate repositories.
Services are intentionally thin: they validate identifiers, enforce the
invariants a single query cannot express (uniqueness, parent existence,
password hashing) and translate outcomes into typed `ServiceError`s.
Every operation is a linear validate-then-act sequence that exits early
on the first failure.
"""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from . import models, repositories, schemas
from .config import settings

logger = logging.getLogger("edumeta.services")

PWD_CTX = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__default_rounds=settings.PASSWORD_HASH_ROUNDS,
)


class ServiceError(Exception):
    """Expected failure surfaced verbatim to the caller."""
    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(ServiceError):
    status_code = 400
    error = "Bad Request"


class NotFoundError(ServiceError):
    status_code = 404
    error = "Not Found"


class ConflictError(ServiceError):
    status_code = 409
    error = "Conflict"


def parse_id(value: Any, label: str) -> uuid.UUID:
    """Return `value` as a UUID or raise BadRequestError if empty/malformed."""
    if isinstance(value, uuid.UUID):
        return value
    if not value or not str(value).strip():
        raise BadRequestError(f"{label} ID is required")
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise BadRequestError(f"Invalid {label} ID: {value}")


@contextmanager
def conflict_on_integrity_error(message: str):
    """Translate a constraint violation raised at write time into a ServiceError.

    Covers the window between a pre-check and the write. A foreign key
    failure means a referenced row vanished and becomes NotFoundError;
    any other violation becomes ConflictError with `message`.
    """
    try:
        yield
    except IntegrityError as exc:
        if "foreign key" in str(exc.orig).lower():
            logger.warning("integrity error translated to not found: %s", exc.orig)
            raise NotFoundError("Referenced resource not found") from exc
        logger.warning("integrity error translated to conflict: %s", exc.orig)
        raise ConflictError(message) from exc


def hash_password(password: str) -> str:
    return PWD_CTX.hash(password)


class UserService:
    """User management: uniqueness of email and wallet, password hashing."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    @staticmethod
    def _to_response(user) -> schemas.UserOut:
        return schemas.UserOut.model_validate(user)

    def create(self, data: schemas.CreateUser) -> schemas.UserOut:
        """Create a user after checking email and wallet uniqueness.

        The password is hashed before it reaches the repository and the
        returned shape never includes it.
        """
        if self.user_repo.email_exists(data.email):
            raise ConflictError("Email already exists")
        if data.wallet_address and self.user_repo.wallet_exists(data.wallet_address):
            raise ConflictError("Wallet address is already linked to another account")
        user = models.User(
            name=data.name,
            email=data.email,
            password=hash_password(data.password),
            role=data.role or models.UserRole.LEARNER,
            wallet_address=data.wallet_address,
        )
        with conflict_on_integrity_error("Email or wallet address already exists"):
            saved = self.user_repo.create(user)
        logger.info("user created id=%s", saved.id)
        return self._to_response(saved)

    def find_all(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Tuple[List[schemas.UserOut], int]:
        users, total = self.user_repo.find_all(page, limit, start_date, end_date)
        return [self._to_response(u) for u in users], total

    def find_by_id(self, user_id) -> schemas.UserOut:
        uid = parse_id(user_id, "User")
        user = self.user_repo.find_by_id(uid)
        if not user:
            raise NotFoundError(f"User with ID {user_id} not found")
        return self._to_response(user)

    def update(self, user_id, data: schemas.UpdateUser) -> schemas.UserOut:
        """Apply a partial update; email and wallet stay unique, passwords are re-hashed."""
        uid = parse_id(user_id, "User")
        if not self.user_repo.exists(uid):
            raise NotFoundError(f"User with ID {user_id} not found")
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        if fields.get("email") and self.user_repo.email_exists(fields["email"], uid):
            raise ConflictError("Email already exists")
        if fields.get("wallet_address") and self.user_repo.wallet_exists(fields["wallet_address"], uid):
            raise ConflictError("Wallet address is already linked to another account")
        if fields.get("password"):
            fields["password"] = hash_password(fields["password"])
        with conflict_on_integrity_error("Email or wallet address already exists"):
            updated = self.user_repo.update(uid, fields)
        if not updated:
            raise NotFoundError(f"User with ID {user_id} not found")
        return self._to_response(updated)

    def delete(self, user_id) -> None:
        uid = parse_id(user_id, "User")
        if not self.user_repo.exists(uid):
            raise NotFoundError(f"User with ID {user_id} not found")
        if not self.user_repo.delete(uid):
            raise NotFoundError(f"User with ID {user_id} not found")
        logger.info("user deleted id=%s", uid)

    def find_by_wallet_address(self, wallet_address: str) -> schemas.UserOut:
        """Fetch a user by linked wallet; comparison is case-insensitive."""
        if not wallet_address or not wallet_address.strip():
            raise BadRequestError("Wallet address is required")
        user = self.user_repo.find_by_wallet_address(wallet_address)
        if not user:
            raise NotFoundError(f"No user found with wallet address {wallet_address}")
        return self._to_response(user)

    def link_wallet(self, user_id, data: schemas.LinkWallet) -> schemas.UserOut:
        """Link a wallet to an existing user.

        Re-linking the address a user already holds succeeds; an address held
        by a different account is a conflict.
        """
        uid = parse_id(user_id, "User")
        if not self.user_repo.exists(uid):
            raise NotFoundError(f"User with ID {user_id} not found")
        if self.user_repo.wallet_exists(data.wallet_address, uid):
            raise ConflictError("Wallet address is already linked to another account")
        with conflict_on_integrity_error("Wallet address is already linked to another account"):
            updated = self.user_repo.link_wallet(uid, data.wallet_address)
        if not updated:
            raise NotFoundError(f"User with ID {user_id} not found")
        logger.info("wallet linked user_id=%s", uid)
        return self._to_response(updated)


class CrudService:
    """Shared read/update/delete flow for UUID-keyed aggregates.

    Subclasses set `label`, `repository_class` and `out_schema`, implement
    `create`, and may override `_check_update` to add invariants.
    """
    label = "Resource"
    repository_class: Any = repositories.BaseRepository
    out_schema: Any = None
    conflict_message = "Resource already exists"

    def __init__(self, session: Session):
        self.session = session
        self.repo = self.repository_class(session)

    def _to_response(self, obj):
        return self.out_schema.model_validate(obj)

    def _not_found(self, obj_id) -> NotFoundError:
        return NotFoundError(f"{self.label} with ID {obj_id} not found")

    def _require(self, repo: repositories.BaseRepository, obj_id: uuid.UUID, label: str):
        """Fetch a referenced row or raise NotFoundError."""
        obj = repo.find_by_id(obj_id)
        if obj is None:
            raise NotFoundError(f"{label} with ID {obj_id} not found")
        return obj

    def _create(self, obj):
        with conflict_on_integrity_error(self.conflict_message):
            saved = self.repo.create(obj)
        return self._to_response(saved)

    def find_all(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        **filters,
    ) -> Tuple[list, int]:
        rows, total = self.repo.find_all(page, limit, start_date, end_date, **filters)
        return [self._to_response(r) for r in rows], total

    def find_by_id(self, obj_id):
        oid = parse_id(obj_id, self.label)
        obj = self.repo.find_by_id(oid)
        if obj is None:
            raise self._not_found(obj_id)
        return self._to_response(obj)

    def _check_update(self, oid: uuid.UUID, current, fields: Dict[str, Any]) -> Dict[str, Any]:
        return fields

    def update(self, obj_id, data):
        oid = parse_id(obj_id, self.label)
        current = self.repo.find_by_id(oid)
        if current is None:
            raise self._not_found(obj_id)
        fields = self._check_update(oid, current, data.model_dump(exclude_unset=True, exclude_none=True))
        with conflict_on_integrity_error(self.conflict_message):
            updated = self.repo.update(oid, fields)
        if updated is None:
            raise self._not_found(obj_id)
        return self._to_response(updated)

    def delete(self, obj_id) -> None:
        oid = parse_id(obj_id, self.label)
        if not self.repo.exists(oid):
            raise self._not_found(obj_id)
        if not self.repo.delete(oid):
            raise self._not_found(obj_id)
        logger.info("%s deleted id=%s", self.label.lower(), oid)


class CategoryService(CrudService):
    label = "Category"
    repository_class = repositories.CategoryRepository
    out_schema = schemas.CategoryOut
    conflict_message = "Category name already exists"

    def create(self, data: schemas.CreateCategory) -> schemas.CategoryOut:
        if self.repo.name_exists(data.name):
            raise ConflictError(self.conflict_message)
        return self._create(models.Category(name=data.name, description=data.description))

    def _check_update(self, oid, current, fields):
        if fields.get("name") and self.repo.name_exists(fields["name"], oid):
            raise ConflictError(self.conflict_message)
        return fields


class CourseService(CrudService):
    """Courses reference an existing professor and, optionally, a category."""
    label = "Course"
    repository_class = repositories.CourseRepository
    out_schema = schemas.CourseOut

    def __init__(self, session: Session):
        super().__init__(session)
        self.user_repo = repositories.UserRepository(session)
        self.category_repo = repositories.CategoryRepository(session)

    def create(self, data: schemas.CreateCourse) -> schemas.CourseOut:
        if not self.user_repo.exists(data.professor_id):
            raise NotFoundError(f"User with ID {data.professor_id} not found")
        if data.category_id and not self.category_repo.exists(data.category_id):
            raise NotFoundError(f"Category with ID {data.category_id} not found")
        return self._create(models.Course(**data.model_dump()))

    def _check_update(self, oid, current, fields):
        if fields.get("category_id") and not self.category_repo.exists(fields["category_id"]):
            raise NotFoundError(f"Category with ID {fields['category_id']} not found")
        return fields


class ObjectiveService(CrudService):
    label = "Objective"
    repository_class = repositories.ObjectiveRepository
    out_schema = schemas.ObjectiveOut

    def create(self, data: schemas.CreateObjective) -> schemas.ObjectiveOut:
        self._require(repositories.CourseRepository(self.session), data.course_id, "Course")
        return self._create(models.Objective(**data.model_dump()))


class ModuleService(CrudService):
    label = "Module"
    repository_class = repositories.ModuleRepository
    out_schema = schemas.ModuleOut

    def create(self, data: schemas.CreateModule) -> schemas.ModuleOut:
        self._require(repositories.CourseRepository(self.session), data.course_id, "Course")
        return self._create(models.Module(**data.model_dump()))


class LessonService(CrudService):
    label = "Lesson"
    repository_class = repositories.LessonRepository
    out_schema = schemas.LessonOut

    def create(self, data: schemas.CreateLesson) -> schemas.LessonOut:
        self._require(repositories.ModuleRepository(self.session), data.module_id, "Module")
        return self._create(models.Lesson(**data.model_dump()))

    def _check_update(self, oid, current, fields):
        new_type = fields.get("type")
        if new_type and new_type != models.LessonType.QUIZ and current.type == models.LessonType.QUIZ:
            if repositories.QuizRepository(self.session).exists_for_lesson(oid):
                raise BadRequestError("Lesson has a quiz; delete it before changing the lesson type")
        return fields


class QuizService(CrudService):
    """Quizzes hang off quiz-type lessons and carry questions with answers."""
    label = "Quiz"
    repository_class = repositories.QuizRepository
    out_schema = schemas.QuizOut
    conflict_message = "Lesson already has a quiz"

    def __init__(self, session: Session):
        super().__init__(session)
        self.lesson_repo = repositories.LessonRepository(session)
        self.question_repo = repositories.QuestionRepository(session)

    @staticmethod
    def _build_question(question: schemas.QuestionIn) -> Tuple[models.Question, List[models.Answer]]:
        """Validate a question payload and return the unsaved rows.

        Exactly one answer must be marked correct.
        """
        correct = sum(1 for a in question.answers if a.is_correct)
        if correct != 1:
            raise BadRequestError(f"Question '{question.text}' must have exactly one correct answer")
        answers = [models.Answer(text=a.text, is_correct=a.is_correct) for a in question.answers]
        return models.Question(text=question.text), answers

    def create(self, data: schemas.CreateQuiz) -> schemas.QuizOut:
        lesson = self._require(self.lesson_repo, data.lesson_id, "Lesson")
        if lesson.type != models.LessonType.QUIZ:
            raise BadRequestError("Quizzes can only be attached to lessons of type 'quiz'")
        if self.repo.exists_for_lesson(data.lesson_id):
            raise ConflictError(self.conflict_message)
        questions = [self._build_question(q) for q in data.questions]
        quiz = models.Quiz(lesson_id=data.lesson_id, title=data.title, description=data.description)
        with conflict_on_integrity_error(self.conflict_message):
            saved = self.repo.create(quiz, questions)
        return self._to_response(saved)

    def add_question(self, quiz_id, data: schemas.QuestionIn) -> schemas.QuestionOut:
        qid = parse_id(quiz_id, self.label)
        if not self.repo.exists(qid):
            raise self._not_found(quiz_id)
        question, answers = self._build_question(data)
        question.quiz_id = qid
        with conflict_on_integrity_error(self.conflict_message):
            saved = self.question_repo.create(question, answers)
        return schemas.QuestionOut.model_validate(saved)

    def remove_question(self, quiz_id, question_id) -> None:
        qid = parse_id(quiz_id, self.label)
        question_uuid = parse_id(question_id, "Question")
        if self.question_repo.find_in_quiz(qid, question_uuid) is None:
            raise NotFoundError(f"Question with ID {question_id} not found in quiz {quiz_id}")
        if not self.question_repo.delete(question_uuid):
            raise NotFoundError(f"Question with ID {question_id} not found in quiz {quiz_id}")


class EnrollmentService(CrudService):
    label = "Enrollment"
    repository_class = repositories.EnrollmentRepository
    out_schema = schemas.EnrollmentOut
    conflict_message = "User is already enrolled in this course"

    def create(self, data: schemas.CreateEnrollment) -> schemas.EnrollmentOut:
        self._require(repositories.UserRepository(self.session), data.user_id, "User")
        self._require(repositories.CourseRepository(self.session), data.course_id, "Course")
        if self.repo.pair_exists(data.user_id, data.course_id):
            raise ConflictError(self.conflict_message)
        return self._create(models.Enrollment(user_id=data.user_id, course_id=data.course_id))


class CourseProgressService(CrudService):
    """Lesson completion within an enrollment."""
    label = "Course progress"
    repository_class = repositories.ProgressRepository
    out_schema = schemas.ProgressOut
    conflict_message = "Lesson progress already recorded for this enrollment"

    def create(self, data: schemas.CreateProgress) -> schemas.ProgressOut:
        enrollment = self._require(repositories.EnrollmentRepository(self.session), data.enrollment_id, "Enrollment")
        lesson_repo = repositories.LessonRepository(self.session)
        self._require(lesson_repo, data.lesson_id, "Lesson")
        if lesson_repo.course_id_for(data.lesson_id) != enrollment.course_id:
            raise BadRequestError("Lesson does not belong to the enrolled course")
        if self.repo.pair_exists(data.enrollment_id, data.lesson_id):
            raise ConflictError(self.conflict_message)
        progress = models.CourseProgress(
            enrollment_id=data.enrollment_id,
            lesson_id=data.lesson_id,
            is_completed=True,
            completed_at=models.utcnow(),
        )
        return self._create(progress)

    def _check_update(self, oid, current, fields):
        if "is_completed" in fields:
            fields["completed_at"] = models.utcnow() if fields["is_completed"] else None
        return fields


class ReviewService:
    """Reviews are keyed by (user, course); ratings must be integers 1-5."""
    def __init__(self, session: Session):
        self.session = session
        self.review_repo = repositories.ReviewRepository(session)

    @staticmethod
    def _check_rating(rating) -> None:
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise BadRequestError("Rating must be an integer between 1 and 5")

    @staticmethod
    def _to_response(review) -> schemas.ReviewOut:
        return schemas.ReviewOut.model_validate(review)

    def _keys(self, user_id, course_id) -> Tuple[uuid.UUID, uuid.UUID]:
        return parse_id(user_id, "User"), parse_id(course_id, "Course")

    def _not_found(self, user_id, course_id) -> NotFoundError:
        return NotFoundError(f"Review by user {user_id} for course {course_id} not found")

    def create(self, data: schemas.CreateReview) -> schemas.ReviewOut:
        self._check_rating(data.rating)
        if not repositories.UserRepository(self.session).exists(data.user_id):
            raise NotFoundError(f"User with ID {data.user_id} not found")
        if not repositories.CourseRepository(self.session).exists(data.course_id):
            raise NotFoundError(f"Course with ID {data.course_id} not found")
        if self.review_repo.exists(data.user_id, data.course_id):
            raise ConflictError("User has already reviewed this course")
        review = models.Review(**data.model_dump())
        with conflict_on_integrity_error("User has already reviewed this course"):
            saved = self.review_repo.create(review)
        return self._to_response(saved)

    def find_all(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        **filters,
    ) -> Tuple[List[schemas.ReviewOut], int]:
        reviews, total = self.review_repo.find_all(page, limit, start_date, end_date, **filters)
        return [self._to_response(r) for r in reviews], total

    def find_by_id(self, user_id, course_id) -> schemas.ReviewOut:
        uid, cid = self._keys(user_id, course_id)
        review = self.review_repo.find_by_id(uid, cid)
        if review is None:
            raise self._not_found(user_id, course_id)
        return self._to_response(review)

    def update(self, user_id, course_id, data: schemas.UpdateReview) -> schemas.ReviewOut:
        uid, cid = self._keys(user_id, course_id)
        if not self.review_repo.exists(uid, cid):
            raise self._not_found(user_id, course_id)
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        if "rating" in fields:
            self._check_rating(fields["rating"])
        updated = self.review_repo.update(uid, cid, fields)
        if updated is None:
            raise self._not_found(user_id, course_id)
        return self._to_response(updated)

    def delete(self, user_id, course_id) -> None:
        uid, cid = self._keys(user_id, course_id)
        if not self.review_repo.exists(uid, cid):
            raise self._not_found(user_id, course_id)
        if not self.review_repo.delete(uid, cid):
            raise self._not_found(user_id, course_id)
