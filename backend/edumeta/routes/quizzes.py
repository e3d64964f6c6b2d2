"""Quiz routes.

A quiz is read back with its questions and their answers. Questions can
be added to or removed from an existing quiz.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from .. import schemas, services
from ..database import get_session
from .deps import ListParams, envelope, list_params, page_envelope

router = APIRouter(prefix="/quizzes", tags=["quizzes"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_quiz(payload: schemas.CreateQuiz, db: Session = Depends(get_session)):
    """Create a quiz for a quiz-type lesson, optionally with its questions.

    Each question must have exactly one answer marked `isCorrect`.
    """
    quiz = services.QuizService(db).create(payload)
    return envelope("Quiz created successfully", quiz)


@router.get("")
def list_quizzes(
    params: ListParams = Depends(list_params),
    lesson_id: Optional[uuid.UUID] = Query(None, alias="lessonId"),
    db: Session = Depends(get_session),
):
    items, total = services.QuizService(db).find_all(
        params.page, params.limit, params.start_date, params.end_date, lesson_id=lesson_id
    )
    return page_envelope("Quizzes retrieved successfully", items, total, params)


@router.get("/{quiz_id}")
def get_quiz(quiz_id: str, db: Session = Depends(get_session)):
    quiz = services.QuizService(db).find_by_id(quiz_id)
    return envelope("Quiz retrieved successfully", quiz)


@router.put("/{quiz_id}")
def update_quiz(quiz_id: str, payload: schemas.UpdateQuiz, db: Session = Depends(get_session)):
    quiz = services.QuizService(db).update(quiz_id, payload)
    return envelope("Quiz updated successfully", quiz)


@router.delete("/{quiz_id}")
def delete_quiz(quiz_id: str, db: Session = Depends(get_session)):
    services.QuizService(db).delete(quiz_id)
    return envelope("Quiz deleted successfully")


@router.post("/{quiz_id}/questions", status_code=status.HTTP_201_CREATED)
def add_question(quiz_id: str, payload: schemas.QuestionIn, db: Session = Depends(get_session)):
    question = services.QuizService(db).add_question(quiz_id, payload)
    return envelope("Question added successfully", question)


@router.delete("/{quiz_id}/questions/{question_id}")
def remove_question(quiz_id: str, question_id: str, db: Session = Depends(get_session)):
    services.QuizService(db).remove_question(quiz_id, question_id)
    return envelope("Question removed successfully")
