"""HTTP route modules, one `APIRouter` per entity family."""

from . import categories, courses, enrollments, lessons, modules, objectives, progress, quizzes, reviews, users

ROUTERS = (
    users.router,
    categories.router,
    courses.router,
    objectives.router,
    modules.router,
    lessons.router,
    quizzes.router,
    enrollments.router,
    progress.router,
    reviews.router,
)
