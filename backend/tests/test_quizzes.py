def _questions():
    return [
        {"text": "What does EVM stand for?", "answers": [
            {"text": "Ethereum Virtual Machine", "isCorrect": True},
            {"text": "Electronic Voting Machine"},
        ]},
        {"text": "Which unit is smallest?", "answers": [
            {"text": "wei", "isCorrect": True},
            {"text": "gwei"},
            {"text": "ether"},
        ]},
    ]


def test_create_quiz_with_questions(client, make_course, make_lesson):
    lesson = make_lesson(make_course()["id"], lesson_type="quiz")
    r = client.post("/quizzes", json={"lessonId": lesson["id"], "title": "Basics quiz", "questions": _questions()})
    assert r.status_code == 201, r.text
    quiz = r.json()["data"]
    assert len(quiz["questions"]) == 2
    assert sorted(len(q["answers"]) for q in quiz["questions"]) == [2, 3]

    fetched = client.get(f"/quizzes/{quiz['id']}").json()["data"]
    evm = next(q for q in fetched["questions"] if q["text"].startswith("What does EVM"))
    correct = [a["text"] for a in evm["answers"] if a["isCorrect"]]
    assert correct == ["Ethereum Virtual Machine"]


def test_quiz_requires_quiz_lesson(client, make_course, make_lesson):
    lesson = make_lesson(make_course()["id"], lesson_type="text")
    r = client.post("/quizzes", json={"lessonId": lesson["id"], "title": "Nope"})
    assert r.status_code == 400


def test_one_quiz_per_lesson(client, make_course, make_lesson):
    lesson = make_lesson(make_course()["id"], lesson_type="quiz")
    assert client.post("/quizzes", json={"lessonId": lesson["id"], "title": "First"}).status_code == 201
    assert client.post("/quizzes", json={"lessonId": lesson["id"], "title": "Second"}).status_code == 409


def test_question_needs_exactly_one_correct_answer(client, make_course, make_lesson):
    lesson = make_lesson(make_course()["id"], lesson_type="quiz")
    no_correct = [{"text": "Q?", "answers": [{"text": "a"}, {"text": "b"}]}]
    r = client.post("/quizzes", json={"lessonId": lesson["id"], "title": "Quiz", "questions": no_correct})
    assert r.status_code == 400
    two_correct = [{"text": "Q?", "answers": [{"text": "a", "isCorrect": True}, {"text": "b", "isCorrect": True}]}]
    r = client.post("/quizzes", json={"lessonId": lesson["id"], "title": "Quiz", "questions": two_correct})
    assert r.status_code == 400
    # nothing was stored by the rejected attempts
    assert client.get("/quizzes", params={"lessonId": lesson["id"]}).json()["total"] == 0


def test_add_and_remove_question(client, make_course, make_lesson):
    lesson = make_lesson(make_course()["id"], lesson_type="quiz")
    quiz = client.post("/quizzes", json={"lessonId": lesson["id"], "title": "Quiz"}).json()["data"]
    r = client.post(f"/quizzes/{quiz['id']}/questions", json=_questions()[0])
    assert r.status_code == 201
    question = r.json()["data"]
    assert question["quizId"] == quiz["id"]
    assert len(client.get(f"/quizzes/{quiz['id']}").json()["data"]["questions"]) == 1

    assert client.delete(f"/quizzes/{quiz['id']}/questions/{question['id']}").status_code == 200
    assert client.get(f"/quizzes/{quiz['id']}").json()["data"]["questions"] == []
    assert client.delete(f"/quizzes/{quiz['id']}/questions/{question['id']}").status_code == 404


def test_lesson_with_quiz_keeps_its_type(client, make_course, make_lesson):
    lesson = make_lesson(make_course()["id"], lesson_type="quiz")
    client.post("/quizzes", json={"lessonId": lesson["id"], "title": "Quiz"})
    assert client.put(f"/lessons/{lesson['id']}", json={"type": "text"}).status_code == 400


def test_deleting_lesson_removes_quiz(client, make_course, make_lesson):
    lesson = make_lesson(make_course()["id"], lesson_type="quiz")
    quiz = client.post("/quizzes", json={"lessonId": lesson["id"], "title": "Quiz", "questions": _questions()}).json()["data"]
    assert client.delete(f"/lessons/{lesson['id']}").status_code == 200
    assert client.get(f"/quizzes/{quiz['id']}").status_code == 404


def test_update_and_delete_quiz(client, make_course, make_lesson):
    lesson = make_lesson(make_course()["id"], lesson_type="quiz")
    quiz = client.post("/quizzes", json={"lessonId": lesson["id"], "title": "Quiz", "questions": _questions()}).json()["data"]
    r = client.put(f"/quizzes/{quiz['id']}", json={"title": "Renamed"})
    assert r.status_code == 200
    assert r.json()["data"]["title"] == "Renamed"
    assert len(r.json()["data"]["questions"]) == 2
    assert client.delete(f"/quizzes/{quiz['id']}").status_code == 200
    assert client.delete(f"/quizzes/{quiz['id']}").status_code == 404
