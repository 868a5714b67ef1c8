import pytest

from core.database import SessionLocal
from core.exceptions import ConflictError
from models.question import QuestionModel
from models.user import UserModel
from schemas.user import User
from utils.class_manager import ClassManager
from utils.question_manager import QuestionManager, is_pending, pending_delta


@pytest.mark.parametrize(
    "old, new, expected",
    [
        ("pending", "answered", -1),
        ("important", "answered", -1),
        ("answered", "pending", 1),
        ("answered", "important", 1),
        ("pending", "important", 0),
        ("important", "pending", 0),
        ("answered", "answered", 0),
    ],
)
def test_pending_delta(old, new, expected):
    assert pending_delta(old, new) == expected


def test_is_pending():
    assert is_pending("pending")
    assert is_pending("important")
    assert not is_pending("answered")


def write_status_elsewhere(question_id, status):
    """Change a question's status from another session, bypassing the counter."""
    other = SessionLocal()
    try:
        other.query(QuestionModel).filter(QuestionModel.question_id == question_id).update(
            {"status": status}, synchronize_session=False
        )
        other.commit()
    finally:
        other.close()


@pytest.fixture
def principals():
    teacher = User(user_id="a" * 24, name="Asha Rao", email="asha@example.edu", role="teacher")
    student = User(user_id="b" * 24, name="Meera Nair", email="meera@example.edu", role="student")
    return teacher, student


@pytest.fixture
def seeded(db, principals):
    for principal in principals:
        db.add(UserModel(
            user_id=principal.user_id,
            name=principal.name,
            email=principal.email,
            role=principal.role,
            password_hash="x",
            created_at=principal.created_at,
        ))
    db.commit()
    teacher, student = principals
    class_info = ClassManager(db).create_class(teacher, "Topology", "Open sets", "Mathematics")
    question = QuestionManager(db).create_question(student, "What is a neighbourhood?", class_info.id)
    return class_info, question


def test_update_retries_when_status_changes_underneath(db, principals, seeded, monkeypatch):
    """A concurrent writer changing the status between read and write is absorbed."""
    teacher, _ = principals
    class_info, question = seeded
    manager = QuestionManager(db)
    original_get = manager._get_question_model
    calls = {"n": 0}

    def racing_get(question_id):
        model = original_get(question_id)
        calls["n"] += 1
        if calls["n"] == 1:
            # Another request answers the question right after our read
            write_status_elsewhere(question_id, "answered")
        return model

    monkeypatch.setattr(manager, "_get_question_model", racing_get)

    updated = manager.update_question(teacher, question.id, status="important")

    assert updated.status == "important"
    # The concurrent write bypassed the counter, so only our answered -> important
    # step is applied on top of the initial pending count.
    assert ClassManager(db).get_class(teacher, class_info.id).pending_questions == 2


def test_update_gives_up_after_repeated_conflicts(db, principals, seeded, monkeypatch):
    teacher, _ = principals
    _, question = seeded
    manager = QuestionManager(db)
    original_get = manager._get_question_model
    statuses = iter(["answered", "important", "pending", "answered"])

    def always_racing_get(question_id):
        model = original_get(question_id)
        write_status_elsewhere(question_id, next(statuses))
        return model

    monkeypatch.setattr(manager, "_get_question_model", always_racing_get)

    with pytest.raises(ConflictError):
        manager.update_question(teacher, question.id, status="answered")
