from datetime import date, timedelta

import pytest

from BackEnd.core.errors import StoreError
from BackEnd.models.entities import Cycle, CycleProgress, Exam, ProgressStatus, Session, SessionDetails, Subject
from BackEnd.repos.study_repo import SqliteStudyRepository
from BackEnd.services.cycle_service import CycleTracker
from BackEnd.services.timer_service import SessionTimer, TimerState


@pytest.fixture
def db(tmp_path):
    return SqliteStudyRepository(tmp_path / "study.db")


@pytest.fixture
def stored_exam(db, clock):
    return db.add_exam(Exam(name="SEFAZ Auditor", board="FGV", exam_date=date(2027, 5, 2), created_at=clock.now))


@pytest.fixture
def stored_subjects(db, stored_exam):
    return [
        db.add_subject(Subject(exam_id=stored_exam.id, name=name, order=i))
        for i, name in enumerate(["Contabilidade", "Tributário", "Português"])
    ]


def test_exam_round_trip(db, stored_exam, clock):
    loaded = db.get_exam(stored_exam.id)

    assert loaded.name == "SEFAZ Auditor"
    assert loaded.board == "FGV"
    assert loaded.role is None
    assert loaded.exam_date == date(2027, 5, 2)
    assert loaded.created_at == clock.now
    assert db.list_exams() == [loaded]


def test_subjects_listed_in_order(db, stored_exam, stored_subjects):
    assert [s.name for s in db.list_subjects(stored_exam.id)] == ["Contabilidade", "Tributário", "Português"]
    assert db.get_subject(stored_subjects[0].id).color == "#1A6FFF"


def test_cycle_keeps_declared_subject_order(db, stored_exam, stored_subjects, clock):
    ids = [s.id for s in reversed(stored_subjects)]
    cycle = db.add_cycle(Cycle(exam_id=stored_exam.id, name="Ciclo 1", number=1, subject_ids=ids, started_at=clock.now))

    assert cycle.subject_ids == ids
    assert db.get_active_cycle(stored_exam.id).id == cycle.id

    cycle.completed_at = clock.now + timedelta(days=10)
    db.update_cycle(cycle)
    assert db.get_active_cycle(stored_exam.id) is None
    assert db.list_cycles(stored_exam.id)[0].completed_at == cycle.completed_at


def test_progress_status_update(db, stored_exam, stored_subjects, clock):
    ids = [s.id for s in stored_subjects]
    cycle = db.add_cycle(Cycle(exam_id=stored_exam.id, name="Ciclo 1", number=1, subject_ids=ids, started_at=clock.now))
    db.add_progress([CycleProgress(cycle_id=cycle.id, subject_id=sid) for sid in ids])

    db.update_progress_status(cycle.id, ids[1], ProgressStatus.IN_PROGRESS)

    statuses = {p.subject_id: p.status for p in db.list_progress(cycle.id)}
    assert statuses == {ids[0]: ProgressStatus.PENDING, ids[1]: ProgressStatus.IN_PROGRESS,
                        ids[2]: ProgressStatus.PENDING}


def test_session_queries(db, stored_exam, stored_subjects, clock):
    subject_id = stored_subjects[0].id
    old = db.add_session(Session(subject_id=subject_id, exam_id=stored_exam.id,
                                 started_at=clock.now - timedelta(days=2)))
    old.ended_at = old.started_at + timedelta(hours=1)
    old.active_seconds = 3300
    old.pause_seconds = 300
    old.exercises_done = True
    old.questions_attempted = 20
    old.questions_correct = 15
    old.rating = 5
    db.update_session(old)
    fresh = db.add_session(Session(subject_id=subject_id, exam_id=stored_exam.id, started_at=clock.now))

    assert db.get_session(old.id) == old
    assert [s.id for s in db.list_sessions()] == [fresh.id, old.id]
    assert [s.id for s in db.list_sessions(closed_only=True)] == [old.id]
    assert [s.id for s in db.list_sessions(since=clock.now - timedelta(days=1))] == [fresh.id]
    assert [s.id for s in db.open_sessions()] == [fresh.id]


def test_constraint_violation_becomes_store_error(db):
    with pytest.raises(StoreError):
        db.add_subject(Subject(exam_id=12345, name="Órfã"))


def test_timer_against_sqlite(db, stored_exam, stored_subjects, clock):
    tracker = CycleTracker(db, clock=clock)
    cycle = tracker.start_cycle(stored_exam.id)
    timer = SessionTimer(db, tracker, clock=clock)

    session = timer.start(stored_subjects[2].id, stored_exam.id)
    clock.advance(1200)
    timer.finish()
    clock.advance(30)
    timer.save(SessionDetails(summary="Concordância verbal", rating=3))

    stored = db.get_session(session.id)
    assert timer.state == TimerState.DONE
    assert stored.active_seconds == 1200
    assert stored.pause_seconds == 30
    assert stored.summary == "Concordância verbal"
    assert tracker.status_of(cycle.id, stored_subjects[2].id) == ProgressStatus.DONE
    assert tracker.derive_progress(cycle.id).percent == 33


def test_update_elapsed_only_touches_open_sessions(db, stored_exam, stored_subjects, clock):
    session = db.add_session(Session(subject_id=stored_subjects[0].id, exam_id=stored_exam.id, started_at=clock.now))

    db.update_elapsed(session.id, 420, 60)
    assert (db.get_session(session.id).active_seconds, db.get_session(session.id).pause_seconds) == (420, 60)

    session.ended_at = clock.now + timedelta(minutes=10)
    session.active_seconds = 500
    session.pause_seconds = 100
    db.update_session(session)
    db.update_elapsed(session.id, 1, 1)
    assert db.get_session(session.id).active_seconds == 500
