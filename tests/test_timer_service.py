from datetime import timedelta

import pytest

from BackEnd.core.errors import CycleConflictError, StoreError, TimerStateError, ValidationError
from BackEnd.models.entities import ProgressStatus, SessionDetails
from BackEnd.services.timer_service import TimerState


def _statuses(tracker, cycle):
    return dict(tracker.statuses(cycle))


def test_start_opens_session_and_runs(timer, repo, exam, subjects, clock):
    session = timer.start(subjects[0].id, exam.id)

    assert timer.state == TimerState.RUNNING
    assert timer.elapsed_sec == 0
    stored = repo.get_session(session.id)
    assert stored.is_open
    assert stored.started_at == clock.now
    assert stored.active_seconds == 0
    assert stored.pause_seconds == 0
    assert stored.cycle_id is None


@pytest.mark.parametrize("subject_missing,exam_missing", [(True, False), (False, True), (True, True)])
def test_start_without_selection_is_a_no_op(timer, repo, exam, subjects, subject_missing, exam_missing):
    subject_id = None if subject_missing else subjects[0].id
    exam_id = None if exam_missing else exam.id

    assert timer.start(subject_id, exam_id) is None
    assert timer.state == TimerState.IDLE
    assert repo.list_sessions() == []


def test_elapsed_excludes_completed_pauses(timer, exam, subjects, clock):
    timer.start(subjects[0].id, exam.id)
    clock.advance(10)
    timer.pause()
    clock.advance(30)
    timer.resume()
    clock.advance(10)

    assert timer.tick() == 20
    assert timer.pause_accum_sec == 30


def test_tick_emits_elapsed_only_while_running(timer, exam, subjects, clock):
    seen = []
    timer.elapsed_changed.connect(seen.append)
    timer.start(subjects[0].id, exam.id)
    clock.advance(3)
    timer.tick()
    timer.pause()
    clock.advance(50)
    timer.tick()

    assert seen == [0, 3, 3]
    assert timer.elapsed_sec == 3


def test_several_pauses_accumulate(timer, exam, subjects, clock):
    timer.start(subjects[0].id, exam.id)
    for _ in range(3):
        clock.advance(60)
        timer.pause()
        clock.advance(15)
        timer.resume()

    assert timer.tick() == 180
    assert timer.pause_accum_sec == 45


def test_finish_from_running_pauses(timer, exam, subjects, clock):
    timer.start(subjects[0].id, exam.id)
    clock.advance(42)
    timer.finish()

    assert timer.state == TimerState.PAUSED
    assert timer.elapsed_sec == 42
    clock.advance(100)
    timer.tick()
    assert timer.elapsed_sec == 42


def test_finish_from_paused_stays_paused(timer, exam, subjects, clock):
    timer.start(subjects[0].id, exam.id)
    clock.advance(5)
    timer.pause()
    timer.finish()

    assert timer.state == TimerState.PAUSED


def test_finish_when_idle_is_rejected(timer):
    with pytest.raises(TimerStateError):
        timer.finish()


def test_invalid_transitions_raise(timer, exam, subjects):
    with pytest.raises(TimerStateError):
        timer.pause()
    timer.start(subjects[0].id, exam.id)
    with pytest.raises(TimerStateError):
        timer.resume()
    with pytest.raises(TimerStateError):
        timer.start(subjects[1].id, exam.id)
    with pytest.raises(TimerStateError):
        timer.save()


def test_save_closes_session_once(timer, repo, exam, subjects, clock, monkeypatch):
    writes = []
    original = repo.update_session
    monkeypatch.setattr(repo, "update_session", lambda s: (writes.append(s.id), original(s)))

    session = timer.start(subjects[0].id, exam.id)
    clock.advance(100)
    timer.finish()
    clock.advance(20)
    closed = timer.save(SessionDetails(
        exercises_done=True, questions_attempted=30, questions_correct=24,
        summary="  Crase e regência  ", rating=4))

    assert timer.state == TimerState.DONE
    assert writes == [session.id]
    stored = repo.get_session(session.id)
    assert stored == closed
    assert stored.ended_at == clock.now
    assert stored.active_seconds == 100
    assert stored.pause_seconds == 20
    assert stored.questions_correct == 24
    assert stored.summary == "Crase e regência"
    assert stored.rating == 4

    with pytest.raises(TimerStateError):
        timer.save()
    assert writes == [session.id]


def test_saved_figures_add_up_to_wall_time(timer, repo, exam, subjects, clock):
    session = timer.start(subjects[0].id, exam.id)
    clock.advance(600)
    timer.pause()
    clock.advance(120)
    timer.resume()
    clock.advance(300)
    timer.finish()
    clock.advance(45)
    timer.save()

    stored = repo.get_session(session.id)
    wall = int((stored.ended_at - stored.started_at).total_seconds())
    assert stored.active_seconds == 900
    assert stored.pause_seconds == 165
    assert wall - stored.pause_seconds == stored.active_seconds


def test_state_changes_are_signalled(timer, exam, subjects, clock):
    states = []
    timer.state_changed.connect(states.append)
    timer.start(subjects[0].id, exam.id)
    clock.advance(1)
    timer.pause()
    timer.resume()
    timer.finish()
    timer.save()

    assert states == ["running", "paused", "running", "paused", "done"]


def test_active_seconds_never_negative(timer, repo, exam, subjects, clock):
    session = timer.start(subjects[0].id, exam.id)
    clock.advance(-30)

    assert timer.tick() == 0
    timer.finish()
    timer.save()
    assert repo.get_session(session.id).active_seconds == 0


def test_invalid_details_keep_timer_paused(timer, repo, exam, subjects, clock):
    session = timer.start(subjects[0].id, exam.id)
    clock.advance(10)
    timer.finish()

    with pytest.raises(ValidationError):
        timer.save(SessionDetails(rating=6))
    assert timer.state == TimerState.PAUSED
    assert repo.get_session(session.id).is_open


def test_session_in_active_cycle_moves_progress(timer, repo, tracker, exam, subjects, clock):
    cycle = tracker.start_cycle(exam.id)
    b = subjects[1].id
    assert tracker.derive_progress(cycle.id).percent == 0

    session = timer.start(b, exam.id)
    assert session.cycle_id == cycle.id
    assert _statuses(tracker, cycle)[b] == ProgressStatus.IN_PROGRESS

    clock.advance(1500)
    timer.finish()
    timer.save()

    assert _statuses(tracker, cycle)[b] == ProgressStatus.DONE
    summary = tracker.derive_progress(cycle.id)
    assert (summary.total, summary.done, summary.percent) == (3, 1, 33)


def test_subject_outside_cycle_links_without_progress(timer, repo, tracker, catalog, exam, subjects, clock):
    cycle = tracker.start_cycle(exam.id)
    late = catalog.create_subject(exam.id, "Raciocínio Lógico")

    session = timer.start(late.id, exam.id)
    clock.advance(60)
    timer.finish()
    timer.save()

    assert session.cycle_id == cycle.id
    assert all(status == ProgressStatus.PENDING for _, status in tracker.statuses(cycle))


def test_second_subject_cannot_start_while_one_is_in_progress(make_timer, repo, tracker, exam, subjects):
    cycle = tracker.start_cycle(exam.id)
    first, second = make_timer(), make_timer()
    first.start(subjects[0].id, exam.id)

    with pytest.raises(CycleConflictError):
        second.start(subjects[1].id, exam.id)
    assert second.state == TimerState.IDLE
    assert len(repo.list_sessions()) == 1
    assert _statuses(tracker, cycle)[subjects[1].id] == ProgressStatus.PENDING


def test_subject_already_done_is_left_alone(make_timer, tracker, exam, subjects, clock):
    cycle = tracker.start_cycle(exam.id)
    a = subjects[0].id
    first = make_timer()
    first.start(a, exam.id)
    clock.advance(60)
    first.finish()
    first.save()

    again = make_timer()
    again.start(a, exam.id)
    clock.advance(60)
    again.finish()
    again.save()

    assert again.state == TimerState.DONE
    assert _statuses(tracker, cycle)[a] == ProgressStatus.DONE


def test_failed_session_write_can_be_retried(timer, repo, exam, subjects, clock, monkeypatch):
    session = timer.start(subjects[0].id, exam.id)
    clock.advance(30)
    timer.finish()
    original = repo.update_session

    def broken(_):
        raise StoreError("connection reset")

    monkeypatch.setattr(repo, "update_session", broken)
    with pytest.raises(StoreError):
        timer.save()
    assert timer.state == TimerState.PAUSED
    assert repo.get_session(session.id).is_open

    monkeypatch.setattr(repo, "update_session", original)
    timer.save()
    assert timer.state == TimerState.DONE
    assert repo.get_session(session.id).active_seconds == 30


def test_failed_progress_write_does_not_rewrite_session(timer, repo, tracker, exam, subjects, clock, monkeypatch):
    cycle = tracker.start_cycle(exam.id)
    b = subjects[1].id
    session = timer.start(b, exam.id)
    clock.advance(30)
    timer.finish()

    writes = []
    original_update = repo.update_session
    monkeypatch.setattr(repo, "update_session", lambda s: (writes.append(s.id), original_update(s)))
    original_progress = repo.update_progress_status

    def broken(*_):
        raise StoreError("timeout")

    monkeypatch.setattr(repo, "update_progress_status", broken)
    with pytest.raises(StoreError):
        timer.save()
    assert timer.state == TimerState.PAUSED
    assert not repo.get_session(session.id).is_open
    assert _statuses(tracker, cycle)[b] == ProgressStatus.IN_PROGRESS

    monkeypatch.setattr(repo, "update_progress_status", original_progress)
    timer.save()
    assert writes == [session.id]
    assert _statuses(tracker, cycle)[b] == ProgressStatus.DONE


def test_recover_open_session(make_timer, repo, tracker, exam, subjects, clock):
    cycle = tracker.start_cycle(exam.id)
    a = subjects[0].id
    abandoned = make_timer()
    session = abandoned.start(a, exam.id)
    clock.advance(300)
    abandoned.checkpoint()

    timer = make_timer()
    (open_session,) = repo.open_sessions()
    timer.recover(open_session)
    assert timer.state == TimerState.PAUSED
    assert timer.elapsed_sec == 300

    clock.advance(1000)
    timer.resume()
    clock.advance(60)
    timer.finish()
    timer.save()

    stored = repo.get_session(session.id)
    assert stored.active_seconds == 360
    assert stored.pause_seconds == 1000
    assert stored.ended_at - stored.started_at == timedelta(seconds=1360)
    assert _statuses(tracker, cycle)[a] == ProgressStatus.DONE


def test_recover_rejects_closed_session(make_timer, repo, exam, subjects, clock):
    first = make_timer()
    first.start(subjects[0].id, exam.id)
    first.finish()
    first.save()

    with pytest.raises(TimerStateError):
        make_timer().recover(repo.list_sessions()[0])


def test_pause_checkpoints_the_open_session(timer, repo, exam, subjects, clock):
    session = timer.start(subjects[0].id, exam.id)
    clock.advance(45)
    timer.pause()

    stored = repo.get_session(session.id)
    assert stored.is_open
    assert stored.active_seconds == 45


def test_checkpoint_while_running_leaves_display_alone(timer, repo, exam, subjects, clock):
    seen = []
    timer.elapsed_changed.connect(seen.append)
    session = timer.start(subjects[0].id, exam.id)
    clock.advance(90)

    timer.checkpoint()

    assert repo.get_session(session.id).active_seconds == 90
    assert timer.elapsed_sec == 0
    assert seen == [0]


def test_failed_checkpoint_keeps_running(timer, repo, exam, subjects, clock, monkeypatch, caplog):
    timer.start(subjects[0].id, exam.id)
    clock.advance(30)

    def broken(*_):
        raise StoreError("disk full")

    monkeypatch.setattr(repo, "update_elapsed", broken)
    timer.checkpoint()

    assert timer.state == TimerState.RUNNING
    assert "could not checkpoint" in caplog.text


def test_recover_counts_time_away_as_pause(make_timer, repo, exam, subjects, clock):
    abandoned = make_timer()
    session = abandoned.start(subjects[0].id, exam.id)
    clock.advance(600)
    abandoned.checkpoint()
    clock.advance(24 * 3600)

    timer = make_timer()
    timer.recover(repo.get_session(session.id))
    assert timer.elapsed_sec == 600
    timer.finish()
    timer.save()

    stored = repo.get_session(session.id)
    assert stored.active_seconds == 600
    assert stored.pause_seconds == 24 * 3600


def test_recover_without_checkpoint_adds_no_study_time(make_timer, repo, exam, subjects, clock):
    abandoned = make_timer()
    session = abandoned.start(subjects[0].id, exam.id)
    clock.advance(600)
    clock.advance(24 * 3600)

    timer = make_timer()
    timer.recover(repo.get_session(session.id))
    timer.finish()
    timer.save()

    assert repo.get_session(session.id).active_seconds == 0


def test_discarded_session_frees_the_cycle(make_timer, repo, tracker, exam, subjects, clock):
    cycle = tracker.start_cycle(exam.id)
    a, b = subjects[0].id, subjects[1].id
    make_timer().start(a, exam.id)
    clock.advance(900)
    assert tracker.reconcile(cycle.id) == []

    (orphan,) = repo.open_sessions()
    closed = make_timer().discard(orphan)

    assert closed.active_seconds == 0
    assert closed.pause_seconds == 900
    assert repo.open_sessions() == []
    assert _statuses(tracker, cycle)[a] == ProgressStatus.PENDING
    timer = make_timer()
    timer.start(b, exam.id)
    assert timer.state == TimerState.RUNNING
    assert _statuses(tracker, cycle)[b] == ProgressStatus.IN_PROGRESS


def test_discard_leaves_a_second_open_session_tracked(make_timer, repo, tracker, exam, subjects, clock):
    cycle = tracker.start_cycle(exam.id)
    a = subjects[0].id
    first = make_timer().start(a, exam.id)
    clock.advance(60)
    make_timer().start(a, exam.id)

    make_timer().discard(repo.get_session(first.id))

    assert _statuses(tracker, cycle)[a] == ProgressStatus.IN_PROGRESS


def test_discard_rejects_held_or_closed_sessions(timer, make_timer, repo, exam, subjects, clock):
    session = timer.start(subjects[0].id, exam.id)
    with pytest.raises(TimerStateError):
        timer.discard(repo.get_session(session.id))

    timer.finish()
    timer.save()
    with pytest.raises(TimerStateError):
        make_timer().discard(repo.get_session(session.id))
