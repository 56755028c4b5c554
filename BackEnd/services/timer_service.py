import copy
import logging
from enum import Enum

from PySide6.QtCore import QObject, Signal, QTimer

from BackEnd.core import config
from BackEnd.core.clock import utc_now, whole_seconds
from BackEnd.core.errors import InvalidTransitionError, StoreError, TimerStateError
from BackEnd.models.entities import ProgressStatus, Session, SessionDetails
from BackEnd.repos.base import StudyRepository
from BackEnd.services.cycle_service import CycleTracker

logger = logging.getLogger(__name__)


class TimerState(str, Enum):
	IDLE = "idle"
	RUNNING = "running"
	PAUSED = "paused"
	DONE = "done"


class SessionTimer(QObject):
	"""Stopwatch for one study session, with pause accounting.

	idle -> running <-> paused -> done. A timer serves a single session; once
	done, build a new one for the next session.
	"""
	elapsed_changed = Signal(int)  # emits elapsed seconds
	state_changed = Signal(str)  # emits 'idle', 'running', 'paused', 'done'

	def __init__(self, repo: StudyRepository, tracker: CycleTracker, clock=utc_now, interval_ms=None, parent=None):
		super().__init__(parent)
		self.repo = repo
		self.tracker = tracker
		self.clock = clock
		self.state = TimerState.IDLE
		self.elapsed_sec = 0
		self.pause_accum_sec = 0
		self.started_at = None
		self.pause_started_at = None
		self.session = None
		self._tracks_progress = False
		self._closed_session = None
		self._progress_closed = False
		self._timer = QTimer(self)
		self._timer.setInterval(interval_ms or config.TICK_INTERVAL_MS)
		self._timer.timeout.connect(self.tick)
		self._heartbeat = QTimer(self)
		self._heartbeat.setInterval(config.CHECKPOINT_INTERVAL_MS)
		self._heartbeat.timeout.connect(self.checkpoint)

	@property
	def running(self):
		return self.state == TimerState.RUNNING

	@property
	def paused(self):
		return self.state == TimerState.PAUSED

	def start(self, subject_id, exam_id):
		"""Open a session for subject and start counting. Returns the session."""
		if not subject_id or not exam_id:
			return None
		if self.state != TimerState.IDLE:
			raise TimerStateError(f"cannot start a timer that is {self.state.value}")
		cycle = self.tracker.active_cycle(exam_id)
		tracks = False
		if cycle is not None and subject_id in cycle.subject_ids:
			# raises before anything is written when another subject is in progress
			tracks = self.tracker.can_start(cycle.id, subject_id)
			if not tracks:
				logger.warning("subject %s is already done in cycle %s; progress left as is", subject_id, cycle.id)
		now = self.clock()
		session = self.repo.add_session(Session(
			subject_id=subject_id,
			exam_id=exam_id,
			cycle_id=cycle.id if cycle else None,
			started_at=now,
		))
		if tracks:
			self.tracker.mark_in_progress(cycle.id, subject_id)
		self.session = session
		self._tracks_progress = tracks
		self.started_at = now
		self.elapsed_sec = 0
		self.pause_accum_sec = 0
		self.pause_started_at = None
		logger.info("session %s started (subject %s, exam %s)", session.id, subject_id, exam_id)
		self._set_state(TimerState.RUNNING)
		self.elapsed_changed.emit(0)
		return session

	def tick(self):
		"""Recompute elapsed seconds from the clock. Only moves while running."""
		if self.state != TimerState.RUNNING:
			return self.elapsed_sec
		raw = whole_seconds(self.started_at, self.clock())
		self.elapsed_sec = max(0, raw - self.pause_accum_sec)
		self.elapsed_changed.emit(self.elapsed_sec)
		return self.elapsed_sec

	def pause(self):
		if self.state != TimerState.RUNNING:
			raise TimerStateError(f"cannot pause a timer that is {self.state.value}")
		self.tick()
		self.pause_started_at = self.clock()
		self._set_state(TimerState.PAUSED)
		self.checkpoint()

	def resume(self):
		if self.state != TimerState.PAUSED:
			raise TimerStateError(f"cannot resume a timer that is {self.state.value}")
		if self.pause_started_at is not None:
			self.pause_accum_sec += max(0, whole_seconds(self.pause_started_at, self.clock()))
		self.pause_started_at = None
		self._set_state(TimerState.RUNNING)
		self.tick()

	def pause_resume(self):
		if self.running:
			self.pause()
		else:
			self.resume()

	def finish(self):
		"""Freeze the clock so the end-of-session form can be filled in."""
		if self.state == TimerState.RUNNING:
			self.pause()
		elif self.state != TimerState.PAUSED:
			raise TimerStateError(f"cannot finish a timer that is {self.state.value}")

	def save(self, details=None):
		"""Close the session with the frozen figures and the user's details.

		A failed write leaves the timer paused; calling save() again only
		repeats the writes that have not gone through yet.
		"""
		if self.state != TimerState.PAUSED:
			raise TimerStateError("finish the session before saving it")
		details = (details or SessionDetails()).validate()
		if self._closed_session is None:
			now = self.clock()
			pause_total = self.pause_accum_sec
			if self.pause_started_at is not None:
				pause_total += max(0, whole_seconds(self.pause_started_at, now))
			closed = copy.copy(self.session)
			closed.ended_at = now
			closed.active_seconds = max(0, self.elapsed_sec)
			closed.pause_seconds = pause_total
			details.apply_to(closed)
			try:
				self.repo.update_session(closed)
			except StoreError:
				logger.error("could not close session %s", self.session.id)
				raise
			self._closed_session = closed
		if self._tracks_progress and not self._progress_closed:
			try:
				self.tracker.mark_done(self.session.cycle_id, self.session.subject_id)
			except StoreError:
				logger.error("session %s closed but cycle progress was not updated", self.session.id)
				raise
			except InvalidTransitionError as e:
				logger.warning("cycle progress for session %s not marked done: %s", self.session.id, e)
			self._progress_closed = True
		self.session = self._closed_session
		self.pause_started_at = None
		logger.info(
			"session %s saved: %ss active, %ss paused",
			self.session.id, self.session.active_seconds, self.session.pause_seconds)
		self._set_state(TimerState.DONE)
		return self.session

	def checkpoint(self):
		"""Write the running figures of the open session back to the store.

		Called on pause and every CHECKPOINT_INTERVAL_MS while running, so a
		session abandoned mid-run can be recovered without counting the time
		the app was closed.
		"""
		if self.state not in (TimerState.RUNNING, TimerState.PAUSED) or self._closed_session is not None:
			return
		active = self.elapsed_sec
		if self.state == TimerState.RUNNING:
			active = max(0, whole_seconds(self.started_at, self.clock()) - self.pause_accum_sec)
		try:
			self.repo.update_elapsed(self.session.id, active, self.pause_accum_sec)
		except StoreError:
			logger.warning("could not checkpoint session %s; will try again", self.session.id)

	def recover(self, session):
		"""Pick up an open session left behind by an abandoned run, paused.

		Active time resumes from the last checkpoint; everything after it is
		counted as pause.
		"""
		if self.state != TimerState.IDLE:
			raise TimerStateError(f"cannot recover into a timer that is {self.state.value}")
		if not session.is_open:
			raise TimerStateError(f"session {session.id} is already closed")
		now = self.clock()
		self.session = session
		self.started_at = session.started_at
		self.elapsed_sec = max(0, session.active_seconds)
		self.pause_accum_sec = max(0, whole_seconds(session.started_at, now) - self.elapsed_sec)
		self.pause_started_at = now
		self._tracks_progress = (
			session.cycle_id is not None
			and self.tracker.status_of(session.cycle_id, session.subject_id) == ProgressStatus.IN_PROGRESS
		)
		logger.info("recovered open session %s", session.id)
		self._set_state(TimerState.PAUSED)
		self.elapsed_changed.emit(self.elapsed_sec)
		return session

	def discard(self, session):
		"""Close an abandoned session without counting it as study time.

		Its cycle entry goes back to pending so other subjects can start.
		The timer's own state is left alone.
		"""
		if self.session is not None and self.session.id == session.id:
			raise TimerStateError(f"session {session.id} is held by this timer")
		if not session.is_open:
			raise TimerStateError(f"session {session.id} is already closed")
		now = self.clock()
		closed = copy.copy(session)
		closed.ended_at = now
		closed.active_seconds = 0
		closed.pause_seconds = max(0, whole_seconds(session.started_at, now))
		self.repo.update_session(closed)
		if (session.cycle_id is not None
				and self.tracker.status_of(session.cycle_id, session.subject_id) == ProgressStatus.IN_PROGRESS
				and not any(s.cycle_id == session.cycle_id and s.subject_id == session.subject_id
							for s in self.repo.open_sessions())):
			self.tracker.release(session.cycle_id, session.subject_id)
		logger.info("discarded open session %s", session.id)
		return closed

	def _set_state(self, state):
		self.state = state
		for timer in (self._timer, self._heartbeat):
			if state == TimerState.RUNNING:
				timer.start()
			else:
				timer.stop()
		self.state_changed.emit(state.value)
