"""
Study cycles and the per-subject progress inside them.

A cycle is one ordered pass through every subject of an exam. Each
(cycle, subject) pair carries a ProgressStatus that the session timer moves
forward: pending when the cycle starts, in progress while a session for the
subject runs, done once that session is saved.
"""
import logging

from BackEnd.core.clock import round_percent, utc_now
from BackEnd.core.errors import (
	CycleAlreadyActiveError, CycleAlreadyCompletedError, CycleConflictError, InvalidTransitionError,
	NotFoundError, ValidationError,
)
from BackEnd.models.entities import Cycle, CycleProgress, CycleSummary, ProgressStatus
from BackEnd.repos.base import StudyRepository

logger = logging.getLogger(__name__)


class CycleTracker:

	def __init__(self, repo: StudyRepository, clock=utc_now):
		self.repo = repo
		self.clock = clock

	def active_cycle(self, exam_id):
		return self.repo.get_active_cycle(exam_id)

	def derive_progress(self, cycle_id) -> CycleSummary:
		entries = self.repo.list_progress(cycle_id)
		total = len(entries)
		done = sum(1 for e in entries if e.status == ProgressStatus.DONE)
		return CycleSummary(total=total, done=done, percent=round_percent(done, total))

	def statuses(self, cycle):
		"""(subject_id, status) pairs in the cycle's declared order."""
		by_subject = {e.subject_id: e.status for e in self.repo.list_progress(cycle.id)}
		return [(sid, by_subject.get(sid, ProgressStatus.PENDING)) for sid in cycle.subject_ids]

	def status_of(self, cycle_id, subject_id):
		for entry in self.repo.list_progress(cycle_id):
			if entry.subject_id == subject_id:
				return entry.status
		return None

	def create_for_cycle(self, cycle, subject_ids):
		entries = [CycleProgress(cycle_id=cycle.id, subject_id=sid) for sid in subject_ids]
		return self.repo.add_progress(entries)

	def start_cycle(self, exam_id, name=None):
		"""Open the next cycle of an exam over all of its current subjects."""
		exam = self.repo.get_exam(exam_id)
		if exam is None:
			raise NotFoundError(f"exam {exam_id} not found")
		current = self.repo.get_active_cycle(exam_id)
		if current is not None:
			raise CycleAlreadyActiveError(f"cycle #{current.number} of {exam.name} is still open")
		subjects = self.repo.list_subjects(exam_id)
		if not subjects:
			raise ValidationError("add subjects to this exam before starting a cycle")
		previous = self.repo.list_cycles(exam_id)
		number = max((c.number for c in previous), default=0) + 1
		cycle = self.repo.add_cycle(Cycle(
			exam_id=exam_id,
			name=(name or "").strip() or f"{exam.name} - Ciclo {number}",
			number=number,
			subject_ids=[s.id for s in subjects],
			started_at=self.clock(),
		))
		self.create_for_cycle(cycle, cycle.subject_ids)
		logger.info("started cycle #%s for exam %s with %d subjects", number, exam_id, len(subjects))
		return cycle

	def complete_cycle(self, cycle_id):
		cycle = self._cycle(cycle_id)
		if cycle.completed_at is not None:
			raise CycleAlreadyCompletedError(f"cycle {cycle_id} is already completed")
		cycle.completed_at = self.clock()
		self.repo.update_cycle(cycle)
		logger.info("completed cycle %s", cycle_id)
		return cycle

	def can_start(self, cycle_id, subject_id) -> bool:
		"""Whether a session for subject should move its entry to in progress.

		False when the entry is already done. Raises when the entry is missing or
		another subject of the cycle is in progress.
		"""
		entries = self.repo.list_progress(cycle_id)
		entry = self._entry(entries, cycle_id, subject_id)
		self._check_free(entries, cycle_id, subject_id)
		return entry.status.can_advance(ProgressStatus.IN_PROGRESS)

	def mark_in_progress(self, cycle_id, subject_id):
		entries = self.repo.list_progress(cycle_id)
		entry = self._entry(entries, cycle_id, subject_id)
		self._check_free(entries, cycle_id, subject_id)
		entry.status.advance(ProgressStatus.IN_PROGRESS)
		self.repo.update_progress_status(cycle_id, subject_id, ProgressStatus.IN_PROGRESS)

	def mark_done(self, cycle_id, subject_id):
		entry = self._entry(self.repo.list_progress(cycle_id), cycle_id, subject_id)
		entry.status.advance(ProgressStatus.DONE)
		self.repo.update_progress_status(cycle_id, subject_id, ProgressStatus.DONE)

	def release(self, cycle_id, subject_id):
		"""Put an in-progress entry back to pending after its session was discarded."""
		entry = self._entry(self.repo.list_progress(cycle_id), cycle_id, subject_id)
		if entry.status != ProgressStatus.IN_PROGRESS:
			raise InvalidTransitionError(f"only an in-progress subject can be released, not {entry.status.value}")
		self.repo.update_progress_status(cycle_id, subject_id, ProgressStatus.PENDING)
		logger.info("cycle %s: subject %s back to pending", cycle_id, subject_id)

	def reconcile(self, cycle_id):
		"""Mark done the in-progress subjects whose sessions in this cycle are all closed."""
		cycle = self._cycle(cycle_id)
		sessions = [s for s in self.repo.list_sessions(exam_id=cycle.exam_id) if s.cycle_id == cycle_id]
		repaired = []
		for entry in self.repo.list_progress(cycle_id):
			if entry.status != ProgressStatus.IN_PROGRESS:
				continue
			mine = [s for s in sessions if s.subject_id == entry.subject_id]
			if mine and all(not s.is_open for s in mine):
				self.repo.update_progress_status(cycle_id, entry.subject_id, ProgressStatus.DONE)
				repaired.append(entry.subject_id)
		if repaired:
			logger.warning("cycle %s: marked %s done after their sessions closed", cycle_id, repaired)
		return repaired

	def _cycle(self, cycle_id):
		cycle = self.repo.get_cycle(cycle_id)
		if cycle is None:
			raise NotFoundError(f"cycle {cycle_id} not found")
		return cycle

	def _entry(self, entries, cycle_id, subject_id):
		for entry in entries:
			if entry.subject_id == subject_id:
				return entry
		raise NotFoundError(f"subject {subject_id} has no progress entry in cycle {cycle_id}")

	def _check_free(self, entries, cycle_id, subject_id):
		busy = [e for e in entries if e.status == ProgressStatus.IN_PROGRESS and e.subject_id != subject_id]
		if busy:
			raise CycleConflictError(
				f"subject {busy[0].subject_id} is already in progress in cycle {cycle_id}")
