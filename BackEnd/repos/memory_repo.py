"""Dict-backed StudyRepository. Used by tests and as a scratch store."""
import copy
import itertools

from BackEnd.core.clock import utc_now
from BackEnd.models.entities import ProgressStatus


def _newest_first(rows, key):
	return sorted(rows, key=lambda r: (key(r), r.id), reverse=True)


class MemoryStudyRepository:

	def __init__(self):
		self._ids = itertools.count(1)
		self.exams = {}
		self.subjects = {}
		self.cycles = {}
		self.progress = {}
		self.sessions = {}

	def _insert(self, table, row):
		row = copy.deepcopy(row)
		row.id = next(self._ids)
		table[row.id] = row
		return copy.deepcopy(row)

	def _get(self, table, row_id):
		row = table.get(row_id)
		return copy.deepcopy(row) if row is not None else None

	# exams
	def add_exam(self, exam):
		if exam.created_at is None:
			exam = copy.copy(exam)
			exam.created_at = utc_now()
		return self._insert(self.exams, exam)

	def get_exam(self, exam_id):
		return self._get(self.exams, exam_id)

	def list_exams(self):
		return copy.deepcopy(_newest_first(self.exams.values(), lambda e: e.created_at))

	# subjects
	def add_subject(self, subject):
		return self._insert(self.subjects, subject)

	def get_subject(self, subject_id):
		return self._get(self.subjects, subject_id)

	def list_subjects(self, exam_id=None):
		rows = [s for s in self.subjects.values() if exam_id is None or s.exam_id == exam_id]
		return copy.deepcopy(sorted(rows, key=lambda s: (s.order, s.id)))

	# cycles
	def add_cycle(self, cycle):
		if cycle.started_at is None:
			cycle = copy.copy(cycle)
			cycle.started_at = utc_now()
		return self._insert(self.cycles, cycle)

	def get_cycle(self, cycle_id):
		return self._get(self.cycles, cycle_id)

	def list_cycles(self, exam_id=None):
		rows = [c for c in self.cycles.values() if exam_id is None or c.exam_id == exam_id]
		return copy.deepcopy(_newest_first(rows, lambda c: c.started_at))

	def get_active_cycle(self, exam_id):
		rows = [c for c in self.cycles.values() if c.exam_id == exam_id and c.completed_at is None]
		rows = _newest_first(rows, lambda c: c.started_at)
		return copy.deepcopy(rows[0]) if rows else None

	def update_cycle(self, cycle):
		self.cycles[cycle.id] = copy.deepcopy(cycle)

	# cycle progress
	def add_progress(self, entries):
		return [self._insert(self.progress, e) for e in entries]

	def list_progress(self, cycle_id):
		rows = [p for p in self.progress.values() if p.cycle_id == cycle_id]
		return copy.deepcopy(sorted(rows, key=lambda p: p.id))

	def update_progress_status(self, cycle_id, subject_id, status):
		for entry in self.progress.values():
			if entry.cycle_id == cycle_id and entry.subject_id == subject_id:
				entry.status = ProgressStatus(status)

	# sessions
	def add_session(self, session):
		return self._insert(self.sessions, session)

	def get_session(self, session_id):
		return self._get(self.sessions, session_id)

	def update_session(self, session):
		self.sessions[session.id] = copy.deepcopy(session)

	def update_elapsed(self, session_id, active_seconds, pause_seconds):
		session = self.sessions.get(session_id)
		if session is not None and session.ended_at is None:
			session.active_seconds = active_seconds
			session.pause_seconds = pause_seconds

	def list_sessions(self, exam_id=None, since=None, closed_only=False):
		rows = [
			s for s in self.sessions.values()
			if (exam_id is None or s.exam_id == exam_id)
			and (since is None or s.started_at > since)
			and (not closed_only or s.ended_at is not None)
		]
		return copy.deepcopy(_newest_first(rows, lambda s: s.started_at))

	def open_sessions(self):
		rows = [s for s in self.sessions.values() if s.ended_at is None]
		return copy.deepcopy(_newest_first(rows, lambda s: s.started_at))
