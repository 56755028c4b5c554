"""The row store interface the services are written against."""
from datetime import datetime
from typing import Iterable, List, Optional, Protocol

from BackEnd.models.entities import Cycle, CycleProgress, Exam, ProgressStatus, Session, Subject


class StudyRepository(Protocol):

	# exams
	def add_exam(self, exam: Exam) -> Exam: ...
	def get_exam(self, exam_id: int) -> Optional[Exam]: ...
	def list_exams(self) -> List[Exam]: ...

	# subjects
	def add_subject(self, subject: Subject) -> Subject: ...
	def get_subject(self, subject_id: int) -> Optional[Subject]: ...
	def list_subjects(self, exam_id: Optional[int] = None) -> List[Subject]: ...

	# cycles
	def add_cycle(self, cycle: Cycle) -> Cycle: ...
	def get_cycle(self, cycle_id: int) -> Optional[Cycle]: ...
	def list_cycles(self, exam_id: Optional[int] = None) -> List[Cycle]: ...
	def get_active_cycle(self, exam_id: int) -> Optional[Cycle]: ...
	def update_cycle(self, cycle: Cycle) -> None: ...

	# cycle progress
	def add_progress(self, entries: Iterable[CycleProgress]) -> List[CycleProgress]: ...
	def list_progress(self, cycle_id: int) -> List[CycleProgress]: ...
	def update_progress_status(self, cycle_id: int, subject_id: int, status: ProgressStatus) -> None: ...

	# sessions
	def add_session(self, session: Session) -> Session: ...
	def get_session(self, session_id: int) -> Optional[Session]: ...
	def update_session(self, session: Session) -> None: ...
	def list_sessions(self, exam_id: Optional[int] = None, since: Optional[datetime] = None,
			closed_only: bool = False) -> List[Session]: ...
	def open_sessions(self) -> List[Session]: ...
	def update_elapsed(self, session_id: int, active_seconds: int, pause_seconds: int) -> None: ...
