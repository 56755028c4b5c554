"""Rows of the study store and the small value types built on them."""
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from BackEnd.core import config
from BackEnd.core.errors import InvalidTransitionError, ValidationError

EXAM_STATUSES = ("ativo", "pausado", "concluido")
PRIORITIES = ("alta", "media", "baixa")
DEFAULT_COLOR = "#1A6FFF"
_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


class ProgressStatus(str, Enum):
	"""Status of one subject inside a cycle. Values are the stored strings."""
	PENDING = "pendente"
	IN_PROGRESS = "em_curso"
	DONE = "concluido"

	def can_advance(self, target: "ProgressStatus") -> bool:
		return target in _TRANSITIONS[self]

	def advance(self, target: "ProgressStatus") -> "ProgressStatus":
		if not self.can_advance(target):
			raise InvalidTransitionError(f"cannot move from {self.value} to {target.value}")
		return target


# in_progress -> in_progress lets a subject be restarted after an abandoned run
_TRANSITIONS = {
	ProgressStatus.PENDING: {ProgressStatus.IN_PROGRESS},
	ProgressStatus.IN_PROGRESS: {ProgressStatus.IN_PROGRESS, ProgressStatus.DONE},
	ProgressStatus.DONE: set(),
}


@dataclass
class Exam:
	name: str
	board: Optional[str] = None
	role: Optional[str] = None
	exam_date: Optional[date] = None
	status: str = "ativo"
	created_at: Optional[datetime] = None
	id: Optional[int] = None


@dataclass
class Subject:
	exam_id: int
	name: str
	priority: str = "media"
	color: str = DEFAULT_COLOR
	cycle_goal_hours: Optional[float] = None
	order: int = 0
	id: Optional[int] = None


@dataclass
class Cycle:
	exam_id: int
	name: str
	number: int
	subject_ids: List[int] = field(default_factory=list)
	started_at: Optional[datetime] = None
	completed_at: Optional[datetime] = None
	id: Optional[int] = None

	@property
	def is_active(self) -> bool:
		return self.completed_at is None


@dataclass
class CycleProgress:
	cycle_id: int
	subject_id: int
	status: ProgressStatus = ProgressStatus.PENDING
	id: Optional[int] = None


@dataclass
class CycleSummary:
	total: int
	done: int
	percent: int


@dataclass
class Session:
	subject_id: int
	exam_id: int
	started_at: datetime
	cycle_id: Optional[int] = None
	ended_at: Optional[datetime] = None
	active_seconds: int = 0
	pause_seconds: int = 0
	exercises_done: bool = False
	questions_attempted: Optional[int] = None
	questions_correct: Optional[int] = None
	summary: Optional[str] = None
	rating: Optional[int] = None
	id: Optional[int] = None

	@property
	def is_open(self) -> bool:
		return self.ended_at is None


@dataclass
class SessionDetails:
	"""What the user fills in when closing a session."""
	exercises_done: bool = False
	questions_attempted: Optional[int] = None
	questions_correct: Optional[int] = None
	summary: Optional[str] = None
	rating: Optional[int] = None

	def validate(self):
		for label, value in (("attempted", self.questions_attempted), ("correct", self.questions_correct)):
			if value is not None and value < 0:
				raise ValidationError(f"{label} count must not be negative")
		if (self.questions_attempted is not None and self.questions_correct is not None
				and self.questions_correct > self.questions_attempted):
			raise ValidationError("correct count cannot exceed attempted count")
		if len((self.summary or "").strip()) > config.SUMMARY_MAX_LENGTH:
			raise ValidationError(f"summary is limited to {config.SUMMARY_MAX_LENGTH} characters")
		if self.rating is not None and not 1 <= self.rating <= 5:
			raise ValidationError("rating must be between 1 and 5")
		return self

	def apply_to(self, session: Session):
		session.exercises_done = bool(self.exercises_done)
		session.questions_attempted = self.questions_attempted
		session.questions_correct = self.questions_correct
		summary = (self.summary or "").strip()
		session.summary = summary or None
		session.rating = self.rating
		return session


def is_valid_color(value: str) -> bool:
	return bool(value and _COLOR_RE.match(value))
