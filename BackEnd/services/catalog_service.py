"""Registration of exams and their subjects."""
import logging

from BackEnd.core.clock import utc_now
from BackEnd.core.errors import NotFoundError, ValidationError
from BackEnd.models.entities import (
	DEFAULT_COLOR, EXAM_STATUSES, PRIORITIES, Exam, Subject, is_valid_color,
)
from BackEnd.repos.base import StudyRepository

logger = logging.getLogger(__name__)


def _required(value, label):
	value = (value or "").strip()
	if not value:
		raise ValidationError(f"{label} is required")
	return value


def _optional(value):
	value = (value or "").strip()
	return value or None


class CatalogService:

	def __init__(self, repo: StudyRepository, clock=utc_now):
		self.repo = repo
		self.clock = clock

	def create_exam(self, name, board=None, role=None, exam_date=None, status="ativo"):
		if status not in EXAM_STATUSES:
			raise ValidationError(f"unknown exam status {status!r}")
		exam = self.repo.add_exam(Exam(
			name=_required(name, "exam name"),
			board=_optional(board),
			role=_optional(role),
			exam_date=exam_date,
			status=status,
			created_at=self.clock(),
		))
		logger.info("registered exam %s (%s)", exam.id, exam.name)
		return exam

	def create_subject(self, exam_id, name, priority="media", color=DEFAULT_COLOR, cycle_goal_hours=None):
		if self.repo.get_exam(exam_id) is None:
			raise NotFoundError(f"exam {exam_id} not found")
		if priority not in PRIORITIES:
			raise ValidationError(f"unknown priority {priority!r}")
		if not is_valid_color(color):
			raise ValidationError(f"color must look like #RRGGBB, got {color!r}")
		if cycle_goal_hours is not None and cycle_goal_hours < 0:
			raise ValidationError("cycle goal must not be negative")
		subject = self.repo.add_subject(Subject(
			exam_id=exam_id,
			name=_required(name, "subject name"),
			priority=priority,
			color=color,
			cycle_goal_hours=cycle_goal_hours,
			order=len(self.repo.list_subjects(exam_id)),
		))
		logger.info("registered subject %s (%s) under exam %s", subject.id, subject.name, exam_id)
		return subject

	def exams(self):
		return self.repo.list_exams()

	def subjects(self, exam_id):
		return self.repo.list_subjects(exam_id)
