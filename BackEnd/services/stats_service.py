"""
Dashboard, analytics and history figures.

Everything here reads closed sessions only and buckets them by the local
calendar day on which they started.
"""
from collections import defaultdict
from datetime import timedelta

from BackEnd.core import config
from BackEnd.core.clock import local_date, local_midnight, local_today, round_percent
from BackEnd.repos.base import StudyRepository

# Upper bounds (exclusive, in seconds) for heat levels 1..3; anything above is 4
HEAT_THRESHOLDS = (3600, 7200, 14400)


def heat_level(seconds: int) -> int:
	if seconds <= 0:
		return 0
	for level, bound in enumerate(HEAT_THRESHOLDS, start=1):
		if seconds < bound:
			return level
	return len(HEAT_THRESHOLDS) + 1


def accuracy(session):
	"""Percentage of correct answers, or None when no questions were recorded."""
	if not session.questions_attempted or session.questions_correct is None:
		return None
	return round_percent(session.questions_correct, session.questions_attempted)


def daily_goal_percent(seconds: int) -> int:
	return min(round_percent(seconds, config.DAILY_GOAL_SECONDS), 100)


class StatsService:

	def __init__(self, repo: StudyRepository):
		self.repo = repo

	def _closed(self, since_day=None):
		since = local_midnight(since_day) - timedelta(seconds=1) if since_day else None
		return self.repo.list_sessions(since=since, closed_only=True)

	def _seconds_by_day(self, sessions):
		totals = defaultdict(int)
		for s in sessions:
			totals[local_date(s.started_at)] += s.active_seconds
		return totals

	def today_seconds(self, today=None):
		today = today or local_today()
		return self._seconds_by_day(self._closed(today)).get(today, 0)

	def week_seconds(self, today=None):
		today = today or local_today()
		start = today - timedelta(days=7)
		return sum(s.active_seconds for s in self._closed(start) if local_date(s.started_at) <= today)

	def streak(self, today=None):
		"""Consecutive study days up to today (or up to yesterday if today is still empty)."""
		today = today or local_today()
		days = {local_date(s.started_at) for s in self._closed() if s.active_seconds > 0}
		cursor = today if today in days else today - timedelta(days=1)
		count = 0
		while cursor in days:
			count += 1
			cursor -= timedelta(days=1)
		return count

	def total_days(self):
		return len({local_date(s.started_at) for s in self._closed() if s.active_seconds > 0})

	def total_hours(self):
		return sum(s.active_seconds for s in self._closed()) / 3600.0

	def daily_series(self, days=7, today=None):
		"""(date, seconds) for the last `days` days, oldest first."""
		today = today or local_today()
		first = today - timedelta(days=days - 1)
		totals = self._seconds_by_day(self._closed(first))
		return [(first + timedelta(days=i), totals.get(first + timedelta(days=i), 0)) for i in range(days)]

	def _window(self, days, today):
		if days is None:
			return self._closed()
		today = today or local_today()
		return self._closed(today - timedelta(days=days))

	def by_subject(self, days=None, today=None):
		totals = defaultdict(int)
		for s in self._window(days, today):
			totals[s.subject_id] += s.active_seconds
		return sorted(totals.items(), key=lambda item: item[1], reverse=True)

	def period_summary(self, days, today=None):
		sessions = self._window(days, today)
		total = sum(s.active_seconds for s in sessions)
		count = len(sessions)
		return {
			"total_seconds": total,
			"sessions": count,
			"average_seconds": (2 * total + count) // (2 * count) if count else 0,
			"with_exercises": sum(1 for s in sessions if s.exercises_done),
		}

	def history(self, search=None, exercises_only=False):
		"""Closed sessions, newest first, filtered by subject name or summary text."""
		term = (search or "").strip().lower()
		names = {s.id: s.name.lower() for s in self.repo.list_subjects()}
		result = []
		for s in self._closed():
			if exercises_only and not s.exercises_done:
				continue
			if term and term not in names.get(s.subject_id, "") and term not in (s.summary or "").lower():
				continue
			result.append(s)
		return result

	def overview(self, today=None):
		"""Figures for the dashboard cards."""
		today = today or local_today()
		today_secs = self.today_seconds(today)
		return {
			"today_seconds": today_secs,
			"goal_percent": daily_goal_percent(today_secs),
			"week_seconds": self.week_seconds(today),
			"streak": self.streak(today),
			"total_days": self.total_days(),
			"total_hours": self.total_hours(),
		}

	def heat_grid(self, days=30, today=None):
		"""(date, seconds, heat level) for the last `days` days, oldest first."""
		return [(day, secs, heat_level(secs)) for day, secs in self.daily_series(days, today)]
