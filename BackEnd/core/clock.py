import math
from datetime import datetime, timezone

def utc_now():
	"""Return current UTC time as an aware datetime."""
	return datetime.now(timezone.utc)

def to_iso(dt):
	"""Serialize an aware datetime as ISO8601 UTC without microseconds."""
	if dt is None:
		return None
	return dt.astimezone(timezone.utc).replace(microsecond=0).isoformat()

def from_iso(value):
	"""Parse an ISO8601 string back to an aware UTC datetime."""
	if not value:
		return None
	dt = datetime.fromisoformat(value)
	if dt.tzinfo is None:
		dt = dt.replace(tzinfo=timezone.utc)
	return dt

def whole_seconds(start, end) -> int:
	"""Whole seconds elapsed from start to end (floored, may be negative)."""
	return math.floor((end - start).total_seconds())

def local_date(dt):
	"""Local calendar day of an aware datetime."""
	return dt.astimezone().date()

def local_today():
	return datetime.now().date()

def local_midnight(day):
	"""Aware datetime for local midnight at the start of day."""
	return datetime(day.year, day.month, day.day).astimezone()

def fmt_hms(seconds: int) -> str:
	"""Format seconds as HH:MM:SS."""
	h = seconds // 3600
	m = (seconds % 3600) // 60
	s = seconds % 60
	return f"{h:02}:{m:02}:{s:02}"

def fmt_duration(seconds: int) -> str:
	"""Short human duration: '1h 05m' above an hour, '12m 09s' below."""
	h = seconds // 3600
	m = (seconds % 3600) // 60
	s = seconds % 60
	if h > 0:
		return f"{h}h {m:02}m"
	return f"{m}m {s:02}s"

def round_percent(part, total) -> int:
	"""part/total as a percentage rounded half up; 0 when total is 0."""
	if not total:
		return 0
	return (part * 200 + total) // (total * 2)
