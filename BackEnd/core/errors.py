"""
Exceptions raised by the ConcursoFlow backend.
"""


class ConcursoFlowError(Exception):
	"""Base exception for all ConcursoFlow errors."""
	pass


class ValidationError(ConcursoFlowError):
	"""Raised when user input fails validation."""
	pass


class NotFoundError(ConcursoFlowError):
	"""Raised when an exam, subject, cycle or progress entry does not exist."""
	pass


class StoreError(ConcursoFlowError):
	"""Raised when the backing store rejects a read or write."""
	pass


class TimerStateError(ConcursoFlowError):
	"""Raised when a timer operation is not valid in the current state."""
	pass


class InvalidTransitionError(ConcursoFlowError):
	"""Raised when a cycle progress status change is not allowed."""
	pass


class CycleConflictError(ConcursoFlowError):
	"""Raised when another subject of the cycle is already in progress."""
	pass


class CycleAlreadyActiveError(ConcursoFlowError):
	"""Raised when starting a cycle while the exam still has an open one."""
	pass


class CycleAlreadyCompletedError(ConcursoFlowError):
	"""Raised when completing a cycle twice."""
	pass
