import logging
import sqlite3
from contextlib import contextmanager
from datetime import date
from pathlib import Path

from BackEnd.core.clock import from_iso, to_iso, utc_now
from BackEnd.core.errors import StoreError
from BackEnd.core.paths import db_path
from BackEnd.models.entities import Cycle, CycleProgress, Exam, ProgressStatus, Session, Subject

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent.parent.parent / "SQL" / "schema.sql"


def _exam(row):
	return Exam(
		id=row["id"],
		name=row["nome"],
		board=row["banca"],
		role=row["cargo"],
		exam_date=date.fromisoformat(row["data_prova"]) if row["data_prova"] else None,
		status=row["status"],
		created_at=from_iso(row["created_at"]),
	)


def _subject(row):
	return Subject(
		id=row["id"],
		exam_id=row["concurso_id"],
		name=row["nome"],
		priority=row["prioridade"],
		color=row["cor"],
		cycle_goal_hours=row["meta_horas_ciclo"],
		order=row["ordem"],
	)


def _session(row):
	return Session(
		id=row["id"],
		subject_id=row["materia_id"],
		exam_id=row["concurso_id"],
		cycle_id=row["ciclo_id"],
		started_at=from_iso(row["inicio_em"]),
		ended_at=from_iso(row["fim_em"]),
		active_seconds=row["duracao_segundos"],
		pause_seconds=row["tempo_pausa_segundos"],
		exercises_done=bool(row["fez_exercicios"]),
		questions_attempted=row["quantidade_questoes"],
		questions_correct=row["quantidade_acertos"],
		summary=row["resumo"],
		rating=row["avaliacao"],
	)


def _progress(row):
	return CycleProgress(
		id=row["id"],
		cycle_id=row["ciclo_id"],
		subject_id=row["materia_id"],
		status=ProgressStatus(row["status"]),
	)


class SqliteStudyRepository:
	"""StudyRepository over a local SQLite file."""

	def __init__(self, path=None):
		self.path = Path(path) if path else db_path()
		with open(SCHEMA_PATH, encoding="utf-8") as f:
			schema = f.read()
		with self.connect() as conn:
			conn.executescript(schema)

	@contextmanager
	def connect(self):
		"""Open a connection, commit on success and turn driver errors into StoreError."""
		try:
			conn = sqlite3.connect(self.path)
		except sqlite3.Error as e:
			logger.error("cannot open database %s: %s", self.path, e)
			raise StoreError(str(e)) from e
		conn.row_factory = sqlite3.Row
		conn.execute("PRAGMA foreign_keys = ON")
		try:
			yield conn
			conn.commit()
		except sqlite3.Error as e:
			conn.rollback()
			logger.error("database error on %s: %s", self.path, e)
			raise StoreError(str(e)) from e
		except Exception:
			conn.rollback()
			raise
		finally:
			conn.close()

	# exams
	def add_exam(self, exam):
		created = exam.created_at or utc_now()
		with self.connect() as conn:
			cur = conn.execute(
				"""
				INSERT INTO concursos (nome, banca, cargo, data_prova, status, created_at)
				VALUES (?, ?, ?, ?, ?, ?)
				""",
				(exam.name, exam.board, exam.role,
				 exam.exam_date.isoformat() if exam.exam_date else None,
				 exam.status, to_iso(created))
			)
			exam_id = cur.lastrowid
		return self.get_exam(exam_id)

	def get_exam(self, exam_id):
		with self.connect() as conn:
			row = conn.execute("SELECT * FROM concursos WHERE id=?", (exam_id,)).fetchone()
		return _exam(row) if row else None

	def list_exams(self):
		with self.connect() as conn:
			rows = conn.execute("SELECT * FROM concursos ORDER BY created_at DESC, id DESC").fetchall()
		return [_exam(r) for r in rows]

	# subjects
	def add_subject(self, subject):
		with self.connect() as conn:
			cur = conn.execute(
				"""
				INSERT INTO materias (concurso_id, nome, prioridade, cor, meta_horas_ciclo, ordem)
				VALUES (?, ?, ?, ?, ?, ?)
				""",
				(subject.exam_id, subject.name, subject.priority, subject.color,
				 subject.cycle_goal_hours, subject.order)
			)
			subject_id = cur.lastrowid
		return self.get_subject(subject_id)

	def get_subject(self, subject_id):
		with self.connect() as conn:
			row = conn.execute("SELECT * FROM materias WHERE id=?", (subject_id,)).fetchone()
		return _subject(row) if row else None

	def list_subjects(self, exam_id=None):
		with self.connect() as conn:
			if exam_id is None:
				rows = conn.execute("SELECT * FROM materias ORDER BY ordem, id").fetchall()
			else:
				rows = conn.execute(
					"SELECT * FROM materias WHERE concurso_id=? ORDER BY ordem, id", (exam_id,)
				).fetchall()
		return [_subject(r) for r in rows]

	# cycles
	def _cycle(self, conn, row):
		members = conn.execute(
			"SELECT materia_id FROM ciclo_materias WHERE ciclo_id=? ORDER BY ordem", (row["id"],)
		).fetchall()
		return Cycle(
			id=row["id"],
			exam_id=row["concurso_id"],
			name=row["nome"],
			number=row["numero"],
			subject_ids=[m["materia_id"] for m in members],
			started_at=from_iso(row["iniciado_em"]),
			completed_at=from_iso(row["concluido_em"]),
		)

	def add_cycle(self, cycle):
		started = cycle.started_at or utc_now()
		with self.connect() as conn:
			cur = conn.execute(
				"INSERT INTO ciclos (concurso_id, nome, numero, iniciado_em, concluido_em) VALUES (?, ?, ?, ?, ?)",
				(cycle.exam_id, cycle.name, cycle.number, to_iso(started), to_iso(cycle.completed_at))
			)
			cycle_id = cur.lastrowid
			conn.executemany(
				"INSERT INTO ciclo_materias (ciclo_id, materia_id, ordem) VALUES (?, ?, ?)",
				[(cycle_id, subject_id, idx) for idx, subject_id in enumerate(cycle.subject_ids)]
			)
		return self.get_cycle(cycle_id)

	def get_cycle(self, cycle_id):
		with self.connect() as conn:
			row = conn.execute("SELECT * FROM ciclos WHERE id=?", (cycle_id,)).fetchone()
			return self._cycle(conn, row) if row else None

	def list_cycles(self, exam_id=None):
		with self.connect() as conn:
			if exam_id is None:
				rows = conn.execute("SELECT * FROM ciclos ORDER BY iniciado_em DESC, id DESC").fetchall()
			else:
				rows = conn.execute(
					"SELECT * FROM ciclos WHERE concurso_id=? ORDER BY iniciado_em DESC, id DESC", (exam_id,)
				).fetchall()
			return [self._cycle(conn, r) for r in rows]

	def get_active_cycle(self, exam_id):
		"""Open cycle of the exam; the most recently started one if several are open."""
		with self.connect() as conn:
			row = conn.execute(
				"""
				SELECT * FROM ciclos WHERE concurso_id=? AND concluido_em IS NULL
				ORDER BY iniciado_em DESC, id DESC LIMIT 1
				""",
				(exam_id,)
			).fetchone()
			return self._cycle(conn, row) if row else None

	def update_cycle(self, cycle):
		with self.connect() as conn:
			conn.execute(
				"UPDATE ciclos SET nome=?, concluido_em=? WHERE id=?",
				(cycle.name, to_iso(cycle.completed_at), cycle.id)
			)

	# cycle progress
	def add_progress(self, entries):
		entries = list(entries)
		with self.connect() as conn:
			for entry in entries:
				cur = conn.execute(
					"INSERT INTO progresso_ciclo (ciclo_id, materia_id, status) VALUES (?, ?, ?)",
					(entry.cycle_id, entry.subject_id, ProgressStatus(entry.status).value)
				)
				entry.id = cur.lastrowid
		return entries

	def list_progress(self, cycle_id):
		with self.connect() as conn:
			rows = conn.execute(
				"SELECT * FROM progresso_ciclo WHERE ciclo_id=? ORDER BY id", (cycle_id,)
			).fetchall()
		return [_progress(r) for r in rows]

	def update_progress_status(self, cycle_id, subject_id, status):
		with self.connect() as conn:
			conn.execute(
				"UPDATE progresso_ciclo SET status=? WHERE ciclo_id=? AND materia_id=?",
				(ProgressStatus(status).value, cycle_id, subject_id)
			)

	# sessions
	def add_session(self, session):
		with self.connect() as conn:
			cur = conn.execute(
				"""
				INSERT INTO sessoes (materia_id, concurso_id, ciclo_id, inicio_em, fim_em,
					duracao_segundos, tempo_pausa_segundos, fez_exercicios)
				VALUES (?, ?, ?, ?, ?, ?, ?, ?)
				""",
				(session.subject_id, session.exam_id, session.cycle_id, to_iso(session.started_at),
				 to_iso(session.ended_at), int(session.active_seconds), int(session.pause_seconds),
				 int(bool(session.exercises_done)))
			)
			session_id = cur.lastrowid
		return self.get_session(session_id)

	def get_session(self, session_id):
		with self.connect() as conn:
			row = conn.execute("SELECT * FROM sessoes WHERE id=?", (session_id,)).fetchone()
		return _session(row) if row else None

	def update_session(self, session):
		with self.connect() as conn:
			conn.execute(
				"""
				UPDATE sessoes SET fim_em=?, duracao_segundos=?, tempo_pausa_segundos=?,
					fez_exercicios=?, quantidade_questoes=?, quantidade_acertos=?, resumo=?, avaliacao=?
				WHERE id=?
				""",
				(to_iso(session.ended_at), int(session.active_seconds), int(session.pause_seconds),
				 int(bool(session.exercises_done)), session.questions_attempted,
				 session.questions_correct, session.summary, session.rating, session.id)
			)

	def update_elapsed(self, session_id, active_seconds, pause_seconds):
		"""Checkpoint the running figures of an open session."""
		with self.connect() as conn:
			conn.execute(
				"UPDATE sessoes SET duracao_segundos=?, tempo_pausa_segundos=? WHERE id=? AND fim_em IS NULL",
				(int(active_seconds), int(pause_seconds), session_id)
			)

	def list_sessions(self, exam_id=None, since=None, closed_only=False):
		clauses, params = [], []
		if exam_id is not None:
			clauses.append("concurso_id=?")
			params.append(exam_id)
		if since is not None:
			clauses.append("inicio_em > ?")
			params.append(to_iso(since))
		if closed_only:
			clauses.append("fim_em IS NOT NULL")
		where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
		with self.connect() as conn:
			rows = conn.execute(
				f"SELECT * FROM sessoes {where} ORDER BY inicio_em DESC, id DESC", params
			).fetchall()
		return [_session(r) for r in rows]

	def open_sessions(self):
		"""Sessions with no end timestamp, newest first."""
		with self.connect() as conn:
			rows = conn.execute(
				"SELECT * FROM sessoes WHERE fim_em IS NULL ORDER BY inicio_em DESC, id DESC"
			).fetchall()
		return [_session(r) for r in rows]
