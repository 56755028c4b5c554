from PySide6.QtWidgets import (
	QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QListWidget,
	QStackedWidget, QListWidgetItem, QTableWidget, QTableWidgetItem, QSizePolicy, QComboBox,
	QLineEdit, QCheckBox, QProgressBar, QMessageBox, QFormLayout, QDialog, QFrame, QGridLayout
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QColor
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure
import logging
from BackEnd.core.clock import fmt_hms, fmt_duration, local_date
from BackEnd.core.errors import ConcursoFlowError
from BackEnd.models.entities import DEFAULT_COLOR, PRIORITIES
from BackEnd.services.catalog_service import CatalogService
from BackEnd.services.cycle_service import CycleTracker
from BackEnd.services.stats_service import StatsService, accuracy
from BackEnd.services.timer_service import SessionTimer
from FrontEnd.components.finish_dialog import FinishDialog
from FrontEnd.components.footer_today import FooterToday
from FrontEnd.styles.design_tokens import COLORS, HEAT_COLORS, STATUS_COLORS, STATUS_LABELS, stylesheet

logger = logging.getLogger(__name__)

PAGES = ("Dashboard", "Sessão", "Ciclos", "Analytics", "Histórico", "Configurações")
ANALYTICS_PERIODS = (7, 30, 90)


class MainWindow(QMainWindow):
	def __init__(self, repo):
		super().__init__()
		self.setWindowTitle("ConcursoFlow")
		self.resize(1100, 720)
		self.setStyleSheet(stylesheet())

		self.repo = repo
		self.tracker = CycleTracker(repo)
		self.catalog = CatalogService(repo)
		self.stats = StatsService(repo)
		self.timer_service = None

		self.sidebar = QListWidget()
		self.sidebar.setFixedWidth(220)
		self.sidebar.setSpacing(8)
		for name in PAGES:
			self.sidebar.addItem(QListWidgetItem(name))

		self.stack = QStackedWidget()
		self.stack.addWidget(self._build_dashboard_tab())
		self.stack.addWidget(self._build_session_tab())
		self.stack.addWidget(self._build_cycles_tab())
		self.stack.addWidget(self._build_analytics_tab())
		self.stack.addWidget(self._build_history_tab())
		self.stack.addWidget(self._build_settings_tab())

		main_layout = QHBoxLayout()
		main_layout.setContentsMargins(0, 0, 0, 0)
		main_layout.setSpacing(0)
		main_layout.addWidget(self.sidebar)
		main_layout.addWidget(self.stack)
		container = QWidget()
		container.setLayout(main_layout)
		self.setCentralWidget(container)

		self.sidebar.currentRowChanged.connect(self._on_page_changed)
		self.sidebar.setCurrentRow(0)

		self._new_timer()
		self._reload_exams()
		self._offer_recovery()

	# --- helpers ---------------------------------------------------------

	def _attempt(self, fn, *args, **kwargs):
		"""Run a service call, showing its error instead of raising."""
		try:
			return fn(*args, **kwargs)
		except ConcursoFlowError as e:
			logger.warning("%s failed: %s", getattr(fn, "__name__", fn), e)
			QMessageBox.warning(self, "ConcursoFlow", str(e))
			return None

	def _page_title(self, text):
		label = QLabel(text)
		label.setObjectName("PageTitle")
		return label

	def _exam_combo(self):
		combo = QComboBox()
		combo.setMinimumWidth(220)
		return combo

	def _fill_exam_combo(self, combo, exams):
		current = combo.currentData()
		combo.blockSignals(True)
		combo.clear()
		for exam in exams:
			combo.addItem(exam.name, exam.id)
		idx = combo.findData(current)
		combo.setCurrentIndex(idx if idx >= 0 else (0 if exams else -1))
		combo.blockSignals(False)

	def _subject_names(self):
		return {s.id: s.name for s in self.repo.list_subjects()}

	def _on_page_changed(self, row):
		self.stack.setCurrentIndex(row)
		refresh = {
			"Dashboard": self._refresh_dashboard,
			"Ciclos": self._refresh_cycles,
			"Analytics": self._refresh_analytics,
			"Histórico": self._refresh_history,
		}.get(PAGES[row])
		if refresh is not None:
			refresh()

	def _reload_exams(self):
		exams = self._attempt(self.catalog.exams) or []
		for combo in (self.session_exam_combo, self.cycle_exam_combo, self.subject_exam_combo):
			self._fill_exam_combo(combo, exams)
		self._reload_subjects()

	# --- dashboard page --------------------------------------------------

	def _stat_card(self, title):
		card = QFrame()
		card.setObjectName("StatCard")
		box = QVBoxLayout()
		box.setContentsMargins(16, 12, 16, 12)
		caption = QLabel(title)
		caption.setStyleSheet("background: transparent;")
		value = QLabel("-")
		value.setObjectName("StatValue")
		box.addWidget(caption)
		box.addWidget(value)
		card.setLayout(box)
		return card, value

	def _build_dashboard_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setAlignment(Qt.AlignmentFlag.AlignTop)
		layout.setContentsMargins(32, 32, 32, 32)
		layout.addWidget(self._page_title("Sua Evolução"))

		cards = QHBoxLayout()
		self.dashboard_values = {}
		for key, title in (("today", "TEMPO HOJE"), ("week", "ÚLTIMOS 7 DIAS"), ("streak", "SEQUÊNCIA"),
				("days", "DIAS ESTUDADOS"), ("hours", "HORAS TOTAIS")):
			card, value = self._stat_card(title)
			self.dashboard_values[key] = value
			cards.addWidget(card)
		layout.addLayout(cards)

		layout.addSpacing(24)
		layout.addWidget(QLabel("Atividade nos últimos 30 dias"))
		self.heat_cells = []
		grid = QGridLayout()
		grid.setSpacing(6)
		for i in range(30):
			cell = QLabel()
			cell.setFixedSize(28, 28)
			grid.addWidget(cell, i // 10, i % 10)
			self.heat_cells.append(cell)
		heat = QWidget()
		heat.setLayout(grid)
		layout.addWidget(heat, alignment=Qt.AlignmentFlag.AlignLeft)
		w.setLayout(layout)
		return w

	def _refresh_dashboard(self):
		overview = self._attempt(self.stats.overview)
		if overview is None:
			return
		self.dashboard_values["today"].setText(
			f"{fmt_duration(overview['today_seconds'])} · {overview['goal_percent']}% da meta")
		self.dashboard_values["week"].setText(fmt_duration(overview["week_seconds"]))
		self.dashboard_values["streak"].setText(f"{overview['streak']} dias")
		self.dashboard_values["days"].setText(str(overview["total_days"]))
		self.dashboard_values["hours"].setText(f"{overview['total_hours']:.1f}h")
		for cell, (day, secs, level) in zip(self.heat_cells, self.stats.heat_grid(len(self.heat_cells))):
			cell.setStyleSheet(f"background: {HEAT_COLORS[level]}; border-radius: 4px;")
			cell.setToolTip(f"{day:%d/%m/%Y} · {fmt_duration(secs)}")

	# --- session page ----------------------------------------------------

	def _build_session_tab(self):
		w = QWidget()
		outer = QVBoxLayout()
		outer.setContentsMargins(32, 32, 32, 32)
		outer.addWidget(self._page_title("Sessão de Estudo"))

		selectors = QFormLayout()
		self.session_exam_combo = self._exam_combo()
		self.session_subject_combo = QComboBox()
		selectors.addRow("Concurso", self.session_exam_combo)
		selectors.addRow("Matéria", self.session_subject_combo)
		self.selectors = QWidget()
		self.selectors.setLayout(selectors)
		outer.addWidget(self.selectors)
		outer.addStretch()

		self.timer_label = QLabel("00:00:00")
		self.timer_label.setObjectName("TimerLabel")
		self.timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
		outer.addWidget(self.timer_label)

		self.session_info = QLabel("")
		self.session_info.setAlignment(Qt.AlignmentFlag.AlignCenter)
		outer.addWidget(self.session_info)

		btn_layout = QHBoxLayout()
		btn_layout.setSpacing(24)
		btn_layout.addStretch()
		self.start_pause_btn = QPushButton("Iniciar Sessão")
		self.finish_btn = QPushButton("Encerrar")
		for btn in (self.start_pause_btn, self.finish_btn):
			btn.setMinimumHeight(56)
			btn.setMinimumWidth(180)
			btn_layout.addWidget(btn)
		btn_layout.addStretch()
		outer.addSpacing(24)
		outer.addLayout(btn_layout)
		outer.addStretch()

		self.footer_today = FooterToday()
		outer.addWidget(self.footer_today)
		w.setLayout(outer)

		self.session_exam_combo.currentIndexChanged.connect(lambda _: self._reload_subjects())
		self.start_pause_btn.clicked.connect(self._start_pause)
		self.finish_btn.clicked.connect(self._finish)
		return w

	def _reload_subjects(self):
		exam_id = self.session_exam_combo.currentData()
		self.session_subject_combo.clear()
		if exam_id is None:
			return
		for subject in self.repo.list_subjects(exam_id):
			self.session_subject_combo.addItem(subject.name, subject.id)

	def _new_timer(self):
		if self.timer_service is not None:
			self.timer_service.deleteLater()
		self.timer_service = SessionTimer(self.repo, self.tracker, parent=self)
		self.timer_service.elapsed_changed.connect(self._on_tick)
		self.timer_service.state_changed.connect(self._on_state)
		self._on_state("idle")
		self.timer_label.setText("00:00:00")

	def _on_tick(self, elapsed):
		self.timer_label.setText(fmt_hms(elapsed))

	def _on_state(self, state):
		self.selectors.setVisible(state == "idle")
		self.finish_btn.setEnabled(state in ("running", "paused"))
		if state == "running":
			self.start_pause_btn.setText("Pausar")
		elif state == "paused":
			self.start_pause_btn.setText("Retomar")
		else:
			self.start_pause_btn.setText("Iniciar Sessão")
		session = self.timer_service.session if self.timer_service else None
		if session is not None and state in ("running", "paused"):
			name = self._subject_names().get(session.subject_id, "")
			self.session_info.setText(f"Estudando: {name}" + (" · pausado" if state == "paused" else ""))
		else:
			self.session_info.setText("")
		self.footer_today.set_today(self._attempt(self.stats.today_seconds) or 0)

	def _start_pause(self):
		svc = self.timer_service
		if svc.state.value == "idle":
			self._attempt(svc.start, self.session_subject_combo.currentData(), self.session_exam_combo.currentData())
		else:
			self._attempt(svc.pause_resume)

	def _finish(self):
		svc = self.timer_service
		self._attempt(svc.finish)
		if not svc.paused:
			return
		dialog = FinishDialog(svc.elapsed_sec, self)
		if dialog.exec() != QDialog.DialogCode.Accepted:
			return
		if self._attempt(svc.save, dialog.details()) is not None:
			self._new_timer()
			self.sidebar.setCurrentRow(2)

	def _offer_recovery(self):
		names = self._subject_names()
		for session in self._attempt(self.repo.open_sessions) or []:
			box = QMessageBox(self)
			box.setWindowTitle("Sessão em aberto")
			box.setText(
				f"Existe uma sessão de {names.get(session.subject_id, '?')} iniciada em "
				f"{session.started_at.astimezone():%d/%m %H:%M} que não foi encerrada.")
			resume_btn = box.addButton("Retomar", QMessageBox.ButtonRole.AcceptRole)
			discard_btn = box.addButton("Descartar", QMessageBox.ButtonRole.DestructiveRole)
			box.addButton("Depois", QMessageBox.ButtonRole.RejectRole)
			if self.timer_service.state.value != "idle":
				resume_btn.setEnabled(False)
			box.exec()
			if box.clickedButton() is resume_btn:
				self._attempt(self.timer_service.recover, session)
			elif box.clickedButton() is discard_btn:
				self._attempt(self.timer_service.discard, session)

	# --- cycles page -----------------------------------------------------

	def _build_cycles_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setAlignment(Qt.AlignmentFlag.AlignTop)
		layout.setContentsMargins(32, 32, 32, 32)
		header = QHBoxLayout()
		header.addWidget(self._page_title("Ciclos de Estudo"))
		header.addStretch()
		self.cycle_exam_combo = self._exam_combo()
		header.addWidget(self.cycle_exam_combo)
		layout.addLayout(header)

		self.cycle_name_label = QLabel("")
		layout.addWidget(self.cycle_name_label)
		self.cycle_progress = QProgressBar()
		self.cycle_progress.setRange(0, 100)
		layout.addWidget(self.cycle_progress)
		self.cycle_count_label = QLabel("")
		layout.addWidget(self.cycle_count_label)

		self.cycle_subjects = QListWidget()
		self.cycle_subjects.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
		layout.addWidget(self.cycle_subjects)

		buttons = QHBoxLayout()
		self.start_cycle_btn = QPushButton("Iniciar Novo Ciclo")
		self.complete_cycle_btn = QPushButton("Concluir Ciclo")
		buttons.addWidget(self.start_cycle_btn)
		buttons.addWidget(self.complete_cycle_btn)
		buttons.addStretch()
		layout.addLayout(buttons)

		self.cycle_history = QTableWidget()
		self.cycle_history.setColumnCount(4)
		self.cycle_history.setHorizontalHeaderLabels(["#", "Nome", "Início", "Conclusão"])
		self.cycle_history.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
		layout.addWidget(QLabel("Ciclos anteriores"))
		layout.addWidget(self.cycle_history)
		w.setLayout(layout)

		self.cycle_exam_combo.currentIndexChanged.connect(lambda _: self._refresh_cycles())
		self.start_cycle_btn.clicked.connect(self._start_cycle)
		self.complete_cycle_btn.clicked.connect(self._complete_cycle)
		return w

	def _refresh_cycles(self):
		exam_id = self.cycle_exam_combo.currentData()
		self.cycle_subjects.clear()
		cycle = self.tracker.active_cycle(exam_id) if exam_id is not None else None
		self.start_cycle_btn.setEnabled(exam_id is not None and cycle is None)
		self.complete_cycle_btn.setEnabled(cycle is not None)
		if cycle is None:
			self.cycle_name_label.setText("Nenhum ciclo ativo. Crie um ciclo para acompanhar seu progresso.")
			self.cycle_progress.setValue(0)
			self.cycle_count_label.setText("")
		else:
			self._attempt(self.tracker.reconcile, cycle.id)
			summary = self.tracker.derive_progress(cycle.id)
			started = cycle.started_at.astimezone()
			self.cycle_name_label.setText(f"{cycle.name} · Ciclo #{cycle.number} · iniciado em {started:%d/%m/%Y}")
			self.cycle_progress.setValue(summary.percent)
			self.cycle_count_label.setText(f"{summary.done}/{summary.total} matérias")
			names = self._subject_names()
			for subject_id, status in self.tracker.statuses(cycle):
				item = QListWidgetItem(f"{names.get(subject_id, subject_id)} · {STATUS_LABELS[status.value]}")
				item.setForeground(QColor(STATUS_COLORS[status.value]))
				self.cycle_subjects.addItem(item)
		past = [c for c in self.repo.list_cycles(exam_id) if c.completed_at is not None] if exam_id is not None else []
		self.cycle_history.setRowCount(len(past))
		for row, c in enumerate(past):
			self.cycle_history.setItem(row, 0, QTableWidgetItem(str(c.number)))
			self.cycle_history.setItem(row, 1, QTableWidgetItem(c.name))
			self.cycle_history.setItem(row, 2, QTableWidgetItem(f"{c.started_at.astimezone():%d/%m/%Y}"))
			self.cycle_history.setItem(row, 3, QTableWidgetItem(f"{c.completed_at.astimezone():%d/%m/%Y}"))

	def _start_cycle(self):
		exam_id = self.cycle_exam_combo.currentData()
		if exam_id is not None and self._attempt(self.tracker.start_cycle, exam_id) is not None:
			self._refresh_cycles()

	def _complete_cycle(self):
		cycle = self.tracker.active_cycle(self.cycle_exam_combo.currentData())
		if cycle is None:
			return
		summary = self.tracker.derive_progress(cycle.id)
		if summary.done < summary.total:
			answer = QMessageBox.question(
				self, "Concluir ciclo",
				f"Apenas {summary.done} de {summary.total} matérias foram concluídas. Concluir mesmo assim?")
			if answer != QMessageBox.StandardButton.Yes:
				return
		self._attempt(self.tracker.complete_cycle, cycle.id)
		self._refresh_cycles()

	# --- analytics page --------------------------------------------------

	def _build_analytics_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setAlignment(Qt.AlignmentFlag.AlignTop)
		layout.setContentsMargins(32, 32, 32, 32)
		header = QHBoxLayout()
		header.addWidget(self._page_title("Análise de Performance"))
		header.addStretch()
		self.period_combo = QComboBox()
		for days in ANALYTICS_PERIODS:
			self.period_combo.addItem(f"{days} dias", days)
		self.period_combo.setCurrentIndex(ANALYTICS_PERIODS.index(30))
		header.addWidget(self.period_combo)
		layout.addLayout(header)

		cards = QHBoxLayout()
		self.analytics_values = {}
		for key, title in (("total", "TOTAL DE HORAS"), ("sessions", "SESSÕES"),
				("exercises", "COM EXERCÍCIOS"), ("average", "MÉDIA/SESSÃO")):
			card, value = self._stat_card(title)
			self.analytics_values[key] = value
			cards.addWidget(card)
		layout.addLayout(cards)

		self.subject_figure = Figure(figsize=(5, 3))
		self.subject_canvas = FigureCanvas(self.subject_figure)
		layout.addWidget(self.subject_canvas)
		w.setLayout(layout)

		self.period_combo.currentIndexChanged.connect(lambda _: self._refresh_analytics())
		return w

	def _refresh_analytics(self):
		days = self.period_combo.currentData()
		summary = self._attempt(self.stats.period_summary, days)
		if summary is None:
			return
		self.analytics_values["total"].setText(f"{summary['total_seconds'] / 3600:.1f}h")
		self.analytics_values["sessions"].setText(str(summary["sessions"]))
		self.analytics_values["exercises"].setText(str(summary["with_exercises"]))
		self.analytics_values["average"].setText(fmt_duration(summary["average_seconds"]))
		self._update_subject_chart(self.stats.by_subject(days))

	def _update_subject_chart(self, totals):
		subjects = {s.id: s for s in self.repo.list_subjects()}
		# largest on top
		rows = list(reversed(totals))
		labels = [subjects[sid].name if sid in subjects else str(sid) for sid, _ in rows]
		hours = [secs / 3600 for _, secs in rows]
		colors = [subjects[sid].color if sid in subjects else COLORS['chart_bar'] for sid, _ in rows]

		self.subject_figure.clear()
		self.subject_figure.patch.set_facecolor(COLORS['background'])
		ax = self.subject_figure.add_subplot(111)
		ax.set_facecolor(COLORS['surface'])
		if rows:
			ax.barh(labels, hours, color=colors, alpha=0.9)
		ax.set_xlabel("Horas", color=COLORS['text'])
		ax.set_title("Distribuição por Matéria", color=COLORS['text_strong'])
		ax.set_xlim(left=0)
		ax.grid(True, axis='x', alpha=0.25, linestyle='--', color=COLORS['chart_grid'])
		ax.set_axisbelow(True)
		ax.tick_params(axis='both', colors=COLORS['text'], labelsize=10)
		for spine in ['top', 'right']:
			ax.spines[spine].set_visible(False)
		self.subject_figure.tight_layout()
		self.subject_canvas.draw()

	# --- history page ----------------------------------------------------

	def _build_history_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setAlignment(Qt.AlignmentFlag.AlignTop)
		layout.setContentsMargins(32, 32, 32, 32)
		layout.addWidget(self._page_title("Histórico"))

		self.summary_label = QLabel("")
		layout.addWidget(self.summary_label)

		# Bar chart (matplotlib)
		self.figure = Figure(figsize=(5, 2.5))
		self.canvas = FigureCanvas(self.figure)
		layout.addWidget(self.canvas)

		filters = QHBoxLayout()
		self.search_edit = QLineEdit()
		self.search_edit.setPlaceholderText("Buscar por matéria ou resumo")
		self.exercises_only = QCheckBox("Só com exercícios")
		filters.addWidget(self.search_edit)
		filters.addWidget(self.exercises_only)
		layout.addLayout(filters)

		self.history_table = QTableWidget()
		self.history_table.setColumnCount(8)
		self.history_table.setHorizontalHeaderLabels([
			"Data", "Matéria", "Duração", "Pausa", "Questões", "Acerto", "Avaliação", "Resumo"
		])
		self.history_table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
		self.history_table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
		self.history_table.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
		layout.addWidget(self.history_table)
		w.setLayout(layout)

		self.search_edit.textChanged.connect(lambda _: self._refresh_history())
		self.exercises_only.toggled.connect(lambda _: self._refresh_history())
		return w

	def _refresh_history(self):
		sessions = self._attempt(
			self.stats.history, self.search_edit.text(), self.exercises_only.isChecked()) or []
		names = self._subject_names()
		self.history_table.setRowCount(len(sessions))
		for row, sess in enumerate(sessions):
			pct = accuracy(sess)
			values = [
				f"{local_date(sess.started_at):%d/%m/%Y}",
				names.get(sess.subject_id, ""),
				fmt_duration(sess.active_seconds),
				fmt_duration(sess.pause_seconds),
				f"{sess.questions_correct}/{sess.questions_attempted}" if sess.questions_attempted else "",
				f"{pct}%" if pct is not None else "",
				"★" * sess.rating if sess.rating else "",
				sess.summary or "",
			]
			for col, value in enumerate(values):
				self.history_table.setItem(row, col, QTableWidgetItem(value))
		self._update_summary()
		self._update_bar_chart()

	def _update_summary(self):
		week = self.stats.period_summary(7)
		self.summary_label.setText(
			f"Últimos 7 dias: {fmt_duration(week['total_seconds'])} em {week['sessions']} sessões · "
			f"média {fmt_duration(week['average_seconds'])} · "
			f"sequência de {self.stats.streak()} dias"
		)

	def _update_bar_chart(self):
		series = self.stats.daily_series(7)
		x = [d.strftime("%a") for d, _ in series]
		y = [secs / 3600 for _, secs in series]

		self.figure.clear()
		self.figure.patch.set_facecolor(COLORS['background'])
		ax = self.figure.add_subplot(111)
		ax.set_facecolor(COLORS['surface'])
		bars = ax.bar(x, y, color=COLORS['chart_bar'], alpha=0.9)
		for bar, value in zip(bars, y):
			if value > 0:
				ax.text(bar.get_x() + bar.get_width()/2, bar.get_height() + 0.05,
				       f'{value:.1f}h', ha='center', va='bottom',
				       fontsize=9, color=COLORS['text_strong'])
		ax.set_ylabel("Horas", color=COLORS['text'])
		ax.set_title("Tempo de estudo nos últimos 7 dias", color=COLORS['text_strong'])
		ax.set_ylim(bottom=0)
		ax.grid(True, axis='y', alpha=0.25, linestyle='--', color=COLORS['chart_grid'])
		ax.set_axisbelow(True)
		ax.tick_params(axis='both', colors=COLORS['text'], labelsize=10)
		for spine in ['top', 'right']:
			ax.spines[spine].set_visible(False)
		self.figure.tight_layout()
		self.canvas.draw()

	# --- settings page ---------------------------------------------------

	def _build_settings_tab(self):
		w = QWidget()
		layout = QVBoxLayout()
		layout.setAlignment(Qt.AlignmentFlag.AlignTop)
		layout.setContentsMargins(32, 32, 32, 32)
		layout.addWidget(self._page_title("Configurações"))

		layout.addWidget(QLabel("Novo concurso"))
		exam_form = QFormLayout()
		self.exam_name_edit = QLineEdit()
		self.exam_board_edit = QLineEdit()
		self.exam_role_edit = QLineEdit()
		exam_form.addRow("Nome", self.exam_name_edit)
		exam_form.addRow("Banca", self.exam_board_edit)
		exam_form.addRow("Cargo", self.exam_role_edit)
		layout.addLayout(exam_form)
		add_exam_btn = QPushButton("Adicionar concurso")
		layout.addWidget(add_exam_btn)

		layout.addSpacing(24)
		layout.addWidget(QLabel("Nova matéria"))
		subject_form = QFormLayout()
		self.subject_exam_combo = self._exam_combo()
		self.subject_name_edit = QLineEdit()
		self.subject_priority_combo = QComboBox()
		self.subject_priority_combo.addItems(PRIORITIES)
		self.subject_priority_combo.setCurrentText("media")
		self.subject_color_edit = QLineEdit(DEFAULT_COLOR)
		subject_form.addRow("Concurso", self.subject_exam_combo)
		subject_form.addRow("Nome", self.subject_name_edit)
		subject_form.addRow("Prioridade", self.subject_priority_combo)
		subject_form.addRow("Cor", self.subject_color_edit)
		layout.addLayout(subject_form)
		add_subject_btn = QPushButton("Adicionar matéria")
		layout.addWidget(add_subject_btn)
		w.setLayout(layout)

		add_exam_btn.clicked.connect(self._add_exam)
		add_subject_btn.clicked.connect(self._add_subject)
		return w

	def _add_exam(self):
		exam = self._attempt(
			self.catalog.create_exam,
			self.exam_name_edit.text(), self.exam_board_edit.text(), self.exam_role_edit.text())
		if exam is not None:
			for edit in (self.exam_name_edit, self.exam_board_edit, self.exam_role_edit):
				edit.clear()
			self._reload_exams()

	def _add_subject(self):
		exam_id = self.subject_exam_combo.currentData()
		if exam_id is None:
			QMessageBox.information(self, "ConcursoFlow", "Cadastre um concurso primeiro.")
			return
		subject = self._attempt(
			self.catalog.create_subject, exam_id, self.subject_name_edit.text(),
			self.subject_priority_combo.currentText(), self.subject_color_edit.text().strip())
		if subject is not None:
			self.subject_name_edit.clear()
			self._reload_subjects()
