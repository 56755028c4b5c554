from PySide6.QtWidgets import (
	QDialog, QVBoxLayout, QHBoxLayout, QCheckBox, QLabel, QSpinBox, QTextEdit, QComboBox,
	QDialogButtonBox, QWidget
)
from BackEnd.core import config
from BackEnd.core.clock import fmt_hms
from BackEnd.models.entities import SessionDetails


class FinishDialog(QDialog):
	"""End-of-session form: exercises, summary and rating."""

	def __init__(self, elapsed_sec, parent=None):
		super().__init__(parent)
		self.setWindowTitle("Encerrar sessão")
		layout = QVBoxLayout()
		layout.addWidget(QLabel(f"Tempo líquido: {fmt_hms(elapsed_sec)}"))

		self.exercises_check = QCheckBox("Fiz exercícios nesta sessão")
		layout.addWidget(self.exercises_check)

		counts = QWidget()
		counts_layout = QHBoxLayout()
		counts_layout.setContentsMargins(0, 0, 0, 0)
		self.attempted_spin = QSpinBox()
		self.correct_spin = QSpinBox()
		for spin in (self.attempted_spin, self.correct_spin):
			spin.setRange(0, 10000)
		counts_layout.addWidget(QLabel("Questões tentadas"))
		counts_layout.addWidget(self.attempted_spin)
		counts_layout.addWidget(QLabel("Acertos"))
		counts_layout.addWidget(self.correct_spin)
		counts.setLayout(counts_layout)
		counts.setVisible(False)
		self.exercises_check.toggled.connect(counts.setVisible)
		layout.addWidget(counts)

		layout.addWidget(QLabel("Resumo da sessão (opcional)"))
		self.summary_edit = QTextEdit()
		self.summary_edit.setPlaceholderText(f"Até {config.SUMMARY_MAX_LENGTH} caracteres")
		layout.addWidget(self.summary_edit)

		layout.addWidget(QLabel("Avaliação"))
		self.rating_combo = QComboBox()
		self.rating_combo.addItem("Sem avaliação", None)
		for n in range(1, 6):
			self.rating_combo.addItem("★" * n + "☆" * (5 - n), n)
		layout.addWidget(self.rating_combo)

		buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel)
		buttons.accepted.connect(self.accept)
		buttons.rejected.connect(self.reject)
		layout.addWidget(buttons)
		self.setLayout(layout)

	def details(self):
		done = self.exercises_check.isChecked()
		return SessionDetails(
			exercises_done=done,
			questions_attempted=self.attempted_spin.value() if done else None,
			questions_correct=self.correct_spin.value() if done else None,
			summary=self.summary_edit.toPlainText(),
			rating=self.rating_combo.currentData(),
		)
