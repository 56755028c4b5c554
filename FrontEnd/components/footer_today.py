from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel
from BackEnd.core.clock import fmt_duration
from BackEnd.services.stats_service import daily_goal_percent
from FrontEnd.styles.design_tokens import COLORS

class FooterToday(QWidget):
    def __init__(self, today_seconds=0):
        super().__init__()
        layout = QHBoxLayout()
        layout.addStretch()
        self.label = QLabel()
        self.label.setObjectName("TodayLabel")
        layout.addWidget(self.label)
        self.setLayout(layout)
        self.setStyleSheet(f"background: {COLORS['footer_bg']}; border-radius: 16px; padding: 8px 24px; color: {COLORS['footer_text']}; font-size: 16px; font-weight: 500;")
        self.set_today(today_seconds)

    def set_today(self, seconds):
        self.label.setText(f"Hoje: {fmt_duration(seconds)} · {daily_goal_percent(seconds)}% da meta")
