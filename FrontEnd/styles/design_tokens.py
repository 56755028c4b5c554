# Design tokens for the ConcursoFlow UI

COLORS = {
    'background': '#0B0D12',
    'surface': '#14171F',
    'primary': '#1A6FFF',
    'primary_hover': '#3D86FF',
    'text': '#C9D1E0',
    'text_strong': '#F2F5FA',
    'border': '#252A36',
    'sidebar_bg': '#0F1218',
    'sidebar_active_bg': '#1A2233',
    'footer_bg': '#14171F',
    'footer_text': '#F2F5FA',
    'pause_dot': '#FFC24B',
    'success': '#2ECC71',
    'chart_bar': '#1A6FFF',
    'chart_grid': '#252A36',
}

# Cycle progress statuses, keyed by their stored values
STATUS_COLORS = {
    'pendente': '#5C6478',
    'em_curso': '#FFC24B',
    'concluido': '#2ECC71',
}

# Heatmap cells, indexed by heat level 0..4
HEAT_COLORS = ('#1A1E28', '#123A7A', '#1A5AC8', '#1A6FFF', '#7FB0FF')

STATUS_LABELS = {
    'pendente': 'Pendente',
    'em_curso': 'Em curso',
    'concluido': 'Concluído',
}

FONTS = {
    'family': 'Inter, Manrope, Arial, sans-serif',
    'timer_size': 96,
    'button_size': 18,
    'text': 16,
    'text_strong': 22,
}


def stylesheet():
    """Application-wide QSS built from the tokens above."""
    return f"""
        QWidget {{ background: {COLORS['background']}; color: {COLORS['text']};
            font-family: {FONTS['family']}; font-size: {FONTS['text']}px; }}
        QListWidget {{ background: {COLORS['sidebar_bg']}; border: none; }}
        QListWidget::item:selected {{ background: {COLORS['sidebar_active_bg']};
            color: {COLORS['text_strong']}; border-left: 3px solid {COLORS['primary']}; }}
        QPushButton {{ background: {COLORS['primary']}; color: {COLORS['text_strong']};
            border: none; border-radius: 10px; padding: 10px 20px; font-size: {FONTS['button_size']}px; }}
        QPushButton:hover {{ background: {COLORS['primary_hover']}; }}
        QPushButton:disabled {{ background: {COLORS['border']}; color: {COLORS['text']}; }}
        QLabel#TimerLabel {{ font-size: {FONTS['timer_size']}px; font-weight: bold;
            color: {COLORS['text_strong']}; }}
        QLabel#PageTitle {{ font-size: {FONTS['text_strong']}px; font-weight: bold;
            color: {COLORS['text_strong']}; }}
        QLineEdit, QComboBox, QSpinBox, QTextEdit, QDateEdit {{ background: {COLORS['surface']};
            border: 1px solid {COLORS['border']}; border-radius: 8px; padding: 6px; }}
        QTableWidget {{ background: {COLORS['surface']}; gridline-color: {COLORS['border']}; }}
        QProgressBar {{ background: {COLORS['surface']}; border: none; border-radius: 6px;
            text-align: center; }}
        QFrame#StatCard {{ background: {COLORS['surface']}; border: 1px solid {COLORS['border']};
            border-radius: 12px; }}
        QLabel#StatValue {{ font-size: {FONTS['text_strong']}px; font-weight: bold;
            color: {COLORS['text_strong']}; background: transparent; }}
        QProgressBar::chunk {{ background: {COLORS['primary']}; border-radius: 6px; }}
    """
