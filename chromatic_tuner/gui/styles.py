"""
Colors and style sheets for the tuner window.
"""

WINDOW_BACKGROUND = "#1e1e1e"
PANEL_BACKGROUND = "#2a2a2a"
METER_BACKGROUND = "#333333"
BORDER_COLOR = "#444444"
TEXT_PRIMARY = "#f0f0f0"
TEXT_SECONDARY = "#8a8a8a"
ACCENT_GREEN = "#4caf50"
WARNING_ORANGE = "#ff9800"
ERROR_RED = "#f44336"

STATUS_COLORS = {
    "info": TEXT_SECONDARY,
    "success": ACCENT_GREEN,
    "error": ERROR_RED,
}

MAIN_WINDOW_STYLE = f"""
    QMainWindow, QWidget {{
        background-color: {WINDOW_BACKGROUND};
        color: {TEXT_PRIMARY};
    }}
    QLabel#noteLabel {{
        font-size: 96px;
        font-weight: bold;
    }}
    QLabel#frequencyLabel {{
        font-size: 18px;
        color: {TEXT_SECONDARY};
    }}
    QLabel#centsLabel {{
        font-size: 28px;
        font-weight: bold;
    }}
    QPushButton {{
        background-color: {PANEL_BACKGROUND};
        border: 1px solid {BORDER_COLOR};
        border-radius: 4px;
        padding: 6px 16px;
    }}
    QPushButton:disabled {{
        color: {TEXT_SECONDARY};
    }}
    QDoubleSpinBox {{
        background-color: {PANEL_BACKGROUND};
        border: 1px solid {BORDER_COLOR};
        padding: 2px 4px;
    }}
"""
