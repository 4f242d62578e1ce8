"""
UI/view constants centralized for reuse across view modules.
"""

from __future__ import annotations

from PySide6.QtGui import QColor

# Card geometry
CARD_MARGIN_PX: int = 20
CARD_HEIGHT_RATIO: float = 0.75
CARD_RADIUS_PX: int = 20

# Indicator overlays
KEEP_TEXT: str = "KEEP"
DELETE_TEXT: str = "DELETE"
KEEP_COLOR: QColor = QColor("#4CAF50")
DELETE_COLOR: QColor = QColor("#F44336")
INDICATOR_TOP_PX: int = 100
INDICATOR_SIDE_PX: int = 50
INDICATOR_TILT_DEG: float = 15.0
INDICATOR_FONT_PT: int = 24

# Animation
EXIT_ANIMATION_MS: int = 200
RESET_ANIMATION_MS: int = 150
VELOCITY_WINDOW_S: float = 0.1

# Colors
BACKGROUND_COLOR: str = "#000"
TEXT_COLOR: str = "#fff"
SUBTITLE_COLOR: str = "#ccc"

# Status bar
NOTICE_TIMEOUT_MS: int = 5000
