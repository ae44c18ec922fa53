"""Theme colors and the character-by-character rendering of the target text."""

from __future__ import annotations

import html


class PracticeColors:
    """Light theme palette."""

    BG = "#f4f7fb"
    CARD_BG = "#ffffff"
    CARD_BORDER = "#dde3ec"

    PRIMARY = "#1e5fa8"
    PRIMARY_DARK = "#133f70"

    TEXT_PRIMARY = "#1d2733"
    TEXT_MUTED = "#7a8796"

    CORRECT = "#2e7d32"
    INCORRECT = "#c62828"
    INCORRECT_BG = "#fde2e2"
    CURRENT_BG = "#fff3c4"

    PASS = "#2e7d32"
    FAIL = "#e65100"


def accuracy_color(accuracy: float) -> str:
    """Red below 80 %, green at 100 %, blended in between."""
    t = (max(80.0, min(100.0, float(accuracy))) - 80.0) / 20.0
    low = PracticeColors.INCORRECT
    high = PracticeColors.CORRECT
    channels = []
    for start in (1, 3, 5):
        lo, hi = int(low[start:start + 2], 16), int(high[start:start + 2], 16)
        channels.append(int(lo + (hi - lo) * t))
    r, g, b = channels
    return f"#{r:02X}{g:02X}{b:02X}"


def render_target_html(target: str, typed: str) -> str:
    """Rich text for the target: typed characters colored by correctness,
    the next character highlighted, the rest muted."""
    parts = []
    for i, ch in enumerate(target):
        shown = "&nbsp;" if ch == " " else html.escape(ch)
        if i < len(typed):
            if typed[i] == ch:
                parts.append(f'<span style="color:{PracticeColors.CORRECT}">{shown}</span>')
            else:
                parts.append(
                    f'<span style="color:{PracticeColors.INCORRECT};'
                    f'background:{PracticeColors.INCORRECT_BG}">{shown}</span>'
                )
        elif i == len(typed):
            parts.append(
                f'<span style="color:{PracticeColors.TEXT_PRIMARY};'
                f'background:{PracticeColors.CURRENT_BG}">{shown}</span>'
            )
        else:
            parts.append(f'<span style="color:{PracticeColors.TEXT_MUTED}">{shown}</span>')
    return "".join(parts)
