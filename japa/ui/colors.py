"""Theme colors and color utilities for the UI."""


class TrainerColors:
    """Warm saffron palette for the trainer window."""

    BG_TOP = "#fff8e1"
    BG_MIDDLE = "#ffecb3"
    BG_BOTTOM = "#ffe0b2"

    PRIMARY = "#e65100"
    PRIMARY_LIGHT = "#ff9800"
    PRIMARY_DARK = "#bf360c"

    GOLD = "#ffb300"
    SILVER = "#9e9e9e"
    BRONZE = "#a1673a"
    MAROON = "#8d2b0b"

    CARD_BG = "rgba(255, 255, 255, 0.85)"
    CARD_BORDER = "rgba(255, 255, 255, 0.6)"

    TEXT_PRIMARY = "#3e2723"
    TEXT_SECONDARY = "#6d4c41"
    TEXT_MUTED = "#a1887f"

    SUCCESS = "#2e7d32"
    WARNING = "#c62828"

    PROGRESS_TRACK = "#fbe9e7"
    PROGRESS_FILL = "#ef6c00"

    BADGE_EARNED = "#ff8f00"
    BADGE_LOCKED = "#d7ccc8"


def blend_hex(a: str, b: str, t: float) -> str:
    """Blend two #RRGGBB colors. t=0 -> a, t=1 -> b."""
    a = a.strip()
    b = b.strip()
    if not (a.startswith("#") and b.startswith("#") and len(a) == 7 and len(b) == 7):
        return a
    try:
        ar, ag, ab = int(a[1:3], 16), int(a[3:5], 16), int(a[5:7], 16)
        br, bg, bb = int(b[1:3], 16), int(b[3:5], 16), int(b[5:7], 16)
    except ValueError:
        return a
    t = max(0.0, min(1.0, float(t)))
    r = int(ar + (br - ar) * t)
    g = int(ag + (bg - ag) * t)
    bl = int(ab + (bb - ab) * t)
    return f"#{r:02X}{g:02X}{bl:02X}"


def accuracy_color(accuracy: int) -> str:
    """Progress fill for the live accuracy bar: muted when low, green at 100."""
    if accuracy >= 100:
        return TrainerColors.SUCCESS
    return blend_hex(TrainerColors.TEXT_MUTED, TrainerColors.PRIMARY, accuracy / 100.0)
