from rich.theme import Theme
from rich.console import Console
from rich.style import Style
from rich.text import Text

API_BLUE = "#2563EB"
ACCENT_AMBER = "#F59E0B"
SUCCESS_GREEN = "#27AE60"
ERROR_RED = "#C0392B"
INFO_BLUE = "#3498DB"
MUTED_GRAY = "#7F8C8D"
TEXT_WHITE = "#FFFFFF"

DEFAULT_THEME = Theme(
    {
        "primary": Style(color=API_BLUE, bold=True),
        "secondary": Style(color=ACCENT_AMBER, bold=True),
        "success": Style(color=SUCCESS_GREEN),
        "error": Style(color=ERROR_RED, bold=True),
        "info": Style(color=INFO_BLUE),
        "muted": Style(color=MUTED_GRAY),
        "code": Style(color=TEXT_WHITE),
        "option_label": Style(color=ACCENT_AMBER, bold=True),
        "option_text": Style(color=TEXT_WHITE),
        "title": Style(color=API_BLUE, bold=True),
        "subtitle": Style(color=MUTED_GRAY),
    }
)

CONSOLE = Console(theme=DEFAULT_THEME)


def get_difficulty_style(difficulty: str) -> Style:
    """Get color style for an exercise difficulty badge."""
    styles = {
        "easy": Style(color=SUCCESS_GREEN, bold=True),
        "medium": Style(color=ACCENT_AMBER, bold=True),
        "hard": Style(color=ERROR_RED, bold=True),
    }
    return styles.get(difficulty.lower(), Style())


def get_method_style(method: str) -> Style:
    """Get style for an HTTP method label."""
    styles = {
        "GET": Style(color=SUCCESS_GREEN, bold=True),
        "POST": Style(color=INFO_BLUE, bold=True),
        "PUT": Style(color=ACCENT_AMBER, bold=True),
        "PATCH": Style(color=ACCENT_AMBER, bold=True),
        "DELETE": Style(color=ERROR_RED, bold=True),
    }
    return styles.get(method.upper(), Style())


def get_status_style(status: int) -> Style:
    """Get style for an HTTP status code (0 means the request never completed)."""
    if 200 <= status < 300:
        return Style(color=SUCCESS_GREEN, bold=True)
    elif 300 <= status < 400:
        return Style(color=INFO_BLUE, bold=True)
    elif 400 <= status < 500:
        return Style(color=ACCENT_AMBER, bold=True)
    else:
        return Style(color=ERROR_RED, bold=True)


def get_timer_style(remaining: int, limit: int) -> Style:
    """Timer turns amber under a third of the limit and red under 30 seconds."""
    if remaining <= 30:
        return Style(color=ERROR_RED, bold=True)
    elif remaining * 3 <= limit:
        return Style(color=ACCENT_AMBER, bold=True)
    else:
        return Style(color=MUTED_GRAY)


def format_time(seconds: int) -> str:
    """Format seconds as M:SS."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes}:{secs:02d}"


def create_welcome_banner() -> Text:
    """Create the welcome banner text."""
    banner = Text()
    banner.append("╔══════════════════════════════════════╗\n", Style(color=API_BLUE))
    banner.append("║         { REST }  API Tutor          ║\n", Style(color=ACCENT_AMBER, bold=True))
    banner.append("╚══════════════════════════════════════╝", Style(color=API_BLUE))
    return banner
