"""
Logging setup for the API.

- Compact console format: HH:MM:SS.mmm | LVL | logger | [rid] | message
- Request ID tracking through a ContextVar
- Optional ANSI colours when attached to a TTY
"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime

_request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BRIGHT_RED = "\033[91m"
    BRIGHT_BLUE = "\033[94m"


# Level -> (color, short_name)
LEVEL_STYLES = {
    logging.DEBUG: (Colors.CYAN, "DBG"),
    logging.INFO: (Colors.GREEN, "INF"),
    logging.WARNING: (Colors.YELLOW, "WRN"),
    logging.ERROR: (Colors.RED, "ERR"),
    logging.CRITICAL: (Colors.BRIGHT_RED + Colors.BOLD, "CRT"),
}


class RequestIdFilter(logging.Filter):
    """Adds request_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id_ctx.get() or "-"
        return True


class ConsoleFormatter(logging.Formatter):
    """Formatter for console output, coloured when the terminal supports it."""

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and _supports_color()

    def format(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        time_str = dt.strftime("%H:%M:%S") + f".{int(record.msecs):03d}"
        color, short_level = LEVEL_STYLES.get(record.levelno, (Colors.WHITE, record.levelname[:3]))
        rid = getattr(record, "request_id", "-")

        if self.use_colors:
            parts = [
                f"{Colors.DIM}{time_str}{Colors.RESET}",
                f"{color}{short_level:>3}{Colors.RESET}",
                f"{Colors.BRIGHT_BLUE}{record.name:<25}{Colors.RESET}",
                f"{Colors.DIM}[{rid}]{Colors.RESET}",
                record.getMessage(),
            ]
        else:
            parts = [time_str, f"{short_level:>3}", f"{record.name:<25}", f"[{rid}]", record.getMessage()]

        formatted = " | ".join(parts)
        if record.exc_info:
            formatted += "\n" + self.formatException(record.exc_info)
        return formatted


def _supports_color() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def set_request_id(rid: str | None) -> None:
    _request_id_ctx.set(rid)


def setup_logging(level: str = "INFO", use_colors: bool = True) -> None:
    """Configure the root logger with a single console handler."""
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ConsoleFormatter(use_colors=use_colors))
    console.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.setLevel(level.upper())
    root.handlers.clear()
    root.addHandler(console)

    # Quiet noisy libraries
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging initialized: level=%s, colors=%s", level, use_colors)
