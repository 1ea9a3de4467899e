"""
Logging configuration for readit

Includes IndentLogger for tree-style output of resolution passes.
"""

import io
import logging
import sys
import threading
from contextlib import contextmanager


class IndentState(threading.local):
    """Per-thread indentation state for hierarchical logging"""

    _tree_chars = {
        "pipe": "│",
        "branch": "├──",
        "leaf": "└──",
    }

    def __init__(self) -> None:
        self.level = 0
        self.active: set[int] = set()

    def increase(self) -> None:
        """Open a nested block"""
        self.level += 1
        self.active.add(self.level - 1)

    def decrease(self) -> None:
        """Close the innermost block"""
        if self.level > 0:
            self.active.discard(self.level - 1)
            self.level -= 1

    def reset(self) -> None:
        """Reset indentation state (useful for tests)"""
        self.level = 0
        self.active = set()

    def prefix(self) -> str:
        """Tree characters for the current depth"""
        if self.level == 0:
            return ""

        parts = []
        for i in range(self.level - 1):
            parts.append(f"{self._tree_chars['pipe']}   " if i in self.active else "    ")

        is_end = (self.level - 1) not in self.active
        parts.append(self._tree_chars["leaf"] if is_end else self._tree_chars["branch"])
        return "".join(parts)


_state = IndentState()


class IndentLogger:
    """Logger wrapper that prefixes messages with the current tree indent"""

    def __init__(self, base_logger: logging.Logger) -> None:
        self._logger = base_logger

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._logger.debug(f"{self.indent}{msg}", *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._logger.info(f"{self.indent}{msg}", *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._logger.warning(f"{self.indent}{msg}", *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._logger.error(f"{self.indent}{msg}", *args, **kwargs)

    def is_enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    @property
    def indent(self) -> str:
        return _state.prefix()

    @contextmanager
    def indent_block(self, initial_message: str | None = None):
        """
        Context manager for a nested block of log lines

        Args:
            initial_message: Optional message to log at block start
        """
        if initial_message:
            self.debug(initial_message)
        _state.increase()
        try:
            yield
        finally:
            _state.decrease()


def reset_indent() -> None:
    """Reset the calling thread's indentation"""
    _state.reset()


def setup_logging(level=logging.INFO):
    """
    Configure logging for readit

    Args:
        level: Logging level (default: INFO)

    Returns:
        IndentLogger: Configured logger with indentation support
    """
    base_logger = logging.getLogger("readit")
    base_logger.setLevel(level)
    base_logger.handlers = []

    # UTF-8 stream so tree characters survive cp1252 consoles
    stream = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)8s %(message)s"))
    base_logger.addHandler(handler)

    return IndentLogger(base_logger)


logger = IndentLogger(logging.getLogger("readit"))
