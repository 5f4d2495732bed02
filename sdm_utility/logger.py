# -*- coding: utf-8 -*-
"""
Logging for the SDM utility pipeline.

Features:
- Plain or colored console output
- Clean rotating debug log file (no ANSI codes)
- Hierarchical module loggers under a single package root
- Phase timing for pipeline steps
"""

import logging
import logging.handlers
import os
import re
import sys
import threading
import time
from pathlib import Path
from typing import Optional, Dict, Any, List, Union


# =============================================================================
# Constants
# =============================================================================

LOG_NAME = "sdm_utility"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_DATE_FORMAT = "%H:%M:%S"
MAX_LOG_SIZE = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 3


# =============================================================================
# ANSI Colors
# =============================================================================

class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    BRIGHT_RED = "\033[91m"

    ANSI_PATTERN = re.compile(r'\033\[[0-9;]*m')

    @classmethod
    def strip(cls, text: str) -> str:
        """Remove all ANSI codes from text."""
        return cls.ANSI_PATTERN.sub('', text)

    @classmethod
    def supports_color(cls) -> bool:
        """Check if the attached terminal supports colors."""
        if os.getenv("NO_COLOR"):
            return False
        if os.getenv("FORCE_COLOR"):
            return True
        return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


# =============================================================================
# Formatters and handlers
# =============================================================================

class ColoredFormatter(logging.Formatter):
    """Formatter with level-based ANSI colors for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BRIGHT_RED + Colors.BOLD,
    }

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None,
                 use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and Colors.supports_color()

    def format(self, record: logging.LogRecord) -> str:
        record = logging.makeLogRecord(record.__dict__)
        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, "")
            record.levelname = f"{color}{Colors.BOLD}{record.levelname:8}{Colors.RESET}"
            record.msg = f"{color}{record.msg}{Colors.RESET}"
        return super().format(record)


class CleanFormatter(logging.Formatter):
    """Formatter that strips ANSI codes, for files and plain consoles."""

    def format(self, record: logging.LogRecord) -> str:
        record = logging.makeLogRecord(record.__dict__)
        if isinstance(record.msg, str):
            record.msg = Colors.strip(record.msg)
        return super().format(record)


class SafeRotatingFileHandler(logging.handlers.RotatingFileHandler):
    """Rotating file handler serialising emits across threads."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._emit_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        with self._emit_lock:
            try:
                super().emit(record)
            except Exception:
                self.handleError(record)


# =============================================================================
# Phase tracking
# =============================================================================

class ProgressLogger:
    """
    Context manager logging start, completion and failure of a pipeline phase.

    Example:
        with ProgressLogger(logger, "Phase 1: Data Loading") as progress:
            table = loader.load_rankings(path)
            progress.log_step(f"{table.n_alternatives} alternatives")
    """

    def __init__(self, logger: logging.Logger, operation: str):
        self.logger = logger
        self.operation = operation
        self.start_time = 0.0
        self.elapsed = 0.0
        self.status = "pending"

    def __enter__(self) -> 'ProgressLogger':
        self.start_time = time.time()
        self.status = "running"
        self.logger.info(f"▶ Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.elapsed = time.time() - self.start_time
        if exc_type is None:
            self.status = "completed"
            self.logger.info(f"✓ Completed: {self.operation} ({self.elapsed:.2f}s)")
        else:
            self.status = "failed"
            self.logger.error(
                f"✗ Failed: {self.operation} ({self.elapsed:.2f}s) - "
                f"{exc_type.__name__}: {exc_val}"
            )
        return False

    def log_step(self, step_name: str, status: str = "done") -> None:
        icons = {"done": "✓", "skip": "⊘", "warn": "⚡", "fail": "✗"}
        self.logger.info(f"  {icons.get(status, '•')} {step_name}")


# =============================================================================
# Logger Factory
# =============================================================================

class LoggerFactory:
    """Centralised logger configuration and lookup."""

    _loggers: Dict[str, logging.Logger] = {}
    _root_logger: Optional[logging.Logger] = None

    @classmethod
    def setup(
        cls,
        name: str = LOG_NAME,
        level: Union[int, str] = logging.INFO,
        log_file: Optional[Path] = None,
        console: bool = True,
        use_colors: bool = False,
        console_level: Optional[Union[int, str]] = None,
        max_bytes: int = MAX_LOG_SIZE,
        backup_count: int = BACKUP_COUNT,
    ) -> logging.Logger:
        """
        Setup and configure the package root logger.

        Parameters
        ----------
        name : str
            Logger name
        level : int or str
            Logger level
        log_file : Path, optional
            Rotating debug log; always written at DEBUG level
        console : bool
            Enable console output
        use_colors : bool
            Enable ANSI colors on the console
        console_level : int or str, optional
            Console threshold, defaults to ``level``

        Returns
        -------
        logging.Logger
        """
        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.INFO)

        logger = logging.getLogger(name)
        logger.setLevel(level)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        logger.propagate = False

        if console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(console_level if console_level is not None else level)
            if use_colors:
                console_fmt = ColoredFormatter(
                    fmt='%(asctime)s │ %(levelname)s │ %(message)s',
                    datefmt=CONSOLE_DATE_FORMAT,
                )
            else:
                console_fmt = CleanFormatter(
                    fmt='%(asctime)s | %(levelname)-8s | %(message)s',
                    datefmt=CONSOLE_DATE_FORMAT,
                )
            console_handler.setFormatter(console_fmt)
            logger.addHandler(console_handler)

        if log_file:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = SafeRotatingFileHandler(
                log_file, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(CleanFormatter(
                fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s',
                datefmt=DEFAULT_DATE_FORMAT,
            ))
            logger.addHandler(file_handler)

        cls._root_logger = logger
        cls._loggers[name] = logger
        return logger

    @classmethod
    def get_logger(cls, name: str = LOG_NAME) -> logging.Logger:
        """Get a logger, creating it beneath the package root if needed."""
        if name in cls._loggers:
            return cls._loggers[name]

        root_name = cls._root_logger.name if cls._root_logger else LOG_NAME
        if name == root_name or name.startswith(root_name + "."):
            logger = logging.getLogger(name)
        else:
            logger = logging.getLogger(f"{root_name}.{name}")

        cls._loggers[name] = logger
        return logger

    @classmethod
    def get_module_logger(cls, module_name: str) -> logging.Logger:
        """Get a logger for a module, e.g. ``'mcdm.utility'``."""
        root_name = cls._root_logger.name if cls._root_logger else LOG_NAME
        return cls.get_logger(f"{root_name}.{module_name}")


# =============================================================================
# Convenience Functions
# =============================================================================

def setup_logger(
    name: str = LOG_NAME,
    level: int = logging.INFO,
    console: bool = True,
    debug_file: Optional[Path] = None,
    use_colors: bool = False,
) -> logging.Logger:
    """
    Setup logging: console at ``level``, everything at DEBUG to ``debug_file``.
    """
    return LoggerFactory.setup(
        name=name,
        level=logging.DEBUG,
        log_file=debug_file,
        console=console,
        use_colors=use_colors,
        console_level=level,
    )


def get_logger(name: str = LOG_NAME) -> logging.Logger:
    return LoggerFactory.get_logger(name)


def get_module_logger(module_name: str) -> logging.Logger:
    return LoggerFactory.get_module_logger(module_name)


# =============================================================================
# Pipeline-Specific Utilities
# =============================================================================

class PipelineLogger:
    """Structured logging of banners, metrics and rankings."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def banner(self, title: str, char: str = "═", width: int = 60) -> None:
        self.logger.info(char * width)
        self.logger.info(title.center(width))
        self.logger.info(char * width)

    def metric(self, name: str, value: Any, unit: str = "") -> None:
        value_str = f"{value:.4f}" if isinstance(value, float) else str(value)
        suffix = f" {unit}" if unit else ""
        self.logger.info(f"  • {name}: {value_str}{suffix}")

    def metrics(self, metrics_dict: Dict[str, Any]) -> None:
        for name, value in metrics_dict.items():
            self.metric(name, value)

    def ranking(self, rankings: List[tuple], title: str = "Rankings", top_n: int = 5) -> None:
        self.logger.info(f"  {title} (Top {top_n}):")
        for i, (entity, score) in enumerate(rankings[:top_n], 1):
            self.logger.info(f"    {i}. {entity}: {score:.4f}")


__all__ = [
    'setup_logger',
    'get_logger',
    'get_module_logger',
    'LoggerFactory',
    'ProgressLogger',
    'PipelineLogger',
    'Colors',
    'ColoredFormatter',
    'CleanFormatter',
    'SafeRotatingFileHandler',
    'LOG_NAME',
]
