"""
Logging Configuration Module.

Provides centralized logging setup with rotating file handler.
Logs are saved to the project's logs directory.
Includes automatic masking of sensitive data (secrets, passwords, tokens, keys).
"""

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys


# --- Constants ---
LOG_FILENAME = "larke_admin.log"
MAX_BYTES = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# --- Sensitive Data Patterns ---
# Patterns for data that should be masked in logs
SENSITIVE_PATTERNS = [
    # PEM blocks (private or public keys pasted into config dumps)
    (
        re.compile(
            r"-----BEGIN ([A-Z ]*)KEY-----.*?-----END \1KEY-----",
            re.DOTALL
        ),
        r"[PEM:***]"
    ),
    # Bearer tokens in headers (including full JWT with dots)
    (
        re.compile(r"(Bearer\s+)([A-Za-z0-9\-_\.]+)", re.IGNORECASE),
        r"\1***"
    ),
    # Key-value pairs with sensitive keys (password=xxx, secrect: xxx, etc.)
    (
        re.compile(
            r"(password_hash|password|secrect|secret|token|access_token|refresh_token|"
            r"api_key|apikey|authorization|cookie|credential|private_key)"
            r"\s*[:=]\s*['\"]?([^'\"\s&]+)['\"]?",
            re.IGNORECASE
        ),
        r"\1=***"
    ),
    # JWT tokens standalone (eyJ...)
    (
        re.compile(r"\b(eyJ[A-Za-z0-9\-_]+\.eyJ[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+)\b"),
        r"[JWT:***]"
    ),
    # URL query parameters with sensitive names
    (
        re.compile(
            r"([?&])(token|key|secret|password|api_key|apikey|access_token)=([^&\s]+)",
            re.IGNORECASE
        ),
        r"\1\2=***"
    ),
]


class SensitiveDataFormatter(logging.Formatter):
    """
    Custom log formatter that masks sensitive data.

    Automatically detects and masks:
    - Passwords, secrets, tokens and key material
    - Authorization headers (Bearer tokens) and standalone JWTs
    - PEM key blocks
    - Sensitive URL query parameters
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, masking any sensitive data."""
        original_msg = super().format(record)

        masked_msg = original_msg
        for pattern, replacement in SENSITIVE_PATTERNS:
            masked_msg = pattern.sub(replacement, masked_msg)

        return masked_msg


def get_log_path() -> Path:
    """Get the path for log files, creating the logs directory if needed."""
    project_root = Path(__file__).resolve().parent.parent
    logs_dir = project_root / "logs"
    logs_dir.mkdir(exist_ok=True)

    return logs_dir / LOG_FILENAME


def setup_logging(log_level: int | str = logging.INFO, to_file: bool = True) -> None:
    """
    Configure application logging with rotation.

    Args:
        log_level: The logging level, as an int or a level name.
        to_file: Whether to add the rotating file handler.
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()

    formatter = SensitiveDataFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # --- File Handler (Rotating) ---
    if to_file:
        log_file_path = get_log_path()
        file_handler = RotatingFileHandler(
            filename=str(log_file_path),
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        root_logger.info(f"Logging initialized. Log file: {log_file_path}")

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Suppress noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
