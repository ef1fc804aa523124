"""
AppContext - Configuration and shared runtime state.

ConfigLoader turns environment variables (optionally from a .env file) into a
nested configuration dict. AppContext wraps it together with the event log
that extensions write to while booting.
"""
from typing import Any, Dict, Optional
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
import os
import logging

from dotenv import load_dotenv


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_key(name: str) -> str:
    """Read PEM key material from NAME, or from the file named by NAME_FILE."""
    value = os.getenv(name, "")
    if value:
        # .env files commonly store PEM blocks with literal \n
        return value.replace("\\n", "\n")

    key_file = os.getenv(f"{name}_FILE", "")
    if key_file:
        path = Path(key_file)
        if path.is_file():
            return path.read_text(encoding="utf-8")
        logging.getLogger(__name__).warning(f"{name}_FILE points to a missing file: {key_file}")
    return ""


@dataclass
class ConfigLoader:
    """Configuration loader from environment variables."""

    _config: Dict[str, Any] = field(default_factory=dict)

    def load(self, env_path: Optional[str] = None) -> "ConfigLoader":
        """Load configuration from .env file."""
        if env_path:
            load_dotenv(env_path)
        else:
            # Try to find .env in project root
            project_root = Path(__file__).parent.parent
            env_file = project_root / ".env"
            if env_file.exists():
                load_dotenv(env_file)

        self._config = {
            "server": {
                "host": os.getenv("SERVER_HOST", "127.0.0.1"),
                "port": int(os.getenv("SERVER_PORT", "8000")),
                "base_url": os.getenv("BASE_URL", "")
            },
            "app": {
                "debug": _env_bool("APP_DEBUG", "true"),
                "log_level": os.getenv("APP_LOG_LEVEL", "INFO"),
                "https": _env_bool("APP_HTTPS") or _env_bool("APP_SECURE"),
            },
            "jwt": {
                "alg": os.getenv("JWT_ALG", "HS256"),
                "iss": os.getenv("JWT_ISS", ""),
                "aud": os.getenv("JWT_AUD", ""),
                "sub": os.getenv("JWT_SUB", ""),
                "jti": os.getenv("JWT_JTI", ""),
                "exptime": os.getenv("JWT_EXPTIME", "3600"),
                "notbeforetime": os.getenv("JWT_NOTBEFORETIME", "0"),
                "signer_type": os.getenv("JWT_SIGNER_TYPE", "symmetric"),
                "secrect": os.getenv("JWT_SECRECT", ""),
                "private_key": _env_key("JWT_PRIVATE_KEY"),
                "public_key": _env_key("JWT_PUBLIC_KEY"),
            },
            "response": {
                "json": {
                    "is_allow_origin": _env_bool("RESPONSE_IS_ALLOW_ORIGIN"),
                    "allow_origin": os.getenv("RESPONSE_ALLOW_ORIGIN", "*"),
                    "allow_credentials": _env_bool("RESPONSE_ALLOW_CREDENTIALS"),
                    "max_age": os.getenv("RESPONSE_MAX_AGE", ""),
                    "allow_methods": os.getenv(
                        "RESPONSE_ALLOW_METHODS", "GET,POST,PATCH,PUT,DELETE,OPTIONS"
                    ),
                    "allow_headers": os.getenv(
                        "RESPONSE_ALLOW_HEADERS",
                        "X-Requested-With,X-Token,Content-Type,Authorization",
                    ),
                }
            },
            "admin": {
                "username": os.getenv("ADMIN_USERNAME", "admin"),
                "password_hash": os.getenv("ADMIN_PASSWORD_HASH", ""),
            },
            "extension": {
                "dir": os.getenv("EXTENSION_DIR", "extensions"),
            },
        }
        return self

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot notation key."""
        keys = key.split('.')
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def is_jwt_configured(self) -> bool:
        """Check if JWT key material is set for the configured signer."""
        if str(self.get("jwt.signer_type", "")).lower() == "asymmetric":
            return bool(self.get("jwt.private_key") and self.get("jwt.public_key"))
        return bool(self.get("jwt.secrect"))

    def is_login_configured(self) -> bool:
        """Check if an admin password hash is set."""
        return bool(self.get("admin.password_hash"))


class AppContext:
    """
    Application Context - configuration plus the boot event log.
    """

    def __init__(self, config: Optional[ConfigLoader] = None) -> None:
        self._logger = logging.getLogger(__name__)
        if config is None:
            config = ConfigLoader().load()
        self._config_loader = config

        # Event log for status display
        self._event_log: list[str] = []
        self._max_log_entries: int = 500

    @property
    def config(self) -> ConfigLoader:
        """Access the configuration loader."""
        return self._config_loader

    def log_event(self, message: str, level: str = "INFO") -> None:
        """Log an event to both logger and event log."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        formatted = f"[{timestamp}] [{level}] {message}"

        self._event_log.append(formatted)
        if len(self._event_log) > self._max_log_entries:
            self._event_log = self._event_log[-self._max_log_entries:]

        self._logger.info(message)

    def get_event_log(self) -> list[str]:
        """Get the current event log."""
        return self._event_log.copy()
