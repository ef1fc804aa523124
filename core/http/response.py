"""
JSON Response Envelope.

Every admin API answers with the same envelope:

    {"success": bool, "code": int, "message": str, "data": ...}

JsonResponder builds these as FastAPI JSONResponse objects and, when enabled
in the ``response.json`` configuration, attaches CORS headers.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


DEFAULT_SUCCESS_MESSAGE = "获取成功"


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass(frozen=True)
class ResponseConfig:
    """CORS settings applied to JSON responses."""

    is_allow_origin: bool = False
    allow_origin: str = "*"
    allow_credentials: bool = False
    max_age: str = ""
    allow_methods: str = "GET,POST,PATCH,PUT,DELETE,OPTIONS"
    allow_headers: str = "X-Requested-With,X-Token,Content-Type,Authorization"

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "ResponseConfig":
        """Build from the ``response.json`` config section."""
        mapping = dict(mapping or {})
        defaults = cls()
        return cls(
            is_allow_origin=_as_bool(mapping.get("is_allow_origin", defaults.is_allow_origin)),
            allow_origin=str(mapping.get("allow_origin", defaults.allow_origin) or ""),
            allow_credentials=_as_bool(
                mapping.get("allow_credentials", defaults.allow_credentials)
            ),
            max_age=str(mapping.get("max_age", defaults.max_age) or ""),
            allow_methods=str(mapping.get("allow_methods", defaults.allow_methods) or ""),
            allow_headers=str(mapping.get("allow_headers", defaults.allow_headers) or ""),
        )

    def cors_headers(self) -> Dict[str, str]:
        """CORS headers to attach, empty when cross-origin is disabled."""
        if not self.is_allow_origin:
            return {}

        headers = {
            "Access-Control-Allow-Origin": self.allow_origin,
            "Access-Control-Allow-Credentials": "true" if self.allow_credentials else "false",
            "Access-Control-Max-Age": self.max_age,
            "Access-Control-Allow-Methods": self.allow_methods,
            "Access-Control-Allow-Headers": self.allow_headers,
        }
        return {name: value for name, value in headers.items() if value}


class JsonResponder:
    """Builds enveloped JSON responses."""

    def __init__(self, config: Optional[ResponseConfig] = None) -> None:
        self._config = config or ResponseConfig()

    @property
    def config(self) -> ResponseConfig:
        return self._config

    def json(
        self,
        success: bool,
        code: int,
        message: Optional[str],
        data: Any = None,
        status_code: int = 200,
        headers: Optional[Mapping[str, str]] = None,
    ) -> JSONResponse:
        """
        Build an enveloped response.

        Args:
            success: Whether the request succeeded.
            code: Application result code (0 on success).
            message: Human-readable message.
            data: Payload, passed through jsonable_encoder.
            status_code: HTTP status code.
            headers: Extra headers, applied after the CORS headers.
        """
        body = {
            "success": success,
            "code": code,
            "message": message or "",
            "data": jsonable_encoder(data),
        }

        response_headers = self._config.cors_headers()
        if headers:
            response_headers.update(headers)

        return JSONResponse(content=body, status_code=status_code, headers=response_headers)

    def success(
        self,
        message: str = DEFAULT_SUCCESS_MESSAGE,
        data: Any = None,
        code: int = 0,
    ) -> JSONResponse:
        """Successful envelope."""
        return self.json(True, code, message, data)

    def error(
        self,
        message: Optional[str] = None,
        code: int = 1,
        data: Any = None,
        status_code: int = 200,
    ) -> JSONResponse:
        """Failed envelope; ``data`` defaults to an empty dict."""
        return self.json(False, code, message, {} if data is None else data, status_code)
