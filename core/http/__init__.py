"""HTTP helpers shared by admin routers."""

from core.http.response import DEFAULT_SUCCESS_MESSAGE, JsonResponder, ResponseConfig

__all__ = ["DEFAULT_SUCCESS_MESSAGE", "JsonResponder", "ResponseConfig"]
