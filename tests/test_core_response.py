"""
Unit Tests for core.http.response module.

Tests ResponseConfig and the JsonResponder envelope constructors.
"""

import json
from datetime import datetime

import pytest


def _body(response) -> dict:
    return json.loads(response.body)


class TestResponseConfig:
    """Tests for ResponseConfig."""

    def test_defaults_disable_cors(self):
        from core.http import ResponseConfig

        assert ResponseConfig().cors_headers() == {}

    def test_from_mapping_parses_strings(self):
        from core.http import ResponseConfig

        config = ResponseConfig.from_mapping({
            "is_allow_origin": "true",
            "allow_origin": "https://panel.example.com",
            "allow_credentials": "1",
            "max_age": "86400",
        })

        assert config.is_allow_origin is True
        assert config.allow_credentials is True
        assert config.max_age == "86400"

    def test_cors_headers(self):
        from core.http import ResponseConfig

        headers = ResponseConfig(
            is_allow_origin=True,
            allow_origin="*",
            allow_credentials=False,
            max_age="",
        ).cors_headers()

        assert headers["Access-Control-Allow-Origin"] == "*"
        assert headers["Access-Control-Allow-Credentials"] == "false"
        assert "Access-Control-Max-Age" not in headers
        assert "Authorization" in headers["Access-Control-Allow-Headers"]


class TestJsonResponder:
    """Tests for JsonResponder."""

    @pytest.fixture
    def responder(self):
        from core.http import JsonResponder

        return JsonResponder()

    def test_success_envelope(self, responder):
        from core.http import DEFAULT_SUCCESS_MESSAGE

        response = responder.success(data={"id": 1})

        assert response.status_code == 200
        assert _body(response) == {
            "success": True,
            "code": 0,
            "message": DEFAULT_SUCCESS_MESSAGE,
            "data": {"id": 1},
        }

    def test_error_envelope(self, responder):
        response = responder.error("账号或者密码错误")

        assert response.status_code == 200
        assert _body(response) == {
            "success": False,
            "code": 1,
            "message": "账号或者密码错误",
            "data": {},
        }

    def test_error_with_status(self, responder):
        response = responder.error("token 错误", code=401, status_code=401)

        assert response.status_code == 401
        assert _body(response)["code"] == 401

    def test_message_none_becomes_empty(self, responder):
        assert _body(responder.error(None))["message"] == ""

    def test_data_is_json_encoded(self, responder):
        from core.schemas.auth import TokenData

        response = responder.success(data={
            "token": TokenData(access_token="a.b.c", expires_in=60),
            "at": datetime(2024, 1, 2, 3, 4, 5),
        })

        data = _body(response)["data"]
        assert data["token"]["token_type"] == "bearer"
        assert data["at"] == "2024-01-02T03:04:05"

    def test_cors_headers_are_attached(self):
        from core.http import JsonResponder, ResponseConfig

        responder = JsonResponder(ResponseConfig(is_allow_origin=True, allow_origin="*"))
        response = responder.json(True, 0, "ok", headers={"X-Extra": "1"})

        assert response.headers["access-control-allow-origin"] == "*"
        assert response.headers["x-extra"] == "1"
