# =============================================================================
# tests/test_body_parsers.py - Body Parsing Middleware Tests
# =============================================================================
# Parsed bodies must reach downstream handlers through request.state.body.
# =============================================================================

import pytest
from fastapi.testclient import TestClient

from yatra.config import Settings
from yatra.main import create_app
from yatra.middleware.body_parsers import parse_content_type

from tests.conftest import build_test_router


class TestParseContentType:
    """Content-Type header splitting."""

    def test_plain(self):
        assert parse_content_type("application/json") == ("application/json", {})

    def test_with_charset(self):
        media_type, params = parse_content_type('Application/JSON; Charset="UTF-8"')

        assert media_type == "application/json"
        assert params == {"charset": "UTF-8"}

    def test_empty(self):
        assert parse_content_type("") == ("", {})


class TestJSONBody:
    """application/json bodies."""

    def test_object_is_available_downstream(self, client):
        payload = {"name": "Patratu Valley Stay", "rooms": 4, "amenities": ["wifi", "meals"]}

        response = client.post("/api/echo", json=payload)

        assert response.status_code == 200
        assert response.json() == {"body": payload}

    def test_array_body(self, client):
        response = client.post("/api/echo", json=[1, 2, 3])

        assert response.json() == {"body": [1, 2, 3]}

    def test_empty_body_is_empty_object(self, client):
        response = client.post("/api/echo", content=b"", headers={"Content-Type": "application/json"})

        assert response.status_code == 200
        assert response.json() == {"body": {}}

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_json_constants_rejected(self, client, literal):
        response = client.post(
            "/api/echo",
            content=f'{{"rating": {literal}}}'.encode(),
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}

    def test_strict_rejects_top_level_primitive(self, client):
        response = client.post("/api/echo", content=b'"hello"', headers={"Content-Type": "application/json"})

        assert response.status_code == 500

    def test_non_strict_accepts_top_level_primitive(self):
        app = create_app(router=build_test_router(), settings=Settings(_env_file=None, json_strict=False))
        with TestClient(app) as client:
            response = client.post("/api/echo", content=b"42", headers={"Content-Type": "application/json"})

        assert response.json() == {"body": 42}

    def test_charset_parameter(self, client):
        response = client.post(
            "/api/echo",
            content='{"village": "Ghāṭśilā"}'.encode("utf-16"),
            headers={"Content-Type": "application/json; charset=utf-16"},
        )

        assert response.json() == {"body": {"village": "Ghāṭśilā"}}

    def test_raw_body_still_readable(self, client):
        response = client.post(
            "/api/raw",
            content=b'{"guide": "Ravi"}',
            headers={"Content-Type": "application/json"},
        )

        assert response.json() == {"raw": '{"guide": "Ravi"}', "body": {"guide": "Ravi"}}


class TestURLEncodedBody:
    """application/x-www-form-urlencoded bodies."""

    def _post(self, client, body: str):
        return client.post(
            "/api/echo",
            content=body.encode(),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

    def test_indexed_array(self, client):
        response = self._post(client, "a[0]=1&a[1]=2")

        assert response.status_code == 200
        assert response.json() == {"body": {"a": ["1", "2"]}}

    def test_nested_object(self, client):
        response = self._post(client, "booking[guest]=Asha&booking[dates][]=2024-03-01&booking[dates][]=2024-03-02")

        assert response.json() == {
            "body": {"booking": {"guest": "Asha", "dates": ["2024-03-01", "2024-03-02"]}}
        }

    def test_flat_mode(self):
        app = create_app(router=build_test_router(), settings=Settings(_env_file=None, urlencoded_extended=False))
        with TestClient(app) as client:
            response = self._post(client, "a[0]=1&a[1]=2&q=x&q=y")

        assert response.json() == {"body": {"a[0]": "1", "a[1]": "2", "q": ["x", "y"]}}

    def test_parameter_limit(self):
        app = create_app(router=build_test_router(), settings=Settings(_env_file=None, parameter_limit=2))
        with TestClient(app, raise_server_exceptions=False) as client:
            response = self._post(client, "a=1&b=2&c=3")

        assert response.status_code == 500

    def test_too_deep_key_returns_500(self, client):
        response = self._post(client, "a" + "[b]" * 33 + "=1")

        assert response.status_code == 500

    def test_leading_bracket_key(self, client):
        response = self._post(client, "[guide]=Ravi")

        assert response.json() == {"body": {"guide": "Ravi"}}


class TestOtherBodies:
    """Bodies neither parser handles."""

    def test_plain_text_leaves_empty_body(self, client):
        response = client.post("/api/raw", content=b"hello", headers={"Content-Type": "text/plain"})

        assert response.json() == {"raw": "hello", "body": {}}

    def test_no_body(self, client):
        response = client.post("/api/echo")

        assert response.json() == {"body": {}}
