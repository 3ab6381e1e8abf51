from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from posfmt import main as main_mod
from posfmt.version import get_version


@pytest.fixture
def client():
    with TestClient(main_mod.api_app) as test_client:
        yield test_client


@pytest.mark.integration
def test_version_endpoint(client: TestClient):
    resp = client.get("/api/v1/version")
    assert resp.status_code == 200
    assert resp.json() == {"version": get_version()}


@pytest.mark.integration
def test_format_endpoint(client: TestClient):
    resp = client.post(
        "/api/v1/format",
        json={"template": "{0} any text {1} {0}", "arguments": ["X", "Y"]},
    )
    assert resp.status_code == 200
    assert resp.json() == {"result": "X any text Y X", "arguments": 2}


@pytest.mark.integration
def test_format_endpoint_renders_json_values(client: TestClient):
    resp = client.post(
        "/api/v1/format",
        json={"template": "{1}+{1} = {0}", "arguments": [2, "one"]},
    )
    assert resp.json()["result"] == "one+one = 2"

    typed = client.post(
        "/api/v1/format",
        json={"template": "{0}", "arguments": ["1e3"], "typed": True},
    )
    assert typed.json()["result"] == "1000.0"


@pytest.mark.integration
@pytest.mark.parametrize(
    ("template", "arguments", "code"),
    [
        ("{0}", [], "E_ARGUMENT_INDEX_OUT_OF_RANGE"),
        ("{", ["x"], "E_MALFORMED_PLACEHOLDER"),
        ("}", ["x"], "E_UNMATCHED_CLOSING_BRACE"),
        ("{a}", ["x"], "E_MALFORMED_PLACEHOLDER"),
    ],
)
def test_format_endpoint_errors(client: TestClient, template, arguments, code):
    resp = client.post("/api/v1/format", json={"template": template, "arguments": arguments})
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["diagnostics"][0]["code"] == code
    assert detail["error"]


@pytest.mark.integration
def test_parse_endpoint(client: TestClient):
    resp = client.post("/api/v1/parse", json={"template": "{{{0}}}"})
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["required_arguments"] == 1
    assert [seg["kind"] for seg in payload["segments"]] == ["literal", "placeholder", "literal"]

    assert client.post("/api/v1/parse", json={"template": "{x"}).status_code == 400


@pytest.mark.integration
def test_request_validation(client: TestClient):
    assert client.post("/api/v1/format", json={"arguments": []}).status_code == 422


@pytest.mark.integration
def test_missing_feature_maps_to_404(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    class MissingRegistry:
        @staticmethod
        def get_feature(_name: str):
            return None

    monkeypatch.setattr(main_mod, "FeatureRegistry", MissingRegistry)
    assert client.get("/api/v1/version").status_code == 404
    assert client.post("/api/v1/format", json={"template": "x"}).status_code == 404


@pytest.mark.integration
def test_root(client: TestClient):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["name"] == "posfmt"


@pytest.mark.integration
def test_typed_integer_beyond_conversion_limit(client: TestClient):
    digits = "1" * 5000
    resp = client.post(
        "/api/v1/format",
        json={"template": "{0}", "arguments": [digits], "typed": True},
    )
    assert resp.status_code == 200
    assert resp.json()["result"] == digits


@pytest.mark.integration
def test_unexpected_failure_returns_diagnostics(client: TestClient, monkeypatch: pytest.MonkeyPatch):
    def broken_handler(**kwargs):
        raise RuntimeError("handler exploded")

    class BrokenRegistry:
        @staticmethod
        def get_feature(_name: str):
            return SimpleNamespace(handler=broken_handler)

    monkeypatch.setattr(main_mod, "FeatureRegistry", BrokenRegistry)
    for resp in (
        client.get("/api/v1/version"),
        client.post("/api/v1/format", json={"template": "x"}),
        client.post("/api/v1/parse", json={"template": "x"}),
    ):
        assert resp.status_code == 500
        detail = resp.json()["detail"]
        assert detail["error"] == "Internal server error"
        assert detail["diagnostics"] == [{"code": "E_INTERNAL", "message": "handler exploded"}]
