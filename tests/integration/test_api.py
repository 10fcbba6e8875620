"""Integration tests for the FastAPI REST API."""

from __future__ import annotations

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from easyp_assist.api.app import create_app
from easyp_assist.api.deps import init_services, reset_services
from easyp_assist.settings import Settings
from tests.conftest import SAMPLE_CONFIG_YAML, cli_calls


@pytest.fixture
def app(settings: Settings):
    app = create_app(settings=settings)
    # Manually init services (ASGITransport doesn't trigger lifespan)
    init_services(settings)
    yield app
    reset_services()


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Health & Reference
# ---------------------------------------------------------------------------


class TestHealthEndpoint:
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "version" in data
        assert "X-Request-Duration-Ms" in response.headers


class TestReferenceEndpoint:
    async def test_reference(self, client: AsyncClient) -> None:
        response = await client.get("/reference/easyp")
        assert response.status_code == 200
        text = response.json()["reference"]
        assert "generate" in text
        assert "breaking" in text


# ---------------------------------------------------------------------------
# Completions
# ---------------------------------------------------------------------------


class TestCompletionsEndpoint:
    async def test_root_keys(self, client: AsyncClient) -> None:
        response = await client.post("/completions", json={"text": "", "offset": 0})
        assert response.status_code == 200
        data = response.json()
        assert [s["value"] for s in data["suggestions"]] == [
            "version",
            "lint",
            "deps",
            "generate",
            "breaking",
        ]
        assert data["key_context_path"] in ("", None)
        assert data["is_value_position"] is False

    async def test_value_position(self, client: AsyncClient) -> None:
        response = await client.post("/completions", json={"text": "version: ", "offset": 9})
        data = response.json()
        assert data["is_value_position"] is True
        assert data["value_path"] == "version"
        assert data["suggestions"][0] == {
            "value": "v1alpha",
            "label": "v1alpha",
            "type_hint": "enum",
            "tail_text": None,
        }

    async def test_partial_key_range(self, client: AsyncClient) -> None:
        text = "lint:\n  ser"
        response = await client.post("/completions", json={"text": text, "offset": len(text)})
        data = response.json()
        assert data["prefix"] == "ser"
        assert (data["replace_start"], data["replace_end"]) == (8, 11)

    async def test_target_path_accepted(self, client: AsyncClient, project_root: Path) -> None:
        response = await client.post(
            "/completions",
            json={"text": "", "offset": 0, "path": str(project_root / "easyp.yaml")},
        )
        assert response.status_code == 200

    async def test_other_path_rejected(self, client: AsyncClient, project_root: Path) -> None:
        response = await client.post(
            "/completions",
            json={"text": "", "offset": 0, "path": str(project_root / "buf.yaml")},
        )
        assert response.status_code == 400
        assert "not the configured easyp config" in response.json()["detail"]

    async def test_missing_field(self, client: AsyncClient) -> None:
        response = await client.post("/completions", json={"text": ""})
        assert response.status_code == 422


class TestInsertEndpoint:
    async def test_git_repo_scaffold(self, client: AsyncClient) -> None:
        text = "generate:\n  inputs:\n    - "
        response = await client.post(
            "/completions/insert",
            json={"text": text, "offset": len(text), "suggestion": "git_repo"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["text"] == (
            "generate:\n  inputs:\n    - git_repo:\n"
            '        url: ""\n        sub_directory: ""\n        root: ""'
        )
        assert data["text"][data["caret"] - 1 : data["caret"] + 1] == '""'

    async def test_value_insert(self, client: AsyncClient) -> None:
        response = await client.post(
            "/completions/insert",
            json={"text": "version: ", "offset": 9, "suggestion": "v1alpha"},
        )
        data = response.json()
        assert data["text"] == "version: v1alpha"
        assert data["caret"] == 16


class TestAutoPopupEndpoint:
    async def test_colon(self, client: AsyncClient) -> None:
        response = await client.post(
            "/completions/auto-popup", json={"typed_char": ":", "text": "lint", "offset": 4}
        )
        assert response.status_code == 200
        assert response.json() == {"auto_popup": True}

    async def test_space_after_word(self, client: AsyncClient) -> None:
        response = await client.post(
            "/completions/auto-popup", json={"typed_char": " ", "text": "lint", "offset": 4}
        )
        assert response.json() == {"auto_popup": False}

    async def test_typed_char_must_be_single(self, client: AsyncClient) -> None:
        response = await client.post(
            "/completions/auto-popup", json={"typed_char": "ab", "text": "", "offset": 0}
        )
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestValidateEndpoint:
    async def test_valid_config(self, client: AsyncClient, fake_cli: Path) -> None:
        response = await client.post("/validate", json={"content": SAMPLE_CONFIG_YAML})
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["diagnostics"] == []
        assert len(cli_calls(fake_cli)) == 1

    async def test_warning_diagnostic(self, client: AsyncClient) -> None:
        content = "unknown_top: 1\nversion: v1alpha\n"
        response = await client.post("/validate", json={"content": content})
        data = response.json()
        assert data["valid"] is True
        assert data["diagnostics"] == [
            {
                "message": 'unknown key "unknown_top"',
                "severity": "warning",
                "code": "yaml_validation",
                "start": 0,
                "end": 14,
            }
        ]

    async def test_error_diagnostic(self, client: AsyncClient) -> None:
        content = "version: v1alpha\nbroken: true\n"
        response = await client.post("/validate", json={"content": content})
        data = response.json()
        assert data["valid"] is False
        assert data["errors"][0]["message"] == "directory.path is required"
        assert data["diagnostics"][0]["severity"] == "error"
        assert data["diagnostics"][0]["start"] == len("version: v1alpha\n") + 2

    async def test_repeated_snapshot_is_cached(self, client: AsyncClient, fake_cli: Path) -> None:
        for _ in range(3):
            await client.post("/validate", json={"content": "version: v1alpha\n"})
        assert len(cli_calls(fake_cli)) == 1

    async def test_other_path_rejected(
        self, client: AsyncClient, fake_cli: Path, project_root: Path
    ) -> None:
        response = await client.post(
            "/validate",
            json={"content": "version: v1alpha\n", "path": str(project_root / "other.yaml")},
        )
        assert response.status_code == 400
        assert cli_calls(fake_cli) == []
