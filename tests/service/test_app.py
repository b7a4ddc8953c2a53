"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from codeindex.config import IndexConfig
from codeindex.manager import IndexManager
from codeindex.service import create_app
from tests._fixtures.repo_builder import RepoBuilder


@pytest.fixture
def configs() -> list[IndexConfig]:
    return []


@pytest.fixture
def client(configs: list[IndexConfig]) -> TestClient:
    def _factory(config: IndexConfig) -> IndexManager:
        configs.append(config)
        return IndexManager(config)

    return TestClient(create_app(_factory))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_index_endpoint_returns_content(client: TestClient, repo_builder: RepoBuilder) -> None:
    repo_builder.write({"go.mod": "module m\n", "main.go": "package main\n\nfunc main() {}\n"})

    response = client.post("/index", json={"path": str(repo_builder.path()), "format": "summary"})

    assert response.status_code == 200
    data = response.json()
    assert data["content"].startswith("# repo - Quick Reference")
    assert data["format"] == "summary"
    assert data["languages"] == ["go"]
    assert data["file_count"] == 2
    assert data["content_hash"]
    assert not (repo_builder.path() / ".codeindex").exists()


def test_index_endpoint_applies_request_overrides(
    client: TestClient, configs: list[IndexConfig], repo_builder: RepoBuilder
) -> None:
    repo_builder.write({"go.mod": "module m\n"})

    client.post(
        "/index",
        json={"path": str(repo_builder.path()), "hash_algorithm": "sha256", "max_candidates": 7},
    )

    assert configs[0].hash_algorithm == "sha256"
    assert configs[0].max_candidates == 7


def test_index_endpoint_maps_missing_adapters_to_422(client: TestClient, repo_builder: RepoBuilder) -> None:
    repo_builder.write({"notes.txt": "hello\n"})

    response = client.post("/index", json={"path": str(repo_builder.path())})

    assert response.status_code == 422
    assert "No supported languages" in response.json()["detail"]


def test_index_endpoint_maps_missing_path_to_404(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/index", json={"path": str(tmp_path / "missing")})

    assert response.status_code == 404


def test_index_endpoint_rejects_file_path_with_400(
    client: TestClient, configs: list[IndexConfig], repo_builder: RepoBuilder
) -> None:
    repo_builder.write({"go.mod": "module m\n", "main.go": "package main\n"})

    response = client.post("/index", json={"path": str(repo_builder.path() / "main.go")})

    assert response.status_code == 400
    assert "not a directory" in response.json()["detail"]
    assert configs == []


def test_index_endpoint_rejects_unknown_format(client: TestClient, repo_builder: RepoBuilder) -> None:
    repo_builder.write({"go.mod": "module m\n"})

    response = client.post("/index", json={"path": str(repo_builder.path()), "format": "verbose"})

    assert response.status_code == 400
