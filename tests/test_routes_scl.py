"""
Tests pour les routes REST `/scl/v1/{scl_type}`.

Le service du conteneur est remplacé par un service neuf adossé au dépôt mémoire via
`app.dependency_overrides`, pour isoler chaque test.
"""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from scldata.api.deps import get_scl_service
from scldata.app.main import app
from scldata.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_CONFLICT,
    HTTP_CREATED,
    HTTP_NO_CONTENT,
    HTTP_NOT_FOUND,
    HTTP_OK,
    HTTP_SERVICE_UNAVAILABLE,
    HTTP_UNPROCESSABLE_ENTITY,
)
from scldata.domain.converter import to_element, to_string
from scldata.domain.errors import PersistenceConflict, PersistenceUnavailable
from scldata.domain.models import Version
from scldata.domain.scl_processor import SclElementProcessor
from scldata.domain.services import SclDataService
from scldata.infra.repo.memory_repo import InMemorySclDataRepository
from tests.fakes import read_scl

BASE = "/scl/v1/SCD"


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Client HTTP branché sur un service mémoire isolé."""
    service = SclDataService(InMemorySclDataRepository(), default_user="api")
    app.dependency_overrides[get_scl_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _create(client: TestClient, name: str = "STATION") -> str:
    r = client.post(BASE, json={"name": name, "scl": to_string(read_scl())})
    assert r.status_code == HTTP_CREATED
    return r.json()["id"]


def test_create_returns_id_and_initial_version(client: TestClient) -> None:
    """Teste la création (201) avec id et version 0.0.0."""
    r = client.post(BASE, json={"name": "STATION", "scl": to_string(read_scl())})
    assert r.status_code == HTTP_CREATED
    body = r.json()
    assert body["id"]
    assert body["version"] == "0.0.0"


def test_find_latest_returns_document(client: TestClient) -> None:
    """Teste la lecture du document avec ses métadonnées."""
    scl_id = _create(client)

    r = client.get(f"{BASE}/{scl_id}")

    assert r.status_code == HTTP_OK
    assert r.json()["id"] == scl_id
    scl = to_element(r.json()["scl"])
    processor = SclElementProcessor()
    assert processor.read_header(scl) == (scl_id, Version(0, 0, 0))
    assert processor.read_extension(scl).name == "STATION"


def test_update_and_versions(client: TestClient) -> None:
    """Teste la mise à jour MAJOR puis la liste des versions."""
    scl_id = _create(client)

    r = client.put(
        f"{BASE}/{scl_id}",
        json={"change_set_type": "MAJOR", "scl": to_string(read_scl()), "comment": "v1"},
    )
    assert r.status_code == HTTP_OK
    assert r.json() == {"id": scl_id, "version": "1.0.0"}

    r = client.get(f"{BASE}/{scl_id}/versions")
    assert r.json() == {"versions": ["0.0.0", "1.0.0"]}

    r = client.get(f"{BASE}/{scl_id}/0.0.0")
    assert r.status_code == HTTP_OK
    _, version = SclElementProcessor().read_header(to_element(r.json()["scl"]))
    assert version == Version(0, 0, 0)


def test_list(client: TestClient) -> None:
    """Teste la liste des documents d'un type."""
    scl_id = _create(client, name="ALPHA")

    r = client.get(f"{BASE}/list")

    assert r.status_code == HTTP_OK
    assert r.json() == {"items": [{"id": scl_id, "name": "ALPHA", "version": "0.0.0"}]}
    assert client.get("/scl/v1/ICD/list").json() == {"items": []}


def test_unknown_document_is_404(client: TestClient) -> None:
    """Teste l'enveloppe d'erreur NO_DATA_FOUND."""
    r = client.get(f"{BASE}/missing", headers={"X-Request-ID": "req-42"})
    assert r.status_code == HTTP_NOT_FOUND
    body = r.json()
    assert body["code"] == "NO_DATA_FOUND"
    assert body["trace_id"] == "req-42"
    assert body["details"] == {"type": "SCD", "id": "missing"}
    assert r.headers["X-Request-ID"] == "req-42"


def test_invalid_version_is_400(client: TestClient) -> None:
    """Teste le rejet d'une version illisible dans le chemin."""
    scl_id = _create(client)
    r = client.get(f"{BASE}/{scl_id}/1.x.0")
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json()["code"] == "INVALID_VERSION_FORMAT"


def test_invalid_xml_is_400(client: TestClient) -> None:
    """Teste le rejet d'un contenu qui n'est pas un SCL."""
    r = client.post(BASE, json={"name": "X", "scl": "<notscl/>"})
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json()["code"] == "INVALID_SCL"
    r = client.post(BASE, json={"name": "X", "scl": "<SCL"})
    assert r.status_code == HTTP_BAD_REQUEST


def test_request_validation_is_422(client: TestClient) -> None:
    """Teste la validation FastAPI (type inconnu, change set absent)."""
    assert client.get("/scl/v1/XYZ/list").status_code == HTTP_UNPROCESSABLE_ENTITY
    scl_id = _create(client)
    r = client.put(f"{BASE}/{scl_id}", json={"scl": to_string(read_scl())})
    assert r.status_code == HTTP_UNPROCESSABLE_ENTITY


def test_delete_version_then_document(client: TestClient) -> None:
    """Teste les suppressions (204) et le 404 qui suit."""
    scl_id = _create(client)
    client.put(
        f"{BASE}/{scl_id}", json={"change_set_type": "PATCH", "scl": to_string(read_scl())}
    )

    assert client.delete(f"{BASE}/{scl_id}/0.0.0").status_code == HTTP_NO_CONTENT
    assert client.get(f"{BASE}/{scl_id}/versions").json() == {"versions": ["0.0.1"]}

    assert client.delete(f"{BASE}/{scl_id}").status_code == HTTP_NO_CONTENT
    assert client.get(f"{BASE}/{scl_id}").status_code == HTTP_NOT_FOUND


def test_persistence_errors_mapping() -> None:
    """Teste les statuts 409 et 503 des erreurs de persistance."""
    service = Mock(spec=SclDataService)
    service.update.side_effect = PersistenceConflict(
        "SCL version already exists", details={"type": "SCD", "id": "x", "version": "1.0.0"}
    )
    service.list_scl.side_effect = PersistenceUnavailable("Redis unavailable")
    app.dependency_overrides[get_scl_service] = lambda: service
    try:
        c = TestClient(app)
        r = c.put(f"{BASE}/x", json={"change_set_type": "MAJOR", "scl": to_string(read_scl())})
        assert r.status_code == HTTP_CONFLICT
        assert r.json()["code"] == "PERSISTENCE_CONFLICT"
        r = c.get(f"{BASE}/list")
        assert r.status_code == HTTP_SERVICE_UNAVAILABLE
        assert "details" not in r.json()
    finally:
        app.dependency_overrides.clear()
