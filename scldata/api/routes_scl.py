"""
Routes REST des documents SCL versionnés.

Ce module regroupe les endpoints `/scl/v1/{scl_type}` pour lister, lire, créer, mettre à jour et
supprimer des documents SCL. Les erreurs du service remontent telles quelles et sont traduites en
enveloppes JSON par les gestionnaires enregistrés dans `create_app`.
"""

from fastapi import APIRouter, Depends, Response

from scldata.api.deps import get_scl_service
from scldata.api.schemas import (
    CreateRequest,
    SclIdResponse,
    SclListItem,
    SclListResponse,
    SclResponse,
    UpdateRequest,
    VersionsResponse,
)
from scldata.app.metrics import SCL_OPERATIONS
from scldata.core.http_constants import HTTP_CREATED, HTTP_NO_CONTENT
from scldata.domain.converter import to_element, to_string
from scldata.domain.models import SclType, Version
from scldata.domain.services import SclDataService

router = APIRouter(prefix="/scl/v1/{scl_type}", tags=["scl"])
service_dep = Depends(get_scl_service)


@router.get("/list", response_model=SclListResponse)
def list_scl(scl_type: SclType, service: SclDataService = service_dep):
    """Liste les documents du type avec leur dernière version."""
    SCL_OPERATIONS.labels(type=scl_type.value, operation="list").inc()
    items = service.list_scl(scl_type)
    return SclListResponse(
        items=[SclListItem(id=i.id, name=i.name, version=str(i.version)) for i in items]
    )


@router.get("/{scl_id}/versions", response_model=VersionsResponse)
def list_versions(scl_type: SclType, scl_id: str, service: SclDataService = service_dep):
    """Retourne les versions stockées d'un document, croissantes."""
    SCL_OPERATIONS.labels(type=scl_type.value, operation="list_versions").inc()
    versions = service.list_versions(scl_type, scl_id)
    return VersionsResponse(versions=[str(v) for v in versions])


@router.get("/{scl_id}", response_model=SclResponse)
def find_latest(scl_type: SclType, scl_id: str, service: SclDataService = service_dep):
    """Retourne le document à sa dernière version (404 si inconnu)."""
    SCL_OPERATIONS.labels(type=scl_type.value, operation="find").inc()
    scl = service.find_latest(scl_type, scl_id)
    return SclResponse(id=scl_id, scl=to_string(scl))


@router.get("/{scl_id}/{version}", response_model=SclResponse)
def find_version(
    scl_type: SclType, scl_id: str, version: str, service: SclDataService = service_dep
):
    """Retourne le document à une version précise (400 si version illisible, 404 si absente)."""
    SCL_OPERATIONS.labels(type=scl_type.value, operation="find").inc()
    scl = service.find_version(scl_type, scl_id, Version.parse(version))
    return SclResponse(id=scl_id, scl=to_string(scl))


@router.post("", response_model=SclIdResponse, status_code=HTTP_CREATED)
def create_scl(scl_type: SclType, payload: CreateRequest, service: SclDataService = service_dep):
    """
    Crée un document SCL.

    Paramètres:
    - payload: `CreateRequest` (nom, contenu XML, commentaire optionnel).

    Retour: `SclIdResponse` avec l'identifiant attribué et la version de départ.
    """
    SCL_OPERATIONS.labels(type=scl_type.value, operation="create").inc()
    scl = to_element(payload.scl)
    scl_id = service.create(scl_type, payload.name, scl, comment=payload.comment)
    _, version = service.processor.read_header(scl)
    return SclIdResponse(id=scl_id, version=str(version))


@router.put("/{scl_id}", response_model=SclIdResponse)
def update_scl(
    scl_type: SclType,
    scl_id: str,
    payload: UpdateRequest,
    service: SclDataService = service_dep,
):
    """
    Enregistre une nouvelle version d'un document existant.

    Paramètres:
    - payload: `UpdateRequest` (change set MAJOR/MINOR/PATCH, contenu XML, commentaire).

    Retour: `SclIdResponse` avec la nouvelle version.
    """
    SCL_OPERATIONS.labels(type=scl_type.value, operation="update").inc()
    version = service.update(
        scl_type,
        scl_id,
        payload.change_set_type,
        to_element(payload.scl),
        comment=payload.comment,
    )
    return SclIdResponse(id=scl_id, version=str(version))


@router.delete("/{scl_id}", status_code=HTTP_NO_CONTENT)
def delete_scl(scl_type: SclType, scl_id: str, service: SclDataService = service_dep):
    """Supprime toutes les versions d'un document."""
    SCL_OPERATIONS.labels(type=scl_type.value, operation="delete").inc()
    service.delete(scl_type, scl_id)
    return Response(status_code=HTTP_NO_CONTENT)


@router.delete("/{scl_id}/{version}", status_code=HTTP_NO_CONTENT)
def delete_version(
    scl_type: SclType, scl_id: str, version: str, service: SclDataService = service_dep
):
    """Supprime une seule version d'un document."""
    SCL_OPERATIONS.labels(type=scl_type.value, operation="delete_version").inc()
    service.delete_version(scl_type, scl_id, Version.parse(version))
    return Response(status_code=HTTP_NO_CONTENT)
