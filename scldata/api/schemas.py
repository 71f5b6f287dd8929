# Schémas Pydantic exposés par l'API SCL (requêtes et réponses).

from pydantic import BaseModel, Field

from scldata.domain.models import ChangeSetType


class CreateRequest(BaseModel):
    """Modèle de requête pour créer un document SCL.

    Champs:
    - name: str (nom du document, conservé sur toutes ses versions)
    - scl: str (document SCL XML)
    - comment: str | None (texte de l'entrée d'historique)
    """

    name: str = Field(..., min_length=1)
    scl: str
    comment: str | None = None


class UpdateRequest(BaseModel):
    """Modèle de requête pour enregistrer une nouvelle version.

    Champs:
    - change_set_type: MAJOR | MINOR | PATCH (obligatoire, pas de défaut)
    - scl: str (nouveau contenu SCL XML)
    - comment: str | None (texte de l'entrée d'historique)
    """

    change_set_type: ChangeSetType
    scl: str
    comment: str | None = None


class SclIdResponse(BaseModel):
    """Identifiant et version produits par une création ou une mise à jour."""

    id: str
    version: str


class SclResponse(BaseModel):
    """Contenu d'un document SCL à une version donnée."""

    id: str
    scl: str


class SclListItem(BaseModel):
    """Résumé d'un document: id, nom, dernière version."""

    id: str
    name: str
    version: str


class SclListResponse(BaseModel):
    """Liste des documents d'un type."""

    items: list[SclListItem]


class VersionsResponse(BaseModel):
    """Versions stockées d'un document, croissantes."""

    versions: list[str]


class HealthResponse(BaseModel):
    """État du service: backend de stockage retenu et types SCL servis."""

    status: str
    app: str
    env: str
    storage: str
    database_url: bool
    redis_url: bool
    scl_types: list[str]
