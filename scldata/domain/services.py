"""
Service métier de gestion des documents SCL versionnés.

Chaque mise à jour produit une nouvelle version immuable; l'historique d'un document (type, id)
est une chaîne de versions strictement croissante.
"""

from __future__ import annotations

import uuid
import xml.etree.ElementTree as ET

import structlog

from scldata.domain.errors import HeaderNotFound
from scldata.domain.models import (
    INITIAL_VERSION,
    ChangeSetType,
    SclMetaInfo,
    SclType,
    Version,
)
from scldata.domain.scl_processor import SclElementProcessor
from scldata.infra.repo.base import SclDataRepository, error_details

log = structlog.get_logger(__name__)


class SclDataService:
    """Service métier pour les documents SCL versionnés.

    Responsabilités:
    - Calculer la version suivante à partir du change set demandé.
    - Écrire/recopier les métadonnées du service (id, version, nom, type, historique) via
      `processor`.
    - Persister/charger les versions via `repository` (mémoire, SQL ou Redis).

    Le service est sans état entre deux appels; il ne modifie que l'élément reçu ou chargé pour
    l'appel en cours.
    """

    def __init__(
        self,
        repository: SclDataRepository,
        processor: SclElementProcessor | None = None,
        default_user: str | None = None,
    ):
        """Initialise le service avec ses dépendances.

        Paramètres:
        - repository: dépôt implémentant `SclDataRepository`.
        - processor: accesseur des métadonnées (un `SclElementProcessor` par défaut).
        - default_user: auteur inscrit dans l'historique quand l'appelant n'en fournit pas.
        """
        self.repository = repository
        self.processor = processor or SclElementProcessor()
        self.default_user = default_user

    def list_scl(self, scl_type: SclType) -> list[SclMetaInfo]:
        """Liste (id, nom, dernière version) des documents du type."""
        return self.repository.list(scl_type)

    def list_versions(self, scl_type: SclType, scl_id: str) -> list[Version]:
        """Versions connues d'un document, croissantes (vide si inconnu)."""
        return self.repository.list_versions_by_uuid(scl_type, scl_id)

    def find_latest(self, scl_type: SclType, scl_id: str) -> ET.Element:
        """Document à sa plus haute version. Lève DocumentNotFound si absent."""
        return self.repository.find_by_uuid(scl_type, scl_id)

    def find_version(self, scl_type: SclType, scl_id: str, version: Version) -> ET.Element:
        """Document à exactement `version`. Lève DocumentNotFound si absent."""
        return self.repository.find_by_uuid(scl_type, scl_id, version)

    def create(
        self,
        scl_type: SclType,
        name: str,
        scl: ET.Element,
        who: str | None = None,
        comment: str | None = None,
    ) -> str:
        """Enregistre un nouveau document et retourne son identifiant.

        Démarche:
        - Génère un identifiant aléatoire (uuid4, sans nouvelle tentative en cas de collision).
        - Version de départ: celle du Header si le document porte déjà l'extension du service
          (import depuis un autre document), sinon 0.0.0.
        - Écrit id/version, nom/type et une entrée d'historique, puis persiste.
        """
        scl_id = str(uuid.uuid4())
        version = INITIAL_VERSION
        if self.processor.read_extension(scl).present:
            version = self.processor.read_header_version(scl) or INITIAL_VERSION

        self.processor.set_header_identity(scl, scl_id, version)
        self.processor.write_extension(scl, name, scl_type)
        self.processor.append_history_item(
            scl, version, what=comment or "SCL created", who=who or self.default_user
        )
        self.repository.create(scl_type, scl_id, name, scl, version)
        log.info("scl_created", type=scl_type.value, id=scl_id, version=str(version), name=name)
        return scl_id

    def update(
        self,
        scl_type: SclType,
        scl_id: str,
        change_set: ChangeSetType,
        scl: ET.Element,
        who: str | None = None,
        comment: str | None = None,
    ) -> Version:
        """Enregistre un nouveau contenu comme version suivante de (type, id).

        Démarche:
        - Charge la dernière version stockée (DocumentNotFound si aucune).
        - Lit son Header (HeaderNotFound sinon, aucune écriture n'a lieu).
        - Calcule la version suivante selon `change_set`.
        - Recopie nom, type et historique précédents sur le nouveau contenu, ajoute une entrée.
        - Persiste sous (type, id, version suivante); la version précédente reste intacte.

        Retour: la nouvelle version.
        """
        previous = self.repository.find_by_uuid(scl_type, scl_id)
        try:
            _, previous_version = self.processor.read_header(previous)
        except HeaderNotFound as err:
            details = error_details(scl_type, scl_id)
            log.warning("scl_header_missing", **details)
            raise HeaderNotFound(
                "Previous SCL version has no Header", details=details
            ) from err

        next_version = previous_version.next_version(change_set)
        previous_extension = self.processor.read_extension(previous)
        name = previous_extension.name or ""

        self.processor.set_header_identity(scl, scl_id, next_version)
        self.processor.write_extension(scl, name, scl_type)
        self.processor.write_history(scl, previous_extension.history)
        self.processor.append_history_item(
            scl,
            next_version,
            what=comment or f"SCL updated, with change set {change_set.value}",
            who=who or self.default_user,
        )
        self.repository.create(scl_type, scl_id, name, scl, next_version)
        log.info(
            "scl_updated",
            type=scl_type.value,
            id=scl_id,
            previous_version=str(previous_version),
            version=str(next_version),
            change_set=change_set.value,
        )
        return next_version

    def delete(self, scl_type: SclType, scl_id: str) -> None:
        """Supprime toutes les versions du document."""
        self.repository.delete(scl_type, scl_id)
        log.info("scl_deleted", type=scl_type.value, id=scl_id)

    def delete_version(self, scl_type: SclType, scl_id: str, version: Version) -> None:
        """Supprime une seule version, sans renuméroter les autres."""
        self.repository.delete_version(scl_type, scl_id, version)
        log.info("scl_version_deleted", type=scl_type.value, id=scl_id, version=str(version))
