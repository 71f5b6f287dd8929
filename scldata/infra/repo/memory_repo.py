"""
Dépôt SCL en mémoire (utilisé pour dev/tests).

Stocke la forme texte de chaque version dans un dict local, non persistant. Un verrou protège la
vérification d'unicité (type, id, version) et l'insertion.
"""

from __future__ import annotations

import threading
import xml.etree.ElementTree as ET

from scldata.domain.converter import to_element, to_string
from scldata.domain.errors import DocumentNotFound, PersistenceConflict
from scldata.domain.models import SclMetaInfo, SclType, Version
from scldata.infra.repo.base import SclDataRepository, error_details, latest_per_id


class InMemorySclDataRepository(SclDataRepository):
    """Dépôt mémoire: `(type, id) -> {version: (nom, xml)}`."""

    def __init__(self) -> None:
        """Initialise une base mémoire vide."""
        self._db: dict[tuple[SclType, str], dict[Version, tuple[str, str]]] = {}
        self._lock = threading.Lock()

    def list(self, scl_type: SclType) -> list[SclMetaInfo]:
        """Dernière version de chaque document du type."""
        with self._lock:
            rows = [
                (scl_id, name, version)
                for (t, scl_id), versions in self._db.items()
                if t == scl_type
                for version, (name, _xml) in versions.items()
            ]
        return latest_per_id(rows)

    def list_versions_by_uuid(self, scl_type: SclType, scl_id: str) -> list[Version]:
        """Versions connues, croissantes."""
        with self._lock:
            return sorted(self._db.get((scl_type, scl_id), {}))

    def find_by_uuid(
        self, scl_type: SclType, scl_id: str, version: Version | None = None
    ) -> ET.Element:
        """Relit le document stocké et en renvoie une copie analysée."""
        with self._lock:
            versions = self._db.get((scl_type, scl_id), {})
            if version is None and versions:
                version = max(versions)
            stored = versions.get(version) if version is not None else None
        if stored is None:
            raise DocumentNotFound(
                "No SCL document found",
                details=error_details(scl_type, scl_id, version),
            )
        return to_element(stored[1])

    def create(
        self, scl_type: SclType, scl_id: str, name: str, scl: ET.Element, version: Version
    ) -> None:
        """Enregistre une nouvelle version, refuse les doublons."""
        xml = to_string(scl)
        with self._lock:
            versions = self._db.setdefault((scl_type, scl_id), {})
            if version in versions:
                raise PersistenceConflict(
                    "SCL version already exists",
                    details=error_details(scl_type, scl_id, version),
                )
            versions[version] = (name, xml)

    def delete(self, scl_type: SclType, scl_id: str) -> None:
        """Supprime toutes les versions (sans erreur si absent)."""
        with self._lock:
            self._db.pop((scl_type, scl_id), None)

    def delete_version(self, scl_type: SclType, scl_id: str, version: Version) -> None:
        """Supprime une version; retire la clé quand il n'en reste plus."""
        with self._lock:
            versions = self._db.get((scl_type, scl_id))
            if versions is None:
                return
            versions.pop(version, None)
            if not versions:
                del self._db[(scl_type, scl_id)]

