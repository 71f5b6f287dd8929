"""Interface de base pour les dépôts de documents SCL versionnés.

Ce module définit le contrat abstrait dont dépend le service: le service ne connaît que
`SclDataRepository`, jamais une implémentation concrète.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod

from scldata.domain.models import SclMetaInfo, SclType, Version


class SclDataRepository(ABC):
    """Contrat de persistance des documents SCL, partitionné par type.

    Les implémentations garantissent l'unicité de (type, id, version) et lèvent
    `PersistenceConflict` sur doublon, `DocumentNotFound` sur lecture absente et
    `PersistenceUnavailable` quand le stockage est injoignable.
    """

    @abstractmethod
    def list(self, scl_type: SclType) -> list[SclMetaInfo]:
        """Dernière version (id, nom, version) de chaque document du type."""
        raise NotImplementedError

    @abstractmethod
    def list_versions_by_uuid(self, scl_type: SclType, scl_id: str) -> list[Version]:
        """Versions stockées d'un document, par ordre croissant (vide si inconnu)."""
        raise NotImplementedError

    @abstractmethod
    def find_by_uuid(
        self, scl_type: SclType, scl_id: str, version: Version | None = None
    ) -> ET.Element:
        """Document à la version demandée, ou à la plus haute si `version` est None."""
        raise NotImplementedError

    @abstractmethod
    def create(
        self, scl_type: SclType, scl_id: str, name: str, scl: ET.Element, version: Version
    ) -> None:
        """Stocke une nouvelle version; échoue si (type, id, version) existe."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, scl_type: SclType, scl_id: str) -> None:
        """Supprime toutes les versions d'un document."""
        raise NotImplementedError

    @abstractmethod
    def delete_version(self, scl_type: SclType, scl_id: str, version: Version) -> None:
        """Supprime exactement une version, sans renuméroter les autres."""
        raise NotImplementedError


def latest_per_id(rows: list[tuple[str, str, Version]]) -> list[SclMetaInfo]:
    """Réduit des lignes (id, nom, version) à la plus haute version par id.

    Résultat trié par nom puis id.
    """
    latest: dict[str, SclMetaInfo] = {}
    for scl_id, name, version in rows:
        current = latest.get(scl_id)
        if current is None or version > current.version:
            latest[scl_id] = SclMetaInfo(id=scl_id, name=name, version=version)
    return sorted(latest.values(), key=lambda item: (item.name, item.id))


def error_details(
    scl_type: SclType, scl_id: str, version: Version | None = None
) -> dict[str, str]:
    """Contexte (type, id[, version]) joint aux erreurs de persistance."""
    details = {"type": scl_type.value, "id": scl_id}
    if version is not None:
        details["version"] = str(version)
    return details
