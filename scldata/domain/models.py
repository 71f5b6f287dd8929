"""
Modèles du domaine SCL (cœur métier) indépendants de l'API et du stockage.

Objectif du module
------------------
- Définir les types de fichiers SCL et les types de change set.
- Fournir la valeur `Version` (major.minor.patch) avec son ordre total et le calcul de la version
  suivante.
- Définir les enregistrements de synthèse renvoyés par le service.
"""

# ============================================================
# Module : scldata/domain/models.py
# Objet  : Types, versions et enregistrements du domaine SCL.
# ============================================================

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from scldata.domain.errors import InvalidVersionFormat

_VERSION_RE = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")


class SclType(str, Enum):
    """Rôle d'un fichier SCL (IEC 61850-6)."""

    SSD = "SSD"
    IID = "IID"
    ICD = "ICD"
    SCD = "SCD"
    CID = "CID"
    SED = "SED"
    ISD = "ISD"
    STD = "STD"

    @property
    def description(self) -> str:
        """Libellé complet du type de fichier."""
        return _SCL_TYPE_DESCRIPTIONS[self]


_SCL_TYPE_DESCRIPTIONS = {
    SclType.SSD: "System Specification Description",
    SclType.IID: "Instantiated IED Description",
    SclType.ICD: "IED Capability Description",
    SclType.SCD: "Substation Configuration Description",
    SclType.CID: "Configured IED Description",
    SclType.SED: "System Exchange Description",
    SclType.ISD: "IED Specification Description",
    SclType.STD: "Specification Template Definition",
}


class ChangeSetType(str, Enum):
    """Amplitude d'un changement, choisie par l'appelant à chaque mise à jour."""

    MAJOR = "MAJOR"
    MINOR = "MINOR"
    PATCH = "PATCH"


@dataclass(frozen=True, order=True)
class Version:
    """
    Version sémantique d'un document SCL.

    L'ordre (et l'égalité) est lexicographique sur (major, minor, patch). La forme sérialisée est
    exactement `"{major}.{minor}.{patch}"`.
    """

    major: int = 0
    minor: int = 0
    patch: int = 0

    def __post_init__(self) -> None:
        """Refuse les composantes négatives ou non entières."""
        for part in (self.major, self.minor, self.patch):
            if isinstance(part, bool) or not isinstance(part, int) or part < 0:
                raise InvalidVersionFormat(
                    "Version components must be non-negative integers",
                    details={"version": (self.major, self.minor, self.patch)},
                )

    @classmethod
    def parse(cls, text: str) -> Version:
        """Construit une version depuis `major.minor.patch`.

        Lève `InvalidVersionFormat` pour toute autre forme.
        """
        match = _VERSION_RE.fullmatch(text) if isinstance(text, str) else None
        if match is None:
            raise InvalidVersionFormat(
                f"Invalid version format: {text!r}", details={"version": text}
            )
        major, minor, patch = (int(g) for g in match.groups())
        return cls(major, minor, patch)

    def next_version(self, change_set: ChangeSetType) -> Version:
        """Retourne la version suivante selon l'amplitude du change set."""
        if change_set is ChangeSetType.MAJOR:
            return Version(self.major + 1, 0, 0)
        if change_set is ChangeSetType.MINOR:
            return Version(self.major, self.minor + 1, 0)
        if change_set is ChangeSetType.PATCH:
            return Version(self.major, self.minor, self.patch + 1)
        raise ValueError(f"Unknown change set type: {change_set!r}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


INITIAL_VERSION = Version(0, 0, 0)


@dataclass
class HistoryItem:
    """Entrée du journal des modifications (élément `Hitem` du Header)."""

    version: str
    who: str | None = None
    when: str | None = None
    what: str | None = None


@dataclass
class SclExtension:
    """Métadonnées propres au service, lues dans le document.

    Attributs
    - name: nom du fichier SCL (None si l'extension est absente).
    - type: type SCL tel qu'écrit dans l'extension (None si absent).
    - history: entrées d'historique, dans l'ordre du document.
    - present: True si le bloc `Private` du service existe dans le document.
    """

    name: str | None = None
    type: str | None = None
    history: list[HistoryItem] = field(default_factory=list)
    present: bool = False


@dataclass
class SclMetaInfo:
    """Résumé d'un document: identifiant, nom et dernière version."""

    id: str
    name: str
    version: Version
