"""
Erreurs métier du service de données SCL.

Chaque erreur porte un code stable, un message lisible et un dictionnaire `details` décrivant le
document concerné (type, id, version) pour pouvoir être journalisée ou exposée sans recalcul.
"""

from __future__ import annotations

from typing import Any


class ErrorCodes:
    """Codes d'erreur stables du service SCL."""

    HEADER_NOT_FOUND = "HEADER_NOT_FOUND"
    INVALID_VERSION_FORMAT = "INVALID_VERSION_FORMAT"
    INVALID_SCL = "INVALID_SCL"
    NO_DATA_FOUND = "NO_DATA_FOUND"
    PERSISTENCE_CONFLICT = "PERSISTENCE_CONFLICT"
    PERSISTENCE_UNAVAILABLE = "PERSISTENCE_UNAVAILABLE"


class SclDataServiceError(Exception):
    """Erreur de base du service, avec code et contexte structuré."""

    code = "SCL_DATA_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialise l'erreur avec son message et son contexte."""
        super().__init__(message)
        self.message = message
        self.details = details or {}


class HeaderNotFound(SclDataServiceError):
    """Le document ne contient pas l'en-tête (Header) attendu."""

    code = ErrorCodes.HEADER_NOT_FOUND


class InvalidVersionFormat(SclDataServiceError):
    """La chaîne de version n'est pas de la forme `major.minor.patch`."""

    code = ErrorCodes.INVALID_VERSION_FORMAT


class InvalidSclDocument(SclDataServiceError):
    """Le contenu fourni n'est pas un document SCL XML bien formé."""

    code = ErrorCodes.INVALID_SCL


class DocumentNotFound(SclDataServiceError):
    """Aucune version stockée pour (type, id[, version])."""

    code = ErrorCodes.NO_DATA_FOUND


class PersistenceConflict(SclDataServiceError):
    """Le dépôt refuse l'écriture: (type, id, version) existe déjà."""

    code = ErrorCodes.PERSISTENCE_CONFLICT


class PersistenceUnavailable(SclDataServiceError):
    """Le dépôt est injoignable ou a expiré."""

    code = ErrorCodes.PERSISTENCE_UNAVAILABLE
