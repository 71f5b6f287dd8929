"""
Dépôt SCL adossé à Redis.

Clés:
- `scl:{type}:{id}`: hash, champ = version `major.minor.patch`, valeur = JSON `{name, scl}`.
- `scl:{type}:ids`: ensemble des identifiants connus pour le type.

L'unicité (type, id, version) repose sur `HSETNX`.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from collections.abc import Iterator
from contextlib import contextmanager

import redis
import structlog

from scldata.domain.converter import to_element, to_string
from scldata.domain.errors import (
    DocumentNotFound,
    PersistenceConflict,
    PersistenceUnavailable,
)
from scldata.domain.models import SclMetaInfo, SclType, Version
from scldata.infra.repo.base import SclDataRepository, error_details, latest_per_id

log = structlog.get_logger(__name__)


@contextmanager
def _translate_errors(
    scl_type: SclType, scl_id: str | None = None, version: Version | None = None
) -> Iterator[None]:
    """Traduit les erreurs de connexion Redis en PersistenceUnavailable."""
    try:
        yield
    except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as err:
        details = error_details(scl_type, scl_id or "", version)
        log.error("repository_unavailable", backend="redis", error=type(err).__name__, **details)
        raise PersistenceUnavailable("Redis unavailable", details=details) from err


class RedisSclDataRepository(SclDataRepository):
    """Dépôt SCL via Redis (un hash par document)."""

    def __init__(self, url: str):
        """Crée un client Redis à partir de l'URL fournie."""
        self.client = redis.Redis.from_url(url, decode_responses=True)

    @staticmethod
    def _doc_key(scl_type: SclType, scl_id: str) -> str:
        return f"scl:{scl_type.value}:{scl_id}"

    @staticmethod
    def _ids_key(scl_type: SclType) -> str:
        return f"scl:{scl_type.value}:ids"

    def list(self, scl_type: SclType) -> list[SclMetaInfo]:
        """Dernière version de chaque document du type."""
        rows = []
        with _translate_errors(scl_type):
            for scl_id in self.client.smembers(self._ids_key(scl_type)):
                versions = self.list_versions_by_uuid(scl_type, scl_id)
                if not versions:
                    continue
                raw = self.client.hget(self._doc_key(scl_type, scl_id), str(versions[-1]))
                if raw:
                    rows.append((scl_id, json.loads(raw)["name"], versions[-1]))
        return latest_per_id(rows)

    def list_versions_by_uuid(self, scl_type: SclType, scl_id: str) -> list[Version]:
        """Versions stockées, par ordre croissant."""
        with _translate_errors(scl_type, scl_id):
            fields = self.client.hkeys(self._doc_key(scl_type, scl_id))
        return sorted(Version.parse(f) for f in fields)

    def find_by_uuid(
        self, scl_type: SclType, scl_id: str, version: Version | None = None
    ) -> ET.Element:
        """Charge et analyse la version demandée (ou la plus haute)."""
        if version is None:
            versions = self.list_versions_by_uuid(scl_type, scl_id)
            if not versions:
                raise DocumentNotFound(
                    "No SCL document found", details=error_details(scl_type, scl_id)
                )
            version = versions[-1]
        with _translate_errors(scl_type, scl_id, version):
            raw = self.client.hget(self._doc_key(scl_type, scl_id), str(version))
        if not raw:
            raise DocumentNotFound(
                "No SCL document found", details=error_details(scl_type, scl_id, version)
            )
        return to_element(json.loads(raw)["scl"])

    def create(
        self, scl_type: SclType, scl_id: str, name: str, scl: ET.Element, version: Version
    ) -> None:
        """Stocke la version via HSETNX et indexe l'identifiant."""
        payload = json.dumps({"name": name, "scl": to_string(scl)})
        with _translate_errors(scl_type, scl_id, version):
            added = self.client.hsetnx(self._doc_key(scl_type, scl_id), str(version), payload)
            if not added:
                details = error_details(scl_type, scl_id, version)
                log.warning("repository_conflict", backend="redis", **details)
                raise PersistenceConflict("SCL version already exists", details=details)
            self.client.sadd(self._ids_key(scl_type), scl_id)

    def delete(self, scl_type: SclType, scl_id: str) -> None:
        """Supprime le hash du document et le retire de l'index."""
        with _translate_errors(scl_type, scl_id):
            pipe = self.client.pipeline()
            pipe.delete(self._doc_key(scl_type, scl_id))
            pipe.srem(self._ids_key(scl_type), scl_id)
            pipe.execute()

    def delete_version(self, scl_type: SclType, scl_id: str, version: Version) -> None:
        """Supprime un champ du hash; désindexe le document s'il est vide.

        Lecture et écritures passent par une transaction WATCH/MULTI sur le hash: une création
        concurrente fait rejouer la transaction au lieu de désindexer un document non vide.
        """
        key = self._doc_key(scl_type, scl_id)
        field = str(version)

        def _remove(pipe) -> None:
            remaining = pipe.hlen(key) - (1 if pipe.hexists(key, field) else 0)
            pipe.multi()
            pipe.hdel(key, field)
            if remaining <= 0:
                pipe.srem(self._ids_key(scl_type), scl_id)

        with _translate_errors(scl_type, scl_id, version):
            self.client.transaction(_remove, key)
