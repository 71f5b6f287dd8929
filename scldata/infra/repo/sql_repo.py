# ============================================================
# Module : scldata/infra/repo/sql_repo.py
# Objet  : Accès SQL (CRUD) pour les versions de documents SCL.
# Notes  : unicité (type, id, version) portée par la contrainte SQL.
# ============================================================

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError

from scldata.domain.converter import to_element, to_string
from scldata.domain.errors import (
    DocumentNotFound,
    PersistenceConflict,
    PersistenceUnavailable,
)
from scldata.domain.models import SclMetaInfo, SclType, Version
from scldata.infra.repo.base import SclDataRepository, error_details, latest_per_id
from scldata.infra.repo.db import get_session_factory, session_scope
from scldata.infra.repo.models import SclFileORM

log = structlog.get_logger(__name__)


@contextmanager
def _translate_errors(
    scl_type: SclType, scl_id: str | None = None, version: Version | None = None
) -> Iterator[None]:
    """Traduit les erreurs SQLAlchemy en erreurs de persistance du domaine."""
    try:
        yield
    except IntegrityError as err:
        details = error_details(scl_type, scl_id or "", version)
        log.warning("repository_conflict", backend="sql", **details)
        raise PersistenceConflict("SCL version already exists", details=details) from err
    except OperationalError as err:
        details = error_details(scl_type, scl_id or "", version)
        log.error("repository_unavailable", backend="sql", error=type(err).__name__, **details)
        raise PersistenceUnavailable("Database unavailable", details=details) from err


def _version_of(row) -> Version:
    return Version(row.major_version, row.minor_version, row.patch_version)


class SqlSclDataRepository(SclDataRepository):
    """Dépôt SCL adossé à SQLAlchemy (une session par appel)."""

    def __init__(self, engine: Engine) -> None:
        """Construit le repo à partir d'un moteur SQLAlchemy."""
        self._factory = get_session_factory(engine)

    def list(self, scl_type: SclType) -> list[SclMetaInfo]:
        """Dernière version de chaque document du type."""
        stmt = select(
            SclFileORM.scl_id,
            SclFileORM.name,
            SclFileORM.major_version,
            SclFileORM.minor_version,
            SclFileORM.patch_version,
        ).where(SclFileORM.scl_type == scl_type.value)
        with _translate_errors(scl_type), session_scope(self._factory) as session:
            rows = session.execute(stmt).all()
        return latest_per_id([(r.scl_id, r.name, _version_of(r)) for r in rows])

    def list_versions_by_uuid(self, scl_type: SclType, scl_id: str) -> list[Version]:
        """Versions stockées, par ordre croissant."""
        stmt = (
            select(
                SclFileORM.major_version,
                SclFileORM.minor_version,
                SclFileORM.patch_version,
            )
            .where(SclFileORM.scl_type == scl_type.value, SclFileORM.scl_id == scl_id)
            .order_by(
                SclFileORM.major_version,
                SclFileORM.minor_version,
                SclFileORM.patch_version,
            )
        )
        with _translate_errors(scl_type, scl_id), session_scope(self._factory) as session:
            rows = session.execute(stmt).all()
        return [_version_of(r) for r in rows]

    def find_by_uuid(
        self, scl_type: SclType, scl_id: str, version: Version | None = None
    ) -> ET.Element:
        """Document à une version donnée, ou à la plus haute."""
        stmt = select(SclFileORM.scl_data).where(
            SclFileORM.scl_type == scl_type.value, SclFileORM.scl_id == scl_id
        )
        if version is None:
            stmt = stmt.order_by(
                SclFileORM.major_version.desc(),
                SclFileORM.minor_version.desc(),
                SclFileORM.patch_version.desc(),
            )
        else:
            stmt = stmt.where(
                SclFileORM.major_version == version.major,
                SclFileORM.minor_version == version.minor,
                SclFileORM.patch_version == version.patch,
            )
        stmt = stmt.limit(1)
        with _translate_errors(scl_type, scl_id, version), session_scope(
            self._factory
        ) as session:
            scl_data = session.execute(stmt).scalars().first()
        if scl_data is None:
            raise DocumentNotFound(
                "No SCL document found", details=error_details(scl_type, scl_id, version)
            )
        return to_element(scl_data)

    def create(
        self, scl_type: SclType, scl_id: str, name: str, scl: ET.Element, version: Version
    ) -> None:
        """Insère une ligne. Lève PersistenceConflict sur doublon unique.

        Contrainte d'unicité: (scl_type, scl_id, major, minor, patch).
        """
        row = SclFileORM(
            scl_id=scl_id,
            scl_type=scl_type.value,
            major_version=version.major,
            minor_version=version.minor,
            patch_version=version.patch,
            name=name,
            scl_data=to_string(scl),
        )
        with _translate_errors(scl_type, scl_id, version), session_scope(
            self._factory
        ) as session:
            session.add(row)

    def delete(self, scl_type: SclType, scl_id: str) -> None:
        """Supprime toutes les versions du document."""
        stmt = delete(SclFileORM).where(
            SclFileORM.scl_type == scl_type.value, SclFileORM.scl_id == scl_id
        )
        with _translate_errors(scl_type, scl_id), session_scope(self._factory) as session:
            session.execute(stmt)

    def delete_version(self, scl_type: SclType, scl_id: str, version: Version) -> None:
        """Supprime exactement une version."""
        stmt = delete(SclFileORM).where(
            SclFileORM.scl_type == scl_type.value,
            SclFileORM.scl_id == scl_id,
            SclFileORM.major_version == version.major,
            SclFileORM.minor_version == version.minor,
            SclFileORM.patch_version == version.patch,
        )
        with _translate_errors(scl_type, scl_id, version), session_scope(
            self._factory
        ) as session:
            session.execute(stmt)
