"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, dépôt, processeur, service SCL)
et expose un singleton `container` utilisé par le reste de l'application.
"""

import structlog

from scldata.core.settings import Settings, get_settings
from scldata.domain.scl_processor import SclElementProcessor
from scldata.domain.services import SclDataService
from scldata.infra.repo.base import SclDataRepository
from scldata.infra.repo.db import get_engine
from scldata.infra.repo.memory_repo import InMemorySclDataRepository
from scldata.infra.repo.models import Base
from scldata.infra.repo.redis_repo import RedisSclDataRepository
from scldata.infra.repo.sql_repo import SqlSclDataRepository


class Container:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.repository = self._build_repository()
        self.processor = SclElementProcessor()
        self.scl_service = SclDataService(
            self.repository, self.processor, default_user=self.settings.DEFAULT_USER
        )

    def _build_repository(self) -> SclDataRepository:
        """Choisit le dépôt: SQL si DATABASE_URL, sinon Redis si REDIS_URL, sinon mémoire."""
        if self.settings.DATABASE_URL:
            engine = get_engine(self.settings.DATABASE_URL)
            if self.settings.DB_AUTO_CREATE:
                Base.metadata.create_all(engine)
            self.storage_backend = "sql"
            return SqlSclDataRepository(engine)
        if self.settings.REDIS_URL:
            try:
                repo = RedisSclDataRepository(self.settings.REDIS_URL)
                repo.client.ping()
                self.storage_backend = "redis"
                return repo
            except Exception as err:
                if self.settings.REQUIRE_REDIS:
                    raise RuntimeError("Redis required but unavailable") from err
                structlog.get_logger(__name__).warning(
                    "redis_unavailable_memory_fallback", error=type(err).__name__
                )
                self.storage_backend = "memory-fallback"
                return InMemorySclDataRepository()
        if self.settings.REQUIRE_REDIS:
            raise RuntimeError("Redis required but REDIS_URL not set")
        self.storage_backend = "memory"
        return InMemorySclDataRepository()


container = Container()
