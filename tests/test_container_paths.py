"""Tests pour les chemins de configuration du container.

Ce module teste le choix du dépôt (SQL, Redis, mémoire, repli mémoire) selon les paramètres et la
disponibilité de Redis.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import Mock

import pytest
import redis

from scldata.core.container import Container
from scldata.core.settings import Settings
from scldata.domain.models import SclType
from scldata.infra.repo.memory_repo import InMemorySclDataRepository
from scldata.infra.repo.redis_repo import RedisSclDataRepository
from scldata.infra.repo.sql_repo import SqlSclDataRepository
from tests.fakes import FakeRedis


def _settings(monkeypatch: Any, **overrides: Any) -> Settings:
    """Crée des paramètres isolés de l'environnement courant."""
    for k in ["DATABASE_URL", "REDIS_URL", "REQUIRE_REDIS", "DB_AUTO_CREATE"]:
        monkeypatch.delenv(k, raising=False)
    values = {"DATABASE_URL": None, "REDIS_URL": None, "REQUIRE_REDIS": False}
    values.update(overrides)
    return Settings(**values)


def test_container_memory_path(monkeypatch: Any) -> None:
    """Teste que le container utilise le backend mémoire par défaut."""
    c = Container(_settings(monkeypatch))
    assert c.storage_backend == "memory"
    assert isinstance(c.repository, InMemorySclDataRepository)
    assert c.scl_service.repository is c.repository


def test_container_sql_path(monkeypatch: Any) -> None:
    """Teste le dépôt SQL quand DATABASE_URL est défini."""
    c = Container(
        _settings(monkeypatch, DATABASE_URL="sqlite+pysqlite:///:memory:", DB_AUTO_CREATE=True)
    )
    assert c.storage_backend == "sql"
    assert isinstance(c.repository, SqlSclDataRepository)
    assert c.scl_service.list_scl(SclType.SCD) == []


def test_container_redis_path(monkeypatch: Any) -> None:
    """Teste le dépôt Redis quand le serveur répond."""
    monkeypatch.setattr(redis.Redis, "from_url", lambda *a, **k: FakeRedis())
    c = Container(_settings(monkeypatch, REDIS_URL="redis://localhost:6379/0"))
    assert c.storage_backend == "redis"
    assert isinstance(c.repository, RedisSclDataRepository)


def _unreachable_redis(*args: Any, **kwargs: Any) -> Mock:
    client = Mock()
    client.ping.side_effect = redis.exceptions.ConnectionError("refused")
    return client


def test_container_redis_fallback_without_require(monkeypatch: Any) -> None:
    """Teste le repli mémoire quand Redis est injoignable et non exigé."""
    monkeypatch.setattr(redis.Redis, "from_url", _unreachable_redis)
    c = Container(_settings(monkeypatch, REDIS_URL="redis://localhost:6379/0"))
    assert c.storage_backend == "memory-fallback"
    assert isinstance(c.repository, InMemorySclDataRepository)


def test_container_require_redis_unreachable_raises(monkeypatch: Any) -> None:
    """Teste l'échec au démarrage quand Redis est exigé mais injoignable."""
    monkeypatch.setattr(redis.Redis, "from_url", _unreachable_redis)
    with pytest.raises(RuntimeError):
        Container(
            _settings(monkeypatch, REDIS_URL="redis://localhost:6379/0", REQUIRE_REDIS=True)
        )


def test_container_require_redis_without_url_raises(monkeypatch: Any) -> None:
    """Teste l'échec au démarrage quand Redis est exigé sans URL."""
    with pytest.raises(RuntimeError):
        Container(_settings(monkeypatch, REQUIRE_REDIS=True))


def test_container_default_user(monkeypatch: Any) -> None:
    """Teste la propagation de DEFAULT_USER au service."""
    c = Container(_settings(monkeypatch, DEFAULT_USER="operator"))
    assert c.scl_service.default_user == "operator"
