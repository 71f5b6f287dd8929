"""Configuration de test pour pytest avec gestion des chemins.

Ajoute la racine du projet au sys.path pour résoudre `scldata` et `tests.fakes`, et fournit les
fixtures communes (processeur, dépôt mémoire, service).
"""

import os
import sys

import pytest

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from scldata.domain.scl_processor import SclElementProcessor  # noqa: E402
from scldata.domain.services import SclDataService  # noqa: E402
from scldata.infra.repo.memory_repo import InMemorySclDataRepository  # noqa: E402


@pytest.fixture
def processor() -> SclElementProcessor:
    """Processeur de métadonnées SCL."""
    return SclElementProcessor()


@pytest.fixture
def memory_repo() -> InMemorySclDataRepository:
    """Dépôt mémoire vide."""
    return InMemorySclDataRepository()


@pytest.fixture
def service(memory_repo, processor) -> SclDataService:
    """Service adossé au dépôt mémoire."""
    return SclDataService(memory_repo, processor, default_user="tester")
