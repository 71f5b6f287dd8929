"""Dépendances partagées pour les routes de l'API.

But du module
-------------
- Centraliser l'accès aux instances nécessaires aux endpoints (service SCL).
- Offrir un point d'ancrage surchargeable dans les tests via
  `app.dependency_overrides[get_scl_service]`.
"""

from scldata.core.container import container
from scldata.domain.services import SclDataService


def get_scl_service() -> SclDataService:
    """Retourne le service SCL du conteneur applicatif."""
    return container.scl_service
