"""
Sonde de santé du service de données SCL.

`/health` indique le backend de stockage retenu au démarrage (`sql`, `redis`, `memory` ou
`memory-fallback` quand Redis n'a pas répondu), les URL configurées et les types SCL servis sous
`/scl/v1/{scl_type}`.
"""

from fastapi import APIRouter

from scldata.api.schemas import HealthResponse
from scldata.core.container import container
from scldata.domain.models import SclType

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """État du service et du stockage choisi par le conteneur."""
    settings = container.settings
    return HealthResponse(
        status="ok",
        app=settings.APP_NAME,
        env=settings.APP_ENV,
        storage=container.storage_backend,
        database_url=bool(settings.DATABASE_URL),
        redis_url=bool(settings.REDIS_URL),
        scl_types=[t.value for t in SclType],
    )
