"""
Application principale FastAPI.

Ce module assemble les composants du service de données SCL : middlewares, gestion des erreurs,
routes et métriques.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (request id, timing, Prometheus)
- Traduire les erreurs du service en enveloppes JSON
- Monter les routers (santé, SCL, métriques)
"""

from __future__ import annotations

from fastapi import FastAPI

from scldata.api.errors import handle_scl_error
from scldata.api.routes_health import router as health_router
from scldata.api.routes_scl import router as scl_router
from scldata.app.metrics import PrometheusMiddleware, metrics_router
from scldata.core.container import container
from scldata.core.logging import setup_logging
from scldata.domain.errors import SclDataServiceError
from scldata.middlewares.request_id import RequestIDMiddleware
from scldata.middlewares.timing import TimingMiddleware


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Lit les paramètres d'exécution
    - Ajoute les middlewares utiles au debug/traçabilité
    - Publie les routes de santé, SCL et métriques
    """
    settings = container.settings
    setup_logging(settings.LOG_LEVEL)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(SclDataServiceError, handle_scl_error)
    app.include_router(health_router)
    app.include_router(scl_router)
    app.include_router(metrics_router)
    return app


app = create_app()
