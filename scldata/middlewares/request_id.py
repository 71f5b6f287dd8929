"""Identifiant de requête pour corréler logs et enveloppes d'erreur.

L'identifiant vient de l'en-tête X-Request-ID du client, ou est généré. Il est:
- rangé dans `request.state.request_id`, d'où `extract_trace_id` le reprend comme `trace_id`;
- lié au contexte structlog, de sorte que `scl_created`, `scl_updated`, etc. le portent;
- renvoyé en en-tête de réponse.
"""

from collections.abc import Callable
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Associe un identifiant à chaque requête SCL et le publie."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request, call_next: Callable):
        """Lie l'identifiant au contexte de log le temps de la requête."""
        request_id = request.headers.get(self.header_name) or uuid4().hex
        request.state.request_id = request_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        response.headers[self.header_name] = request_id
        return response
