"""
Script de lancement du service de données SCL.

Démarre l'application FastAPI avec uvicorn sur l'hôte/port de la configuration (`APP_HOST`,
`APP_PORT`, surchargeable par `PORT`).
"""

import os

import uvicorn

from scldata.app.main import app
from scldata.core.container import container


def main():
    """Point d'entrée principal du serveur."""
    settings = container.settings
    port = int(os.environ.get("PORT", settings.APP_PORT))
    uvicorn.run(app, host=settings.APP_HOST, port=port, reload=False)


if __name__ == "__main__":
    main()
