"""
Fakes et utilitaires pour les tests unitaires.

Ce module fournit des documents SCL de test et un client Redis factice (dict en mémoire)
reproduisant les commandes utilisées par le dépôt Redis.
"""

from __future__ import annotations

import uuid
import xml.etree.ElementTree as ET

from scldata.domain.converter import to_element
from scldata.domain.models import SclType
from scldata.domain.scl_processor import SclElementProcessor

SCL_TEMPLATE = """<SCL xmlns="http://www.iec.ch/61850/2003/SCL"
     version="2007" revision="B" release="4">
    {header}
    <Substation name="AA1" desc="Substation">
        <VoltageLevel name="J1"/>
    </Substation>
    <IED name="IED1" manufacturer="Vendor"/>
</SCL>
"""


def read_scl(version: str | None = "1.0.0", with_header: bool = True) -> ET.Element:
    """Construit un SCL de test; le Header porte un id aléatoire et `version`."""
    header = ""
    if with_header:
        attrs = f'id="{uuid.uuid4()}"'
        if version is not None:
            attrs += f' version="{version}"'
        header = f'<Header {attrs} revision=""/>'
    return to_element(SCL_TEMPLATE.format(header=header))


def create_compas_private(scl: ET.Element, name: str, scl_type: SclType) -> ET.Element:
    """Ajoute l'extension du service (nom/type) à un SCL de test."""
    return SclElementProcessor().write_extension(scl, name, scl_type)


class FakeRedis:
    """Client Redis factice: hashes, sets et pipeline minimal."""

    def __init__(self):
        """Initialise des structures vides."""
        self.hashes: dict[str, dict[str, str]] = {}
        self.sets: dict[str, set[str]] = {}
        self.watched: list[str] = []

    def ping(self) -> bool:
        """Répond toujours."""
        return True

    def hsetnx(self, key: str, field: str, value: str) -> int:
        """Écrit le champ seulement s'il est absent."""
        h = self.hashes.setdefault(key, {})
        if field in h:
            return 0
        h[field] = value
        return 1

    def hget(self, key: str, field: str) -> str | None:
        """Lit un champ."""
        return self.hashes.get(key, {}).get(field)

    def hkeys(self, key: str) -> list[str]:
        """Liste les champs d'un hash."""
        return list(self.hashes.get(key, {}))

    def hdel(self, key: str, field: str) -> int:
        """Supprime un champ."""
        return 1 if self.hashes.get(key, {}).pop(field, None) is not None else 0

    def hexists(self, key: str, field: str) -> bool:
        """Indique si le champ existe."""
        return field in self.hashes.get(key, {})

    def hlen(self, key: str) -> int:
        """Nombre de champs d'un hash."""
        return len(self.hashes.get(key, {}))

    def sadd(self, key: str, member: str) -> int:
        """Ajoute un membre à un ensemble."""
        self.sets.setdefault(key, set()).add(member)
        return 1

    def srem(self, key: str, member: str) -> int:
        """Retire un membre d'un ensemble."""
        self.sets.get(key, set()).discard(member)
        return 1

    def smembers(self, key: str) -> set[str]:
        """Membres d'un ensemble."""
        return set(self.sets.get(key, set()))

    def delete(self, key: str) -> int:
        """Supprime une clé."""
        return 1 if self.hashes.pop(key, None) is not None else 0

    def pipeline(self) -> FakePipeline:
        """Pipeline exécutant les commandes à `execute()`."""
        return FakePipeline(self)

    def transaction(self, func, *watches: str) -> list:
        """Transaction WATCH/MULTI: `func` lit en direct, puis bufferise après `multi()`."""
        self.watched.extend(watches)
        pipe = FakePipeline(self, buffered=False)
        func(pipe)
        return pipe.execute()


class FakePipeline:
    """Pipeline factice: enregistre les appels puis les rejoue."""

    def __init__(self, client: FakeRedis, buffered: bool = True):
        """Associe le pipeline au client factice (mode direct tant que `buffered` est faux)."""
        self._client = client
        self._buffered = buffered
        self._calls: list[tuple[str, tuple]] = []

    def multi(self) -> None:
        """Passe en mode bufferisé."""
        self._buffered = True

    def __getattr__(self, name: str):
        """Enregistre toute commande du client (ou l'exécute en mode direct)."""
        if not self._buffered:
            return getattr(self._client, name)

        def _record(*args):
            self._calls.append((name, args))
            return self

        return _record

    def execute(self) -> list:
        """Rejoue les commandes enregistrées."""
        return [getattr(self._client, name)(*args) for name, args in self._calls]
