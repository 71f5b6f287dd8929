"""
Lecture et écriture des métadonnées du service dans un document SCL.

Le service ne manipule jamais directement l'arbre XML: toutes les lectures/écritures de l'en-tête
(`Header`: id, version, historique) et de l'extension (`Private type="compas_scl"`: nom et type)
passent par `SclElementProcessor`. Les éléments sont adressés par leur nom qualifié, jamais par
position.
"""

# ============================================================
# Module : scldata/domain/scl_processor.py
# Objet  : Accès typé à l'en-tête et à l'extension d'un SCL.
# ============================================================

from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import UTC, datetime

from scldata.domain.errors import HeaderNotFound
from scldata.domain.models import HistoryItem, SclExtension, SclType, Version
from scldata.domain.scl_constants import (
    COMPAS_PRIVATE_TYPE,
    COMPAS_SCL_FILE_TYPE_EXTENSION,
    COMPAS_SCL_NAME_EXTENSION,
    SCL_HEADER_ELEMENT_NAME,
    SCL_HEADER_ID_ATTR,
    SCL_HEADER_REVISION_ATTR,
    SCL_HEADER_VERSION_ATTR,
    SCL_HISTORY_ELEMENT_NAME,
    SCL_HITEM_ELEMENT_NAME,
    SCL_HITEM_REVISION_ATTR,
    SCL_HITEM_VERSION_ATTR,
    SCL_HITEM_WHAT_ATTR,
    SCL_HITEM_WHEN_ATTR,
    SCL_HITEM_WHO_ATTR,
    SCL_PRIVATE_ELEMENT_NAME,
    SCL_PRIVATE_TYPE_ATTR,
    SCL_TEXT_ELEMENT_NAME,
    compas_tag,
    scl_tag,
)

# Text et Private précèdent le reste du contenu (tBaseElement).
_LEADING_TAGS = {scl_tag(SCL_TEXT_ELEMENT_NAME), scl_tag(SCL_PRIVATE_ELEMENT_NAME)}


def _leading_position(element: ET.Element) -> int:
    """Index d'insertion juste après les enfants Text/Private en tête."""
    for index, child in enumerate(element):
        if child.tag not in _LEADING_TAGS:
            return index
    return len(element)


class SclElementProcessor:
    """Accesseur sans état des champs propres au service dans un élément SCL."""

    # -- Header --------------------------------------------------------------

    def get_header(self, scl: ET.Element) -> ET.Element | None:
        """Retourne l'élément Header, ou None s'il est absent."""
        return scl.find(scl_tag(SCL_HEADER_ELEMENT_NAME))

    def add_header(self, scl: ET.Element) -> ET.Element:
        """Crée un Header vide et l'insère à sa place réglementaire."""
        header = ET.Element(scl_tag(SCL_HEADER_ELEMENT_NAME))
        scl.insert(_leading_position(scl), header)
        return header

    def ensure_header(self, scl: ET.Element) -> ET.Element:
        """Retourne le Header existant ou en crée un nouveau."""
        header = self.get_header(scl)
        if header is None:
            header = self.add_header(scl)
        return header

    def read_header(self, scl: ET.Element) -> tuple[str, Version]:
        """Lit (id, version) dans le Header.

        Lève `HeaderNotFound` si le Header, son id ou sa version manquent, et
        `InvalidVersionFormat` si la version est illisible.
        """
        header = self.get_header(scl)
        if header is None:
            raise HeaderNotFound("No Header found in SCL document")
        scl_id = header.get(SCL_HEADER_ID_ATTR)
        raw_version = header.get(SCL_HEADER_VERSION_ATTR)
        if not scl_id or not raw_version:
            raise HeaderNotFound(
                "Header without id or version",
                details={"id": scl_id, "version": raw_version},
            )
        return scl_id, Version.parse(raw_version)

    def read_header_version(self, scl: ET.Element) -> Version | None:
        """Version écrite dans le Header, ou None si le Header ou l'attribut manquent."""
        header = self.get_header(scl)
        if header is None or not header.get(SCL_HEADER_VERSION_ATTR):
            return None
        return Version.parse(header.get(SCL_HEADER_VERSION_ATTR))

    def set_header_identity(self, scl: ET.Element, scl_id: str, version: Version) -> ET.Element:
        """Écrit (ou écrase) les attributs id et version du Header."""
        header = self.ensure_header(scl)
        header.set(SCL_HEADER_ID_ATTR, scl_id)
        header.set(SCL_HEADER_VERSION_ATTR, str(version))
        if header.get(SCL_HEADER_REVISION_ATTR) is None:
            header.set(SCL_HEADER_REVISION_ATTR, "")
        return header

    # -- Extension -----------------------------------------------------------

    def get_compas_private(self, scl: ET.Element) -> ET.Element | None:
        """Retourne le bloc Private du service, s'il existe."""
        for private in scl.findall(scl_tag(SCL_PRIVATE_ELEMENT_NAME)):
            if private.get(SCL_PRIVATE_TYPE_ATTR) == COMPAS_PRIVATE_TYPE:
                return private
        return None

    def add_compas_private(self, scl: ET.Element) -> ET.Element:
        """Crée le bloc Private du service (avant le Header)."""
        private = ET.Element(
            scl_tag(SCL_PRIVATE_ELEMENT_NAME), {SCL_PRIVATE_TYPE_ATTR: COMPAS_PRIVATE_TYPE}
        )
        scl.insert(_leading_position(scl), private)
        return private

    def read_extension(self, scl: ET.Element) -> SclExtension:
        """Lit nom, type et historique.

        L'absence du bloc Private n'est pas une erreur: l'extension retournée a alors `present`
        à False et nom/type à None.
        """
        history = self.read_history(scl)
        private = self.get_compas_private(scl)
        if private is None:
            return SclExtension(history=history)
        return SclExtension(
            name=self._child_text(private, COMPAS_SCL_NAME_EXTENSION),
            type=self._child_text(private, COMPAS_SCL_FILE_TYPE_EXTENSION),
            history=history,
            present=True,
        )

    def write_extension(self, scl: ET.Element, name: str, scl_type: SclType) -> ET.Element:
        """Crée le bloc Private si besoin et (ré)écrit nom et type."""
        private = self.get_compas_private(scl)
        if private is None:
            private = self.add_compas_private(scl)
        self._set_child_text(private, COMPAS_SCL_NAME_EXTENSION, name)
        self._set_child_text(private, COMPAS_SCL_FILE_TYPE_EXTENSION, scl_type.value)
        return private

    # -- History -------------------------------------------------------------

    def read_history(self, scl: ET.Element) -> list[HistoryItem]:
        """Retourne les entrées Hitem du Header, dans l'ordre du document."""
        header = self.get_header(scl)
        if header is None:
            return []
        history = header.find(scl_tag(SCL_HISTORY_ELEMENT_NAME))
        if history is None:
            return []
        return [
            HistoryItem(
                version=hitem.get(SCL_HITEM_VERSION_ATTR, ""),
                who=hitem.get(SCL_HITEM_WHO_ATTR),
                when=hitem.get(SCL_HITEM_WHEN_ATTR),
                what=hitem.get(SCL_HITEM_WHAT_ATTR),
            )
            for hitem in history.findall(scl_tag(SCL_HITEM_ELEMENT_NAME))
        ]

    def write_history(self, scl: ET.Element, items: list[HistoryItem]) -> None:
        """Remplace le contenu de History par les entrées fournies."""
        history = self._ensure_history(scl)
        for hitem in list(history):
            history.remove(hitem)
        for item in items:
            self._add_hitem(history, item)

    def append_history_item(
        self,
        scl: ET.Element,
        version: Version,
        what: str,
        who: str | None = None,
        when: str | None = None,
    ) -> HistoryItem:
        """Ajoute une entrée en fin d'historique, sans toucher aux précédentes."""
        item = HistoryItem(
            version=str(version),
            who=who,
            when=when or datetime.now(UTC).isoformat(),
            what=what,
        )
        self._add_hitem(self._ensure_history(scl), item)
        return item

    def _ensure_history(self, scl: ET.Element) -> ET.Element:
        header = self.ensure_header(scl)
        history = header.find(scl_tag(SCL_HISTORY_ELEMENT_NAME))
        if history is None:
            history = ET.Element(scl_tag(SCL_HISTORY_ELEMENT_NAME))
            header.insert(_leading_position(header), history)
        return history

    @staticmethod
    def _add_hitem(history: ET.Element, item: HistoryItem) -> ET.Element:
        attrs = {SCL_HITEM_VERSION_ATTR: item.version, SCL_HITEM_REVISION_ATTR: ""}
        if item.when is not None:
            attrs[SCL_HITEM_WHEN_ATTR] = item.when
        if item.who is not None:
            attrs[SCL_HITEM_WHO_ATTR] = item.who
        if item.what is not None:
            attrs[SCL_HITEM_WHAT_ATTR] = item.what
        return ET.SubElement(history, scl_tag(SCL_HITEM_ELEMENT_NAME), attrs)

    @staticmethod
    def _child_text(parent: ET.Element, name: str) -> str | None:
        child = parent.find(compas_tag(name))
        if child is None:
            return None
        return child.text or ""

    @staticmethod
    def _set_child_text(parent: ET.Element, name: str, value: str) -> None:
        child = parent.find(compas_tag(name))
        if child is None:
            child = ET.SubElement(parent, compas_tag(name))
        child.text = value
