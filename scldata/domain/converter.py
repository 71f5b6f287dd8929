"""Conversion texte XML <-> élément SCL (ElementTree).

Les dépôts stockent la forme texte; chaque lecture renvoie un arbre fraîchement analysé, de sorte
qu'aucune version stockée n'est modifiée en place.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from scldata.domain.errors import InvalidSclDocument
from scldata.domain.scl_constants import (
    COMPAS_NS_PREFIX,
    COMPAS_NS_URI,
    SCL_ELEMENT_NAME,
    SCL_NS_URI,
    scl_tag,
)

ET.register_namespace("", SCL_NS_URI)
ET.register_namespace(COMPAS_NS_PREFIX, COMPAS_NS_URI)


def to_element(xml: str) -> ET.Element:
    """Analyse un document SCL et retourne son élément racine.

    Lève `InvalidSclDocument` si le XML est mal formé ou si la racine n'est pas `SCL`.
    """
    try:
        root = ET.fromstring(xml)
    except ET.ParseError as err:
        raise InvalidSclDocument(f"Malformed SCL document: {err}") from err
    if root.tag != scl_tag(SCL_ELEMENT_NAME):
        raise InvalidSclDocument(
            "Root element is not an SCL element", details={"root": root.tag}
        )
    return root


def to_string(scl: ET.Element) -> str:
    """Sérialise un élément SCL en texte XML (unicode)."""
    return ET.tostring(scl, encoding="unicode")
