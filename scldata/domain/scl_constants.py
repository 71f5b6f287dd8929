"""Noms d'éléments, d'attributs et espaces de noms utilisés dans les documents SCL.

Ce module évite les chaînes magiques dans le processeur et le convertisseur XML.
"""

SCL_NS_URI = "http://www.iec.ch/61850/2003/SCL"
COMPAS_NS_URI = "https://www.lfenergy.org/compas/extension/v1"
COMPAS_NS_PREFIX = "compas"

SCL_ELEMENT_NAME = "SCL"
SCL_HEADER_ELEMENT_NAME = "Header"
SCL_TEXT_ELEMENT_NAME = "Text"
SCL_HISTORY_ELEMENT_NAME = "History"
SCL_HITEM_ELEMENT_NAME = "Hitem"
SCL_PRIVATE_ELEMENT_NAME = "Private"

SCL_HEADER_ID_ATTR = "id"
SCL_HEADER_VERSION_ATTR = "version"
SCL_HEADER_REVISION_ATTR = "revision"
SCL_PRIVATE_TYPE_ATTR = "type"

SCL_HITEM_VERSION_ATTR = "version"
SCL_HITEM_REVISION_ATTR = "revision"
SCL_HITEM_WHEN_ATTR = "when"
SCL_HITEM_WHO_ATTR = "who"
SCL_HITEM_WHAT_ATTR = "what"

COMPAS_PRIVATE_TYPE = "compas_scl"
COMPAS_SCL_NAME_EXTENSION = "SclName"
COMPAS_SCL_FILE_TYPE_EXTENSION = "SclFileType"


def scl_tag(name: str) -> str:
    """Nom qualifié ElementTree d'un élément de l'espace SCL."""
    return f"{{{SCL_NS_URI}}}{name}"


def compas_tag(name: str) -> str:
    """Nom qualifié ElementTree d'un élément de l'extension CoMPAS."""
    return f"{{{COMPAS_NS_URI}}}{name}"
