"""Tests pour la conversion texte XML <-> élément SCL."""

from __future__ import annotations

import pytest

from scldata.domain.converter import to_element, to_string
from scldata.domain.errors import InvalidSclDocument
from scldata.domain.models import SclType
from scldata.domain.scl_constants import SCL_NS_URI
from tests.fakes import create_compas_private, read_scl


def test_to_element_rejects_malformed_xml() -> None:
    """Teste le rejet d'un XML mal formé."""
    with pytest.raises(InvalidSclDocument):
        to_element("<SCL xmlns='http://www.iec.ch/61850/2003/SCL'>")


def test_to_element_rejects_other_root() -> None:
    """Teste le rejet d'une racine autre que SCL (ou hors espace SCL)."""
    with pytest.raises(InvalidSclDocument) as excinfo:
        to_element("<SCL/>")
    assert excinfo.value.details == {"root": "SCL"}
    with pytest.raises(InvalidSclDocument):
        to_element(f"<Other xmlns='{SCL_NS_URI}'/>")


def test_to_string_uses_readable_prefixes() -> None:
    """Teste la sérialisation: SCL en espace par défaut, extension préfixée `compas`."""
    scl = read_scl()
    create_compas_private(scl, "NAME", SclType.SCD)

    xml = to_string(scl)

    assert xml.startswith("<SCL ")
    assert f'xmlns="{SCL_NS_URI}"' in xml
    assert "<compas:SclName>NAME</compas:SclName>" in xml
    assert "ns0:" not in xml


def test_parse_after_serialize_keeps_content() -> None:
    """Teste que le contenu hors métadonnées est conservé."""
    scl = to_element(to_string(read_scl()))
    assert scl.find(f"{{{SCL_NS_URI}}}Substation").get("name") == "AA1"
    assert scl.find(f"{{{SCL_NS_URI}}}IED").get("manufacturer") == "Vendor"
