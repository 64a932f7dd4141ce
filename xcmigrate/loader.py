"""Reads Core Data model versions into the generic entity representation."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from .exceptions import ModelLoadError
from .models import Entity, Field, Version, WarningEntry

logger = logging.getLogger(__name__)

CONTENTS_FILE = "contents"
FIELD_TAGS = ("attribute", "relationship")
# Diagram layout, irrelevant to migrations
IGNORED_TAGS = ("elements",)


class ModelLoader:
    """
    Parses the `contents` XML of a .xcdatamodel directory.

    Unknown elements do not stop loading; they are collected in
    `warnings` so the caller can show them.
    """

    def __init__(self):
        self.warnings: list[WarningEntry] = []

    def load(self, number: int, path: str | Path) -> Version:
        """
        Load one version from its directory.

        Raises:
            ModelLoadError: If the contents file is missing or not valid XML
        """
        contents = Path(path) / CONTENTS_FILE
        logger.info("Loading version %d from '%s'", number, path)
        try:
            # Bytes, so expat honours the encoding declared by the document
            xml_data = contents.read_bytes()
        except OSError as e:
            raise ModelLoadError(number, str(contents), e.strerror or str(e))

        version = self.parse_contents(xml_data, number, source=str(contents))
        version.path = str(path)
        return version

    def parse_contents(
        self,
        xml_data: str | bytes,
        number: int,
        source: Optional[str] = None
    ) -> Version:
        """Parse a contents document held in memory."""
        try:
            root = ET.fromstring(xml_data)
        except ET.ParseError as e:
            raise ModelLoadError(number, source or "<string>", str(e))

        version = Version(number=number)
        for element in root:
            if element.tag == "entity":
                version.entities.append(self._read_entity(element, source))
            elif element.tag in IGNORED_TAGS:
                logger.debug("element '%s' is ignored", element.tag)
            else:
                self._warn_unknown(element, source)
        return version

    def _read_entity(self, element: ET.Element, source: Optional[str]) -> Entity:
        entity = Entity(name=element.get("name", ""))
        logger.debug("entity: %s", entity.name)

        for child in element:
            if child.tag in FIELD_TAGS:
                logger.debug("  %s: %s", child.tag, child.get("name"))
                entity.fields.append(Field(
                    name=child.get("name", ""),
                    attributes=dict(child.attrib),
                ))
            else:
                self._warn_unknown(child, source, parent=entity.name)
        return entity

    def _warn_unknown(
        self,
        element: ET.Element,
        source: Optional[str],
        parent: Optional[str] = None
    ):
        where = f" in entity {parent}" if parent else ""
        message = f"Unknown type {element.tag}{where}"
        logger.info(message)
        self.warnings.append(WarningEntry(
            code="UNKNOWN_ELEMENT",
            message=message,
            path=source,
        ))
