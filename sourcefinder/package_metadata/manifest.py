"""
Parsing of POM manifest documents
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from sourcefinder.common.models import Coordinate
from sourcefinder.package_metadata.properties import has_placeholders


class SourceFieldKind(Enum):
    """Locations in a manifest that may carry a source repository link"""

    PROJECT_URL = "project/url"
    SCM_URL = "scm/url"
    SCM_CONNECTION = "scm/connection"
    SCM_DEVELOPER_CONNECTION = "scm/developerConnection"
    ISSUE_URL = "issueManagement/url"


# Fixed priority order; the declared project URL wins over SCM fields
SOURCE_FIELD_PATHS = (
    (SourceFieldKind.PROJECT_URL, ("url",)),
    (SourceFieldKind.SCM_URL, ("scm", "url")),
    (SourceFieldKind.SCM_CONNECTION, ("scm", "connection")),
    (SourceFieldKind.SCM_DEVELOPER_CONNECTION, ("scm", "developerConnection")),
    (SourceFieldKind.ISSUE_URL, ("issueManagement", "url")),
)


@dataclass(frozen=True)
class SourceField:
    kind: SourceFieldKind
    value: str

    @property
    def has_placeholders(self):
        return has_placeholders(self.value)


@dataclass(frozen=True)
class ManifestDocument:
    """
    The parts of a manifest relevant to source lookup

    Built once per fetched document and never mutated
    """

    coordinate: Optional[Coordinate]
    properties: Dict[str, str] = field(default_factory=dict)
    parent: Optional[Coordinate] = None
    source_fields: Tuple[SourceField, ...] = ()
    text: str = ""


def _local_name(tag):
    # Comments and processing instructions have non-string tags
    if not isinstance(tag, str):
        return None
    return tag.rsplit("}", 1)[-1]


def _child(element, name):
    if element is None:
        return None
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _text_at(element, path):
    node = element
    for name in path:
        node = _child(node, name)
        if node is None:
            return None
    if node.text is None:
        return None
    text = node.text.strip()
    return text or None


def _parse_parent(root):
    parent = _child(root, "parent")
    if parent is None:
        return None
    group = _text_at(parent, ("groupId",))
    artifact = _text_at(parent, ("artifactId",))
    version = _text_at(parent, ("version",))
    if not (group and artifact and version):
        return None
    return Coordinate(group, artifact, version)


def _builtin_properties(root, parent):
    """
    Properties Maven defines implicitly for every project

    Group and version fall back to the parent block when the project omits them
    """
    group = _text_at(root, ("groupId",)) or (parent.group if parent else None)
    version = _text_at(root, ("version",)) or (parent.version if parent else None)
    values = {
        "groupId": group,
        "artifactId": _text_at(root, ("artifactId",)),
        "version": version,
        "name": _text_at(root, ("name",)),
        "url": _text_at(root, ("url",)),
    }
    if parent:
        values["parent.groupId"] = parent.group
        values["parent.artifactId"] = parent.artifact
        values["parent.version"] = parent.version

    builtins = {}
    for key, value in values.items():
        if value is None:
            continue
        builtins[f"project.{key}"] = value
        builtins[f"pom.{key}"] = value
    return builtins


def _declared_properties(root):
    props = {}
    props_el = _child(root, "properties")
    if props_el is None:
        return props
    for child in props_el:
        name = _local_name(child.tag)
        if name:
            props[name] = (child.text or "").strip()
    return props


def _decode(content):
    if isinstance(content, str):
        return content
    return content.decode("utf-8", errors="replace")


def parse_manifest(content, logger=None):
    """
    Parse a POM document

    Args:
        content (bytes or str): Raw document
        logger (Logger): Optional logger instance

    Returns:
        ManifestDocument, or None if the document is not a well-formed POM
    """
    if not content:
        return None
    try:
        root = ET.fromstring(content)
    except (ET.ParseError, ValueError) as e:
        logger and logger.debug(f"Malformed manifest: {e}")
        return None

    if _local_name(root.tag) != "project":
        logger and logger.debug(f"Unexpected manifest root element: {root.tag}")
        return None

    parent = _parse_parent(root)
    properties = _builtin_properties(root, parent)
    properties.update(_declared_properties(root))

    coordinate = None
    group = properties.get("project.groupId")
    artifact = properties.get("project.artifactId")
    version = properties.get("project.version")
    if group and artifact and version:
        coordinate = Coordinate(group, artifact, version)

    source_fields = []
    for kind, path in SOURCE_FIELD_PATHS:
        value = _text_at(root, path)
        if value:
            source_fields.append(SourceField(kind, value))

    return ManifestDocument(
        coordinate=coordinate,
        properties=properties,
        parent=parent,
        source_fields=tuple(source_fields),
        text=_decode(content),
    )
