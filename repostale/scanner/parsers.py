"""Parser for MSBuild project files (.csproj)."""

import xml.etree.ElementTree as ET
from typing import Optional

from ..errors import ProjectFileError
from ..models import Dependency

PACKAGE_REFERENCE = "PackageReference"


def _local_name(tag: str) -> str:
    """'{http://schemas.microsoft.com/developer/msbuild/2003}Foo' -> 'Foo'."""
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    """Text of the first child with this local name (MSBuild metadata-as-element form)."""
    for child in element:
        if _local_name(child.tag) == name:
            return (child.text or "").strip() or None
    return None


def parse_project_file(content: str) -> list[Dependency]:
    """
    Extract every PackageReference, in document order, ignoring namespaces.

    Include is the package name and Version the declared version; either may
    be missing. <Version> as a child element is read when the attribute is
    absent. Raises ProjectFileError on malformed XML.
    """
    try:
        root = ET.fromstring(content.lstrip("\ufeff"))
    except ET.ParseError as e:
        raise ProjectFileError(f"Malformed project file: {e}") from e

    deps: list[Dependency] = []
    for element in root.iter():
        if _local_name(element.tag) != PACKAGE_REFERENCE:
            continue
        version = element.get("Version")
        if version is None:
            version = _child_text(element, "Version")
        deps.append(Dependency(name=element.get("Include"), declared_version=version))
    return deps
