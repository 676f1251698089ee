"""Structured records for listings, dependencies and reports."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "dir"


@dataclass(frozen=True)
class DirectoryEntry:
    """One item of a remote directory listing."""

    name: str
    kind: EntryKind
    path: str = ""  # repo-relative, e.g. "src/App/App.csproj"
    download_url: Optional[str] = None  # files only

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass(frozen=True)
class Repository:
    """Repository descriptor from the user's repository list."""

    name: str
    full_name: str
    owner: str


@dataclass(frozen=True)
class Dependency:
    """A PackageReference. Either attribute may be missing."""

    name: Optional[str]
    declared_version: Optional[str]


@dataclass(frozen=True)
class VersionRange:
    """One registration page range; only ``upper`` matters."""

    lower: str
    upper: str


@dataclass
class DependencyReport:
    """A dependency with the latest version the registry knows about."""

    dependency: Dependency
    latest_version: Optional[str] = None

    @property
    def outdated(self) -> bool:
        return self.latest_version is not None and self.latest_version != self.dependency.declared_version


@dataclass
class ProjectFileReport:
    """All dependency reports for one project file."""

    repository: str  # full_name
    path: str
    name: str
    dependencies: list[DependencyReport] = field(default_factory=list)

    @property
    def outdated(self) -> list[DependencyReport]:
        return [d for d in self.dependencies if d.outdated]


@dataclass
class AuditSummary:
    """Totals for one run over the account."""

    repositories_listed: int = 0
    repositories_with_projects: int = 0
    repositories_failed: list[str] = field(default_factory=list)
    files: list[ProjectFileReport] = field(default_factory=list)

    @property
    def dependency_count(self) -> int:
        return sum(len(f.dependencies) for f in self.files)

    @property
    def outdated_count(self) -> int:
        return sum(len(f.outdated) for f in self.files)
