"""Shared fakes: an in-memory hosting service and registry."""

from __future__ import annotations

import pytest

from repostale.errors import FetchError, ListingError
from repostale.models import DirectoryEntry, EntryKind, Repository


def project(*refs: tuple) -> str:
    """Minimal SDK-style project with the given (Include, Version) references."""
    items = []
    for name, version in refs:
        attrs = ""
        if name is not None:
            attrs += f' Include="{name}"'
        if version is not None:
            attrs += f' Version="{version}"'
        items.append(f"    <PackageReference{attrs} />")
    return '<Project Sdk="Microsoft.NET.Sdk">\n  <ItemGroup>\n' + "\n".join(items) + "\n  </ItemGroup>\n</Project>\n"


class FakeHost:
    """
    Stands in for ContentsClient.

    files: {"owner/repo": {"path/to/file": content or None}}; directories are
    implied by paths and listed in sorted order. None content makes the
    download fail; paths in failing make the listing fail.
    """

    def __init__(self, files: dict, failing: tuple = ()) -> None:
        self.files = files
        self.failing = set(failing)
        self.listed: list[str] = []
        self.fetched: list[str] = []
        self.urls: dict[str, str] = {}  # download_url -> owner/repo

    def list_repositories(self) -> list[Repository]:
        repos = []
        for full_name in self.files:
            owner, name = full_name.split("/")
            repos.append(Repository(name=name, full_name=full_name, owner=owner))
        return repos

    def list_directory(self, full_name: str, path: str) -> list[DirectoryEntry]:
        self.listed.append(f"{full_name}:{path}")
        if f"{full_name}:{path}" in self.failing:
            raise ListingError(path, "500 Server Error")
        prefix = f"{path}/" if path else ""
        children: dict[str, EntryKind] = {}
        for file_path in self.files[full_name]:
            if not file_path.startswith(prefix):
                continue
            head, sep, _ = file_path[len(prefix):].partition("/")
            children.setdefault(head, EntryKind.DIRECTORY if sep else EntryKind.FILE)
        entries = []
        for name, kind in sorted(children.items()):
            url = None
            if kind is EntryKind.FILE:
                url = f"https://raw.example/{full_name}/{prefix}{name}"
                self.urls[url] = full_name
            entries.append(DirectoryEntry(name=name, kind=kind, path=prefix + name, download_url=url))
        return entries

    def lister(self, repository: Repository):
        return lambda path: self.list_directory(repository.full_name, path)

    def fetch_file(self, entry: DirectoryEntry) -> str:
        full_name = self.urls[entry.download_url]
        self.fetched.append(entry.path)
        content = self.files[full_name][entry.path]
        if content is None:
            raise FetchError(f"{entry.path}: 404 Not Found")
        return content


class FakeResolver:
    """Stands in for NuGetResolver: {lowercase name: latest}; unknown names give None."""

    def __init__(self, latest: dict) -> None:
        self.latest = {k.lower(): v for k, v in latest.items()}
        self.asked: list = []

    def latest_version(self, package_name):
        self.asked.append(package_name)
        if not package_name:
            return None
        return self.latest.get(package_name.lower())


@pytest.fixture
def make_host():
    return FakeHost


@pytest.fixture
def make_resolver():
    return FakeResolver


@pytest.fixture
def make_project():
    return project
