"""Contents API client: repository list, directory listings, raw file downloads."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..config import Settings, require_token
from ..errors import FetchError, ListingError
from ..models import DirectoryEntry, EntryKind, Repository
from .walk import join_path

logger = logging.getLogger(__name__)

_KINDS = {"file": EntryKind.FILE, "dir": EntryKind.DIRECTORY}


def _entry_from_json(item: dict[str, Any], parent: str) -> Optional[DirectoryEntry]:
    """Build a DirectoryEntry; symlinks, submodules and malformed items give None."""
    if not isinstance(item, dict):
        return None
    kind = _KINDS.get(str(item.get("type", "")))
    name = item.get("name")
    if kind is None or not name or not isinstance(name, str):
        return None
    return DirectoryEntry(
        name=name,
        kind=kind,
        path=item.get("path") or join_path(parent, name),
        download_url=item.get("download_url"),
    )


class ContentsClient:
    """Authenticated client for the hosting service's REST API.

    Holds one ``requests.Session``; pass ``session`` to inject a fake.
    """

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        self.settings = settings
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "User-Agent": settings.user_agent,
            "Authorization": f"Bearer {require_token(settings)}",
        })

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ContentsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get_json(self, url: str, what: str, **kwargs: Any) -> Any:
        try:
            response = self.session.get(url, timeout=self.settings.timeout, **kwargs)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            raise ListingError(what, str(e)) from e
        except ValueError as e:
            raise ListingError(what, f"invalid JSON: {e}") from e

    def list_repositories(self) -> list[Repository]:
        """First page of the authenticated user's repositories."""
        data = self._get_json(
            f"{self.settings.api_url}/user/repos",
            "user/repos",
            params={"per_page": self.settings.per_page},
        )
        if not isinstance(data, list):
            raise ListingError("user/repos", "expected a JSON array")
        repos = []
        for item in data:
            if not isinstance(item, dict) or not item.get("name"):
                continue
            name = item["name"]
            owner = item.get("owner")
            owner = owner.get("login", "") if isinstance(owner, dict) else ""
            repos.append(Repository(name=name, full_name=item.get("full_name") or f"{owner}/{name}", owner=owner))
        logger.debug("Listed %d repositories", len(repos))
        return repos

    def list_directory(self, owner: str, repo: str, path: str = "") -> list[DirectoryEntry]:
        """Entries of one directory, in the order the API returns them."""
        url = f"{self.settings.api_url}/repos/{owner}/{repo}/contents/{path}"
        data = self._get_json(url, path)
        if not isinstance(data, list):
            # contents/<file> returns an object, not an array
            raise ListingError(path, "not a directory")
        entries = [e for e in (_entry_from_json(item, path) for item in data) if e is not None]
        logger.debug("%s/%s:%s -> %d entries", owner, repo, path or "/", len(entries))
        return entries

    def fetch_file(self, entry: DirectoryEntry) -> str:
        """Raw text of a file entry."""
        if not entry.download_url:
            raise FetchError(f"{entry.path}: no download URL")
        try:
            response = self.session.get(entry.download_url, timeout=self.settings.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise FetchError(f"{entry.path}: {e}") from e
        return response.text

    def lister(self, repository: Repository):
        """Bind owner/repo so the walker only has to pass a path."""
        return lambda path: self.list_directory(repository.owner, repository.name, path)
