"""Fleet audit: every repository on the account, one after another."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .config import Settings
from .errors import ProjectFileError
from .extractor import extract_and_report
from .format import Reporter
from .models import AuditSummary, ProjectFileReport, Repository
from .registry import NuGetResolver
from .scanner.listing import ContentsClient
from .scanner.walk import contains_marker_file

logger = logging.getLogger(__name__)


def _select(repos: list[Repository], only: Optional[Iterable[str]]) -> list[Repository]:
    """Keep repos whose full_name is in only (case-insensitive). Empty filter keeps all."""
    wanted = {name.lower() for name in only or ()}
    if not wanted:
        return repos
    return [r for r in repos if r.full_name.lower() in wanted]


def audit_repository(
    client: ContentsClient,
    resolver: NuGetResolver,
    reporter: Reporter,
    repository: Repository,
    settings: Settings,
) -> Optional[list[ProjectFileReport]]:
    """Gate on a marker file, then extract. None when the repository has no marker."""
    if not contains_marker_file(client.lister(repository), "", settings.marker):
        logger.debug("%s: no %s files, skipped", repository.full_name, settings.marker)
        return None
    reporter.repository(repository)
    return extract_and_report(client, resolver, reporter, repository, "", settings.extension)


def audit(
    client: ContentsClient,
    resolver: NuGetResolver,
    reporter: Reporter,
    settings: Settings,
    only: Optional[Iterable[str]] = None,
) -> AuditSummary:
    """
    Audit the first page of the user's repositories.

    A repository whose project file is malformed is reported and skipped;
    the run continues with the next one. Failing to list repositories at
    all raises ListingError.
    """
    summary = AuditSummary()
    repos = _select(client.list_repositories(), only if only is not None else settings.repos)
    summary.repositories_listed = len(repos)
    if not repos:
        reporter.no_repositories()
        reporter.finished(summary)
        return summary

    for repo in repos:
        try:
            files = audit_repository(client, resolver, reporter, repo, settings)
        except ProjectFileError as e:
            logger.warning("%s: aborted: %s", repo.full_name, e)
            summary.repositories_failed.append(repo.full_name)
            reporter.repository_failed(repo, e)
            continue
        if files is None:
            continue
        summary.repositories_with_projects += 1
        summary.files.extend(files)

    reporter.finished(summary)
    return summary
