"""Dependency extractor: every project file in a repository, checked against the registry."""

from __future__ import annotations

import logging

from .errors import FetchError, ListingError
from .format import Reporter
from .models import DependencyReport, ProjectFileReport, Repository
from .registry import NuGetResolver
from .scanner.listing import ContentsClient
from .scanner.parsers import parse_project_file
from .scanner.walk import is_project_file, walk_tree

logger = logging.getLogger(__name__)


def extract_and_report(
    client: ContentsClient,
    resolver: NuGetResolver,
    reporter: Reporter,
    repository: Repository,
    root: str = "",
    extension: str = ".csproj",
) -> list[ProjectFileReport]:
    """
    Walk the whole tree and report each PackageReference of each project file.

    A failed directory listing is reported and only that subtree is skipped.
    A failed download is reported and the walk goes on. Malformed XML raises
    ProjectFileError to the caller.
    """
    def on_listing_error(path: str, error: ListingError) -> None:
        logger.debug("%s: listing failed for %r: %s", repository.full_name, path or "/", error)
        reporter.listing_failed(repository, path, error)

    reports: list[ProjectFileReport] = []
    for entry in walk_tree(client.lister(repository), root, on_error=on_listing_error):
        if not is_project_file(entry.name, extension):
            continue
        file = ProjectFileReport(repository=repository.full_name, path=entry.path, name=entry.name)
        reporter.project_file(file)
        try:
            content = client.fetch_file(entry)
        except FetchError as e:
            logger.debug("%s: %s", repository.full_name, e)
            reporter.file_failed(file, e)
            continue

        deps = parse_project_file(content)
        reports.append(file)
        if not deps:
            reporter.no_dependencies(file)
            continue
        reporter.dependencies_start(file)
        for dep in deps:
            report = DependencyReport(dependency=dep, latest_version=resolver.latest_version(dep.name))
            file.dependencies.append(report)
            reporter.dependency(file, report)
    return reports
