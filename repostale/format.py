"""Report sinks: styled console lines, or an in-memory record for JSON and tests."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Callable, Optional

import click
import typer

from .errors import RepostaleError
from .models import AuditSummary, DependencyReport, ProjectFileReport, Repository

MISSING = "(missing)"


def _show(value: Optional[str]) -> str:
    return MISSING if value is None else value


class Reporter:
    """Receives scan events. Every hook is a no-op; subclasses pick what they need."""

    def repository(self, repo: Repository) -> None:
        pass

    def project_file(self, file: ProjectFileReport) -> None:
        pass

    def dependencies_start(self, file: ProjectFileReport) -> None:
        pass

    def dependency(self, file: ProjectFileReport, dep: DependencyReport) -> None:
        pass

    def no_dependencies(self, file: ProjectFileReport) -> None:
        pass

    def listing_failed(self, repo: Repository, path: str, error: RepostaleError) -> None:
        pass

    def file_failed(self, file: ProjectFileReport, error: RepostaleError) -> None:
        pass

    def repository_failed(self, repo: Repository, error: RepostaleError) -> None:
        pass

    def no_repositories(self) -> None:
        pass

    def finished(self, summary: AuditSummary) -> None:
        pass


def dependency_line(dep: DependencyReport) -> str:
    d = dep.dependency
    return f"    - {_show(d.name)}, Version: {_show(d.declared_version)}"


def outdated_line(dep: DependencyReport) -> str:
    return f"    (Outdated) - Latest Version: {dep.latest_version}, Current Version: {_show(dep.dependency.declared_version)}"


def format_summary(summary: AuditSummary) -> str:
    """One-line footer for the whole run."""
    parts = [
        f"{summary.repositories_listed} repositories",
        f"{summary.repositories_with_projects} with projects",
        f"{len(summary.files)} project files",
        f"{summary.dependency_count} dependencies",
        f"{summary.outdated_count} outdated",
    ]
    if summary.repositories_failed:
        parts.append(f"{len(summary.repositories_failed)} failed")
    return ", ".join(parts) + "."


class ConsoleReporter(Reporter):
    """Free-text lines per repository, file and dependency."""

    def __init__(self, echo: Callable[..., None] = typer.echo, extension: str = ".csproj", color: bool = True) -> None:
        self.echo = echo
        self.extension = extension
        self.color = color

    def _style(self, text: str, **styles: Any) -> str:
        return click.style(text, **styles) if self.color else text

    def repository(self, repo: Repository) -> None:
        self.echo(self._style(f"Repository: {repo.full_name}", bold=True))

    def project_file(self, file: ProjectFileReport) -> None:
        self.echo(f"  Found {self.extension}: {file.name}")

    def dependencies_start(self, file: ProjectFileReport) -> None:
        self.echo(f"  Dependencies in {file.name}:")

    def dependency(self, file: ProjectFileReport, dep: DependencyReport) -> None:
        self.echo(dependency_line(dep))
        if dep.outdated:
            self.echo(self._style(outdated_line(dep), fg="yellow"))

    def no_dependencies(self, file: ProjectFileReport) -> None:
        self.echo(self._style(f"  No dependencies found in this {self.extension}.", dim=True))

    def listing_failed(self, repo: Repository, path: str, error: RepostaleError) -> None:
        self.echo(self._style(f"  Failed to fetch content from {path or '/'}", fg="red"))

    def file_failed(self, file: ProjectFileReport, error: RepostaleError) -> None:
        self.echo(self._style(f"  Failed to download {file.path}", fg="red"))

    def repository_failed(self, repo: Repository, error: RepostaleError) -> None:
        self.echo(self._style(f"  Skipped {repo.full_name}: {error}", fg="red"))

    def no_repositories(self) -> None:
        self.echo("No repositories found.")

    def finished(self, summary: AuditSummary) -> None:
        self.echo()
        self.echo(self._style(format_summary(summary), dim=True))


class RecordingReporter(Reporter):
    """Keeps every event, in order, as (kind, payload) tuples."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []
        self.summary: Optional[AuditSummary] = None

    def repository(self, repo: Repository) -> None:
        self.events.append(("repository", repo.full_name))

    def project_file(self, file: ProjectFileReport) -> None:
        self.events.append(("project_file", file.path))

    def dependency(self, file: ProjectFileReport, dep: DependencyReport) -> None:
        self.events.append(("dependency", dep))

    def no_dependencies(self, file: ProjectFileReport) -> None:
        self.events.append(("no_dependencies", file.path))

    def listing_failed(self, repo: Repository, path: str, error: RepostaleError) -> None:
        self.events.append(("listing_failed", path))

    def file_failed(self, file: ProjectFileReport, error: RepostaleError) -> None:
        self.events.append(("file_failed", file.path))

    def repository_failed(self, repo: Repository, error: RepostaleError) -> None:
        self.events.append(("repository_failed", repo.full_name))

    def no_repositories(self) -> None:
        self.events.append(("no_repositories", None))

    def finished(self, summary: AuditSummary) -> None:
        self.summary = summary

    def of_kind(self, kind: str) -> list[Any]:
        return [payload for k, payload in self.events if k == kind]

    @property
    def dependencies(self) -> list[DependencyReport]:
        return self.of_kind("dependency")

    @property
    def outdated(self) -> list[DependencyReport]:
        return [d for d in self.dependencies if d.outdated]

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready view of the finished run."""
        summary = self.summary or AuditSummary()
        return {
            "repositories_listed": summary.repositories_listed,
            "repositories_with_projects": summary.repositories_with_projects,
            "repositories_failed": summary.repositories_failed,
            "dependency_count": summary.dependency_count,
            "outdated_count": summary.outdated_count,
            "files": [
                {
                    "repository": f.repository,
                    "path": f.path,
                    "dependencies": [
                        {**asdict(d.dependency), "latest_version": d.latest_version, "outdated": d.outdated}
                        for d in f.dependencies
                    ],
                }
                for f in summary.files
            ],
            "listing_failures": self.of_kind("listing_failed"),
            "download_failures": self.of_kind("file_failed"),
        }
