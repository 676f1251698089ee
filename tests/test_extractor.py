"""Tests for the dependency extractor and its console output."""

import pytest

from repostale.errors import ProjectFileError
from repostale.extractor import extract_and_report
from repostale.format import ConsoleReporter, RecordingReporter
from repostale.models import Repository

REPO = Repository(name="shop", full_name="acme/shop", owner="acme")


def _run(host, resolver, reporter=None):
    reporter = reporter or RecordingReporter()
    files = extract_and_report(host, resolver, reporter, REPO)
    return reporter, files


def test_one_line_per_package_reference(make_host, make_project, make_resolver):
    """Every PackageReference across every project file is reported, missing attributes included."""
    host = make_host({"acme/shop": {
        "src/Api/Api.csproj": make_project(("Serilog", "3.1.1"), (None, "1.0.0")),
        "src/Web/Web.csproj": make_project(("Dapper", None)),
        "tests/Api.Tests/Api.Tests.csproj": make_project(("xunit", "2.6.2"), ("Moq", "4.20.0")),
        "README.md": "# shop",
    }})
    reporter, files = _run(host, make_resolver({}))
    assert len(reporter.dependencies) == 5
    assert [f.path for f in files] == [
        "src/Api/Api.csproj",
        "src/Web/Web.csproj",
        "tests/Api.Tests/Api.Tests.csproj",
    ]
    assert host.fetched == [f.path for f in files]


def test_outdated_only_when_latest_differs(make_host, make_project, make_resolver):
    host = make_host({"acme/shop": {"Shop.csproj": make_project(("Current", "2.0.0"), ("Stale", "1.0.0"))}})
    reporter, _ = _run(host, make_resolver({"Current": "2.0.0", "Stale": "1.1.0"}))
    outdated = reporter.outdated
    assert [d.dependency.name for d in outdated] == ["Stale"]
    assert outdated[0].latest_version == "1.1.0"


def test_comparison_is_ordinal(make_host, make_project, make_resolver):
    """'1.0' and '1.0.0' differ as strings, so it is flagged."""
    host = make_host({"acme/shop": {"Shop.csproj": make_project(("Lib", "1.0"))}})
    reporter, _ = _run(host, make_resolver({"Lib": "1.0.0"}))
    assert len(reporter.outdated) == 1


def test_unknown_latest_is_never_outdated(make_host, make_project, make_resolver):
    host = make_host({"acme/shop": {"Shop.csproj": make_project(("Private.Feed.Only", "0.1.0"))}})
    reporter, _ = _run(host, make_resolver({}))
    assert len(reporter.dependencies) == 1
    assert reporter.outdated == []
    assert reporter.of_kind("file_failed") == []


def test_missing_declared_version_with_known_latest_is_outdated(make_host, make_project, make_resolver):
    host = make_host({"acme/shop": {"Shop.csproj": make_project(("Dapper", None))}})
    reporter, _ = _run(host, make_resolver({"dapper": "2.1.35"}))
    assert len(reporter.outdated) == 1


def test_missing_name_is_not_resolved(make_host, make_project, make_resolver):
    host = make_host({"acme/shop": {"Shop.csproj": make_project((None, "1.0.0"))}})
    resolver = make_resolver({})
    reporter, _ = _run(host, resolver)
    assert resolver.asked == [None]
    assert reporter.outdated == []


def test_only_files_ending_with_extension(make_host, make_project, make_resolver):
    host = make_host({"acme/shop": {
        "App.csproj.user": make_project(("Ignored", "1.0.0")),
        "App.CSPROJ": make_project(("Kept", "1.0.0")),
    }})
    reporter, _ = _run(host, make_resolver({}))
    assert [d.dependency.name for d in reporter.dependencies] == ["Kept"]


def test_subdirectory_failure_keeps_siblings(make_host, make_project, make_resolver):
    """Listing failure abandons that subtree only."""
    host = make_host(
        {"acme/shop": {
            "a/A.csproj": make_project(("A", "1.0.0")),
            "b/B.csproj": make_project(("B", "1.0.0")),
            "c/C.csproj": make_project(("C", "1.0.0")),
        }},
        failing=("acme/shop:b",),
    )
    reporter, files = _run(host, make_resolver({}))
    assert reporter.of_kind("listing_failed") == ["b"]
    assert [f.path for f in files] == ["a/A.csproj", "c/C.csproj"]


def test_download_failure_keeps_walking(make_host, make_project, make_resolver):
    host = make_host({"acme/shop": {
        "A.csproj": None,
        "B.csproj": make_project(("B", "1.0.0")),
    }})
    reporter, files = _run(host, make_resolver({}))
    assert reporter.of_kind("file_failed") == ["A.csproj"]
    assert [f.path for f in files] == ["B.csproj"]


def test_project_without_references(make_host, make_resolver):
    host = make_host({"acme/shop": {"Empty.csproj": "<Project Sdk=\"Microsoft.NET.Sdk\" />"}})
    reporter, files = _run(host, make_resolver({}))
    assert reporter.of_kind("no_dependencies") == ["Empty.csproj"]
    assert files[0].dependencies == []


def test_malformed_project_file_propagates(make_host, make_resolver):
    host = make_host({"acme/shop": {"Bad.csproj": "<Project><ItemGroup>"}})
    with pytest.raises(ProjectFileError):
        _run(host, make_resolver({}))


def test_console_lines(make_host, make_project, make_resolver):
    """Plain console output for one file with a current, a stale and a nameless reference."""
    lines = []
    reporter = ConsoleReporter(echo=lambda line="", **kw: lines.append(line), color=False)
    host = make_host({"acme/shop": {
        "src/Shop.csproj": make_project(("Current", "2.0.0"), ("Stale", "1.0.0"), (None, None)),
        "src/Empty.csproj": "<Project />",
    }})
    _run(host, make_resolver({"Current": "2.0.0", "Stale": "1.1.0"}), reporter)
    assert lines == [
        "  Found .csproj: Empty.csproj",
        "  No dependencies found in this .csproj.",
        "  Found .csproj: Shop.csproj",
        "  Dependencies in Shop.csproj:",
        "    - Current, Version: 2.0.0",
        "    - Stale, Version: 1.0.0",
        "    (Outdated) - Latest Version: 1.1.0, Current Version: 1.0.0",
        "    - (missing), Version: (missing)",
    ]


def test_console_listing_failure_line(make_host, make_resolver):
    lines = []
    reporter = ConsoleReporter(echo=lambda line="", **kw: lines.append(line), color=False)
    host = make_host({"acme/shop": {"lib/x.txt": ""}}, failing=("acme/shop:lib",))
    _run(host, make_resolver({}), reporter)
    assert lines == ["  Failed to fetch content from lib"]
