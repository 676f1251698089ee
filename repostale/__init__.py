"""repostale: find outdated NuGet packages across your repositories."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("repostale")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"
