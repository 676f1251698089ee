"""Remote repository scanner: listing client, tree walk, project file parser."""

from .listing import ContentsClient
from .parsers import parse_project_file
from .walk import contains_marker_file, walk_tree

__all__ = ["ContentsClient", "parse_project_file", "contains_marker_file", "walk_tree"]
