"""
packdex - Index, search and install instructional packs.

A registry is a directory of skills/, contexts/ and prompts/, each holding one
folder per pack with a pack.yaml metadata file and a Markdown document.
packdex scans the registry into an in-memory index on every invocation and
answers lookups against it.

Example usage:
    $ packdex list --root ./registry
    $ packdex search git
    $ packdex install commit-message --dest ~/.agent/skills
"""

__version__ = "0.1.0"
__author__ = "packdex Contributors"

from packdex.index import PackIndex, build_index, search

__all__ = [
    "PackIndex",
    "__author__",
    "__version__",
    "build_index",
    "search",
]
