"""
release-downloads - GitHub release download statistics.

Modules:
- links: Link header parsing for API pagination
- tags: Tag normalization, grouping and version ordering
- collectors: Paginated release fetching and download aggregation
- render: Plain-text, CSV and debug report output
- config: YAML/environment configuration
"""

__version__ = "1.0.0"

from .links import parse_link_header
from .tags import normalize_tag, sort_tags, version_sort_key
from .models import AggregateEntry, Release, ReleaseAsset
from .config import Config, ConfigError, load_config
from .collectors import (
    Aggregator,
    CollectionError,
    HttpStatusError,
    NetworkError,
    ParseError,
    collect_downloads,
    iter_release_pages,
)
from .render import render_debug, render_report

__all__ = [
    "__version__",
    "parse_link_header",
    "normalize_tag",
    "sort_tags",
    "version_sort_key",
    "AggregateEntry",
    "Release",
    "ReleaseAsset",
    "Config",
    "ConfigError",
    "load_config",
    "Aggregator",
    "CollectionError",
    "HttpStatusError",
    "NetworkError",
    "ParseError",
    "collect_downloads",
    "iter_release_pages",
    "render_debug",
    "render_report",
]
