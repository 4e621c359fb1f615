"""
Release download collection from the GitHub releases API.

Walks the paginated releases endpoint one page at a time and folds every
release into an Aggregator keyed by normalized tag.
"""

from __future__ import annotations

import base64
import http.client
import json
import logging
import re
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Iterable, Iterator

from . import __version__
from .config import MATCH_MODES, Config
from .links import parse_link_header
from .models import AggregateEntry, Release, ReleaseAsset
from .tags import GROUP_MODES, normalize_tag

logger = logging.getLogger(__name__)

USER_AGENT = f"release-downloads/{__version__}"

SHA_SUM_RE = re.compile(r"sha\d+sum")


class CollectionError(Exception):
    """Raised when release collection fails."""
    pass


class NetworkError(CollectionError):
    """Raised when network requests fail."""
    pass


class HttpStatusError(NetworkError):
    """Raised when the API answers with a status other than 200."""

    def __init__(self, status: int, body: str, url: str = ""):
        super().__init__(f"HTTP {status} for {url}: {body}")
        self.status = status
        self.body = body
        self.url = url


class ParseError(CollectionError):
    """Raised when response parsing fails."""
    pass


def build_headers(username: str | None = None, token: str | None = None) -> dict[str, str]:
    """Build request headers, with Basic auth when both credentials are set.

    Args:
        username: GitHub username
        token: Personal access token

    Returns:
        Header dictionary
    """
    headers = {
        "User-Agent": USER_AGENT,
        "Accept": "application/vnd.github+json",
    }
    if username and token:
        credentials = base64.b64encode(f"{username}:{token}".encode("utf-8")).decode("ascii")
        headers["Authorization"] = f"Basic {credentials}"
    return headers


def http_get(
    url: str,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
) -> tuple[int, Any, bytes]:
    """Perform HTTP GET request.

    Args:
        url: URL to fetch
        headers: Optional HTTP headers
        timeout: Timeout in seconds (None blocks until the server answers)

    Returns:
        Tuple of (status, response headers, body)

    Raises:
        HttpStatusError: If the response status is not 200
        NetworkError: If the request fails
    """
    req = urllib.request.Request(url, headers=headers or {"User-Agent": USER_AGENT})
    kwargs: dict[str, Any] = {}
    if timeout is not None:
        kwargs["timeout"] = timeout
    try:
        with urllib.request.urlopen(req, **kwargs) as response:
            status = response.status
            response_headers = response.headers
            body = response.read()
    except urllib.error.HTTPError as e:
        body = e.read().decode("utf-8", "replace") if e.fp is not None else ""
        raise HttpStatusError(e.code, body, url) from e
    except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
        raise NetworkError(f"Failed to fetch {url}: {e}") from e

    if status != 200:
        raise HttpStatusError(status, body.decode("utf-8", "replace"), url)

    return status, response_headers, body


def releases_url(org: str, repo: str, api_url: str = "https://api.github.com", per_page: int | None = None) -> str:
    """Build the first-page URL of a repository's releases endpoint."""
    url = f"{api_url.rstrip('/')}/repos/{urllib.parse.quote(org)}/{urllib.parse.quote(repo)}/releases"
    if per_page:
        url += "?" + urllib.parse.urlencode({"per_page": per_page})
    return url


def parse_releases(body: bytes, url: str = "") -> list[Release]:
    """Decode one page of the releases endpoint.

    Raises:
        ParseError: If the body is not a JSON array of well-formed releases
    """
    try:
        data = json.loads(body)
    except ValueError as e:
        raise ParseError(f"Invalid JSON from {url}: {e}") from e

    if not isinstance(data, list):
        raise ParseError(f"Expected a JSON array of releases from {url}, got {type(data).__name__}")

    try:
        return [Release.from_dict(item) for item in data]
    except ValueError as e:
        raise ParseError(f"Malformed release from {url}: {e}") from e


def iter_release_pages(
    url: str,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
) -> Iterator[list[Release]]:
    """Yield pages of releases, following Link rel="next" until it is absent.

    Each page is requested only when the previous one has been consumed.
    """
    page = 0
    next_url: str | None = url
    while next_url:
        page += 1
        logger.debug(f"Fetching releases page {page}: {next_url}")
        _, response_headers, body = http_get(next_url, headers=headers, timeout=timeout)
        releases = parse_releases(body, next_url)
        logger.debug(f"Page {page}: {len(releases)} releases")
        yield releases
        next_url = parse_link_header(response_headers.get("Link")).get("next")


def asset_matches(asset: ReleaseAsset, match: str) -> bool:
    """Check whether an asset counts towards the totals for a match mode."""
    if match == "all":
        return True
    if match == "binary":
        return asset.content_type.startswith("application/")
    if match == "sha":
        return SHA_SUM_RE.search(asset.name) is not None
    return False


class Aggregator:
    """
    Accumulates download counts per normalized tag.

    Attributes:
        prerelease: Include prereleases and tags containing '-'
        group: Tag grouping mode ("none", "minor", "major")
        match: Asset match mode ("sha", "binary", "all")
        entries: Normalized tag -> AggregateEntry
        filenames: Asset filename -> matched downloads
    """

    def __init__(self, prerelease: bool = False, group: str = "none", match: str = "binary"):
        if group not in GROUP_MODES:
            raise ValueError(f"Invalid group mode: {group}. Must be one of {', '.join(GROUP_MODES)}")
        if match not in MATCH_MODES:
            raise ValueError(f"Invalid match mode: {match}. Must be one of {', '.join(MATCH_MODES)}")
        self.prerelease = prerelease
        self.group = group
        self.match = match
        self.entries: dict[str, AggregateEntry] = {}
        self.filenames: dict[str, int] = {}

    def is_excluded(self, release: Release) -> bool:
        """Prereleases are dropped unless requested, by flag or by '-' in the tag."""
        if self.prerelease:
            return False
        return release.prerelease or "-" in release.tag_name

    def add_release(self, release: Release) -> AggregateEntry | None:
        """Fold one release into the totals.

        Returns:
            The entry the release was folded into, or None if it was skipped
        """
        if self.is_excluded(release):
            logger.debug(f"Skipping prerelease {release.tag_name}")
            return None

        tag = normalize_tag(release.tag_name, self.group)

        entry = self.entries.get(tag)
        if entry is not None:
            entry.merge_date(release.created_at)
        else:
            entry = AggregateEntry(tag=tag, date=release.created_at)
            self.entries[tag] = entry

        for asset in release.assets:
            if asset_matches(asset, self.match):
                self.filenames[asset.name] = self.filenames.get(asset.name, 0) + asset.download_count
                entry.downloads += asset.download_count

        return entry

    def add_page(self, releases: Iterable[Release]) -> None:
        """Fold every release of a page."""
        for release in releases:
            self.add_release(release)


def collect_downloads(
    org: str,
    repo: str,
    config: Config | None = None,
    prerelease: bool = False,
) -> Aggregator:
    """Collect download totals for every release of a repository.

    Args:
        org: Repository owner
        repo: Repository name
        config: Credentials, API base, grouping and match settings
        prerelease: Include prereleases

    Returns:
        Aggregator holding the final entries and filename counts

    Raises:
        HttpStatusError: On any non-200 response
        NetworkError: If a request fails
        ParseError: If a page is not valid release JSON
    """
    if config is None:
        config = Config()

    aggregator = Aggregator(prerelease=prerelease, group=config.group, match=config.match)
    headers = build_headers(config.username, config.token)
    if "Authorization" not in headers:
        logger.debug("No username/token pair configured, requesting unauthenticated")

    url = releases_url(org, repo, config.api_url, config.per_page)
    pages = 0
    for releases in iter_release_pages(url, headers=headers, timeout=config.timeout_seconds):
        aggregator.add_page(releases)
        pages += 1

    logger.info(f"{org}/{repo}: {pages} page(s), {len(aggregator.entries)} tag(s)")
    return aggregator
