"""
Data model for releases, their assets, and aggregated download counts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _require(data: dict[str, Any], key: str, kind: type, what: str) -> Any:
    value = data.get(key)
    if not isinstance(value, kind):
        raise ValueError(f"{what} field '{key}' missing or not a {kind.__name__}: {value!r}")
    return value


@dataclass(frozen=True)
class ReleaseAsset:
    """
    A downloadable file attached to a release.

    Attributes:
        name: Asset filename
        content_type: MIME type reported by GitHub
        download_count: Number of downloads (0 when absent)
    """
    name: str
    content_type: str = ""
    download_count: int = 0

    @staticmethod
    def from_dict(data: dict[str, Any]) -> ReleaseAsset:
        """Create ReleaseAsset from an API asset object."""
        if not isinstance(data, dict):
            raise ValueError(f"Asset is not an object: {data!r}")
        download_count = data.get("download_count")
        if download_count is None:
            download_count = 0
        elif isinstance(download_count, bool) or not isinstance(download_count, int):
            raise ValueError(f"Asset field 'download_count' is not an int: {download_count!r}")
        return ReleaseAsset(
            name=_require(data, "name", str, "Asset"),
            content_type=data.get("content_type") or "",
            download_count=download_count,
        )


@dataclass(frozen=True)
class Release:
    """
    One release as returned by the releases endpoint.

    Attributes:
        tag_name: Raw tag (e.g., "v1.2.3-rc1")
        created_at: ISO-8601 timestamp (e.g., "2020-01-01T00:00:00Z")
        prerelease: Whether GitHub flags the release as a prerelease
        assets: Attached files
    """
    tag_name: str
    created_at: str
    prerelease: bool = False
    assets: tuple[ReleaseAsset, ...] = ()

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Release:
        """Create Release from an API release object.

        Raises:
            ValueError: If tag_name, created_at or assets are missing or mistyped
        """
        if not isinstance(data, dict):
            raise ValueError(f"Release is not an object: {data!r}")
        assets = _require(data, "assets", list, "Release")
        return Release(
            tag_name=_require(data, "tag_name", str, "Release"),
            created_at=_require(data, "created_at", str, "Release"),
            prerelease=bool(data.get("prerelease", False)),
            assets=tuple(ReleaseAsset.from_dict(a) for a in assets),
        )


@dataclass
class AggregateEntry:
    """
    Download totals for one normalized tag.

    Attributes:
        tag: Normalized tag (aggregation key)
        date: Earliest created_at among releases folded into this entry
        downloads: Sum of matched asset download counts
    """
    tag: str
    date: str
    downloads: int = 0

    def merge_date(self, date: str) -> None:
        """Keep the oldest date."""
        if date < self.date:
            self.date = date
