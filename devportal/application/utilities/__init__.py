"""Application utilities."""

from .github_url import GitHubFileLocation, parse_github_blob_url
from .pagination import PageRequest, clamp_limit, clamp_offset, clamp_page

__all__ = [
    "GitHubFileLocation",
    "PageRequest",
    "clamp_limit",
    "clamp_offset",
    "clamp_page",
    "parse_github_blob_url",
]
