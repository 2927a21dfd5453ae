"""GitHub blob URL parsing for plugin UI sources."""

import re
from urllib.parse import urlsplit

from attrs import define

from devportal.domain.errors import InvalidGitHubURLError

_BLOB_PATH = re.compile(r"^/([^/]+)/([^/]+)/blob/([^/]+)/(.+)$")


@define(frozen=True, slots=True)
class GitHubFileLocation:
    """Coordinates of a single file in a GitHub repository."""

    owner: str
    repo: str
    ref: str
    path: str


def parse_github_blob_url(url: str) -> GitHubFileLocation:
    """Parse ``https://<github host>/<owner>/<repo>/blob/<ref>/<path...>``.

    Any host containing ``github`` is accepted (public and enterprise).

    Raises:
        InvalidGitHubURLError: not a URL, not a GitHub host, or not a blob path
    """
    try:
        parts = urlsplit(url.strip())
    except ValueError as e:
        raise InvalidGitHubURLError(f"invalid URL: {e}", url) from e

    if "github" not in parts.netloc:
        raise InvalidGitHubURLError("not a GitHub URL", url)

    match = _BLOB_PATH.match(parts.path)
    if match is None:
        raise InvalidGitHubURLError("invalid GitHub blob URL format", url)

    owner, repo, ref, path = match.groups()
    return GitHubFileLocation(owner=owner, repo=repo, ref=ref, path=path)
