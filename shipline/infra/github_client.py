"""
GitHub API client infrastructure for shipline.

Publishes releases through the GitHub REST API:
- Creates a draft release for a tag at a given commit
- Uploads package artifacts as release assets
- Publishes the release once every asset is attached
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Dict, Any

import requests

from ..exit_codes import APIError

logger = logging.getLogger(__name__)

GITHUB_API_BASE = "https://api.github.com"


@dataclass
class GitHubReleaseSettings:
    """Everything needed to publish one release."""
    repository_owner: str
    repository_name: str
    tag: str
    commit_sha: str
    release_notes: str = ""
    artifact_paths: List[str] = field(default_factory=list)
    name: Optional[str] = None
    prerelease: bool = False


@dataclass
class GitHubRelease:
    """A release as returned by the API."""
    id: int
    tag_name: str
    html_url: str
    upload_url: str
    draft: bool
    assets: List[str] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'GitHubRelease':
        """Create from GitHub API response."""
        return cls(
            id=data.get('id', 0),
            tag_name=data.get('tag_name', ''),
            html_url=data.get('html_url', ''),
            upload_url=data.get('upload_url', ''),
            draft=data.get('draft', False),
            assets=[a.get('name', '') for a in data.get('assets', [])],
        )


class GitHubClient:
    """
    GitHub API client for release publishing.

    Every call is attempted once; failures raise APIError carrying
    the message GitHub returned.

    Example:
        client = GitHubClient(token)
        release = client.publish_release(GitHubReleaseSettings(
            repository_owner="owner", repository_name="repo",
            tag="v1.2.3", commit_sha="abc123",
            artifact_paths=["output/Pkg.1.2.3.nupkg"]))
    """

    def __init__(self, token: Optional[str] = None, api_base: str = GITHUB_API_BASE, timeout: int = 60):
        """
        Initialize GitHubClient.

        Args:
            token: GitHub token (defaults to GITHUB_TOKEN env var)
            api_base: REST API base URL (GitHub Enterprise uses its own)
            timeout: HTTP request timeout in seconds
        """
        self.token = token or os.environ.get('GITHUB_TOKEN')
        self.api_base = api_base.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'shipline',
        })
        if self.token:
            self.session.headers['Authorization'] = f'token {self.token}'

    def _request(self, method: str, url: str, allow_404: bool = False, **kwargs) -> Optional[Dict[str, Any]]:
        """Send a request; return parsed JSON, None for an allowed 404."""
        if not url.startswith('http'):
            url = f"{self.api_base}/{url.lstrip('/')}"

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise APIError(f"GitHub API request failed: {method} {url}: {e}") from e

        if allow_404 and response.status_code == 404:
            return None

        if response.status_code >= 400:
            try:
                message = response.json().get('message', response.text)
            except ValueError:
                message = response.text
            raise APIError(
                f"GitHub API error {response.status_code} for {method} {url}: {message}",
                status_code=response.status_code,
            )

        if not response.content:
            return {}
        return response.json()

    def get_release_by_tag(self, owner: str, name: str, tag: str) -> Optional[GitHubRelease]:
        """Get the release for a tag, or None if there is none."""
        data = self._request('GET', f"repos/{owner}/{name}/releases/tags/{tag}", allow_404=True)
        if data:
            return GitHubRelease.from_api_response(data)
        return None

    def create_release(self, settings: GitHubReleaseSettings, draft: bool = True) -> GitHubRelease:
        """Create a release for settings.tag at settings.commit_sha."""
        payload = {
            'tag_name': settings.tag,
            'target_commitish': settings.commit_sha,
            'name': settings.name or settings.tag,
            'body': settings.release_notes,
            'draft': draft,
            'prerelease': settings.prerelease,
        }
        data = self._request(
            'POST',
            f"repos/{settings.repository_owner}/{settings.repository_name}/releases",
            json=payload,
        )
        return GitHubRelease.from_api_response(data)

    def upload_asset(self, release: GitHubRelease, path: str) -> str:
        """Attach a file to a release; returns the asset name."""
        # upload_url is a URI template: .../assets{?name,label}
        upload_url = release.upload_url.split('{', 1)[0]
        asset_name = Path(path).name
        logger.info(f"Uploading {asset_name} to release {release.tag_name}")

        with open(path, 'rb') as f:
            self._request(
                'POST',
                upload_url,
                params={'name': asset_name},
                data=f,
                headers={'Content-Type': 'application/octet-stream'},
            )
        return asset_name

    def publish_draft(self, owner: str, name: str, release: GitHubRelease) -> GitHubRelease:
        """Turn a draft release into a published one."""
        data = self._request(
            'PATCH',
            f"repos/{owner}/{name}/releases/{release.id}",
            json={'draft': False},
        )
        return GitHubRelease.from_api_response(data)

    def publish_release(self, settings: GitHubReleaseSettings) -> Optional[GitHubRelease]:
        """
        Create, populate and publish a release.

        A release that already exists for the tag is left untouched, so a
        re-run after a later failure does not fail here.

        Args:
            settings: Release settings

        Returns:
            The published release, or None if the tag already had one

        Raises:
            APIError: On any API failure
        """
        owner, name = settings.repository_owner, settings.repository_name

        existing = self.get_release_by_tag(owner, name, settings.tag)
        if existing is not None:
            logger.warning(f"Release {settings.tag} already exists for {owner}/{name}: {existing.html_url}")
            return None

        release = self.create_release(settings, draft=True)
        for path in settings.artifact_paths:
            release.assets.append(self.upload_asset(release, path))

        published = self.publish_draft(owner, name, release)
        logger.info(f"Published release {published.tag_name}: {published.html_url}")
        return published
