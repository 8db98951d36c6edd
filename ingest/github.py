"""
GitHub ingestion client: fetch a user's public repositories and convert them to RepositoryFact.
Only public repository metadata is read (no followers, commits, issues or PRs).
Validation of raw records happens here, at the ingestion boundary, not in the engine.
"""
from typing import List, Dict, Any, Optional
from urllib.parse import quote
from normalize.models import RepositoryFact
from ingest.retry import get_with_retries
from log_config import get_logger

logger = get_logger(__name__)

GITHUB_API_BASE = 'https://api.github.com'
USER_AGENT = 'profile-advisor'


class GitHubAPIError(Exception):
    """Raised when the GitHub API returns an unexpected status or payload."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class GitHubUserNotFound(GitHubAPIError):
    """Raised when the requested user does not exist (404)."""


def _require_bool(raw: Dict[str, Any], key: str) -> bool:
    val = raw.get(key, False)
    if val is None:
        return False
    if not isinstance(val, bool):
        raise ValueError(f"Repository field '{key}' must be a boolean, got {val!r}")
    return val


def _require_count(raw: Dict[str, Any], key: str) -> int:
    val = raw.get(key, 0)
    if val is None:
        return 0
    if isinstance(val, bool) or not isinstance(val, int) or val < 0:
        raise ValueError(f"Repository field '{key}' must be a non-negative integer, got {val!r}")
    return val


def _optional_text(raw: Dict[str, Any], key: str) -> Optional[str]:
    val = raw.get(key)
    return val if isinstance(val, str) and val else None


def repository_fact_from_api(raw: Dict[str, Any]) -> RepositoryFact:
    """Create a RepositoryFact from a GitHub repository payload (or a facts-file entry).

    Optional text fields degrade to None; malformed counts or flags raise ValueError.
    Accepts both the API's 'stargazers_count' and the facts-file 'stars' key.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Repository record must be an object, got {type(raw).__name__}")
    name = raw.get('name')
    if not isinstance(name, str) or not name:
        raise ValueError(f"Repository record is missing a name: {raw!r}")
    stars_key = 'stargazers_count' if 'stargazers_count' in raw else 'stars'
    return RepositoryFact(
        name=name,
        description=_optional_text(raw, 'description'),
        language=_optional_text(raw, 'language'),
        stars=_require_count(raw, stars_key),
        updated_at=raw.get('updated_at') or '',
        fork=_require_bool(raw, 'fork'),
        archived=_require_bool(raw, 'archived'),
        size=_require_count(raw, 'size'),
    )


def facts_from_records(records: List[Dict[str, Any]]) -> List[RepositoryFact]:
    return [repository_fact_from_api(r) for r in records or []]


class GitHubClient:
    """Client for the public repositories of a single GitHub user."""

    def __init__(self, token: Optional[str] = None, base_url: Optional[str] = None, per_page: int = 100):
        self.token = token
        self.base_url = (base_url or GITHUB_API_BASE).rstrip('/')
        self.per_page = per_page
        self.headers = {
            'Accept': 'application/vnd.github+json',
            'User-Agent': USER_AGENT,
        }
        # token only raises the rate limit; the data scope is the same public data either way
        if self.token:
            self.headers['Authorization'] = f"Bearer {self.token}"

    def _fetch_page(self, username: str, page: int) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/users/{quote(username, safe='')}/repos"
        params = {'type': 'public', 'per_page': self.per_page, 'sort': 'updated', 'page': page}
        resp = get_with_retries(url, headers=self.headers, params=params)
        if resp.status_code == 404:
            raise GitHubUserNotFound(f'GitHub user "{username}" not found', status=404)
        if resp.status_code != 200:
            raise GitHubAPIError(f"GitHub API error: {resp.status_code}", status=resp.status_code)
        try:
            data = resp.json()
        except ValueError:
            raise GitHubAPIError('GitHub API returned a non-JSON body', status=resp.status_code)
        if not isinstance(data, list):
            raise GitHubAPIError('GitHub API returned an unexpected payload', status=resp.status_code)
        return data

    def fetch_repo_records(self, username: str) -> List[Dict[str, Any]]:
        """Fetch raw repository payloads for username, following pagination."""
        username = (username or '').strip()
        if not username:
            raise ValueError('username is required')
        records: List[Dict[str, Any]] = []
        page = 1
        while True:
            data = self._fetch_page(username, page)
            records.extend(data)
            if len(data) < self.per_page:
                break
            page += 1
        logger.info('fetched %d public repositories for %s', len(records), username)
        return records

    def fetch_public_repos(self, username: str) -> List[RepositoryFact]:
        """Fetch and validate the public repositories of username."""
        return facts_from_records(self.fetch_repo_records(username))
