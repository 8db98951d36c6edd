"""
Repository data models: raw facts as retrieved, the normalized shape the engine ranks,
and the aggregate signals derived from a ranked set.
"""

from typing import List, Optional, Dict, Any

UNKNOWN_LANGUAGE = 'Unknown'


class RepositoryFact:
    """
    One raw repository record as returned by the retrieval layer. Read-only to the engine.
    """
    def __init__(self, name: str, description: Optional[str], language: Optional[str], stars: int, updated_at: str, fork: bool = False, archived: bool = False, size: int = 0):
        self.name = name
        self.description = description
        self.language = language
        self.stars = stars  # popularity count
        self.updated_at = updated_at  # ISO-8601, not parsed here
        self.fork = fork
        self.archived = archived
        self.size = size  # bytes; 0 means empty

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'description': self.description,
            'language': self.language,
            'stars': self.stars,
            'updated_at': self.updated_at,
            'fork': self.fork,
            'archived': self.archived,
            'size': self.size,
        }

    def __eq__(self, other):
        return isinstance(other, RepositoryFact) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"RepositoryFact(name={self.name!r}, stars={self.stars}, updated_at={self.updated_at!r})"


class NormalizedRepository:
    """
    Canonical repository shape used by ranking, suggestions and heuristics.
    """
    def __init__(self, name: str, description: str, language: str, stars: int, last_updated: str):
        self.name = name
        self.description = description
        self.language = language
        self.stars = stars
        self.last_updated = last_updated

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'description': self.description,
            'language': self.language,
            'stars': self.stars,
            'last_updated': self.last_updated,
        }

    def __eq__(self, other):
        return isinstance(other, NormalizedRepository) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"NormalizedRepository(name={self.name!r}, stars={self.stars}, language={self.language!r})"


class AggregateSignals:
    """
    Facts derived from a ranked repository set. Recomputed per invocation, never persisted.
    """
    def __init__(self, repo_count: int, has_recent_activity: bool, languages: List[str], total_stars: int, fork_ratio: float, top_repos: Optional[List[NormalizedRepository]] = None):
        self.repo_count = repo_count
        self.has_recent_activity = has_recent_activity
        self.languages = list(languages)  # first-seen order, 'Unknown' excluded
        self.total_stars = total_stars
        self.fork_ratio = fork_ratio  # forks / all retrieved records
        self.top_repos = list(top_repos or [])

    def to_dict(self) -> Dict[str, Any]:
        return {
            'repo_count': self.repo_count,
            'has_recent_activity': self.has_recent_activity,
            'languages': list(self.languages),
            'total_stars': self.total_stars,
            'fork_ratio': self.fork_ratio,
            'top_repos': [r.to_dict() for r in self.top_repos],
        }
