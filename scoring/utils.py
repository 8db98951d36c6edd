"""
Threshold configuration for ranking, suggestions and heuristics.
Provides the default thresholds and loading of overrides from config/thresholds.yaml.
"""
from typing import Dict, Any, Optional
import os
import yaml

# filename used for threshold YAML configuration
THRESHOLDS_FILENAME = 'thresholds.yaml'
THRESHOLDS_ENV = 'ADVISOR_THRESHOLDS_PATH'

DEFAULT_THRESHOLDS = {
    'top_repos_limit': 4,
    'recent_days': 180,
    'strong_repo_stars': 5,
    'strong_repo_min_count': 3,
    'high_star_total': 50,
    'tech_stack_suggestion_limit': 5,
    'fork_ratio_warning': 0.7,
    'fork_ratio_min_repos': 2,
    'small_profile_repos': 3,
}

# keys whose values must stay integral after loading
_INT_KEYS = {k for k, v in DEFAULT_THRESHOLDS.items() if isinstance(v, int)}


def default_thresholds_path() -> str:
    return os.getenv(THRESHOLDS_ENV) or os.path.join(os.path.dirname(os.path.dirname(__file__)), 'config', THRESHOLDS_FILENAME)


def resolve_thresholds(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Merge overrides over the defaults, coercing values to the default's type.
    Unknown keys are ignored. Raises ValueError if a value cannot be coerced.
    """
    merged = DEFAULT_THRESHOLDS.copy()
    for k, v in (overrides or {}).items():
        if k not in DEFAULT_THRESHOLDS or v is None:
            continue
        try:
            value = float(v)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid value for threshold '{k}': {v!r}")
        if k in _INT_KEYS:
            if not value.is_integer():
                raise ValueError(f"Invalid value for threshold '{k}': {v!r} is not a whole number")
            value = int(value)
        merged[k] = value
    return merged


def load_thresholds(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load thresholds from a YAML file if it exists, otherwise return the defaults.
    The file may hold the keys at top level or under a 'thresholds' section.
    """
    if not path:
        path = default_thresholds_path()
    if not os.path.exists(path):
        return DEFAULT_THRESHOLDS.copy()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            doc = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as ex:
        raise ValueError(f"Failed to load thresholds from {path}: {ex}")
    if not isinstance(doc, dict):
        raise ValueError(f"Thresholds file {path} must contain a mapping")
    section = doc.get('thresholds', doc)
    return resolve_thresholds(section if isinstance(section, dict) else {})
