"""
CLI entry point for profile-advisor. Wires the pipeline: ingest -> rank -> advise -> report,
and applies one approved advisory item to a profile intent file.
"""

import argparse
import json
import os
import sys
import webbrowser
from datetime import datetime, timezone
from typing import List, Optional

import requests
import yaml

from models import ProfileIntent
from normalize.models import RepositoryFact
from normalize.util import parse_timestamp
from ingest.github import GitHubClient, GitHubAPIError, facts_from_records
from ingest.retry import configure_retry
from scoring.utils import load_thresholds
from advice.engine import inspect_facts, InspectionResult
from advice.resolver import apply_advisory
from report.renderer import render, render_text
from log_config import configure_logging, get_logger

logger = get_logger('cli')

OUTPUT_FORMATS = ('text', 'md', 'json', 'html')


def _is_yaml_path(path: str) -> bool:
    return path.lower().endswith(('.yaml', '.yml'))


def load_intent(path: str) -> ProfileIntent:
    """Load a ProfileIntent from a JSON or YAML file. Raises ValueError on unreadable or invalid content."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) if _is_yaml_path(path) else json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ValueError(f"Failed to read intent file {path}: {e}")
    return ProfileIntent.from_dict(data or {})


def save_intent(intent: ProfileIntent, path: str):
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        if _is_yaml_path(path):
            yaml.safe_dump(intent.to_dict(), f, sort_keys=False, allow_unicode=True)
        else:
            json.dump(intent.to_dict(), f, indent=2)
            f.write('\n')


def load_facts(path: str) -> List[RepositoryFact]:
    """Load repository records (GitHub API shape or facts-file shape) from a JSON file."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            records = json.load(f)
    except (OSError, ValueError) as e:
        raise ValueError(f"Failed to read facts file {path}: {e}")
    if not isinstance(records, list):
        raise ValueError(f"Facts file {path} must contain a JSON array of repositories")
    return facts_from_records(records)


def parse_now(value: Optional[str]) -> datetime:
    """Resolve the single 'now' snapshot for this run."""
    if not value:
        return datetime.now(timezone.utc)
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError(f"Invalid --now timestamp: {value!r}")
    return parsed


def _resolve_token(args) -> Optional[str]:
    return args.github_token or os.getenv('GITHUB_TOKEN') or None


def gather_facts(args) -> Optional[List[RepositoryFact]]:
    """Facts from --facts-file, else fetched for --user, else None (no fact source consulted)."""
    if args.facts_file:
        return load_facts(args.facts_file)
    if args.user:
        client = GitHubClient(token=_resolve_token(args))
        return client.fetch_public_repos(args.user)
    return None


def _confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N]: ")
    except EOFError:
        # stdin closed, e.g. in a pipeline
        return False
    return answer.strip().lower() in ('y', 'yes')


def apply_selected(result: InspectionResult, intent: ProfileIntent, number: int, force: bool = False) -> Optional[ProfileIntent]:
    """Apply advisory item `number` (1-based, as printed in the report) after confirmation.

    Returns the new intent, or None if the person declined. Raises ValueError for a bad number
    or an informational item.
    """
    items = result.advisories()
    if number < 1 or number > len(items):
        raise ValueError(f"No advisory item #{number}; choose 1-{len(items)}")
    item = items[number - 1]
    if not item.applicable:
        raise ValueError(f"Advisory item #{number} is informational and cannot be applied")
    print(f"[{number}] {item.message}")
    if not force and not _confirm('Apply this change to the profile intent?'):
        print('Aborted; profile intent unchanged.')
        return None
    return apply_advisory(item, intent)


def write_output(fmt: str, rendered: str, args):
    """Write output to file or stdout and optionally open HTML in browser."""
    if not args.out_file:
        print(rendered)
        return
    out_dir = os.path.dirname(args.out_file)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(args.out_file, 'w', encoding='utf-8') as f:
        f.write(rendered)
    print(f"Wrote report to {args.out_file}")
    if args.open and fmt == 'html':
        webbrowser.open('file://' + os.path.abspath(args.out_file))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rank public repositories and suggest profile changes")
    parser.add_argument("--user", type=str, default="", help="GitHub username whose public repositories are inspected")
    parser.add_argument("--facts-file", type=str, default="", help="JSON array of repository records to use instead of calling GitHub")
    parser.add_argument("--intent", type=str, default="", help="Profile intent file (JSON or YAML)")
    parser.add_argument("--output", type=str, choices=OUTPUT_FORMATS, default="text", help="Report format")
    parser.add_argument("--out-file", type=str, default="", help="Write the report to this path instead of stdout")
    parser.add_argument("--open", action="store_true", help="Open an HTML report in the default browser")
    parser.add_argument("--now", type=str, default="", help="ISO-8601 timestamp used as 'now' for recency rules (default: current UTC time)")
    parser.add_argument("--thresholds", type=str, default="", help="Thresholds YAML file (default: config/thresholds.yaml or ADVISOR_THRESHOLDS_PATH)")
    parser.add_argument("--github-token", type=str, default="", help="GitHub token for higher rate limits (or set GITHUB_TOKEN env)")
    parser.add_argument("--max-retries", type=int, default=None, help="Maximum HTTP attempts (overrides ADVISOR_MAX_RETRIES env)")
    parser.add_argument("--backoff-base", type=float, default=None, help="Base backoff seconds (overrides ADVISOR_BACKOFF_BASE env)")
    parser.add_argument("--apply", type=int, default=None, metavar="N", help="Apply advisory item N from the report to the intent")
    parser.add_argument("--intent-out", type=str, default="", help="Where to write the updated intent (default: overwrite --intent)")
    parser.add_argument("--force", action="store_true", help="Apply without asking for confirmation")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=str, default="", help="Also write logs to this file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, log_file=args.log_file or None)

    if args.apply is not None and not (args.intent or args.intent_out):
        parser.error('--apply requires --intent or --intent-out to record the updated intent')

    try:
        configure_retry(max_retries=args.max_retries, backoff_base=args.backoff_base)
        now = parse_now(args.now)
        if args.thresholds and not os.path.exists(args.thresholds):
            raise ValueError(f"Thresholds file not found: {args.thresholds}")
        thresholds = load_thresholds(args.thresholds or None)
        intent = load_intent(args.intent) if args.intent else ProfileIntent(username=args.user)
        facts = gather_facts(args)
    except ValueError as e:
        parser.error(str(e))
    except (GitHubAPIError, requests.RequestException) as e:
        print(f"GitHub request failed: {e}", file=sys.stderr)
        return 1

    logger.debug("facts source: %s", "none" if facts is None else f"{len(facts)} record(s)")
    result = inspect_facts(facts, intent, now=now, thresholds=thresholds)

    if args.apply is not None:
        print(render_text(result))
        try:
            updated = apply_selected(result, intent, args.apply, force=args.force)
        except ValueError as e:
            print(str(e), file=sys.stderr)
            return 1
        if updated is not None:
            target = args.intent_out or args.intent
            save_intent(updated, target)
            print(f"Updated profile intent written to {target}")
        return 0

    write_output(args.output, render(result, fmt=args.output), args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
