"""
Report renderer: present an InspectionResult as text, Markdown, JSON or HTML.
Advisory items are numbered in the order returned by InspectionResult.advisories(); the CLI's
--apply flag takes the same numbers.
"""

from typing import List, Optional, Dict, Any
import os
import json
from jinja2 import Environment, FileSystemLoader, select_autoescape
from models import Suggestion, HeuristicRecommendation
from advice.engine import InspectionResult

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), 'templates')


def advisory_rows(result: InspectionResult) -> List[Dict[str, Any]]:
    """Flatten suggestions and recommendations into numbered rows (1-based)."""
    rows = []
    for i, item in enumerate(result.advisories(), start=1):
        if isinstance(item, HeuristicRecommendation):
            action = item.suggested_action
            rows.append({
                'number': i,
                'source': 'recommendation',
                'kind': item.recommendation_type,
                'message': item.message,
                'explanation': item.explanation,
                'action': f"{action.type} {action.target}" + (f" = {action.value}" if action.type == 'change' else '') if action else '',
                'applicable': item.applicable,
            })
        elif isinstance(item, Suggestion):
            rows.append({
                'number': i,
                'source': 'suggestion',
                'kind': item.type,
                'message': item.message,
                'explanation': '',
                'action': ', '.join(sorted(item.data)) if item.data else '',
                'applicable': item.applicable,
            })
    return rows


def _signals_lines(result: InspectionResult) -> List[str]:
    s = result.signals
    if s is None:
        return ['No repository facts were consulted.']
    return [
        f"Repositories: {s.repo_count}",
        f"Recent activity: {'yes' if s.has_recent_activity else 'no'}",
        f"Total stars: {s.total_stars}",
        f"Fork ratio: {s.fork_ratio:.2f}",
        f"Languages: {', '.join(s.languages) or '-'}",
    ]


def render_text(result: InspectionResult) -> str:
    """Render a plain-text summary."""
    lines = _signals_lines(result)
    if result.repos:
        lines.append('')
        lines.append('Ranked repositories:')
        for r in result.repos:
            lines.append(f"  {r.name} ({r.language}, {r.stars} stars, updated {r.last_updated})")
    lines.append('')
    lines.append('Advice:')
    for row in advisory_rows(result):
        marker = '*' if row['applicable'] else ' '
        lines.append(f" {marker}[{row['number']}] {row['kind']}: {row['message']}")
        if row['explanation']:
            lines.append(f"      {row['explanation']}")
    return '\n'.join(lines)


def render_markdown(result: InspectionResult) -> str:
    """Render a Markdown report."""
    md = ["# Profile Advice\n"]
    md.extend(f"- {line}" for line in _signals_lines(result))
    if result.repos:
        md.append("\n## Ranked Repositories\n")
        md.append("| # | Repository | Language | Stars | Updated |")
        md.append("|---|---|---|---|---|")
        for i, r in enumerate(result.repos, start=1):
            md.append(f"| {i} | {r.name} | {r.language} | {r.stars} | {r.last_updated} |")
    md.append("\n## Advice\n")
    for row in advisory_rows(result):
        line = f"{row['number']}. **{row['kind']}**: {row['message']}"
        if row['applicable']:
            line += f" _(apply: {row['action']})_"
        md.append(line)
        if row['explanation']:
            md.append(f"   - {row['explanation']}")
    return "\n".join(md)


def render_json(result: InspectionResult) -> str:
    return json.dumps(result.to_dict(), indent=2)


def render_html(result: InspectionResult, generated_at: Optional[str] = None) -> str:
    env = Environment(loader=FileSystemLoader(TEMPLATES_DIR), autoescape=select_autoescape(['html', 'xml', 'j2']))
    tmpl = env.get_template('advice.html.j2')
    return tmpl.render(
        signals=_signals_lines(result),
        repos=result.repos,
        rows=advisory_rows(result),
        generated_at=generated_at or result.now.isoformat(),
    )


def render(result: InspectionResult, fmt: str = 'text', generated_at: Optional[str] = None) -> str:
    """Main render function; unknown formats fall back to text."""
    fmt_l = (fmt or 'text').lower()
    if fmt_l in ('md', 'markdown'):
        return render_markdown(result)
    if fmt_l in ('json', 'js'):
        return render_json(result)
    if fmt_l in ('html', 'htm'):
        return render_html(result, generated_at=generated_at)
    return render_text(result)
