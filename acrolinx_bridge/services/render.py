# acrolinx_bridge/services/render.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from acrolinx_bridge.core import config
from acrolinx_bridge.models.report import Goal, Issue, ResultPayload
from acrolinx_bridge.services.buffer import DocumentBuffer, TrackedRange

_BLOCK_TAGS = ["p", "div", "li", "ul", "ol", "tr", "h1", "h2", "h3", "h4"]
_BLANK_RUNS = re.compile(r"\n{3,}")


def html_to_text(html: str) -> str:
    """Plain-text rendering of the service's HTML-ish rich text."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for tag in soup.find_all(_BLOCK_TAGS):
        tag.append("\n")
    text = soup.get_text()
    lines = [ln.rstrip() for ln in text.splitlines()]
    return _BLANK_RUNS.sub("\n\n", "\n".join(lines)).strip()


def issue_sort_key(issue: Issue) -> int:
    if issue.positional_matches:
        return issue.positional_matches[0].original_begin
    return 0


def sort_issues(issues: List[Issue]) -> List[Issue]:
    # sorted() is stable: ties keep the server's order
    return sorted(issues, key=issue_sort_key)


def flagged_span(issue: Issue) -> Tuple[int, int]:
    matches = issue.positional_matches
    if not matches:
        return 0, 0
    return matches[0].original_begin, matches[-1].original_end


def issue_label(issue: Issue) -> str:
    matches = issue.positional_matches
    if not matches:
        return ""
    if len(matches) == 1:
        return matches[0].original_text
    return f"{matches[0].original_text} ... {matches[-1].original_text}"


def resolve_guidance_html(issue: Issue) -> str:
    if issue.guidance_html:
        return issue.guidance_html
    return "<br/>".join(s.display_name_html for s in issue.sub_issues if s.display_name_html)


@dataclass
class Annotation:
    index: int
    issue: Issue
    name: str
    label: str
    source_begin: int
    source_end: int
    marker: Optional[TrackedRange]
    suggestions: List[str]
    guidance: Optional[str] = None
    expanded: bool = False

    @property
    def has_guidance(self) -> bool:
        return bool(self.guidance)

    @property
    def header(self) -> str:
        if not self.has_guidance:
            return self.name
        return ("- " if self.expanded else "+ ") + self.name

    def toggle_guidance(self) -> bool:
        if self.has_guidance:
            self.expanded = not self.expanded
        return self.expanded

    def _live_marker(self) -> TrackedRange:
        if self.marker is None:
            raise ValueError(f"issue {self.index} has no position in the document")
        if self.marker.released:
            raise ValueError(f"issue {self.index} is no longer displayed")
        return self.marker

    def jump(self, buffer: DocumentBuffer) -> int:
        return buffer.goto(self._live_marker().start)

    def apply_suggestion(self, buffer: DocumentBuffer, k: int) -> str:
        if not 0 <= k < len(self.suggestions):
            raise IndexError(f"issue {self.index} has no suggestion {k}")
        marker = self._live_marker()
        buffer.replace(marker.start, marker.end, self.suggestions[k])
        marker.clear_face()
        return buffer.text

    def release(self):
        if self.marker is not None:
            self.marker.release()


@dataclass
class Scorecard:
    buffer: DocumentBuffer
    score: int
    goals: List[Goal]
    annotations: List[Annotation] = field(default_factory=list)
    target_id: Optional[str] = None
    closed: bool = False

    def entry(self, n: int) -> Annotation:
        if not 0 <= n < len(self.annotations):
            raise IndexError(f"no scorecard entry {n}")
        return self.annotations[n]

    def close(self):
        for a in self.annotations:
            a.release()
        self.closed = True

    def render_text(self) -> str:
        out = [f"Acrolinx Score: {self.score}"]
        if self.goals:
            out.append("Goals: " + ", ".join(g.display_name or g.id for g in self.goals))
        for a in self.annotations:
            out.append("")
            out.append(a.header)
            if a.marker is not None:
                out.append(f"  {a.label}  [{a.marker.start}]")
            for i, s in enumerate(a.suggestions, start=1):
                out.append(f"    {i}. {s}")
            if a.expanded and a.guidance:
                out.extend("    " + ln if ln else "" for ln in a.guidance.splitlines())
        return "\n".join(out) + "\n"


def _faces(goals: List[Goal]) -> Dict[str, str]:
    return {g.id: g.color for g in goals if g.color}


def render(buffer: DocumentBuffer, result: ResultPayload, target_id: Optional[str] = None) -> Scorecard:
    card = Scorecard(buffer=buffer, score=result.score, goals=list(result.goals), target_id=target_id)
    faces = _faces(result.goals)

    for n, issue in enumerate(sort_issues(result.issues)):
        begin, end = flagged_span(issue)
        marker = None
        if issue.positional_matches:
            # server offsets are 0-based, buffer positions 1-based
            marker = buffer.track(begin + 1, end + 1, face=faces.get(issue.goal_id, config.DEFAULT_FACE))
        guidance = html_to_text(resolve_guidance_html(issue)) or None
        card.annotations.append(
            Annotation(
                index=n,
                issue=issue,
                name=html_to_text(issue.display_name_html),
                label=issue_label(issue),
                source_begin=begin,
                source_end=end,
                marker=marker,
                suggestions=list(issue.suggestions),
                guidance=guidance,
            )
        )
    return card
