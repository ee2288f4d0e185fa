"""Podfile editing: add or remove a pod inside a named target block."""

from __future__ import annotations

import re

from sdkinject.text import detect_newline


def default_podfile(target: str, platform: str = "8.0", newline: str = "\n") -> str:
    """Return a minimal Podfile with an empty target block."""
    return (
        f"platform :ios, '{platform}'{newline}"
        f"target '{target}' do{newline}"
        f"  use_frameworks!{newline}"
        f"end{newline}"
    )


def _pod_line(pod: str) -> re.Pattern[str]:
    return re.compile(
        rf"^[ \t]*pod[ \t]+['\"]{re.escape(pod)}['\"][^\r\n]*(?:\r?\n|\Z)", re.MULTILINE
    )


def target_span(content: str, target: str) -> tuple[int, int] | None:
    """Return (start, end) of a target block body, `end` being the column-0 `end`."""
    match = re.search(
        rf"(target[ \t]+['\"]{re.escape(target)}['\"][ \t]+do\b[\s\S]*?\r?\n)end\b",
        content,
    )
    if match is None:
        return None
    return match.start(), match.start() + len(match.group(1))


def has_pod(content: str, target: str, pod: str) -> bool:
    span = target_span(content, target)
    if span is None:
        return _pod_line(pod).search(content) is not None
    return _pod_line(pod).search(content, span[0], span[1]) is not None


def add_pod(content: str, target: str, pod: str) -> str:
    """Add `pod '<pod>'` to the target block unless it is already there.

    Without a matching target block the pod line is appended to the file.
    """
    if has_pod(content, target, pod):
        return content

    newline = detect_newline(content)
    span = target_span(content, target)
    if span is None:
        separator = "" if not content or content.endswith(("\n", "\r")) else newline
        return f"{content}{separator}pod '{pod}'{newline}"

    end = span[1]
    return f"{content[:end]}  pod '{pod}'{newline}{content[end:]}"


def remove_pod(content: str, target: str, pod: str) -> str:
    """Remove the `pod '<pod>'` line from the target block if present."""
    span = target_span(content, target)
    start, end = span if span is not None else (0, len(content))
    match = _pod_line(pod).search(content, start, end)
    if match is None:
        return content
    return content[: match.start()] + content[match.end() :]
