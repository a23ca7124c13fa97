"""
robots.txt rules used by the page audit to flag blocked pages.
"""
from __future__ import annotations

import re
from typing import Dict, List, Optional
from urllib.parse import urlparse

__all__ = ("RobotsTxtRules", "robots_url_for")


def robots_url_for(url: str) -> str:
    """URL of the robots.txt that governs *url*."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}/robots.txt"


class RobotsTxtRules:
    """
    Parsed robots.txt: user-agent groups with allow/disallow directives.
    Longest matching rule wins, Allow wins ties; empty Disallow allows everything.
    """

    def __init__(self, text: str) -> None:
        self.groups: List[Dict[str, List]] = []
        self._patterns: Dict[str, re.Pattern[str]] = {}
        self._parse(text)

    def can_fetch(self, user_agent: str, url_or_path: str) -> bool:
        """Return True if *user_agent* may fetch the given URL or path."""
        group = self._match_group(user_agent)
        if group is None:
            return True
        path = self._path_of(url_or_path)
        best_len = -1
        allowed = True
        for directive, rule in group["directives"]:
            if not self._matches(rule, path):
                continue
            length = len(rule.replace("*", "").rstrip("$"))
            if length > best_len or (length == best_len and directive == "allow"):
                best_len = length
                allowed = directive == "allow"
        return allowed

    def _parse(self, text: str) -> None:
        current: Optional[Dict[str, List]] = None
        for raw in text.splitlines():
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue
            key, _, val = line.partition(":")
            key = key.strip().lower()
            val = val.strip()
            if key == "user-agent":
                # consecutive user-agent lines share one group
                if current is None or current["directives"]:
                    current = {"agents": [], "directives": []}
                    self.groups.append(current)
                current["agents"].append(val.lower())
            elif key in ("allow", "disallow") and current is not None:
                if key == "disallow" and not val:
                    continue
                current["directives"].append((key, val))

    def _match_group(self, user_agent: str) -> Optional[Dict[str, List]]:
        """Most specific group: a named agent that prefixes the UA, else ``*``."""
        ua = user_agent.lower()
        for group in self.groups:
            if any(agent != "*" and ua.startswith(agent) for agent in group["agents"]):
                return group
        for group in self.groups:
            if "*" in group["agents"]:
                return group
        return None

    def _matches(self, rule: str, path: str) -> bool:
        if rule not in self._patterns:
            anchored = rule.endswith("$")
            body = re.escape(rule.rstrip("$")).replace(r"\*", ".*")
            self._patterns[rule] = re.compile("^" + body + ("$" if anchored else ""))
        return bool(self._patterns[rule].match(path))

    @staticmethod
    def _path_of(url_or_path: str) -> str:
        if url_or_path.startswith("/"):
            return url_or_path
        parsed = urlparse(url_or_path)
        path = parsed.path or "/"
        return f"{path}?{parsed.query}" if parsed.query else path
