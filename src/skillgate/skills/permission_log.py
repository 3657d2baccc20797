"""Audit log of tools excluded by skill permissions.

Every exclusion is logged at warning level. When the same tool has been
excluded for the same skill ``threshold`` times, a line suggesting a
scope upgrade is appended to the skill's ``learnings.md``.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from ..permissions.constants import SkillScope
from .serialize import serialize_by_key
from .types import SkillExclusionEntry

if TYPE_CHECKING:
    from ..config import SkillGateConfig

logger = logging.getLogger(__name__)

LEARNINGS_THRESHOLD = 3
LEARNINGS_FILENAME = "learnings.md"
LEARNINGS_SECTION = "## Permission Exclusions"

_FS_TOOLS = frozenset({"read", "write", "edit", "apply_patch"})
_SYSTEM_MARKERS = ("exec", "process", "cron", "gateway")


def suggest_scope_for_tool(tool_name: str, current_scope: str) -> Optional[str]:
    """Suggest the smallest scope that would have allowed ``tool_name``.

    Returns ``None`` when no heuristic applies.
    """
    normalized = tool_name.lower()
    if "memory" in normalized:
        if current_scope == SkillScope.CONVERSATION_ONLY:
            return SkillScope.READ_ONLY
        return SkillScope.READ_WRITE
    if normalized in _FS_TOOLS:
        return SkillScope.WORKSPACE
    if "web" in normalized:
        return SkillScope.READ_ONLY
    if any(marker in normalized for marker in _SYSTEM_MARKERS):
        return SkillScope.FULL
    return None


class SkillPermissionLogger:
    """Per-session tracker of tool exclusions caused by skill permissions.

    - Logs every exclusion to the ``skillgate`` logger at warning level.
    - Counts exclusions per ``(skill, tool)``.
    - At ``threshold`` exclusions, appends to the skill's ``learnings.md``.
    - Bypassed exclusions are tagged ``[bypassed]`` and never written.

    Args:
        threshold: Exclusion count that triggers a learnings entry.
        today: Date provider, for deterministic tests.
    """

    def __init__(
        self,
        threshold: int = LEARNINGS_THRESHOLD,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.threshold = threshold
        self._today = today
        self._counts: dict[tuple[str, str], int] = {}
        self._entries: dict[tuple[str, str], SkillExclusionEntry] = {}

    @classmethod
    def from_config(
        cls, config: "SkillGateConfig", today: Callable[[], date] = date.today
    ) -> "SkillPermissionLogger":
        """Build a logger using ``config.learnings_threshold``."""
        return cls(threshold=config.learnings_threshold, today=today)

    def log_exclusion(self, entry: SkillExclusionEntry) -> None:
        """Record one tool exclusion."""
        key = (entry.skill_name, entry.tool_name)
        count = self._counts.get(key, 0) + 1
        self._counts[key] = count
        self._entries[key] = entry

        tag = " [bypassed]" if entry.bypassed else ""
        logger.warning(
            'skill permission: tool "%s" excluded by skill "%s" (scope: %s)%s',
            entry.tool_name,
            entry.skill_name,
            entry.scope,
            tag,
            extra={
                "skill": entry.skill_name,
                "tool_name": entry.tool_name,
                "scope": entry.scope,
                "bypassed": entry.bypassed,
                "count": count,
            },
        )

        if count == self.threshold and not entry.bypassed:
            self._append_to_learnings(entry, count)

    def log_exclusions(self, entries: Iterable[SkillExclusionEntry]) -> None:
        for entry in entries:
            self.log_exclusion(entry)

    def get_count(self, skill_name: str, tool_name: str) -> int:
        return self._counts.get((skill_name, tool_name), 0)

    def flush_to_learnings(self) -> None:
        """Write every entry at or over the threshold. Called at session end."""
        for key, count in self._counts.items():
            if count < self.threshold:
                continue
            entry = self._entries.get(key)
            if entry is None or entry.bypassed:
                continue
            self._append_to_learnings(entry, count)

    def _append_to_learnings(self, entry: SkillExclusionEntry, count: int) -> None:
        learnings_path = Path(entry.skill_base_dir) / LEARNINGS_FILENAME
        day = self._today().isoformat()

        suggested = suggest_scope_for_tool(entry.tool_name, entry.scope)
        suggestion = f" Consider upgrading to `{suggested}` if this tool is needed." if suggested else ""
        duplicate_key = f'{day}: Skill "{entry.skill_name}" excluded tool "{entry.tool_name}"'
        line = (
            f"- {duplicate_key} x{count} across sessions. "
            f"Current scope: `{entry.scope}`.{suggestion} [auto-logged]\n"
        )

        try:
            with serialize_by_key(f"learnings:{learnings_path}"):
                existing = learnings_path.read_text(encoding="utf-8") if learnings_path.exists() else ""
                if duplicate_key in existing:
                    return

                if LEARNINGS_SECTION in existing:
                    header_end = existing.index(LEARNINGS_SECTION) + len(LEARNINGS_SECTION)
                    insert_at = existing.find("\n", header_end)
                    if insert_at == -1:
                        content = f"{existing}\n{line}"
                    else:
                        content = f"{existing[:insert_at + 1]}{line}{existing[insert_at + 1:]}"
                else:
                    separator = "\n\n" if existing.strip() else ""
                    content = f"{existing.rstrip()}{separator}{LEARNINGS_SECTION}\n{line}"

                learnings_path.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.warning(
                "Failed to write skill permission exclusion to %s: %s",
                learnings_path,
                e,
                extra={"skill": entry.skill_name},
            )


__all__ = [
    "LEARNINGS_THRESHOLD",
    "SkillPermissionLogger",
    "suggest_scope_for_tool",
]
