"""Policy composition and access checks for the tool dispatcher.

Provides:
- ``intersect_tool_policies()``: compose policy layers into one net policy.
- ``is_tool_allowed()`` / ``check_tool_allowed()``: per-tool enforcement.
- ``filter_tool_names()``: split a tool list into allowed and excluded.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..exceptions import ToolNotPermittedError
from .catalog import DEFAULT_TOOL_CATALOG, ToolCatalog
from .policy import ToolPolicy

logger = logging.getLogger(__name__)


def intersect_tool_policies(
    layers: Iterable[Optional[ToolPolicy]],
    catalog: ToolCatalog = DEFAULT_TOOL_CATALOG,
) -> ToolPolicy:
    """Compose policy layers: allow-intersection, deny-union.

    Rules:
    1. ``None`` layers have no opinion and are skipped.
    2. Each present ``allow`` is expanded through the catalog; layers
       without ``allow`` are not operands of the intersection.
    3. The result's ``allow`` is the intersection of those sets (sorted),
       or absent if no layer restricted allow. An empty allow on any layer
       empties the result.
    4. The result's ``deny`` is the union of every layer's deny entries,
       in first-seen order, without duplicates. Deny entries are kept as
       literals; group references in deny are not expanded.

    Args:
        layers: Ordered policy layers (profile, tier, skill, ...).
        catalog: Catalog used to expand allow references.

    Returns:
        The composed :class:`ToolPolicy`. Never ``None``; no layers gives
        ``ToolPolicy()`` (no restriction).

    Example::

        intersect_tool_policies([
            ToolPolicy(allow=["group:fs", "group:web"]),
            ToolPolicy(allow=["read", "write", "web_search"]),
        ])
        # ToolPolicy(allow=("read", "web_search", "write"), deny=None)
    """
    allow: Optional[set[str]] = None
    deny: Optional[list[str]] = None

    for layer in layers:
        if layer is None:
            continue

        if layer.allow is not None:
            expanded = catalog.expand(layer.allow)
            allow = set(expanded) if allow is None else allow & expanded

        if layer.deny is not None:
            if deny is None:
                deny = []
            for entry in layer.deny:
                if entry not in deny:
                    deny.append(entry)

    return ToolPolicy(
        allow=tuple(sorted(allow)) if allow is not None else None,
        deny=tuple(deny) if deny is not None else None,
    )


def is_tool_allowed(
    policy: Optional[ToolPolicy],
    tool_name: str,
    catalog: ToolCatalog = DEFAULT_TOOL_CATALOG,
) -> bool:
    """Check whether a composed policy lets the dispatcher invoke a tool.

    Checks in order:
    1. No policy → allowed.
    2. Tool matches a deny entry (deny groups are resolved here, at the
       dispatcher, not during composition) → refused.
    3. ``allow`` present and the tool is not in it → refused.

    Example::

        policy = ToolPolicy(allow=["group:fs"], deny=["edit"])
        is_tool_allowed(policy, "read")  # True
        is_tool_allowed(policy, "edit")  # False (denied)
        is_tool_allowed(policy, "exec")  # False (not allowed)
    """
    return _refusal_reason(policy, tool_name, catalog) is None


def _refusal_reason(policy: Optional[ToolPolicy], tool_name: str, catalog: ToolCatalog) -> Optional[str]:
    if policy is None:
        return None
    name = catalog.normalize(tool_name)
    if policy.deny and name in catalog.expand(policy.deny):
        return "denied"
    if policy.allow is not None and name not in catalog.expand(policy.allow):
        return "not_allowed"
    return None


def check_tool_allowed(
    policy: Optional[ToolPolicy],
    tool_name: str,
    catalog: ToolCatalog = DEFAULT_TOOL_CATALOG,
) -> None:
    """Raise :class:`ToolNotPermittedError` if the policy refuses the tool."""
    reason = _refusal_reason(policy, tool_name, catalog)
    if reason is not None:
        raise ToolNotPermittedError(
            f"Tool '{tool_name}' is not permitted ({reason})",
            tool=tool_name,
            reason=reason,
        )


def filter_tool_names(
    policy: Optional[ToolPolicy],
    tool_names: Sequence[str],
    catalog: ToolCatalog = DEFAULT_TOOL_CATALOG,
) -> tuple[list[str], list[str]]:
    """Split tool names into ``(allowed, excluded)``, preserving order."""
    allowed: list[str] = []
    excluded: list[str] = []
    for name in tool_names:
        (allowed if is_tool_allowed(policy, name, catalog) else excluded).append(name)
    if excluded:
        logger.debug("Policy excluded %d of %d tools: %s", len(excluded), len(tool_names), excluded)
    return allowed, excluded


__all__ = [
    "check_tool_allowed",
    "filter_tool_names",
    "intersect_tool_policies",
    "is_tool_allowed",
]
