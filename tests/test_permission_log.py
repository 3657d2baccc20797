"""Tests for the skill permission exclusion logger."""

from __future__ import annotations

import logging
import threading
from datetime import date
from pathlib import Path

import pytest

from skillgate import SkillExclusionEntry, SkillGateConfig, SkillPermissionLogger, suggest_scope_for_tool
from skillgate.skills import KeyedLock, run_serialized

TODAY = date(2026, 3, 14)


def _entry(base_dir: Path, tool: str = "exec", bypassed: bool = False) -> SkillExclusionEntry:
    return SkillExclusionEntry(
        skill_name="recipes",
        skill_base_dir=str(base_dir),
        tool_name=tool,
        scope="workspace",
        bypassed=bypassed,
    )


@pytest.fixture
def perm_logger() -> SkillPermissionLogger:
    return SkillPermissionLogger(today=lambda: TODAY)


class TestSuggestScopeForTool:
    """Tests for scope upgrade suggestions."""

    def test_memory_from_conversation_only(self) -> None:
        assert suggest_scope_for_tool("memory_search", "conversation-only") == "read-only"

    def test_memory_from_other_scope(self) -> None:
        assert suggest_scope_for_tool("memory_get", "workspace") == "read-write"

    def test_fs_tools(self) -> None:
        for tool in ("read", "write", "edit", "apply_patch"):
            assert suggest_scope_for_tool(tool, "read-only") == "workspace"

    def test_web_tools(self) -> None:
        assert suggest_scope_for_tool("web_fetch", "conversation-only") == "read-only"

    def test_system_tools(self) -> None:
        for tool in ("exec", "process", "cron", "gateway"):
            assert suggest_scope_for_tool(tool, "workspace") == "full"

    def test_unknown(self) -> None:
        assert suggest_scope_for_tool("hostkit_state", "workspace") is None


class TestSkillPermissionLogger:
    """Tests for exclusion counting and learnings.md writes."""

    def test_counts_per_skill_and_tool(self, perm_logger: SkillPermissionLogger, tmp_path: Path) -> None:
        perm_logger.log_exclusion(_entry(tmp_path, "exec"))
        perm_logger.log_exclusion(_entry(tmp_path, "exec"))
        perm_logger.log_exclusion(_entry(tmp_path, "cron"))
        assert perm_logger.get_count("recipes", "exec") == 2
        assert perm_logger.get_count("recipes", "cron") == 1
        assert perm_logger.get_count("recipes", "read") == 0

    def test_logs_warning(
        self, perm_logger: SkillPermissionLogger, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            perm_logger.log_exclusion(_entry(tmp_path, "exec"))
        record = caplog.records[-1]
        assert 'tool "exec" excluded by skill "recipes"' in record.getMessage()
        assert record.skill == "recipes"
        assert record.count == 1

    def test_bypassed_tag(
        self, perm_logger: SkillPermissionLogger, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            perm_logger.log_exclusion(_entry(tmp_path, bypassed=True))
        assert caplog.records[-1].getMessage().endswith("[bypassed]")

    def test_below_threshold_writes_nothing(self, perm_logger: SkillPermissionLogger, tmp_path: Path) -> None:
        perm_logger.log_exclusions([_entry(tmp_path), _entry(tmp_path)])
        assert not (tmp_path / "learnings.md").exists()

    def test_threshold_writes_learnings(self, perm_logger: SkillPermissionLogger, tmp_path: Path) -> None:
        perm_logger.log_exclusions([_entry(tmp_path)] * 3)
        content = (tmp_path / "learnings.md").read_text(encoding="utf-8")
        assert content.startswith("## Permission Exclusions\n")
        assert '2026-03-14: Skill "recipes" excluded tool "exec" x3 across sessions.' in content
        assert "Current scope: `workspace`." in content
        assert "Consider upgrading to `full`" in content
        assert content.rstrip().endswith("[auto-logged]")

    def test_appends_after_existing_content(self, perm_logger: SkillPermissionLogger, tmp_path: Path) -> None:
        (tmp_path / "learnings.md").write_text("# Learnings\n\n- earlier note\n", encoding="utf-8")
        perm_logger.log_exclusions([_entry(tmp_path)] * 3)
        content = (tmp_path / "learnings.md").read_text(encoding="utf-8")
        assert content.startswith("# Learnings\n\n- earlier note\n\n## Permission Exclusions\n- ")

    def test_inserts_under_existing_section(self, perm_logger: SkillPermissionLogger, tmp_path: Path) -> None:
        (tmp_path / "learnings.md").write_text(
            "## Permission Exclusions\n- old entry\n\n## Other\n", encoding="utf-8"
        )
        perm_logger.log_exclusions([_entry(tmp_path, "cron")] * 3)
        content = (tmp_path / "learnings.md").read_text(encoding="utf-8")
        assert content.index('excluded tool "cron"') < content.index("- old entry")
        assert content.count("## Permission Exclusions") == 1

    def test_bypassed_never_written(self, perm_logger: SkillPermissionLogger, tmp_path: Path) -> None:
        perm_logger.log_exclusions([_entry(tmp_path, bypassed=True)] * 3)
        perm_logger.flush_to_learnings()
        assert not (tmp_path / "learnings.md").exists()

    def test_flush_skips_duplicates(self, perm_logger: SkillPermissionLogger, tmp_path: Path) -> None:
        perm_logger.log_exclusions([_entry(tmp_path)] * 4)
        perm_logger.flush_to_learnings()
        content = (tmp_path / "learnings.md").read_text(encoding="utf-8")
        assert content.count('excluded tool "exec"') == 1

    def test_custom_threshold(self, tmp_path: Path) -> None:
        perm_logger = SkillPermissionLogger(threshold=1, today=lambda: TODAY)
        perm_logger.log_exclusion(_entry(tmp_path, "web_fetch"))
        content = (tmp_path / "learnings.md").read_text(encoding="utf-8")
        assert "Consider upgrading to `read-only`" in content

    def test_threshold_from_config(self, tmp_path: Path) -> None:
        """learnings_threshold from configuration drives the write."""
        perm_logger = SkillPermissionLogger.from_config(SkillGateConfig(learnings_threshold=1), today=lambda: TODAY)
        assert perm_logger.threshold == 1
        perm_logger.log_exclusion(_entry(tmp_path, "exec"))
        assert 'excluded tool "exec" x1' in (tmp_path / "learnings.md").read_text(encoding="utf-8")

    def test_default_config_threshold(self, tmp_path: Path) -> None:
        perm_logger = SkillPermissionLogger.from_config(SkillGateConfig())
        assert perm_logger.threshold == 3

    def test_write_failure_is_logged(
        self, perm_logger: SkillPermissionLogger, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        missing_dir = tmp_path / "does-not-exist"
        with caplog.at_level(logging.WARNING):
            perm_logger.log_exclusions([_entry(missing_dir)] * 3)
        assert any("Failed to write skill permission exclusion" in r.getMessage() for r in caplog.records)


class TestKeyedLock:
    """Tests for per-key serialization."""

    def test_run_serialized_returns_value(self) -> None:
        assert run_serialized("k", lambda: 42) == 42

    def test_keys_released(self) -> None:
        lock = KeyedLock()
        with lock.hold("a"):
            assert lock.active_keys() == {"a"}
        assert lock.active_keys() == frozenset()

    def test_released_on_error(self) -> None:
        lock = KeyedLock()
        with pytest.raises(RuntimeError):
            with lock.hold("a"):
                raise RuntimeError("boom")
        assert lock.active_keys() == frozenset()

    def test_same_key_is_exclusive(self) -> None:
        lock = KeyedLock()
        active = 0
        peak = 0
        guard = threading.Lock()

        def work() -> None:
            nonlocal active, peak
            with lock.hold("skill:user"):
                with guard:
                    active += 1
                    peak = max(peak, active)
                threading.Event().wait(0.01)
                with guard:
                    active -= 1

        threads = [threading.Thread(target=work) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert peak == 1
        assert lock.active_keys() == frozenset()
