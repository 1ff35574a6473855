from __future__ import annotations

import stat

import pytest

from quizmaker.core import config as core_config


def _sections():
    return {
        "timing": {"mcq_time": 60, "subjective_time": 180},
        "marks": {"mcq_marks": 2, "subjective_marks": 10},
    }


def test_file_values_replace_only_the_keys_they_set():
    sections = _sections()

    core_config.apply_config_file(sections, {"timing": {"mcq_time": 45}})

    assert sections["timing"] == {"mcq_time": 45, "subjective_time": 180}
    assert sections["marks"] == {"mcq_marks": 2, "subjective_marks": 10}


@pytest.mark.parametrize(
    "document, message",
    [
        ({"timing": {"mcq_tme": 45}}, "'timing.mcq_tme'"),
        ({"scoring": {"bonus": 1}}, r"\[scoring\]"),
        ({"marks": 5}, "Expected \\[marks\\] to be a table"),
    ],
)
def test_unknown_or_misshapen_settings_are_rejected(document, message):
    with pytest.raises(core_config.ConfigFileError, match=message):
        core_config.apply_config_file(_sections(), document)


def test_read_config_file_reports_missing_and_broken_files(tmp_path):
    with pytest.raises(core_config.ConfigFileError, match="not found"):
        core_config.read_config_file(tmp_path / "absent.toml")

    broken = tmp_path / "quizmaker.toml"
    broken.write_text("[marks\nmcq_marks = 2\n", encoding="utf-8")
    with pytest.raises(core_config.ConfigFileError, match="quizmaker.toml"):
        core_config.read_config_file(broken)


def test_template_round_trips_through_reader(tmp_path):
    target = tmp_path / "config" / "quizmaker.toml"

    written = core_config.write_template(target)

    assert written == target
    assert stat.S_IMODE(target.stat().st_mode) == 0o600
    document = core_config.read_config_file(target)
    assert document["timing"] == {"mcq_time": 60, "subjective_time": 180}
    assert document["marks"] == {"mcq_marks": 2, "subjective_marks": 10}
    assert document["logging"]["level"] == "INFO"


def test_write_template_keeps_user_edits_unless_forced(tmp_path):
    target = tmp_path / "quizmaker.toml"
    target.write_text("[marks]\nmcq_marks = 9\n", encoding="utf-8")

    with pytest.raises(core_config.ConfigFileError, match="--force"):
        core_config.write_template(target)
    assert "mcq_marks = 9" in target.read_text(encoding="utf-8")

    core_config.write_template(target, force=True)
    assert target.read_text(encoding="utf-8") == core_config.template_text()
