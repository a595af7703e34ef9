from __future__ import annotations

from pathlib import Path

import pytest

from rules.config import ConfigError, load_config
from rules.tables import DISPATCH_NAMES, NAME_OVERRIDES


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / "ssl-index.toml").write_text(toml_content, encoding="utf-8")


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.repo_path == ".fallout2-ce"
    assert config.function_index == "src/data/function-index.json"
    assert config.defines.output == "src/data/define-index.json"
    assert dict(config.override_table()) == dict(NAME_OVERRIDES)
    assert dict(config.dispatch_table()) == dict(DISPATCH_NAMES)


def test_defines_branch_is_separate_from_engine_branch(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
branch = "develop"

[defines]
branch = "master"
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.branch == "develop"
    assert config.defines.branch == "master"
    assert load_config(tmp_path / "missing").defines.branch == "main"


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_defines_key_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[defines]
repo = "owner/repo"
bogus = true
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "repo_path = ")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_extension_without_dot_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, 'extensions = ["cc"]')

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_empty_override_name_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[overrides]
op_sqrt = ""
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
repo_path = "vendor/engine"
exclude = ["src/third_party/*"]

[overrides]
opSuccess = "was_success"

[dispatch_names]
METARULE_TEST_FIRSTRUN = "map_first_run_test"

[defines]
repo = "owner/repo"
prefixes = ["STAT_"]
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.repo_path == "vendor/engine"
    assert config.exclude == ["src/third_party/*"]
    assert config.override_table()["opSuccess"] == "was_success"
    assert config.override_table()["opCritical"] == "is_critical"
    assert config.dispatch_table()["METARULE_TEST_FIRSTRUN"] == "map_first_run_test"
    assert config.defines.repo == "owner/repo"
    assert config.defines.prefixes == ["STAT_"]
