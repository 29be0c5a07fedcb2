"""Tests for .featurepick.yaml loading."""

import pytest
import yaml

from featurepick.config import (
    FailedPickPolicy,
    FeaturepickConfig,
    load_config,
)


def test_defaults_when_default_file_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    config = load_config()

    assert config == FeaturepickConfig()
    assert config.select.all_refs is True
    assert config.pick.on_failed_pick == FailedPickPolicy.SKIP
    assert config.pick.settle_seconds == 1.0
    assert config.commit_list.path == "commit_list.txt"


def test_explicit_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_loads_sections(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "select:\n"
        "  all_refs: false\n"
        "  fixed_strings: true\n"
        "pick:\n"
        "  on_failed_pick: continue\n"
        "  settle_seconds: 0\n"
        "commit_list:\n"
        "  path: picks.txt\n"
        "  keep: false\n"
        "notes:\n"
        "  anything: 1\n"
    )

    config = load_config(str(path))

    assert config.select.all_refs is False
    assert config.select.fixed_strings is True
    assert config.select.regexp_ignore_case is False
    assert config.pick.on_failed_pick == FailedPickPolicy.CONTINUE
    assert config.pick.settle_seconds == 0
    assert config.commit_list.path == "picks.txt"
    assert config.commit_list.keep is False
    assert config.get_section("notes") == {"anything": 1}
    assert config.get_section("missing") == {}


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("# nothing here\n")

    assert load_config(str(path)) == FeaturepickConfig()


def test_non_mapping_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- a\n- b\n")

    with pytest.raises(ValueError):
        load_config(str(path))


def test_invalid_yaml_is_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("pick: [unclosed\n")

    with pytest.raises(yaml.YAMLError):
        load_config(str(path))


@pytest.mark.parametrize(
    "pick",
    [
        {"on_failed_pick": "retry"},
        {"settle_seconds": -1},
    ],
)
def test_invalid_pick_values(pick):
    with pytest.raises(ValueError):
        FeaturepickConfig.from_dict({"pick": pick})


def test_section_must_be_mapping():
    with pytest.raises(ValueError):
        FeaturepickConfig.from_dict({"select": ["all_refs"]})
