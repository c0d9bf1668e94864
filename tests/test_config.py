# coding=utf-8
import json

import pytest

from perf2profile.util.config import DEFAULT_CONVERT_CONFIG, load_convert_config


def _write(tmp_path, content):
    path = tmp_path / "convert_config.json"
    path.write_text(json.dumps(content))
    return str(path)


def test_missing_file_gives_defaults(tmp_path):
    assert load_convert_config(str(tmp_path / "absent.json")) == DEFAULT_CONVERT_CONFIG


def test_file_overrides_defaults(tmp_path):
    config = load_convert_config(_write(tmp_path, {"group_by": "event", "sample_labels": ["pid"]}))
    assert config == {"group_by": "event", "sample_labels": ["pid"], "max_workers": 1}


@pytest.mark.parametrize("content", [
    {"group_by": "thread"},
    {"sample_labels": "pid"},
    {"sample_labels": ["flavour"]},
    {"max_workers": 0},
    {"max_workers": True},
])
def test_invalid_values_are_rejected(tmp_path, content):
    with pytest.raises(ValueError):
        load_convert_config(_write(tmp_path, content))
