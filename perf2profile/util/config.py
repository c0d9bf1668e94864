# coding=utf-8
import json
import os
from typing import Dict

from perf2profile.util.constant import CONVERT_CONFIG_PATH, GroupBy, SampleLabels
from perf2profile.util.logging_utils import get_default_logger

logger = get_default_logger(__name__)

DEFAULT_CONVERT_CONFIG = {
    "group_by": GroupBy.none,
    "sample_labels": [],
    "max_workers": 1,
}


def load_convert_config(config_path: str = CONVERT_CONFIG_PATH) -> Dict:
    """Read the command defaults, falling back to built-ins when no file is installed."""
    config = dict(DEFAULT_CONVERT_CONFIG)
    if not config_path or not os.path.exists(config_path):
        logger.debug(f"no convert config at {config_path}, using defaults")
        return config

    with open(config_path, 'r', encoding='utf-8') as reader:
        config.update(json.load(reader))
    logger.info(f"loaded convert config from {config_path}: {config}")
    validate_convert_config(config)
    return config


def validate_convert_config(config: Dict):
    group_by = config.get("group_by")
    if group_by not in GroupBy.values():
        raise ValueError(f"group_by must be one of {GroupBy.values()}, but got {group_by!r}")

    sample_labels = config.get("sample_labels")
    if not isinstance(sample_labels, list):
        raise ValueError(f"sample_labels must be a list, but got {type(sample_labels)}")
    unknown = [label for label in sample_labels if label not in SampleLabels.values()]
    if unknown:
        raise ValueError(f"unknown sample labels {unknown}, expected any of {SampleLabels.values()}")

    max_workers = config.get("max_workers")
    if not isinstance(max_workers, int) or isinstance(max_workers, bool) or max_workers < 1:
        raise ValueError(f"max_workers must be a positive int, but got {max_workers!r}")
