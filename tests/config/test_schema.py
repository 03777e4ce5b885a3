from __future__ import annotations

import pytest

from cudaconf.config import Configuration
from cudaconf.config.schema import decode_value, encode_value, from_items, to_items
from cudaconf.errors import ConfigFormatError
from cudaconf.support import v


def test_unresolved_config_is_just_the_marker() -> None:
    assert to_items(Configuration.unresolved()) == [("configured", "false")]


def test_resolved_config_lists_every_field() -> None:
    config = Configuration(
        cuda_driver_version=v("10.1"),
        target_support=(v("5.0"), v("7.0")),
        toolkit_dirs=("/usr/local/cuda",),
        cupti=None,
    ).resolved()
    items = dict(to_items(config))
    assert items["configured"] == "true"
    assert items["cuda_driver_version"] == '"10.1"'
    assert items["target_support"] == '["5.0", "7.0"]'
    assert items["toolkit_dirs"] == '["/usr/local/cuda"]'
    assert items["cupti"] == "null"
    assert from_items(items) == config


def test_unknown_keys_are_ignored() -> None:
    config = from_items({"configured": "true", "frobnicate": "42"})
    assert config.configured is True


@pytest.mark.parametrize(
    "kind,text",
    [
        ("bool", "1"),
        ("version", "10.1"),
        ("versions", '"10.1"'),
        ("str", "[1]"),
        ("strs", '["a", 2]'),
        ("version", "__import__('os')"),
    ],
)
def test_literals_are_decoded_by_declared_kind(kind: str, text: str) -> None:
    with pytest.raises(ConfigFormatError):
        decode_value(kind, text)


def test_paths_with_quotes_survive() -> None:
    path = 'C:\\Program Files\\NVIDIA "CUDA"'
    assert decode_value("str", encode_value("str", path)) == path
