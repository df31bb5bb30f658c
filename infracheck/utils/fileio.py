"""Basic file IO helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


class PlaybookLoader(yaml.SafeLoader):
    """YAML loader that tolerates Ansible custom tags such as ``!vault``."""


def _construct_tagged(loader: PlaybookLoader, tag_suffix: str, node: yaml.Node) -> Any:
    if isinstance(node, yaml.ScalarNode):
        return loader.construct_scalar(node)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node)
    if isinstance(node, yaml.MappingNode):
        return loader.construct_mapping(node)
    return None


PlaybookLoader.add_multi_constructor("!", _construct_tagged)


def load_yaml_text(text: str) -> Any:
    """Parse the first YAML document in ``text``; later documents are ignored.

    Returns ``None`` for an empty stream. Raises ``yaml.YAMLError`` on bad input.
    """

    loader = PlaybookLoader(text)
    try:
        if loader.check_data():
            return loader.get_data()
        return None
    finally:
        loader.dispose()


def read_text_file(path: Path) -> str:
    """Return the file contents as UTF-8 text.

    Undecodable bytes are replaced rather than raised; ``OSError`` propagates.
    """

    return path.read_text(encoding="utf-8", errors="replace")
