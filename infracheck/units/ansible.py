"""Normalize Ansible playbooks into plays and tasks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Tuple

import yaml

from infracheck.errors import ParseError
from infracheck.utils import load_yaml_text


class Task:
    """One step of a play: an ordered mapping of key to value."""

    def __init__(self, fields: Mapping[Any, Any]) -> None:
        self._fields: Dict[str, Any] = {str(key): value for key, value in fields.items()}

    def __repr__(self) -> str:
        return f"Task({self._fields!r})"

    def get(self, name: str, default: Any = None) -> Any:
        return self._fields.get(name, default)

    def has(self, name: str) -> bool:
        return name in self._fields

    def attribute_names(self) -> List[str]:
        return list(self._fields)

    def string_values(self) -> Iterator[Tuple[str, str]]:
        """Yield ``(key, value)`` for every top-level string value."""

        for key, value in self._fields.items():
            if isinstance(value, str):
                yield key, value


@dataclass
class Play:
    hosts: Any = None
    vars: Dict[str, Any] = field(default_factory=dict)
    tasks: List[Task] = field(default_factory=list)


def parse_playbook(text: str) -> List[Play]:
    """Parse playbook YAML into plays. Raises ``ParseError`` on any shape mismatch."""

    try:
        document = load_yaml_text(text)
    except yaml.YAMLError as exc:
        raise ParseError(" ".join(str(exc).split())) from exc

    if document is None:
        return []
    if not isinstance(document, list):
        raise ParseError(f"expected a list of plays, got {_kind(document)}")
    return [_build_play(index, entry) for index, entry in enumerate(document)]


def _build_play(index: int, entry: Any) -> Play:
    if not isinstance(entry, dict):
        raise ParseError(f"play #{index + 1} is {_kind(entry)}, expected a mapping")

    play_vars = entry.get("vars")
    if play_vars is None:
        play_vars = {}
    if not isinstance(play_vars, dict):
        raise ParseError(f"play #{index + 1} 'vars' is {_kind(play_vars)}, expected a mapping")

    raw_tasks = entry.get("tasks")
    if raw_tasks is None:
        raw_tasks = []
    if not isinstance(raw_tasks, list):
        raise ParseError(f"play #{index + 1} 'tasks' is {_kind(raw_tasks)}, expected a list")

    tasks: List[Task] = []
    for position, raw_task in enumerate(raw_tasks):
        if not isinstance(raw_task, dict):
            raise ParseError(
                f"play #{index + 1} task #{position + 1} is {_kind(raw_task)}, expected a mapping"
            )
        tasks.append(Task(raw_task))

    return Play(
        hosts=entry.get("hosts"),
        vars={str(name): value for name, value in play_vars.items()},
        tasks=tasks,
    )


def _kind(value: Any) -> str:
    if isinstance(value, dict):
        return "a mapping"
    if isinstance(value, list):
        return "a list"
    return f"a {type(value).__name__}"
