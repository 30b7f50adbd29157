# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Helpers for reading and writing nested dictionaries by dotted path.

Paths are either dotted strings (``"address.city"``) or sequences of
segments (``["items", 0, "name"]``). Segments are always stored as strings
so error trees stay JSON-serializable.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, MutableMapping, Sequence, Union

PathLike = Union[str, Sequence[Any]]

_MISSING = object()


def split_path(path: PathLike) -> List[str]:
    """Split a dotted path (or a sequence of segments) into string segments."""
    if isinstance(path, str):
        segments = path.split(".") if path else []
    else:
        segments = [str(segment) for segment in path]
    if any(segment == "" for segment in segments):
        raise ValueError(f"Invalid path {path!r}: empty segment")
    return segments


def join_path(segments: Sequence[Any]) -> str:
    return ".".join(str(segment) for segment in segments)


def deep_get(tree: Mapping[str, Any], path: PathLike, default: Any = None) -> Any:
    node: Any = tree
    for segment in split_path(path):
        if not isinstance(node, Mapping) or segment not in node:
            return default
        node = node[segment]
    return node


def deep_has(tree: Mapping[str, Any], path: PathLike) -> bool:
    return deep_get(tree, path, _MISSING) is not _MISSING


def deep_set(tree: MutableMapping[str, Any], path: PathLike, value: Any) -> None:
    """Set ``value`` at ``path``, creating (or overwriting non-mapping) parents."""
    segments = split_path(path)
    if not segments:
        raise ValueError("Cannot set a value at an empty path")

    node = tree
    for segment in segments[:-1]:
        child = node.get(segment)
        if not isinstance(child, MutableMapping):
            child = {}
            node[segment] = child
        node = child
    node[segments[-1]] = value


def deep_merge(target: MutableMapping[Any, Any], source: Mapping[Any, Any]) -> MutableMapping[Any, Any]:
    """Recursively merge ``source`` into ``target`` and return ``target``.

    Nested mappings are merged key by key; any other value in ``source``
    overwrites the one in ``target``. Mappings taken from ``source`` are
    copied so the two trees never share nodes.
    """
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(value, Mapping):
            if isinstance(existing, MutableMapping):
                deep_merge(existing, value)
            else:
                target[key] = deep_merge({}, value)
        else:
            target[key] = value
    return target


def deep_copy_tree(tree: Mapping[Any, Any]) -> Dict[Any, Any]:
    return deep_merge({}, tree)
