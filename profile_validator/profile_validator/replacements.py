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

"""Path-based replacement of entries in a normalized error tree.

A rule set maps a matcher to a replacement subtree::

    {
        "city": {"cityError": True},
        re.compile(r"^items\\.\\d+$"): {"items": {"invalid": True}},
    }

A string matcher matches every path ending with it, a compiled pattern
matches every path it finds a match in. The matched entry is removed and
each key of the replacement subtree (itself a dotted path) is written into
the root of the error tree.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Tuple, Union

from .exceptions import ReplacementRuleError
from .utils.tree_utils import deep_copy_tree, deep_merge, deep_set, join_path, split_path

logger = logging.getLogger(__name__)

Matcher = Union[str, re.Pattern]
RuleSet = Mapping[Matcher, Mapping[str, Any]]


def validate_rules(rules: Any) -> None:
    """Raise ReplacementRuleError unless ``rules`` is a well-formed rule set."""
    if not isinstance(rules, Mapping):
        raise ReplacementRuleError(
            f"Replacement rules must be a mapping, got {type(rules).__name__}"
        )
    for matcher, replacement in rules.items():
        if isinstance(matcher, str):
            if not matcher:
                raise ReplacementRuleError("Replacement matcher must be a non-empty string")
        elif not isinstance(matcher, re.Pattern):
            raise ReplacementRuleError(
                f"Replacement matcher must be a string or compiled pattern, got {type(matcher).__name__}"
            )
        if not isinstance(replacement, Mapping):
            raise ReplacementRuleError(
                f"Replacement for '{_describe(matcher)}' must be a mapping, got {type(replacement).__name__}"
            )
        for target in replacement:
            if not isinstance(target, str) or not target:
                raise ReplacementRuleError(
                    f"Replacement target {target!r} for '{_describe(matcher)}' must be a non-empty dotted path"
                )
            try:
                split_path(target)
            except ValueError as e:
                raise ReplacementRuleError(f"Replacement for '{_describe(matcher)}': {e}") from e


def combine_rules(registered: RuleSet, per_call: Optional[RuleSet] = None) -> Dict[Matcher, Mapping[str, Any]]:
    """Combine registered rules with per-call rules for a single validation.

    Per-call matchers come first, so they win when both tiers match the same
    path. A matcher present in both tiers gets the registered subtree with the
    per-call subtree merged over it. Neither input is modified.
    """
    if not per_call:
        return dict(registered)
    validate_rules(per_call)

    combined: Dict[Matcher, Mapping[str, Any]] = {}
    for matcher, replacement in per_call.items():
        combined[matcher] = deep_merge(deep_copy_tree(registered.get(matcher, {})), replacement)
    for matcher, replacement in registered.items():
        if matcher not in combined:
            combined[matcher] = replacement
    return combined


def matches(matcher: Matcher, final_path: str) -> bool:
    if isinstance(matcher, re.Pattern):
        return matcher.search(final_path) is not None
    return final_path.endswith(matcher)


def apply_replacements(
    errors: MutableMapping[str, Any],
    rules: RuleSet,
    current_path: Optional[List[str]] = None,
) -> MutableMapping[str, Any]:
    """Apply ``rules`` to ``errors`` in place and return it.

    Every key present before the call is visited once. Replacement content is
    written after the traversal and is never matched against the rules.
    """
    if not rules or not isinstance(errors, MutableMapping):
        return errors

    pending: List[Tuple[str, Any]] = []
    _replace_node(errors, rules, list(current_path or []), pending)
    for path, value in pending:
        deep_set(errors, path, value)
    return errors


def _replace_node(
    node: MutableMapping[str, Any],
    rules: RuleSet,
    current_path: List[str],
    pending: List[Tuple[str, Any]],
) -> None:
    for key in list(node):
        final_path = join_path(current_path + [key])
        rule = _first_match(rules, final_path)
        if rule is not None:
            matcher, replacement = rule
            logger.debug(f"Replacing error at '{final_path}' (rule '{_describe(matcher)}')")
            del node[key]
            pending.extend(
                (path, deep_copy_tree(value) if isinstance(value, Mapping) else value)
                for path, value in replacement.items()
            )
            continue

        value = node[key]
        if isinstance(value, MutableMapping):
            current_path.append(str(key))
            _replace_node(value, rules, current_path, pending)
            current_path.pop()


def _first_match(rules: RuleSet, final_path: str) -> Optional[Tuple[Matcher, Mapping[str, Any]]]:
    for matcher, replacement in rules.items():
        if matches(matcher, final_path):
            return matcher, replacement
    return None


def _describe(matcher: Matcher) -> str:
    return matcher.pattern if isinstance(matcher, re.Pattern) else matcher
