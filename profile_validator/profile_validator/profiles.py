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

"""Validation profiles and the registry that names them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .exceptions import ProfileConfigurationError, ProfileNotFoundError
from .replacements import Matcher, RuleSet, validate_rules
from .schema_engine import SchemaEngine
from .utils.tree_utils import deep_copy_tree, deep_merge

logger = logging.getLogger(__name__)

# validate(context, data, errors); may return an awaitable.
ValidationFunction = Callable[..., Any]


@dataclass(frozen=True)
class SchemaOnlyProfile:
    schema: Any


@dataclass(frozen=True)
class ValidatedProfile:
    schema: Any
    validate: ValidationFunction


Profile = Union[SchemaOnlyProfile, ValidatedProfile]


def make_profile(schema: Any, validate: Optional[ValidationFunction] = None) -> Profile:
    """Build the profile variant matching the presence of ``validate``."""
    if schema is None:
        raise ProfileConfigurationError("Validation profile requires a 'schema'")
    if validate is None:
        return SchemaOnlyProfile(schema=schema)
    if not callable(validate):
        raise ProfileConfigurationError(
            f"Profile 'validate' must be callable, got {type(validate).__name__}"
        )
    return ValidatedProfile(schema=schema, validate=validate)


def as_profile(value: Any) -> Profile:
    """Accept a profile variant or a ``{"schema": ..., "validate": ...}`` mapping."""
    if isinstance(value, (SchemaOnlyProfile, ValidatedProfile)):
        return value
    if isinstance(value, Mapping):
        unknown = set(value) - {"schema", "validate"}
        if unknown:
            raise ProfileConfigurationError(f"Unknown profile field(s): {sorted(unknown)}")
        return make_profile(value.get("schema"), value.get("validate"))
    raise ProfileConfigurationError(
        f"Expected a validation profile or mapping, got {type(value).__name__}"
    )


class ProfileRegistry:
    """Named validation profiles plus the registered replacement rules.

    Registries are plain objects: build one at startup, register profiles and
    rules, then hand it to :class:`~profile_validator.validator.Validator`.
    Registration is not synchronized.
    """

    def __init__(self, engine: Optional[SchemaEngine] = None):
        self.engine = engine or SchemaEngine(check_required=True)
        # Required-field checking is always on.
        self.engine.check_required = True
        self._profiles: Dict[str, Profile] = {}
        self._replacements: Dict[Matcher, Dict[str, Any]] = {}

    def register_profile(self, name: str, profile: Any) -> None:
        """Register ``profile`` under ``name``; an existing name is overwritten.

        Raises:
            ProfileConfigurationError: For an empty name or malformed profile.
            SchemaRegistrationError: If the schema engine rejects the schema.
        """
        if not isinstance(name, str) or not name:
            raise ProfileConfigurationError(f"Profile name must be a non-empty string, got: {name!r}")
        profile = as_profile(profile)

        self.engine.add_schema(name, profile.schema)
        if name in self._profiles:
            logger.warning(f"Overwriting validation profile '{name}'")
        self._profiles[name] = profile
        logger.debug(
            f"Registered profile '{name}' "
            f"({'with' if isinstance(profile, ValidatedProfile) else 'without'} validation function)"
        )

    def unregister_profile(self, name: str) -> None:
        if name not in self._profiles:
            raise ProfileNotFoundError(self._not_found_message(name))
        del self._profiles[name]
        self.engine.remove_schema(name)

    def has_validation_function(self, name: str) -> bool:
        """True iff a custom validation function is registered under ``name``."""
        return isinstance(self._profiles.get(name), ValidatedProfile)

    def has_profile(self, name: str) -> bool:
        """True iff any profile, schema-only included, is registered under ``name``."""
        return name in self._profiles

    def get_profile(self, name: str) -> Profile:
        try:
            return self._profiles[name]
        except KeyError:
            raise ProfileNotFoundError(self._not_found_message(name)) from None

    def profile_names(self) -> List[str]:
        return list(self._profiles)

    def add_replacements(self, rules: RuleSet) -> None:
        """Merge ``rules`` into the registered replacement rules.

        Raises:
            ReplacementRuleError: If ``rules`` is malformed.
        """
        validate_rules(rules)
        deep_merge(self._replacements, rules)
        logger.debug(f"Registered {len(rules)} replacement rule(s); {len(self._replacements)} in total")

    @property
    def replacements(self) -> Dict[Matcher, Dict[str, Any]]:
        return deep_copy_tree(self._replacements)

    def _not_found_message(self, name: str) -> str:
        return f"Validation profile '{name}' not found. Available profiles: {sorted(self._profiles)}"
