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

"""JSON Schema engine adapter.

Wraps :mod:`jsonschema` and reports failures as a raw error tree::

    {"validation": {"schema": {"name": {"minLength": True},
                               "address": {"schema": {"city": {"required": True}}}}}}

Every path segment nests under a ``schema`` bucket of its parent, the root
included, and the failing keyword is set to ``True`` on the innermost node.
Errors on the instance itself are set on the root.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from jsonschema import FormatChecker
from jsonschema.exceptions import SchemaError, ValidationError
from jsonschema.validators import Draft202012Validator, validator_for
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012

from .exceptions import ProfileNotFoundError, SchemaRegistrationError
from .normalizer import SCHEMA_BUCKET

logger = logging.getLogger(__name__)

RawErrors = Dict[str, Any]


class SchemaEngine:
    """Named-schema store and validator built on jsonschema.

    Args:
        check_required: Report ``required`` violations. Profile registries
            always construct the engine with this enabled.
        default_specification: Dialect used for schemas without ``$schema``.
    """

    def __init__(self, check_required: bool = True, default_specification=DRAFT202012):
        self.check_required = check_required
        self.default_specification = default_specification
        self._schemas: Dict[str, Any] = {}
        self._registry: Registry = Registry()

    def add_schema(self, name: str, schema: Any) -> None:
        """Check ``schema`` and store it under ``name``.

        Registered schemas can reference each other with ``{"$ref": "<name>"}``.

        Raises:
            SchemaRegistrationError: If jsonschema rejects the schema.
        """
        self._check_schema(schema, name)
        resource = Resource.from_contents(schema, default_specification=self.default_specification)
        self._registry = self._registry.with_resource(uri=name, resource=resource)
        self._schemas[name] = schema
        logger.debug(f"Registered schema '{name}'")

    def has_schema(self, name: str) -> bool:
        return name in self._schemas

    def get_schema(self, name: str) -> Any:
        if name not in self._schemas:
            raise ProfileNotFoundError(
                f"Schema '{name}' is not registered. Available schemas: {sorted(self._schemas)}"
            )
        return self._schemas[name]

    def remove_schema(self, name: str) -> None:
        # referencing registries are immutable; rebuild without the entry.
        self._schemas.pop(name, None)
        self._registry = Registry().with_resources(
            (key, Resource.from_contents(value, default_specification=self.default_specification))
            for key, value in self._schemas.items()
        )

    def validate(
        self,
        schema: Any,
        data: Any,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Dict[str, RawErrors]]:
        """Validate ``data`` against a schema value or a registered schema name.

        Returns:
            ``None`` when ``data`` is valid, otherwise ``{"validation": raw_errors}``.
        """
        options = options or {}
        if isinstance(schema, str):
            schema = self.get_schema(schema)
        else:
            self._check_schema(schema, "<inline>")

        validator = self._build_validator(schema, options)
        raw: RawErrors = {}
        count = 0
        for error in validator.iter_errors(data):
            for path, code in self._error_locations(error):
                _insert(raw, path, code)
                count += 1

        if not raw:
            return None
        logger.debug(f"Schema validation reported {count} error(s)")
        return {"validation": raw}

    def _check_schema(self, schema: Any, name: str) -> None:
        cls = validator_for(schema, default=Draft202012Validator)
        try:
            cls.check_schema(schema)
        except SchemaError as e:
            raise SchemaRegistrationError(f"Invalid schema '{name}': {e.message}") from e

    def _build_validator(self, schema: Any, options: Mapping[str, Any]):
        cls = validator_for(schema, default=Draft202012Validator)
        format_checker = FormatChecker() if options.get("check_formats") else None
        return cls(schema, registry=self._registry, format_checker=format_checker)

    def _error_locations(self, error: ValidationError) -> Iterable[tuple]:
        path: List[Any] = list(error.absolute_path)
        if error.validator != "required":
            return [(path, error.validator)]
        if not self.check_required:
            return []
        instance = error.instance if isinstance(error.instance, Mapping) else {}
        missing = [prop for prop in error.validator_value if prop not in instance]
        return [(path + [prop], "required") for prop in missing]


def _insert(raw: RawErrors, path: Sequence[Any], code: str) -> None:
    node = raw
    for segment in path:
        node = node.setdefault(SCHEMA_BUCKET, {}).setdefault(str(segment), {})
    node[code] = True
