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

"""Validation orchestration.

A validation call runs the schema engine, normalizes the raw errors, applies
replacement rules and finally hands the error tree to the profile's custom
validation function, if any::

    registry = ProfileRegistry()
    registry.register_profile("user", {"schema": USER_SCHEMA, "validate": check_user})
    validator = Validator(registry)

    validator.validate("user", payload, on_result)
    result = await validator.validate_async("user", payload)

Custom validation functions are called as ``validate(context, data, errors)``
and must call ``context.done()`` once they are finished, either before
returning or later from asynchronous work. There is no timeout: a function
that never calls ``done()`` leaves the call pending.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Callable, Dict, Mapping, MutableMapping, NamedTuple, Optional, Set, Tuple

from .exceptions import ProfileConfigurationError
from .normalizer import normalize
from .profiles import Profile, ProfileRegistry, ValidatedProfile, as_profile
from .replacements import apply_replacements, combine_rules
from .utils.tree_utils import PathLike, deep_get, deep_has, deep_set, split_path

logger = logging.getLogger(__name__)

ErrorTree = Dict[str, Any]
Callback = Callable[[Optional[ErrorTree], Any], Any]


class ValidationState(str, Enum):
    SCHEMA_VALIDATING = "schema_validating"
    NORMALIZING = "normalizing"
    REPLACING = "replacing"
    AWAITING_CUSTOM = "awaiting_custom"
    DONE = "done"


class ValidationResult(NamedTuple):
    errors: Optional[ErrorTree]
    data: Any

    @property
    def is_valid(self) -> bool:
        return self.errors is None


def collapse(errors: ErrorTree) -> Optional[ErrorTree]:
    """Return ``None`` for an empty error tree, the tree itself otherwise."""
    return errors if errors else None


class ValidationContext:
    """Mutable state handed to a custom validation function."""

    def __init__(
        self,
        errors: ErrorTree,
        data: Any,
        options: Mapping[str, Any],
        callback: Callback,
        profile_name: Optional[str] = None,
    ):
        self.errors = errors
        self.data = data
        self.options = options
        self.profile_name = profile_name
        self.state = ValidationState.AWAITING_CUSTOM
        self._callback = callback
        self._task: Optional[asyncio.Future] = None

    def add_error(self, path: PathLike, error: Mapping[str, Any]) -> None:
        """Report ``error`` at ``path``.

        An existing error node at ``path`` is updated with the keys of
        ``error``; schema errors already reported there are kept.
        """
        if not split_path(path):
            raise ValueError("Cannot add an error at an empty path")
        existing = deep_get(self.errors, path)
        if deep_has(self.errors, path) and isinstance(existing, MutableMapping):
            existing.update(error)
            return
        deep_set(self.errors, path, dict(error))

    def done(self) -> None:
        self.state = ValidationState.DONE
        logger.debug(f"Custom validation finished for profile '{self.profile_name or '<inline>'}'")
        self._callback(collapse(self.errors), self.data)


class Validator:
    """Runs validation profiles from a :class:`ProfileRegistry`."""

    def __init__(self, registry: Optional[ProfileRegistry] = None):
        self.registry = registry if registry is not None else ProfileRegistry()
        # Scheduled validation functions; the event loop only holds weak references.
        self._pending: Set[asyncio.Future] = set()

    @property
    def pending_tasks(self) -> int:
        return len(self._pending)

    def validate(
        self,
        profile: Any,
        data: Any,
        callback: Callback,
        options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Validate ``data`` and deliver ``(errors_or_None, data)`` to ``callback``.

        Args:
            profile: Registered profile name, profile variant or
                ``{"schema": ..., "validate": ...}`` mapping.
            data: Data to validate.
            callback: Completion callback. Called immediately for profiles
                without a validation function, otherwise on ``context.done()``.
            options: Passed to the schema engine and the validation function.
                ``options["replacements"]`` adds replacement rules for this call.

        Raises:
            ProfileNotFoundError: If ``profile`` names an unregistered profile.
            ProfileConfigurationError: If ``profile`` is malformed, or an
                asynchronous validation function is used without a running loop.
            ReplacementRuleError: If ``options["replacements"]`` is malformed.
        """
        self._run(profile, data, callback, options)

    async def validate_async(
        self,
        profile: Any,
        data: Any,
        options: Optional[Mapping[str, Any]] = None,
    ) -> ValidationResult:
        """Awaitable form of :meth:`validate`.

        Resolves once the validation function calls ``context.done()``; later
        calls are ignored. Exceptions raised by an asynchronous validation
        function are re-raised here. Wrap the call in ``asyncio.wait_for`` to
        bound how long a validation function may take.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def _deliver(errors: Optional[ErrorTree], result_data: Any) -> None:
            if not future.done():
                future.set_result(ValidationResult(errors, result_data))

        def _propagate(task: asyncio.Future) -> None:
            if task.cancelled() or future.done():
                return
            exc = task.exception()
            if exc is not None:
                future.set_exception(exc)

        context = self._run(profile, data, _deliver, options)
        if context is not None and context._task is not None:
            context._task.add_done_callback(_propagate)
        return await future

    def _run(
        self,
        profile: Any,
        data: Any,
        callback: Callback,
        options: Optional[Mapping[str, Any]],
    ) -> Optional[ValidationContext]:
        options = options if options is not None else {}
        name, resolved = self._resolve(profile)
        label = name or "<inline>"

        logger.debug(f"[{label}] {ValidationState.SCHEMA_VALIDATING.value}")
        raw = self.registry.engine.validate(name if name is not None else resolved.schema, data, options)

        errors: ErrorTree = {}
        if raw:
            logger.debug(f"[{label}] {ValidationState.NORMALIZING.value}")
            errors = normalize(raw.get("validation"))
            logger.debug(f"[{label}] {ValidationState.REPLACING.value}")
            rules = combine_rules(self.registry.replacements, options.get("replacements"))
            apply_replacements(errors, rules)

        if not isinstance(resolved, ValidatedProfile):
            logger.debug(f"[{label}] {ValidationState.DONE.value}")
            callback(collapse(errors), data)
            return None

        logger.debug(f"[{label}] {ValidationState.AWAITING_CUSTOM.value}")
        context = ValidationContext(errors, data, options, callback, profile_name=name)
        outcome = resolved.validate(context, data, errors)
        if inspect.isawaitable(outcome):
            context._task = self._schedule(outcome, label)
        return context

    def _resolve(self, profile: Any) -> Tuple[Optional[str], Profile]:
        if isinstance(profile, str):
            return profile, self.registry.get_profile(profile)
        return None, as_profile(profile)

    def _schedule(self, awaitable, label: str) -> asyncio.Future:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise ProfileConfigurationError(
                f"Asynchronous validation function for '{label}' requires a running event loop; "
                "use Validator.validate_async()"
            ) from None

        task = asyncio.ensure_future(awaitable)

        def _log_failure(finished: asyncio.Future) -> None:
            if not finished.cancelled() and finished.exception() is not None:
                logger.error(f"Validation function for '{label}' failed: {finished.exception()!r}")

        task.add_done_callback(_log_failure)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task
