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

"""Loading of profiles and replacement rules from YAML or JSON files.

Example configuration::

    profiles:
      user:
        schema: {type: object, required: [name]}
        validate: my_app.validation.check_user
      address:
        schema_file: schemas/address.json
    replacements:
      city: {cityError: true}
      "re:^items\\.\\d+$": {items: {invalid: true}}

``schema_file`` paths are relative to the configuration file. Replacement
keys starting with ``re:`` are compiled as regular expressions.
"""

import importlib
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ..exceptions import ProfileConfigurationError, ProfileFileError, ReplacementRuleError
from ..profiles import ProfileRegistry, make_profile

logger = logging.getLogger(__name__)

REGEX_PREFIX = "re:"
_JSON_SUFFIXES = (".json",)


def load_document(file_path: Union[str, Path], kind: str = "Configuration") -> Any:
    """Load a YAML or JSON document; the format is chosen by file suffix.

    ``kind`` names the document in error messages.
    """
    path = Path(file_path)

    if not path.exists():
        raise ProfileFileError(f"{kind} file not found: {path}")

    if not path.is_file():
        raise ProfileFileError(f"Path is not a file: {path}")

    logger.debug(f"Loading {kind.lower()} file: {path}")
    content = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in _JSON_SUFFIXES:
            return json.loads(content)
        return yaml.safe_load(content)
    except json.JSONDecodeError as e:
        raise ProfileFileError(f"Invalid JSON in {path}: {e.msg} (line {e.lineno})") from e
    except yaml.YAMLError as e:
        raise ProfileFileError(f"Invalid YAML in {path}: {e}") from e


def load_config(file_path: Union[str, Path]) -> Dict[str, Any]:
    """Load a profile configuration file and check its top-level layout."""
    config = load_document(file_path)
    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise ProfileFileError(f"Configuration root must be a mapping: {file_path}")

    unknown = set(config) - {"profiles", "replacements"}
    if unknown:
        raise ProfileFileError(f"Unknown top-level field(s) {sorted(unknown)} in {file_path}")

    for section in ("profiles", "replacements"):
        if not isinstance(config.get(section, {}), dict):
            raise ProfileFileError(f"Field '{section}' must be a mapping in {file_path}")

    return config


def load_obj(obj_path: str) -> Any:
    """Import an object from a dotted path such as ``package.module.function``.

    ``package.module:function`` is accepted as well.
    """
    if ":" in obj_path:
        module_path, obj_name = obj_path.split(":", 1)
    else:
        module_path, _, obj_name = obj_path.rpartition(".")
    if not module_path or not obj_name:
        raise ProfileConfigurationError(f"Invalid object path '{obj_path}'")

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise ProfileConfigurationError(f"Cannot import module '{module_path}' for '{obj_path}': {e}") from e

    try:
        return getattr(module, obj_name)
    except AttributeError:
        raise ProfileConfigurationError(f"Module '{module_path}' has no attribute '{obj_name}'") from None


def parse_replacements(raw: Mapping[str, Any]) -> Dict[Any, Any]:
    """Turn configuration keys into matchers; ``re:`` keys become compiled patterns."""
    rules: Dict[Any, Any] = {}
    for key, replacement in raw.items():
        if isinstance(key, str) and key.startswith(REGEX_PREFIX):
            try:
                rules[re.compile(key[len(REGEX_PREFIX):])] = replacement
            except re.error as e:
                raise ReplacementRuleError(f"Invalid replacement pattern '{key}': {e}") from e
        else:
            rules[key] = replacement
    return rules


def _build_profile(name: str, entry: Any, base_dir: Path):
    if not isinstance(entry, dict):
        raise ProfileConfigurationError(f"Profile '{name}' must be a mapping")

    unknown = set(entry) - {"schema", "schema_file", "validate"}
    if unknown:
        raise ProfileConfigurationError(f"Unknown field(s) {sorted(unknown)} in profile '{name}'")

    if ("schema" in entry) == ("schema_file" in entry):
        raise ProfileConfigurationError(f"Profile '{name}' needs exactly one of 'schema' or 'schema_file'")

    schema = entry.get("schema")
    if "schema_file" in entry:
        schema = load_document(base_dir / entry["schema_file"])

    validate = entry.get("validate")
    if isinstance(validate, str):
        validate = load_obj(validate)

    return make_profile(schema, validate)


def load_registry(
    file_path: Union[str, Path],
    registry: Optional[ProfileRegistry] = None,
) -> ProfileRegistry:
    """Register every profile and replacement rule declared in ``file_path``.

    Args:
        file_path: YAML or JSON configuration file.
        registry: Registry to fill; a new one is created when omitted.

    Returns:
        The filled registry.
    """
    path = Path(file_path)
    config = load_config(path)
    registry = registry if registry is not None else ProfileRegistry()

    for name, entry in config.get("profiles", {}).items():
        try:
            registry.register_profile(str(name), _build_profile(str(name), entry, path.parent))
        except Exception as e:
            logger.error(f"Failed to register profile '{name}' from {path}: {e}")
            raise

    replacements = config.get("replacements")
    if replacements:
        registry.add_replacements(parse_replacements(replacements))

    logger.info(f"Loaded {len(config.get('profiles', {}))} profile(s) from {path}")
    return registry
