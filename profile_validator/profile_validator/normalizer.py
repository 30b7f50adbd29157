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

"""Normalization of raw schema-engine error trees.

The schema engine reports nested failures under a ``schema`` bucket and uses
JSON Schema keyword names as error codes. Normalization flattens the buckets
into a path-addressable tree and maps the keywords onto the user-facing
vocabulary (``invalid``, ``wrongCount``, ``duplicate``, ``tooShort``,
``tooLong``).
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, MutableMapping, Optional

from .utils.tree_utils import deep_merge

SCHEMA_BUCKET = "schema"

# Raw engine keyword -> user-facing error code.
CODE_MAP: Dict[str, str] = {
    "minItems": "wrongCount",
    "maxItems": "wrongCount",
    "type": "invalid",
    "enum": "invalid",
    "uniqueItems": "duplicate",
    "minLength": "tooShort",
    "maxLength": "tooLong",
}

_INDEX_KEY_RE = re.compile(r"^[0-9]+")


def _is_index_key(key: Any) -> bool:
    return bool(_INDEX_KEY_RE.match(str(key)))


class Normalizer:
    """Rewrites a raw error tree in place.

    Args:
        code_map: Raw code to user-facing code table. An empty table gives the
            generic policy, which only flattens ``schema`` buckets.
    """

    def __init__(self, code_map: Optional[Mapping[str, str]] = None):
        self.code_map: Dict[str, str] = dict(code_map or {})

    def normalize(self, errors: Any) -> Any:
        if not isinstance(errors, MutableMapping):
            return errors

        if SCHEMA_BUCKET in errors:
            bucket = errors.pop(SCHEMA_BUCKET)
            if isinstance(bucket, Mapping) and not all(_is_index_key(key) for key in bucket):
                deep_merge(errors, bucket)
            else:
                # Only item indices below this field: the field as a whole is invalid.
                errors["invalid"] = True

        for key in list(errors):
            value = errors[key]
            mapped = self.code_map.get(key)
            if mapped is not None and not isinstance(value, Mapping):
                del errors[key]
                errors[mapped] = True
                continue
            errors[key] = self.normalize(value)

        return errors


GENERIC = Normalizer()
CODED = Normalizer(CODE_MAP)


def normalize(errors: Any) -> Dict[str, Any]:
    """Normalize a raw error tree with the coded policy.

    ``None`` normalizes to an empty tree.
    """
    if errors is None:
        return {}
    return CODED.normalize(errors)
