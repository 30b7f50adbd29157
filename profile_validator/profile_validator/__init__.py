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

"""Schema validation with normalized, replaceable error trees."""

from .exceptions import (
    ConfigurationError,
    ProfileConfigurationError,
    ProfileFileError,
    ProfileNotFoundError,
    ProfileValidatorError,
    ReplacementRuleError,
    SchemaRegistrationError,
)
from .normalizer import CODE_MAP, Normalizer, normalize
from .profiles import ProfileRegistry, SchemaOnlyProfile, ValidatedProfile, make_profile
from .replacements import apply_replacements, combine_rules
from .schema_engine import SchemaEngine
from .validator import ValidationContext, ValidationResult, ValidationState, Validator

__version__ = "0.1.0"

__all__ = [
    "CODE_MAP",
    "ConfigurationError",
    "Normalizer",
    "ProfileConfigurationError",
    "ProfileFileError",
    "ProfileNotFoundError",
    "ProfileRegistry",
    "ProfileValidatorError",
    "ReplacementRuleError",
    "SchemaEngine",
    "SchemaOnlyProfile",
    "SchemaRegistrationError",
    "ValidatedProfile",
    "ValidationContext",
    "ValidationResult",
    "ValidationState",
    "Validator",
    "apply_replacements",
    "combine_rules",
    "make_profile",
    "normalize",
]
