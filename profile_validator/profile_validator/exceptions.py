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

"""Custom exceptions for the profile validator.

Validation outcomes are never raised: they are delivered as error trees.
These exceptions cover configuration and programming errors only.
"""


class ProfileValidatorError(Exception):
    """Base exception for profile-validator related errors."""
    pass


class ConfigurationError(ProfileValidatorError):
    """Exception raised for invalid registry or call configuration."""
    pass


class ProfileConfigurationError(ConfigurationError):
    """Exception raised for malformed validation profiles."""
    pass


class ProfileNotFoundError(ConfigurationError):
    """Exception raised when a profile name is not registered."""
    pass


class ReplacementRuleError(ConfigurationError):
    """Exception raised for malformed replacement rule sets."""
    pass


class SchemaRegistrationError(ConfigurationError):
    """Exception raised when the schema engine rejects a schema."""
    pass


class ProfileFileError(ProfileValidatorError):
    """Exception raised when a profile configuration file cannot be loaded."""
    pass
