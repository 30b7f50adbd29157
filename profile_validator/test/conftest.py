"""Shared fixtures for profile validator tests."""

import logging

import pytest

from profile_validator.profiles import ProfileRegistry
from profile_validator.utils.logging_utils import PACKAGE_LOGGER
from profile_validator.validator import Validator

USER_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 2, "maxLength": 10},
        "tags": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 1,
            "uniqueItems": True,
        },
        "address": {
            "type": "object",
            "properties": {"city": {"type": "string", "minLength": 2}},
            "required": ["city"],
        },
        "role": {"enum": ["admin", "user"]},
    },
    "required": ["name"],
}

OPTIONAL_SCHEMA = {
    "type": "object",
    "properties": {"nickname": {"type": "string"}},
}


@pytest.fixture(autouse=True)
def reset_package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def registry():
    return ProfileRegistry()


@pytest.fixture
def validator(registry):
    return Validator(registry)


@pytest.fixture
def user_registry(registry):
    registry.register_profile("user", {"schema": USER_SCHEMA})
    return registry


class Recorder:
    """Callback that records every call it receives."""

    def __init__(self):
        self.calls = []

    def __call__(self, errors, data):
        self.calls.append((errors, data))

    @property
    def errors(self):
        assert len(self.calls) == 1, f"expected one callback, got {len(self.calls)}"
        return self.calls[0][0]


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def user_schema():
    return USER_SCHEMA


@pytest.fixture
def optional_schema():
    return OPTIONAL_SCHEMA
