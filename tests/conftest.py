"""Pytest configuration for dataknobs_canon tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_canon.options import DEFAULT_OPTIONS, resolve_options  # noqa: E402
from dataknobs_canon.validator import Validator, create_shared_registry  # noqa: E402


@pytest.fixture
def shared_registry():
    """A fresh root registry with the built-ins, isolated from SHARED_REGISTRY."""
    return create_shared_registry("test-shared")


@pytest.fixture
def validator_class(shared_registry):
    """A Validator subclass whose shared registrations stay inside the test."""

    class IsolatedValidator(Validator):
        pass

    IsolatedValidator.shared_registry = shared_registry
    IsolatedValidator.default_options = shared_registry.default_options
    return IsolatedValidator


@pytest.fixture
def resolved():
    """Build resolved options the way the facade does, from the engine defaults."""

    def _resolved(**overrides):
        return resolve_options(DEFAULT_OPTIONS, None, overrides)

    return _resolved
