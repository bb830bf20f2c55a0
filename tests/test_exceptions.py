"""Tests for the exception hierarchy."""

import pytest
from dataknobs_common import (
    ConfigurationError as BaseConfigurationError,
    DataknobsError,
    NotFoundError,
    OperationError,
)

from dataknobs_canon.exceptions import (
    CanonError,
    CollisionError,
    ConfigurationError,
    InvalidDefinitionError,
    InvalidNameError,
    InvalidRecordError,
    NotRegisteredError,
    TransformError,
)


class TestCanonError:
    """Test the base exception."""

    def test_message_and_context(self):
        """Test message and context are kept."""
        error = CanonError("Registration failed", context={"name": "num"})

        assert str(error) == "Registration failed"
        assert error.context == {"name": "num"}
        assert error.details is error.context

    def test_details_take_precedence(self):
        """Test details win over context."""
        error = CanonError("x", context={"a": 1}, details={"b": 2})
        assert error.context == {"b": 2}

    def test_default_context(self):
        """Test context defaults to an empty dict."""
        assert CanonError("x").context == {}


class TestHierarchy:
    """Test the builtin bases of configuration errors."""

    @pytest.mark.parametrize(
        "error_class, builtin",
        [
            (InvalidNameError, ValueError),
            (InvalidDefinitionError, TypeError),
            (NotRegisteredError, LookupError),
            (InvalidRecordError, TypeError),
        ],
    )
    def test_builtin_bases(self, error_class, builtin):
        """Test configuration errors can be caught as builtin errors."""
        with pytest.raises(builtin):
            raise error_class("boom")

    @pytest.mark.parametrize(
        "error_class",
        [InvalidNameError, InvalidDefinitionError, CollisionError, NotRegisteredError, InvalidRecordError],
    )
    def test_configuration_errors(self, error_class):
        """Test every registration error is a ConfigurationError."""
        assert issubclass(error_class, ConfigurationError)
        assert issubclass(error_class, CanonError)

    def test_transform_error_is_not_configuration_error(self):
        """Test transform errors form their own family."""
        assert not issubclass(TransformError, ConfigurationError)


class TestTransformError:
    """Test TransformError."""

    def test_stage_in_context(self):
        """Test the failing stage is recorded."""
        error = TransformError("failed", stage="pre_transform", context={"key": "a"})

        assert error.stage == "pre_transform"
        assert error.context == {"stage": "pre_transform", "key": "a"}


class TestCommonHierarchy:
    """Test the dataknobs_common bases."""

    def test_canon_error_is_dataknobs_error(self):
        """Test every canon error is a DataknobsError."""
        assert issubclass(CanonError, DataknobsError)
        assert issubclass(TransformError, DataknobsError)

    @pytest.mark.parametrize(
        "error_class, common_base",
        [
            (ConfigurationError, BaseConfigurationError),
            (CollisionError, OperationError),
            (NotRegisteredError, NotFoundError),
        ],
    )
    def test_common_bases(self, error_class, common_base):
        """Test errors can be caught with the shared dataknobs exceptions."""
        with pytest.raises(common_base) as exc_info:
            raise error_class("boom", context={"name": "num"})

        assert exc_info.value.context == {"name": "num"}
