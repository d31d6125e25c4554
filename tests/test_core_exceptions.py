"""Tests for exception hierarchy.

Validates that all custom exceptions inherit correctly and that
catching base exceptions properly catches all children.
"""

import pytest

from splist.core.exceptions import ConfigurationError, ExternalServiceError, SPListError
from splist.sharepoint.exceptions import SharePointError


class TestExceptionHierarchy:
    """Tests for exception class hierarchy."""

    def test_splist_error_is_base(self):
        """SPListError is the base exception class."""
        assert issubclass(SPListError, Exception)

    def test_external_service_error_inherits_from_base(self):
        assert issubclass(ExternalServiceError, SPListError)

    def test_configuration_error_inherits_from_base(self):
        assert issubclass(ConfigurationError, SPListError)
        assert not issubclass(ConfigurationError, ExternalServiceError)

    def test_sharepoint_error_is_external_service(self):
        """SharePointError inherits from ExternalServiceError."""
        assert issubclass(SharePointError, ExternalServiceError)


class TestExceptionCatching:
    """Tests that base clauses catch children."""

    def test_catch_configuration_as_base(self):
        with pytest.raises(SPListError):
            raise ConfigurationError("missing web url")

    def test_catch_sharepoint_as_external(self):
        with pytest.raises(ExternalServiceError):
            raise SharePointError("boom")

    def test_message_preserved(self):
        error = ConfigurationError("SharePoint web URL is required")
        assert str(error) == "SharePoint web URL is required"
