"""Core library exception classes.

All splist errors inherit from SPListError, so callers can catch every
library failure with a single except clause.

Exception Hierarchy:
    SPListError (base)
    +-- ExternalServiceError (remote API failures)
    |   +-- SharePointError (defined in splist.sharepoint.exceptions)
    +-- ConfigurationError (missing/invalid configuration)
"""


class SPListError(Exception):
    """Base exception for all splist errors.

    Example:
        try:
            await service.documents.set("JSON-Settings", prefs)
        except SPListError as e:
            logger.error("preferences_save_failed", error=str(e), exc_info=True)
    """

    pass


class ExternalServiceError(SPListError):
    """Base exception for failures talking to a remote service.

    Subclasses exist per backend so callers can target them.
    """

    pass


class ConfigurationError(SPListError):
    """Exception for missing or invalid configuration.

    Raised when the client cannot be wired up, such as when no
    SharePoint web URL can be resolved from arguments or settings.
    """

    pass
