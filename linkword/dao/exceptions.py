"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortLinkNotFoundError:
        Raised when a keyword has no short link in the data store.

    ShortLinkAlreadyExistsError:
        Raised when attempting to insert a keyword that already exists.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from linkword.dao.exceptions import ShortLinkNotFoundError
    >>> raise ShortLinkNotFoundError("Short link with keyword 'sample' not found.")
    Traceback (most recent call last):
        ...
    linkword.dao.exceptions.ShortLinkNotFoundError: Short link with keyword 'sample' not found.
"""

from linkword.exceptions import LinkwordError


class DAOError(LinkwordError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortLinkNotFoundError(DAOError):
    """Exception raised when a keyword has no short link in the data store."""

    error_code = 'dao:short_link_not_found_error'


class ShortLinkAlreadyExistsError(DAOError):
    """Exception raised when attempting to insert a keyword that already exists in the data store."""

    error_code = 'dao:short_link_already_exists_error'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    error_code = 'dao:data_store_error'
