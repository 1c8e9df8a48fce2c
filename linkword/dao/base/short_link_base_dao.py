"""Abstract base class for ShortLink data access objects (DAOs).

This class establishes a consistent contract for all keyword store
implementations, regardless of the underlying storage mechanism
(e.g., Redis, DynamoDB, PostgreSQL).

Responsibilities:
    - Provide an interface for creating, retrieving and deleting ShortLinkModel objects.
    - Guarantee keyword uniqueness at the storage boundary.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkword.models import ShortLinkModel
        >>> from linkword.dao.redis import ShortLinkRedisDAO

        >>> dao = ShortLinkRedisDAO(...).initialize()
        >>> dao.insert(ShortLinkModel(keyword='sample', target='https://example.com'))

        >>> dao.get('sample').target
        'https://example.com'

        >>> dao.delete('sample')
"""

from abc import ABC, abstractmethod

from linkword.models import ShortLinkModel


class ShortLinkBaseDAO(ABC):
    """Interface for ShortLink data access objects (DAOs).

    Methods:
        initialize(**kwargs) -> ShortLinkBaseDAO:
            Idempotently prepare the data store for short links.

        insert(short_link: ShortLinkModel, **kwargs) -> ShortLinkBaseDAO:
            Insert a new ShortLinkModel into the data store.
            Raises ShortLinkAlreadyExistsError if the keyword already exists.

        get(keyword: str, **kwargs) -> ShortLinkModel:
            Retrieve a ShortLinkModel by keyword.
            Raises ShortLinkNotFoundError if the entry does not exist.

        delete(keyword: str, **kwargs) -> ShortLinkBaseDAO:
            Remove a ShortLinkModel by keyword.
            Raises ShortLinkNotFoundError if nothing was removed.

    All methods raise DataStoreError on connection, read or write failure.

    NOTE:
        - Keywords are immutable once stored. There is no update operation;
          a mapping can only be replaced by deleting it first.
    """

    @abstractmethod
    def initialize(self, **kwargs) -> 'ShortLinkBaseDAO':
        """Ensure the data store is ready to hold short links.

        Safe to call on every process start.

        Returns:
            ShortLinkBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def insert(self, short_link: ShortLinkModel, **kwargs) -> 'ShortLinkBaseDAO':
        """Insert a new ShortLinkModel into the data store.

        Args:
            short_link (ShortLinkModel):
                The ShortLinkModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkBaseDAO: self (for method chaining)

        Raises:
            ShortLinkAlreadyExistsError:
                If a ShortLinkModel with the same keyword already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, keyword: str, **kwargs) -> ShortLinkModel:
        """Retrieve a ShortLinkModel from the data store by its keyword.

        Raises:
            ShortLinkNotFoundError:
                If no ShortLinkModel with the given keyword exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, keyword: str, **kwargs) -> 'ShortLinkBaseDAO':
        """Delete a ShortLinkModel from the data store by its keyword.

        Raises:
            ShortLinkNotFoundError:
                If no ShortLinkModel with the given keyword exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
