from datetime import datetime, UTC

import pytest

from linkword.models import ShortLinkModel
from linkword.dao.base import ShortLinkBaseDAO
from linkword.dao.exceptions import ShortLinkAlreadyExistsError, ShortLinkNotFoundError
from linkword.utils.constants import APP_ENV_ENV, AWS_SAM_LOCAL_ENV


class InMemoryShortLinkDAO(ShortLinkBaseDAO):
    """Dictionary-backed keyword store for pipeline and handler tests."""

    def __init__(self):
        self.links: dict[str, ShortLinkModel] = {}
        self.initialized = False

    def initialize(self, **kwargs) -> 'InMemoryShortLinkDAO':
        self.initialized = True
        return self

    def insert(self, short_link: ShortLinkModel, **kwargs) -> 'InMemoryShortLinkDAO':
        if short_link.keyword in self.links:
            raise ShortLinkAlreadyExistsError(f"Short link with keyword '{short_link.keyword}' already exists.")
        self.links[short_link.keyword] = ShortLinkModel(
            keyword=short_link.keyword,
            target=short_link.target,
            created_at=datetime.now(UTC),
        )
        return self

    def get(self, keyword: str, **kwargs) -> ShortLinkModel:
        try:
            return self.links[keyword]
        except KeyError:
            raise ShortLinkNotFoundError(f"Short link with keyword '{keyword}' not found.") from None

    def delete(self, keyword: str, **kwargs) -> 'InMemoryShortLinkDAO':
        if self.links.pop(keyword, None) is None:
            raise ShortLinkNotFoundError(f"Short link with keyword '{keyword}' not found.")
        return self


@pytest.fixture(autouse=True)
def _not_running_locally(monkeypatch):
    """Handlers must answer with 500s instead of re-raising, as they do in AWS."""
    monkeypatch.setenv(APP_ENV_ENV, 'test')
    monkeypatch.delenv(AWS_SAM_LOCAL_ENV, raising=False)


@pytest.fixture
def store() -> InMemoryShortLinkDAO:
    return InMemoryShortLinkDAO()
