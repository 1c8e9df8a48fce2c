from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ShortLinkModel:
    """Represent a keyword to URL mapping.

    Attributes:
        keyword (str):
            The unique keyword identifying the short link (1-15 lowercase letters).
        target (str):
            The original long URL that the keyword redirects to.
        created_at (Optional[datetime]):
            Time the mapping was persisted. Set by the data store on insert,
            None for links which haven't been stored yet.

    Example:
        >>> link = ShortLinkModel(keyword='sample', target='https://example.com')
        >>> link.keyword
        'sample'
        >>> link.target
        'https://example.com'
        >>> link.created_at is None
        True
    """
    keyword: str
    target: str
    created_at: Optional[datetime] = None
