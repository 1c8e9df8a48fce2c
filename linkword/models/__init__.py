from linkword.models.short_link_model import ShortLinkModel
from linkword.models.page_metadata import (
    PageMetadata,
    FullMetadata,
    DegradedMetadata,
    RejectedFetch,
    ExtractionOutcome,
)


__all__ = [
    'ShortLinkModel',
    'PageMetadata',
    'FullMetadata',
    'DegradedMetadata',
    'RejectedFetch',
    'ExtractionOutcome',
]
