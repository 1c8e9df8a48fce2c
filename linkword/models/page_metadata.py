"""Page metadata and the possible outcomes of extracting it.

A metadata fetch ends in exactly one of three ways:

    FullMetadata     - the page was fetched and parsed
    DegradedMetadata - the page couldn't be reached; the title falls back to the URL
    RejectedFetch    - the page answered with a non-2xx status

Callers match on the outcome instead of inspecting exceptions:

    >>> match outcome:
    ...     case FullMetadata(metadata) | DegradedMetadata(metadata):
    ...         use(metadata)
    ...     case RejectedFetch(status_code):
    ...         fail(status_code)
"""

from dataclasses import dataclass


# fmt: off
@dataclass(frozen=True)
class PageMetadata:
    title: str             # <title>, first <h1>, or the URL itself
    description: str = ''  # <meta name="description"> or <meta property="og:description">
    keywords: str = ''     # <meta name="keywords">
    source_url: str = ''   # URL the metadata was extracted from
    # fmt: on

    @classmethod
    def from_url(cls, url: str) -> 'PageMetadata':
        """Build degraded metadata which only knows the page's URL."""
        return cls(title=url, source_url=url)


@dataclass(frozen=True)
class FullMetadata:
    metadata: PageMetadata


@dataclass(frozen=True)
class DegradedMetadata:
    metadata: PageMetadata


@dataclass(frozen=True)
class RejectedFetch:
    status_code: int


type ExtractionOutcome = FullMetadata | DegradedMetadata | RejectedFetch
