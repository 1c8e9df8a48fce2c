"""Shortening pipeline

Turns a URL into a stored keyword:

    VALIDATING -> EXTRACTING -> GENERATING -> STORING -> DONE
                  (any failure)                       -> FAILED

No state survives a call, and nothing is written before STORING succeeds,
so a failed run needs no rollback.

Classes:
    Stage:
        Pipeline states, used in logs and error annotations.
    ShorteningPipeline:
        shorten(url) -> keyword and resolve(keyword) -> url.

Example:
    >>> pipeline = ShorteningPipeline(
    ...     store=ShortLinkRedisDAO(prefix='linkword:dev').initialize(),
    ...     extractor=MetadataExtractor(),
    ...     generator=KeywordGenerator(OpenAI(api_key='sk-...')),
    ... )
    >>> pipeline.shorten('https://example.com')
    'example'
    >>> pipeline.resolve('example')
    'https://example.com'
"""

import re
import time
import logging
import ipaddress
import urllib.parse
from enum import StrEnum

from linkword.dao.base import ShortLinkBaseDAO
from linkword.exceptions import InvalidInputError, DeadlineExceededError
from linkword.keyword import KeywordGenerator
from linkword.metadata import MetadataExtractor
from linkword.models import ShortLinkModel


logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = frozenset({'http', 'https'})
HOSTNAME_PATTERN = re.compile(r'[a-z0-9.-]+')


class Stage(StrEnum):
    VALIDATING = 'validating'
    EXTRACTING = 'extracting'
    GENERATING = 'generating'
    STORING = 'storing'
    DONE = 'done'
    FAILED = 'failed'


def _is_valid_host(components: urllib.parse.SplitResult) -> bool:
    hostname = components.hostname
    if not hostname:
        return False
    if components.netloc.rpartition('@')[2].startswith('['):
        try:
            ipaddress.ip_address(hostname)
        except ValueError:
            return False
        return True
    try:
        ascii_host = hostname.encode('idna').decode('ascii')
    except UnicodeError:
        return False
    return HOSTNAME_PATTERN.fullmatch(ascii_host) is not None


def validate_url(url: object) -> str:
    """Return url if it is an absolute http(s) URI with a valid host

    Whitespace and control characters are rejected anywhere in the URL, and
    the port, if any, must be numeric.

    Raises:
        InvalidInputError: otherwise
    """
    if not isinstance(url, str) or not url:
        raise InvalidInputError('URL must be a non-empty string.')
    if any(c.isspace() or not c.isprintable() for c in url):
        raise InvalidInputError(f'URL {url!r} contains whitespace or control characters.')
    try:
        components = urllib.parse.urlsplit(url)
        components.port
    except ValueError as e:
        raise InvalidInputError(f'Unparsable URL {url!r}.') from e
    if components.scheme not in ALLOWED_SCHEMES:
        raise InvalidInputError(f'Unsupported URL scheme {components.scheme!r}.')
    if not _is_valid_host(components):
        raise InvalidInputError(f'URL {url!r} has no valid host.')
    return url


def remaining_timeout(deadline: float | None, limit: float) -> float:
    """Clamp a stage timeout to the time left before the caller's deadline

    Raises:
        DeadlineExceededError: if the deadline already passed
    """
    if deadline is None:
        return limit
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise DeadlineExceededError('Caller deadline passed before the next stage could start.')
    return min(limit, remaining)


class ShorteningPipeline:
    """Compose metadata extraction, keyword generation and storage

    Every collaborator is passed in, so one pipeline can be built per process
    and shared between requests; none of them keeps per-request state.

    Attributes:
        store (ShortLinkBaseDAO): keyword store
        extractor (MetadataExtractor): page metadata extractor
        generator (KeywordGenerator): keyword generator
    """

    def __init__(self, store: ShortLinkBaseDAO, extractor: MetadataExtractor, generator: KeywordGenerator):
        self.store = store
        self.extractor = extractor
        self.generator = generator

    def shorten(self, url: str, deadline: float | None = None) -> str:
        """Create a keyword short link for url

        Args:
            url (str):
                Absolute http(s) URL to shorten.
            deadline (float | None):
                time.monotonic() value after which the caller stops waiting.
                Outbound calls are given at most the remaining time.

        Returns:
            str: the stored keyword

        Raises:
            InvalidInputError: url isn't an absolute http(s) URI (no network call is made)
            FetchError: the page rejected the fetch or couldn't be parsed
            GenerationError: the model call failed or returned an unusable keyword
            DeadlineExceededError: the deadline passed between stages
            ShortLinkAlreadyExistsError: the keyword is taken (no regeneration)
            DataStoreError: the keyword store is unreachable
        """
        stage = Stage.VALIDATING
        try:
            validate_url(url)

            stage = Stage.EXTRACTING
            metadata = self.extractor.extract(url, timeout=remaining_timeout(deadline, self.extractor.timeout))

            stage = Stage.GENERATING
            keyword = self.generator.generate(
                metadata.title,
                metadata.description,
                metadata.keywords,
                timeout=remaining_timeout(deadline, self.generator.timeout),
            )

            stage = Stage.STORING
            self.store.insert(ShortLinkModel(keyword=keyword, target=url))
        except Exception as e:
            # Store errors propagate verbatim; the note records where the run stopped
            e.add_note(f'pipeline stage: {stage}')
            logger.warning(
                'Shortening failed.',
                extra={'url': url, 'stage': str(stage), 'error': type(e).__name__, 'state': str(Stage.FAILED)},
            )
            raise

        logger.info('Shortened URL.', extra={'url': url, 'keyword': keyword, 'stage': str(Stage.DONE)})
        return keyword

    def resolve(self, keyword: str) -> str:
        """Return the target URL stored for keyword

        Raises:
            ShortLinkNotFoundError: the keyword was never stored
            DataStoreError: the keyword store is unreachable
        """
        return self.store.get(keyword).target
