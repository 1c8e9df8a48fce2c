"""Page metadata extraction

Classes:
    MetadataExtractor:
        Fetch a page over HTTP and turn it into PageMetadata.

Fetch outcomes (see linkword.models.page_metadata):
    - 2xx response               -> FullMetadata (parsed from the body)
    - DNS/connection/timeout/... -> DegradedMetadata (title = URL), logged as a warning
      (a body still arriving when the timeout runs out counts as a timeout)
    - non-2xx response           -> RejectedFetch(status_code)

Example:
    >>> extractor = MetadataExtractor()
    >>> extractor.extract('https://example.com')
    PageMetadata(title='Example Domain', description='', keywords='', source_url='https://example.com')
"""

import time
import socket
import logging
import threading

import requests
from bs4.builder import ParserRejectedMarkup

from linkword.exceptions import FetchError
from linkword.metadata.parser import parse_metadata
from linkword.models import PageMetadata, FullMetadata, DegradedMetadata, RejectedFetch, ExtractionOutcome
from linkword.utils.constants import METADATA_FETCH_TIMEOUT, METADATA_MAX_BODY_BYTES, METADATA_CHUNK_BYTES, CRAWLER_USER_AGENT


logger = logging.getLogger(__name__)


class MetadataExtractor:
    """Fetch remote pages and extract their metadata

    Attributes:
        session (requests.Session):
            HTTP session used for page fetches (reused across calls for connection pooling).
        timeout (float):
            Default per-fetch timeout in seconds.
        user_agent (str):
            User-Agent header sent with every fetch.
        max_body_bytes (int):
            Most bytes of a page body that are read and parsed.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = METADATA_FETCH_TIMEOUT,
        user_agent: str = CRAWLER_USER_AGENT,
        max_body_bytes: int = METADATA_MAX_BODY_BYTES,
    ):
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_body_bytes = max_body_bytes

    def fetch(self, url: str, timeout: float | None = None) -> ExtractionOutcome:
        """Fetch a page and classify the result

        The timeout bounds the whole exchange, body included: the body is
        streamed and reading stops once the time is up, which counts as a
        network failure. At most max_body_bytes of the body are parsed.

        Args:
            url (str):
                Absolute http(s) URL of the page.
            timeout (float | None):
                Timeout in seconds for this fetch. Defaults to self.timeout.

        Returns:
            ExtractionOutcome:
                FullMetadata, DegradedMetadata or RejectedFetch.

        Raises:
            FetchError:
                If the page was fetched but its markup couldn't be parsed.
        """
        timeout = self.timeout if timeout is None else timeout
        deadline = time.monotonic() + timeout
        try:
            response = self.session.get(url, headers={'User-Agent': self.user_agent}, timeout=timeout, stream=True)
            with response:
                if not 200 <= response.status_code < 300:
                    logger.info('Page rejected metadata fetch.', extra={'url': url, 'statusCode': response.status_code})
                    return RejectedFetch(response.status_code)
                body = self._read_body(response, deadline)
        except requests.exceptions.RequestException as e:
            logger.warning(
                'Metadata fetch failed. Falling back to URL as title.',
                extra={'url': url, 'error': type(e).__name__, 'reason': str(e)},
            )
            return DegradedMetadata(PageMetadata.from_url(url))

        try:
            metadata = parse_metadata(body, url)
        except ParserRejectedMarkup as e:
            raise FetchError(f'Failed to parse HTML of {url}.') from e

        logger.debug('Extracted page metadata.', extra={'url': url, 'title': metadata.title})
        return FullMetadata(metadata)

    def extract(self, url: str, timeout: float | None = None) -> PageMetadata:
        """Fetch a page and return its metadata, degraded if the page is unreachable

        Raises:
            FetchError:
                If the page answered with a non-2xx status (carries status_code),
                or its markup couldn't be parsed.
        """
        match self.fetch(url, timeout=timeout):
            case FullMetadata(metadata) | DegradedMetadata(metadata):
                return metadata
            case RejectedFetch(status_code):
                raise FetchError(f'Unexpected status code {status_code} fetching {url}.', status_code=status_code)

    def _read_body(self, response: requests.Response, deadline: float) -> bytes:
        """Read up to max_body_bytes of the body before the deadline

        A single socket read can block for the whole per-read timeout, so a
        watchdog shuts the connection down at the deadline to unblock it.

        Raises:
            requests.exceptions.ReadTimeout: the deadline passed mid-body
        """
        watchdog = threading.Timer(max(deadline - time.monotonic(), 0.0), _shutdown_connection, args=(response,))
        watchdog.daemon = True
        watchdog.start()

        chunks = []
        size = 0
        try:
            for chunk in response.iter_content(chunk_size=METADATA_CHUNK_BYTES):
                chunks.append(chunk)
                size += len(chunk)
                if size >= self.max_body_bytes or time.monotonic() >= deadline:
                    break
        except requests.exceptions.RequestException as e:
            # the watchdog's shutdown surfaces as a broken read
            if time.monotonic() < deadline:
                raise
            raise requests.exceptions.ReadTimeout(f'Page body not received within the fetch timeout ({size} bytes read).') from e
        finally:
            watchdog.cancel()

        if size < self.max_body_bytes and time.monotonic() >= deadline:
            raise requests.exceptions.ReadTimeout(f'Page body not received within the fetch timeout ({size} bytes read).')
        return b''.join(chunks)[: self.max_body_bytes]


def _shutdown_connection(response: requests.Response) -> None:
    sock = getattr(getattr(response.raw, 'connection', None), 'sock', None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError as e:
        # the read finished and the socket was closed meanwhile
        logger.debug('Page connection already closed.', extra={'url': response.url, 'reason': str(e)})
