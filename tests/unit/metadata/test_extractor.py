"""Unit tests for MetadataExtractor.

Test coverage includes:

1. Successful fetch
   - Parses the body and sends the crawler User-Agent with the timeout.

2. Network failures
   - DNS/connection/timeout failures degrade to the URL as title.

3. Rejected fetches
   - Non-2xx responses become RejectedFetch / FetchError with the status code.

4. Unparsable markup
   - Parser rejections become FetchError.

5. Bounded reads
   - The fetch timeout bounds the body too; an overrun degrades.
   - Bodies are read up to the byte cap.
"""

import time
import threading
import http.server
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import requests
from bs4.builder import ParserRejectedMarkup

from linkword.exceptions import FetchError
from linkword.metadata import extractor as extractor_module
from linkword.metadata.extractor import MetadataExtractor
from linkword.models import PageMetadata, FullMetadata, DegradedMetadata, RejectedFetch
from linkword.utils.constants import CRAWLER_USER_AGENT, METADATA_FETCH_TIMEOUT


URL = 'https://example.com'


# -------------------------------
# Fixtures
# -------------------------------


def make_response(status_code: int = 200, content: bytes = b'') -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.iter_content.return_value = [content]
    return response


@pytest.fixture
def session():
    _session = MagicMock(spec=requests.Session)
    _session.get.return_value = make_response(content=b'<html><head><title>Example Domain</title></head></html>')
    return _session


@pytest.fixture
def extractor(session):
    return MetadataExtractor(session=session)


# -------------------------------
# 1. Successful fetch
# -------------------------------


def test_fetch_parses_page(extractor, session):
    outcome = extractor.fetch(URL)

    assert outcome == FullMetadata(PageMetadata(title='Example Domain', source_url=URL))
    session.get.assert_called_once_with(URL, headers={'User-Agent': CRAWLER_USER_AGENT}, timeout=METADATA_FETCH_TIMEOUT, stream=True)


def test_fetch_uses_explicit_timeout(extractor, session):
    extractor.fetch(URL, timeout=2.5)
    assert session.get.call_args.kwargs['timeout'] == 2.5


@pytest.mark.parametrize('status_code', [200, 203, 299])
def test_any_2xx_status_is_accepted(extractor, session, status_code):
    session.get.return_value = make_response(status_code, b'<title>Ok</title>')
    assert extractor.extract(URL).title == 'Ok'


# -------------------------------
# 2. Network failures
# -------------------------------


@pytest.mark.parametrize(
    'error',
    [
        requests.exceptions.ConnectionError('Name or service not known'),
        requests.exceptions.ConnectTimeout('Connection timed out'),
        requests.exceptions.ReadTimeout('Read timed out'),
        requests.exceptions.TooManyRedirects('Exceeded 30 redirects'),
    ],
)
def test_network_failure_degrades_to_url(extractor, session, error):
    session.get.side_effect = error

    outcome = extractor.fetch(URL)

    assert isinstance(outcome, DegradedMetadata)
    assert outcome.metadata == PageMetadata(title=URL, description='', keywords='', source_url=URL)
    assert extractor.extract(URL).title == URL


def test_network_failure_is_logged(extractor, session, caplog):
    session.get.side_effect = requests.exceptions.ConnectTimeout('Connection timed out')

    with caplog.at_level('WARNING', logger='linkword.metadata.extractor'):
        extractor.fetch(URL)

    assert 'Falling back to URL as title' in caplog.text


# -------------------------------
# 3. Rejected fetches
# -------------------------------


@pytest.mark.parametrize('status_code', [301, 403, 404, 500, 503])
def test_non_2xx_status_is_rejected(extractor, session, status_code):
    session.get.return_value = make_response(status_code)

    assert extractor.fetch(URL) == RejectedFetch(status_code)

    with pytest.raises(FetchError) as excinfo:
        extractor.extract(URL)
    assert excinfo.value.status_code == status_code
    assert excinfo.value.stage == 'extracting'


# -------------------------------
# 4. Unparsable markup
# -------------------------------


def test_parser_rejection_raises_fetch_error(extractor, monkeypatch):
    def reject(markup, url):
        raise ParserRejectedMarkup('unparsable')

    monkeypatch.setattr(extractor_module, 'parse_metadata', reject)

    with pytest.raises(FetchError, match='Failed to parse HTML'):
        extractor.extract(URL)


def test_default_session_is_created():
    assert isinstance(MetadataExtractor().session, requests.Session)


# -------------------------------
# 5. Bounded reads
# -------------------------------


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def monotonic(self) -> float:
        return self.now


@pytest.fixture
def clock(monkeypatch):
    _clock = FakeClock()
    monkeypatch.setattr(extractor_module, 'time', SimpleNamespace(monotonic=_clock.monotonic))
    return _clock


def test_slow_body_degrades_to_url(extractor, session, clock, caplog):
    body = b'<html><head><title>Slow</title></head></html>'
    consumed = []

    def trickle(chunk_size):
        for byte in body:
            clock.now += 1.0
            consumed.append(byte)
            yield bytes([byte])

    session.get.return_value.iter_content.side_effect = trickle

    with caplog.at_level('WARNING', logger='linkword.metadata.extractor'):
        outcome = extractor.fetch(URL)

    assert outcome == DegradedMetadata(PageMetadata.from_url(URL))
    assert len(consumed) == METADATA_FETCH_TIMEOUT
    record = next(r for r in caplog.records if r.name == 'linkword.metadata.extractor')
    assert record.error == 'ReadTimeout'


def test_broken_body_after_deadline_degrades(extractor, session, clock):
    def stall(chunk_size):
        yield b'<html><head>'
        clock.now += METADATA_FETCH_TIMEOUT
        raise requests.exceptions.ChunkedEncodingError('Connection broken')

    session.get.return_value.iter_content.side_effect = stall

    assert isinstance(extractor.fetch(URL), DegradedMetadata)


def test_explicit_timeout_bounds_body(extractor, session, clock):
    def trickle(chunk_size):
        for _ in range(10):
            clock.now += 1.0
            yield b' '

    session.get.return_value.iter_content.side_effect = trickle

    assert isinstance(extractor.fetch(URL, timeout=3.0), DegradedMetadata)


def test_body_is_capped(session):
    extractor = MetadataExtractor(session=session, max_body_bytes=21)
    chunks = iter([b'<title>Capped</title>', b'<title>Never read</title>'])
    session.get.return_value.iter_content.return_value = chunks

    assert extractor.extract(URL).title == 'Capped'
    assert next(chunks) == b'<title>Never read</title>'


class TrickleHandler(http.server.BaseHTTPRequestHandler):
    body = b'<html><head><title>Slow</title></head><body></body></html>'

    def do_GET(self):
        self.send_response(200)
        self.send_header('Content-Type', 'text/html')
        self.send_header('Content-Length', str(len(self.body)))
        self.end_headers()
        try:
            for byte in self.body:
                self.wfile.write(bytes([byte]))
                self.wfile.flush()
                time.sleep(0.15)
        except (BrokenPipeError, ConnectionResetError):
            pass

    def log_message(self, format, *args):
        pass


class TrickleServer(http.server.ThreadingHTTPServer):
    daemon_threads = True
    block_on_close = False


@pytest.fixture
def trickle_url():
    server = TrickleServer(('127.0.0.1', 0), TrickleHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f'http://127.0.0.1:{server.server_address[1]}/'
    server.shutdown()
    server.server_close()


def test_trickling_server_is_cut_off_at_timeout(trickle_url):
    session = requests.Session()
    session.trust_env = False
    extractor = MetadataExtractor(session=session, timeout=0.5)

    start = time.monotonic()
    outcome = extractor.fetch(trickle_url)
    elapsed = time.monotonic() - start

    assert outcome == DegradedMetadata(PageMetadata.from_url(trickle_url))
    assert elapsed < 2.0
