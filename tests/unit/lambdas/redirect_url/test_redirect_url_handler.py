"""Unit tests for the redirect_url AWS Lambda handler.

Test coverage includes:

1. Successful redirection
   - Ensures a known keyword returns HTTP 301 with a Location header.

2. Unknown or missing keyword
   - Ensures HTTP 404 with a descriptive message.

3. Wrong method
   - Anything but GET returns HTTP 405.

4. Backend failures
   - Redis outages and unexpected errors return HTTP 500.

5. Store construction
   - Connected once per container from AppConfig.
"""

import json
from unittest.mock import MagicMock

import pytest

from linkword.lambdas.redirect_url import app
from linkword.models import ShortLinkModel
from linkword.dao.exceptions import DataStoreError
from linkword.utils.constants import APP_NAME_ENV, UNKNOWN_INTERNAL_SERVER_ERROR


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture()
def apigw_event():
    def _event(keyword: str | None = 'example', method: str = 'GET') -> dict:
        return {
            'body': None,
            'resource': '/{keyword}',
            'path': f'/{keyword}' if keyword else '/',
            'httpMethod': method,
            'headers': {'User-Agent': 'pytest'},
            'pathParameters': {'keyword': keyword} if keyword is not None else None,
            'requestContext': {'resourcePath': '/{keyword}', 'httpMethod': method, 'domainName': 'testhost:1000', 'stage': 'test'},
        }

    return _event


@pytest.fixture()
def context():
    return MagicMock()


@pytest.fixture()
def short_link_dao(store, monkeypatch):
    store.insert(ShortLinkModel(keyword='example', target='https://example.com'))
    monkeypatch.setattr(app, 'get_store', lambda: store)
    return store


# -------------------------------
# 1. Successful redirection
# -------------------------------


def test_lambda_handler_redirects(apigw_event, context, short_link_dao):
    response = app.lambda_handler(apigw_event('example'), context)

    assert response['statusCode'] == 301
    assert response['headers']['Location'] == 'https://example.com'
    assert response['body'] == ''


# -------------------------------
# 2. Unknown or missing keyword
# -------------------------------


def test_lambda_handler_unknown_keyword(apigw_event, context, short_link_dao):
    response = app.lambda_handler(apigw_event('missing'), context)

    assert response['statusCode'] == 404
    body = json.loads(response['body'])
    assert body['message'] == "URL not found for keyword 'missing'"
    assert body['errorCode'] == 'KEYWORD_NOT_FOUND'


@pytest.mark.parametrize('keyword', [None, ''])
def test_lambda_handler_missing_keyword(apigw_event, context, short_link_dao, keyword):
    response = app.lambda_handler(apigw_event(keyword), context)

    assert response['statusCode'] == 404
    assert json.loads(response['body'])['message'] == 'URL not found'


# -------------------------------
# 3. Wrong method
# -------------------------------


@pytest.mark.parametrize('method', ['POST', 'PUT'])
def test_lambda_handler_method_not_allowed(apigw_event, context, short_link_dao, method):
    response = app.lambda_handler(apigw_event('example', method=method), context)

    assert response['statusCode'] == 405
    assert response['headers']['Allow'] == 'GET'


# -------------------------------
# 4. Backend failures
# -------------------------------


def test_lambda_handler_data_store_unavailable(apigw_event, context, monkeypatch):
    dao = MagicMock()
    dao.get.side_effect = DataStoreError("Can't connect to Redis at 203.0.113.1:18000/5.")
    monkeypatch.setattr(app, 'get_store', lambda: dao)

    response = app.lambda_handler(apigw_event('example'), context)

    assert response['statusCode'] == 500
    body = json.loads(response['body'])
    assert body['errorCode'] == 'DATA_STORE_UNAVAILABLE'
    assert 'Redis' not in body['message']


def test_lambda_handler_unexpected_error(apigw_event, context, monkeypatch):
    dao = MagicMock()
    dao.get.side_effect = RuntimeError('boom')
    monkeypatch.setattr(app, 'get_store', lambda: dao)

    response = app.lambda_handler(apigw_event('example'), context)

    assert response['statusCode'] == 500
    assert json.loads(response['body'])['errorCode'] == UNKNOWN_INTERNAL_SERVER_ERROR


# -------------------------------
# 5. Store construction
# -------------------------------


def test_get_store_connects_once(monkeypatch):
    monkeypatch.setenv(APP_NAME_ENV, 'linkword')
    load_config = MagicMock(return_value={'redis': {'host': 'localhost', 'port': 6379}})
    dao_cls = MagicMock()
    monkeypatch.setattr(app, 'load_config', load_config)
    monkeypatch.setattr(app, 'ShortLinkRedisDAO', dao_cls)

    app.get_store.cache_clear()
    try:
        store = app.get_store()
        assert app.get_store() is store
    finally:
        app.get_store.cache_clear()

    load_config.assert_called_once_with('redirect_url')
    dao_cls.assert_called_once_with(redis_host='localhost', redis_port=6379, prefix='linkword:test')
    assert store is dao_cls.return_value.initialize.return_value
