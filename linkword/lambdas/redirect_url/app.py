import logging
import functools

from linkword.types import LambdaEvent, LambdaContext, LambdaResponse
from linkword.dao.base import ShortLinkBaseDAO
from linkword.dao.redis import ShortLinkRedisDAO
from linkword.dao.exceptions import ShortLinkNotFoundError, DataStoreError
from linkword.utils import load_config, app_prefix, guarantee_500_response, json_response
from linkword.lambdas.redirect_url.constants import (
    METHOD_NOT_ALLOWED,
    KEYWORD_NOT_FOUND,
    DATA_STORE_UNAVAILABLE,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


def response_301(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 301,
        'headers': {'Location': location},
        'body': '',
    }


def response_404(keyword: str | None) -> LambdaResponse:
    body = {'message': 'URL not found' if not keyword else f"URL not found for keyword '{keyword}'", 'errorCode': KEYWORD_NOT_FOUND}
    return json_response(404, body)


def response_405() -> LambdaResponse:
    body = {'message': 'Method Not Allowed', 'errorCode': METHOD_NOT_ALLOWED}
    return json_response(405, body, headers={'Allow': 'GET'})


@functools.cache
def get_store() -> ShortLinkBaseDAO:
    """Connect to the keyword store once per Lambda container"""
    app_config = load_config('redirect_url')
    logger.debug('Assuming Redis as the backend database for short links')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
    return ShortLinkRedisDAO(**redis_config, prefix=app_prefix()).initialize()


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect keywords

    This Lambda handler follows this procedure to redirect keywords:
    - Step 1: Reject anything but GET
    - Step 2: Extract keyword from request path
    - Step 3: Look up the keyword's target URL
    - Step 4: Redirect client to target URL

    HTTP responses:
        301: Successful redirect
            headers:
                Location: target URL destination
        404: Unknown keyword
        405: Method not allowed
        500: Internal server error

    Example:
        >>> event = {'httpMethod': 'GET', 'pathParameters': {'keyword': 'example'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        301
        >>> response['headers']['Location']
        'https://example.com'
    """
    # 1- Only GET redirects
    method = event.get('httpMethod', 'GET').upper()
    if method != 'GET':
        logger.info('Method %s not allowed on /{keyword}. Responding with 405.', method, extra={'event': METHOD_NOT_ALLOWED})
        return response_405()

    # 2- Extract keyword from request's path
    keyword = (event.get('pathParameters') or {}).get('keyword')
    if not keyword:
        logger.info('Missing keyword in path. Responding with 404.', extra={'event': KEYWORD_NOT_FOUND})
        return response_404(None)

    # 3- Look up target URL
    try:
        short_link = get_store().get(keyword=keyword)
    except ShortLinkNotFoundError:
        logger.info('Keyword not found in database. Responding with 404.', extra={'keyword': keyword, 'event': KEYWORD_NOT_FOUND})
        return response_404(keyword)
    except DataStoreError:
        logger.exception('Keyword store unavailable. Responding with 500.', extra={'keyword': keyword, 'event': DATA_STORE_UNAVAILABLE})
        return json_response(500, {'message': 'Internal Server Error', 'errorCode': DATA_STORE_UNAVAILABLE})

    # 4- Redirect client to target URL
    logger.info('Redirecting client to target URL. Responding with 301.', extra={'keyword': keyword, 'event': REDIRECT_SUCCESS})
    return response_301(location=short_link.target)
