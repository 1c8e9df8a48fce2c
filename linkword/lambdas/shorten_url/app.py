import json
import logging
import functools

from openai import OpenAI

from linkword.types import LambdaEvent, LambdaContext, LambdaResponse
from linkword.pipeline import ShorteningPipeline, validate_url
from linkword.metadata import MetadataExtractor
from linkword.keyword import KeywordGenerator
from linkword.dao.redis import ShortLinkRedisDAO
from linkword.dao.exceptions import ShortLinkAlreadyExistsError, DataStoreError
from linkword.exceptions import InvalidInputError, FetchError, GenerationError, DeadlineExceededError
from linkword.utils import load_config, app_prefix, openai_api_key, openai_model, guarantee_500_response, json_response, lambda_deadline
from linkword.lambdas.shorten_url.constants import (
    METHOD_NOT_ALLOWED,
    INVALID_JSON_BODY,
    MISSING_URL,
    INVALID_URL,
    METADATA_FETCH_FAILED,
    KEYWORD_GENERATION_FAILED,
    KEYWORD_ALREADY_EXISTS,
    DEADLINE_EXCEEDED,
    DATA_STORE_UNAVAILABLE,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)

# Pipeline failures: (HTTP-facing message, error code)
FAILURE_RESPONSES = {
    FetchError: ('failed to fetch page metadata', METADATA_FETCH_FAILED),
    GenerationError: ('failed to generate keyword', KEYWORD_GENERATION_FAILED),
    ShortLinkAlreadyExistsError: ('failed to store URL', KEYWORD_ALREADY_EXISTS),
    DeadlineExceededError: ('request deadline exceeded', DEADLINE_EXCEEDED),
    DataStoreError: ('failed to store URL', DATA_STORE_UNAVAILABLE),
}


def response_400(message: str, error_code: str) -> LambdaResponse:
    return json_response(400, {'message': f'Bad Request ({message})', 'errorCode': error_code})


def response_405() -> LambdaResponse:
    body = {'message': 'Method Not Allowed', 'errorCode': METHOD_NOT_ALLOWED}
    return json_response(405, body, headers={'Allow': 'POST'})


def response_500(message: str, error_code: str) -> LambdaResponse:
    return json_response(500, {'message': f'Internal Server Error ({message})', 'errorCode': error_code})


@functools.cache
def get_pipeline() -> ShorteningPipeline:
    """Build the shortening pipeline once per Lambda container

    Raises:
        MissingEnvironmentVariableError:
            If OPENAI_API_KEY or the AppConfig identifiers are missing.
        BadConfigurationError:
            If AppConfig has no Redis section for this Lambda.
        DataStoreError:
            If Redis is unreachable.
    """
    api_key = openai_api_key()
    app_config = load_config('shorten_url')
    logger.debug('Assuming Redis as the backend database for short links')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    return ShorteningPipeline(
        store=ShortLinkRedisDAO(**redis_config, prefix=app_prefix()).initialize(),
        extractor=MetadataExtractor(),
        generator=KeywordGenerator(OpenAI(api_key=api_key), model=openai_model()),
    )


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Reject anything but POST
    - Step 2: Extract the URL from the request body
    - Step 3: Validate the URL (no outbound calls for invalid input)
    - Step 4: Run the pipeline: fetch metadata, generate keyword, store mapping
    - Step 5: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            keyword: newly generated keyword
            url: original url (provided in request)
        400: Bad client request
            message: invalid JSON body, missing 'url', or invalid URL
        405: Method not allowed
        500: Internal server error
            message: generic description of the pipeline stage that failed

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object; its remaining time bounds outbound calls.

    Returns:
        LambdaResponse:
            JSON-serializable response following API Gateway Lambda Proxy output format.

    Example:
        >>> event = {'httpMethod': 'POST', 'body': '{"url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])
        {'keyword': 'example', 'url': 'https://example.com'}
    """
    # 1- Only POST creates short links
    method = event.get('httpMethod', 'POST').upper()
    if method != 'POST':
        logger.info('Method %s not allowed on /shorten. Responding with 405.', method, extra={'event': METHOD_NOT_ALLOWED})
        return response_405()

    # 2- Extract URL from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400('invalid JSON body', INVALID_JSON_BODY)
    if not isinstance(request_body, dict):
        logger.info('JSON body is not an object. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400('invalid JSON body', INVALID_JSON_BODY)

    url = request_body.get('url')
    if not url:
        logger.info("Missing 'url' in JSON body. Responding with 400.", extra={'event': MISSING_URL})
        return response_400("missing 'url' in JSON body", MISSING_URL)

    # 3- Validate URL before touching the network or the backends
    try:
        validate_url(url)
    except InvalidInputError:
        logger.info('Invalid URL. Responding with 400.', extra={'url': url, 'event': INVALID_URL})
        return response_400('invalid URL', INVALID_URL)

    # 4- Fetch metadata, generate keyword and store mapping
    pipeline = get_pipeline()
    try:
        keyword = pipeline.shorten(url, deadline=lambda_deadline(context))
    except InvalidInputError:
        return response_400('invalid URL', INVALID_URL)
    except tuple(FAILURE_RESPONSES) as e:
        message, error_code = next(v for cls, v in FAILURE_RESPONSES.items() if isinstance(e, cls))
        logger.exception('Failed to shorten URL. Responding with 500.', extra={'url': url, 'event': error_code})
        return response_500(message, error_code)

    # 5- Return successful response to user
    logger.info('Shortened URL. Responding with 200.', extra={'url': url, 'keyword': keyword, 'event': SHORTEN_SUCCESS})
    return json_response(200, {'keyword': keyword, 'url': url})
