# Error codes for shorten URL responses
METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_URL = 'MISSING_URL'
INVALID_URL = 'INVALID_URL'
METADATA_FETCH_FAILED = 'METADATA_FETCH_FAILED'
KEYWORD_GENERATION_FAILED = 'KEYWORD_GENERATION_FAILED'
KEYWORD_ALREADY_EXISTS = 'KEYWORD_ALREADY_EXISTS'
DEADLINE_EXCEEDED = 'DEADLINE_EXCEEDED'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'

# Log events
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
