# Error codes for redirect URL responses
METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'
KEYWORD_NOT_FOUND = 'KEYWORD_NOT_FOUND'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'

# Log events
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
