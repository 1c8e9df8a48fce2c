# Per-call timeouts for outbound network calls (seconds)
METADATA_FETCH_TIMEOUT = 10.0
KEYWORD_GENERATION_TIMEOUT = 10.0

# Page bodies are read in chunks up to the cap; the rest is ignored
METADATA_MAX_BODY_BYTES = 2 * 1024 * 1024
METADATA_CHUNK_BYTES = 16 * 1024

# Crawler user-agent for metadata fetches (sites that block default clients usually allow it)
CRAWLER_USER_AGENT = 'Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)'

# Keyword format: one lowercase word, at most 15 characters
KEYWORD_MAX_LENGTH = 15
KEYWORD_PATTERN = r'^[a-z]{1,15}$'

# Chat completion settings
DEFAULT_OPENAI_MODEL = 'gpt-3.5-turbo'
KEYWORD_MAX_TOKENS = 10
KEYWORD_TEMPERATURE = 0.3

# Keyword store schema version (bumped on incompatible Redis layout changes)
STORE_SCHEMA_VERSION = 1

# Application environment variables
APP_ENV_ENV = 'APP_ENV'
APP_NAME_ENV = 'APP_NAME'
AWS_SAM_LOCAL_ENV = 'AWS_SAM_LOCAL'
LOG_LEVEL_ENV = 'LOG_LEVEL'

# AppConfig environment variables
APPCONFIG_APP_ID_ENV = 'APPCONFIG_APP_ID'
APPCONFIG_ENV_ID_ENV = 'APPCONFIG_ENV_ID'
APPCONFIG_PROFILE_ID_ENV = 'APPCONFIG_PROFILE_ID'
APPCONFIG_AGENT_URL_ENV = 'APPCONFIG_AGENT_URL'
APPCONFIG_PROFILE_NAME_ENV = 'APPCONFIG_PROFILE_NAME'

# OpenAI environment variables
OPENAI_API_KEY_ENV = 'OPENAI_API_KEY'
OPENAI_MODEL_ENV = 'OPENAI_MODEL'

# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
