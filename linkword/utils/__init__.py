from linkword.utils.config import app_env, app_name, app_prefix, load_config, openai_api_key, openai_model
from linkword.utils.helpers import require_environment, guarantee_500_response, json_response
from linkword.utils.runtime import running_locally, lambda_deadline
from linkword.utils.logging import initialize_logging


__all__ = [
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'openai_api_key',
    'openai_model',
    'require_environment',
    'guarantee_500_response',
    'json_response',
    'running_locally',
    'lambda_deadline',
    'initialize_logging',
]
