"""Keyword generation via chat completions

Classes:
    KeywordGenerator:
        Ask a chat model for one short, lowercase noun describing a page.

Example:
    >>> generator = KeywordGenerator(OpenAI(api_key='sk-...'))
    >>> generator.generate('Example Domain', '', '')
    'example'
"""

import re
import logging

from openai import OpenAI, OpenAIError

from linkword.exceptions import GenerationError
from linkword.utils.constants import (
    DEFAULT_OPENAI_MODEL,
    KEYWORD_GENERATION_TIMEOUT,
    KEYWORD_MAX_LENGTH,
    KEYWORD_MAX_TOKENS,
    KEYWORD_PATTERN,
    KEYWORD_TEMPERATURE,
)


logger = logging.getLogger(__name__)

KEYWORD_REGEX = re.compile(KEYWORD_PATTERN)

SYSTEM_PROMPT = 'You are a URL keyword generator. You generate single-word keywords that describe websites.'

PROMPT_TEMPLATE = (
    'Generate a single, simple English word (noun) that best describes this website.\n\n'
    'Title: {title}\n'
    'Description: {description}\n'
    'Keywords: {keywords}\n\n'
    'Rules:\n'
    '1. Return ONLY the word, nothing else\n'
    '2. Word must be a simple noun\n'
    '3. Word must be lowercase\n'
    '4. No special characters or spaces\n'
    '5. Maximum {max_length} characters\n'
)


def build_prompt(title: str, description: str, keywords: str) -> str:
    return PROMPT_TEMPLATE.format(title=title, description=description, keywords=keywords, max_length=KEYWORD_MAX_LENGTH)


def is_valid_keyword(keyword: str) -> bool:
    return KEYWORD_REGEX.fullmatch(keyword) is not None


class KeywordGenerator:
    """Generate validated keywords from page metadata

    Attributes:
        client (OpenAI):
            OpenAI client. Client-side retries are switched off; a failed
            call fails the pipeline run.
        model (str):
            Chat model name.
        timeout (float):
            Default per-call timeout in seconds.
    """

    def __init__(self, client: OpenAI, model: str = DEFAULT_OPENAI_MODEL, timeout: float = KEYWORD_GENERATION_TIMEOUT):
        self.client = client.with_options(max_retries=0)
        self.model = model
        self.timeout = timeout

    def generate(self, title: str, description: str, keywords: str, timeout: float | None = None) -> str:
        """Generate one keyword for a page

        Args:
            title (str): page title
            description (str): page description (may be empty)
            keywords (str): page keywords (may be empty)
            timeout (float | None):
                Timeout in seconds for this call. Defaults to self.timeout.

        Returns:
            str: keyword matching ^[a-z]{1,15}$

        Raises:
            GenerationError:
                If the completion call fails, returns no choices, or returns
                text that isn't a single short lowercase word.
        """
        timeout = self.timeout if timeout is None else timeout
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {'role': 'system', 'content': SYSTEM_PROMPT},
                    {'role': 'user', 'content': build_prompt(title, description, keywords)},
                ],
                max_tokens=KEYWORD_MAX_TOKENS,
                temperature=KEYWORD_TEMPERATURE,
                timeout=timeout,
            )
        except OpenAIError as e:
            raise GenerationError('Keyword completion call failed.') from e

        if not response.choices:
            raise GenerationError('No keyword generated.')

        keyword = (response.choices[0].message.content or '').strip().lower()
        if not is_valid_keyword(keyword):
            raise GenerationError(f'Invalid keyword generated: {keyword!r}.')

        logger.debug('Generated keyword.', extra={'keyword': keyword, 'model': self.model})
        return keyword
