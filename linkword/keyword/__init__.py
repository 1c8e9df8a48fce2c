from linkword.keyword.generator import KeywordGenerator, build_prompt, is_valid_keyword


__all__ = [
    'KeywordGenerator',
    'build_prompt',
    'is_valid_keyword',
]
