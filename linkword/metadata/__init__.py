from linkword.metadata.extractor import MetadataExtractor
from linkword.metadata.parser import parse_metadata


__all__ = [
    'MetadataExtractor',
    'parse_metadata',
]
