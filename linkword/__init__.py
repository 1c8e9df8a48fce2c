"""linkword: URL shortener which names links after their content."""

__version__ = '0.1.0'
