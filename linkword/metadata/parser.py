"""HTML metadata parsing

The page is parsed into a BeautifulSoup tree and walked by a small visitor
that only distinguishes two node kinds: elements (Tag) and text
(NavigableString). Comments, doctypes and other markup declarations are
skipped.

Functions:
    walk(root) -> Iterator[PageElement]:
        Iterative pre-order traversal in document order.

    text_content(element) -> str:
        Concatenated text of all text nodes below an element.

    parse_metadata(markup, url) -> PageMetadata:
        Extract title, description and keywords from an HTML document.

Example:
    >>> parse_metadata(b'<html><head><title>Example Domain</title></head></html>', 'https://example.com')
    PageMetadata(title='Example Domain', description='', keywords='', source_url='https://example.com')
"""

from collections.abc import Iterator

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from linkword.models import PageMetadata


DESCRIPTION_META_NAMES = frozenset({'description', 'og:description'})
KEYWORDS_META_NAME = 'keywords'


def walk(root: PageElement) -> Iterator[PageElement]:
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, Tag):
            # reversed, so the first child is popped first
            stack.extend(reversed(node.contents))


class NodeVisitor:
    """Dispatch every node of a tree to visit_element() or visit_text()

    Subclasses override the hooks they need.
    """

    def visit(self, root: PageElement) -> 'NodeVisitor':
        for node in walk(root):
            if isinstance(node, Tag):
                self.visit_element(node)
            elif isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
                self.visit_text(node)
        return self

    def visit_element(self, element: Tag) -> None:
        pass

    def visit_text(self, text: NavigableString) -> None:
        pass


class TextCollector(NodeVisitor):
    def __init__(self):
        self.parts: list[str] = []

    def visit_text(self, text: NavigableString) -> None:
        self.parts.append(str(text))

    @property
    def text(self) -> str:
        return ''.join(self.parts)


def text_content(element: Tag) -> str:
    return TextCollector().visit(element).text.strip()


class MetadataVisitor(NodeVisitor):
    """Collect <title>, the first <h1> and description/keywords <meta> tags"""

    def __init__(self):
        self.title = ''
        self.heading = ''
        self.description = ''
        self.keywords = ''

    def visit_element(self, element: Tag) -> None:
        match element.name:
            case 'title' if not self.title:
                self.title = text_content(element)
            case 'h1' if not self.heading:
                self.heading = text_content(element)
            case 'meta':
                self._visit_meta(element)

    def _visit_meta(self, element: Tag) -> None:
        # Either attribute may name the tag, and some pages set both
        names = {(element.get(attr) or '').strip().lower() for attr in ('name', 'property')}
        content = (element.get('content') or '').strip()
        if names & DESCRIPTION_META_NAMES and not self.description:
            self.description = content
        elif KEYWORDS_META_NAME in names:
            self.keywords = content


def parse_metadata(markup: bytes | str, url: str) -> PageMetadata:
    """Extract page metadata from an HTML document

    Title resolution order: <title> text, text of the first non-empty <h1>,
    the URL itself.

    Args:
        markup (bytes | str):
            Raw HTML. Bytes are decoded by BeautifulSoup (meta charset aware).
        url (str):
            URL the document was fetched from.

    Returns:
        PageMetadata: extracted metadata.

    Raises:
        bs4.builder.ParserRejectedMarkup:
            If the parser can't make sense of the markup.
    """
    soup = BeautifulSoup(markup, 'html.parser')
    visitor = MetadataVisitor().visit(soup)

    return PageMetadata(
        title=visitor.title or visitor.heading or url,
        description=visitor.description,
        keywords=visitor.keywords,
        source_url=url,
    )
