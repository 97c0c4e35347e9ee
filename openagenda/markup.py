"""HTML helpers: plain text extraction, sanitisation and markdown conversion."""
import re
from typing import Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Comment
from markdownify import markdownify

from openagenda import registry

ALLOWED_TAGS = frozenset([
    'a', 'b', 'strong', 'i', 'em', 'u', 'p', 'img', 'hr', 'span',
    'ul', 'ol', 'li', 'h1', 'h2', 'h3', 'h4', 'h5',
])
ALLOWED_ATTRIBUTES = {
    'a': ('href', 'target'),
    'img': ('src', 'alt', 'width', 'height'),
}
ALLOWED_SCHEMES = ('http', 'https')
RENAMED_TAGS = {'h1': 'h3', 'h2': 'h3'}
DROPPED_TAGS = ('script', 'style', 'iframe', 'object', 'embed')
VOID_TAGS = ('img', 'hr', 'br')

# Unicode spaces, but not line breaks
_SPACES = re.compile(r'[^\S\r\n\t\f\v]+')


def no_html(html: Optional[str], keep_newline: bool = True) -> str:
    """
    Remove html from a sentence and keep only words.

    Args:
        html: HTML input
        keep_newline: Keep new lines, otherwise they become spaces

    Returns:
        Plain text with entities decoded and spaces collapsed
    """
    if not html:
        return ''

    text = BeautifulSoup(html, 'html.parser').get_text()

    if not keep_newline:
        text = text.replace('\r', ' ').replace('\n', ' ')

    return _SPACES.sub(' ', text).strip()


def has_html(text: str) -> bool:
    return BeautifulSoup(text, 'html.parser').find() is not None


def _resolve(link: str, base_url: Optional[str]) -> Optional[str]:
    """Make link absolute against base_url and drop unsafe schemes."""
    link = link.strip()
    if base_url:
        link = urljoin(base_url + '/', link)

    scheme = urlparse(link).scheme
    if scheme and scheme not in ALLOWED_SCHEMES:
        return None
    return link


def _is_internal(link: str, base_url: Optional[str]) -> bool:
    parsed = urlparse(link)
    if not parsed.netloc:
        return True
    return bool(base_url) and parsed.netloc == urlparse(base_url).netloc


def cleanup_html(value: str, base_url: Optional[str] = None) -> str:
    """
    Sanitize html against the allowed tags and attributes.

    Disallowed tags are unwrapped (their text is kept), h1/h2 become h3,
    links and images are resolved against the project url and external links
    open in a new window.

    Args:
        value: HTML input
        base_url: Url relative links are resolved against (default: project url)

    Returns:
        Sanitized HTML
    """
    if base_url is None:
        base_url = registry.get_project_url()

    soup = BeautifulSoup(value, 'html.parser')

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()

    for tag in soup.find_all(DROPPED_TAGS):
        tag.decompose()

    # First pass: allow-list tags and attributes
    for tag in soup.find_all(True):
        tag.name = RENAMED_TAGS.get(tag.name, tag.name)
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue

        allowed = ALLOWED_ATTRIBUTES.get(tag.name, ())
        tag.attrs = {k: v for k, v in tag.attrs.items() if k in allowed}

        if tag.name == 'span':
            tag.unwrap()

    # Second pass: links and images against the project url
    for tag in soup.find_all('a'):
        href = _resolve(tag.get('href', ''), base_url) if tag.get('href') else None
        if href is None:
            tag.attrs.pop('href', None)
            tag.attrs.pop('target', None)
            continue

        tag['href'] = href
        if _is_internal(href, base_url):
            tag.attrs.pop('target', None)
        else:
            tag['target'] = '_blank'
            tag['rel'] = 'noreferrer noopener'

    for tag in soup.find_all('img'):
        src = _resolve(tag.get('src', ''), base_url) if tag.get('src') else None
        if src is None:
            tag.decompose()
        else:
            tag['src'] = src

    for tag in reversed(soup.find_all(True)):
        if tag.decomposed:
            continue
        if tag.name not in VOID_TAGS and not tag.get_text(strip=True) and not tag.find(VOID_TAGS):
            tag.decompose()

    return str(soup).strip()


def html_to_markdown(html: str) -> str:
    """
    Convert html to markdown, plain text is returned untouched.

    Args:
        html: HTML input

    Returns:
        Markdown text
    """
    if not has_html(html):
        return html

    return markdownify(html, heading_style='ATX', bullets='-').strip()
