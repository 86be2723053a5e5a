"""
Description HTML sanitizing.

Descriptions are merchant-written rich text. Only a small set of inline and
simple block tags survive; everything else is unwrapped or dropped.
"""

import re

from bs4 import BeautifulSoup, Comment

ALLOWED_TAGS = frozenset({
    'a', 'b', 'strong', 'em', 'i', 'u', 'br', 'p', 'span', 'small',
    'ul', 'ol', 'li', 'code',
})
ALLOWED_ATTRIBUTES = {
    'a': {'href', 'title', 'target', 'rel'},
    '*': {'class'},
}
# Removed together with their content
DROPPED_TAGS = ('script', 'style', 'iframe', 'object', 'embed', 'template', 'noscript')
SAFE_URL_SCHEMES = frozenset({'http', 'https', 'mailto', 'tel'})
# Browsers drop these anywhere in a URL before reading its scheme
URL_IGNORED_CHARACTERS = re.compile(r'[\x00-\x20\x7f]+')
URL_SCHEME = re.compile(r'^([a-z][a-z0-9+.-]*):')


def _allowed_attributes(tag_name):
    return ALLOWED_ATTRIBUTES.get(tag_name, set()) | ALLOWED_ATTRIBUTES['*']


def is_safe_url(href) -> bool:
    """Relative URLs and http(s), mailto and tel links only."""
    normalized = URL_IGNORED_CHARACTERS.sub('', href).lower()
    match = URL_SCHEME.match(normalized)
    return match is None or match.group(1) in SAFE_URL_SCHEMES


def sanitize_description(html) -> str:
    """Return `html` reduced to the allowed tags and attributes."""
    if not html:
        return ''

    soup = BeautifulSoup(str(html), 'html.parser')

    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
    for tag in soup.find_all(DROPPED_TAGS):
        tag.decompose()

    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue
        allowed = _allowed_attributes(tag.name)
        for attribute in list(tag.attrs):
            if attribute not in allowed:
                del tag.attrs[attribute]
        href = tag.get('href')
        if href is not None and not is_safe_url(href):
            del tag.attrs['href']

    return str(soup).strip()
