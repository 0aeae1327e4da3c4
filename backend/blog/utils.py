# backend/blog/utils.py
import re
from typing import Iterable, List, Union

_NON_SLUG_CHARS = re.compile(r'[^a-z0-9]+')
_MARKDOWN_MARKERS = re.compile(r'[#*`]')

EXCERPT_LENGTH = 150
META_DESCRIPTION_LENGTH = 160


def generate_slug(title: str) -> str:
    """
    Lower-cases the title, collapses every run of characters outside [a-z0-9]
    into a single hyphen and strips hyphens from both ends.
    No uniqueness check here: the caller owns collisions.
    """
    if not title:
        return ''
    return _NON_SLUG_CHARS.sub('-', title.lower()).strip('-')


def derive_excerpt(content: str, limit: int = EXCERPT_LENGTH) -> str:
    """
    Plain-text summary of Markdown content: drops heading/emphasis/code markers,
    cuts at `limit` characters and appends '...' only when something was cut.
    """
    plain = _MARKDOWN_MARKERS.sub('', content or '').strip()
    if len(plain) > limit:
        return plain[:limit] + '...'
    return plain


def parse_keywords(value: Union[str, Iterable[str], None]) -> List[str]:
    # "blog, cms,, markdown" -> ["blog", "cms", "markdown"]
    if value is None:
        return []
    if isinstance(value, str):
        tokens = value.split(',')
    else:
        tokens = []
        for item in value:
            tokens.extend(str(item).split(','))

    keywords = []
    for token in tokens:
        token = token.strip()
        if token and token not in keywords:
            keywords.append(token)
    return keywords


def describe_meta(post) -> dict:
    """
    SEO block for the public post page: <title>, description, keywords,
    canonical link, Open Graph and article tags.
    """
    title = post.seo_title or post.title
    description = post.seo_description or (post.content or '')[:META_DESCRIPTION_LENGTH]

    author_name = None
    profile = getattr(post.author, 'profile', None) if post.author_id else None
    if profile is not None:
        author_name = profile.full_name or profile.username

    return {
        'title': title,
        'description': description,
        'keywords': ', '.join(post.seo_keywords) if post.seo_keywords else None,
        'canonical_url': post.canonical_url or None,
        'og:title': title,
        'og:description': description,
        'og:type': 'article',
        'article:published_time': post.published_at.isoformat() if post.published_at else None,
        'article:author': author_name,
    }
