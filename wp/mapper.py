"""Маппинг ответов WP REST API в структуры для рендер-слоя (список постов, документ поста).

Все функции чистые: без I/O и без обращений к API.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

TAG_HREF_PREFIX = "/blog/tag/"
TAGS_TAXONOMY = "post_tag"
# wp:term — массив массивов по таксономиям: [ [categories...], [tags...] ]
TAGS_TERM_SLOT = 1

# Только эти коды встречаются в title.rendered; общий декодер сущностей не нужен.
TITLE_ENTITIES = (
    ("&#8217;", "'"),  # правый одинарный апостроф
    ("&#8220;", '"'),  # левая двойная кавычка
    ("&#8221;", '"'),  # правая двойная кавычка
)
RIGHT_SINGLE_QUOTE = "&#8217;"
HELLIP = "&#8230;"
CONTINUE_READING = "Continue Reading"

_TAG_RE = re.compile(r"(<([^>]+)>)", re.IGNORECASE)


@dataclass
class Thumbnail:
    alt_text: str
    url: Optional[str]


@dataclass
class PublishedDate:
    utc: Optional[str]


@dataclass
class PageInfo:
    has_next_page: bool
    has_previous_page: bool
    start_cursor: str
    end_cursor: str
    current_page: int
    total_pages: int
    total_posts: int
    per_page: int


@dataclass
class BlogPostCard:
    """Элемент списка постов."""
    author: str
    entity_id: str
    name: str
    plain_text_summary: str
    published_date: PublishedDate
    thumbnail_image: Optional[Thumbnail]


@dataclass
class BlogPostList:
    name: str
    page_info: PageInfo
    items: List[BlogPostCard] = field(default_factory=list)
    description: str = ""
    is_visible_in_navigation: bool = True


@dataclass
class TagLink:
    name: str
    href: str


@dataclass
class SeoFields:
    meta_keywords: str
    meta_description: str
    page_title: str


@dataclass
class BlogPostDocument:
    """Один пост целиком: тело, теги, SEO."""
    author: str
    html_body: str
    content: str
    id: str
    name: str
    published_date: PublishedDate
    tags: List[TagLink]
    thumbnail_image: Optional[Thumbnail]
    seo: SeoFields
    vanity_url: Optional[str]
    is_visible_in_navigation: bool = True


def strip_tags(html: str) -> str:
    """Удалить все <...> (нежадно, без учёта регистра). Сущности не трогаются."""
    return _TAG_RE.sub("", html or "")


def normalize_title(title: str) -> str:
    for entity, char in TITLE_ENTITIES:
        title = title.replace(entity, char)
    return title


def excerpt_to_summary(excerpt: str) -> str:
    """Текст анонса для карточки: без тегов, с "..." вместо &#8230;, без "Continue Reading".

    &#8230; и "Continue Reading" заменяются только в первом вхождении.
    """
    text = strip_tags(excerpt).replace(RIGHT_SINGLE_QUOTE, "'")
    text = text.replace(HELLIP, "...", 1)
    return text.replace(CONTINUE_READING, "", 1)


def _rendered(raw: Dict[str, Any], key: str) -> str:
    v = raw.get(key)
    if isinstance(v, dict):
        return v.get("rendered") or ""
    return ""


def _embedded(raw: Dict[str, Any]) -> Dict[str, Any]:
    embedded = raw.get("_embedded")
    return embedded if isinstance(embedded, dict) else {}


def embedded_author_name(raw: Dict[str, Any]) -> str:
    authors = _embedded(raw).get("author")
    if isinstance(authors, list) and authors and isinstance(authors[0], dict):
        return authors[0].get("name") or ""
    return ""


def embedded_thumbnail(raw: Dict[str, Any]) -> Optional[Thumbnail]:
    media = _embedded(raw).get("wp:featuredmedia")
    if not isinstance(media, list) or not media or not isinstance(media[0], dict):
        return None
    first = media[0]
    return Thumbnail(alt_text=first.get("alt_text") or "", url=first.get("source_url"))


def embedded_tag_terms(raw: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Теги из _embedded['wp:term'].

    Группа ищется по taxonomy == "post_tag"; если WP не отдал поле taxonomy,
    берётся позиционный слот 1 (контракт WP REST API v2).
    """
    wp_term = _embedded(raw).get("wp:term")
    if not isinstance(wp_term, list):
        return []
    for group in wp_term:
        if not isinstance(group, list):
            continue
        if any(isinstance(t, dict) and t.get("taxonomy") == TAGS_TAXONOMY for t in group):
            return [t for t in group if isinstance(t, dict)]
    if len(wp_term) > TAGS_TERM_SLOT and isinstance(wp_term[TAGS_TERM_SLOT], list):
        group = wp_term[TAGS_TERM_SLOT]
        # Слот 1 с явно другой таксономией — это не теги.
        if any(isinstance(t, dict) and t.get("taxonomy") not in (None, TAGS_TAXONOMY) for t in group):
            return []
        return [t for t in group if isinstance(t, dict)]
    return []


def build_page_info(current_page: int, total_pages: int, total_posts: int, per_page: int) -> PageInfo:
    """Пагинация только по номеру страницы и итогам из заголовков API, не по числу items."""
    return PageInfo(
        has_next_page=current_page < total_pages,
        has_previous_page=current_page > 1,
        start_cursor=str(current_page),
        end_cursor=str(current_page + 1),
        current_page=current_page,
        total_pages=total_pages,
        total_posts=total_posts,
        per_page=per_page,
    )


def post_to_card(raw: Dict[str, Any]) -> BlogPostCard:
    """WP /wp/v2/posts item -> BlogPostCard."""
    return BlogPostCard(
        author=embedded_author_name(raw),
        entity_id=raw.get("slug") or "",
        name=normalize_title(_rendered(raw, "title")),
        plain_text_summary=excerpt_to_summary(_rendered(raw, "excerpt")),
        published_date=PublishedDate(utc=raw.get("date_gmt")),
        thumbnail_image=embedded_thumbnail(raw),
    )


def posts_to_blog_list(
    posts: List[Dict[str, Any]],
    page_title: str,
    total_posts: int,
    total_pages: int,
    current_page: int,
    per_page: int,
) -> BlogPostList:
    return BlogPostList(
        name=page_title,
        page_info=build_page_info(current_page, total_pages, total_posts, per_page),
        items=[post_to_card(p) for p in posts if isinstance(p, dict)],
    )


def post_to_document(raw: Dict[str, Any]) -> BlogPostDocument:
    """WP /wp/v2/posts item -> BlogPostDocument. Заголовок и тело без нормализации."""
    body = _rendered(raw, "content")
    title = _rendered(raw, "title")
    tags = embedded_tag_terms(raw)
    return BlogPostDocument(
        author=embedded_author_name(raw),
        html_body=body,
        content=body,
        id=raw.get("slug") or "",
        name=title,
        published_date=PublishedDate(utc=raw.get("date_gmt")),
        tags=[
            TagLink(name=t.get("name") or "", href=f"{TAG_HREF_PREFIX}{t.get('slug') or ''}")
            for t in tags
        ],
        thumbnail_image=embedded_thumbnail(raw),
        seo=SeoFields(
            meta_keywords=",".join(t.get("name") or "" for t in tags),
            meta_description=strip_tags(_rendered(raw, "excerpt")),
            page_title=title,
        ),
        vanity_url=raw.get("link"),
    )
