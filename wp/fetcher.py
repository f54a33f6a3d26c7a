"""Запросы контента к WP REST API: список постов (с фильтром по тегу), один пост, одна страница.

Каждая операция — не более двух последовательных GET (тег, затем посты), без повторов
и без кэша. Пустой результат -> None, неуспешный статус -> WPClientError.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from errors import WP_DATA_FORMAT_ERROR

from .client import WPClientError, WPRestClient
from .mapper import BlogPostDocument, BlogPostList, post_to_document, posts_to_blog_list

logger = logging.getLogger("wp.fetcher")

_LEADING_INT_RE = re.compile(r"\s*([-+]?\d+)")

BLOG_TITLE = "Blog"
ORDER_VALUES = ("asc", "desc")
ORDERBY_VALUES = ("date", "relevance", "id", "include", "title", "slug")


@dataclass
class PostsListParams:
    tag_id: Optional[str] = None  # slug тега в человекочитаемом URL, не числовой id
    page: int = 1
    per_page: int = 9
    offset: Optional[int] = None
    order: str = "desc"
    orderby: str = "date"
    # Пригодится, если на сайте включён WPML; в URL сейчас не передаётся.
    locale: str = "en"


@dataclass
class SinglePostParams:
    blog_id: str
    locale: str = "en"


@dataclass
class SinglePageParams:
    path: str
    locale: str = "en"


def _header_int(headers: Optional[Dict[str, Any]], name: str) -> int:
    """Целое из заголовка без учёта регистра имени.

    Берутся ведущие цифры ("12abc" -> 12); нет заголовка или цифр нет -> 0.
    """
    if not headers:
        return 0
    wanted = name.lower()
    for key, value in headers.items():
        if str(key).lower() != wanted:
            continue
        match = _LEADING_INT_RE.match(str(value))
        return int(match.group(1)) if match else 0
    return 0


def page_slug_from_path(path: str) -> str:
    """Последний сегмент пути: "a/b/c" -> "c"."""
    return path.split("/")[-1]


def resolve_tag(client: WPRestClient, tag_slug: str, run_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Найти тег по slug. GET /tags?slug=... Первый совпавший тег или None."""
    tags = client.get("/tags", params=[("slug", tag_slug)], run_id=run_id)
    if not isinstance(tags, list):
        logger.warning(
            "WP API /tags вернул не список (type=%s), тег не найден",
            type(tags).__name__,
            extra={"run_id": run_id},
        )
        return None
    if not tags or not isinstance(tags[0], dict):
        return None
    return tags[0]


def build_posts_query(params: PostsListParams, tag_term_id: Optional[int] = None) -> List[Tuple[str, Any]]:
    query: List[Tuple[str, Any]] = [
        ("_embed", None),
        ("page", params.page),
        ("per_page", params.per_page),
        ("order", params.order),
        ("orderby", params.orderby),
    ]
    if tag_term_id is not None:
        query.append(("tags", tag_term_id))
    # 0 и None — без offset.
    if params.offset:
        query.append(("offset", params.offset))
    return query


def get_wordpress_posts(
    client: WPRestClient,
    params: PostsListParams,
    run_id: Optional[str] = None,
) -> Optional[BlogPostList]:
    """Страница списка постов. None, если фильтр по тегу задан, но тег не найден."""
    tag_name = ""
    tag_term_id: Optional[int] = None

    if params.tag_id:
        tag = resolve_tag(client, params.tag_id, run_id=run_id)
        if tag is None:
            logger.info("Тег %r не найден, посты не запрашиваются", params.tag_id, extra={"run_id": run_id})
            return None
        if tag.get("id") is None:
            logger.warning(
                "Тег %r без id, посты не запрашиваются",
                params.tag_id,
                extra={"run_id": run_id, "error_code": WP_DATA_FORMAT_ERROR},
            )
            return None
        tag_name = tag.get("name") or ""
        tag_term_id = tag["id"]

    query = build_posts_query(params, tag_term_id)
    posts, headers = client.get_with_headers("/posts", params=query, run_id=run_id)
    if not isinstance(posts, list):
        url = client.build_url("/posts", query)
        logger.warning(
            "WP API /posts вернул не список (type=%s): %s",
            type(posts).__name__,
            url,
            extra={"run_id": run_id, "error_code": WP_DATA_FORMAT_ERROR},
        )
        raise WPClientError(
            f"WordPress API unexpected response: {url} (expected list, got {type(posts).__name__})",
            WP_DATA_FORMAT_ERROR,
            url=url,
        )

    total_posts = _header_int(headers, "X-WP-Total")
    total_pages = _header_int(headers, "X-WP-TotalPages")
    page_title = f"{BLOG_TITLE}: {tag_name}" if tag_name else BLOG_TITLE

    return posts_to_blog_list(posts, page_title, total_posts, total_pages, params.page, params.per_page)


def get_wordpress_post(
    client: WPRestClient,
    params: SinglePostParams,
    run_id: Optional[str] = None,
) -> Optional[BlogPostDocument]:
    """Пост по slug. GET /posts?slug=...&_embed. None, если пост не найден."""
    posts = client.get("/posts", params=[("slug", params.blog_id), ("_embed", None)], run_id=run_id)
    if not isinstance(posts, list) or not posts or not isinstance(posts[0], dict):
        return None
    return post_to_document(posts[0])


def get_wordpress_page(
    client: WPRestClient,
    params: SinglePageParams,
    run_id: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Страница по последнему сегменту пути, сырой объект WP без преобразования.

    Статус проверяется строго на 200: даже 404 — ошибка, а не "не найдено".
    """
    slug = page_slug_from_path(params.path)
    pages = client.get(
        "/pages",
        params=[("slug", slug), ("_embed", None)],
        expect_status=200,
        run_id=run_id,
    )
    if not isinstance(pages, list) or not pages:
        return None
    return pages[0]
