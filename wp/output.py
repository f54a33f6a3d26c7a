"""JSON-контракт для рендер-слоя.

Преобразование: внутренняя модель (BlogPostList, BlogPostDocument) -> словари
с camelCase-ключами, которые ожидает фронтенд.

Контракт списка:
  name, description, posts{pageInfo, items[]}, isVisibleInNavigation.
Контракт документа поста:
  author, htmlBody, content, id, name, publishedDate, tags, thumbnailImage,
  seo, isVisibleInNavigation, vanityUrl.
Отсутствующая обложка отдаётся как null. Страница (page) отдаётся сырым объектом WP.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from .mapper import BlogPostCard, BlogPostDocument, BlogPostList, PageInfo, Thumbnail


def _thumbnail_dict(thumb: Optional[Thumbnail]) -> Optional[Dict[str, Any]]:
    if thumb is None:
        return None
    return {"altText": thumb.alt_text, "url": thumb.url}


def page_info_to_dict(info: PageInfo) -> Dict[str, Any]:
    return {
        "hasNextPage": info.has_next_page,
        "hasPreviousPage": info.has_previous_page,
        "startCursor": info.start_cursor,
        "endCursor": info.end_cursor,
        "currentPage": info.current_page,
        "totalPages": info.total_pages,
        "totalPosts": info.total_posts,
        "perPage": info.per_page,
    }


def card_to_dict(card: BlogPostCard) -> Dict[str, Any]:
    return {
        "author": card.author,
        "entityId": card.entity_id,
        "name": card.name,
        "plainTextSummary": card.plain_text_summary,
        "publishedDate": {"utc": card.published_date.utc},
        "thumbnailImage": _thumbnail_dict(card.thumbnail_image),
    }


def blog_list_to_dict(blog: BlogPostList) -> Dict[str, Any]:
    """BlogPostList -> словарь по контракту списка постов."""
    return {
        "name": blog.name,
        "description": blog.description,
        "posts": {
            "pageInfo": page_info_to_dict(blog.page_info),
            "items": [card_to_dict(c) for c in blog.items],
        },
        "isVisibleInNavigation": blog.is_visible_in_navigation,
    }


def blog_post_to_dict(doc: BlogPostDocument) -> Dict[str, Any]:
    """BlogPostDocument -> словарь по контракту документа поста."""
    return {
        "author": doc.author,
        "htmlBody": doc.html_body,
        "content": doc.content,
        "id": doc.id,
        "name": doc.name,
        "publishedDate": {"utc": doc.published_date.utc},
        "tags": [{"name": t.name, "href": t.href} for t in doc.tags],
        "thumbnailImage": _thumbnail_dict(doc.thumbnail_image),
        "seo": {
            "metaKeywords": doc.seo.meta_keywords,
            "metaDescription": doc.seo.meta_description,
            "pageTitle": doc.seo.page_title,
        },
        "isVisibleInNavigation": doc.is_visible_in_navigation,
        "vanityUrl": doc.vanity_url,
    }


def result_to_dict(result: Any) -> Any:
    """Любой результат операции -> JSON-совместимое значение (None и сырые страницы как есть)."""
    if isinstance(result, BlogPostList):
        return blog_list_to_dict(result)
    if isinstance(result, BlogPostDocument):
        return blog_post_to_dict(result)
    return result


def to_json(result: Any, indent: Optional[int] = 2) -> str:
    return json.dumps(result_to_dict(result), ensure_ascii=False, indent=indent)
