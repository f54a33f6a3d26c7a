#!/usr/bin/env python3
"""
Интеграционные тесты WP: реальный WPRestClient + fetcher против локального mock WordPress (http.server).

Проверяет: последовательность запросов (тег -> посты), query string, заголовки пагинации,
строгий статус для страниц и ошибку с URL/кодом.
Запуск из корня проекта:
  python tests/test_wp_integration_http.py
"""

from __future__ import annotations

import json
import socket
import sys
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from errors import WP_FETCH_ERROR
from wp.client import WPClientError, WPRestClient
from wp.fetcher import (
    PostsListParams,
    SinglePageParams,
    SinglePostParams,
    get_wordpress_page,
    get_wordpress_post,
    get_wordpress_posts,
)

POST = {
    "id": 10,
    "slug": "hello",
    "link": "https://blog.example.com/hello/",
    "date_gmt": "2026-02-01T08:00:00",
    "title": {"rendered": "Hello &#8220;there&#8221;"},
    "content": {"rendered": "<p>Body</p>"},
    "excerpt": {"rendered": "<p>Short&#8230; Continue Reading</p>"},
    "_embedded": {
        "author": [{"name": "Jane"}],
        "wp:term": [[], [{"id": 17, "slug": "python", "name": "Python", "taxonomy": "post_tag"}]],
    },
}
PAGE = {"id": 3, "slug": "about", "title": {"rendered": "About"}}


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class FakeWordPressHandler(BaseHTTPRequestHandler):
    requests_seen: list = []

    def _send(self, status, body, headers=None):
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        for k, v in (headers or {}).items():
            self.send_header(k, v)
        self.end_headers()
        self.wfile.write(json.dumps(body).encode())

    def do_GET(self):
        FakeWordPressHandler.requests_seen.append(self.path)
        parts = urlsplit(self.path)
        query = parse_qs(parts.query, keep_blank_values=True)
        slug = (query.get("slug") or [""])[0]

        if parts.path == "/wp-json/wp/v2/tags":
            if slug == "python":
                self._send(200, [{"id": 17, "slug": "python", "name": "Python"}])
            elif slug == "broken":
                self._send(200, [{"id": 99, "slug": "broken", "name": "Broken"}])
            else:
                self._send(200, [])
        elif parts.path == "/wp-json/wp/v2/posts":
            if (query.get("tags") or [""])[0] == "99":
                self._send(500, {"code": "internal_error"})
            elif "slug" in query:
                self._send(200, [POST] if slug == "hello" else [])
            else:
                self._send(200, [POST], {"X-WP-Total": "42", "X-WP-TotalPages": "5"})
        elif parts.path == "/wp-json/wp/v2/pages":
            if slug == "gone":
                self._send(404, {"code": "rest_no_route"})
            else:
                self._send(200, [PAGE] if slug == "about" else [])
        else:
            self._send(404, {"code": "rest_no_route"})

    def log_message(self, format, *args):
        pass


class _FakeServer:
    def __enter__(self):
        FakeWordPressHandler.requests_seen = []
        self.port = _free_port()
        self.server = HTTPServer(("127.0.0.1", self.port), FakeWordPressHandler)
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.thread.start()
        return self

    def __exit__(self, *exc):
        self.server.shutdown()
        self.server.server_close()

    @property
    def client(self) -> WPRestClient:
        return WPRestClient(base_url=f"http://127.0.0.1:{self.port}", timeout_sec=5)


def test_posts_with_tag_two_sequential_requests() -> None:
    with _FakeServer() as srv:
        result = get_wordpress_posts(srv.client, PostsListParams(tag_id="python", page=3, offset=5))
    assert result is not None
    assert result.name == "Blog: Python"
    assert FakeWordPressHandler.requests_seen == [
        "/wp-json/wp/v2/tags?slug=python",
        "/wp-json/wp/v2/posts?_embed&page=3&per_page=9&order=desc&orderby=date&tags=17&offset=5",
    ]
    info = result.page_info
    assert (info.total_posts, info.total_pages, info.has_next_page, info.has_previous_page) == (42, 5, True, True)
    assert result.items[0].name == 'Hello "there"'
    assert result.items[0].plain_text_summary == "Short... "


def test_posts_unknown_tag_single_request() -> None:
    with _FakeServer() as srv:
        result = get_wordpress_posts(srv.client, PostsListParams(tag_id="missing"))
    assert result is None
    assert FakeWordPressHandler.requests_seen == ["/wp-json/wp/v2/tags?slug=missing"]


def test_posts_server_error_raises() -> None:
    with _FakeServer() as srv:
        try:
            get_wordpress_posts(srv.client, PostsListParams(tag_id="broken"))
            assert False, "expected WPClientError"
        except WPClientError as e:
            assert e.status_code == 500
            assert e.error_code == WP_FETCH_ERROR
            assert "tags=99" in str(e) and "(code: 500)" in str(e)


def test_single_post_hit_and_miss() -> None:
    with _FakeServer() as srv:
        doc = get_wordpress_post(srv.client, SinglePostParams(blog_id="hello"))
        missing = get_wordpress_post(srv.client, SinglePostParams(blog_id="nope"))
    assert doc.id == "hello"
    assert doc.seo.meta_description == "Short&#8230; Continue Reading"
    assert missing is None
    assert FakeWordPressHandler.requests_seen[0] == "/wp-json/wp/v2/posts?slug=hello&_embed"


def test_single_page_last_segment_and_404() -> None:
    with _FakeServer() as srv:
        page = get_wordpress_page(srv.client, SinglePageParams(path="company/info/about"))
        assert page == PAGE
        try:
            get_wordpress_page(srv.client, SinglePageParams(path="gone"))
            assert False, "expected WPClientError for 404"
        except WPClientError as e:
            assert e.status_code == 404
    assert FakeWordPressHandler.requests_seen[0] == "/wp-json/wp/v2/pages?slug=about&_embed"


def run_all() -> bool:
    cases = [
        ("posts with tag: tags -> posts", test_posts_with_tag_two_sequential_requests),
        ("posts unknown tag: one request", test_posts_unknown_tag_single_request),
        ("posts 500 -> WPClientError", test_posts_server_error_raises),
        ("single post hit/miss", test_single_post_hit_and_miss),
        ("single page last segment, 404", test_single_page_last_segment_and_404),
    ]
    ok = 0
    for name, fn in cases:
        try:
            fn()
            ok += 1
            print(f"  OK {name}")
        except Exception as e:
            print(f"  FAIL {name}: {e}")
    return ok == len(cases)


if __name__ == "__main__":
    print("WP integration HTTP (mock WordPress)")
    sys.exit(0 if run_all() else 1)
