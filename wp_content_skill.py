#!/usr/bin/env python3
"""WordPress Content CLI: список постов, пост и страница в JSON-контракте рендер-слоя."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import uuid
from pathlib import Path
from typing import Any, Optional

import requests
from dotenv import load_dotenv

# local imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
load_dotenv()

from errors import CONFIG_ERROR, WP_NETWORK_ERROR  # noqa: E402
from exit_codes import EXIT_FAILURE, EXIT_NOT_FOUND, EXIT_SUCCESS  # noqa: E402
from logging_setup import set_run_id, setup_app_logging  # noqa: E402
from wp.client import WPClientError, WPRestClient  # noqa: E402
from wp.config import load_config  # noqa: E402
from wp.fetcher import (  # noqa: E402
    ORDER_VALUES,
    ORDERBY_VALUES,
    PostsListParams,
    SinglePageParams,
    SinglePostParams,
    get_wordpress_page,
    get_wordpress_post,
    get_wordpress_posts,
)
from wp.output import to_json  # noqa: E402

LOG = logging.getLogger("wp_content.cli")


def _print_err_utf8(text: str) -> None:
    sys.stderr.buffer.write(text.encode("utf-8", errors="replace"))
    sys.stderr.buffer.write(b"\n")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Контент WordPress (посты, теги, страницы) в JSON")
    p.add_argument(
        "--config",
        type=str,
        default=None,
        help="Путь к config/wordpress.yml (по умолчанию config/wordpress.yml в корне проекта)",
    )
    p.add_argument("--verbose", action="store_true", help="Дублировать лог в stderr (уровень DEBUG)")
    sub = p.add_subparsers(dest="command", required=True)

    posts = sub.add_parser("posts", help="страница списка постов")
    posts.add_argument("--tag", type=str, default=None, help="slug тега для фильтра")
    posts.add_argument("--page", type=int, default=1)
    posts.add_argument("--per-page", type=int, default=9)
    posts.add_argument("--offset", type=int, default=None)
    posts.add_argument("--order", choices=ORDER_VALUES, default="desc")
    posts.add_argument("--orderby", choices=ORDERBY_VALUES, default="date")

    post = sub.add_parser("post", help="один пост по slug")
    post.add_argument("slug", type=str)

    page = sub.add_parser("page", help="страница по пути (берётся последний сегмент)")
    page.add_argument("path", type=str)
    return p


def run_command(args: argparse.Namespace, client: WPRestClient, run_id: Optional[str] = None) -> Any:
    if args.command == "posts":
        params = PostsListParams(
            tag_id=args.tag,
            page=args.page,
            per_page=args.per_page,
            offset=args.offset,
            order=args.order,
            orderby=args.orderby,
        )
        return get_wordpress_posts(client, params, run_id=run_id)
    if args.command == "post":
        return get_wordpress_post(client, SinglePostParams(blog_id=args.slug), run_id=run_id)
    return get_wordpress_page(client, SinglePageParams(path=args.path), run_id=run_id)


def main(argv: Optional[list] = None) -> int:
    project_root = Path(__file__).resolve().parent
    args = build_parser().parse_args(argv)

    run_id = str(uuid.uuid4())[:8]
    setup_app_logging(
        project_root / "logs",
        level=logging.DEBUG if args.verbose else logging.INFO,
        run_id=run_id,
        console=args.verbose,
    )
    set_run_id(run_id)

    config_path = Path(args.config) if args.config else None
    try:
        cfg = load_config(config_path=config_path, project_root=project_root)
    except ValueError as e:
        LOG.error("Конфиг: %s", e, extra={"error_code": CONFIG_ERROR})
        _print_err_utf8(f"Error: {e}")
        return EXIT_FAILURE

    client = WPRestClient.from_config(cfg)
    try:
        result = run_command(args, client, run_id=run_id)
    except WPClientError as e:
        LOG.error("WP fetch error: %s", e, extra={"error_code": e.error_code})
        _print_err_utf8(f"Error: {e}")
        return EXIT_FAILURE
    except requests.exceptions.RequestException as e:
        LOG.error("WP request error: %s", e, extra={"error_code": WP_NETWORK_ERROR})
        _print_err_utf8(f"Error: {e}")
        return EXIT_FAILURE

    if result is None:
        _print_err_utf8("Not found")
        return EXIT_NOT_FOUND
    print(to_json(result))
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
