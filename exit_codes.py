"""Коды выхода CLI."""

EXIT_SUCCESS = 0
EXIT_FAILURE = 1  # ошибка конфига или запроса к WP API
EXIT_NOT_FOUND = 2  # запрос выполнен, но контент не найден (тег, пост или страница)
