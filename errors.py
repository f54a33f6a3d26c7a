"""Таксономия кодов ошибок для логов и контрактов.

Используются в CLI и ядре: при обработке ошибок писать error_code в лог (поле error_code).
"""

CONFIG_ERROR = "CONFIG_ERROR"  # битый YAML или невалидное значение в конфиге/env

# WordPress Content Source
WP_FETCH_ERROR = "WP_FETCH_ERROR"  # неуспешный HTTP-статус ответа WP REST API
WP_NETWORK_ERROR = "WP_NETWORK_ERROR"  # таймаут, DNS, соединение отклонено (исключение requests)
WP_DATA_FORMAT_ERROR = "WP_DATA_FORMAT_ERROR"  # невалидный JSON в ответе
