# src/api_manager/utils/sanitizer.py
"""
Маскирование чувствительных данных в диагностических логах.

Защищает заголовки (Authorization, Cookie), параметры запросов и URL
от попадания токенов и паролей в логи.
"""

import re
from typing import Any, Dict, Mapping

REDACTED = "***REDACTED***"

# Имена чувствительных полей (case-insensitive, частичное совпадение)
SENSITIVE_KEYS = {
    'password', 'passwd', 'pwd',
    'token', 'access_token', 'refresh_token', 'id_token', 'jwt',
    'secret', 'client_secret', 'api_key', 'apikey', 'private_key',
    'authorization', 'proxy-authorization', 'x-api-key',
    'cookie', 'set-cookie', 'session_id', 'sessionid', 'csrf_token',
    'credit_card', 'card_number', 'cvv', 'otp', 'pin_code',
}

SENSITIVE_PATTERNS = [
    # Bearer / Basic схемы
    (re.compile(r'(Bearer\s+)([A-Za-z0-9\-._~+/]+=*)', re.IGNORECASE), r'\1' + REDACTED),
    (re.compile(r'(Basic\s+)([A-Za-z0-9+/]+=*)', re.IGNORECASE), r'\1' + REDACTED),
    # Пароль в userinfo части URL
    (re.compile(r'://([^:/@\s]+):([^@/\s]+)@'), r'://\1:' + REDACTED + '@'),
    # query параметры вида token=..., api_key=..., password=...
    (re.compile(r'([?&](?:api[_-]?key|token|access_token|password|secret)=)([^&\s]+)',
                re.IGNORECASE), r'\1' + REDACTED),
]


def mask_sensitive_data(data: Any, mask: str = REDACTED) -> Any:
    """
    Рекурсивно маскирует чувствительные данные в словарях, списках, строках.

    Mappings of any kind (Headers, read-only parameter mappings) come back as
    plain dicts; other non-container values are returned unchanged.

    Examples:
        >>> mask_sensitive_data({"Authorization": "Bearer abc", "Accept": "*/*"})
        {'Authorization': '***REDACTED***', 'Accept': '*/*'}

        >>> mask_sensitive_data("https://x.com/a?token=abc&page=1")
        'https://x.com/a?token=***REDACTED***&page=1'
    """
    if data is None or isinstance(data, (bool, int, float, bytes)):
        return data

    if isinstance(data, str):
        return _mask_string(data, mask)

    if isinstance(data, Mapping):
        return _mask_mapping(data, mask)

    if isinstance(data, (list, tuple)):
        return type(data)(mask_sensitive_data(item, mask) for item in data)

    return data


def _mask_mapping(data: Mapping, mask: str) -> Dict[Any, Any]:
    result = {}
    for key, value in data.items():
        if is_sensitive_key(str(key)):
            result[key] = mask
        else:
            result[key] = mask_sensitive_data(value, mask)
    return result


def _mask_string(text: str, mask: str) -> str:
    for pattern, replacement in SENSITIVE_PATTERNS:
        text = pattern.sub(replacement.replace(REDACTED, mask), text)
    return text


def is_sensitive_key(key: str) -> bool:
    """
    Проверяет, является ли ключ чувствительным.

    Examples:
        >>> is_sensitive_key("X-Refresh-Token")
        True
        >>> is_sensitive_key("Content-Type")
        False
    """
    key = key.lower().replace('-', '_')
    for sensitive_key in SENSITIVE_KEYS:
        if sensitive_key.replace('-', '_') in key:
            return True
    return False


def add_sensitive_keys(*keys: str) -> None:
    """
    Добавляет ключи в SENSITIVE_KEYS.

    Examples:
        >>> add_sensitive_keys('x-tenant-signature')
    """
    for key in keys:
        SENSITIVE_KEYS.add(key.lower())
