"""
Заголовки запросов.

Headers - регистронезависимый словарь на базе requests CaseInsensitiveDict.
Слияние правостороннее: значения override перекрывают одноимённые из base.
"""

from typing import Mapping, Optional

from requests.structures import CaseInsensitiveDict

UPLOAD_ACL_HEADER = "x-amz-acl"
UPLOAD_ACL_VALUE = "public-read"


class Headers(CaseInsensitiveDict):
    """
    Case-insensitive header set.

    Lookups ignore case; iteration yields the casing of the last write.

    Example:
        >>> headers = Headers({"Content-Type": "application/json"})
        >>> headers["content-type"]
        'application/json'
    """

    def added(self, other: Optional[Mapping[str, str]]) -> "Headers":
        """Return a new header set with ``other`` laid over this one."""
        return merge_headers(self, other)

    def copy(self) -> "Headers":
        return Headers(self._store.values())

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"


def merge_headers(
    base: Optional[Mapping[str, str]],
    override: Optional[Mapping[str, str]],
) -> Headers:
    """
    Слияние двух наборов заголовков.

    Names are compared case-insensitively; on collision the value (and the
    casing) from ``override`` wins. Neither input is modified.

    Args:
        base: Базовые заголовки
        override: Заголовки с приоритетом

    Returns:
        Новый Headers

    Example:
        >>> merge_headers({"A": "1", "B": "2"}, {"b": "3", "C": "4"})
        Headers({'A': '1', 'b': '3', 'C': '4'})
    """
    result = Headers(base or {})
    if override:
        for name, value in override.items():
            result[name] = value
    return result


def as_headers(value: Optional[Mapping[str, str]]) -> Optional[Headers]:
    """Convert any mapping to Headers, keeping None as None."""
    if value is None:
        return None
    if isinstance(value, Headers):
        return value.copy()
    return Headers(value)


def default_upload_headers(mime_type: str) -> Headers:
    """Заголовки upload по умолчанию: Content-Type и публичный ACL."""
    return Headers({
        "Content-Type": mime_type,
        UPLOAD_ACL_HEADER: UPLOAD_ACL_VALUE,
    })
