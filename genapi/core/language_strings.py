"""Language Strings: per-language templates for generated API documentation.

Invariants:
    - All strings are pure data (no IO, no computation beyond formatting)
    - Every Language member has a group header, an operation line and yes/no words
    - parse_language() raises ConfigurationError for unknown tags; tags are
      developer-chosen constants, never user input
"""

from enum import Enum

from genapi.core.errors import ConfigurationError


class Language(str, Enum):
    """Supported documentation languages."""
    EN = "en"
    ZH = "zh"


_GROUP_HEADER: dict[Language, str] = {
    Language.EN: "{description} service:",
    Language.ZH: "{description}服务:",
}

_OPERATION_LINE: dict[Language, str] = {
    Language.EN: (
        'ServiceName: "{name}", NeedAuth: {auth}, Method: {method}, ReqURL: {url},'
        " ReqFormat: {req_format},"
        " RespFormat: {resp_format}"
    ),
    Language.ZH: (
        '服务名: "{name}", 需要认证: {auth}, 请求方法: {method}, 请求地址: {url},'
        " 请求格式: {req_format},"
        " 返回格式: {resp_format}"
    ),
}

_AUTH_WORDS: dict[Language, tuple[str, str]] = {
    Language.EN: ("Yes", "No"),
    Language.ZH: ("是", "不"),
}


def parse_language(tag: "str | Language") -> Language:
    """Resolve a language tag ("en", "zh") or fail fast."""
    try:
        return Language(tag)
    except ValueError:
        raise ConfigurationError(f"not supported language '{tag}'") from None


def format_group_header(language: Language, description: str) -> str:
    return _GROUP_HEADER[language].format(description=description)


def format_operation_line(
    language: Language,
    *,
    name: str,
    requires_auth: bool,
    method: str,
    url: str,
    req_format: str,
    resp_format: str,
) -> str:
    yes, no = _AUTH_WORDS[language]
    return _OPERATION_LINE[language].format(
        name=name,
        auth=yes if requires_auth else no,
        method=method,
        url=url,
        req_format=req_format,
        resp_format=resp_format,
    )
