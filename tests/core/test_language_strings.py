"""Language Strings tests: every language has complete templates; unknown tags fail fast."""

import pytest

from genapi.core.errors import ConfigurationError
from genapi.core.language_strings import (
    Language,
    format_group_header,
    format_operation_line,
    parse_language,
)


def test_parse_language_accepts_tags_and_members():
    assert parse_language("en") is Language.EN
    assert parse_language("zh") is Language.ZH
    assert parse_language(Language.ZH) is Language.ZH


@pytest.mark.parametrize("tag", ["fr", "", "english", "EN"])
def test_parse_language_rejects_unknown_tags(tag):
    with pytest.raises(ConfigurationError, match="not supported language"):
        parse_language(tag)


def test_group_header_covers_all_languages():
    for language in Language:
        header = format_group_header(language, "User")
        assert header.startswith("User")


def test_operation_line_covers_all_languages():
    for language in Language:
        line = format_operation_line(
            language, name="login", requires_auth=False, method="POST",
            url="/v1/usr/login", req_format="{}", resp_format="[]",
        )
        assert '"login"' in line
        assert "/v1/usr/login" in line
        assert line.endswith("[]")


def test_auth_words():
    kwargs = dict(name="n", method="GET", url="/u", req_format="{}", resp_format="{}")
    assert "NeedAuth: Yes" in format_operation_line(Language.EN, requires_auth=True, **kwargs)
    assert "NeedAuth: No" in format_operation_line(Language.EN, requires_auth=False, **kwargs)
    assert "需要认证: 是" in format_operation_line(Language.ZH, requires_auth=True, **kwargs)
    assert "需要认证: 不" in format_operation_line(Language.ZH, requires_auth=False, **kwargs)
