"""Description Generator: plain-text documentation for a group's operations.

Invariants:
    - One header line, then one line per operation in registration order
    - Request/response formats come from the operations' example values
    - Unsupported language tags raise ConfigurationError (never a partial result)
"""

from typing import TYPE_CHECKING

from genapi.core.language_strings import (
    Language,
    format_group_header,
    format_operation_line,
    parse_language,
)

if TYPE_CHECKING:
    from genapi.api.group import OperationGroup
    from genapi.api.operation import Operation


def describe_operation(operation: "Operation", language: "str | Language" = Language.EN) -> str:
    lang = parse_language(language)
    return format_operation_line(
        lang,
        name=operation.description,
        requires_auth=operation.requires_auth,
        method=operation.method.value,
        url=operation.url,
        req_format=operation.request_format(),
        resp_format=operation.response_format(),
    )


def describe_group(
    group: "OperationGroup", tab: str = "", language: "str | Language | None" = None,
) -> str:
    """Render the group header and every operation line.

    Empty tab/language fall back to the group's DispatchConfig.
    """
    lang = parse_language(language or group.config.docs_language)
    tab = tab or " " * group.config.docs_indent
    lines = [format_group_header(lang, group.description)]
    lines.extend(f"{tab}{describe_operation(op, lang)}" for op in group.operations)
    return "\n".join(lines) + "\n"
