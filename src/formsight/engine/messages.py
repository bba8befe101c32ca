"""Human-readable text for validation messages."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from formsight.models.messages import WARNING_PREFIX, ValidationMessage

MessageFormatter = Callable[[ValidationMessage], str]
MessageRegistry = Mapping[str, str | MessageFormatter]


def default_message_text(msg: ValidationMessage, *, strip_warning_prefix: bool = False) -> str:
    """Fallback text for well-known kinds; otherwise the kind, humanised."""
    params = msg.params
    kind = msg.kind

    if kind == "required":
        return "This field is required"
    if kind == "email":
        return "Please enter a valid email address"
    if kind == "min_length":
        return f"Minimum {params.get('min_length') or 0} characters required"
    if kind == "max_length":
        return f"Maximum {params.get('max_length') or 0} characters allowed"
    if kind == "min":
        return f"Minimum value is {params.get('min') or 0}"
    if kind == "max":
        return f"Maximum value is {params.get('max') or 0}"
    if kind == "pattern":
        return "Invalid format"

    if strip_warning_prefix:
        kind = kind.removeprefix(WARNING_PREFIX)
    return kind.replace("_", " ")


def resolve_message_text(
    msg: ValidationMessage,
    registry: MessageRegistry | None = None,
    *,
    strip_warning_prefix: bool = False,
) -> str:
    """Text to display for *msg*.

    Resolution order:
        1. The message's own ``message``, if non-empty.
        2. A registry entry for the kind: a string, or a callable given the message.
        3. :func:`default_message_text`.
    """
    if msg.message:
        return msg.message

    if registry:
        entry = registry.get(msg.kind)
        if entry is not None:
            if callable(entry):
                return entry(msg)
            return entry

    return default_message_text(msg, strip_warning_prefix=strip_warning_prefix)
