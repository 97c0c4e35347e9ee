"""Multilingual field values: mapping of ISO 639-1 code to text."""
from typing import Any, Dict, Optional

from openagenda import registry, validation
from openagenda.exceptions import InvalidLanguageError
from openagenda.markup import cleanup_html, html_to_markdown, no_html

ELLIPSIS = ' ...'


def truncate(text: str, max_length: int) -> str:
    """
    Truncate text so it never exceeds max_length.

    Longer text is cut to ``max_length - 4`` characters and suffixed with
    ``" ..."``, so a truncated text is exactly max_length long and truncating
    it again is a no-op.
    """
    if len(text) > max_length:
        return text[:max_length - len(ELLIPSIS)] + ELLIPSIS
    return text


def set_multilingual(
    value: Any,
    clean: bool = False,
    max_length: Optional[int] = None,
    rich: bool = False,
    lang: Optional[str] = None
) -> Optional[Dict[str, Any]]:
    """
    Return a multilingual value, cleaned and truncated.

    Args:
        value: Plain string, mapping of language to text, or None
        clean: Remove html tags and extra spaces
        max_length: Truncate each text to this length
        rich: Sanitize html and convert it to markdown
        lang: Language of a plain string value (default: registry default)

    Returns:
        Mapping of language code to text, or None

    Raises:
        InvalidLanguageError: If a language code is not ISO 639-1
    """
    if value is None:
        return None

    if isinstance(value, str):
        value = {lang or registry.get_default_lang(): value}

    if not isinstance(value, dict):
        return value

    result = {}
    for code, text in value.items():
        if not validation.lang(code):
            raise InvalidLanguageError(f'`{code}` is an invalid ISO 639-1 language code.')

        if isinstance(text, str):
            if clean:
                text = no_html(text, keep_newline=False)
            elif rich:
                text = html_to_markdown(cleanup_html(text))
            if max_length:
                text = truncate(text, max_length)

        result[code] = text

    return result
