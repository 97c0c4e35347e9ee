"""Validation rules shared by the entity endpoints."""
from typing import Any, Callable, Dict, Union

from openagenda import validation
from openagenda.entity.image import ImageBytes, ImagePath, ImageUrl

RuleCheck = Callable[[Any, Dict[str, Any]], Union[bool, str]]


def check_multilingual(max_length: int) -> RuleCheck:
    def check(value: Any, context: Dict[str, Any]) -> Union[bool, str]:
        return validation.multilingual(value, max_length)

    return check


def check_image(max_size: float) -> RuleCheck:
    """Local images must exist and weigh at most max_size MB, urls must be absolute."""
    def check(value: Any, context: Dict[str, Any]) -> bool:
        if isinstance(value, ImageUrl):
            return validation.url(value.url)
        if isinstance(value, ImagePath):
            return validation.image(value.path, max_size)
        if isinstance(value, ImageBytes):
            return validation.image(value.stream, max_size)
        return validation.image(value, max_size)

    return check
