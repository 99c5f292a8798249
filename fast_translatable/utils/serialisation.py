import re
from datetime import datetime

from bson import ObjectId


def serialise(val):
    if isinstance(val, ObjectId):
        return str(val)
    if isinstance(val, datetime):
        return val.isoformat()
    elif isinstance(val, list):
        return [serialise(item) for item in val]
    elif isinstance(val, dict):
        return {key: serialise(value) for key, value in val.items()}

    return val


def pascal_case_to_snake_case(pascal: type | str) -> str:
    """
    Convert a class name (CamelCase or PascalCase) to snake_case.

    Args:
        pascal: The class or class name as a string.

    Returns:
        str: The snake_case version of the class name.
    """
    if not isinstance(pascal, str):
        pascal = pascal.__name__
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', pascal)
    return re.sub('([a-z0-9])([A-Z])', r'\1_\2', s1).lower()


def get_exception_error_type(exception: Exception) -> str:
    name = exception.__class__.__name__
    for suffix in ("Exception", "Error"):
        if name.endswith(suffix) and name != suffix:
            name = name[: -len(suffix)]
            break
    return pascal_case_to_snake_case(name)


def like_to_regex(pattern: str) -> str:
    """
    Translate an SQL LIKE pattern into an anchored regular expression.

    `%` matches any run of characters, `_` matches exactly one character;
    everything else is matched literally.
    """
    parts = []
    for char in pattern:
        if char == '%':
            parts.append('.*')
        elif char == '_':
            parts.append('.')
        else:
            parts.append(re.escape(char))
    return '^' + ''.join(parts) + '$'
