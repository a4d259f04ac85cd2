"""Template helpers injected into every vitrine template.

``DEFAULT_HELPERS`` is the mapping handed to the kida environment at
startup. Each helper is registered both as a global and as a filter, so
templates can write either form::

    {% if equals(role, "admin") %}...{% end %}
    {{ product.price | format_currency_brl }}
"""

import decimal
import math
import re
from collections.abc import Callable, Mapping
from typing import Any

from babel.numbers import format_currency

_TRUE = "true"
_FALSE = "false"
_PREFIXED_INT = re.compile(r"0[xXoObB][0-9A-Fa-f]+")


def format_currency_brl(value: float) -> str:
    """Format a number as Brazilian Reais.

    Uses pt-BR grouping and decimal separators with the ``R$`` symbol
    in front::

        format_currency_brl(19.99)    → "R$ 19,99"
        format_currency_brl(1234.5)   → "R$ 1.234,50"
        format_currency_brl(-3)       → "-R$ 3,00"

    The space after the symbol is a non-breaking space (U+00A0).
    Half cents round away from zero (``0.125`` gives ``R$ 0,13``).
    """
    with decimal.localcontext(rounding=decimal.ROUND_HALF_UP):
        return format_currency(value, "BRL", locale="pt_BR")


# -- Loose equality --------------------------------------------------------


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float))


def _number_to_string(value: float) -> str:
    if isinstance(value, bool):
        return _TRUE if value else _FALSE
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return _number_to_string(value)
    if isinstance(value, (list, tuple)):
        return ",".join(_to_string(item) for item in value)
    return str(value)


def _to_number(value: str | float) -> float:
    """Numeric value of a scalar; NaN when a string does not parse."""
    if not isinstance(value, str):
        return float(value)
    text = value.strip()
    if not text:
        return 0.0
    # Digit separators are not part of the numeric string grammar
    if "_" in text:
        return math.nan
    try:
        if _PREFIXED_INT.fullmatch(text):
            return float(int(text, 0))
        number = float(text)
    except ValueError:
        return math.nan
    # float() also accepts "nan", "inf" and "infinity" in any case
    if math.isnan(number):
        return math.nan
    if math.isinf(number) and text.lstrip("+-") != "Infinity":
        return math.nan
    return number


def equals(a: Any, b: Any) -> bool:
    """Loose equality: values are equal after implicit type coercion.

    - ``None`` equals only ``None``.
    - Two strings compare as strings.
    - A string against a number or bool compares numerically, so
      ``equals(1, "1")`` and ``equals(True, "1")`` are true. Blank
      strings count as 0; ``0x``, ``0o`` and ``0b`` prefixes read as
      integers; strings that are not numbers never match.
    - A list or tuple against a scalar compares through its
      comma-joined string form (``equals(["a", "b"], "a,b")``).
    - Anything else falls back to ``==``.
    """
    if a is None or b is None:
        return a is None and b is None
    if _is_scalar(a) and _is_scalar(b):
        if isinstance(a, str) and isinstance(b, str):
            return a == b
        return _to_number(a) == _to_number(b)
    if _is_scalar(a):
        return equals(a, _to_string(b))
    if _is_scalar(b):
        return equals(_to_string(a), b)
    return bool(a == b)


DEFAULT_HELPERS: Mapping[str, Callable[..., Any]] = {
    "equals": equals,
    "format_currency_brl": format_currency_brl,
}
