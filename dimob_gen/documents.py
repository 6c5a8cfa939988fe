"""Brazilian tax id (CPF/CNPJ) helpers.

Check digits use the mod-11 rule shared by both documents: a remainder
below 2 yields digit 0, otherwise ``11 - remainder``.
"""

from __future__ import annotations

import random
import re

CPF_LENGTH = 11
CNPJ_LENGTH = 14

_CNPJ_WEIGHTS_1 = [5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]
_CNPJ_WEIGHTS_2 = [6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]

_NON_DIGITS = re.compile(r"[^0-9]")


def only_digits(value: str | None) -> str:
    """Strip punctuation from a document number.

    Only ASCII digits survive; superscripts and digits from other scripts are
    dropped like any other character.
    """
    if not value:
        return ""
    return _NON_DIGITS.sub("", value)


def is_ascii_digits(value: str) -> bool:
    """Whether ``value`` is a non-empty string of ASCII digits 0-9."""
    return value.isascii() and value.isdigit()


def _check_digit(digits: list[int], weights: list[int]) -> int:
    remainder = sum(d * w for d, w in zip(digits, weights)) % 11
    return 0 if remainder < 2 else 11 - remainder


def is_valid_cpf(value: str | None) -> bool:
    """Validate a CPF by length and check digits."""
    raw = only_digits(value)
    if len(raw) != CPF_LENGTH or len(set(raw)) == 1:
        return False
    digits = [int(ch) for ch in raw]
    if _check_digit(digits[:9], list(range(10, 1, -1))) != digits[9]:
        return False
    return _check_digit(digits[:10], list(range(11, 1, -1))) == digits[10]


def is_valid_cnpj(value: str | None) -> bool:
    """Validate a CNPJ by length and check digits."""
    raw = only_digits(value)
    if len(raw) != CNPJ_LENGTH or len(set(raw)) == 1:
        return False
    digits = [int(ch) for ch in raw]
    if _check_digit(digits[:12], _CNPJ_WEIGHTS_1) != digits[12]:
        return False
    return _check_digit(digits[:13], _CNPJ_WEIGHTS_2) == digits[13]


def is_valid_tax_id(value: str | None) -> bool:
    """Validate a document that may be either a CPF or a CNPJ."""
    raw = only_digits(value)
    if len(raw) == CPF_LENGTH:
        return is_valid_cpf(raw)
    if len(raw) == CNPJ_LENGTH:
        return is_valid_cnpj(raw)
    return False


def generate_cpf(rng: random.Random | None = None) -> str:
    """Generate a valid unformatted CPF (11 digits)."""
    rng = rng or random
    digits = [rng.randint(0, 9) for _ in range(9)]
    while len(set(digits)) == 1:
        digits = [rng.randint(0, 9) for _ in range(9)]
    digits.append(_check_digit(digits, list(range(10, 1, -1))))
    digits.append(_check_digit(digits, list(range(11, 1, -1))))
    return "".join(str(d) for d in digits)


def generate_cnpj(rng: random.Random | None = None) -> str:
    """Generate a valid unformatted CNPJ (14 digits, branch 0001)."""
    rng = rng or random
    digits = [rng.randint(0, 9) for _ in range(8)] + [0, 0, 0, 1]
    digits.append(_check_digit(digits, _CNPJ_WEIGHTS_1))
    digits.append(_check_digit(digits, _CNPJ_WEIGHTS_2))
    return "".join(str(d) for d in digits)


def format_cpf(value: str) -> str:
    """Format a CPF as XXX.XXX.XXX-XX."""
    raw = only_digits(value)
    return f"{raw[:3]}.{raw[3:6]}.{raw[6:9]}-{raw[9:]}"


def format_cnpj(value: str) -> str:
    """Format a CNPJ as XX.XXX.XXX/XXXX-XX."""
    raw = only_digits(value)
    return f"{raw[:2]}.{raw[2:5]}.{raw[5:8]}/{raw[8:12]}-{raw[12:]}"
