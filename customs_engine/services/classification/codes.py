"""Harmonized tariff code helpers.

Codes arrive in many shapes ("4820.10.2060", "4820102060", "9608.60.00",
"901.10.0000" after a spreadsheet ate the leading zero). Comparison is always
digit-wise, and repair only ever applies structural fixes:

    - 6 or 8 digits (HS6 / HTS8 without statistical suffix): right-pad with 0
    - first dotted group of 3 digits (lost leading zero): left-pad one 0
    - more than 10 digits where all extra trailing digits are 0: strip them

Anything else is not repairable and is left for manual review.
"""
import re
from typing import Optional

CODE_LENGTH = 10

_NON_DIGIT_RE = re.compile(r"[^0-9]")


def clean_code(code: Optional[str]) -> str:
    """Strip everything but digits."""
    if code is None:
        return ""
    return _NON_DIGIT_RE.sub("", str(code))


def codes_equal(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two codes digit-wise ("4820.10.2060" == "4820102060")."""
    return clean_code(a) == clean_code(b)


def format_code(code: Optional[str]) -> str:
    """Dotted display form of a 10-digit code (4820102010 -> 4820.10.2010).

    Codes of any other length are returned as bare digits.
    """
    digits = clean_code(code)
    if len(digits) == CODE_LENGTH:
        return f"{digits[:4]}.{digits[4:6]}.{digits[6:]}"
    return digits


def repair_code(code: Optional[str]) -> Optional[str]:
    """Structurally repair a malformed code to 10 digits.

    Args:
        code: Raw code as stored on a record

    Returns:
        10-digit code, or None when the code is empty or cannot be repaired
        without guessing
    """
    if code is None:
        return None
    raw = str(code).strip()
    digits = clean_code(raw)
    if not digits:
        return None

    groups = [g for g in re.split(r"[.\s]", raw) if g]
    if len(groups) > 1 and len(clean_code(groups[0])) == 3:
        # a 3-digit heading group is only a lost leading zero on a 9-digit code
        if len(digits) != CODE_LENGTH - 1:
            return None
        digits = "0" + digits

    if len(digits) == CODE_LENGTH:
        return digits
    if len(digits) in (6, 8):
        return digits.ljust(CODE_LENGTH, "0")
    if len(digits) > CODE_LENGTH and set(digits[CODE_LENGTH:]) == {"0"}:
        return digits[:CODE_LENGTH]
    return None
