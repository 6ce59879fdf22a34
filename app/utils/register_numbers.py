"""
Register number helpers
"""
import re

_YEAR_PREFIX = re.compile(r"^\s*(\d{2})")


def infer_class_year(register_number: str) -> int:
    """
    Admission year from the first two digits of a register number

    "23127001" -> 2023

    Raises:
        ValueError: If the register number does not start with two digits
    """
    match = _YEAR_PREFIX.match(register_number or "")
    if not match:
        raise ValueError(f"Cannot infer class year from register number '{register_number}'")
    return 2000 + int(match.group(1))
