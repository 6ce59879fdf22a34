"""
Department name standardization

Registrar exports spell the same course many ways ("Bsc.CS", "BSC CS",
"B.Sc DCFS"). Stats and imports group by the canonical names below.
"""
import re
from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple

STANDARD_DEPARTMENTS = [
    "BSc Computer Science",
    "BSc CS with CS",
    "BSc CS (AI&DS)",
    "BSc Cyber Security",
    "BCA",
    "BSc IT",
    "BSc ECS",
    "BSc CS DA",
    "BSc Computer Technology",
    "BSc CT",
    "MSc ECS",
    "MSc IT",
    "MSc Computer Science",
    "BCOM CS",
    "BSc CS with Cyber Security",
    "BSc DCFS",
]

# Whole-value spellings that no substring rule picks up
EXACT_NAMES = {
    "bca": "BCA",
    "bsc.cs": "BSc Computer Science",
    "msc.ecs": "MSc ECS",
    "bscecs": "BSc ECS",
    "b.sc dcf": "BSc DCFS",
    "b.sc dcfs": "BSc DCFS",
    "b. sc cyber security": "BSc Cyber Security",
}

# (name, all of, none of, any of) - first match wins, so order matters
Rule = Tuple[str, Tuple[str, ...], Tuple[str, ...], Optional[Tuple[str, ...]]]

RULES: List[Rule] = [
    ("BSc CS with CS", ("bsc", "cs with cs"), (), None),
    ("BSc CS (AI&DS)", ("bsc", "ai", "ds"), (), ("ai&ds", "ai & ds", "ai/ds")),
    ("BSc CS with Cyber Security", ("bsc", "cs", "cyber", "security"), (), None),
    ("BSc Cyber Security", ("bsc", "cyber", "security"), (), None),
    ("BSc CS DA", ("bsc", "cs", "da"), (), None),
    ("BSc ECS", ("bsc", "ecs"), ("msc",), None),
    ("BSc CT", ("bsc", "ct"), ("msc",), None),
    ("BSc IT", ("bsc", "it"), ("msc",), None),
    ("BSc Computer Technology", ("bsc", "computer", "technology"), (), None),
    ("BSc Computer Science", ("bsc", "computer", "science"), (), None),
    ("BSc DCFS", ("bsc", "dcfs"), (), None),
    ("BSc Computer Science", ("bsc", "cs"), ("ai", "ds", "cyber", "da"), None),
    ("MSc ECS", ("msc", "ecs"), (), None),
    ("MSc IT", ("msc", "it"), (), None),
    ("MSc Computer Science", ("msc", "computer", "science"), (), None),
    ("BSc CS (AI&DS)", ("aids",), (), None),
    ("BSc CS (AI&DS)", ("bsc", "ai", "ds"), (), None),
    ("BCOM CS", ("bcom", "cs"), (), None),
]


def _matches(text: str, rule: Rule) -> bool:
    _, required, excluded, any_of = rule
    if not all(part in text for part in required):
        return False
    if any(part in text for part in excluded):
        return False
    return any_of is None or any(part in text for part in any_of)


def standardize_department_name(department: Optional[str]) -> str:
    """
    Map a free-form department value to its canonical name

    Unrecognized values come back trimmed with each word capitalized;
    blank values become "Unknown".
    """
    if not department or not department.strip():
        return "Unknown"

    cleaned = department.strip()
    normalized = cleaned.lower()

    if normalized in EXACT_NAMES:
        return EXACT_NAMES[normalized]

    for rule in RULES:
        if _matches(normalized, rule):
            return rule[0]

    return re.sub(r"\b\w", lambda m: m.group(0).upper(), cleaned)


def get_standardized_departments() -> List[str]:
    return list(STANDARD_DEPARTMENTS)


def count_departments(departments: Iterable[Optional[str]]) -> Dict[str, int]:
    """Count students per canonical department name"""
    return dict(Counter(standardize_department_name(d) for d in departments))
