"""
Brazilian taxpayer identifiers (CNPJ / CPF) found in report text.
Fixed-format matching only; check digits are not validated.
"""

import re
from typing import Dict, Iterable, List

CNPJ_PATTERN = re.compile(r"(?<!\d)\d{2}\.\d{3}\.\d{3}/\d{4}-\d{2}(?!\d)")
CPF_PATTERN = re.compile(r"(?<![\d./])\d{3}\.\d{3}\.\d{3}-\d{2}(?!\d)")


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


def extract_identifiers(texts: Iterable[str]) -> Dict[str, List[str]]:
    """Collect CNPJs and CPFs across texts, first-seen order, no duplicates."""
    cnpjs: List[str] = []
    cpfs: List[str] = []
    for text in texts:
        if not text:
            continue
        cnpjs.extend(CNPJ_PATTERN.findall(text))
        cpfs.extend(CPF_PATTERN.findall(text))
    return {"cnpjs": _unique(cnpjs), "cpfs": _unique(cpfs)}
