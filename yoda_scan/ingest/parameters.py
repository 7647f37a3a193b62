from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Tuple

from yoda_scan.models.scan import ParameterSet


def parse_parameter_tokens(tokens: Iterable[str]) -> Tuple[ParameterSet, List[str]]:
    """
    Pair up a whitespace token stream into (name, value).

    Returns the ParameterSet and a list of warnings:
      - a repeated name keeps its first value
      - a dangling trailing name without value is dropped
    """
    warnings: List[str] = []
    pairs: List[Tuple[str, str]] = []
    seen = set()
    it = iter(tokens)
    for name in it:
        try:
            value = next(it)
        except StopIteration:
            warnings.append(f"dangling parameter name '{name}' without value at end of file (dropped)")
            break
        if name in seen:
            warnings.append(f"repeated parameter '{name}'={value} ignored (first value kept)")
            continue
        seen.add(name)
        pairs.append((name, value))
    return ParameterSet(pairs), warnings


def read_parameter_file(path: str | Path, numeric: bool = False) -> Tuple[ParameterSet, List[str]]:
    """
    Read a parameter file: whitespace-separated name/value pairs to end of file.

    No quoting, no escaping, no comments. With ``numeric=True`` every value
    must parse as a float (ValueError otherwise).
    """
    p = Path(path)
    with open(p, "r", encoding="utf-8", errors="replace") as f:
        tokens = [tok for line in f for tok in line.split()]
    params, warnings = parse_parameter_tokens(tokens)
    if numeric:
        params.numeric()
    return params, warnings
