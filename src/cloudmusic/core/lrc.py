# core/lrc.py
from __future__ import annotations

import re
from bisect import bisect_right
from typing import List, Tuple

_TS_RE = re.compile(r"\[(\d+):(\d+)(?:\.(\d+))?\]")
_META_TAGS = ("[ar:", "[ti:", "[al:", "[by:", "[offset:", "[au:")


def _ts_to_ms(mm: str, ss: str, frac: str | None) -> int:
    ms = 0
    if frac:
        frac = frac.strip()
        if len(frac) == 1:
            ms = int(frac) * 100
        elif len(frac) == 2:
            ms = int(frac) * 10
        else:
            ms = int(frac[:3])
    return (int(mm) * 60 + int(ss)) * 1000 + ms


def parse_lrc(lrc_text: str) -> List[Tuple[int, str]]:
    """
    Returns list of (time_ms, text) sorted by time.
    Supports multiple timestamps per line; metadata tags are skipped.
    """
    out: List[Tuple[int, str]] = []
    if not lrc_text:
        return out

    for raw_line in lrc_text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(_META_TAGS):
            continue

        matches = list(_TS_RE.finditer(line))
        if not matches:
            continue

        text = _TS_RE.sub("", line).strip()
        if not text:
            continue

        for m in matches:
            out.append((_ts_to_ms(m.group(1), m.group(2), m.group(3)), text))

    out.sort(key=lambda x: x[0])
    return out


def line_at(lines: List[Tuple[int, str]], pos_ms: int) -> str:
    if not lines:
        return ""
    i = bisect_right([t for t, _ in lines], pos_ms) - 1
    return lines[i][1] if i >= 0 else ""
