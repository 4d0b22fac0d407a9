from __future__ import annotations

from typing import Iterable, Mapping

# customer notes 안에 태그 한 줄로 저장: [[BWE_CATEGORIES:focus,sleep]]
# 태그 밖의 notes 내용은 건드리지 않는다
TAG_START = "[[BWE_CATEGORIES:"
TAG_END = "]]"


def extract_categories(notes: str | None) -> list[str]:
    s = notes or ""
    i = s.find(TAG_START)
    if i == -1:
        return []
    j = s.find(TAG_END, i + len(TAG_START))
    if j == -1:
        return []
    raw = s[i + len(TAG_START):j].strip()
    return [c.strip() for c in raw.split(",") if c.strip()] if raw else []


def set_categories(notes: str | None, categories: Iterable[str]) -> str:
    s = notes or ""
    tag = f"{TAG_START}{','.join(categories)}{TAG_END}"

    i = s.find(TAG_START)
    j = s.find(TAG_END, i + len(TAG_START)) if i != -1 else -1
    if i == -1 or j == -1:
        return f"{s}\n{tag}" if s else tag
    return s[:i] + tag + s[j + len(TAG_END):]


def clean_categories(categories: Iterable[object]) -> list[str]:
    """trim + lowercase + 순서 유지 dedupe"""
    out: list[str] = []
    for c in categories:
        value = str(c or "").strip().lower()
        if value and value not in out:
            out.append(value)
    return out


def limit_for_group(group_id: int, limits: Mapping[int, int], default: int) -> int:
    return limits.get(int(group_id), default)
