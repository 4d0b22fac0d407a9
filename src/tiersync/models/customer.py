from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DirectoryCustomer:
    external_id: int
    email: str
    group_id: int = 0
    notes: str = ""


@dataclass(frozen=True)
class CreatedCustomer:
    customer_id: int
    # modern API는 생성 시점에 group을 같이 넣을 수 있다 (legacy는 불가)
    group_applied: bool


@dataclass(frozen=True)
class ReconciliationResult:
    customer_id: Optional[int]
    applied_group_id: Optional[int]
    created: bool
