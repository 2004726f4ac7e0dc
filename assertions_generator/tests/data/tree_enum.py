from __future__ import annotations

from enum import Enum


class TreeEnum(Enum):
    OAK = "oak"
    ACORN = "acorn"

    def get_parent(self) -> TreeEnum | None:
        return TreeEnum.OAK if self is TreeEnum.ACORN else None
