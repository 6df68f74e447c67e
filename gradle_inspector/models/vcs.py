"""Version control coordinates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class VcsInfo:
    type: str = ""
    url: str = ""
    revision: str = ""
    path: str = ""

    EMPTY: ClassVar[VcsInfo]

    @property
    def is_empty(self) -> bool:
        return self == VcsInfo.EMPTY


VcsInfo.EMPTY = VcsInfo()
