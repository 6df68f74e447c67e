"""Package identifiers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Identifier:
    """Names a package or project: ``type:namespace:name:version``.

    ``type`` is the ecosystem ("Maven" for external artifacts, "Gradle" for
    sibling project modules).
    """

    type: str
    namespace: str
    name: str
    version: str

    def to_coordinates(self) -> str:
        return f"{self.type}:{self.namespace}:{self.name}:{self.version}"

    @classmethod
    def from_coordinates(cls, coordinates: str) -> Identifier:
        """Parse ``type:namespace:name:version``; missing trailing parts are empty."""
        parts = coordinates.split(":", 3)
        parts += [""] * (4 - len(parts))
        return cls(*parts)

    def __str__(self) -> str:
        return self.to_coordinates()
