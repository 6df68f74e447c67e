"""Resolved package metadata and remote artifacts."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import ClassVar

from gradle_inspector.models.identifier import Identifier
from gradle_inspector.models.vcs import VcsInfo

# Hex digest lengths per checksum algorithm
HASH_LENGTHS: dict[str, int] = {
    "md5": 32,
    "sha1": 40,
    "sha256": 64,
    "sha384": 96,
    "sha512": 128,
}

_HEX_RE = re.compile(r"[0-9a-fA-F]+")


@dataclass(frozen=True)
class Hash:
    """A checksum value together with the algorithm that produced it."""

    value: str
    algorithm: str

    NONE: ClassVar[Hash]

    @classmethod
    def create(cls, value: str, algorithm: str) -> Hash:
        """Validate *value* as a hex digest for *algorithm*.

        Raises ``ValueError`` if the algorithm is unknown or the value does
        not have the algorithm's digest shape.
        """
        algorithm = algorithm.lower()
        length = HASH_LENGTHS.get(algorithm)
        if length is None:
            raise ValueError(f"unsupported hash algorithm '{algorithm}'")
        if len(value) != length or not _HEX_RE.fullmatch(value):
            raise ValueError(f"'{value}' is not a valid {algorithm} hash")
        return cls(value=value.lower(), algorithm=algorithm)

    @property
    def is_none(self) -> bool:
        return self == Hash.NONE


Hash.NONE = Hash(value="", algorithm="UNKNOWN")


@dataclass(frozen=True)
class RemoteArtifact:
    url: str
    hash: Hash

    EMPTY: ClassVar[RemoteArtifact]


RemoteArtifact.EMPTY = RemoteArtifact(url="", hash=Hash.NONE)


@dataclass
class Package:
    """Metadata of an external dependency.

    A placeholder package carries only its identifier; it stands in for
    packages whose POM could not be located or parsed.
    """

    id: Identifier
    authors: set[str] = field(default_factory=set)
    declared_licenses: set[str] = field(default_factory=set)
    description: str = ""
    homepage_url: str = ""
    binary_artifact: RemoteArtifact = RemoteArtifact.EMPTY
    source_artifact: RemoteArtifact = RemoteArtifact.EMPTY
    vcs: VcsInfo = VcsInfo.EMPTY
    vcs_processed: VcsInfo = VcsInfo.EMPTY

    @classmethod
    def placeholder(cls, id: Identifier) -> Package:
        return cls(id=id)

    @property
    def is_placeholder(self) -> bool:
        return self == Package.placeholder(self.id)
