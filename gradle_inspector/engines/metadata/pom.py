"""Effective Maven POM models: parent inheritance plus property interpolation."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from pathlib import Path

from gradle_inspector.exceptions import DescriptorParseError

_PROP_RE = re.compile(r"\$\{([^}]+)\}")

_MAX_INTERPOLATION_PASSES = 10
_MAX_PARENT_DEPTH = 50

_URL_APPEND_ATTR = "child.project.url.inherit.append.path"

ParentLocator = Callable[[str, str, str], Path | None]


def _text(element: ET.Element | None) -> str:
    if element is None:
        return ""
    return element.text.strip() if element.text else ""


def _strip_namespaces(root: ET.Element) -> None:
    """Drop ``{namespace}`` prefixes so namespaced and plain POMs read alike."""
    for el in root.iter():
        if isinstance(el.tag, str) and "}" in el.tag:
            el.tag = el.tag.split("}", 1)[1]


@dataclass(frozen=True)
class License:
    name: str = ""
    url: str = ""
    comments: str = ""


@dataclass(frozen=True)
class Developer:
    name: str = ""
    email: str = ""
    organization: str = ""


@dataclass(frozen=True)
class Scm:
    connection: str = ""
    developer_connection: str = ""
    url: str = ""
    tag: str = ""

    def merged_with(self, parent: Scm) -> Scm:
        """Fill blank fields from *parent*."""
        return Scm(
            connection=self.connection or parent.connection,
            developer_connection=self.developer_connection or parent.developer_connection,
            url=self.url or parent.url,
            tag=self.tag or parent.tag,
        )


@dataclass(frozen=True)
class ParentRef:
    group_id: str
    artifact_id: str
    version: str

    def coordinates(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


@dataclass
class RawPom:
    """A single POM file as written, before inheritance."""

    path: Path
    group_id: str = ""
    artifact_id: str = ""
    version: str = ""
    name: str = ""
    description: str = ""
    url: str = ""
    url_append_path: bool = True
    parent: ParentRef | None = None
    properties: dict[str, str] = field(default_factory=dict)
    licenses: list[License] = field(default_factory=list)
    developers: list[Developer] = field(default_factory=list)
    organization: str = ""
    scm: Scm | None = None


def parse_pom(path: Path) -> RawPom:
    """Parse *path* into a :class:`RawPom`.

    Raises :class:`DescriptorParseError` if the file cannot be read or is not
    a POM.
    """
    try:
        root = ET.fromstring(path.read_bytes())
    except (OSError, ET.ParseError) as exc:
        raise DescriptorParseError(f"Unable to parse '{path}': {exc}") from exc

    _strip_namespaces(root)
    if root.tag != "project":
        raise DescriptorParseError(f"'{path}' is not a POM (root element '{root.tag}').")

    parent = None
    parent_el = root.find("parent")
    if parent_el is not None:
        parent = ParentRef(
            group_id=_text(parent_el.find("groupId")),
            artifact_id=_text(parent_el.find("artifactId")),
            version=_text(parent_el.find("version")),
        )

    props: dict[str, str] = {}
    props_el = root.find("properties")
    if props_el is not None:
        for child in props_el:
            if isinstance(child.tag, str):
                props[child.tag] = _text(child)

    scm = None
    scm_el = root.find("scm")
    if scm_el is not None:
        scm = Scm(
            connection=_text(scm_el.find("connection")),
            developer_connection=_text(scm_el.find("developerConnection")),
            url=_text(scm_el.find("url")),
            tag=_text(scm_el.find("tag")),
        )

    return RawPom(
        path=path,
        group_id=_text(root.find("groupId")),
        artifact_id=_text(root.find("artifactId")),
        version=_text(root.find("version")),
        name=_text(root.find("name")),
        description=_text(root.find("description")),
        url=_text(root.find("url")),
        url_append_path=root.get(_URL_APPEND_ATTR, "true").strip().lower() != "false",
        parent=parent,
        properties=props,
        licenses=[
            License(
                name=_text(el.find("name")),
                url=_text(el.find("url")),
                comments=_text(el.find("comments")),
            )
            for el in root.findall("licenses/license")
        ],
        developers=[
            Developer(
                name=_text(el.find("name")),
                email=_text(el.find("email")),
                organization=_text(el.find("organization")),
            )
            for el in root.findall("developers/developer")
        ],
        organization=_text(root.find("organization/name")),
        scm=scm,
    )


@dataclass
class EffectiveModel:
    """A POM with its parents merged in and ``${...}`` references resolved.

    ``original_scm`` is the SCM block as declared along the lineage, without
    the artifactId path segments Maven appends to inherited SCM URLs.
    """

    group_id: str
    artifact_id: str
    version: str
    name: str
    description: str
    url: str
    licenses: list[License]
    developers: list[Developer]
    organization: str
    original_scm: Scm | None
    lineage: list[RawPom]


def _interpolate(value: str, context: dict[str, str]) -> str:
    for _ in range(_MAX_INTERPOLATION_PASSES):
        resolved = _PROP_RE.sub(lambda m: context.get(m.group(1), m.group(0)), value)
        if resolved == value:
            break
        value = resolved
    return value


class PomModelBuilder:
    """Build :class:`EffectiveModel` instances.

    *locate* maps parent coordinates to a local POM file, or ``None``.
    Parsed POMs are memoized per builder, as many artifacts share parents.
    """

    def __init__(self, locate: ParentLocator) -> None:
        self._locate = locate
        self._parsed: dict[Path, RawPom] = {}

    def build(self, path: Path) -> EffectiveModel:
        lineage = self._lineage(path)
        child = lineage[0]

        def inherited(attr: str):
            return next((getattr(p, attr) for p in lineage if getattr(p, attr)), None)

        group_id = child.group_id or (child.parent.group_id if child.parent else "")
        version = child.version or (child.parent.version if child.parent else "")

        original_scm: Scm | None = None
        for pom in lineage:
            if pom.scm is None:
                continue
            original_scm = pom.scm if original_scm is None else original_scm.merged_with(pom.scm)

        context = self._context(lineage, group_id, version)

        def interp(value: str) -> str:
            return _interpolate(value, context) if value else value

        licenses = inherited("licenses") or []
        developers = inherited("developers") or []

        return EffectiveModel(
            group_id=interp(group_id),
            artifact_id=interp(child.artifact_id),
            version=interp(version),
            name=interp(child.name),
            description=interp(inherited("description") or ""),
            url=interp(self._effective_url(lineage)),
            licenses=[
                License(name=interp(lic.name), url=interp(lic.url), comments=interp(lic.comments))
                for lic in licenses
            ],
            developers=[
                Developer(
                    name=interp(dev.name),
                    email=interp(dev.email),
                    organization=interp(dev.organization),
                )
                for dev in developers
            ],
            organization=interp(inherited("organization") or ""),
            original_scm=(
                replace(
                    original_scm,
                    connection=interp(original_scm.connection),
                    developer_connection=interp(original_scm.developer_connection),
                    url=interp(original_scm.url),
                    tag=interp(original_scm.tag),
                )
                if original_scm is not None
                else None
            ),
            lineage=lineage,
        )

    def _parse(self, path: Path) -> RawPom:
        pom = self._parsed.get(path)
        if pom is None:
            pom = parse_pom(path)
            self._parsed[path] = pom
        return pom

    def _lineage(self, path: Path) -> list[RawPom]:
        """Return the POM at *path* followed by its parents, nearest first."""
        lineage = [self._parse(path)]
        seen = {path.resolve()}

        while lineage[-1].parent is not None:
            ref = lineage[-1].parent
            if len(lineage) > _MAX_PARENT_DEPTH:
                raise DescriptorParseError(f"Parent chain of '{path}' is too deep.")

            parent_path = self._locate(ref.group_id, ref.artifact_id, ref.version)
            if parent_path is None:
                raise DescriptorParseError(
                    f"Unable to find the parent POM '{ref.coordinates()}' in the local Maven "
                    "repository or Gradle cache."
                )
            if parent_path.resolve() in seen:
                raise DescriptorParseError(
                    f"Parent POM cycle detected at '{ref.coordinates()}' for '{path}'."
                )
            seen.add(parent_path.resolve())
            lineage.append(self._parse(parent_path))

        return lineage

    @staticmethod
    def _effective_url(lineage: list[RawPom]) -> str:
        url = ""
        append = True
        for pom in reversed(lineage):
            if pom.url:
                url = pom.url
            elif url and append:
                url = f"{url.rstrip('/')}/{pom.artifact_id}"
            append = pom.url_append_path
        return url

    @staticmethod
    def _context(lineage: list[RawPom], group_id: str, version: str) -> dict[str, str]:
        child = lineage[0]
        context: dict[str, str] = {}
        for pom in reversed(lineage):
            context.update(pom.properties)

        project = {
            "groupId": group_id,
            "artifactId": child.artifact_id,
            "version": version,
            "name": child.name,
            "url": child.url,
        }
        for key, value in project.items():
            context[f"project.{key}"] = value
            context[f"pom.{key}"] = value
            context.setdefault(key, value)

        if child.parent is not None:
            context["project.parent.groupId"] = child.parent.group_id
            context["project.parent.artifactId"] = child.parent.artifact_id
            context["project.parent.version"] = child.parent.version
        return context
