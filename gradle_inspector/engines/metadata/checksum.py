"""Remote checksum lookup for derived artifact URLs."""

from __future__ import annotations

import httpx
import structlog

from gradle_inspector.exceptions import ChecksumUnavailable
from gradle_inspector.models import Hash, RemoteArtifact

log = structlog.get_logger("gradle_inspector.engine")

DEFAULT_ALGORITHM = "sha1"


def parse_checksum(checksum: str, algorithm: str) -> Hash:
    """Return the first whitespace-separated token that is a valid *algorithm* hash.

    Maven checksum files sometimes carry a file name or other text before or
    after the digest. Returns ``Hash.NONE`` if no token qualifies.
    """
    for token in checksum.split():
        try:
            return Hash.create(token, algorithm)
        except ValueError:
            continue
    return Hash.NONE


async def fetch_checksum(client: httpx.AsyncClient, url: str, algorithm: str) -> Hash:
    """Fetch ``<url>.<algorithm>`` once.

    Raises :class:`ChecksumUnavailable` on transport errors, non-2xx
    responses, or a body without a valid hash.
    """
    checksum_url = f"{url}.{algorithm}"
    try:
        resp = await client.get(checksum_url)
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        raise ChecksumUnavailable(f"{checksum_url}: {exc}") from exc

    hash = parse_checksum(resp.text, algorithm)
    if hash.is_none:
        raise ChecksumUnavailable(f"{checksum_url}: no valid {algorithm} hash in response")
    return hash


async def create_remote_artifact(
    client: httpx.AsyncClient, url: str, algorithm: str = DEFAULT_ALGORITHM
) -> RemoteArtifact:
    """Build a :class:`RemoteArtifact` for *url* with a remotely looked up hash.

    An unavailable checksum yields ``Hash.NONE``; it is never an error.
    """
    # TODO: Authenticate against private repositories, reusing Gradle's credentials.
    try:
        hash = await fetch_checksum(client, url, algorithm)
    except ChecksumUnavailable as exc:
        log.debug("metadata.checksum_unavailable", url=url, reason=str(exc))
        hash = Hash.NONE
    return RemoteArtifact(url=url, hash=hash)
