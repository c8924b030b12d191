"""
Cache key derivation for object identities.

Key format: ``region:bucket:key:version``

Unset region/version render as empty segments, so an identity without a
version always ends in ``:``. Segments are not escaped: a bucket or key
containing ``:`` can collide with another identity. Existing cached data
depends on this exact format, so it must not change.
"""

from __future__ import annotations

from s3ds.types import ObjectIdentity

KEY_DELIMITER = ":"


def encode_cache_key(identity: ObjectIdentity, region: str = "") -> str:
    """Derive the cache key for an identity.

    Args:
        identity: Object being addressed.
        region: Configured region, used when the identity carries none.

    Returns:
        Deterministic key string.
    """
    effective_region = identity.region if identity.region is not None else region
    return KEY_DELIMITER.join(
        (
            effective_region or "",
            identity.bucket,
            identity.key,
            identity.version or "",
        )
    )


class CacheKeyCodec:
    """Binds a configured region to encode_cache_key."""

    def __init__(self, region: str = "") -> None:
        self.region = region or ""

    def encode(self, identity: ObjectIdentity) -> str:
        return encode_cache_key(identity, self.region)
