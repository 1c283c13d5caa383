from pixelcache.core.config.constants import ETAG_CHECKSUM_MODULUS, ETAG_PREFIX_BYTES


def create_etag(data: bytes) -> str:
    """
    Weak validator: W/"<length in hex>-<sum of first 64 bytes mod 65536>".

    Cheap and stable for identical bytes; not collision resistant.
    """
    checksum = sum(data[:ETAG_PREFIX_BYTES]) % ETAG_CHECKSUM_MODULUS
    return f'W/"{len(data):x}-{checksum}"'
