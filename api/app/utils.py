import base64, hashlib, json, re

_DATA_URI_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,")

def strip_data_uri(data_url: str) -> str:
    # accepts "data:image/png;base64,....." or the bare payload
    return _DATA_URI_PREFIX.sub("", data_url.strip(), count=1)

def b64image_to_bytes(data_url: str) -> bytes:
    """Decode a base64 image payload, with or without a data URI prefix.

    Raises ``binascii.Error`` on malformed base64.
    """
    payload = "".join(strip_data_uri(data_url).split())
    return base64.b64decode(payload, validate=True)

def sha256_bytes(b: bytes) -> str:
    return hashlib.sha256(b).hexdigest()

def canonical_json(obj) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), default=str)
