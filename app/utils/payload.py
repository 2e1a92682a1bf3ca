import base64
import binascii


def sanitize_filename(name: str) -> str:
    keep = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._-")
    return "".join(c if c in keep else "_" for c in name)


def encode_data_url(content: bytes, content_type: str | None) -> str:
    """Encode file bytes as ``data:<type>;base64,<payload>``."""
    media_type = content_type or "application/octet-stream"
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{media_type};base64,{encoded}"


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """Return (media_type, content) from a base64 data URL."""
    if not data_url.startswith("data:") or "," not in data_url:
        raise ValueError("Not a data URL")
    header, _, encoded = data_url[5:].partition(",")
    media_type, _, encoding = header.partition(";")
    if encoding != "base64":
        raise ValueError("Only base64 data URLs are supported")
    try:
        content = base64.b64decode(encoded, validate=True)
    except binascii.Error as exc:
        raise ValueError("Malformed base64 payload") from exc
    return media_type or "application/octet-stream", content
