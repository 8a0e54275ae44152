import re
import secrets
import time

UNSAFE_KEY_CHARS_RE = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_filename(value: str) -> str:
    return UNSAFE_KEY_CHARS_RE.sub("_", str(value or "").strip())


def build_object_key(filename: str, prefix: str = "uploads/") -> str:
    safe_name = sanitize_filename(filename)
    if not safe_name:
        raise ValueError("filename is empty")
    return f"{prefix}{int(time.time() * 1000)}-{secrets.token_hex(4)}-{safe_name}"
