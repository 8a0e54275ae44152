from collections.abc import Sequence


def origin_allowed(origin: str | None, allowed: Sequence[str]) -> bool:
    """Decide whether a request carrying ``origin`` may reach the handlers.

    Requests without an Origin header (server-to-server, curl) are always
    accepted. An empty allow-list or a ``*`` entry accepts every origin.
    Otherwise the origin must match an entry exactly, the same rule
    ``CORSMiddleware`` applies when it sets ``access-control-allow-origin``.
    """
    if not origin:
        return True
    if not allowed or "*" in allowed:
        return True
    return origin in allowed
