from __future__ import annotations


def append_path(url: str, fragment: str) -> str:
    """
    Join a path fragment onto an accumulated url.

    A single "/" is inserted only when neither side supplies one; slashes that are
    already present are kept as-is (no collapsing, no dedupe):
      append_path("", "base")          -> "/base"
      append_path("/base", "specific") -> "/base/specific"
      append_path("/base/", "/x")      -> "/base//x"
    """
    if not fragment.startswith("/") and not url.endswith("/"):
        fragment = "/" + fragment
    return url + fragment
