"""JAR manifest parsing.

Only the main section (up to the first blank line) is read. Lines longer than
72 bytes are wrapped with a leading single space on each continuation line.
"""

from __future__ import annotations

MANIFEST_ENTRY = "META-INF/MANIFEST.MF"

MAIN_CLASS = "Main-Class"
IMPLEMENTATION_VERSION = "Implementation-Version"


def parse_manifest(data: bytes | str) -> dict[str, str]:
    """Main attributes of a manifest as a name -> value dict."""
    if isinstance(data, bytes):
        text = data.decode("utf-8", errors="replace")
    else:
        text = data

    attributes: dict[str, str] = {}
    current: str | None = None

    for raw_line in text.replace("\r\n", "\n").replace("\r", "\n").split("\n"):
        if raw_line == "":
            # End of main section
            if attributes:
                break
            continue
        if raw_line.startswith(" "):
            if current is not None:
                attributes[current] += raw_line[1:]
            continue
        name, sep, value = raw_line.partition(":")
        if not sep:
            current = None
            continue
        current = name.strip()
        attributes[current] = value.lstrip(" ")

    return {name: value.strip() for name, value in attributes.items()}
