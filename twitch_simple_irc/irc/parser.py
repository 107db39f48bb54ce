"""IRC line grammar: decode wire lines into messages and format them back."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass
class Prefix:
    name: str
    user: str | None = None
    host: str | None = None


@dataclass
class IRCMessage:
    raw: str
    command: str
    middle: list[str] = field(default_factory=list)
    trailing: str | None = None
    prefix: Prefix | None = None
    tags: dict[str, str] = field(default_factory=dict)


def parse_irc_message(raw_line: str) -> IRCMessage:
    """Decode a single line (without terminator).

    Never raises; malformed input yields a message with whatever parts could
    be recognised (an empty command for blank lines).
    """
    tags: dict[str, str] = {}
    prefix: Prefix | None = None
    trailing: str | None = None

    original = raw_line
    rest = raw_line.strip("\r\n")

    if rest.startswith("@"):
        tags_part, _, rest = rest.partition(" ")
        tags = _parse_tags(tags_part[1:])
        rest = rest.lstrip(" ")

    if rest.startswith(":"):
        prefix_part, _, rest = rest[1:].partition(" ")
        prefix = _parse_prefix(prefix_part)
        rest = rest.lstrip(" ")

    if rest.startswith(":"):
        # No command at all, only a trailing part; treat as empty command
        return IRCMessage(raw=original, command="", trailing=rest[1:], prefix=prefix, tags=tags)

    if " :" in rest:
        rest, trailing = rest.split(" :", 1)

    parts = rest.split()
    command = parts[0] if parts else ""
    middle = parts[1:]

    return IRCMessage(
        raw=original,
        command=command,
        middle=middle,
        trailing=trailing,
        prefix=prefix,
        tags=tags,
    )


def _parse_tags(raw_tags: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for tag in raw_tags.split(";"):
        if not tag:
            continue
        if "=" in tag:
            k, v = tag.split("=", 1)
        else:
            k, v = tag, ""
        tags[k] = v
    return tags


def _parse_prefix(raw_prefix: str) -> Prefix:
    # nick!user@host, nick@host or a bare server name
    name, _, host = raw_prefix.partition("@")
    name, _, user = name.partition("!")
    return Prefix(name=name, user=user or None, host=host or None)


def format_irc_message(
    command: str, middle: Iterable[str] = (), trailing: str | None = None
) -> str:
    """Format a line (without terminator), e.g. ``PRIVMSG #chan :hello``."""
    parts = [command, *middle]
    if trailing is not None:
        parts.append(f":{trailing}")
    return " ".join(parts)
