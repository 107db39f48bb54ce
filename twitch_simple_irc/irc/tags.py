"""Tag normalization: raw wire tag strings into typed values.

Every function here is total. Malformed values degrade to the documented
default instead of raising, so a bad tag can never break message dispatch.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

TagValue = Any  # str | bool | int | dict[str, str] | dict[str, list[dict[str, int]]]
Tags = dict[str, TagValue]
Emotes = dict[str, list[dict[str, int]]]

BOOLEAN_TAGS = frozenset(
    {
        "mod",
        "emote-only",
        "r9k",
        "rituals",
        "subs-only",
        "msg-param-should-share-streak",
    }
)

NUMERIC_TAGS = frozenset(
    {
        "tmi-sent-ts",
        "bits",
        "ban-duration",
        "msg-param-cumulative-months",
        "msg-param-months",
        "msg-param-promo-gift-total",
        "msg-param-streak-months",
        "msg-param-viewerCount",
        "msg-param-threshold",
    }
)

# Legacy flags superseded by the badges tag
DEPRECATED_TAGS = frozenset({"subscriber", "turbo", "user-type"})

TAG_NAMES: dict[str, str] = {
    "badge-info": "badgeInfo",
    "display-name": "displayName",
    "emote-sets": "emoteSets",
    "room-id": "roomId",
    "tmi-sent-ts": "tmiSentTs",
    "user-id": "userId",
    "target-msg-id": "targetMsgId",
    "target-user-id": "targetUserId",
    "msg-id": "msgId",
    "system-msg": "systemMsg",
    "emote-only": "emoteOnly",
    "followers-only": "followersOnly",
    "subs-only": "subsOnly",
    "ban-duration": "banDuration",
    "message-id": "messageId",
    "thread-id": "threadId",
    "msg-param-cumulative-months": "msgParamCumulativeMonths",
    "msg-param-displayName": "msgParamDisplayName",
    "msg-param-login": "msgParamLogin",
    "msg-param-months": "msgParamMonths",
    "msg-param-promo-gift-total": "msgParamPromoGiftTotal",
    "msg-param-promo-name": "msgParamPromoName",
    "msg-param-recipient-display-name": "msgParamRecipientDisplayName",
    "msg-param-recipient-id": "msgParamRecipientId",
    "msg-param-recipient-user-name": "msgParamRecipientUserName",
    "msg-param-sender-login": "msgParamSenderLogin",
    "msg-param-sender-name": "msgParamSenderName",
    "msg-param-should-share-streak": "msgParamShouldShareStreak",
    "msg-param-streak-months": "msgParamStreakMonths",
    "msg-param-sub-plan": "msgParamSubPlan",
    "msg-param-sub-plan-name": "msgParamSubPlanName",
    "msg-param-viewerCount": "msgParamViewerCount",
    "msg-param-ritual-name": "msgParamRitualName",
    "msg-param-threshold": "msgParamThreshold",
}

NUMERIC_DEFAULT = 0


def _to_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip(), 10)
    except ValueError:
        return None


def parse_emotes(raw: str | None = "") -> Emotes:
    """Parse ``25:0-4,6-10/1902:12-16`` into ``{id: [{start, end}, ...]}``."""
    if not raw:
        return {}
    emotes: Emotes = {}
    for emote in raw.split("/"):
        emote_id, sep, indexes = emote.partition(":")
        if not emote_id or not sep:
            continue
        ranges: list[dict[str, int]] = []
        for index in indexes.split(","):
            start_raw, _, end_raw = index.partition("-")
            start, end = _to_int(start_raw), _to_int(end_raw)
            if start is None or end is None:
                continue
            ranges.append({"start": start, "end": end})
        emotes[emote_id] = ranges
    return emotes


def parse_badges(raw: str | None = "") -> dict[str, str]:
    """Parse ``broadcaster/1,subscriber/12`` into ``{name: value}``."""
    if not raw:
        return {}
    badges: dict[str, str] = {}
    for badge in raw.split(","):
        name, _, value = badge.partition("/")
        if name:
            badges[name] = value
    return badges


def parse_followers_only(value: str | None) -> bool | int:
    # -1 disabled, 0 enabled without minimum, N minimum follow minutes
    if value == "-1":
        return False
    if value == "0":
        return True
    minutes = _to_int(value)
    return minutes if minutes is not None else False


def parse_slow(value: str | None) -> bool | int:
    if value == "0":
        return False
    seconds = _to_int(value)
    return seconds if seconds is not None else False


def unescape_value(value: str) -> str:
    return value.replace("\\s", " ")


def normalize_tag_value(name: str, value: str | None) -> TagValue:
    if name == "emotes":
        return parse_emotes(value)
    if name in ("badges", "badge-info"):
        return parse_badges(value)
    if name == "followers-only":
        return parse_followers_only(value)
    if name == "slow":
        return parse_slow(value)
    if name in BOOLEAN_TAGS:
        return value == "1"
    if name in NUMERIC_TAGS:
        number = _to_int(value)
        return number if number is not None else NUMERIC_DEFAULT
    if isinstance(value, str):
        return unescape_value(value)
    return value


def parse_message_tags(data: Mapping[str, str] | None) -> Tags:
    """Normalize a raw tag map into public field names and typed values."""
    if not data:
        return {}
    tags: Tags = {}
    for key, value in data.items():
        if key in DEPRECATED_TAGS:
            continue
        tags[TAG_NAMES.get(key, key)] = normalize_tag_value(key, value)
    return tags


__all__ = [
    "BOOLEAN_TAGS",
    "DEPRECATED_TAGS",
    "NUMERIC_TAGS",
    "TAG_NAMES",
    "Emotes",
    "Tags",
    "normalize_tag_value",
    "parse_badges",
    "parse_emotes",
    "parse_followers_only",
    "parse_message_tags",
    "parse_slow",
]
