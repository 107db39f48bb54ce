"""Per-channel and session-wide state derived from dispatched events."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

from .tags import Tags


@dataclass
class ChannelState:
    user_state: Tags = field(default_factory=dict)
    room_state: Tags = field(default_factory=dict)


class ChannelStateStore(Mapping[str, ChannelState]):
    """Latest known user/room state per channel plus the global user state.

    Written only by the dispatcher. Updates replace a single sub-map and
    leave the sibling sub-map of the same channel untouched. Entries are never
    removed automatically, so a rejoin reuses the last known state until the
    server sends a fresh one.
    """

    def __init__(self) -> None:
        self._channels: dict[str, ChannelState] = {}
        self.global_user_state: Tags | None = None

    def __getitem__(self, channel: str) -> ChannelState:
        return self._channels[channel]

    def __iter__(self) -> Iterator[str]:
        return iter(self._channels)

    def __len__(self) -> int:
        return len(self._channels)

    def channel_names(self) -> list[str]:
        return list(self._channels)

    def update_user_state(self, channel: str, user_state: Tags) -> ChannelState:
        state = self._channels.setdefault(channel, ChannelState())
        state.user_state = user_state
        return state

    def update_room_state(self, channel: str, room_state: Tags) -> ChannelState:
        state = self._channels.setdefault(channel, ChannelState())
        state.room_state = room_state
        return state

    def update_global_user_state(self, global_user_state: Tags) -> Tags:
        merged = dict(self.global_user_state or {})
        merged.update(global_user_state)
        self.global_user_state = merged
        return merged
