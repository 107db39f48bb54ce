import pytest

from twitch_simple_irc.irc.client import TwitchChatClient
from twitch_simple_irc.irc.events import EventKind
from twitch_simple_irc.irc.models import ConnectionState

from tests.fakes import wait_until

COMMAND_LINES = [
    ("PING :tmi.twitch.tv", EventKind.PING),
    (":tmi.twitch.tv PONG tmi.twitch.tv :tmi.twitch.tv", EventKind.PONG),
    (":tmi.twitch.tv 001 tester :Welcome, GLHF!", EventKind.REGISTER),
    (
        "@badges=;color=#0D4200;display-name=Ronni :ronni!ronni@ronni.tmi.twitch.tv PRIVMSG #dallas :Kappa",
        EventKind.MESSAGE,
    ),
    ("@msg-id=slow_off :tmi.twitch.tv NOTICE #dallas :This room is no longer in slow mode.", EventKind.NOTICE),
    (
        "@msg-id=raid;system-msg=5\\sraiders :tmi.twitch.tv USERNOTICE #dallas :hi",
        EventKind.USERNOTICE,
    ),
    (":petsgomoo!petsgomoo@petsgomoo.tmi.twitch.tv WHISPER foo :hello", EventKind.WHISPER),
    ("@color=#0D4200;user-id=1 :tmi.twitch.tv GLOBALUSERSTATE", EventKind.GLOBALUSERSTATE),
    ("@mod=1;color=#0D4200 :tmi.twitch.tv USERSTATE #dallas", EventKind.USERSTATE),
    ("@slow=10;room-id=1 :tmi.twitch.tv ROOMSTATE #dallas", EventKind.ROOMSTATE),
    (":ronni!ronni@ronni.tmi.twitch.tv JOIN #dallas", EventKind.JOIN),
    (":ronni!ronni@ronni.tmi.twitch.tv PART #dallas", EventKind.PART),
    ("@ban-duration=350 :tmi.twitch.tv CLEARCHAT #dallas :ronni", EventKind.CLEARCHAT),
    ("@login=ronni;target-msg-id=abc :tmi.twitch.tv CLEARMSG #dallas :HeyGuys", EventKind.CLEARMESSAGE),
    (":tmi.twitch.tv HOSTTARGET #hosting_channel :target 9", EventKind.HOSTTARGET),
]


def _record_all(client: TwitchChatClient) -> list:
    seen: list = []
    for kind in EventKind:
        client.on(kind, seen.append)
    return seen


@pytest.mark.asyncio
@pytest.mark.parametrize("line,kind", COMMAND_LINES)
async def test_each_command_yields_one_event(make_client, line, kind):
    client = make_client()
    seen = _record_all(client)
    await client.dispatcher.process_incoming_data("", f"{line}\r\n")
    assert [e.kind for e in seen] == [kind]
    assert seen[0].raw == line


@pytest.mark.asyncio
async def test_every_command_is_covered(make_client):
    client = make_client()
    kinds = {kind for _, kind in COMMAND_LINES}
    assert len(client.dispatcher.supported_commands) == len(COMMAND_LINES) == len(kinds)


@pytest.mark.asyncio
async def test_unknown_command_ignored(make_client):
    client = make_client()
    seen = _record_all(client)
    await client.dispatcher.process_incoming_data("", ":tmi.twitch.tv 372 tester :You are in a maze\r\n")
    assert seen == []


@pytest.mark.asyncio
async def test_partial_lines_are_buffered(make_client):
    client = make_client()
    seen = []
    client.on(EventKind.PONG, seen.append)
    buf = await client.dispatcher.process_incoming_data("", ":tmi.twitch.tv PO")
    assert buf == ":tmi.twitch.tv PO"
    assert seen == []
    buf = await client.dispatcher.process_incoming_data(buf, "NG tmi.twitch.tv\r\nPI")
    assert buf == "PI"
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_ping_is_answered(client, transport_factory):
    pings = []
    client.on(EventKind.PING, pings.append)
    transport_factory.current.feed("PING :tmi.twitch.tv")
    await wait_until(lambda: pings)
    assert "PONG :tmi.twitch.tv" in transport_factory.current.sent
    assert pings[0].raw == "PING :tmi.twitch.tv"
    assert client.last_ping_from_server > 0


@pytest.mark.asyncio
async def test_second_welcome_only_updates_nick(make_client):
    client = make_client()
    registers = []
    client.on(EventKind.REGISTER, registers.append)
    await client.dispatcher.handle_line(":tmi.twitch.tv 001 tester :Welcome, GLHF!")
    await client.dispatcher.handle_line(":tmi.twitch.tv 001 renamed :Welcome, GLHF!")
    assert client.state is ConnectionState.REGISTERED
    assert len(registers) == 1
    assert registers[0].name == "tester"
    assert client.name == "renamed"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "text,expected,is_action",
    [("Hello", "Hello", False), ("\x01ACTION waves\x01", "waves", True)],
)
async def test_action_messages(make_client, text, expected, is_action):
    client = make_client()
    messages = []
    client.on(EventKind.MESSAGE, messages.append)
    await client.dispatcher.handle_line(f":ronni!ronni@ronni.tmi.twitch.tv PRIVMSG #chan :{text}")
    event = messages[0]
    assert event.channel == "chan"
    assert event.user == "ronni"
    assert event.message == expected
    assert event.is_action is is_action


@pytest.mark.asyncio
async def test_message_tags_normalized_lazily(make_client):
    client = make_client()
    messages = []
    client.on(EventKind.MESSAGE, messages.append)
    await client.dispatcher.handle_line(
        "@badges=moderator/1;emotes=25:0-4;mod=1;subscriber=1 :r!r@r PRIVMSG #c :Kappa"
    )
    event = messages[0]
    assert "tags" not in vars(event)
    assert event.tags == {
        "badges": {"moderator": "1"},
        "emotes": {"25": [{"start": 0, "end": 4}]},
        "mod": True,
    }
    assert event.tags is event.tags


@pytest.mark.asyncio
async def test_state_commands_update_store(make_client):
    client = make_client()
    await client.dispatcher.handle_line("@mod=1 :tmi.twitch.tv USERSTATE #dallas")
    await client.dispatcher.handle_line("@slow=10;followers-only=-1 :tmi.twitch.tv ROOMSTATE #dallas")
    await client.dispatcher.handle_line("@color=#FF0000;user-id=7 :tmi.twitch.tv GLOBALUSERSTATE")
    await client.dispatcher.handle_line("@color=#00FF00 :tmi.twitch.tv GLOBALUSERSTATE")
    assert client.channels["dallas"].user_state == {"mod": True}
    assert client.channels["dallas"].room_state == {"slow": 10, "followersOnly": False}
    assert client.global_user_state == {"color": "#00FF00", "userId": "7"}


@pytest.mark.asyncio
async def test_listener_failure_does_not_stop_dispatch(make_client):
    client = make_client()
    errors, pongs = [], []

    def bad(event):  # noqa: ARG001
        raise RuntimeError("boom")

    client.on(EventKind.MESSAGE, bad)
    client.on(EventKind.ERROR, errors.append)
    client.on(EventKind.PONG, pongs.append)
    await client.dispatcher.process_incoming_data(
        "", ":r!r@r PRIVMSG #c :hi\r\n:tmi.twitch.tv PONG tmi.twitch.tv\r\n"
    )
    assert len(errors) == 1
    assert len(pongs) == 1
