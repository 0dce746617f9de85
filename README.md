# contestbot

A Telegram bot that runs invitation contests in group chats.

Members invite friends into a chat (or a channel). Once someone has
brought in enough new members, they write the contest keyword in the
chat or topic and the bot replies with their participant numbers. Every
full batch of invitations is worth one number; invitations left over
stay on the account for later.

An invitation does not count when the member joined through an invite
link, a join request or a chat folder link, when either side is a bot,
when a user added themselves, or when the member was already known to
the chat before.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Running

The bot reads its settings from the environment:

| Variable            | Meaning                                                          |
|---------------------|------------------------------------------------------------------|
| `TOKEN`             | Bot API token (required)                                         |
| `MAIN_DATABASE_DSN` | SQLite database path, or a `file:` URI (required)                |
| `DEBUG`             | `true` or unset turns on debug logging; any other value does not |

```
TOKEN=token MAIN_DATABASE_DSN=contests.db contestbot
```

`contestbot` exits with status 1 when a required variable is empty or the
bot cannot start. On start it creates the tables it needs if they are
missing, drops the updates that piled up while it was offline, and then
long-polls for `message`, `chat_member` and `my_chat_member` updates. It
shuts down cleanly on SIGINT or SIGTERM.

The bot has to be an administrator of the chat to receive `chat_member`
updates. When the bot itself leaves a chat, the chat's running contest
is stopped.

## Commands

Both commands are answered only in a private chat with the bot, and
only for administrators of the target chat. Command names are matched
without regard to case, and `/command@botname` is accepted.

### `/contestConfigRun`

Starts a contest. The message holds one `name - value` pair per line:

```
/contestConfigRun
кратность - 10
ключевое слово - Готово
канал - @exampleChannelUsername
чат - @exampleChatUsername
топик - 1
```

- `кратность` — how many invited members make one number (required;
  zero or less means 10).
- `ключевое слово` — the word to write in the chat to collect numbers
  (`готов` when left empty). A message that holds the word in double
  quotes does not count.
- `чат` or `ид чата` — the chat where the keyword is written; one of
  them is required.
- `канал` or `ид канала` — optional channel that members are invited to
  instead of the chat; the chat itself is used when neither is given.
- `топик` — optional topic id where the keyword must be written.

Chats are looked up by username only once the bot has seen them. Before
starting, the bot checks that it can post in the chat (and topic) by
sending and deleting a `ping` message. Only one contest may run per
chat at a time. When a parameter is missing or malformed, the bot
replies with a description of the format.

### `/contestStop`

Stops the running contest in a chat:

```
/contestStop @exampleChatUsername
```

A numeric chat id works as well.

## Library use

The pieces can be used without the polling loop, for example against an
in-memory database:

```python
from contestbot.db import connect, ensure_schema
from contestbot.chats import upsert_chat, take_chat
from contestbot.model import Chat

connection = connect(":memory:")
ensure_schema(connection)
upsert_chat(connection, Chat(id=-100, title="Group", username="group"))
print(take_chat(connection, "group"))
```

Other entry points:

- `contestbot.contests.create_contest` and `stop_contest` start and end
  contests.
- `contestbot.members.update_member_status` and `update_bot_status`
  record joins and leaves.
- `contestbot.messages.handle_message` checks a message for the keyword
  and hands out tickets through `contestbot.tickets.count_tickets`.
- `contestbot.handlers.Controller.dispatch` routes a raw update
  dictionary to the handlers.
- `contestbot.botapi.BotApi` and `Poller` are a small Bot API client and
  polling loop built on `requests`.
- `contestbot.app.run` wires them together until a `threading.Event` is
  set.

## What it does not do

The bot only long-polls; it has no webhook mode. Storage is SQLite only.
It offers no menus or keyboards and answers no commands besides the two
above.