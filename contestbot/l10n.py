"""User-facing texts and configuration keywords."""

from __future__ import annotations

import re

CMD_DESC_START = "открыть меню"
KB_BTN_RUN_CONFIG = "Запустить конкурс из конфигурации"

CFG_DELIMITER = " - "
CFG_MULTIPLICITY = "кратность"
CFG_KEYWORD = "ключевое слово"
CFG_CHAT_USERNAME = "чат"
CFG_CHAT_ID = "ид чата"
CFG_CHANNEL_USERNAME = "канал"
CFG_CHANNEL_ID = "ид канала"
CFG_TOPIC = "топик"

DEFAULT_KEYWORD = "готов"

YOUR_TICKET_NUMBERS = "Ваши номера участника - "
YOUR_TICKET_NUMBERS_DELIMITER = ", "

REACT_ERROR_PREFIX = "Ошибка! "
REACT_ERROR_SUFFIX = "🫠"

CONTEST_STOP_NOT_FOUND = "в этом чате нечего останавливать"
CHAT_TAKE_NOT_FOUND = "чат не найден"
CONTEST_STOP_USAGE = "Пример:\n/contestStop @exampleChatUsername"
CREATE_CONTEST_NO_ADMIN_RIGHTS = "требуются права администратора"
CREATE_CONTEST_CANT_VERIFY_ADMIN_RIGHTS = "невозможно проверить права администратора"
CONTEST_CONFIG_RUN_SUCCESS = "Конкурс запущен🎉"
CONTEST_STOP_SUCCESS = "Конкурс остановлен👏"

_MD_SPECIAL = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")


def _md(template: str, *names: str) -> str:
    """Escape text for MarkdownV2; each %s becomes an underlined name."""
    escaped = _MD_SPECIAL.sub(r"\\\1", template)
    return escaped % tuple(f"__{name}__" for name in names)


def _bold(text: str) -> str:
    return f"*{_md(text)}*"


_COMMAND = "/contestConfigRun"

_EXAMPLE = (
    (CFG_MULTIPLICITY, "10"),
    (CFG_KEYWORD, "Готово"),
    (CFG_CHANNEL_USERNAME, "@exampleChannelUsername"),
    (CFG_CHAT_USERNAME, "@exampleChatUsername"),
    (CFG_TOPIC, "1"),
)

_DESCRIPTIONS = (
    _md(
        "%s - обязательный числовой параметр, отвечает за необходимое количество "
        "приглашенных участников для получения номерков.",
        CFG_MULTIPLICITY,
    ),
    _md(
        "%s - обязательный текстовый параметр, слово которое необходимо написать "
        "в чат или топик для подсчета номерков.",
        CFG_KEYWORD,
    ),
    _md(
        "%s - опциональный параметр, идентификатор топика, в котором бот будет "
        "выдавать номерки, если не указан или равен 0, то писать ключевое слово "
        "надо в главный чат (параметр %s).",
        CFG_TOPIC,
        CFG_CHAT_USERNAME,
    ),
    _md(
        "%s - обязательный, если не указан параметр %s. Чат в котором будет "
        "проводиться конкурс. Не всегда удается по этому параметру определить "
        "чат, в этом случае лучше использовать %s.",
        CFG_CHAT_USERNAME,
        CFG_CHAT_ID,
        CFG_CHAT_ID,
    ),
    _md(
        "%s (либо %s) - опциональный параметр. Канал в котором будет проводиться "
        "конкурс(вместо чата). Участники должны будут приглашать друзей в него, "
        "а не в чат, но ключевое слово все также надо писать в чат.",
        CFG_CHANNEL_USERNAME,
        CFG_CHANNEL_ID,
    ),
)

CONTEST_CONFIG_RUN_USAGE = (
    "\n".join(
        [
            "",
            "",
            _bold("Для запуска конкурса, боту надо отправить сообщение строго в таком формате:"),
            _COMMAND,
            _md(f"[название параметра]{CFG_DELIMITER}[значение параметра]"),
            "",
            _bold("Пример сообщения:"),
            "```",
            _COMMAND,
            *(_md(f"{key}{CFG_DELIMITER}{value}") for key, value in _EXAMPLE),
            "```",
            _bold("Описание параметров:"),
            *_DESCRIPTIONS,
        ]
    )
    + "\n"
)

CONTEST_CREATE_PREVIOUS_NOT_OVER_YET = (
    "в этом чате уже проходит конкурс, невозможно запустить еще один"
)
REQUESTED_DATA_NOT_FOUND = "запрашиваемые данные не найдены"
DINT_GET_RIGHT_NUMBER_OF_INVITATIONS = "Не набралось нужное количество приглашений"
PARAMETER_NOT_PROVIDED = "параметр не передан"
CONTEST_CONFIG_BOT_CANNOT_SEND_MSG = "бот не может писать в этот чат (топик)"