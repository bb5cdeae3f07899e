"""User-facing strings of the chat client."""

DEFAULT_TITLE = 'Новый чат'
MESSAGE_TOO_LONG = 'Сообщение слишком длинное. Максимальная длина 5000 символов.'
CONFIRM_CLEAR_HISTORY = 'Вы уверены, что хотите очистить всю историю чатов?'

SERVER_ERROR = 'Извините, произошла ошибка: {error}'
NETWORK_ERROR = 'Извините, произошла сетевая ошибка.'

RENAME_PROMPT = 'Переименовать чат:'
COPIED = 'Текст скопирован!'
NOTHING_TO_COPY = 'Нет ответа для копирования'
TYPING = 'ИИ печатает...'
INPUT_PLACEHOLDER = 'Введите сообщение...'
