# Все сообщения проходят через единый роутер с таблицей обработчиков
from .message_router import MESSAGE_HANDLERS, create_message_router, dispatch_message

__all__ = ["MESSAGE_HANDLERS", "create_message_router", "dispatch_message"]
