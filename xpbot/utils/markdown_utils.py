# ============================================================
# MARKDOWN UTILS - ЭКРАНИРОВАНИЕ ДЛЯ TELEGRAM MARKDOWN
# ============================================================
# Ответы бота отправляются в режиме parse_mode="Markdown" (legacy).
# Имена пользователей и названия групп приходят извне и могут
# содержать символы разметки - их нужно экранировать.
# ============================================================

import re

# Символы, которые legacy Markdown интерпретирует как разметку
MARKDOWN_SPECIAL_CHARS = "_*`["

# Паттерн для поиска спецсимволов
SPECIAL_CHARS_PATTERN = re.compile("([" + re.escape(MARKDOWN_SPECIAL_CHARS) + "])")


def escape_markdown(text: str) -> str:
    """
    Экранирует специальные символы Markdown.

    Args:
        text: Текст для экранирования

    Returns:
        Экранированный текст

    Example:
        escape_markdown("snake_case")  # "snake\\_case"
        escape_markdown("*bold*")      # "\\*bold\\*"
    """
    if not text:
        return ""
    return SPECIAL_CHARS_PATTERN.sub(r"\\\1", text)
