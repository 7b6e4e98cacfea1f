# ============================================================
# HTML UTILS - ЭКРАНИРОВАНИЕ ДЛЯ ЖУРНАЛА В TELEGRAM
# ============================================================
# Журнал модерации уходит в канал с parse_mode="HTML".
# Имена и названия групп нужно экранировать.
# ============================================================


def escape_html(text: str) -> str:
    """
    Экранирует специальные HTML символы.

    Example:
        escape_html("5 < 10")  # "5 &lt; 10"
        escape_html("A & B")   # "A &amp; B"
    """
    return (
        str(text)
        .replace('&', '&amp;')
        .replace('<', '&lt;')
        .replace('>', '&gt;')
    )
