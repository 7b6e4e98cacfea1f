#!/usr/bin/env python3
"""
Главный файл для запуска бота через кнопку Play в IDE
"""

from xpbot.bot import run

if __name__ == "__main__":
    run()
