"""XP Bot: очки опыта за активность в группах Telegram и доступ к медиа по XP"""

__version__ = "1.0.0"
