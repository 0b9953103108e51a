# -*- coding: utf-8 -*-
"""
Таксономия ошибок бота.

Превышение квоты ошибкой не является: это обычный исход проверки
(см. ``domain.models.OutcomeStatus.QUOTA_EXCEEDED``).
"""


class BotError(Exception):
    """Базовое исключение приложения"""


class ConfigurationMissing(BotError):
    """Не задан ключ провайдера или другая обязательная настройка"""


class UpstreamUnavailable(BotError):
    """Проверка прервалась непредвиденной ошибкой после резервирования квоты"""


class PersistenceError(BotError):
    """Сбой хранилища (БД недоступна, ошибка запроса)"""
