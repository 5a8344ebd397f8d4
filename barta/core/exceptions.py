class ChatError(Exception):
    """Базовая ошибка доменных сервисов"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ChatError):
    """Отсутствуют или некорректны входные данные"""


class AuthError(ChatError):
    """Неверные учетные данные"""


class NotFoundError(ChatError):
    """Запись не найдена"""


class StorageError(ChatError):
    """Не удалось записать коллекцию"""
