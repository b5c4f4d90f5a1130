# Доменні помилки сервісів записів. HTTP-статуси призначає api/errors.py


class RecordError(Exception):
    """Базова помилка: ``message`` віддається клієнту як є."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecordValidationError(RecordError):
    pass


class RecordNotFoundError(RecordError):
    pass


class RecordConflictError(RecordError):
    pass


class DuplicateKeyError(RecordConflictError):
    """Сховище відхилило запис: значення унікального поля вже зайняте."""

    def __init__(self, field: str, value):
        super().__init__(f"Duplicate {field}: {value}")
        self.field = field
        self.value = value


class StoreUnavailableError(RecordError):
    """Сховище недоступне або операція в ньому завершилась помилкою."""

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
