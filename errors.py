# -*- coding: utf-8 -*-
# ошибки архиватора


class ArchiverError(Exception):
    pass


class NotFoundError(ArchiverError):
    """Элемент не появился за отведённое время."""

    def __init__(self, selector: str, timeout: float = 0.0):
        self.selector = selector
        self.timeout = timeout
        super().__init__(f"element not found within {timeout:g}s: {selector}")


class SelectionItemError(ArchiverError):
    """Не удалось отметить один элемент списка. Ловится внутри прохода выбора."""


class ActionNotFoundError(ArchiverError):
    """Кнопка массового архивирования не найдена — разметка страницы не та."""
