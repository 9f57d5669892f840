# -*- coding: utf-8 -*-
"""
Поиск кнопки массового архивирования.
Сначала панель действий (ждём ACTION_BAR до 2 с) и нечёткое совпадение по
aria-label / тексту, затем глобальные селекторы по порядку.
"""
import logging
from typing import Iterable

from config import Selectors, Timing
from errors import NotFoundError
from presence import wait_for_element

logger = logging.getLogger(__name__)


def is_archive_control(label: str, text: str, tokens: Iterable[str]) -> bool:
    label = (label or "").lower()
    text = (text or "").lower()
    return any(t in label or t in text for t in tokens)


def _find_in_action_bar(page, selectors: Selectors, timing: Timing):
    try:
        action_bar = wait_for_element(page, selectors.action_bar, timing.action_bar_timeout)
    except NotFoundError:
        logger.debug("archive_action: панель действий не появилась")
        return None
    for button in page.find_all("button", root=action_bar):
        if is_archive_control(page.attribute(button, "aria-label"), page.text(button), selectors.archive_tokens):
            return button
    return None


def _find_by_selectors(page, selectors: Selectors):
    for i, selector in enumerate(selectors.archive_buttons):
        button = page.find(selector)
        if button is not None:
            logger.debug("archive_action: кнопка найдена по селектору [%d] %s", i, selector)
            return button
    return None


def find_archive_control(page, state, selectors: Selectors, timing: Timing):
    """Кнопка архивирования или None (что делать — решает вызывающий)."""
    state.log("searching_archive_button")
    button = _find_in_action_bar(page, selectors, timing)
    if button is not None:
        state.log("archive_button_found")
        return button
    button = _find_by_selectors(page, selectors)
    if button is not None:
        state.log("archive_button_found")
    return button
