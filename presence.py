# -*- coding: utf-8 -*-
import logging

from errors import NotFoundError

logger = logging.getLogger(__name__)


def wait_for_element(page, selector: str, timeout: float):
    """
    Сначала проверяем сразу (элемент мог уже быть), затем ждём изменений DOM.
    Повторов нет — решает вызывающий.
    """
    el = page.find(selector)
    if el is not None:
        return el
    logger.debug("presence: ждём %s (до %.1f c)", selector, timeout)
    el = page.observe(selector, timeout)
    if el is None:
        raise NotFoundError(selector, timeout)
    return el
