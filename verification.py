# -*- coding: utf-8 -*-
from config import Selectors


def count_unselected(page, selectors: Selectors) -> int:
    """Сколько отрисованных сейчас чекбоксов ещё не отмечено."""
    return len(page.find_all(selectors.unchecked_item_checkbox))
