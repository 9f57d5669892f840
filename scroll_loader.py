# -*- coding: utf-8 -*-
"""
Догрузка списка: прокрутка вниз до тех пор, пока высота не перестанет расти
stable_checks раз подряд. Потом — обратно наверх.
"""
import logging

from config import Selectors, Timing

logger = logging.getLogger(__name__)


def load_all_items(page, state, selectors: Selectors, timing: Timing):
    state.log("loading_messages")
    message_list = page.find(selectors.message_list)
    if message_list is None:
        # нечего грузить, отсутствие списка заметит выбор
        logger.info("scroll_loader: список не найден, пропускаем догрузку")
        return

    previous_height = page.scroll_height(message_list)
    no_change = 0
    attempts = 0

    while no_change < timing.stable_checks:
        if state.stop_requested():
            return
        # после ожидания ссылка могла устареть — ищем заново
        message_list = page.find(selectors.message_list)
        if message_list is None:
            logger.info("scroll_loader: список пропал во время догрузки")
            return
        page.scroll_to(message_list, page.scroll_height(message_list))
        attempts += 1
        state.wait(timing.scroll_delay)

        message_list = page.find(selectors.message_list)
        if message_list is None:
            logger.info("scroll_loader: список пропал во время догрузки")
            return
        current_height = page.scroll_height(message_list)
        if current_height == previous_height:
            no_change += 1
        else:
            no_change = 0
        logger.debug(
            "scroll_loader: попытка %d, высота %d -> %d, без изменений %d",
            attempts, previous_height, current_height, no_change,
        )
        previous_height = current_height

    page.scroll_to(message_list, 0)
    state.wait(timing.scroll_delay)
    logger.info("scroll_loader: список догружен за %d прокруток", attempts)
    state.log("scroll_completed")
