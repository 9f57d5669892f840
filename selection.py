# -*- coding: utf-8 -*-
"""
Выбор сообщений в списке.
1. Проход: список наверх, далее шагами по пол-экрана
2. На каждом шаге заново ищем список и чекбоксы (после прокрутки DOM перерисован)
3. Кликаем контейнер неотмеченного видимого чекбокса
4. После прохода считаем неотмеченные; если остались — ещё проход (до max_attempts)
"""
import logging
from dataclasses import dataclass
from typing import Optional, Set, Tuple

from config import REVEAL_PARTIAL, SelectionPolicy, Selectors, Timing
from errors import NotFoundError, SelectionItemError
from run_state import Phase
from verification import count_unselected

logger = logging.getLogger(__name__)


@dataclass
class SelectionResult:
    total_selected: int = 0
    all_selected: bool = False
    passes: int = 0


def _find_list(page, selectors: Selectors):
    message_list = page.find(selectors.message_list)
    if message_list is None:
        raise NotFoundError(selectors.message_list)
    return message_list


def _item_key(page, checkbox, selectors: Selectors) -> Optional[str]:
    item = page.closest(checkbox, selectors.message_item)
    if item is None:
        return None
    return page.attribute(item, "id") or None


def _select_single(
    page,
    state,
    checkbox,
    selectors: Selectors,
    timing: Timing,
    policy: SelectionPolicy,
) -> Tuple[bool, Optional[str]]:
    """Возвращает (кликнули ли, ключ элемента). Любая ошибка элемента -> SelectionItemError."""
    try:
        if page.is_checked(checkbox):
            return False, None
        container = page.closest(checkbox, selectors.checkbox_container)
        if container is None:
            return False, None
        if not page.in_viewport(container):
            if policy.partial_items != REVEAL_PARTIAL:
                return False, None
            page.scroll_into_view(container)
            if not page.in_viewport(container):
                return False, None
        key = _item_key(page, checkbox, selectors)
        state.wait(timing.check_delay)
        if state.stop_requested():
            return False, None
        if not page.click(container):
            raise SelectionItemError("click not accepted")
        return True, key
    except SelectionItemError:
        raise
    except Exception as e:
        raise SelectionItemError(str(e) or e.__class__.__name__) from e


def _selection_pass(
    page,
    state,
    selectors: Selectors,
    timing: Timing,
    policy: SelectionPolicy,
    seen: Set[str],
    total: int,
) -> int:
    page.scroll_to(_find_list(page, selectors), 0)
    step = max(1, page.viewport_height() // 2)
    scanned = 0

    while not state.stop_requested():
        state.hold_while_paused(timing.poll)
        if state.stop_requested():
            break
        message_list = _find_list(page, selectors)
        if scanned >= page.scroll_height(message_list):
            break

        checkboxes = page.find_all(selectors.item_checkbox)
        logger.debug("selection: шаг %d px, чекбоксов на экране: %d", scanned, len(checkboxes))
        for checkbox in checkboxes:
            state.hold_while_paused(timing.poll)
            if state.stop_requested():
                break
            try:
                clicked, key = _select_single(page, state, checkbox, selectors, timing, policy)
            except SelectionItemError as e:
                logger.warning("%s: %s", state.message("error_selecting_message"), e)
                continue
            if not clicked:
                continue
            if key is not None:
                if key in seen:
                    continue
                seen.add(key)
            total += 1
            state.record_progress(total)

        if state.stop_requested():
            break
        page.scroll_by(_find_list(page, selectors), step)
        state.wait(timing.scroll_delay)
        scanned += step

    return total


def select_items(
    page,
    state,
    selectors: Selectors,
    timing: Timing,
    policy: SelectionPolicy = SelectionPolicy(),
    max_attempts: Optional[int] = None,
) -> SelectionResult:
    attempts = max_attempts if max_attempts is not None else timing.max_attempts
    result = SelectionResult()
    seen: Set[str] = set()

    while not result.all_selected and result.passes < attempts and not state.stop_requested():
        result.passes += 1
        state.enter(Phase.SELECTING)
        state.log("starting_selection", result.passes)
        result.total_selected = _selection_pass(
            page, state, selectors, timing, policy, seen, result.total_selected
        )
        if state.stop_requested():
            break

        state.enter(Phase.VERIFYING)
        unselected = count_unselected(page, selectors)
        result.all_selected = unselected == 0
        logger.info(
            "selection: проход %d завершён, выбрано %d, не выбрано %d",
            result.passes, result.total_selected, unselected,
        )
        if not result.all_selected and result.passes < attempts:
            state.log("retrying_selection", unselected)
            state.wait(timing.action_delay)

    return result
