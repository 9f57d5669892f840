# -*- coding: utf-8 -*-
"""
Прогон архивации:
IDLE -> LOADING -> SELECTING <-> VERIFYING -> LOCATING -> ACTING -> DONE
STOPPED — из любой фазы по флагу stop (проверяется в каждой точке ожидания).
"""
import enum
import logging
from dataclasses import dataclass
from typing import Optional

from selenium.common.exceptions import WebDriverException

from archive_action import find_archive_control
from config import ArchiverConfig
from errors import ActionNotFoundError, ArchiverError, NotFoundError
from presence import wait_for_element
from run_state import Phase, RunState
from scroll_loader import load_all_items
from selection import select_items

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE_DELAY_MS = 1000


class Outcome(enum.Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    STOPPED = "stopped"
    NO_OP = "no_op"
    ERROR = "error"


@dataclass
class RunResult:
    count: int
    message: str
    outcome: Outcome
    all_selected: bool = False
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome is not Outcome.ERROR

    def to_response(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error or self.message}
        return {"success": True, "count": self.count, "message": self.message}


class ArchivalDriver:
    def __init__(self, page, state: RunState, config: ArchiverConfig = ArchiverConfig()):
        self.page = page
        self.state = state
        self.config = config

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def history(self):
        return list(self.state.history)

    def run(self, message_delay_ms: int = DEFAULT_MESSAGE_DELAY_MS) -> RunResult:
        state = self.state
        state.reset()
        state.log("starting_process")
        try:
            return self._run(max(0, message_delay_ms) / 1000.0)
        except Exception as e:
            # закрытый браузер или обрыв соединения тоже дают RunResult
            logger.exception(state.message("error_archive_process"))
            error = state.message("error_generic", self._describe(e))
            return self._finish(state.progress, error, Outcome.ERROR, error=error)

    def _describe(self, e: Exception) -> str:
        if isinstance(e, NotFoundError):
            return self.state.message("error_element_timeout", e.selector)
        if isinstance(e, WebDriverException):
            return e.msg or e.__class__.__name__
        return str(e) or e.__class__.__name__

    def _finish(self, count: int, message: str, outcome: Outcome, all_selected: bool = False,
                error: Optional[str] = None) -> RunResult:
        self.state.enter(Phase.DONE)
        logger.info("archiver: прогон завершён (%s), count=%d", outcome.value, count)
        return RunResult(count=count, message=message, outcome=outcome, all_selected=all_selected, error=error)

    def _stopped(self) -> RunResult:
        self.state.enter(Phase.STOPPED)
        return self._finish(self.state.progress, self.state.message("processing_stopped"), Outcome.STOPPED)

    def _run(self, message_delay: float) -> RunResult:
        page, state = self.page, self.state
        sel, timing = self.config.selectors, self.config.timing

        state.enter(Phase.LOADING)
        wait_for_element(page, sel.message_list, timing.element_timeout)
        load_all_items(page, state, sel, timing)
        if state.stop_requested():
            return self._stopped()

        selection = select_items(page, state, sel, timing, self.config.policy)
        if state.stop_requested():
            return self._stopped()
        if selection.total_selected == 0:
            return self._finish(0, state.message("no_messages"), Outcome.NO_OP, selection.all_selected)

        state.enter(Phase.LOCATING)
        button = find_archive_control(page, state, sel, timing)
        if button is None:
            raise ActionNotFoundError(state.message("error_archive_button"))
        if state.stop_requested():
            return self._stopped()

        state.enter(Phase.ACTING)
        if not page.click(button, scroll=True):
            raise ArchiverError("archive button did not accept the click")
        state.wait(message_delay)

        message = state.message("archive_success", selection.total_selected)
        outcome = Outcome.SUCCESS
        if not selection.all_selected:
            message += state.message("warning_incomplete")
            outcome = Outcome.PARTIAL
        return self._finish(selection.total_selected, message, outcome, selection.all_selected)
