# -*- coding: utf-8 -*-
"""
Состояние одного прогона архивации.
Флаги paused/stopped пишет канал команд (другой поток — горячие клавиши),
progress пишет движок выбора. Простые присваивания, без блокировок.
"""
import enum
import logging
import time
from typing import Callable, List, Optional

from messages import Catalog, DEFAULT_CATALOG

logger = logging.getLogger(__name__)

# шаг проверки флага stop внутри ожидания
STOP_CHECK_SLICE = 0.1


class Phase(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SELECTING = "selecting"
    VERIFYING = "verifying"
    LOCATING = "locating"
    ACTING = "acting"
    STOPPED = "stopped"
    DONE = "done"


class RunState:
    def __init__(
        self,
        catalog: Catalog = DEFAULT_CATALOG,
        locale: Optional[str] = None,
        sleep: Callable[[float], None] = time.sleep,
        on_progress: Optional[Callable[[int], None]] = None,
    ):
        self.catalog = catalog
        self.locale = locale or catalog.default_locale
        self.sleep = sleep
        self.on_progress = on_progress
        self.paused = False
        self.stopped = False
        self.progress = 0
        self.phase = Phase.IDLE
        self.history: List[Phase] = []

    def reset(self):
        # locale переживает прогон
        self.paused = False
        self.stopped = False
        self.progress = 0
        self.phase = Phase.IDLE
        self.history = []

    def enter(self, phase: Phase):
        self.phase = phase
        self.history.append(phase)
        logger.debug("run_state: фаза %s", phase.value)

    def stop_requested(self) -> bool:
        return self.stopped

    def pause(self):
        self.paused = True
        self.log("process_paused")

    def resume(self):
        self.paused = False
        self.log("process_resumed")

    def stop(self):
        self.stopped = True
        self.paused = False
        self.log("process_stopped")

    def message(self, key: str, *subs) -> str:
        return self.catalog.get(key, *subs, locale=self.locale)

    def log(self, key: str, *subs):
        logger.info(self.message(key, *subs))

    def wait(self, seconds: float):
        """Пауза с проверкой stop каждые STOP_CHECK_SLICE секунд."""
        left = seconds
        while left > 0:
            if self.stopped:
                return
            chunk = min(STOP_CHECK_SLICE, left)
            self.sleep(chunk)
            left -= chunk

    def hold_while_paused(self, poll: float):
        while self.paused and not self.stopped:
            self.sleep(poll)

    def record_progress(self, count: int):
        self.progress = count
        if self.on_progress is not None:
            try:
                self.on_progress(count)
            except Exception:
                logger.exception("run_state: ошибка в обработчике прогресса")
        self.log("message_selected", count)
