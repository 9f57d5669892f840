# -*- coding: utf-8 -*-
"""
Канал команд: start / pause / resume / stop / setLanguage.
Запрос — dict с ключом "action", ответ — dict с "success".
start выполняется до конца в вызывающем потоке; pause/resume/stop/setLanguage
приходят из другого потока (горячие клавиши) и отвечают сразу.
"""
import logging
import time
from typing import Callable, Optional

from archiver import ArchivalDriver, DEFAULT_MESSAGE_DELAY_MS, RunResult
from config import ArchiverConfig
from messages import Catalog, DEFAULT_CATALOG
from run_state import RunState

logger = logging.getLogger(__name__)

ACK = {"success": True}


class CommandChannel:
    def __init__(
        self,
        page,
        config: ArchiverConfig = ArchiverConfig(),
        catalog: Catalog = DEFAULT_CATALOG,
        locale: Optional[str] = None,
        sleep: Callable[[float], None] = time.sleep,
        on_progress: Optional[Callable[[int], None]] = None,
        on_finished: Optional[Callable[[RunResult], None]] = None,
    ):
        self.state = RunState(catalog=catalog, locale=locale, sleep=sleep, on_progress=on_progress)
        self.driver = ArchivalDriver(page, self.state, config)
        self.on_finished = on_finished
        self.running = False
        self.last_result: Optional[RunResult] = None
        self._handlers = {
            "start": self._start,
            "pause": self._pause,
            "resume": self._resume,
            "stop": self._stop,
            "setLanguage": self._set_language,
        }

    def handle(self, request: dict) -> dict:
        action = (request or {}).get("action")
        handler = self._handlers.get(action)
        if handler is None:
            logger.warning("commands: неизвестная команда %r", action)
            return {"success": False, "error": self.state.message("error_unknown_action", action)}
        return handler(request)

    def _start(self, request: dict) -> dict:
        if self.running:
            return {"success": False, "error": self.state.message("error_busy")}
        raw = request.get("delay", request.get("messageDelay", DEFAULT_MESSAGE_DELAY_MS))
        try:
            delay_ms = int(raw)
        except (TypeError, ValueError):
            return {"success": False, "error": self.state.message("error_generic", f"invalid delay: {raw!r}")}

        self.running = True
        try:
            result = self.driver.run(delay_ms)
        finally:
            self.running = False
        self.last_result = result
        if self.on_finished is not None:
            try:
                self.on_finished(result)
            except Exception:
                logger.exception("commands: ошибка в обработчике завершения")
        return result.to_response()

    def _pause(self, request: dict) -> dict:
        self.state.pause()
        return dict(ACK)

    def _resume(self, request: dict) -> dict:
        self.state.resume()
        return dict(ACK)

    def _stop(self, request: dict) -> dict:
        self.state.stop()
        return dict(ACK)

    def _set_language(self, request: dict) -> dict:
        language = request.get("language")
        # неизвестная локаль сохраняется, строки берутся из таблицы по умолчанию
        if language:
            self.state.locale = language
        return dict(ACK)

    # для горячих клавиш
    def toggle_pause(self) -> dict:
        if self.state.paused:
            return self.handle({"action": "resume"})
        return self.handle({"action": "pause"})
