# -*- coding: utf-8 -*-
import atexit
import logging
import os
import signal
import sys
import threading
import time

from dotenv import load_dotenv
from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from webdriver_manager.chrome import ChromeDriverManager

from commands import CommandChannel
from config import MESSAGING_URL_PATTERN
from messages import DEFAULT_CATALOG
from page import SeleniumPage
from settings_store import Settings, load_settings, save_settings, settings_path

load_dotenv()

_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))

BASE_URL = os.environ.get("ARCHIVER_BASE_URL", "https://www.linkedin.com/messaging/").strip()
CHROMEDRIVER_VERSION = os.environ.get("CHROMEDRIVER_VERSION", "").strip() or None
SETTINGS_FILE = os.environ.get("ARCHIVER_SETTINGS") or settings_path(_PROJECT_ROOT)

_channel_ref = []
_driver_ref = []
_keyboard_listener = None
_stop_event = threading.Event()


def _arg_value(name: str):
    # --name=value из sys.argv
    prefix = f"--{name}="
    for a in sys.argv[1:]:
        if a.startswith(prefix):
            return a[len(prefix):]
    return None


def parse_delay_ms(raw, default: int, source: str) -> int:
    # задержка в мс из .env или аргумента; мусор -> предупреждение и default
    if raw is None or not str(raw).strip():
        return default
    try:
        return max(0, int(raw))
    except ValueError:
        logging.warning("Некорректная задержка %s=%s, используем %d мс", source, raw, default)
        return default


def _send(action: str):
    if _channel_ref:
        resp = _channel_ref[0].handle({"action": action})
        logging.info("Команда %s: %s", action, resp)


def _init_hotkeys():
    # Ctrl+X — стоп, Ctrl+P — пауза / продолжить (pynput)
    global _keyboard_listener
    try:
        from pynput.keyboard import GlobalHotKeys
    except ImportError:
        return False

    def on_stop():
        _stop_event.set()
        _send("stop")

    def on_pause():
        if _channel_ref:
            _channel_ref[0].toggle_pause()

    try:
        _keyboard_listener = GlobalHotKeys({"<ctrl>+x": on_stop, "<ctrl>+p": on_pause})
        _keyboard_listener.start()
        return True
    except Exception as e:
        # нет дисплея / нет прав на перехват клавиатуры
        logging.warning("Горячие клавиши недоступны: %s", e)
        _keyboard_listener = None
        return False


def _shutdown_keyboard_listener():
    global _keyboard_listener
    if _keyboard_listener is not None:
        try:
            _keyboard_listener.stop()
        except Exception:
            logging.debug("Слушатель клавиш уже остановлен")
        _keyboard_listener = None


def get_chrome_service():
    try:
        path = ChromeDriverManager(driver_version=CHROMEDRIVER_VERSION).install()
    except Exception as e:
        # Selenium Manager найдёт драйвер сам
        logging.warning("webdriver-manager: %s — используем Selenium Manager", e)
        return None
    return Service(executable_path=path)


def create_chrome_driver(chrome_path=None, user_data_dir=None, profile=None, headless=False):
    # WebDriver для Chrome с профилем пользователя (сессия уже залогинена)
    options = Options()
    if chrome_path:
        if not os.path.isfile(chrome_path):
            raise FileNotFoundError(
                f"Chrome не найден: {chrome_path}\n"
                "Укажите путь в переменной CHROME_BINARY."
            )
        options.binary_location = chrome_path
    if headless:
        options.add_argument("--headless=new")

    if user_data_dir:
        ud = os.path.expandvars(os.path.expanduser(user_data_dir))
        if os.path.isdir(ud):
            options.add_argument(f"--user-data-dir={ud}")
            options.add_argument(f"--profile-directory={profile or 'Default'}")
        else:
            logging.warning("Каталог профиля не найден: %s", ud)

    service = get_chrome_service()
    if service is not None:
        return webdriver.Chrome(service=service, options=options)
    return webdriver.Chrome(options=options)


def _close_browser():
    # закрыть драйвер и слушатель клавиш
    _shutdown_keyboard_listener()
    if _driver_ref:
        try:
            _driver_ref[0].quit()
        except WebDriverException:
            logging.debug("Драйвер уже закрыт")
        _driver_ref.clear()


def _print_progress(count: int):
    # одна строка в консоли, перезаписывается
    print(f"\r{DEFAULT_CATALOG.get('message_selected', count, locale=_current_locale())}", end="", flush=True)


def _current_locale():
    return _channel_ref[0].state.locale if _channel_ref else None


def notify(title: str, message: str):
    print()
    print(f"[{title}] {message}")
    logging.info("Уведомление: %s", message)


def wait_for_messaging_page(page, timeout: float = 300, poll: float = 1.0) -> bool:
    # ждём, пока пользователь войдёт и откроет страницу сообщений
    deadline = time.time() + timeout
    while time.time() < deadline:
        if _stop_event.is_set():
            return False
        if MESSAGING_URL_PATTERN in page.current_url():
            return True
        time.sleep(poll)
    return False


def main():
    _logs_dir = os.path.join(_PROJECT_ROOT, "logs")
    os.makedirs(_logs_dir, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        filename=os.path.join(_logs_dir, "archiver_robot.log"),
        encoding="utf-8",
        format="%(asctime)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    settings = load_settings(SETTINGS_FILE, Settings(
        language=os.environ.get("ARCHIVER_LANGUAGE", "en"),
        message_delay_ms=parse_delay_ms(os.environ.get("ARCHIVER_DELAY_MS"), 1000, "ARCHIVER_DELAY_MS"),
    ))
    lang = _arg_value("lang")
    delay = _arg_value("delay")
    if delay is not None:
        settings.message_delay_ms = parse_delay_ms(delay, settings.message_delay_ms, "--delay")

    _stop_event.clear()
    headless = "--headless" in sys.argv

    driver = create_chrome_driver(
        chrome_path=os.environ.get("CHROME_BINARY"),
        user_data_dir=os.environ.get("CHROME_USER_DATA"),
        profile=os.environ.get("CHROME_PROFILE"),
        headless=headless,
    )
    _driver_ref.append(driver)
    atexit.register(_close_browser)

    def _on_signal(signum, frame):
        _stop_event.set()
        _send("stop")
        _close_browser()
        sys.exit(0)
    signal.signal(signal.SIGINT, _on_signal)
    signal.signal(signal.SIGTERM, _on_signal)

    driver.implicitly_wait(0)
    driver.set_page_load_timeout(90)

    def _on_finished(result):
        if settings.show_notifications:
            notify(DEFAULT_CATALOG.get("notification_title", locale=_current_locale()), result.message)

    page = SeleniumPage(driver)
    channel = CommandChannel(
        page,
        locale=settings.language,
        on_progress=_print_progress,
        on_finished=_on_finished,
    )
    _channel_ref.append(channel)
    if lang is not None:
        channel.handle({"action": "setLanguage", "language": lang})
        settings.language = lang

    if _init_hotkeys():
        logging.info("Горячие клавиши: Ctrl+X — стоп, Ctrl+P — пауза/продолжить")

    exit_code = 0
    try:
        driver.get(BASE_URL)
        if not wait_for_messaging_page(page):
            logging.error(channel.state.message("error_not_messaging_page"))
            print(channel.state.message("error_not_messaging_page"))
            sys.exit(1)

        response = channel.handle({"action": "start", "delay": settings.message_delay_ms})
        if response["success"]:
            logging.info("Готово: %s", response["message"])
        else:
            logging.error("Ошибка: %s", response["error"])
            exit_code = 1
        save_settings(SETTINGS_FILE, settings)
    except Exception:
        logging.exception("Ошибка при выполнении сценария")
        exit_code = 1
    finally:
        _close_browser()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
