# -*- coding: utf-8 -*-
"""
Узкий интерфейс к DOM поверх Selenium: поиск, наблюдение, клик, прокрутка.
Компоненты архиватора работают только через него, в тестах — подмена.
"""
import logging
import time
from typing import List, Optional

from selenium.webdriver.common.by import By
from selenium.webdriver.common.action_chains import ActionChains
from selenium.common.exceptions import (
    TimeoutException,
    StaleElementReferenceException,
    WebDriverException,
)

logger = logging.getLogger(__name__)

# ждём появления селектора через MutationObserver, без опроса из python
JS_OBSERVE_SELECTOR = """
const selector = arguments[0];
const timeoutMs = arguments[1];
const done = arguments[arguments.length - 1];
const found = document.querySelector(selector);
if (found) { done(found); return; }
let timer = null;
const mo = new MutationObserver(() => {
  const el = document.querySelector(selector);
  if (el) {
    mo.disconnect();
    clearTimeout(timer);
    done(el);
  }
});
mo.observe(document.body, {childList: true, subtree: true});
timer = setTimeout(() => { mo.disconnect(); done(null); }, timeoutMs);
"""

JS_IN_VIEWPORT = """
const r = arguments[0].getBoundingClientRect();
return r.top >= 0 && r.bottom <= window.innerHeight;
"""

# запас к таймауту скрипта поверх таймаута наблюдения
SCRIPT_TIMEOUT_MARGIN = 2.0


class SeleniumPage:
    def __init__(self, driver):
        self.driver = driver

    def find(self, selector: str, root=None):
        els = self.find_all(selector, root)
        return els[0] if els else None

    def find_all(self, selector: str, root=None) -> List:
        base = root if root is not None else self.driver
        try:
            return base.find_elements(By.CSS_SELECTOR, selector)
        except StaleElementReferenceException:
            return []

    def observe(self, selector: str, timeout: float):
        """Ждёт элемент через MutationObserver на document.body. None по таймауту."""
        try:
            self.driver.set_script_timeout(timeout + SCRIPT_TIMEOUT_MARGIN)
        except WebDriverException:
            pass
        try:
            return self.driver.execute_async_script(JS_OBSERVE_SELECTOR, selector, int(timeout * 1000))
        except TimeoutException:
            logger.debug("page: таймаут скрипта наблюдения за %s", selector)
            return None

    def closest(self, el, selector: str):
        return self.driver.execute_script("return arguments[0].closest(arguments[1]);", el, selector)

    def is_checked(self, el) -> bool:
        return bool(el.get_property("checked"))

    def in_viewport(self, el) -> bool:
        return bool(self.driver.execute_script(JS_IN_VIEWPORT, el))

    def scroll_into_view(self, el):
        try:
            self.driver.execute_script("arguments[0].scrollIntoView({block:'center'});", el)
        except WebDriverException:
            pass

    def click(self, el, scroll: bool = False) -> bool:
        # клик: (scrollIntoView), click / ActionChains / JS
        if scroll:
            self.scroll_into_view(el)
            time.sleep(0.1)
        try:
            el.click()
            return True
        except StaleElementReferenceException:
            raise
        except WebDriverException:
            pass
        try:
            ActionChains(self.driver).move_to_element(el).pause(0.05).click().perform()
            return True
        except StaleElementReferenceException:
            raise
        except WebDriverException:
            pass
        try:
            self.driver.execute_script("arguments[0].click();", el)
            return True
        except StaleElementReferenceException:
            raise
        except WebDriverException:
            return False

    def scroll_height(self, el) -> int:
        return int(el.get_property("scrollHeight") or 0)

    def scroll_to(self, el, top: int):
        self.driver.execute_script("arguments[0].scrollTo(0, arguments[1]);", el, top)

    def scroll_by(self, el, delta: int):
        self.driver.execute_script("arguments[0].scrollBy(0, arguments[1]);", el, delta)

    def viewport_height(self) -> int:
        return int(self.driver.execute_script("return window.innerHeight") or 0)

    def attribute(self, el, name: str) -> str:
        return el.get_attribute(name) or ""

    def text(self, el) -> str:
        return el.get_property("textContent") or ""

    def current_url(self) -> str:
        try:
            return self.driver.current_url or ""
        except WebDriverException:
            return ""
