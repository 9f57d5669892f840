"""Shared fixtures: a fake messaging page standing in for SeleniumPage."""

from __future__ import annotations

import pytest
from selenium.common.exceptions import StaleElementReferenceException

from config import ArchiverConfig, Selectors, Timing
from run_state import RunState

VIEWPORT = 800
ITEM_HEIGHT = 80


class FakeElement:
    def __init__(self, page, kind, index=None, attrs=None, text="", tracked=True):
        self.page = page
        self.kind = kind
        self.index = index
        self.attrs = attrs or {}
        self.text = text
        self.generation = page.generation
        self.tracked = tracked
        self.clicks = 0

    def check_fresh(self):
        if self.tracked and self.generation != self.page.generation:
            raise StaleElementReferenceException(f"stale {self.kind} #{self.index}")

    def __repr__(self):
        return f"<FakeElement {self.kind} {self.index}>"


class FakeItem:
    def __init__(self, key, checked=False, stubborn=False):
        self.key = key
        self.checked = checked
        self.stubborn = stubborn
        self.clicks = 0


class FakeMessagingPage:
    """
    Conversation list of ``n_items`` rows, ``ITEM_HEIGHT`` px each, inside a
    container as tall as the viewport.

    * ``loaded`` rows are present at first; each scroll to the very bottom
      loads ``batch`` more until ``growth_steps`` loads happened.
    * ``virtualize`` renders only rows near the current scroll offset.
    * every scroll change or forced re-render invalidates earlier handles.
    """

    def __init__(
        self,
        n_items=0,
        loaded=None,
        batch=0,
        growth_steps=0,
        virtualize=False,
        checked=(),
        stubborn=(),
        item_ids=True,
        list_present=True,
        action_bar=True,
        bar_buttons=None,
        global_buttons=None,
        rerender_after_click=(),
        item_height=ITEM_HEIGHT,
        on_click=None,
    ):
        self.selectors = Selectors()
        self.generation = 0
        self.items = [
            FakeItem(f"item-{i}" if item_ids else None, checked=i in checked, stubborn=i in stubborn)
            for i in range(n_items)
        ]
        self.loaded = n_items if loaded is None else loaded
        self.batch = batch
        self.growth_steps = growth_steps
        self.loads_done = 0
        self.virtualize = virtualize
        self.item_height = item_height
        self.list_present = list_present
        self.scroll_top = 0
        self.bottom_scrolls = 0
        self.observed = []
        self.found = []
        self.clicks = []
        self.action_clicks = []
        self.rerender_after_click = set(rerender_after_click)
        self.on_click = on_click

        self.bar = FakeElement(self, "bar", tracked=False) if action_bar else None
        if bar_buttons is None:
            bar_buttons = [{"aria-label": "Archive selected conversations"}]
        self.bar_buttons = [self._button(b) for b in bar_buttons]
        self.global_buttons = {sel: self._button(b) for sel, b in (global_buttons or {}).items()}

    def _button(self, spec):
        spec = dict(spec)
        text = spec.pop("text", "")
        return FakeElement(self, "button", attrs=spec, text=text, tracked=False)

    # geometry

    def _height(self):
        return self.loaded * self.item_height

    def _max_scroll(self):
        return max(0, self._height() - VIEWPORT)

    def _set_scroll(self, top):
        top = min(max(0, top), self._max_scroll())
        if top != self.scroll_top:
            self.scroll_top = top
            self.rerender()

    def rerender(self):
        self.generation += 1

    def _item_top(self, index):
        return index * self.item_height - self.scroll_top

    def _rendered(self):
        for i in range(self.loaded):
            top = self._item_top(i)
            if self.virtualize and not (-VIEWPORT <= top < 2 * VIEWPORT):
                continue
            yield i

    # page surface

    def find(self, selector, root=None):
        self.found.append(selector)
        els = self.find_all(selector, root)
        return els[0] if els else None

    def find_all(self, selector, root=None):
        sel = self.selectors
        if root is not None:
            if root is self.bar and selector == "button":
                return list(self.bar_buttons)
            return []
        if selector == sel.message_list:
            return [FakeElement(self, "list")] if self.list_present else []
        if selector == sel.item_checkbox:
            return [FakeElement(self, "checkbox", i) for i in self._rendered()]
        if selector == sel.unchecked_item_checkbox:
            return [FakeElement(self, "checkbox", i) for i in self._rendered() if not self.items[i].checked]
        if selector == sel.action_bar:
            return [self.bar] if self.bar is not None else []
        if selector in self.global_buttons:
            return [self.global_buttons[selector]]
        return []

    def observe(self, selector, timeout):
        self.observed.append(selector)
        return None

    def closest(self, el, selector):
        el.check_fresh()
        if selector == self.selectors.checkbox_container:
            return FakeElement(self, "container", el.index)
        if selector == self.selectors.message_item:
            key = self.items[el.index].key
            return FakeElement(self, "item", el.index, attrs={"id": key} if key else {})
        return None

    def is_checked(self, el):
        el.check_fresh()
        return self.items[el.index].checked

    def in_viewport(self, el):
        el.check_fresh()
        top = self._item_top(el.index)
        return top >= 0 and top + self.item_height <= VIEWPORT

    def scroll_into_view(self, el):
        # browser scrolls without re-rendering, handles stay valid
        el.check_fresh()
        top = el.index * self.item_height - (VIEWPORT - self.item_height) // 2
        self.scroll_top = min(max(0, top), self._max_scroll())

    def click(self, el, scroll=False):
        el.check_fresh()
        el.clicks += 1
        if el.kind == "button":
            self.action_clicks.append(el)
            return True
        item = self.items[el.index]
        item.clicks += 1
        if not item.stubborn:
            item.checked = True
        self.clicks.append(el.index)
        if self.on_click is not None:
            self.on_click(len(self.clicks))
        if len(self.clicks) in self.rerender_after_click:
            self.rerender()
        return True

    def scroll_height(self, el):
        el.check_fresh()
        return self._height()

    def scroll_to(self, el, top):
        el.check_fresh()
        if top > 0 and top >= self._height():
            self.bottom_scrolls += 1
            if self.loads_done < self.growth_steps:
                self.loads_done += 1
                self.loaded = min(len(self.items), self.loaded + self.batch)
        self._set_scroll(top)

    def scroll_by(self, el, delta):
        el.check_fresh()
        self._set_scroll(self.scroll_top + delta)

    def viewport_height(self):
        return VIEWPORT

    def attribute(self, el, name):
        return el.attrs.get(name, "")

    def text(self, el):
        return el.text

    def current_url(self):
        return "https://www.linkedin.com/messaging/"


class RecordingSleep:
    """Records requested sleeps; optionally runs a hook on every call."""

    def __init__(self):
        self.calls = []
        self.hook = None

    def __call__(self, seconds):
        self.calls.append(seconds)
        if self.hook is not None:
            self.hook()


@pytest.fixture
def timing():
    return Timing(
        element_timeout=0,
        action_bar_timeout=0,
        scroll_delay=0,
        check_delay=0,
        action_delay=0,
        poll=0,
    )


@pytest.fixture
def config(timing):
    return ArchiverConfig(timing=timing)


@pytest.fixture
def selectors():
    return Selectors()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def progress_events():
    return []


@pytest.fixture
def state(sleep, progress_events):
    return RunState(sleep=sleep, on_progress=progress_events.append)
