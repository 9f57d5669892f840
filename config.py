# -*- coding: utf-8 -*-
"""
Селекторы и тайминги страницы сообщений.
Передаются в компоненты явно, глобального изменяемого состояния нет.
"""
from dataclasses import dataclass, field
from typing import Tuple


# список бесед (прокручиваемый контейнер)
MESSAGE_LIST = ".msg-conversations-container__conversations-list"
CHECKBOX = '.msg-selectable-entity__input[type="checkbox"]'
# кликаем по контейнеру, не по самому input
CHECKBOX_CONTAINER = ".msg-selectable-entity__checkbox-container"
MESSAGE_ITEM = ".msg-conversation-listitem:not(.msg-conversation-card--archived)"
ACTION_BAR = ".msg-multisend-action-bar"

# fallback: сначала атрибут, затем aria-label
ARCHIVE_BUTTON_SELECTORS = (
    'button[data-control-name="archive_selected"]',
    'button[aria-label*="Archive"]',
    'button[aria-label*="Archivar"]',
    '.msg-multisend-action-button[aria-label*="Archive"]',
    '.msg-multisend-action-button[aria-label*="Archivar"]',
)
ARCHIVE_TOKENS = ("archive", "archivar")

MESSAGING_URL_PATTERN = "linkedin.com/messaging"


@dataclass(frozen=True)
class Selectors:
    message_list: str = MESSAGE_LIST
    checkbox: str = CHECKBOX
    checkbox_container: str = CHECKBOX_CONTAINER
    message_item: str = MESSAGE_ITEM
    action_bar: str = ACTION_BAR
    archive_buttons: Tuple[str, ...] = ARCHIVE_BUTTON_SELECTORS
    archive_tokens: Tuple[str, ...] = ARCHIVE_TOKENS

    @property
    def item_checkbox(self) -> str:
        return f"{self.message_item} {self.checkbox}"

    @property
    def unchecked_item_checkbox(self) -> str:
        return f"{self.message_item} {self.checkbox}:not(:checked)"


# Что делать с частично видимыми элементами
SKIP_PARTIAL = "skip"
REVEAL_PARTIAL = "reveal"


@dataclass(frozen=True)
class Timing:
    # секунды
    element_timeout: float = 5.0
    action_bar_timeout: float = 2.0
    scroll_delay: float = 0.5
    check_delay: float = 0.1
    action_delay: float = 1.0
    poll: float = 0.1
    stable_checks: int = 3
    max_attempts: int = 3


@dataclass(frozen=True)
class SelectionPolicy:
    partial_items: str = SKIP_PARTIAL

    def __post_init__(self):
        if self.partial_items not in (SKIP_PARTIAL, REVEAL_PARTIAL):
            raise ValueError(f"unknown partial item policy: {self.partial_items!r}")


@dataclass(frozen=True)
class ArchiverConfig:
    selectors: Selectors = field(default_factory=Selectors)
    timing: Timing = field(default_factory=Timing)
    policy: SelectionPolicy = field(default_factory=SelectionPolicy)
