# -*- coding: utf-8 -*-
"""
Строки для пользователя (en / es).
Ключ сообщения + позиционные подстановки {0}, {1}...
"""
import logging
from typing import Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

_EN = {
    "starting_process": "Starting archive process",
    "loading_messages": "Loading all messages...",
    "scroll_completed": "Finished loading messages",
    "starting_selection": "Selecting messages (attempt {0})",
    "message_selected": "Messages selected: {0}",
    "retrying_selection": "{0} messages still unselected, retrying",
    "searching_archive_button": "Looking for the archive button...",
    "archive_button_found": "Archive button found",
    "processing_stopped": "Processing stopped by user",
    "no_messages": "No messages to archive",
    "archive_success": "{0} messages archived",
    "warning_incomplete": " (some messages could not be selected)",
    "error_archive_button": "Archive button not found",
    "error_element_timeout": "Element not found: {0}",
    "error_selecting_message": "Error selecting a message",
    "error_archive_process": "Error during the archive process",
    "error_generic": "Error: {0}",
    "error_busy": "An archive run is already in progress",
    "error_unknown_action": "Unknown action: {0}",
    "error_not_messaging_page": "Open the messaging page before starting",
    "process_paused": "Process paused",
    "process_resumed": "Process resumed",
    "process_stopped": "Process stopped",
    "notification_title": "Message Archiver",
}

_ES = {
    "starting_process": "Iniciando el proceso de archivado",
    "loading_messages": "Cargando todos los mensajes...",
    "scroll_completed": "Carga de mensajes completada",
    "starting_selection": "Seleccionando mensajes (intento {0})",
    "message_selected": "Mensajes seleccionados: {0}",
    "retrying_selection": "Quedan {0} mensajes sin seleccionar, reintentando",
    "searching_archive_button": "Buscando el botón de archivar...",
    "archive_button_found": "Botón de archivar encontrado",
    "processing_stopped": "Proceso detenido por el usuario",
    "no_messages": "No hay mensajes para archivar",
    "archive_success": "{0} mensajes archivados",
    "warning_incomplete": " (algunos mensajes no se pudieron seleccionar)",
    "error_archive_button": "No se encontró el botón de archivar",
    "error_element_timeout": "Elemento no encontrado: {0}",
    "error_selecting_message": "Error al seleccionar un mensaje",
    "error_archive_process": "Error durante el proceso de archivado",
    "error_generic": "Error: {0}",
    "error_busy": "Ya hay un proceso de archivado en curso",
    "error_unknown_action": "Acción desconocida: {0}",
    "error_not_messaging_page": "Abre la página de mensajes antes de empezar",
    "process_paused": "Proceso en pausa",
    "process_resumed": "Proceso reanudado",
    "process_stopped": "Proceso detenido",
    "notification_title": "Archivador de mensajes",
}


class Catalog:
    """Неизменяемая таблица строк по локалям."""

    def __init__(self, tables: Mapping[str, Mapping[str, str]], default_locale: str = DEFAULT_LOCALE):
        if default_locale not in tables:
            raise ValueError(f"default locale {default_locale!r} has no table")
        self._tables: Dict[str, Dict[str, str]] = {k: dict(v) for k, v in tables.items()}
        self.default_locale = default_locale

    @property
    def supported_locales(self) -> Tuple[str, ...]:
        return tuple(self._tables)

    def is_supported(self, locale: Optional[str]) -> bool:
        return bool(locale) and self._base(locale) in self._tables

    def _base(self, locale: str) -> str:
        # "es-ES" / "es_419" -> "es"
        return locale.replace("_", "-").split("-")[0].lower()

    def get(self, key: str, *subs, locale: Optional[str] = None) -> str:
        table = self._tables[self.default_locale]
        if locale and self.is_supported(locale):
            table = self._tables[self._base(locale)]
        template = table.get(key)
        if template is None:
            template = self._tables[self.default_locale].get(key)
        if template is None:
            logger.warning("messages: нет перевода для ключа %s", key)
            return key
        if not subs:
            return template
        return template.format(*subs)


DEFAULT_CATALOG = Catalog({"en": _EN, "es": _ES})
