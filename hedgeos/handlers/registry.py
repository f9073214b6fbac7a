from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Callable

from hedgeos.core.audio import AudioPlayer
from hedgeos.core.errors import HandlerError
from hedgeos.core.logging import get_logger, log_event
from hedgeos.core.tree_store import Node, get_extension
from hedgeos.handlers.app_handler import AppHandler
from hedgeos.handlers.base import Handler, IntervalFactory
from hedgeos.handlers.content import (
    ArchiveHandler,
    LinkHandler,
    MarkdownHandler,
    ShellHandler,
    TextHandler,
)

logger = get_logger(__name__)

DEFAULT_FILE_TYPE = "text"

EXTENSION_FILE_TYPES: Mapping[str, str] = {
    "md": "markdown",
    "sh": "shell",
    "bash": "shell",
    "txt": "text",
    "link": "link",
    "app": "app",
    "tar": "archive",
    "gz": "archive",
    "zip": "archive",
}


class HandlerRegistry:
    """Maps file type tags to handlers and picks one for a file.

    Resolution order, first match wins:

    1. the file's explicit ``file_type`` tag, when a handler is registered
       for it;
    2. the extension table, then any registered handler whose
       ``can_handle`` accepts the file;
    3. the default handler.

    Resolution never fails once a default handler is registered.
    """

    def __init__(
        self,
        handlers: Iterable[Handler] = (),
        *,
        default_type: str = DEFAULT_FILE_TYPE,
        extension_types: Mapping[str, str] = EXTENSION_FILE_TYPES,
    ) -> None:
        self._handlers: dict[str, Handler] = {}
        self._default_type = default_type
        self._extension_types = dict(extension_types)
        for handler in handlers:
            self.register(handler)

    def register(self, handler: Handler) -> None:
        tag = handler.file_type
        if not tag:
            raise HandlerError("Handler has no file type tag", repr(handler))
        if tag in self._handlers:
            raise HandlerError(f"A handler is already registered for {tag!r}")
        self._handlers[tag] = handler

    def get(self, file_type: str) -> Handler | None:
        return self._handlers.get(file_type)

    @property
    def file_types(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    @property
    def default_handler(self) -> Handler:
        handler = self._handlers.get(self._default_type)
        if handler is None:
            raise HandlerError(f"No default handler registered for {self._default_type!r}")
        return handler

    def resolve(self, file: Node) -> Handler:
        handler, reason = self._resolve(file)
        log_event(
            logger,
            "handler_dispatch",
            path=file.path,
            handler=handler.file_type,
            reason=reason,
        )
        return handler

    def _resolve(self, file: Node) -> tuple[Handler, str]:
        if file.file_type:
            tagged = self._handlers.get(file.file_type)
            if tagged is not None:
                return tagged, "file_type"

        mapped = self._extension_types.get(get_extension(file.name))
        if mapped is not None:
            by_extension = self._handlers.get(mapped)
            if by_extension is not None:
                return by_extension, "extension"

        for tag, candidate in self._handlers.items():
            if tag != self._default_type and candidate.can_handle(file):
                return candidate, "can_handle"

        return self.default_handler, "default"


def build_default_registry(
    *,
    interval_factory: IntervalFactory,
    audio_player: AudioPlayer | None = None,
    clock: Callable[[], datetime] | None = None,
    open_url: Callable[[str], None] | None = None,
) -> HandlerRegistry:
    return HandlerRegistry(
        [
            MarkdownHandler(),
            LinkHandler(open_url=open_url),
            ShellHandler(),
            AppHandler(
                interval_factory=interval_factory,
                audio_player=audio_player,
                clock=clock,
            ),
            TextHandler(),
            ArchiveHandler(),
        ]
    )
