from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.timer import Timer
from textual.widgets import Footer
from textual.worker import Worker, WorkerState

from hedgeos import __version__
from hedgeos.core.audio import AudioManager, AudioPlayer
from hedgeos.core.command_provider import HedgeCommandProvider
from hedgeos.core.config import get_runtime_config
from hedgeos.core.errors import NotAFolder, NotFound, format_error, wrap_error
from hedgeos.core.logging import get_logger, log_event
from hedgeos.core.messages import (
    CloseWindowRequest,
    FocusWindowRequest,
    NavigateRequest,
    OpenNodeRequest,
)
from hedgeos.core.navigation import Breadcrumb, Navigator
from hedgeos.core.path_navigation import join_path, parent_path
from hedgeos.core.paths import STYLES_PATH, resolve_data_file, settings_path
from hedgeos.core.settings_store import SettingsStore
from hedgeos.core.state import AppState, AppStateStore
from hedgeos.core.tree_store import Node, TreeStore
from hedgeos.core.window_manager import OpenWindow, WindowEvent, WindowManager
from hedgeos.core.worker_groups import WorkerGroup
from hedgeos.handlers.content import open_in_browser
from hedgeos.handlers.registry import build_default_registry
from hedgeos.themes.themes import ALL_THEMES
from hedgeos.widgets.breadcrumbs import Breadcrumbs
from hedgeos.widgets.file_grid import FileGrid
from hedgeos.widgets.load_failed import LoadFailedScreen
from hedgeos.widgets.navigation_sidebar import NavigationSidebar
from hedgeos.widgets.terminal import TerminalLog
from hedgeos.widgets.top_bar import TopBar
from hedgeos.widgets.window import Desktop

logger = get_logger(__name__)

MUSIC_PLAYER_PATH = "Applications/music_player.app"


class HedgeOS(App):
    TITLE = "HedgeOS"
    CSS_PATH = STYLES_PATH
    COMMANDS = App.COMMANDS | {HedgeCommandProvider}

    BINDINGS = [
        Binding("ctrl+h", "toggle_hidden", "Hidden files", show=True),
        Binding("m", "open_music_player", "Music", show=True),
        Binding("escape", "close_top_window", "Close window", show=True),
        Binding("ctrl+w", "close_all_windows", "Close all", show=False),
        Binding("alt+left", "back", "Back", show=False),
        Binding("alt+right", "forward", "Forward", show=False),
        Binding("tilde", "go_home", "Home", key_display="~", show=False),
        Binding("ctrl+l", "clear_terminal", "Clear log", show=False),
        Binding("question_mark", "toggle_help", "Keys", key_display="?", show=True),
    ]

    def __init__(
        self,
        *,
        data_file: Path | str | None = None,
        start_path: str | None = None,
        settings_store: SettingsStore | None = None,
        audio_player: AudioPlayer | None = None,
        clock: Callable[[], datetime] | None = None,
        open_url: Callable[[str], None] | None = None,
    ) -> None:
        config = get_runtime_config()
        self.settings_store = settings_store or SettingsStore(settings_path())
        self.settings = self.settings_store.load_model()
        preferences = self.settings.userPreferences
        self.data_file = resolve_data_file(data_file, config.data_file)
        self._start_path = start_path or preferences.startupPath or None
        self.state_store = AppStateStore(AppState(show_hidden=preferences.showHidden))
        self.tree_store = TreeStore()
        self.navigator = Navigator(self.tree_store)
        self.window_manager = WindowManager()
        self.audio_player = audio_player or self._build_audio_player()
        self._url_opener = open_url or open_in_browser
        self._released = False
        super().__init__()
        self.handler_registry = build_default_registry(
            interval_factory=self._start_interval,
            audio_player=self.audio_player,
            clock=clock,
            open_url=self._open_url,
        )

    def _build_audio_player(self) -> AudioManager:
        audio = self.settings.audio
        track = Path(audio.track).expanduser() if audio.track else None
        return AudioManager(track, volume=audio.volume, player=audio.player)

    @property
    def show_hidden(self) -> bool:
        return self.state_store.state.show_hidden

    def compose(self) -> ComposeResult:
        with Vertical(id="app_main_container"):
            yield TopBar(
                app_title=HedgeOS.TITLE,
                app_version=__version__,
                state_store=self.state_store,
            )
            yield Breadcrumbs(id="breadcrumbs")
            yield Horizontal(
                NavigationSidebar(state_store=self.state_store, id="sidebar"),
                Desktop(self.window_manager, id="desktop"),
                id="main_pane",
            )
            yield TerminalLog(id="terminal")
        yield Footer()

    def on_mount(self) -> None:
        for theme in ALL_THEMES:
            self.register_theme(theme)
        theme = self.settings.userPreferences.theme
        self.theme = theme if theme in self.available_themes else "hedge-rose"
        self.console.set_window_title("HedgeOS")
        self.window_manager.subscribe(self._on_window_event)

        terminal = self.query_one(TerminalLog)
        terminal.system(f"HedgeOS v{__version__} initialized")
        terminal.log_line("Loading filesystem...")
        self.run_worker(
            lambda source=self.data_file: self.tree_store.load(source),
            group=WorkerGroup.TREE_LOAD,
            exclusive=True,
            thread=True,
            exit_on_error=False,
        )

    def on_unmount(self) -> None:
        self.release_resources()

    def release_resources(self) -> None:
        """Close every window and silence the audio; safe to call twice."""
        if self._released:
            return
        self._released = True
        self.window_manager.unsubscribe(self._on_window_event)
        try:
            self.window_manager.close_all()
        finally:
            stop = getattr(self.audio_player, "stop", None)
            if callable(stop):
                stop()

    def _start_interval(self, seconds: float, callback: Callable[[], None]) -> Timer:
        return self.set_interval(seconds, callback)

    def _open_url(self, url: str) -> None:
        self.query_one(TerminalLog).command(f"exec: opening {url}")
        self._url_opener(url)

    @on(Worker.StateChanged)
    def _on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        worker = event.worker
        if worker.group != WorkerGroup.TREE_LOAD:
            return
        if event.state is WorkerState.SUCCESS:
            self._on_tree_loaded()
        elif event.state is WorkerState.ERROR:
            self._on_tree_load_failed(worker.error or RuntimeError("Filesystem load failed."))

    def _on_tree_loaded(self) -> None:
        self.query_one(NavigationSidebar).populate(self.tree_store, include_hidden=self.show_hidden)
        start = self._start_path
        if not start or not self.tree_store.is_folder(start):
            start = self.tree_store.home_path
        self.navigate(start)
        self.state_store.set_status("Ready")
        terminal = self.query_one(TerminalLog)
        terminal.success("System ready")
        terminal.system("Welcome to HedgeOS!")
        self.query_one(FileGrid).focus()

    def _on_tree_load_failed(self, error: BaseException) -> None:
        message, _severity = format_error(
            wrap_error(error, code="load_failed", message="Filesystem load failed")
        )
        log_event(logger, "startup_failed", error=message)
        self.state_store.set_status("Load failed")
        self.query_one("#app_main_container").display = False
        self.push_screen(LoadFailedScreen(message))

    def navigate(self, path: str) -> bool:
        if not self.tree_store.loaded:
            return False
        try:
            crumbs = self.navigator.set_path(path)
        except (NotFound, NotAFolder) as exc:
            message, severity = format_error(exc)
            self.query_one(TerminalLog).error(str(exc))
            self.notify(message, severity=severity)
            return False
        self._render_location(crumbs)
        self.query_one(TerminalLog).log_nav(path)
        return True

    def _render_location(self, crumbs: tuple[Breadcrumb, ...]) -> None:
        path = self.navigator.current_path
        contents = self.navigator.get_contents(self.show_hidden)
        parent = parent_path(path, self.tree_store.home_path)
        self.query_one(FileGrid).show_listing(path, contents, parent=parent)
        self.query_one(Breadcrumbs).set_crumbs(crumbs)
        self.state_store.set_current_path(path)
        self.sub_title = path

    def open_file(self, node: Node) -> OpenWindow:
        self.query_one(TerminalLog).log_open(node.name)
        handler = self.handler_registry.resolve(node)
        return self.window_manager.open(node, handler)

    def close_window(self, path: str) -> bool:
        window = self.window_manager.get(path)
        if window is None:
            return False
        self.window_manager.close(path)
        self.query_one(TerminalLog).log_close(window.file.name)
        return True

    def _on_window_event(self, _event: WindowEvent) -> None:
        self.state_store.set_open_windows(len(self.window_manager))

    @on(NavigateRequest)
    def handle_navigation(self, event: NavigateRequest) -> None:
        self.navigate(event.path)

    @on(OpenNodeRequest)
    def handle_open_node(self, event: OpenNodeRequest) -> None:
        if event.node.is_folder:
            self.navigate(event.node.path)
        else:
            self.open_file(event.node)

    @on(CloseWindowRequest)
    def handle_close_window(self, event: CloseWindowRequest) -> None:
        self.close_window(event.path)

    @on(FocusWindowRequest)
    def handle_focus_window(self, event: FocusWindowRequest) -> None:
        if self.window_manager.top is not self.window_manager.get(event.path):
            self.window_manager.focus(event.path)

    def action_toggle_hidden(self) -> None:
        visible = not self.show_hidden
        self.state_store.set_show_hidden(visible)
        self.query_one(TerminalLog).log_hidden_toggle(visible)
        if not self.tree_store.loaded:
            return
        self.query_one(NavigationSidebar).populate(self.tree_store, include_hidden=visible)
        self._render_location(self.navigator.breadcrumbs())

    def action_open_music_player(self) -> None:
        if not self.tree_store.loaded:
            return
        path = join_path(self.tree_store.home_path, MUSIC_PLAYER_PATH)
        node = self.tree_store.get_item(path)
        if node is None or node.is_folder:
            self.query_one(TerminalLog).error("Music player not found")
            return
        self.open_file(node)

    def action_close_top_window(self) -> None:
        top = self.window_manager.top
        if top is not None:
            self.close_window(top.path)

    def action_close_all_windows(self) -> None:
        for window in self.window_manager.windows:
            self.close_window(window.path)

    def action_back(self) -> None:
        crumbs = self.navigator.back()
        if crumbs is not None:
            self._render_location(crumbs)
            self.query_one(TerminalLog).log_nav(self.navigator.current_path)

    def action_forward(self) -> None:
        crumbs = self.navigator.forward()
        if crumbs is not None:
            self._render_location(crumbs)
            self.query_one(TerminalLog).log_nav(self.navigator.current_path)

    def action_go_home(self) -> None:
        if self.tree_store.loaded:
            self.navigate(self.tree_store.home_path)

    def action_clear_terminal(self) -> None:
        self.query_one(TerminalLog).clear()

    def action_toggle_help(self) -> None:
        try:
            self.screen.query_one("HelpPanel")
        except NoMatches:
            self.action_show_help_panel()
        else:
            self.action_hide_help_panel()


def main(
    *,
    data_file: Path | str | None = None,
    start_path: str | None = None,
) -> int:
    from hedgeos.core.logging import configure_logging

    config = get_runtime_config()
    configure_logging(
        level=config.log_level,
        format_name=config.log_format,
        log_dir=config.log_dir,
    )
    app = HedgeOS(data_file=data_file, start_path=start_path)
    try:
        app.run()
    finally:
        app.release_resources()
    return app.return_code or 0
