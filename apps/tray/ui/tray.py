"""
System tray host: renders the presentation model as a QMenu and routes
item actions back to the refresh coordinator.
"""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, QUrl, Signal, Slot
from PySide6.QtGui import QAction, QDesktopServices, QIcon
from PySide6.QtWidgets import QApplication, QMenu, QMessageBox, QStyle, QSystemTrayIcon

from packages.core.usage.coordinator import RefreshCoordinator
from packages.core.usage.presentation import (
    MenuItem,
    ModelInfo,
    OpenLink,
    PresentationModel,
    Quit,
    Refresh,
    ShowDebug,
)

log = logging.getLogger(__name__)


class TrayController(QObject):
    """
    Qt side of the TrayHost interface.

    The coordinator calls set_title / set_menu / show_debug_report from worker
    threads; the signals below queue those calls onto the UI thread.
    """

    _title_changed = Signal(str)
    _menu_changed = Signal(object)
    _debug_ready = Signal(str)

    def __init__(self, app: QApplication, coordinator: RefreshCoordinator, show_debug_dialog: bool = True) -> None:
        super().__init__()
        self._app = app
        self._coordinator = coordinator
        self._show_debug_dialog = show_debug_dialog
        self._menu: Optional[QMenu] = None

        self._tray = QSystemTrayIcon(self._load_icon(), self)
        self._tray.setToolTip("CCUsage")

        self._title_changed.connect(self._apply_title)
        self._menu_changed.connect(self._apply_menu)
        self._debug_ready.connect(self._apply_debug_report)

        coordinator.on_error(self._on_coordinator_error)

    def show(self, initial: PresentationModel) -> None:
        self._apply_menu(initial)
        self._tray.show()

    # TrayHost
    def set_title(self, text: str) -> None:
        self._title_changed.emit(text)

    def set_menu(self, model: PresentationModel) -> None:
        self._menu_changed.emit(model)

    def show_debug_report(self, text: str) -> None:
        self._debug_ready.emit(text)

    def _load_icon(self) -> QIcon:
        icon = QIcon.fromTheme("utilities-system-monitor")
        if icon.isNull():
            icon = self._app.style().standardIcon(QStyle.StandardPixmap.SP_ComputerIcon)
        return icon

    @Slot(str)
    def _apply_title(self, text: str) -> None:
        # Tray icons have no text title on every platform, the tooltip does
        self._tray.setToolTip(f"CCUsage {text}".strip())

    @Slot(object)
    def _apply_menu(self, model: PresentationModel) -> None:
        menu = QMenu()
        for idx, section in enumerate(model.sections):
            if idx:
                menu.addSeparator()
            for item in section:
                menu.addAction(self._build_action(menu, item))
        self._tray.setContextMenu(menu)
        # Keep a reference, QSystemTrayIcon does not take ownership
        self._menu = menu

    def _build_action(self, menu: QMenu, item: MenuItem) -> QAction:
        action = QAction(item.label, menu)
        action.setEnabled(item.enabled)
        if isinstance(item.action, Quit):
            action.setShortcut("Ctrl+Q")
        if item.action is not None:
            bound = item.action
            action.triggered.connect(lambda _checked=False: self._dispatch(bound))
        return action

    def _dispatch(self, action: object) -> None:
        match action:
            case Refresh():
                self._coordinator.request_refresh()
            case ShowDebug():
                self._coordinator.request_debug_report()
            case Quit():
                self._tray.hide()
                self._app.quit()
            case OpenLink(url=url):
                if not QDesktopServices.openUrl(QUrl(url)):
                    log.error("Failed to open %s", url)
            case ModelInfo():
                pass
            case _:
                log.warning("Unhandled menu action: %r", action)

    @Slot(str)
    def _apply_debug_report(self, text: str) -> None:
        if not self._show_debug_dialog:
            return
        try:
            QMessageBox.information(None, "CCUsage Debug Info", text)
        except Exception:
            log.exception("Failed to show debug dialog")

    def _on_coordinator_error(self, msg: str) -> None:
        log.error("Coordinator error: %s", msg)
