import signal
import sys
from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication

from packages.shared.paths import ensure_app_dirs
from packages.shared.store import ConfigStore
from packages.core.logging_ import setup_logging
from packages.core.usage.cache import SessionCache
from packages.core.usage.coordinator import RefreshCoordinator
from packages.core.usage.presentation import build_menu
from packages.core.usage.prober import CommandProber
from .ui.tray import TrayController


def main() -> None:
    ensure_app_dirs()
    setup_logging()
    cfg = ConfigStore().load()

    app = QApplication(sys.argv)
    # Tray-only app: no window closing should end the process
    app.setQuitOnLastWindowClosed(False)

    cache = SessionCache()
    prober = CommandProber(config=cfg.to_prober_config())
    coordinator = RefreshCoordinator(
        config=cfg.to_coordinator_config(),
        cache=cache,
        prober=prober,
    )
    tray = TrayController(app, coordinator, show_debug_dialog=cfg.show_debug_dialog)
    coordinator.attach_host(tray)
    tray.show(build_menu(cache.snapshot()))
    coordinator.start()

    def signal_handler(sig, frame):
        print("\nReceived interrupt signal (Ctrl+C), shutting down...", file=sys.stderr)
        app.quit()

    if hasattr(signal, 'SIGINT'):
        signal.signal(signal.SIGINT, signal_handler)

    # Let the interpreter run periodically so the SIGINT handler can fire
    heartbeat = QTimer()
    heartbeat.timeout.connect(lambda: None)
    heartbeat.start(500)

    app.aboutToQuit.connect(coordinator.stop)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
