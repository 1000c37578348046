# -*- coding: utf-8 -*-
import sys
import argparse
import logging
from pathlib import Path

from PyQt5.QtWidgets import QApplication, QSystemTrayIcon, QMenu, QAction, QStyle
from PyQt5.QtCore import Qt, QTimer
from PyQt5.QtGui import QIcon

from .alarm_store import AlarmStore
from .app_settings import APP_NAME, get_config_dir, load_settings, resource_path
from .overlay import OverlayPresenter, TEST_TEXT
from .settings_window import AlarmSettingsWindow
from .trigger_clock import TriggerClock

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

# --- Application Runtime ---

class AppRuntime:
    """Owns the tray icon, the poll timer and every collaborator for one run."""

    def __init__(self, app, config_dir, settings):
        self.app = app
        self.settings = settings
        self.store = AlarmStore(config_dir)
        self.presenter = OverlayPresenter()
        self.clock = TriggerClock(self.store.get_alarms, self.presenter)
        self.settings_window = None
        self.tray_icon = None

        self.poll_timer = QTimer()
        self.poll_timer.setInterval(settings['poll_interval_seconds'] * 1000)
        self.poll_timer.timeout.connect(self.on_poll)

    def start(self):
        self.create_tray_icon()
        self.reschedule()
        self.poll_timer.start()
        self.app.aboutToQuit.connect(self.stop)
        logger.info("Polling every %d s.", self.settings['poll_interval_seconds'])
        self.on_poll()

    def stop(self):
        if self.poll_timer.isActive():
            self.poll_timer.stop()
            logger.info("Poll timer stopped.")
        self.presenter.dismiss()
        if self.tray_icon is not None:
            self.tray_icon.hide()

    def on_poll(self):
        try:
            self.clock.tick()
        except Exception:
            logger.exception("Alarm check failed; polling continues.")
        self.update_tooltip()

    def reschedule(self):
        try:
            self.clock.reschedule()
        except Exception:
            logger.exception("Rescheduling failed; keeping previous schedule.")
        self.update_tooltip()

    def save_alarms(self, alarms):
        """Saves through the store and applies the new list immediately."""
        if not self.store.save_alarms(alarms):
            return False
        self.reschedule()
        return True

    # --- Tray ---
    def create_tray_icon(self):
        self.tray_icon = QSystemTrayIcon()
        icon_path = Path(resource_path("alarm.png"))
        if icon_path.is_file():
            self.tray_icon.setIcon(QIcon(str(icon_path)))
        else:
            self.tray_icon.setIcon(self.app.style().standardIcon(QStyle.SP_MessageBoxInformation))

        tray_menu = QMenu()
        # Menu and actions need an owner or they are garbage collected
        self.tray_menu = tray_menu
        settings_action = QAction("設定を開く", tray_menu, triggered=self.open_settings_window)
        test_action = QAction("テスト表示", tray_menu, triggered=self.show_test_overlay)
        dismiss_action = QAction("閉じる (オーバーレイ)", tray_menu, triggered=self.presenter.dismiss)
        exit_action = QAction("終了", tray_menu, triggered=self.exit_application)
        tray_menu.addAction(settings_action); tray_menu.addSeparator()
        tray_menu.addAction(test_action); tray_menu.addAction(dismiss_action); tray_menu.addSeparator()
        tray_menu.addAction(exit_action)

        self.tray_icon.setContextMenu(tray_menu)
        self.tray_icon.activated.connect(self.on_tray_icon_activated)
        self.tray_icon.setToolTip("時刻アラーム")
        self.tray_icon.show()

    def update_tooltip(self):
        if self.tray_icon is None:
            return
        pending = self.clock.pending()
        tooltip = "時刻アラーム"
        if pending:
            upcoming = min(pending, key=lambda t: t.minute_of_day)
            tooltip += f"\n次: {upcoming.trigger_hour:02d}:{upcoming.trigger_minute:02d}"
        self.tray_icon.setToolTip(tooltip)

    def on_tray_icon_activated(self, reason):
        if reason == QSystemTrayIcon.Trigger: self.open_settings_window()

    def show_test_overlay(self):
        if self.presenter.is_active:
            return
        try:
            self.presenter.display(TEST_TEXT)
        except Exception:
            logger.exception("Test overlay failed.")

    def open_settings_window(self):
        if self.settings_window is not None:
            self.settings_window.show(); self.settings_window.raise_(); self.settings_window.activateWindow()
            return
        self.settings_window = AlarmSettingsWindow(self.store.get_alarms(), self.save_alarms)
        self.settings_window.closed.connect(self.on_settings_window_closed)
        self.settings_window.show()

    def on_settings_window_closed(self):
        if self.settings_window is not None:
            self.settings_window.deleteLater()
        self.settings_window = None
        self.reschedule()

    def exit_application(self):
        logger.info("Exiting application...")
        self.stop()
        self.app.quit()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Full-screen check-in reminders from the system tray")
    parser.add_argument("--config-dir", help="Directory holding alarms.json and settings.json")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def load_configuration(args):
    """Sets up logging, then reads the config dir and settings.json."""
    # Handler and level first so messages from loading the settings are kept
    logging.basicConfig(format=LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if args.debug else logging.INFO)
    config_dir = get_config_dir(args.config_dir)
    settings = load_settings(config_dir)
    if not args.debug:
        root_logger.setLevel(settings['log_level'].upper())
    logger.info("Using config directory %s", config_dir)
    return config_dir, settings


# --- Application Entry Point ---
def main(argv=None):
    args = parse_args(argv)
    config_dir, settings = load_configuration(args)

    QApplication.setAttribute(Qt.AA_EnableHighDpiScaling, True)
    QApplication.setAttribute(Qt.AA_UseHighDpiPixmaps, True)

    app = QApplication(sys.argv[:1])
    app.setApplicationName(APP_NAME)
    # Tray app: closing the settings window or the overlay must not quit
    app.setQuitOnLastWindowClosed(False)

    runtime = AppRuntime(app, config_dir, settings)
    runtime.start()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
