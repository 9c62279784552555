"""Main BubbleMap application."""

import logging
import sys
from typing import Optional

import gi
gi.require_version("Gtk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Gtk, Gio, GLib, Adw

from bubblemap import __app_id__
from bubblemap.canvas import BubbleCanvas
from bubblemap.config import PhysicsSettings, load_settings_or_defaults
from bubblemap.export import DiagramExporter, get_export_dir
from bubblemap.logging_config import setup_logging
from bubblemap.model import Node, Edge

logger = logging.getLogger(__name__)


class BubbleMapWindow(Adw.ApplicationWindow):
    """Main application window."""

    def __init__(self, app: Adw.Application, settings: PhysicsSettings):
        super().__init__(application=app)
        self.exporter = DiagramExporter()

        self.set_title("BubbleMap")
        self.set_default_size(1200, 800)

        self._build_ui(settings)
        self._setup_shortcuts()

    def _build_ui(self, settings: PhysicsSettings):
        """Build the main UI layout."""
        main_box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL)
        main_box.append(self._build_header())

        self.canvas = BubbleCanvas(settings)
        self.canvas.on_node_created = self._on_node_created

        canvas_frame = Gtk.Frame()
        canvas_frame.set_child(self.canvas)

        hint = Gtk.Label(label="Drag bubbles to move them. Hold a bubble to grow a connected one.")
        hint.add_css_class("dim-label")
        hint.set_margin_top(6)
        hint.set_margin_bottom(6)

        content = Gtk.Box(orientation=Gtk.Orientation.VERTICAL)
        content.append(canvas_frame)
        content.append(hint)

        # Wrap in toast overlay for in-app notifications
        self.toast_overlay = Adw.ToastOverlay()
        self.toast_overlay.set_child(content)
        main_box.append(self.toast_overlay)

        self.set_content(main_box)

    def _build_header(self) -> Adw.HeaderBar:
        """Build the header bar."""
        header = Adw.HeaderBar()

        menu_btn = Gtk.MenuButton()
        menu_btn.set_icon_name("open-menu-symbolic")
        menu_btn.set_tooltip_text("Menu")

        menu = Gio.Menu()
        export_section = Gio.Menu()
        export_section.append("Export as PNG...", "win.export-png")
        export_section.append("Export as PDF...", "win.export-pdf")
        menu.append_section(None, export_section)

        popover = Gtk.PopoverMenu()
        popover.set_menu_model(menu)
        menu_btn.set_popover(popover)
        header.pack_start(menu_btn)

        add_btn = Gtk.Button(label="Add Bubble")
        add_btn.set_tooltip_text("Add Bubble (Ctrl+N)")
        add_btn.add_css_class("suggested-action")
        add_btn.connect("clicked", lambda b: self._add_bubble())
        header.pack_end(add_btn)

        return header

    def _setup_shortcuts(self):
        """Setup keyboard shortcuts."""
        actions = [
            ("add-bubble", self._add_bubble, "<Control>n"),
            ("export-png", self._export_png, "<Control>e"),
            ("export-pdf", self._export_pdf, None),
            ("quit", lambda: self.close(), "<Control>q"),
        ]

        for name, callback, accel in actions:
            action = Gio.SimpleAction.new(name, None)
            action.connect("activate", lambda a, p, cb=callback: cb())
            self.add_action(action)

            if accel:
                self.get_application().set_accels_for_action(f"win.{name}", [accel])

    def _add_bubble(self):
        node = self.canvas.add_bubble()
        logger.debug("Added %s from the toolbar", node.label)

    def _on_node_created(self, node: Node, edge: Edge):
        self.show_toast(f"{edge.source.label} → {node.label}")

    # ==================== Export ====================

    def _export_png(self):
        """Export current diagram as PNG."""
        self._open_export_dialog("Export as PNG", "bubble_diagram.png",
                                 "PNG Images", "image/png",
                                 self.exporter.export_png)

    def _export_pdf(self):
        """Export current diagram as PDF."""
        self._open_export_dialog("Export as PDF", "bubble_diagram.pdf",
                                 "PDF Documents", "application/pdf",
                                 self.exporter.export_pdf)

    def _open_export_dialog(self, title, initial_name, filter_name, mime_type, export_func):
        dialog = Gtk.FileDialog()
        dialog.set_title(title)
        dialog.set_initial_name(initial_name)
        dialog.set_initial_folder(Gio.File.new_for_path(str(get_export_dir())))

        file_filter = Gtk.FileFilter()
        file_filter.set_name(filter_name)
        file_filter.add_mime_type(mime_type)

        filters = Gio.ListStore.new(Gtk.FileFilter)
        filters.append(file_filter)
        dialog.set_filters(filters)

        # Freeze the frame that was on screen when the user asked for it
        snapshot = self.canvas.snapshot()
        dialog.save(self, None, lambda d, result: self._on_export_response(
            d, result, snapshot, export_func))

    def _on_export_response(self, dialog, result, snapshot, export_func):
        """Handle export dialog response."""
        try:
            file = dialog.save_finish(result)
        except GLib.Error:
            return  # User cancelled

        if not file:
            return
        filepath = file.get_path()
        if not filepath:
            self.show_toast("Export failed: selected location is not a local file")
            return

        try:
            exported = export_func(snapshot, filepath)
        except (OSError, MemoryError) as exc:
            logger.error("Export to %s failed: %s", filepath, exc)
            exported = False

        if exported:
            self.show_toast(f"Exported to {filepath}")
        else:
            self.show_toast("Export failed")

    def show_toast(self, message: str):
        """Show a toast notification."""
        toast = Adw.Toast(title=message)
        toast.set_timeout(3)
        self.toast_overlay.add_toast(toast)


class BubbleMapApp(Adw.Application):
    """Main application class."""

    def __init__(self):
        super().__init__(
            application_id=__app_id__,
            flags=Gio.ApplicationFlags.DEFAULT_FLAGS
        )
        self.settings: Optional[PhysicsSettings] = None
        self.window: Optional[BubbleMapWindow] = None
        self._startup_error: Optional[str] = None

    def do_startup(self):
        """Initialize application."""
        Adw.Application.do_startup(self)
        self.settings, self._startup_error = load_settings_or_defaults()

    def do_activate(self):
        """Activate application."""
        if not self.window:
            self.window = BubbleMapWindow(self, self.settings)
            if self._startup_error:
                self.window.show_toast(self._startup_error)

        self.window.present()


def main() -> int:
    """Application entry point."""
    setup_logging()
    app = BubbleMapApp()
    return app.run(sys.argv)


if __name__ == "__main__":
    sys.exit(main())
