#!/usr/bin/env python3
"""
Iftar Countdown Desktop Widget
Always-on-top window showing:
  - Current location and its local date and clock
  - Live countdown to the next iftar (today's, or tomorrow's once passed)
  - Daily prayer times for the location
  - Ramadan progress and iftar times in other cities
  - Colors that follow the time-of-day phase
  - Desktop reminder before iftar and an alert at iftar
"""

import datetime
import logging
import threading
import tkinter as tk
from tkinter import messagebox

import pytz

from iftar import config
from iftar.comparison import compare_cities
from iftar.constants import CALCULATION_METHODS
from iftar.countdown import format_countdown
from iftar.errors import PrayerTimeError
from iftar.location import (
    clear_location,
    get_location,
    load_location,
    load_method,
    save_location,
    save_method,
)
from iftar.models import PRAYER_NAMES, CalculationMethod, City, TimePhase
from iftar.notifier import notify_iftar, notify_reminder
from iftar.phase import theme_for
from iftar.prayer_times import PRAYER_DISPLAY, format_time, local_date
from iftar.ramadan import describe, ramadan_progress
from iftar.scheduler import IftarTracker

logger = logging.getLogger("iftar_app")

FONT_BODY = ("Courier", 10, "bold")
FONT_SMALL = ("Courier", 8)
FONT_LARGE = ("Courier", 14, "bold")
FONT_TITLE = ("Courier", 12, "bold")
FONT_COUNTDOWN = ("Courier", 30, "bold")

WINDOW_W = 460
WINDOW_H = 760

BANNER_MS = 15000
COMPARISON_ROWS = 5

DIVIDER = "◇ ─────────────────────────── ◇"


class IftarApp:
    def __init__(self, root: tk.Tk):
        self.root = root
        self._drag_x = 0
        self._drag_y = 0

        self.city: City | None = None
        self.method = load_method()
        self.phase = TimePhase.AFTERNOON
        # (widget, color role) pairs recolored on every phase change
        self._themed: list = []

        self.tracker = IftarTracker(
            root.after,
            root.after_cancel,
            on_schedule=self._on_schedule,
            on_countdown=self._on_countdown,
            on_phase=self._on_phase,
            on_iftar=self._on_iftar,
            on_reminder=self._on_reminder,
            on_error=self._on_tracker_error,
        )

        self._setup_window()
        self._build_ui()
        self._apply_theme()
        self._start_location_load()

    # ──────────────────────────────────────────────────────────────────────
    # Window setup
    # ──────────────────────────────────────────────────────────────────────
    def _setup_window(self):
        root = self.root
        root.title("Iftar Countdown")
        root.resizable(False, False)
        root.overrideredirect(True)
        root.attributes("-topmost", True)

        screen_w = root.winfo_screenwidth()
        screen_h = root.winfo_screenheight()
        x = screen_w - WINDOW_W - 40
        y = (screen_h - WINDOW_H) // 2
        root.geometry(f"{WINDOW_W}x{WINDOW_H}+{x}+{y}")

        root.bind("<ButtonPress-1>", self._on_drag_start)
        root.bind("<B1-Motion>", self._on_drag_motion)

    def _on_drag_start(self, event):
        self._drag_x = event.x_root - self.root.winfo_x()
        self._drag_y = event.y_root - self.root.winfo_y()

    def _on_drag_motion(self, event):
        self.root.geometry(f"+{event.x_root - self._drag_x}+{event.y_root - self._drag_y}")

    # ──────────────────────────────────────────────────────────────────────
    # UI construction
    # ──────────────────────────────────────────────────────────────────────
    def _themed_label(self, parent, role="text", **kwargs):
        lbl = tk.Label(parent, **kwargs)
        self._themed.append((lbl, role))
        return lbl

    def _themed_frame(self, parent, **kwargs):
        frame = tk.Frame(parent, **kwargs)
        self._themed.append((frame, None))
        return frame

    def _build_ui(self):
        inner = self._themed_frame(self.root, bd=0)
        inner.pack(fill=tk.BOTH, expand=True, padx=2, pady=2)

        # ── title bar ─────────────────────────────────────────────────────
        title_bar = self._themed_frame(inner, height=32)
        title_bar.pack(fill=tk.X, side=tk.TOP)
        self._themed_label(
            title_bar, role="accent", text="  🌙  IFTAR COUNTDOWN  ", font=FONT_TITLE,
        ).pack(side=tk.LEFT, padx=6)
        tk.Button(
            title_bar, text=" ✕ ", font=FONT_SMALL, bd=0, cursor="hand2",
            command=self._close,
        ).pack(side=tk.RIGHT, padx=4, pady=4)

        # ── location ──────────────────────────────────────────────────────
        loc_frame = self._themed_frame(inner)
        loc_frame.pack(pady=(6, 0), fill=tk.X, padx=10)
        self.lbl_location = self._themed_label(
            loc_frame, role="text_muted", text="📍 Detecting location…", font=FONT_BODY,
        )
        self.lbl_location.pack(side=tk.LEFT, expand=True)
        tk.Button(
            loc_frame, text="📍⟳", font=FONT_SMALL, bd=0, cursor="hand2",
            command=self._show_location_dialog,
        ).pack(side=tk.RIGHT, padx=4)

        self.lbl_date = self._themed_label(inner, text="", font=FONT_BODY)
        self.lbl_date.pack()
        self.lbl_clock = self._themed_label(inner, role="accent", text="--:--:--", font=FONT_LARGE)
        self.lbl_clock.pack()

        self._themed_label(inner, role="accent", text=DIVIDER, font=("Courier", 9)).pack(pady=2)

        # ── headline countdown ────────────────────────────────────────────
        self.lbl_iftar_heading = self._themed_label(
            inner, role="text_muted", text="TIME UNTIL IFTAR", font=FONT_BODY,
        )
        self.lbl_iftar_heading.pack()
        self.lbl_countdown = self._themed_label(
            inner, role="accent", text="-:--:--", font=FONT_COUNTDOWN,
        )
        self.lbl_countdown.pack()
        self.lbl_iftar_at = self._themed_label(inner, text="", font=FONT_BODY)
        self.lbl_iftar_at.pack()
        self.lbl_phase = self._themed_label(inner, role="text_muted", text="", font=FONT_SMALL)
        self.lbl_phase.pack(pady=(2, 4))

        # ── prayer times grid ─────────────────────────────────────────────
        self.prayer_frame = self._themed_frame(inner)
        self.prayer_frame.pack(fill=tk.X, padx=10, pady=4)
        self.prayer_rows: dict = {}
        self._build_prayer_rows()

        self._themed_label(inner, role="accent", text=DIVIDER, font=("Courier", 9)).pack(pady=2)

        # ── Ramadan progress ──────────────────────────────────────────────
        self.lbl_ramadan = self._themed_label(inner, text="", font=FONT_BODY)
        self.lbl_ramadan.pack(pady=2)

        # ── other cities ──────────────────────────────────────────────────
        self._themed_label(
            inner, role="text_muted", text="IFTAR IN OTHER CITIES", font=FONT_SMALL,
        ).pack(pady=(6, 0))
        self.comparison_rows = []
        for _ in range(COMPARISON_ROWS):
            lbl = self._themed_label(inner, text="", font=FONT_SMALL, anchor="w", width=52)
            lbl.pack(padx=10)
            self.comparison_rows.append(lbl)

        # ── calculation method ────────────────────────────────────────────
        method_frame = self._themed_frame(inner)
        method_frame.pack(fill=tk.X, padx=10, pady=6)
        self._themed_label(
            method_frame, role="text_muted", text="Method:", font=FONT_SMALL,
        ).pack(side=tk.LEFT)
        self.method_var = tk.StringVar(value=self.method.value)
        tk.OptionMenu(
            method_frame, self.method_var, *[m.value for m in CalculationMethod],
            command=self._on_method_selected,
        ).pack(side=tk.LEFT, padx=4)
        self.lbl_method_desc = self._themed_label(
            method_frame, role="text_muted", text="", font=FONT_SMALL,
        )
        self.lbl_method_desc.pack(side=tk.LEFT)
        self._update_method_description()

        # ── notification banner (hidden by default) ───────────────────────
        self.notif_frame = self._themed_frame(inner, bd=1, relief=tk.RIDGE)
        self.lbl_notif_title = self._themed_label(
            self.notif_frame, role="accent", text="", font=FONT_BODY,
        )
        self.lbl_notif_title.pack(pady=2)
        self.lbl_notif_msg = self._themed_label(
            self.notif_frame, text="", font=FONT_SMALL, wraplength=420,
        )
        self.lbl_notif_msg.pack(pady=(0, 4))

    def _build_prayer_rows(self):
        """Create one labelled row per prayer."""
        for name in PRAYER_NAMES:
            highlight = name in ("fajr", "maghrib")
            row = self._themed_frame(self.prayer_frame, pady=1)
            row.pack(fill=tk.X)
            role = "accent" if highlight else "text"
            lbl_name = self._themed_label(
                row, role=role, text=f" {PRAYER_DISPLAY[name]}", font=FONT_BODY,
                anchor="w", width=26,
            )
            lbl_name.pack(side=tk.LEFT, padx=4)
            lbl_time = self._themed_label(
                row, role=role, text="--:--", font=FONT_LARGE, anchor="e", width=9,
            )
            lbl_time.pack(side=tk.RIGHT, padx=4)
            self.prayer_rows[name] = lbl_time

    def _apply_theme(self):
        theme = theme_for(self.phase)
        for widget, role in self._themed:
            if role is None:
                widget.config(bg=theme["bg"])
            else:
                widget.config(bg=theme["bg"], fg=theme[role])
        self.root.configure(bg=theme["bg"])
        self.lbl_phase.config(text=theme["description"])

    # ──────────────────────────────────────────────────────────────────────
    # Location loading (geolocation runs in a background thread)
    # ──────────────────────────────────────────────────────────────────────
    def _start_location_load(self, use_cache: bool = True):
        t = threading.Thread(target=self._load_location, args=(use_cache,), daemon=True)
        t.start()

    def _load_location(self, use_cache: bool):
        city = load_location() if use_cache else None
        if city is None:
            city = get_location()
        self.root.after(0, lambda: self._set_city(city))

    def _set_city(self, city: City):
        """Called in the Tk thread whenever the tracked location changes."""
        self.city = city
        self.lbl_location.config(text=f"📍 {city.name}, {city.country}".rstrip(", "))
        try:
            self.tracker.configure(city, self.method)
        except PrayerTimeError as exc:
            logger.exception("Could not compute prayer times for %s", city.name)
            self.lbl_location.config(text=f"⚠ {str(exc)[:60]}")

    # ──────────────────────────────────────────────────────────────────────
    # Tracker callbacks
    # ──────────────────────────────────────────────────────────────────────
    def _on_schedule(self, schedule, resolved):
        tz = self.city.tz
        for name, instant in schedule.items():
            self.prayer_rows[name].config(text=format_time(instant, tz))

        day = "today" if resolved.is_today else "tomorrow"
        self.lbl_iftar_at.config(text=f"Iftar {day} at {format_time(resolved.instant, tz)}")

        now = datetime.datetime.now(pytz.utc)
        self.lbl_date.config(text=f"📅 {schedule.date.strftime('%A, %d %B %Y')}")
        self.lbl_ramadan.config(text=f"🌙 {describe(ramadan_progress(local_date(now, tz)))}")
        self._update_comparison(now)

    def _update_comparison(self, now):
        rows = compare_cities(self.city, now, self.method, limit=COMPARISON_ROWS)
        for lbl, row in zip(self.comparison_rows, rows):
            sign = "+" if row.diff_minutes >= 0 else "-"
            suffix = " (tomorrow)" if row.is_tomorrow else ""
            lbl.config(
                text=f"{row.city.name:<14} {row.formatted:>9}  "
                f"{sign}{abs(row.diff_minutes)} min{suffix}"
            )
        for lbl in self.comparison_rows[len(rows):]:
            lbl.config(text="")

    def _on_countdown(self, state):
        if self.city is not None:
            now = datetime.datetime.now(self.city.tz)
            self.lbl_clock.config(text=now.strftime("%H:%M:%S"))
        self.lbl_countdown.config(text=format_countdown(state))

    def _on_phase(self, phase):
        if phase is not self.phase:
            self.phase = phase
            self._apply_theme()

    def _on_iftar(self, city, resolved):
        notify_iftar(city.name, callback=self._show_notif_banner)
        self.root.bell()

    def _on_reminder(self, city, minutes, resolved):
        notify_reminder(city.name, minutes, callback=self._show_notif_banner)

    def _on_tracker_error(self, exc):
        self.lbl_location.config(text=f"⚠ {str(exc)[:60]}")

    def _show_notif_banner(self, title: str, message: str):
        self.lbl_notif_title.config(text=title)
        self.lbl_notif_msg.config(text=message)
        self.notif_frame.pack(fill=tk.X, padx=14, pady=4)
        self.root.after(BANNER_MS, self.notif_frame.pack_forget)

    # ──────────────────────────────────────────────────────────────────────
    # Method selection
    # ──────────────────────────────────────────────────────────────────────
    def _on_method_selected(self, value):
        self.method = CalculationMethod.parse(value)
        save_method(self.method)
        self._update_method_description()
        try:
            self.tracker.set_method(self.method)
        except PrayerTimeError as exc:
            logger.exception("Could not recompute prayer times")
            self.lbl_location.config(text=f"⚠ {str(exc)[:60]}")

    def _update_method_description(self):
        name, description = CALCULATION_METHODS[self.method]
        self.lbl_method_desc.config(text=f"{name} · {description}")

    # ──────────────────────────────────────────────────────────────────────
    # Location dialog
    # ──────────────────────────────────────────────────────────────────────
    def _show_location_dialog(self):
        """Show a dialog to set or refresh location."""
        theme = theme_for(self.phase)
        dlg = tk.Toplevel(self.root)
        dlg.title("Set Location")
        dlg.configure(bg=theme["bg"])
        dlg.resizable(False, False)
        dlg.attributes("-topmost", True)
        dlg.transient(self.root)
        dlg.grab_set()

        fields_frame = tk.Frame(dlg, bg=theme["bg"])
        fields_frame.pack(fill=tk.X, padx=20, pady=10)

        labels = ["City:", "Country:", "Latitude:", "Longitude:", "Timezone:"]
        keys = ["name", "country", "lat", "lng", "timezone"]
        entries = {}
        current = self.city.to_dict() if self.city else {}

        for i, (label, key) in enumerate(zip(labels, keys)):
            tk.Label(
                fields_frame, text=label, font=FONT_SMALL,
                fg=theme["text"], bg=theme["bg"], anchor="w", width=10,
            ).grid(row=i, column=0, sticky="w", pady=2)
            ent = tk.Entry(fields_frame, font=FONT_SMALL, width=28)
            ent.grid(row=i, column=1, sticky="ew", pady=2, padx=(4, 0))
            if key in current:
                ent.insert(0, str(current[key]))
            entries[key] = ent

        def _apply():
            raw = {key: ent.get().strip() for key, ent in entries.items()}
            try:
                city = City.from_dict(raw)
            except (ValueError, pytz.UnknownTimeZoneError) as exc:
                messagebox.showerror("Invalid location", str(exc), parent=dlg)
                return
            save_location(city)
            dlg.destroy()
            self._set_city(city)

        def _refresh_ip():
            clear_location()
            dlg.destroy()
            self.lbl_location.config(text="📍 Refreshing location…")
            self._start_location_load(use_cache=False)

        btn_frame = tk.Frame(dlg, bg=theme["bg"])
        btn_frame.pack(pady=10)
        tk.Button(btn_frame, text="  Save  ", font=FONT_SMALL, command=_apply).pack(
            side=tk.LEFT, padx=6
        )
        tk.Button(btn_frame, text="  Refresh from IP  ", font=FONT_SMALL, command=_refresh_ip).pack(
            side=tk.LEFT, padx=6
        )
        tk.Button(btn_frame, text="  Cancel  ", font=FONT_SMALL, command=dlg.destroy).pack(
            side=tk.LEFT, padx=6
        )

    def _close(self):
        self.tracker.stop()
        self.root.destroy()


# ──────────────────────────────────────────────────────────────────────────────
# Entry point
# ──────────────────────────────────────────────────────────────────────────────
def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    root = tk.Tk()
    IftarApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
