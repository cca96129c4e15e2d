from datetime import datetime

from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.label import MDLabel
from kivymd.uix.list import MDList, TwoLineRightIconListItem, IconRightWidget
from kivymd.uix.button import MDFlatButton
from kivy.uix.scrollview import ScrollView
from kivy.properties import StringProperty
from kivy.metrics import dp

from workout_engine import routines
from workout_engine.session_builder import FREEFORM_NAME


def history_entries(logs, routine_names=None) -> list[tuple]:
    """Return ``(log, title, subtitle)`` rows, most recent workout first."""

    routine_names = routine_names or {}
    rows = []
    for log in reversed(list(logs)):
        if log.routine_id is None:
            title = FREEFORM_NAME
        else:
            title = routine_names.get(log.routine_id, "Workout")
        minutes = int(log.duration_seconds) // 60
        when = datetime.fromtimestamp(log.start_time).strftime("%H:%M %a %d/%m/%Y")
        rows.append((log, title, f"{when} | {minutes} min | {log.total_volume:g} kg"))
    return rows


class WorkoutHistoryScreen(MDScreen):
    """List the signed-in user's past workouts.

    Tapping a row reopens its summary; the trash icon deletes the log.
    """

    return_to = StringProperty("routines")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        root = MDBoxLayout(orientation="vertical", padding=dp(12), spacing=dp(8))
        root.add_widget(
            MDLabel(text="History", font_style="H5", size_hint_y=None, height=dp(48))
        )
        scroll = ScrollView()
        self.history_list = MDList()
        scroll.add_widget(self.history_list)
        root.add_widget(scroll)
        root.add_widget(MDFlatButton(text="Back", on_release=lambda *_: self.go_back()))
        self.add_widget(root)

    def on_pre_enter(self, *args):
        self.populate()
        return super().on_pre_enter(*args)

    def populate(self) -> None:
        self.history_list.clear_widgets()
        app = MDApp.get_running_app()
        if not app or not app.user_id:
            return
        names = {r.id: r.name for r in routines.WORKOUT_ROUTINES}
        logs = app.log_store.get_workout_logs(app.user_id)
        for log, title, subtitle in history_entries(logs, names):
            item = TwoLineRightIconListItem(
                text=title,
                secondary_text=subtitle,
                on_release=lambda _, entry=log: self.open_log(entry),
            )
            item.add_widget(
                IconRightWidget(
                    icon="delete", on_release=lambda _, log_id=log.id: self.delete_log(log_id)
                )
            )
            self.history_list.add_widget(item)

    def open_log(self, log) -> None:
        summary = self.manager.get_screen("workout_summary")
        summary.show(log, return_to=self.name)

    def delete_log(self, log_id: str) -> None:
        MDApp.get_running_app().log_store.delete_workout_log(log_id)
        self.populate()

    def go_back(self) -> None:
        if self.manager:
            self.manager.current = self.return_to
