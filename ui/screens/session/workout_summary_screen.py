from kivymd.uix.screen import MDScreen
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.label import MDLabel
from kivymd.uix.button import MDRaisedButton
from kivy.uix.scrollview import ScrollView
from kivy.properties import ObjectProperty, StringProperty
from kivy.metrics import dp

from workout_engine.feedback import analyze_workout


def summary_lines(analysis: dict) -> list[str]:
    """Return display lines for the result of ``analyze_workout``."""

    minutes, seconds = divmod(int(analysis["duration_seconds"]), 60)
    lines = [
        f"Duration: {minutes}m {seconds}s",
        f"Total volume: {analysis['total_volume']:g} kg",
    ]
    if analysis["muscle_groups"]:
        lines.append("Muscles: " + ", ".join(analysis["muscle_groups"]))
        lines.append(analysis["recovery"]["message"])
    for item in analysis["exercises"]:
        lines.append(f"{item['exercise_name']} @ {item['current_weight']:g} kg")
        lines.append(f"  {item['recommendation']}")
    return lines


class WorkoutSummaryScreen(MDScreen):
    """Shows the stored log and the next-session recommendations."""

    workout_log = ObjectProperty(None, allownone=True)
    catalog = ObjectProperty(None, allownone=True)
    return_to = StringProperty("routines")

    __events__ = ("on_close",)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        root = MDBoxLayout(orientation="vertical", padding=dp(12), spacing=dp(8))
        root.add_widget(
            MDLabel(text="Workout Complete", font_style="H5", size_hint_y=None, height=dp(48))
        )
        scroll = ScrollView()
        self._body = MDBoxLayout(orientation="vertical", adaptive_height=True, spacing=dp(4))
        scroll.add_widget(self._body)
        root.add_widget(scroll)
        root.add_widget(
            MDRaisedButton(text="Done", on_release=lambda *_: self.dispatch("on_close"))
        )
        self.add_widget(root)

    def show(self, log, return_to: str = "routines"):
        """Feedback callback: render ``log`` and switch to this screen."""

        self.return_to = return_to
        self.workout_log = log
        if self.manager:
            self.manager.current = self.name

    def on_workout_log(self, _instance, log):
        self._body.clear_widgets()
        if log is None:
            return
        for line in summary_lines(analyze_workout(log, self.catalog)):
            self._body.add_widget(MDLabel(text=line, adaptive_height=True))

    def on_close(self, *args):
        if self.manager:
            self.manager.current = self.return_to
