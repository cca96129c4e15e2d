from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.label import MDLabel
from kivymd.uix.list import MDList, OneLineListItem
from kivymd.uix.button import MDRaisedButton, MDFlatButton
from kivy.uix.scrollview import ScrollView
from kivy.properties import ObjectProperty
from kivy.metrics import dp

from workout_engine import routines


class RoutinesScreen(MDScreen):
    """Screen to pick a routine or start a freeform workout."""

    selected_item = ObjectProperty(None, allownone=True)
    selected_routine = ObjectProperty(None, allownone=True)

    _selected_color = (0, 1, 0, 1)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        root = MDBoxLayout(orientation="vertical", padding=dp(12), spacing=dp(8))
        root.add_widget(
            MDLabel(text="Routines", font_style="H5", size_hint_y=None, height=dp(48))
        )
        scroll = ScrollView()
        self.routine_list = MDList()
        scroll.add_widget(self.routine_list)
        root.add_widget(scroll)
        buttons = MDBoxLayout(size_hint_y=None, height=dp(48), spacing=dp(8))
        buttons.add_widget(
            MDFlatButton(text="History", on_release=lambda *_: self.open_history())
        )
        buttons.add_widget(
            MDFlatButton(text="Freeform", on_release=lambda *_: self.start_freeform())
        )
        buttons.add_widget(
            MDRaisedButton(text="Start", on_release=lambda *_: self.start_selected())
        )
        root.add_widget(buttons)
        self.add_widget(root)

    def on_pre_enter(self, *args):
        self.clear_selection()
        self.populate()
        return super().on_pre_enter(*args)

    def clear_selection(self):
        if self.selected_item:
            self.selected_item.theme_text_color = "Primary"
        self.selected_item = None
        self.selected_routine = None

    def populate(self):
        self.routine_list.clear_widgets()
        app = MDApp.get_running_app()
        user_id = app.user_id if app else None
        db_path = app.db_path if app else None
        loaded = routines.load_routines(user_id, db_path) if db_path else routines.WORKOUT_ROUTINES
        for routine in loaded:
            item = OneLineListItem(text=routine.name)
            item.bind(on_release=lambda inst, r=routine: self.select_routine(r, inst))
            self.routine_list.add_widget(item)

    def select_routine(self, routine, item):
        """Highlight ``item``; tapping it again clears the selection."""

        if self.selected_item is item:
            self.clear_selection()
            return
        self.clear_selection()
        item.theme_text_color = "Custom"
        item.text_color = self._selected_color
        self.selected_item = item
        self.selected_routine = routine

    def start_selected(self):
        if self.selected_routine is None:
            return
        MDApp.get_running_app().start_workout(self.selected_routine)

    def start_freeform(self):
        MDApp.get_running_app().start_workout(None)

    def open_history(self):
        if self.manager:
            self.manager.current = "workout_history"
