from kivymd.uix.screen import MDScreen
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.label import MDLabel
from kivymd.uix.button import MDIconButton, MDRaisedButton, MDFlatButton
from kivymd.uix.selectioncontrol import MDCheckbox
from kivymd.uix.dialog import MDDialog
from kivy.uix.scrollview import ScrollView
from kivy.properties import ObjectProperty, StringProperty, BooleanProperty
from kivy.clock import Clock
from kivy.metrics import dp

from workout_engine.errors import PersistenceError


def format_clock(seconds) -> str:
    minutes, secs = divmod(int(seconds or 0), 60)
    return f"{minutes}:{secs:02d}"


class WorkoutActiveScreen(MDScreen):
    """Screen for the workout in progress.

    The screen only renders state and forwards taps to the
    :class:`~workout_engine.workout_session.WorkoutSession` it was given;
    labels are refreshed twice a second from the session's timestamps.
    """

    workout = ObjectProperty(None, allownone=True)
    formatted_time = StringProperty("0:00")
    rest_text = StringProperty("")
    header_text = StringProperty("")
    paused = BooleanProperty(False)
    _event = None

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        root = MDBoxLayout(orientation="vertical", padding=dp(12), spacing=dp(8))

        header = MDBoxLayout(size_hint_y=None, height=dp(48))
        self._header_label = MDLabel(text=self.header_text)
        self._time_label = MDLabel(text=self.formatted_time, halign="right")
        self._pause_btn = MDIconButton(icon="pause", on_release=lambda *_: self.toggle_pause())
        header.add_widget(self._header_label)
        header.add_widget(self._time_label)
        header.add_widget(self._pause_btn)
        header.add_widget(MDIconButton(icon="close", on_release=lambda *_: self.confirm_cancel()))
        root.add_widget(header)

        rest_row = MDBoxLayout(size_hint_y=None, height=dp(40))
        self._rest_label = MDLabel(text="")
        rest_row.add_widget(self._rest_label)
        rest_row.add_widget(MDIconButton(icon="minus", on_release=lambda *_: self.adjust_rest(-15)))
        rest_row.add_widget(MDIconButton(icon="plus", on_release=lambda *_: self.adjust_rest(15)))
        rest_row.add_widget(MDIconButton(icon="stop", on_release=lambda *_: self.stop_rest()))
        root.add_widget(rest_row)

        scroll = ScrollView()
        self._set_list = MDBoxLayout(orientation="vertical", adaptive_height=True, spacing=dp(4))
        scroll.add_widget(self._set_list)
        root.add_widget(scroll)

        footer = MDBoxLayout(size_hint_y=None, height=dp(48), spacing=dp(8))
        footer.add_widget(MDIconButton(icon="chevron-left", on_release=lambda *_: self.navigate(-1)))
        footer.add_widget(MDFlatButton(text="Add Set", on_release=lambda *_: self.add_set()))
        footer.add_widget(MDRaisedButton(text="Finish", on_release=lambda *_: self.finish()))
        footer.add_widget(MDIconButton(icon="chevron-right", on_release=lambda *_: self.navigate(1)))
        root.add_widget(footer)
        self.add_widget(root)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def on_pre_enter(self, *args):
        self.populate()
        self._refresh(0)
        if not self._event:
            self._event = Clock.schedule_interval(self._refresh, 0.5)
        return super().on_pre_enter(*args)

    def on_leave(self, *args):
        if self._event:
            self._event.cancel()
            self._event = None
        return super().on_leave(*args)

    def _refresh(self, _dt):
        workout = self.workout
        if not workout or workout.session is None:
            return
        self.formatted_time = format_clock(workout.elapsed())
        self.paused = workout.is_paused
        timer = workout.rest_timer
        self.rest_text = f"Rest {format_clock(timer.remaining)}" if timer.active else ""
        self._time_label.text = self.formatted_time + (" (paused)" if self.paused else "")
        self._rest_label.text = self.rest_text
        self._pause_btn.icon = "play" if self.paused else "pause"

    def populate(self):
        """Rebuild the set rows of the current exercise."""

        self._set_list.clear_widgets()
        workout = self.workout
        session = workout.session if workout else None
        if session is None:
            return
        exercise = session.current_exercise
        if exercise is None:
            self.header_text = f"{session.name}: no exercises"
            self._header_label.text = self.header_text
            return
        ex_idx = session.current_exercise_index
        self.header_text = (
            f"{exercise.name} ({ex_idx + 1} of {len(session.exercises)})"
        )
        self._header_label.text = self.header_text
        for set_idx, session_set in enumerate(exercise.sets):
            self._set_list.add_widget(self._build_set_row(ex_idx, set_idx, session_set))

    def _build_set_row(self, ex_idx, set_idx, session_set):
        row = MDBoxLayout(size_hint_y=None, height=dp(44), spacing=dp(4))
        check = MDCheckbox(active=session_set.completed, size_hint_x=None, width=dp(40))
        check.bind(on_release=lambda *_: self._toggle(ex_idx, set_idx))
        row.add_widget(check)
        row.add_widget(MDLabel(text=f"Set {session_set.set_number}", size_hint_x=0.2))
        reps = session_set.completed_reps
        if reps is None:
            reps = session_set.target_reps or 0
        weight = session_set.completed_weight
        if weight is None:
            weight = session_set.target_weight or 0
        row.add_widget(MDIconButton(icon="minus", on_release=lambda *_: self._step(ex_idx, set_idx, reps=-1)))
        row.add_widget(MDLabel(text=f"{reps} reps", halign="center"))
        row.add_widget(MDIconButton(icon="plus", on_release=lambda *_: self._step(ex_idx, set_idx, reps=1)))
        row.add_widget(MDIconButton(icon="minus", on_release=lambda *_: self._step(ex_idx, set_idx, weight=-1)))
        row.add_widget(MDLabel(text=f"{weight:g} kg", halign="center"))
        row.add_widget(MDIconButton(icon="plus", on_release=lambda *_: self._step(ex_idx, set_idx, weight=1)))
        return row

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _toggle(self, ex_idx, set_idx):
        if self.workout and self.workout.toggle_completion(ex_idx, set_idx):
            self.populate()
            self._refresh(0)

    def _step(self, ex_idx, set_idx, reps=0, weight=0):
        if not self.workout:
            return
        if reps:
            self.workout.step_reps(ex_idx, set_idx, reps)
        if weight:
            self.workout.step_weight(ex_idx, set_idx, weight)
        self.populate()

    def toggle_pause(self):
        if self.workout:
            self.workout.toggle_pause()
            self._refresh(0)

    def adjust_rest(self, seconds):
        timer = self.workout.rest_timer if self.workout else None
        if timer and timer.active:
            timer.edit(timer.remaining + seconds)
            self._refresh(0)

    def stop_rest(self):
        if self.workout:
            self.workout.rest_timer.stop()
            self._refresh(0)

    def add_set(self):
        if self.workout and self.workout.session:
            self.workout.add_set(self.workout.session.current_exercise_index)
            self.populate()

    def navigate(self, direction):
        if self.workout and self.workout.navigate(direction):
            self.populate()
            self._refresh(0)

    def finish(self):
        if not self.workout:
            return
        try:
            log = self.workout.complete()
        except PersistenceError as exc:
            self._show_error(str(exc))
            return
        if log is None:
            self._show_error("Sign in to save your workout.")

    def confirm_cancel(self):
        dialog = None

        def do_cancel(*_args):
            if self.workout:
                self.workout.cancel()
            dialog.dismiss()
            if self.manager:
                self.manager.current = "routines"

        dialog = MDDialog(
            title="Discard Workout?",
            text="All recorded sets will be lost.",
            buttons=[
                MDFlatButton(text="Keep", on_release=lambda *_: dialog.dismiss()),
                MDRaisedButton(text="Discard", on_release=do_cancel),
            ],
        )
        dialog.open()

    def _show_error(self, message: str):
        dialog = MDDialog(
            title="Save Error",
            text=message,
            buttons=[MDRaisedButton(text="OK", on_release=lambda *_: dialog.dismiss())],
        )
        dialog.open()
