from kivymd.app import MDApp
from kivy.uix.screenmanager import ScreenManager, NoTransition
import logging

import core
from core import (
    DEFAULT_DB_PATH,
    ExerciseCatalog,
    WorkoutLogStore,
    WorkoutSession,
)
from workout_engine import settings
from ui.screens import (
    RoutinesScreen,
    WorkoutActiveScreen,
    WorkoutHistoryScreen,
    WorkoutSummaryScreen,
)


logger = logging.getLogger(__name__)


class WorkoutApp(MDApp):
    workout_session = None
    user_id = None
    db_path = DEFAULT_DB_PATH

    def build(self):
        core.ensure_schema(self.db_path)
        self.user_id = settings.get_value("user_id")
        self.catalog = ExerciseCatalog(self.db_path)
        self.log_store = WorkoutLogStore(self.db_path)

        manager = ScreenManager(transition=NoTransition())
        manager.add_widget(RoutinesScreen(name="routines"))
        self.active_screen = WorkoutActiveScreen(name="workout_active")
        manager.add_widget(self.active_screen)
        self.summary_screen = WorkoutSummaryScreen(name="workout_summary", catalog=self.catalog)
        manager.add_widget(self.summary_screen)
        manager.add_widget(WorkoutHistoryScreen(name="workout_history"))
        return manager

    def start_workout(self, routine=None):
        """Create a :class:`WorkoutSession` and show the active screen.

        ``routine`` of ``None`` starts a freeform workout.  The session is
        handed to the screens explicitly; nothing reads it from globals.
        """

        if self.workout_session:
            self.workout_session.close()
        self.workout_session = WorkoutSession(
            self.user_id,
            catalog=self.catalog,
            log_store=self.log_store,
            feedback=self.summary_screen.show,
            weight_increment=settings.get_value(
                "weight_increment", core.DEFAULT_WEIGHT_INCREMENT
            ),
            default_rest=settings.get_value(
                "default_rest_duration", core.DEFAULT_REST_DURATION
            ),
        )
        if routine is None:
            self.workout_session.start_freeform()
        else:
            self.workout_session.start_from_routine(routine)
        self.active_screen.workout = self.workout_session
        self.root.current = "workout_active"

    def on_stop(self):
        if self.workout_session:
            logger.info("App stopping with workout state %s", self.workout_session.state)
            self.workout_session.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    WorkoutApp().run()
