"""
On-device workout session engine.

Tracks live progression through a routine on the wrist device:
- Session lifecycle: idle -> active -> (paused <-> active) -> ended
- Set completion, edits and the "current set" cursor
- The rest countdown (see rest_timer.py)
- A 1 Hz poll of the sensor source for heart rate, calories and elapsed time
- The completed-workout payload sent to the phone when the workout ends

Collaborators are injected; the engine holds no global state. Every method
runs on the owning event loop, so mutations are never concurrent.
"""
import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from application.ports.workout_runtime import (
    MessageChannel,
    NotificationScheduler,
    SensorMetricsSource,
)
from backend.settings import Settings
from backend.workout.rest_timer import RestCountdown
from domain.models import (
    ActiveWorkoutExercise,
    ActiveWorkoutSet,
    CompletedWorkoutPayload,
    WatchRoutine,
)
from infrastructure.messaging import HttpMessageChannel, LoopNotificationScheduler

logger = logging.getLogger(__name__)


class WorkoutState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    PAUSED = "paused"
    ENDED = "ended"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class WorkoutSessionEngine:
    """
    State machine for a workout running on the companion device.

    Collaborator failures (authorization, session start, session finalize)
    are reported through ``error_message`` and never advance the state.
    Lookups of unknown exercise or set ids are silent no-ops.
    """

    def __init__(
        self,
        sensor_source: SensorMetricsSource,
        message_channel: MessageChannel,
        *,
        notifier: Optional[NotificationScheduler] = None,
        rest_timer: Optional[RestCountdown] = None,
        metrics_poll_interval: float = 1.0,
    ):
        """
        Initialize the engine.

        Args:
            sensor_source: Health-sensor workout session
            message_channel: Transport for the completed-workout payload
            notifier: Local notification scheduler for the rest deadline
            rest_timer: Countdown to use (built with ``notifier`` if omitted)
            metrics_poll_interval: Seconds between sensor reads
        """
        self._sensor_source = sensor_source
        self._message_channel = message_channel
        self._metrics_poll_interval = metrics_poll_interval
        self._poll_task: Optional[asyncio.Task] = None
        self._start_time: Optional[datetime] = None

        self.rest_timer = rest_timer or RestCountdown(notifier=notifier)

        self.state = WorkoutState.IDLE
        self.current_routine: Optional[WatchRoutine] = None
        self.exercises: List[ActiveWorkoutExercise] = []
        self.current_exercise_index = 0
        self.current_set_index = 0
        self.error_message: Optional[str] = None

        self.heart_rate: Optional[int] = None
        self.active_calories: Optional[int] = None
        self.elapsed_time: Optional[float] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        sensor_source: SensorMetricsSource,
        message_channel: Optional[MessageChannel] = None,
        *,
        notifier: Optional[NotificationScheduler] = None,
    ) -> "WorkoutSessionEngine":
        """
        Build an engine wired from settings.

        Without explicit collaborators the payload goes to
        ``settings.companion_sync_url`` over HTTP and rest alerts are
        scheduled on the running event loop.
        """
        if message_channel is None:
            message_channel = HttpMessageChannel(
                settings.companion_sync_url,
                api_key=settings.companion_api_key,
            )
        if notifier is None:
            notifier = LoopNotificationScheduler()

        rest_timer = RestCountdown(
            tick_seconds=settings.rest_timer_tick_seconds,
            grace_seconds=settings.rest_timer_grace_seconds,
            notifier=notifier,
        )
        return cls(
            sensor_source,
            message_channel,
            rest_timer=rest_timer,
            metrics_poll_interval=settings.metrics_poll_interval_seconds,
        )

    # =========================================================================
    # Derived state
    # =========================================================================

    @property
    def is_workout_active(self) -> bool:
        return self.state in (WorkoutState.ACTIVE, WorkoutState.PAUSED)

    @property
    def is_paused(self) -> bool:
        return self.state is WorkoutState.PAUSED

    @property
    def current_exercise(self) -> Optional[ActiveWorkoutExercise]:
        if self.current_exercise_index < len(self.exercises):
            return self.exercises[self.current_exercise_index]
        return None

    @property
    def current_set(self) -> Optional[ActiveWorkoutSet]:
        exercise = self.current_exercise
        if exercise is None or self.current_set_index >= len(exercise.sets):
            return None
        return exercise.sets[self.current_set_index]

    @property
    def total_sets_count(self) -> int:
        return sum(len(e.sets) for e in self.exercises)

    @property
    def completed_sets_count(self) -> int:
        return sum(e.completed_sets_count for e in self.exercises)

    @property
    def progress(self) -> float:
        total = self.total_sets_count
        if total == 0:
            return 0.0
        return self.completed_sets_count / total

    @property
    def has_modified_sets(self) -> bool:
        return any(s.was_modified for e in self.exercises for s in e.sets)

    @property
    def modified_sets_count(self) -> int:
        return sum(1 for e in self.exercises for s in e.sets if s.was_modified)

    @property
    def can_go_to_previous_exercise(self) -> bool:
        return self.current_exercise_index > 0

    @property
    def can_go_to_next_exercise(self) -> bool:
        return self.current_exercise_index < len(self.exercises) - 1

    @property
    def formatted_elapsed_time(self) -> str:
        if self.elapsed_time is None:
            return ""
        minutes, seconds = divmod(int(self.elapsed_time), 60)
        return f"{minutes:02d}:{seconds:02d}"

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start_workout(self, routine: WatchRoutine) -> bool:
        """
        Snapshot a routine and start the sensor session.

        Args:
            routine: Routine template to perform

        Returns:
            True if the workout is now active
        """
        if self.is_workout_active:
            logger.warning("start_workout called while a workout is already active")
            return False

        self.error_message = None
        self.current_routine = routine
        self.exercises = [e.to_active() for e in routine.exercises]
        self.current_exercise_index = 0
        self.current_set_index = 0
        self._start_time = _now()

        authorized = await self._sensor_source.request_authorization()
        if not authorized:
            self.error_message = "Health data authorization required"
            logger.warning("Sensor authorization refused; workout not started")
            return False

        try:
            await self._sensor_source.start_session(routine.name)
        except Exception as e:
            self.error_message = f"Failed to start workout: {e}"
            logger.exception(f"Sensor session failed to start: {e}")
            return False

        self.state = WorkoutState.ACTIVE
        self._start_metrics_poll()
        logger.info(f"Workout started: {routine.name} ({routine.total_sets} sets)")
        return True

    def pause(self) -> None:
        if self.state is not WorkoutState.ACTIVE:
            return
        self._sensor_source.pause()
        self.state = WorkoutState.PAUSED

    def resume(self) -> None:
        if self.state is not WorkoutState.PAUSED:
            return
        self._sensor_source.resume()
        self.state = WorkoutState.ACTIVE

    async def end_workout(self, update_template: bool = False) -> bool:
        """
        Finalize the sensor session and send the completed workout to the phone.

        On failure the workout stays active and ``error_message`` is set so
        the caller can retry.

        Args:
            update_template: Ask the phone to write actual values back into the routine

        Returns:
            True if the workout ended
        """
        if not self.is_workout_active:
            return False

        self.error_message = None
        self.rest_timer.stop()

        try:
            session_metrics = await self._sensor_source.end_session()
        except Exception as e:
            self.error_message = f"Failed to save workout: {e}"
            logger.exception(f"Sensor session failed to finalize: {e}")
            return False

        payload = self.build_completed_payload(
            update_template=update_template,
            healthkit_workout_id=session_metrics.workout_id if session_metrics else None,
        )
        if payload is not None:
            await self._message_channel.send(payload)

        self._stop_metrics_poll()
        self.state = WorkoutState.ENDED
        logger.info(
            f"Workout ended: {self.completed_sets_count}/{self.total_sets_count} sets completed"
        )
        return True

    def discard_workout(self) -> None:
        """Abandon the workout immediately; nothing is sent to the phone."""
        self.rest_timer.stop()
        self._stop_metrics_poll()
        self._sensor_source.discard_session()
        self._reset_state()
        logger.info("Workout discarded")

    def shutdown(self) -> None:
        """Release timers when the owner goes away."""
        self.rest_timer.stop()
        self._stop_metrics_poll()

    # =========================================================================
    # Sets
    # =========================================================================

    def _find(self, exercise_id: str, set_id: Optional[str] = None):
        for exercise_index, exercise in enumerate(self.exercises):
            if exercise.id != exercise_id:
                continue
            if set_id is None:
                return exercise_index, None
            for set_index, s in enumerate(exercise.sets):
                if s.id == set_id:
                    return exercise_index, set_index
            return None
        return None

    def toggle_set_completion(self, set_id: str, exercise_id: str) -> None:
        """
        Flip a set's completion.

        Completing stamps the completion time and starts the rest countdown
        when the set has rest configured; uncompleting clears the stamp.
        """
        found = self._find(exercise_id, set_id)
        if found is None:
            return

        exercise_index, set_index = found
        workout_set = self.exercises[exercise_index].sets[set_index]

        if workout_set.is_completed:
            workout_set.completed_at = None
            return

        workout_set.completed_at = _now()
        if workout_set.rest_time > 0:
            self.rest_timer.start(workout_set.rest_time)

    def complete_current_set(self) -> None:
        """Complete the set under the cursor and advance the cursor."""
        workout_set = self.current_set
        if workout_set is None:
            return

        workout_set.completed_at = _now()

        if workout_set.rest_time > 0 and not self._is_last_set:
            self.rest_timer.start(workout_set.rest_time)

        self._advance_to_next_set()

    def update_set(self, updated_set: ActiveWorkoutSet, exercise_id: str) -> None:
        found = self._find(exercise_id, updated_set.id)
        if found is None:
            return
        exercise_index, set_index = found
        self.exercises[exercise_index].sets[set_index] = updated_set

    def update_rest_time(self, exercise_id: str, rest_time: float) -> None:
        """Apply a new rest time to every set of an exercise."""
        found = self._find(exercise_id)
        if found is None:
            return
        exercise = self.exercises[found[0]]
        for s in exercise.sets:
            s.rest_time = rest_time
        logger.info(f"Updated rest time for {exercise.name} to {rest_time:.0f}s")

    # =========================================================================
    # Rest countdown
    # =========================================================================

    def skip_rest(self) -> None:
        self.rest_timer.skip()

    def minimize_rest_timer(self) -> None:
        self.rest_timer.minimize()

    def expand_rest_timer(self) -> None:
        self.rest_timer.expand()

    # =========================================================================
    # Navigation
    # =========================================================================

    def go_to_previous_exercise(self) -> None:
        if self.can_go_to_previous_exercise:
            self.go_to_exercise(self.current_exercise_index - 1)

    def go_to_next_exercise(self) -> None:
        if self.can_go_to_next_exercise:
            self.go_to_exercise(self.current_exercise_index + 1)

    def go_to_exercise(self, index: int) -> None:
        """Jump to an exercise, landing on its first incomplete set."""
        if not 0 <= index < len(self.exercises):
            return
        self.current_exercise_index = index
        self.current_set_index = self.exercises[index].first_incomplete_set_index()

    @property
    def _is_last_set(self) -> bool:
        exercise = self.current_exercise
        if exercise is None:
            return True
        is_last_set_in_exercise = self.current_set_index >= len(exercise.sets) - 1
        is_last_exercise = self.current_exercise_index >= len(self.exercises) - 1
        return is_last_set_in_exercise and is_last_exercise

    def _advance_to_next_set(self) -> None:
        exercise = self.current_exercise
        if exercise is None:
            return

        if self.current_set_index < len(exercise.sets) - 1:
            self.current_set_index += 1
        elif self.current_exercise_index < len(self.exercises) - 1:
            self.current_exercise_index += 1
            self.current_set_index = 0

    # =========================================================================
    # Sync payload
    # =========================================================================

    def build_completed_payload(
        self,
        *,
        update_template: bool = False,
        healthkit_workout_id: Optional[str] = None,
    ) -> Optional[CompletedWorkoutPayload]:
        """
        Build the payload describing the workout as performed.

        Returns:
            The payload, or None if no workout was started
        """
        if self.current_routine is None or self._start_time is None:
            return None

        return CompletedWorkoutPayload(
            id=str(uuid4()),
            routine_id=self.current_routine.id,
            routine_name=self.current_routine.name,
            start_time=self._start_time,
            end_time=_now(),
            exercises=[e.to_completed() for e in self.exercises],
            should_update_template=update_template,
            healthkit_workout_id=healthkit_workout_id,
        )

    # =========================================================================
    # Sensor metrics
    # =========================================================================

    def _start_metrics_poll(self) -> None:
        self._stop_metrics_poll()
        self._poll_task = asyncio.get_running_loop().create_task(self._poll_metrics())

    def _stop_metrics_poll(self) -> None:
        task = self._poll_task
        self._poll_task = None
        if task is not None and not task.done():
            task.cancel()

    def read_metrics(self) -> None:
        """Copy the latest sensor readings into the engine."""
        source = self._sensor_source
        if source.heart_rate is not None:
            self.heart_rate = int(source.heart_rate)
        if source.active_calories is not None:
            self.active_calories = int(source.active_calories)
        if source.elapsed_time is not None:
            self.elapsed_time = source.elapsed_time

    async def _poll_metrics(self) -> None:
        while True:
            self.read_metrics()
            await asyncio.sleep(self._metrics_poll_interval)

    def _reset_state(self) -> None:
        self.state = WorkoutState.IDLE
        self.current_routine = None
        self.exercises = []
        self.current_exercise_index = 0
        self.current_set_index = 0
        self._start_time = None
        self.heart_rate = None
        self.active_calories = None
        self.elapsed_time = None
