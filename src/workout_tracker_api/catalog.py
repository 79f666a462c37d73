"""
Static weekly workout plan.

Keyed by weekday name. ``Daily`` is a pseudo-day that applies every day.
Saturday and Sunday are rest days and have no entry.
"""
from types import MappingProxyType
from typing import List, Mapping, Optional

from workout_tracker_api.models import Exercise, Workout

DAILY = "Daily"

WORKOUTS: Mapping[str, Workout] = MappingProxyType({
    "Monday": Workout(
        name="Chest & Triceps",
        exercises=[
            Exercise(name="Bench Press (or chest press machine)", sets=3, reps="8-10", type="primary"),
            Exercise(name="Dumbbell Flyes", sets=3, reps="10-12", type="primary"),
            Exercise(name="Tricep Dips (or tricep press)", sets=3, reps="10-12", type="primary"),
            Exercise(name="Tricep Extensions", sets=3, reps="10-12", type="primary"),
            Exercise(name="Plank", sets=3, time="30-45 seconds", type="optional", category="Abs"),
        ],
    ),
    "Tuesday": Workout(
        name="Back & Biceps",
        exercises=[
            Exercise(name="Lat Pulldowns", sets=3, reps="8-10", type="primary"),
            Exercise(name="Seated Row (machine)", sets=3, reps="8-10", type="primary"),
            Exercise(name="Dumbbell Bicep Curls", sets=3, reps="10-12", type="primary"),
            Exercise(name="Hammer Curls", sets=3, reps="10-12", type="primary"),
            Exercise(name="Bicycle Crunches", sets=3, reps="15-20", type="optional", category="Abs"),
        ],
    ),
    "Wednesday": Workout(
        name="Legs & Glutes",
        exercises=[
            Exercise(name="Squats (machine or free weights)", sets=3, reps="8-10", type="primary"),
            Exercise(name="Leg Press", sets=3, reps="8-10", type="primary"),
            Exercise(name="Lunges", sets=3, reps="8-10 (each leg)", type="primary"),
            Exercise(name="Glute Bridges", sets=3, reps="10-12", type="primary"),
            Exercise(name="Calf Raises", sets=3, reps="12-15", type="primary"),
        ],
    ),
    "Thursday": Workout(
        name="Shoulders & Abs",
        exercises=[
            Exercise(name="Shoulder Press (machine or dumbbells)", sets=3, reps="8-10", type="primary"),
            Exercise(name="Lateral Raises", sets=3, reps="10-12", type="primary"),
            Exercise(name="Front Raises", sets=3, reps="10-12", type="primary"),
            Exercise(name="Shrugs", sets=3, reps="10-12", type="primary"),
            Exercise(name="Leg Raises / Crunches", sets=3, reps="15", type="primary", category="Abs"),
        ],
    ),
    "Friday": Workout(
        name="Full-Body or Cardio",
        exercises=[
            Exercise(name="Treadmill / Elliptical / Stair Climber", time="15-20 minutes", type="cardio"),
            Exercise(
                name="Light circuit (push-ups, planks, squats, lunges, dips)",
                sets=1,
                note="Focus on technique/form over heavy weights to prevent injury",
                type="circuit",
            ),
        ],
    ),
    DAILY: Workout(
        name="Before-Bed Routine",
        exercises=[
            Exercise(name="Light Push-Ups", sets=2, reps="10-15", type="daily"),
            Exercise(
                name="Stretching/Yoga",
                time="5 minutes",
                note="Focus on tight areas like shoulders, back, hips",
                type="daily",
            ),
            Exercise(name="Deep Breathing", time="1-2 minutes", note="Calm breathing to relax", type="daily"),
        ],
    ),
})


def get_workout_for_day(day: str) -> Optional[Workout]:
    """Return the workout for a weekday name, or None when there is none."""
    workout = WORKOUTS.get(day)
    # The catalog is never mutated; callers get a copy
    return workout.model_copy(deep=True) if workout is not None else None


def get_workout_for_slug(slug: str) -> Optional[Workout]:
    """Resolve a lower-cased route slug such as 'monday'."""
    if not slug:
        return None
    return get_workout_for_day(slug[:1].upper() + slug[1:].lower())


def get_all_workout_days() -> List[str]:
    return list(WORKOUTS.keys())
