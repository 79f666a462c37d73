"""Data models for the workout tracker."""
from datetime import date as Date, datetime
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

ExerciseType = Literal['primary', 'optional', 'cardio', 'circuit', 'daily']
PaymentStatus = Literal['pending', 'succeeded', 'expired']


class Exercise(BaseModel):
    """A single exercise in a day's plan. ``type`` only affects display."""
    name: str
    sets: Optional[int] = None
    reps: Optional[str] = None  # "8-10", "15", "8-10 (each leg)"
    time: Optional[str] = None  # "30-45 seconds"
    note: Optional[str] = None
    type: ExerciseType = "primary"
    category: Optional[str] = None  # e.g. "Abs"


class Workout(BaseModel):
    """A named, ordered list of exercises for one weekday."""
    name: str
    exercises: List[Exercise] = Field(default_factory=list)


class WeekDate(BaseModel):
    date: Date
    day_name: str
    is_today: bool = False


# ---------------------------------------------------------------------------
# Workout logs
# ---------------------------------------------------------------------------


class ExerciseLogEntry(BaseModel):
    """What the user logged for one exercise on one day."""
    exercise_id: str
    completed: bool = False
    weights: List[str] = Field(default_factory=list)  # one per set, may be ""
    sets_completed: Optional[int] = None
    reps_completed: Optional[List[str]] = None

    class Config:
        extra = "ignore"


class WorkoutLogRecord(BaseModel):
    """Parent row of a day's log as stored in ``workout_logs``."""
    id: Optional[Union[int, str]] = None
    user_id: str
    date: str
    workout_day_id: Optional[str] = None
    completed_at: Optional[datetime] = None

    class Config:
        extra = "ignore"


class LoggedExercise(BaseModel):
    """Cache/display shape of a day's log entry: ``{completed, weights}``."""
    completed: bool = False
    weights: List[str] = Field(default_factory=list)


DayLog = Dict[str, LoggedExercise]


# ---------------------------------------------------------------------------
# Weekly progress
# ---------------------------------------------------------------------------


class DayStats(BaseModel):
    day: str
    date: str  # formatted key, e.g. "Monday, October 19, 2026"
    completed_count: int = 0
    original_date: Date
    is_rest_day: bool = False
    route: Optional[str] = None  # None for rest days


class WeeklyProgress(BaseModel):
    days: List[DayStats]
    total_completed: int
    weekly_target: int
    target_ratio: float


# ---------------------------------------------------------------------------
# Premium payments
# ---------------------------------------------------------------------------


class PremiumPayment(BaseModel):
    post_id: str
    user_id: str
    status: PaymentStatus = "pending"
    payment_id: Optional[str] = None
    amount: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "ignore"


# ---------------------------------------------------------------------------
# Profiles and progress entries
#
# Only the listed fields may be written; anything else in a request is dropped.
# ---------------------------------------------------------------------------


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    username: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    fitness_level: Optional[str] = None
    preferred_workout: Optional[str] = None
    is_profile_private: Optional[bool] = None
    display_option: Optional[Literal['full_name', 'username']] = None
    fitness_goals: Optional[List[str]] = None
    preferred_workout_types: Optional[List[str]] = None
    training_split: Optional[str] = None
    primary_fitness_focus: Optional[str] = None
    equipment_access: Optional[List[str]] = None
    motivational_quote: Optional[str] = None
    preferred_workout_duration: Optional[int] = Field(default=None, ge=0)
    age: Optional[int] = Field(default=None, ge=0)
    gender: Optional[str] = None
    weight: Optional[float] = Field(default=None, ge=0)
    height: Optional[float] = Field(default=None, ge=0)

    class Config:
        extra = "ignore"


class ProgressEntryUpdate(BaseModel):
    weight_kg: Optional[float] = Field(default=None, ge=0)
    body_fat_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    notes: Optional[str] = None

    class Config:
        extra = "ignore"
