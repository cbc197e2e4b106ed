"""Enumerations and engine constants.

Load-model and readiness constants follow the coaching rules the engine
was built around: Epley-style reps-in-reserve estimation, MAD-based
baselines, and a fixed 4-week cycle with a deload in the last week.
"""

from enum import Enum, IntEnum, auto


class ReadinessClass(str, Enum):
    """Traffic-light classification of a readiness channel or the fused result."""

    GREEN = "GREEN"
    YELLOW = "YELLOW"
    RED = "RED"


class Channel(str, Enum):
    """Daily readiness measurement channels."""

    VELOCITY = "velocity"  # readiness-test first-rep bar velocity
    RECOVERY = "recovery"  # nightly HRV as lnRMSSD
    EFFORT = "effort"  # top-set effort-distance overshoot


class DayType(str, Enum):
    """Session type for the primary movement."""

    HEAVY = "heavy"
    VOLUME = "volume"
    SPEED = "speed"
    ACCESSORY = "accessory"
    REST = "rest"


class SlotRole(str, Enum):
    PRIMARY = "primary"
    ACCESSORY = "accessory"


class SetRole(str, Enum):
    """Role of a recorded set within its session."""

    TOP = "top"
    READINESS_TEST = "readiness_test"
    BACKOFF = "backoff"
    WARMUP = "warmup"
    OTHER = "other"


class Phase(str, Enum):
    """Week label inside the 4-week cycle."""

    ADAPTATION = "adaptation"
    LOADING = "loading"
    OVERREACH = "overreach"
    DELOAD = "deload"


class MovementClass(str, Enum):
    """Body region of an accessory movement; selects the load increment."""

    UPPER = "upper"
    LOWER = "lower"


class ProgressAction(str, Enum):
    INCREASE = "increase"
    HOLD = "hold"


class StagnationSeverity(str, Enum):
    YELLOW = "yellow"
    ORANGE = "orange"


class Stage(IntEnum):
    """Ordering of the load-adjustment rules — lower value runs first.

    The order is load-bearing: each stage sees the state left by the
    previous one.
    """

    PHASE = 1
    TREND = 2
    BREAK = 3
    CLAMP = 4
    READINESS = 5


class RuleId(str, Enum):
    """Identifiers of every decision-trace entry the engine can emit."""

    CYCLE_CREATED = "CYCLE_CREATED"
    CYCLE_ROLLOVER = "CYCLE_ROLLOVER"
    CYCLE_PHASE = "CYCLE_PHASE"
    BREAK_DAY_TYPE = "BREAK_DAY_TYPE"
    BREAK_DETECTED = "BREAK_DETECTED"
    CYCLE_BREAK_RESET = "CYCLE_BREAK_RESET"
    ESTIMATED_MAX = "ESTIMATED_MAX"
    ADJUSTMENT_RAW = "ADJUSTMENT_RAW"
    TREND_CORRECTION = "TREND_CORRECTION"
    BREAK_MODIFIER = "BREAK_MODIFIER"
    ADJUSTMENT_CLAMP = "ADJUSTMENT_CLAMP"
    READINESS_RED_DAY_TYPE = "READINESS_RED_DAY_TYPE"
    READINESS_RED_CAP = "READINESS_RED_CAP"
    READINESS_YELLOW_CAP = "READINESS_YELLOW_CAP"
    TARGETS = "TARGETS"
    TARGET_LOAD = "TARGET_LOAD"
    SET_COUNT = "SET_COUNT"
    EFFORT_FEEDBACK = "EFFORT_FEEDBACK"
    ACCESSORY_CAP = "ACCESSORY_CAP"
    DAY_PLAN_NEAREST = "DAY_PLAN_NEAREST"
    DAY_PLAN_GENERATED = "DAY_PLAN_GENERATED"


class FeedbackType(str, Enum):
    TOO_EASY = "too_easy"
    TOO_HARD = "too_hard"


class BreakSeverity(IntEnum):
    NONE = auto()
    SHORT = auto()  # 7-13 days
    EXTENDED = auto()  # 14-27 days
    LONG = auto()  # 28+ days


class PlanSource(str, Enum):
    """Which stage of day-plan resolution produced the day plan."""

    EXACT = "exact"
    NEAREST = "nearest"
    GENERATED = "generated"


class AdaptationType(str, Enum):
    """Kind of change suggested by comparing a session with its day plan."""

    VOLUME_UP = "volume_up"
    VOLUME_DOWN = "volume_down"
    NEW_EXERCISE = "new_exercise"


# ---------------------------------------------------------------------------
# Robust statistics
# ---------------------------------------------------------------------------
MAD_TO_SIGMA = 1.4826  # consistency constant for normally distributed data
SCALE_EPSILON = 1e-6

# ---------------------------------------------------------------------------
# Load models
# ---------------------------------------------------------------------------
EPLEY_DIVISOR = 30.0
DEFAULT_EFFORT_DISTANCE = 2  # assumed reps in reserve when none recorded
DEFAULT_TOP_SET_REPS = 3
MAX_EFFORT_DISTANCE = 5
SPEED_DAY_MAX_FRACTION = 0.575  # midpoint of 55-60 % of system max
INITIAL_LOAD_FRACTION = 0.70
FAILURE_LOAD_FRACTION = 0.90

# ---------------------------------------------------------------------------
# Readiness classification
# ---------------------------------------------------------------------------
Z_GREEN_FLOOR = -0.5  # z >= -0.5 is GREEN
Z_YELLOW_FLOOR = -1.0  # -1.0 <= z < -0.5 is YELLOW

CAP_LEVELS = {
    ReadinessClass.GREEN: 0,
    ReadinessClass.YELLOW: 1,
    ReadinessClass.RED: 2,
}

YELLOW_CAP_FACTOR = 0.5

# ---------------------------------------------------------------------------
# Cycle structure
# ---------------------------------------------------------------------------
CYCLE_WEEKS = 4
DAYS_PER_WEEK = 7

DAY_TYPE_MULTIPLIERS = {
    DayType.HEAVY: 1.0,
    DayType.VOLUME: 0.6,
    DayType.SPEED: 0.4,
    DayType.ACCESSORY: 0.0,
    DayType.REST: 0.0,
}

# Primary-movement set count per day type
DAY_TYPE_SET_COUNTS = {
    DayType.HEAVY: 3,
    DayType.VOLUME: 4,
    DayType.SPEED: 4,
    DayType.ACCESSORY: 3,
    DayType.REST: 0,
}

# (reps, effort distance) for non-heavy day types; heavy reads the week definition
VOLUME_TARGETS = (5, 3)
SPEED_TARGETS = (2, 4)
FALLBACK_TARGETS = (3, 2)

# ---------------------------------------------------------------------------
# Return from a break: (min days, load modifier, forced day type)
# ---------------------------------------------------------------------------
BREAK_THRESHOLDS = (
    (28, -0.15, DayType.VOLUME),
    (14, -0.10, DayType.VOLUME),
    (7, -0.05, None),
)
BREAK_RESET_WEEKS = 2

# ---------------------------------------------------------------------------
# Trend correction and effort feedback
# ---------------------------------------------------------------------------
TREND_DEADBAND = 0.5
FEEDBACK_WINDOW = 3
FEEDBACK_MARGIN = 1
CALIBRATION_EASY_THRESHOLD = 1.0
CALIBRATION_HARD_THRESHOLD = -0.5
CALIBRATION_STEP = 0.01

# ---------------------------------------------------------------------------
# Accessory progression
# ---------------------------------------------------------------------------
TARGET_MET_SESSIONS_FOR_INCREASE = 2

# ---------------------------------------------------------------------------
# Weekly stimulus thresholds
# ---------------------------------------------------------------------------
HEAVY_EXPOSURE_MAX_EFFECTIVE_REPS = 4
MIN_WEEKLY_PULL_SETS = 12
TARGET_WEEKLY_PULL_SETS = 15
MIN_WEEKLY_HEAVY_EXPOSURES = 3
TARGET_WEEKLY_HEAVY_EXPOSURES = 6
MIN_PUSH_TO_PULL_RATIO = 0.5

# ---------------------------------------------------------------------------
# Adaptive slot volume
# ---------------------------------------------------------------------------
ADAPTATION_EXTRA_SETS = 2  # completed minus planned sets that suggests +1
ADAPTATION_MIN_SETS = 2
ADAPTATION_MAX_SETS = 6
ADAPTATION_MIN_OCCURRENCES = 2  # sessions showing the same pattern before a plan changes
