import json
from pomoflash.common.logger import log
from pomoflash.common.setup import PATHS
from pomoflash.core.durations import (
    DEFAULT_BREAK_LABEL,
    DEFAULT_BREAK_SECONDS,
    DEFAULT_WORK_LABEL,
    DEFAULT_WORK_SECONDS,
    DurationConfig,
    Phase,
)
from pomoflash.util import now_iso


_SCHEMA_VERSION = 1

#region === Helpers and Paths ===

STATE_PATH = PATHS.current / "state.json"

# Default values for every persisted key. Key names are the on-disk format, so they stay as-is.
_FIELD_DEFAULTS = {
    "workDuration": DEFAULT_WORK_SECONDS,
    "breakDuration": DEFAULT_BREAK_SECONDS,
    "workLabel": DEFAULT_WORK_LABEL,
    "breakLabel": DEFAULT_BREAK_LABEL,
    "timeRemaining": float(DEFAULT_WORK_SECONDS),
    "isRunning": False,
    "timerType": Phase.WORK.value,
    "sessionsCompleted": 0,
    "lastActiveTime": 0.0,
}
_INT_KEYS = {"workDuration", "breakDuration", "sessionsCompleted"}
_FLOAT_KEYS = {"timeRemaining", "lastActiveTime"}
_STR_KEYS = {"workLabel", "breakLabel"}

# Helper to return a truly fresh, default state.
def build_default_state():
    state = {
        "meta": {
            "schema_version": _SCHEMA_VERSION,
            "saved_at": now_iso(),
        },
    }
    state.update(_FIELD_DEFAULTS)
    return state

# Checks a single persisted value against its key's type and range. bool is an int subclass, so it gets excluded
# from the numeric keys explicitly.
def _is_valid(key, value):
    if key in _INT_KEYS:
        return isinstance(value, int) and not isinstance(value, bool) and value >= 0
    if key in _FLOAT_KEYS:
        return isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0
    if key in _STR_KEYS:
        return isinstance(value, str)
    if key == "isRunning":
        return isinstance(value, bool)
    if key == "timerType":
        return value in (Phase.WORK.value, Phase.BREAK.value)
    return False

#endregion === Helpers and Paths ===

#region === Saving and Loading State ===

# Loads the persisted state from PATHS.current / state.json, checking every key and falling back to defaults for
# anything missing or malformed.
def load_state():
    try:
        if not STATE_PATH.exists():
            log.info("No existing state.json found in `current`, loading fresh state dict.")
            return build_default_state()

        with open(STATE_PATH, "r", encoding="utf-8") as f:
            state = json.load(f)
        if not isinstance(state, dict):
            raise TypeError(f"Expected a JSON object in '{STATE_PATH}', got {type(state).__name__}")
        defaulted_values = set()

        # Validate the meta dict
        if "meta" not in state or not isinstance(state["meta"], dict):
            defaulted_values.add("meta")
            state["meta"] = {}
        if "schema_version" not in state["meta"] or not isinstance(state["meta"]["schema_version"], int):
            defaulted_values.add("meta.schema_version")
            state["meta"]["schema_version"] = _SCHEMA_VERSION

        # Validate every persisted clock/config field
        for key, default in _FIELD_DEFAULTS.items():
            if key not in state or not _is_valid(key, state[key]):
                defaulted_values.add(key)
                state[key] = default
            elif key in _FLOAT_KEYS:
                state[key] = float(state[key])

        # Log results
        if defaulted_values:
            log.warning(f"Successfully loaded current state dict from '{STATE_PATH}', but with missing values that were defaulted: {', '.join(sorted(defaulted_values))}")
        else:
            log.info(f"Successfully loaded current state dict from '{STATE_PATH}'.")
        return state
    # Fall back to a fresh state dict in case of error, but warn in log
    except (json.JSONDecodeError, OSError, TypeError):
        log.warning("Ran into an error while trying to load state.json, falling back to loading a fresh state dict.",exc_info=True)
        return build_default_state()

# Write the given state to disk under PATHS.current / state.json
def save_state(state):
    state.setdefault("meta", {"schema_version": _SCHEMA_VERSION})
    state["meta"]["saved_at"] = now_iso()
    with open(STATE_PATH, "w", encoding="utf-8") as f:
        json.dump(state, f, indent=2)
    log.debug(f"Successfully saved state to '{STATE_PATH}'")

#endregion === Saving and Loading State ===

#region === Duration Settings ===

def config_from_state(state):
    return DurationConfig(
        work_seconds=state.get("workDuration", DEFAULT_WORK_SECONDS),
        break_seconds=state.get("breakDuration", DEFAULT_BREAK_SECONDS),
        work_label=state.get("workLabel", DEFAULT_WORK_LABEL),
        break_label=state.get("breakLabel", DEFAULT_BREAK_LABEL),
    )

def store_config(state, duration_config):
    state["workDuration"] = duration_config.work_seconds
    state["breakDuration"] = duration_config.break_seconds
    state["workLabel"] = duration_config.work_label
    state["breakLabel"] = duration_config.break_label

#endregion === Duration Settings ===
