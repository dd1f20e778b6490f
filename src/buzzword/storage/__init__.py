from .frequency import DEFAULT_CAPACITY, FrequencyStore

__all__ = ["FrequencyStore", "DEFAULT_CAPACITY"]
