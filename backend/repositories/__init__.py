from .usage import InMemoryUsageStore, SqlUsageStore, UsageStore
from . import models

__all__ = ["InMemoryUsageStore", "SqlUsageStore", "UsageStore", "models"]
