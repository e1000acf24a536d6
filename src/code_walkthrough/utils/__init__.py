from .config import load_config
from .progress_tracker import ProgressTracker, ProgressStep

__all__ = ["load_config", "ProgressTracker", "ProgressStep"]
