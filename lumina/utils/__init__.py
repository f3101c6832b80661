from lumina.utils.async_utils import cleanup_executor, run_in_executor
from lumina.utils.path_manager import PathManager

__all__ = [
    "PathManager",
    "cleanup_executor",
    "run_in_executor",
]
