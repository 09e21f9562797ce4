# Shared utilities. Explicit re-exports for a clean public API.

from .config import NumericConfig as NumericConfig
from .device import (
    pick_device as pick_device,
    seed_everything as seed_everything,
    torch_dtype as torch_dtype,
)
from .io import (
    ensure_dir as ensure_dir,
    load_json as load_json,
    load_yaml as load_yaml,
    save_json as save_json,
    save_yaml as save_yaml,
)
from .logs import setup_logger as setup_logger
from .manifest import Manifest as Manifest, write_manifest as write_manifest
from .timers import Timer as Timer, timed as timed

__all__ = [
    "NumericConfig",
    "pick_device",
    "seed_everything",
    "torch_dtype",
    "ensure_dir",
    "load_json",
    "load_yaml",
    "save_json",
    "save_yaml",
    "setup_logger",
    "Manifest",
    "write_manifest",
    "Timer",
    "timed",
]
