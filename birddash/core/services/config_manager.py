"""
config_manager.py
-----------------
Universal configuration loader for game data tables.

Features:
- Supports .json and .yaml/.yml config files
- Builds file index once at startup for O(1) lookups
- Recursively merges defaults
- Ignores '_notes' keys for human-readable configs
"""

import os
import json

import yaml

from birddash.core.debug.debug_logger import DebugLogger


# ===========================================================
# Configuration
# ===========================================================

DATA_ROOT = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "config")

SEARCH_DIRS = [
    DATA_ROOT,
    os.path.join(DATA_ROOT, "ui"),
]

CONFIG_EXTENSIONS = (".json", ".yaml", ".yml")

_FILE_INDEX = None


# ===========================================================
# Public API
# ===========================================================

def load_config(filename, default_dict=None, strict=False):
    """
    Load a configuration file.

    Args:
        filename: Filename or full path (.json or .yaml)
        default_dict: Default fallback config
        strict: If True, raise exception on missing file

    Returns:
        dict: Merged configuration
    """
    if default_dict is None:
        default_dict = {}

    if os.path.isabs(filename) and os.path.exists(filename):
        path = filename
    else:
        path = _resolve_search_path(filename)

    try:
        if path.endswith((".yaml", ".yml")):
            data = _load_yaml(path)
        else:
            data = _load_json(path)

        return _merge_dicts(default_dict, data or {})

    except (json.JSONDecodeError, yaml.YAMLError, OSError) as e:
        if strict:
            raise FileNotFoundError(f"Config not found: {filename}") from e
        DebugLogger.warn(f"Failed to load {path}: {e} - using defaults", category="loading")
        return default_dict.copy()


def build_file_index():
    """Scan config directories and cache all file paths. Call once at startup."""
    global _FILE_INDEX
    _FILE_INDEX = {}

    for directory in SEARCH_DIRS:
        if not os.path.isdir(directory):
            continue
        for root, _, files in os.walk(directory):
            for file in files:
                if file.endswith(CONFIG_EXTENSIONS) and file not in _FILE_INDEX:
                    _FILE_INDEX[file] = os.path.join(root, file)

    DebugLogger.init(f"Config index: {len(_FILE_INDEX)} files", category="loading")


def get_indexed_files():
    """Return copy of file index for debugging."""
    if _FILE_INDEX is None:
        build_file_index()
    return _FILE_INDEX.copy()


# ===========================================================
# Path Resolution
# ===========================================================

def _resolve_search_path(filename):
    """O(1) lookup from pre-built index."""
    if _FILE_INDEX is None:
        build_file_index()

    filename = filename.replace("\\", "/").lstrip("/")

    if filename in _FILE_INDEX:
        return _FILE_INDEX[filename]

    for ext in CONFIG_EXTENSIONS:
        key = filename + ext
        if key in _FILE_INDEX:
            return _FILE_INDEX[key]

    # Missing files fall through to the loader, which reports them
    return filename


# ===========================================================
# File Loaders
# ===========================================================

def _load_json(path):
    """Load JSON config file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    DebugLogger.system(f"Loaded {os.path.basename(path)}", category="loading")
    return data


def _load_yaml(path):
    """Load YAML config file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    DebugLogger.system(f"Loaded {os.path.basename(path)} (YAML)", category="loading")
    return data


# ===========================================================
# Merge Utilities
# ===========================================================

def _merge_dicts(default, override):
    """Recursively merge two dicts. Ignores '_notes' keys."""
    merged = default.copy()
    for key, value in override.items():
        if key == "_notes":
            continue
        if isinstance(value, dict) and key in merged and isinstance(merged[key], dict):
            merged[key] = _merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
