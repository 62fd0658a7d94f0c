#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Pick-Pad is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import copy
import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Dict, Optional

import toml

from .style import StyleSet, parse_style

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PICK_PAD_CONFIG"
DEFAULT_CONFIG_PATH = "config.toml"
VALID_LAYOUTS = ("top-down", "bottom-up")

DEFAULT_CONFIG: Dict[str, Any] = {
    "ui": {
        "prompt": "QUERY>",
        "layout": "top-down",
        "matcher": "IgnoreCase",
        "status_clear_delay": 0.5,
    },
    "style": {
        "basic": ["default", "on_default"],
        "query": ["default", "on_default"],
        "matched": ["cyan", "on_default"],
        "selected": ["underline", "on_magenta"],
        "saved_selection": ["bold", "black", "on_cyan"],
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "log_file": "pick_pad.log",
    },
}


# --- Dictionary Deep Merge Utility ---
def deep_merge(base: Dict[Any, Any], override: Dict[Any, Any]) -> Dict[Any, Any]:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.

    If a key exists in both dictionaries and both values are dictionaries,
    the merge is performed recursively. Otherwise, the value from `override`
    replaces the value from `base`. Neither input is modified.

    Example:
        >>> deep_merge({'ui': {'prompt': 'Q>', 'layout': 'top-down'}}, {'ui': {'layout': 'bottom-up'}})
        {'ui': {'prompt': 'Q>', 'layout': 'bottom-up'}}
    """
    result = copy.deepcopy(base)
    for key, override_value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
        else:
            result[key] = copy.deepcopy(override_value)
    return result


def _validate(config: Dict[str, Any]) -> Dict[str, Any]:
    """Replaces values the layout cannot use with defaults, logging each fix."""
    ui = config.setdefault("ui", {})
    default_ui = DEFAULT_CONFIG["ui"]

    if ui.get("layout") not in VALID_LAYOUTS:
        logger.warning("Unknown layout %r in config – using %r.", ui.get("layout"), default_ui["layout"])
        ui["layout"] = default_ui["layout"]

    try:
        delay = float(ui.get("status_clear_delay", default_ui["status_clear_delay"]))
    except (TypeError, ValueError):
        delay = -1.0
    if delay <= 0:
        logger.warning("Invalid status_clear_delay %r – using %s.",
                       ui.get("status_clear_delay"), default_ui["status_clear_delay"])
        delay = default_ui["status_clear_delay"]
    ui["status_clear_delay"] = delay

    if not isinstance(ui.get("prompt"), str):
        ui["prompt"] = default_ui["prompt"]

    style = config.setdefault("style", {})
    for role in list(style):
        if role not in StyleSet.ROLES:
            continue
        try:
            parse_style(style[role])
        except ValueError as exc:
            logger.error("Bad style for %s: %s – using default.", role, exc)
            style[role] = copy.deepcopy(DEFAULT_CONFIG["style"][role])
    return config


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads the configuration, merging a user TOML file over the defaults.

    The file is ``path`` if given, else ``$PICK_PAD_CONFIG``, else
    *config.toml* in the working directory. Missing files, TOML syntax
    errors and I/O problems are logged and the defaults are used, so the
    function never raises.

    Returns:
        dict: The merged and validated configuration.

    Example:
        >>> config = load_config()
        >>> config["ui"]["prompt"]
        'QUERY>'
    """
    config_path = path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    user_config: dict = {}

    if os.path.exists(config_path):
        try:
            with open(config_path, "r", encoding="utf-8") as fh:
                user_config = toml.loads(fh.read())
            logger.debug("Loaded user config from %s", config_path)
        except FileNotFoundError:
            logger.warning("Config file %s vanished – using defaults.", config_path)
        except toml.TomlDecodeError as exc:
            logger.error("TOML parse error in %s: %s – using defaults.", config_path, exc)
        except OSError as exc:
            logger.error("Error reading %s: %s – using defaults.", config_path, exc)
    else:
        logger.debug("Config file %s not found – using defaults.", config_path)

    final_config = _validate(deep_merge(DEFAULT_CONFIG, user_config))
    logger.debug("Final configuration loaded successfully.")
    return final_config


def setup_logging(config: Optional[Dict[str, Any]] = None) -> None:
    """
    Configures the root logger from the ``[logging]`` config section.

    Attaches a rotating file handler (2 MiB, five backups) at ``file_level``
    and, when ``log_to_console`` is set, a stderr handler at
    ``console_level``. Existing root handlers are removed first so repeated
    calls (e.g. in unit tests) do not duplicate records. I/O errors are
    reported on stderr and never raised; if the log directory cannot be
    created the file goes to the system temp directory.
    """
    logging_config = (config or {}).get("logging", {})
    file_level = getattr(logging, str(logging_config.get("file_level", "DEBUG")).upper(), logging.DEBUG)
    log_filename = logging_config.get("log_file", "pick_pad.log")

    log_dir = os.path.dirname(log_filename)
    if log_dir and not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir)
        except OSError as e_mkdir:
            print(f"Error creating log directory '{log_dir}': {e_mkdir}", file=sys.stderr)
            log_filename = os.path.join(tempfile.gettempdir(), "pick_pad.log")
            print(f"Logging to temporary file: '{log_filename}'", file=sys.stderr)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    file_handler = None
    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_filename, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(file_level)
    except OSError as e_fh:
        print(f"Error setting up file logger for '{log_filename}': {e_fh}. File logging disabled.",
              file=sys.stderr)

    console_handler = None
    if logging_config.get("log_to_console", False):
        console_level = getattr(logging, str(logging_config.get("console_level", "WARNING")).upper(),
                                logging.WARNING)
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s"))
        console_handler.setLevel(console_level)

    root_logger = logging.getLogger()
    root_logger.handlers = []  # Clear existing root handlers to avoid duplicates

    if file_handler:
        root_logger.addHandler(file_handler)
    if console_handler:
        root_logger.addHandler(console_handler)
    root_logger.setLevel(file_level)

    logger.info("Logging setup complete. Root logger level: %s.", logging.getLevelName(root_logger.level))
    if file_handler:
        logger.info("File logging to '%s' at level: %s.", log_filename, logging.getLevelName(file_handler.level))
