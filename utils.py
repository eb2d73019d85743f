# utils.py
"""
Utility functions for the flow-field application.

This module provides the logging setup and the configuration loader.
They are used by the entry point but do not belong to the simulation
or rendering code.
"""
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, Optional

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any], level: Optional[str] = None) -> None:
#   - Inputs:
#     - config: A dictionary with an optional "logging" section holding
#       "level", "format" and "log_file".
#     - level: Overrides the configured level (e.g. from the command line).
#   - Side Effects: Configures the root logger with a console handler and,
#     unless log_file is empty, a rotating file handler. Creates the log
#     directory if needed.
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: The parsed file with every known section present.
#   - Raises: FileNotFoundError, json.JSONDecodeError, or ValueError when
#     the top level is not an object. Each is logged before re-raising.

CONFIG_SECTIONS = ('logging', 'simulation_parameters', 'run_control', 'visualization', 'export')

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/flowfield.log'


def setup_logging(config: Dict[str, Any], level: Optional[str] = None) -> None:
    """
    Configures the logging system from a configuration dictionary.
    """
    log_config = config.get('logging', {})
    log_level = (level or log_config.get('level', 'INFO')).upper()
    log_format = log_config.get('format', DEFAULT_LOG_FORMAT)
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        # Rotates when the log reaches 1MB, keeps 5 backup logs.
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=1024*1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path or '(console only)'}")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file, filling in missing sections."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(config, dict):
        logging.error(f"Configuration in {path} must be a JSON object.")
        raise ValueError(f"Configuration in {path} must be a JSON object, got {type(config).__name__}.")

    for section in CONFIG_SECTIONS:
        config.setdefault(section, {})
    logging.info("Configuration loaded successfully.")
    return config
