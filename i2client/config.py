#!/usr/bin/env python3
# -*- coding: utf-8 -*-
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_INSTALL_DIR = 'C:/Program Files (x86)/TWC/i2'
DEFAULT_EXEC_PATH = f'{DEFAULT_INSTALL_DIR}/exec.exe'
LOG_FORMAT = '[%(asctime).19s] [%(name)s] [%(levelname)s] %(message)s'


class ConfigError(Exception):
    """Configuration file is missing or malformed"""
    pass


@dataclass
class DeviceConfig:
    """Where the device software lives and how to call it

    Attributes:
        exec_path: Path to the bundled exec executable
        install_dir: Device install directory (holds Managed/Config)
        async_mode: Pass -async so exec returns without waiting on the device
        command_timeout: Seconds to wait for exec to exit (None waits forever)
    """
    exec_path: str = DEFAULT_EXEC_PATH
    install_dir: str = DEFAULT_INSTALL_DIR
    async_mode: bool = True
    command_timeout: Optional[float] = 30.0

    @property
    def mpc_path(self) -> Path:
        """Location of MachineProductCfg.xml"""
        return Path(self.install_dir) / 'Managed' / 'Config' / 'MachineProductCfg.xml'

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'DeviceConfig':
        """Build from the 'device' section of a config file"""
        data = data or {}
        install_dir = data.get('install_dir', DEFAULT_INSTALL_DIR)
        return cls(
            exec_path=data.get('exec_path', f'{install_dir}/exec.exe'),
            install_dir=install_dir,
            async_mode=bool(data.get('async', True)),
            command_timeout=data.get('command_timeout', 30.0),
        )


class RobustFileHandler(logging.FileHandler):
    """FileHandler that gracefully handles flush errors on Windows"""

    def flush(self):
        """Flush the stream, catching OSError on Windows file handles"""
        try:
            super().flush()
        except OSError as e:
            # EINVAL from a Windows handle in an inconsistent state
            if e.errno != 22:
                raise


def configure_logger(logger,
                     log_file=None,
                     log_format=None,
                     log_level=logging.INFO):
    """Configure a logger with a file or stream handler

    Args:
        logger: Logger instance or logger name string
        log_file: File path string or file-like object (None for stderr)
        log_format: Format string for log messages
        log_level: Logging level (e.g., logging.INFO, logging.DEBUG)

    Returns:
        Configured logger instance
    """
    # Create file handler if path string, otherwise stream handler
    if isinstance(log_file, str):
        # Append mode; device paths and flavor names may carry odd characters
        handler = RobustFileHandler(
            log_file,
            mode='a',
            encoding='utf-8',
            errors='replace'  # Replace undecodable chars instead of raising
        )
    else:
        handler = logging.StreamHandler(log_file)  # Default to stderr if None

    # Create and attach formatter
    handler.setFormatter(logging.Formatter(log_format or LOG_FORMAT))

    # Get logger by name if string provided
    if isinstance(logger, str):
        logger = logging.getLogger(logger)

    logger.addHandler(handler)
    logger.setLevel(log_level)

    return logger


def load_config_file(path):
    """Read a JSON or YAML file (chosen by extension) into a dict

    Raises:
        ConfigError: If the file is missing or cannot be parsed
    """
    path = str(path)
    try:
        with open(path, 'r', encoding='utf-8') as fp:
            # Determine file format from extension (JSON is the default)
            if path.endswith(('.yaml', '.yml')):
                data = yaml.safe_load(fp)
            else:
                data = json.load(fp)
    except FileNotFoundError as e:
        raise ConfigError(f'Config file not found: {path}') from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f'Could not parse {path}: {e}') from e

    # An empty YAML file loads as None
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f'{path} must contain a mapping at the top level')
    return data


def get_config(config_file=None, configure_logging=True):
    """Load configuration and set up logging

    Args:
        config_file: Path to a JSON or YAML config file; None uses defaults
        configure_logging: Configure the root logger from the 'logging' section

    Returns:
        Tuple of (conf, device) where:
            conf: Full configuration dictionary
            device: DeviceConfig built from the 'device' section

    Raises:
        ConfigError: If the file is missing, malformed or names an
                     unknown log level
    """
    conf = load_config_file(config_file) if config_file else {}

    if configure_logging:
        logging_config = conf.get('logging', {})
        # Parse log level from string to logging constant
        level_name = str(logging_config.get('level', 'info')).upper()
        log_level = getattr(logging, level_name, None)
        if not isinstance(log_level, int):
            raise ConfigError(f'Unknown log level: {level_name}')

        # Configure root logger with basic settings
        logging.basicConfig(level=log_level, format=LOG_FORMAT)

        # Optionally mirror everything to a log file as well
        log_file = logging_config.get('file')
        if log_file:
            configure_logger(logging.getLogger(), log_file=log_file,
                             log_level=log_level)

    # Return full config and the device section as a DeviceConfig
    return conf, DeviceConfig.from_dict(conf.get('device'))
