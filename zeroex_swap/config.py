"""
Configuration management for the swap executor

Loads settings from environment variables and .env file.
Includes logging configuration with file output.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List

from dotenv import load_dotenv


def _load_env_file():
    """Load .env file from project root"""
    current = Path(__file__).parent.parent  # zeroex_swap package parent
    env_file = current / ".env"

    if env_file.exists():
        load_dotenv(env_file)


# Load .env on module import
_load_env_file()


def _get_env(key: str, default: Optional[str] = "") -> Optional[str]:
    """Get environment variable with default"""
    value = os.getenv(key)
    if value is None:
        return default
    return value


def _get_env_float(key: str, default: float) -> float:
    """Get environment variable as float"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid float value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_int(key: str, default: Optional[int]) -> Optional[int]:
    """Get environment variable as int"""
    value = os.getenv(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid int value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as bool"""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


@dataclass
class ChainConfig:
    """EVM RPC configuration"""
    rpc_url: str = field(default_factory=lambda: _get_env("EVM_RPC_URL", ""))
    # Detected from the RPC endpoint when unset
    chain_id: Optional[int] = field(default_factory=lambda: _get_env_int("EVM_CHAIN_ID", None))
    rpc_timeout: float = field(default_factory=lambda: _get_env_float("EVM_RPC_TIMEOUT", 30.0))
    receipt_timeout: float = field(default_factory=lambda: _get_env_float("EVM_RECEIPT_TIMEOUT", 120.0))


@dataclass
class SignerConfig:
    """Local private key signing"""
    private_key: str = field(default_factory=lambda: _get_env("EVM_PRIVATE_KEY", ""))


@dataclass
class ZeroExConfig:
    """0x Swap API configuration"""
    base_url: str = field(default_factory=lambda: _get_env("ZEROEX_BASE_URL", "https://api.0x.org"))
    api_key: Optional[str] = field(default_factory=lambda: _get_env("ZEROEX_API_KEY", None))
    api_version: str = field(default_factory=lambda: _get_env("ZEROEX_API_VERSION", "v2"))
    timeout: float = field(default_factory=lambda: _get_env_float("ZEROEX_TIMEOUT", 30.0))


@dataclass
class SwapConfig:
    """Default swap parameters"""
    # Token symbol (see types.evm_tokens) or 0x address
    sell_token: str = field(default_factory=lambda: _get_env("SWAP_SELL_TOKEN", "WETH"))
    buy_token: str = field(default_factory=lambda: _get_env("SWAP_BUY_TOKEN", "USDC"))
    affiliate_fee_bps: int = field(default_factory=lambda: _get_env_int("SWAP_AFFILIATE_FEE_BPS", 0))
    surplus_collection: bool = field(default_factory=lambda: _get_env_bool("SWAP_SURPLUS_COLLECTION", True))
    wait_confirmation: bool = field(default_factory=lambda: _get_env_bool("SWAP_WAIT_CONFIRMATION", True))


def _get_default_log_path() -> str:
    """Get default log file path under zeroex_swap/log/ with UTC timestamp"""
    from datetime import datetime, timezone
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    log_dir = Path(__file__).parent / "log"
    return str(log_dir / f"zeroex_swap_{timestamp}.log")


@dataclass
class LoggingConfig:
    """
    Logging configuration with file output.

    Environment variables:
        LOG_FILE: Path to log file (empty disables file output)
        LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
        LOG_FORMAT: Custom log format string; %(swap_id)s is the swap run ID
        LOG_CONSOLE: Enable console output (default: true)
        LOG_MAX_BYTES: Max log file size before rotation (default: 10MB)
        LOG_BACKUP_COUNT: Number of backup files to keep (default: 5)
    """
    log_file: str = field(default_factory=lambda: _get_env("LOG_FILE", _get_default_log_path()))
    log_level: str = field(default_factory=lambda: _get_env("LOG_LEVEL", "INFO"))
    log_format: str = field(default_factory=lambda: _get_env(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - [%(swap_id)s] %(message)s"
    ))
    console_output: bool = field(default_factory=lambda: _get_env_bool("LOG_CONSOLE", True))
    max_bytes: int = field(default_factory=lambda: _get_env_int("LOG_MAX_BYTES", 10 * 1024 * 1024))  # 10MB
    backup_count: int = field(default_factory=lambda: _get_env_int("LOG_BACKUP_COUNT", 5))

    @property
    def level(self) -> int:
        """Get numeric log level"""
        return getattr(logging, self.log_level.upper(), logging.INFO)


@dataclass
class Config:
    """
    Main configuration container

    Loads all settings from environment variables and .env file.

    Usage:
        from zeroex_swap.config import config

        print(config.chain.rpc_url)
        print(config.zeroex.base_url)
    """
    chain: ChainConfig = field(default_factory=ChainConfig)
    signer: SignerConfig = field(default_factory=SignerConfig)
    zeroex: ZeroExConfig = field(default_factory=ZeroExConfig)
    swap: SwapConfig = field(default_factory=SwapConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def reload(cls) -> "Config":
        """Reload configuration from environment"""
        _load_env_file()
        return cls()


# Global config instance
config = Config()


def get_config() -> Config:
    """Get global configuration instance"""
    return config


def reload_config() -> Config:
    """Reload and return new configuration"""
    global config
    config = Config.reload()
    return config


def setup_logging(
    log_config: Optional[LoggingConfig] = None,
    logger_name: str = "zeroex_swap",
) -> logging.Logger:
    """
    Route executor log records to the console and/or a rotating file.

    Every installed handler stamps records with the active swap run ID, so
    the default format prints ``[swap_1a2b3c4d5e6f]`` on each line logged
    during a pipeline run and ``[-]`` outside one. Calling this again
    replaces the handlers of the previous call.

    Args:
        log_config: Logging configuration (uses global config if None)
        logger_name: Logger tree to configure (default: zeroex_swap)

    Returns:
        The configured logger

    Example:
        from zeroex_swap.config import LoggingConfig, setup_logging
        setup_logging(LoggingConfig(log_file="", log_level="DEBUG"))
    """
    from logging.handlers import RotatingFileHandler
    from .infra.swap_run import SwapIdFilter

    if log_config is None:
        log_config = config.logging

    logger = logging.getLogger(logger_name)
    logger.setLevel(log_config.level)

    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    handlers: List[logging.Handler] = []
    if log_config.log_file:
        log_path = Path(log_config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_path,
            maxBytes=log_config.max_bytes,
            backupCount=log_config.backup_count,
            encoding="utf-8",
        ))
    if log_config.console_output:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(log_config.log_format)
    for handler in handlers:
        handler.setLevel(log_config.level)
        handler.setFormatter(formatter)
        handler.addFilter(SwapIdFilter())
        logger.addHandler(handler)

    if log_config.log_file:
        logger.info(f"Swap executor logging to {log_config.log_file} at {log_config.log_level}")

    return logger


def enable_file_logging(
    log_file: Optional[str] = None,
    level: str = "INFO",
    console: bool = True,
) -> logging.Logger:
    """
    Log swap runs to a file with everything else taken from LoggingConfig defaults.

    Args:
        log_file: Path to log file (defaults to zeroex_swap/log/zeroex_swap_<ts>.log)
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        console: Also output to console
    """
    log_config = LoggingConfig(
        log_file=log_file if log_file is not None else config.logging.log_file,
        log_level=level,
        console_output=console,
    )
    return setup_logging(log_config)
