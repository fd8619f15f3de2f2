from __future__ import annotations
import os
import yaml
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from .metrics.units import BINARY, MEMORY_FORMATS

DEFAULT_CONFIG_FILE = os.path.join('~', '.config', 'kram', 'config.yaml')
DEFAULT_KUBECONFIG = os.path.join('~', '.kube', 'config')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARN', 'ERROR')
LOG_FORMATS = ('json', 'text')

@dataclass
class ClusterCredentials:
    host: str
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    ca_file: Optional[str] = None
    verify_ssl: bool = True

@dataclass
class DisplayConfig:
    memory_format: str = BINARY
    alternate_rows: bool = True
    progress: bool = True

@dataclass
class LoggingConfig:
    level: str = 'WARN'
    format: str = 'text'

@dataclass
class AppConfig:
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    credentials: Optional[ClusterCredentials] = None
    exclude_namespaces: List[str] = field(default_factory=list)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def kubeconfig_path(self) -> str:
        return os.path.expanduser(self.kubeconfig or DEFAULT_KUBECONFIG)


def _section(value: Any, name: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f'{name} must be a mapping, got {type(value).__name__}')
    return value


def _patterns(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ValueError(f'exclude_namespaces must be a list, got {type(value).__name__}')
    return [str(v) for v in value]


def _validate(cfg: AppConfig) -> AppConfig:
    if cfg.display.memory_format not in MEMORY_FORMATS:
        raise ValueError(f'Unknown memory_format: {cfg.display.memory_format}. Available: {", ".join(MEMORY_FORMATS)}')
    if cfg.logging.level not in LOG_LEVELS:
        raise ValueError(f'Unknown logging level: {cfg.logging.level}')
    if cfg.logging.format not in LOG_FORMATS:
        raise ValueError(f'Unknown logging format: {cfg.logging.format}')
    if cfg.credentials and not cfg.credentials.host:
        raise ValueError('credentials must include host')
    return cfg


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load the YAML config file.

    With no path, the per-user default file is read when present and the
    built-in defaults are used otherwise. An explicit path must exist.
    """
    if path is None:
        path = os.path.expanduser(DEFAULT_CONFIG_FILE)
        if not os.path.exists(path):
            return AppConfig()
    elif not os.path.exists(path):
        raise FileNotFoundError(f'Config file not found: {path}')
    with open(path, 'r', encoding='utf-8') as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f'Invalid config file {path}: {e}') from e
    raw = _section(raw, 'config file')
    if raw.get('kubeconfig') and raw.get('credentials'):
        raise ValueError('Config cannot specify both kubeconfig and credentials')
    credentials = None
    creds_data = _section(raw.get('credentials'), 'credentials')
    if creds_data:
        credentials = ClusterCredentials(
            host=creds_data.get('host', ''),
            token=creds_data.get('token'),
            username=creds_data.get('username'),
            password=creds_data.get('password'),
            ca_file=creds_data.get('ca_file'),
            verify_ssl=creds_data.get('verify_ssl', True)
        )
    display_raw = _section(raw.get('display'), 'display')
    display = DisplayConfig(
        memory_format=str(display_raw.get('memory_format', BINARY)).lower(),
        alternate_rows=display_raw.get('alternate_rows', True),
        progress=display_raw.get('progress', True)
    )
    logging_raw = _section(raw.get('logging'), 'logging')
    logging_cfg = LoggingConfig(
        level=str(logging_raw.get('level', 'WARN')).upper().replace('WARNING', 'WARN'),
        format=str(logging_raw.get('format', 'text')).lower()
    )
    return _validate(AppConfig(
        kubeconfig=raw.get('kubeconfig'),
        context=raw.get('context'),
        credentials=credentials,
        exclude_namespaces=_patterns(raw.get('exclude_namespaces')),
        display=display,
        logging=logging_cfg
    ))
