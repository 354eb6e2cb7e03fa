import os
from dataclasses import dataclass, field, fields
from typing import List, Optional

import yaml

DEFAULT_CONFIG_PATH = '/etc/wpaswitch/config.yaml'


@dataclass
class Settings:
    """Runtime settings; every key may be overridden from the YAML file."""
    profile_dir: str = '/etc/netctl'
    ctrl_dir: Optional[str] = '/run/wpa_supplicant'
    wpa_cli: str = 'wpa_cli'
    command_timeout: int = 5
    poll_interval: float = 0.5
    default_timeout: int = 15
    service_prefix: str = 'wpaswitch-auto@'
    interfaces: List[str] = field(default_factory=list)
    log_level: str = 'WARNING'
    log_file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'Settings':
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in (data or {}).items() if k in known}
        if isinstance(values.get('interfaces'), str):
            values['interfaces'] = values['interfaces'].split()
        return cls(**values)


def config_path(path: str | None = None) -> str:
    cfg_path = path or os.environ.get(
        'WPASWITCH_CONFIG') or DEFAULT_CONFIG_PATH
    return os.path.abspath(os.path.expanduser(cfg_path))


def load_config(path: str | None = None) -> dict:
    cfg_path = config_path(path)
    if not os.path.exists(cfg_path):
        return {}
    with open(cfg_path, 'r', encoding='utf-8') as fh:
        return yaml.safe_load(fh) or {}


def load_settings(path: str | None = None) -> Settings:
    return Settings.from_dict(load_config(path))
