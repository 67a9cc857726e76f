"""Configuration management."""

import copy
import json
import yaml
from pathlib import Path
from typing import Dict, Any, Optional


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML or JSON file."""
    path = Path(config_path)
    
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    
    with open(path, 'r') as f:
        if path.suffix.lower() in ['.yaml', '.yml']:
            return yaml.safe_load(f) or {}
        elif path.suffix.lower() == '.json':
            return json.load(f)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        'throughput': {
            'window_days': 30,
            'floor_per_day': 0.25,  # 1 item every 4 days
            'bucket_weeks': 6,
        },
        'queue': {
            'busy_weeks': 8,
            'overloaded_weeks': 12,
        },
        'variance': {
            'critical_days': 5,
        },
        'alerts': {
            'objective_critical_days': 7,
            'project_critical_days': 14,
        },
    }


def merge_config(overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Deep-merge a partial configuration over the defaults."""
    merged = get_default_config()
    
    def _merge(base: Dict[str, Any], extra: Dict[str, Any]):
        for key, value in extra.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                _merge(base[key], value)
            else:
                base[key] = copy.deepcopy(value)
    
    if overrides:
        _merge(merged, overrides)
    return merged
