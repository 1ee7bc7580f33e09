from pathlib import Path
from typing import Any, Dict, Optional

from doc_color_decomposer.config import DecomposerConfig, DiagnosticsConfig
from doc_color_decomposer.utils.file_io import read_json, write_json


class ConfigManager:
    """
    Dotted-key JSON configuration store.

    Layout:
        {"decomposer": {...DecomposerConfig fields...},
         "diagnostics": {...DiagnosticsConfig fields...}}
    """

    def __init__(self, path: Optional[Path] = None, data: Optional[Dict] = None):
        self.config_path = Path(path) if path else None
        self._config = {}
        if data:
            self._config = data
        elif self.config_path and self.config_path.exists():
            self._config = read_json(self.config_path)

    def get(self, key: str, default: Any = None) -> Any:
        keys = key.split(".")
        val = self._config
        try:
            for k in keys:
                val = val[k]
            return val
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any):
        keys = key.split(".")
        val = self._config
        for k in keys[:-1]:
            val = val.setdefault(k, {})
        val[keys[-1]] = value

    def save(self, path: Optional[Path] = None):
        target = path or self.config_path
        if target:
            write_json(self._config, target)

    def decomposer_config(self) -> DecomposerConfig:
        return DecomposerConfig.from_dict(self.get("decomposer", {}) or {})

    def diagnostics_config(self) -> DiagnosticsConfig:
        return DiagnosticsConfig.from_dict(self.get("diagnostics", {}) or {})
