"""Settings persistence for the interval backup tool."""

import os
import json
import locale
import yaml
from typing import Dict, Any, Optional

from .config_validator import ConfigValidator
from ..core.models import BackupConfig, Interval


class ConfigManager:
    """Loads, validates and saves the backup settings document."""
    
    SETTINGS_DIR = os.path.expanduser("~/.interval-backup")
    
    DEFAULT_CONFIG_LOCATIONS = [
        "settings.json",
        "settings.yaml",
        os.path.join(SETTINGS_DIR, "settings.json"),
        os.path.join(SETTINGS_DIR, "settings.yaml"),
    ]
    
    def __init__(self, config_path: Optional[str] = None):
        """Initialize settings manager.
        
        Args:
            config_path: Optional path to the settings file. If not provided,
                        default locations are searched and the user settings
                        file is used for saving.
        """
        self.config_path = config_path
        self.config_data: Dict[str, Any] = {}
        self.validator = ConfigValidator()
        
    def load_config(self) -> Dict[str, Any]:
        """Load settings from file, or defaults when none is stored yet.
        
        Returns:
            Dictionary containing settings data.
            
        Raises:
            FileNotFoundError: If an explicit settings path does not exist.
            ValueError: If the settings file is invalid.
        """
        config_file = self._find_config_file()
        
        if config_file is None:
            self.config_data = {}
        else:
            self.config_path = config_file
            self.config_data = self._read(config_file)
        
        self._set_defaults()
        self.validator.validate(self.config_data)
        
        return self.config_data
    
    def save_config(self) -> str:
        """Write the current settings, creating the parent directory.
        
        Returns:
            Path the settings were written to.
        """
        target = self.config_path or os.path.join(self.SETTINGS_DIR, "settings.json")
        parent = os.path.dirname(os.path.abspath(target))
        os.makedirs(parent, exist_ok=True)
        
        with open(target, 'w', encoding='utf-8') as f:
            if self._is_json(target):
                json.dump(self.config_data, f, indent=2)
            else:
                yaml.safe_dump(self.config_data, f, default_flow_style=False, sort_keys=False)
        
        self.config_path = target
        return target
    
    def update_settings(self, **fields: Any) -> Dict[str, Any]:
        """Apply changed settings, validate them and save immediately.
        
        Fields passed as None are left unchanged.
        """
        updated = dict(self.config_data)
        for key, value in fields.items():
            if value is not None:
                updated[key] = value
        
        if 'interval' in updated:
            updated['interval'] = Interval.from_value(updated['interval']).name
        
        self.validator.validate(updated)
        self.config_data = updated
        self.save_config()
        return self.config_data
    
    def get_backup_config(self) -> BackupConfig:
        """Build the run configuration from the current settings."""
        return BackupConfig(
            source_dir=os.path.expanduser(self.config_data['source_dir']),
            backup_dir=os.path.expanduser(self.config_data['backup_dir']),
            interval=Interval.from_value(self.config_data['interval'])
        )
    
    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration.
        
        Returns:
            Logging configuration dictionary.
        """
        return self.config_data.get('logging', {})
    
    def _find_config_file(self) -> Optional[str]:
        if self.config_path:
            if os.path.exists(self.config_path):
                return self.config_path
            raise FileNotFoundError(f"Settings file not found: {self.config_path}")
        
        for location in self.DEFAULT_CONFIG_LOCATIONS:
            if os.path.exists(location):
                return location
        
        return None
    
    def _read(self, config_file: str) -> Dict[str, Any]:
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if self._is_json(config_file):
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"Invalid settings file {config_file}: {e}")
        except OSError as e:
            raise ValueError(f"Error reading settings file {config_file}: {e}")
        
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {config_file} must contain a mapping")
        return data
    
    def _set_defaults(self):
        """Fill in the settings a fresh installation starts with."""
        documents = os.path.join(os.path.expanduser("~"), "Documents")
        defaults = {
            'source_dir': documents,
            'backup_dir': os.path.join(documents, "DataBackup"),
            'interval': Interval.TEN.name,
            'language': self._default_language(),
        }
        
        for key, value in defaults.items():
            if key not in self.config_data:
                self.config_data[key] = value
        
        logging_section = self.config_data.setdefault('logging', {})
        if isinstance(logging_section, dict):
            logging_section.setdefault('level', 'INFO')
            logging_section.setdefault('file', None)
    
    @staticmethod
    def _default_language() -> str:
        try:
            language, _ = locale.getlocale()
        except ValueError:
            language = None
        return language or "en"
    
    @staticmethod
    def _is_json(path: str) -> bool:
        return path.lower().endswith('.json')
