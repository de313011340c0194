"""Settings validation for interval backup."""

from typing import Dict, Any

from ..core.models import Interval


class ConfigValidator:
    """Validates the persisted backup settings."""
    
    REQUIRED_FIELDS = ['source_dir', 'backup_dir', 'interval']
    LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    
    def validate(self, config: Dict[str, Any]) -> None:
        """Validate settings data.
        
        Args:
            config: Settings dictionary to validate.
            
        Raises:
            ValueError: If the settings are invalid.
        """
        if not isinstance(config, dict):
            raise ValueError("Settings must be a mapping")
        
        self._validate_structure(config)
        self._validate_paths(config)
        self._validate_interval(config['interval'])
        
        if config.get('language') is not None and not isinstance(config['language'], str):
            raise ValueError(f"Language must be a string, got {config['language']!r}")
        
        if 'logging' in config:
            self._validate_logging_config(config['logging'])
    
    def _validate_structure(self, config: Dict[str, Any]) -> None:
        missing_fields = [field for field in self.REQUIRED_FIELDS if field not in config]
        if missing_fields:
            raise ValueError(f"Missing required settings: {missing_fields}")
    
    def _validate_paths(self, config: Dict[str, Any]) -> None:
        for field in ('source_dir', 'backup_dir'):
            value = config[field]
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Setting '{field}' cannot be empty")
    
    def _validate_interval(self, interval: Any) -> None:
        try:
            Interval.from_value(interval)
        except ValueError:
            choices = ", ".join(i.name for i in Interval)
            raise ValueError(f"Invalid interval {interval!r}, expected one of: {choices}")
    
    def _validate_logging_config(self, logging_config: Any) -> None:
        """Validate the optional logging section.
        
        Raises:
            ValueError: If the logging section is invalid.
        """
        if not isinstance(logging_config, dict):
            raise ValueError("Logging settings must be a mapping")
        
        level = logging_config.get('level', 'INFO')
        if not isinstance(level, str) or level.upper() not in self.LOG_LEVELS:
            raise ValueError(f"Invalid logging level: {level}")
