"""Configuration management"""

from dataclasses import dataclass
from typing import Optional, Dict, Any
import yaml

from .errors import ConfigurationError


@dataclass
class MatcherConfig:
    """Matcher configuration with defaults"""

    # Grid
    GRID_WIDTH: int = 2000
    GRID_HEIGHT: int = 2000
    BUCKET_SIZE: int = 32

    # Strategy: "linear", "ring" or "bucket"
    STRATEGY: str = "bucket"

    # Workload
    AGENT_COUNT: int = 100000
    QUERY_COUNT: int = 2000
    SEED: Optional[int] = 42

    # Events
    EVENT_LOG_ENABLED: bool = False
    EVENT_LOG_DIR: str = "logs/events"
    EVENT_BUFFER_SIZE: int = 10000
    EVENT_LOG_COMPRESS: bool = True

    @classmethod
    def from_yaml(cls, path: str) -> 'MatcherConfig':
        """Load configuration from YAML file"""
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        config = cls()

        # Map YAML structure to flat config
        if 'grid' in data:
            g = data['grid']
            config.GRID_WIDTH = g.get('width', config.GRID_WIDTH)
            config.GRID_HEIGHT = g.get('height', config.GRID_HEIGHT)
            config.BUCKET_SIZE = g.get('bucket_size', config.BUCKET_SIZE)

        if 'matcher' in data:
            config.STRATEGY = data['matcher'].get('strategy', config.STRATEGY)

        if 'workload' in data:
            w = data['workload']
            config.AGENT_COUNT = w.get('agents', config.AGENT_COUNT)
            config.QUERY_COUNT = w.get('queries', config.QUERY_COUNT)
            config.SEED = w.get('seed', config.SEED)

        if 'events' in data:
            e = data['events']
            config.EVENT_LOG_ENABLED = e.get('enabled', config.EVENT_LOG_ENABLED)
            config.EVENT_LOG_DIR = e.get('dir', config.EVENT_LOG_DIR)
            config.EVENT_BUFFER_SIZE = e.get('buffer_size', config.EVENT_BUFFER_SIZE)
            config.EVENT_LOG_COMPRESS = e.get('compress', config.EVENT_LOG_COMPRESS)

        return config

    def validate(self) -> 'MatcherConfig':
        """Raise ConfigurationError if any value cannot build a matcher"""
        from .spatial.matchers import MatcherStrategy

        if self.GRID_WIDTH <= 0 or self.GRID_HEIGHT <= 0:
            raise ConfigurationError(
                f"Grid dimensions must be positive, got {self.GRID_WIDTH}x{self.GRID_HEIGHT}"
            )
        if self.BUCKET_SIZE <= 0:
            raise ConfigurationError(f"Bucket size must be positive, got {self.BUCKET_SIZE}")
        try:
            MatcherStrategy(self.STRATEGY)
        except ValueError:
            raise ConfigurationError(f"Unknown strategy: {self.STRATEGY!r}") from None
        if self.AGENT_COUNT < 0 or self.QUERY_COUNT < 0:
            raise ConfigurationError("Agent and query counts must be non-negative")
        if self.AGENT_COUNT > self.GRID_WIDTH * self.GRID_HEIGHT:
            raise ConfigurationError(
                f"{self.AGENT_COUNT} agents do not fit on a "
                f"{self.GRID_WIDTH}x{self.GRID_HEIGHT} grid"
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {k: v for k, v in self.__dict__.items() if not k.startswith('_')}


# Global config instance
_config: Optional[MatcherConfig] = None


def get_config() -> MatcherConfig:
    """Get global configuration"""
    global _config
    if _config is None:
        _config = MatcherConfig()
    return _config


def load_config(path: str) -> MatcherConfig:
    """Load and set global configuration"""
    global _config
    _config = MatcherConfig.from_yaml(path)
    return _config


def set_config(config: MatcherConfig) -> None:
    """Set global configuration"""
    global _config
    _config = config
