"""Configuration management for the demos."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass
class DemoConfig:
    """Demo configuration parameters."""

    delay_seconds: float = 0.5
    item_count: int = 3
    prefix: str = "Lazy"
    seed: int = 42
    verbose: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must be non-negative")
        if self.item_count <= 0:
            raise ValueError("item_count must be positive")
        if not self.prefix:
            raise ValueError("prefix must not be empty")

    @classmethod
    def default(cls) -> "DemoConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def from_env(cls) -> "DemoConfig":
        """Load demo configuration from environment variables."""
        return cls(
            delay_seconds=float(os.getenv("LAZY_DEMO_DELAY_SECONDS", "0.5")),
            item_count=int(os.getenv("LAZY_DEMO_ITEM_COUNT", "3")),
            prefix=os.getenv("LAZY_DEMO_PREFIX", "Lazy"),
            seed=int(os.getenv("LAZY_DEMO_SEED", "42")),
            verbose=os.getenv("LAZY_DEMO_VERBOSE", "false").lower() == "true",
        )


def get_demo_config() -> DemoConfig:
    """Get demo configuration."""
    return DemoConfig.from_env()
