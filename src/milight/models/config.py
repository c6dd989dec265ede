"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field

from milight.utils.persistence import PydanticPersistence

DEFAULT_PORT = 8899
DEFAULT_CONFIG_PATH = Path.home() / ".milight" / "config.json"


class MilightConfig(BaseModel):
    """Connection and timing settings for one WiFi box."""

    host: str = Field(
        default="192.168.1.100",
        min_length=1,
        description="IP address or host name of the WiFi box",
    )
    port: int = Field(
        default=DEFAULT_PORT, ge=1, le=65535, description="UDP port of the WiFi box"
    )

    # Pacing
    min_packet_delay: float = Field(
        default=0.1,
        gt=0,
        description=(
            "Minimum pause between two packets of one command sequence (seconds). "
            "The box drops commands that arrive faster than this."
        ),
    )
    timer_cadence: float = Field(
        default=5.0, gt=0, description="Default time between two animation steps (seconds)"
    )

    # State tracking
    history_size: int = Field(
        default=100, ge=1, description="Maximum number of light states remembered per group"
    )

    @property
    def debounce_window(self) -> float:
        """Events closer together than this belong to one logical change."""
        return 3 * self.min_packet_delay

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "MilightConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses ~/.milight/config.json.

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        return PydanticPersistence.load_json_or_default(path or DEFAULT_CONFIG_PATH, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        PydanticPersistence.save_json(self, path or DEFAULT_CONFIG_PATH)
