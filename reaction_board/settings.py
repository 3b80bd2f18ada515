"""Leaderboard settings.

Values are read from ``REACTION_BOARD_*`` environment variables and an
optional ``.env`` file.

Example:
    from reaction_board.settings import BoardSettings
    settings = BoardSettings()
    print(settings.entries_path)
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BoardSettings(BaseSettings):
    """Typed storage and allocation settings."""

    data_dir: Path = Field(default=Path("data"))
    entries_filename: str = Field(default="leaderboard.txt", min_length=1)
    reserved_filename: str = Field(default="reserved_codes.txt", min_length=1)

    # Upper bound on random draws before giving up on a free code
    max_allocation_attempts: int = Field(default=1000, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="REACTION_BOARD_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def entries_path(self) -> Path:
        return self.data_dir / self.entries_filename

    @property
    def reserved_path(self) -> Path:
        return self.data_dir / self.reserved_filename
