"""Centralized configuration for fzf-import using Pydantic Settings."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Fixed ripgrep flags: bare matched lines, no file/line decoration, smart case.
RIPGREP_FLAGS: tuple[str, ...] = (
    "--column",
    "--no-filename",
    "-n",
    "--no-heading",
    "--color=never",
    "--smart-case",
    "--no-column",
    "--no-line-number",
)

SEARCH_EXTENSIONS: tuple[str, ...] = ("ts", "tsx", "js", "jsx")
SEARCH_GLOB = "*.{" + ",".join(SEARCH_EXTENSIONS) + "}"


class Settings(BaseSettings):
    """Typed configuration loaded from ``FZF_IMPORT_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FZF_IMPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # External programs
    rg_path: str = Field(default="rg", description="ripgrep executable used for candidate search")
    fzf_path: str = Field(default="fzf", description="fzf executable used for interactive selection")

    # Pipeline tuning
    batch_size: int = Field(default=20, ge=1, description="Candidates ranked together before flushing to fzf")
    read_chunk_size: int = Field(default=65536, ge=1, description="Bytes read from ripgrep per chunk")
    terminate_grace_seconds: float = Field(
        default=1.0, gt=0, description="Seconds to wait after SIGTERM before killing a subprocess"
    )

    # Selector display
    fzf_height: str = Field(default="40%", description="Value passed to fzf --height")
    fzf_layout: str = Field(default="reverse", description="Value passed to fzf --layout")
    fzf_border: bool = Field(default=True, description="Draw a border around the fzf window")
    select_single_match: bool = Field(
        default=True, description="Accept a lone keyword match without prompting (fzf --select-1)"
    )

    # Project discovery
    project_markers: str = Field(
        default="package.json", description="Comma-separated files marking a project root"
    )

    # Logging
    log_level: str = Field(default="warning", description="Logging level")
    log_json: bool = Field(default=False, description="Emit structured JSON logs on stderr")

    @field_validator("rg_path", "fzf_path")
    @classmethod
    def _require_executable(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("executable path must not be empty")
        return value

    def get_project_markers(self) -> list[str]:
        """Get list of project root marker filenames."""
        return [marker.strip() for marker in self.project_markers.split(",") if marker.strip()]

    def build_search_command(self, pattern: str, *, glob: str = SEARCH_GLOB) -> list[str]:
        """Build the ripgrep argv for ``pattern``; run with cwd at the project root."""
        return [
            self.rg_path,
            pattern,
            *RIPGREP_FLAGS,
            "--glob",
            glob,
            "--type-not",
            "lock",
            ".",
        ]

    def build_selector_command(self, prompt: str, *, keyword_mode: bool) -> list[str]:
        """Build the fzf argv.

        ``--exit-0`` lets fzf return immediately when ripgrep found nothing;
        ``--select-1`` is only used when ranking for a keyword.
        """
        cmd = [
            self.fzf_path,
            "--prompt",
            f"{prompt}> ",
            "--height",
            self.fzf_height,
            "--layout",
            self.fzf_layout,
        ]
        if self.fzf_border:
            cmd.append("--border")
        if keyword_mode and self.select_single_match:
            cmd.append("--select-1")
        cmd.append("--exit-0")
        return cmd


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()
