"""Configuration management for coop-reports."""

from dataclasses import dataclass, field
from pathlib import Path

from coop_reports.exceptions import ConfigurationError


@dataclass
class AgingConfig:
    """Delinquency aging bucket edges.

    Each edge closes a bucket: ``(30, 60, 90)`` yields ``1-30``, ``31-60``,
    ``61-90`` and an open-ended ``90+`` bucket.
    """

    edges: tuple[int, ...] = (30, 60, 90)

    def __post_init__(self) -> None:
        self.edges = tuple(self.edges)
        if not self.edges:
            raise ConfigurationError("Aging edges must not be empty")
        previous = 0
        for edge in self.edges:
            if not isinstance(edge, int) or edge <= previous:
                raise ConfigurationError(
                    f"Aging edges must be strictly increasing positive integers: {self.edges}"
                )
            previous = edge


@dataclass
class ActivityConfig:
    """Payment activity window configuration."""

    window_days: int = 30

    def __post_init__(self) -> None:
        if self.window_days <= 0:
            raise ConfigurationError(f"Activity window must be positive: {self.window_days}")


@dataclass
class ExportConfig:
    """CSV export configuration."""

    output_dir: Path = field(default_factory=lambda: Path("output"))
    locale: str = "es_EC"
    decimal_places: int = 2
    include_bom: bool = True


@dataclass
class SourceConfig:
    """Data source configuration."""

    snapshot_path: Path | None = None


@dataclass
class ReportConfig:
    """Main configuration for coop-reports."""

    aging: AgingConfig = field(default_factory=AgingConfig)
    activity: ActivityConfig = field(default_factory=ActivityConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ReportConfig":
        """Create config from environment variables."""
        import os

        try:
            edges_str = os.getenv("AGING_EDGES")
            aging = (
                AgingConfig(edges=tuple(int(e) for e in edges_str.split(",") if e.strip()))
                if edges_str
                else AgingConfig()
            )
            activity = ActivityConfig(window_days=int(os.getenv("ACTIVITY_WINDOW_DAYS", "30")))
            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except ValueError as e:
            raise ConfigurationError(f"Invalid report configuration in environment: {e}") from e

        export = ExportConfig(
            output_dir=Path(os.getenv("REPORT_OUTPUT_DIR", "output")),
            locale=os.getenv("REPORT_LOCALE", "es_EC"),
        )

        snapshot_path = os.getenv("SNAPSHOT_PATH")
        source = SourceConfig(snapshot_path=Path(snapshot_path) if snapshot_path else None)

        return cls(
            aging=aging,
            activity=activity,
            export=export,
            source=source,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
