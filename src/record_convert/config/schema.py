"""Configuration models for record conversion."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..csv2json.models import ConvertOptions
from ..csv2json.remap import FieldRemapConfig
from ..domain.types import OutputFormat


@dataclass(slots=True)
class ConvertDefaults:
    """Defaults applied to every converted file."""

    json_target: OutputFormat = OutputFormat.CSV
    output_suffix: str = ""
    context_window: int = 100
    encoding: str = "utf-8"


@dataclass(slots=True)
class AppConfig:
    """Top-level configuration."""

    defaults: ConvertDefaults = field(default_factory=ConvertDefaults)
    output_directory: Optional[Path] = None
    columns: Optional[List[str]] = None
    remap: FieldRemapConfig = field(default_factory=FieldRemapConfig)

    @classmethod
    def default(cls) -> AppConfig:
        return cls()

    def convert_options(
        self,
        json_target: Optional[OutputFormat] = None,
        output_suffix: Optional[str] = None,
        output_dir: Optional[Path] = None,
    ) -> ConvertOptions:
        """Build conversion options; explicit arguments win over config values."""

        return ConvertOptions(
            json_target=json_target or self.defaults.json_target,
            output_suffix=self.defaults.output_suffix if output_suffix is None else output_suffix,
            output_dir=output_dir or self.output_directory,
            columns=list(self.columns) if self.columns else None,
            context_window=self.defaults.context_window,
            encoding=self.defaults.encoding,
        )


__all__ = ["AppConfig", "ConvertDefaults"]
