"""
Export Configuration

Settings for the HTML disassembly exporter, loadable from YAML.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union
import yaml


class DuplicateNamePolicy(Enum):
    """What to do when two renderable methods share a name"""
    LAST = "last"      # Later method wins the cross-reference
    FIRST = "first"    # Earlier method wins the cross-reference
    REJECT = "reject"  # Raise ValueError


@dataclass
class ExportConfig:
    """Configuration for disassembly export"""
    escape_html: bool = True           # Escape names, comments and instruction text
    atomic_write: bool = True          # Write to a temp file, then replace the report
    duplicate_names: DuplicateNamePolicy = DuplicateNamePolicy.LAST
    file_suffix: str = "-asm.raw.html"
    encoding: str = "utf-8"

    def __post_init__(self):
        if not isinstance(self.duplicate_names, DuplicateNamePolicy):
            try:
                self.duplicate_names = DuplicateNamePolicy(str(self.duplicate_names).lower())
            except ValueError:
                choices = ", ".join(p.value for p in DuplicateNamePolicy)
                raise ValueError(
                    f"Invalid duplicate_names policy {self.duplicate_names!r} (expected one of: {choices})"
                ) from None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'escape_html': self.escape_html,
            'atomic_write': self.atomic_write,
            'duplicate_names': self.duplicate_names.value,
            'file_suffix': self.file_suffix,
            'encoding': self.encoding,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExportConfig':
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def load_config_from_yaml(path: Union[str, Path]) -> ExportConfig:
    """Load an export config from a YAML file"""
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping of export settings")
    return ExportConfig.from_dict(data)


def save_config_to_yaml(config: ExportConfig, path: Union[str, Path]) -> None:
    """Save an export config to a YAML file"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
