"""
Disassembly Exporters

Turns captured disassembly into HTML reports.
"""

from asmreport.exporters.config import DuplicateNamePolicy, ExportConfig, load_config_from_yaml
from asmreport.exporters.formatting import build_cross_reference, format_method_address, get_short_name
from asmreport.exporters.raw_disassembly import RawDisassemblyExporter, render_disassembly, render_to_string

__all__ = [
    'DuplicateNamePolicy',
    'ExportConfig',
    'load_config_from_yaml',
    'build_cross_reference',
    'format_method_address',
    'get_short_name',
    'RawDisassemblyExporter',
    'render_disassembly',
    'render_to_string',
]
