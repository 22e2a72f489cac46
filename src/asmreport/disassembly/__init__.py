"""
Disassembly data models.
"""

from asmreport.disassembly.schema import (
    DisassemblyResult,
    Instruction,
    InstructionKind,
    Map,
    Method,
    load_result_from_json,
    load_result_from_yaml,
    save_result_to_json,
)

__all__ = [
    'DisassemblyResult',
    'Instruction',
    'InstructionKind',
    'Map',
    'Method',
    'load_result_from_json',
    'load_result_from_yaml',
    'save_result_to_json',
]
