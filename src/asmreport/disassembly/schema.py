"""
Disassembly Result Schema

Data models for the disassembly captured for one benchmarked target.

A DisassemblyResult owns its methods, each method owns its maps, and each map
owns its instructions. The models are produced by the disassembly collector
and are only read by the exporters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Union
import json
import yaml


# Largest value a native code address can take (unsigned 64-bit)
MAX_NATIVE_CODE = 2 ** 64 - 1


class InstructionKind(Enum):
    """Kind of disassembled record. Only used to decide map shading."""
    ASM = "asm"        # Native assembly
    SOURCE = "source"  # Source line interleaved with the assembly
    IL = "il"          # Intermediate language
    MONO = "mono"      # Mono JIT output


def parse_native_code(value: Union[int, str, None]) -> int:
    """
    Parse a native code address.

    Accepts an int, a decimal string, or a hex string prefixed with '0x'.
    None maps to 0 (unknown address).
    """
    if value is None:
        return 0
    if isinstance(value, str):
        value = int(value, 0)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Native code must be an integer, got {value!r}")
    if value < 0 or value > MAX_NATIVE_CODE:
        raise ValueError(f"Native code {value:#x} is outside the unsigned 64-bit range")
    return value


@dataclass
class Instruction:
    """One disassembled instruction (or interleaved source line)"""
    text_representation: str
    comment: str = ""                     # Plain annotation or full signature of a referenced method
    kind: InstructionKind = InstructionKind.ASM

    def to_dict(self) -> Dict[str, Any]:
        return {
            'text_representation': self.text_representation,
            'comment': self.comment,
            'kind': self.kind.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Instruction':
        return cls(
            text_representation=data.get('text_representation', ''),
            comment=data.get('comment') or '',
            kind=InstructionKind(data.get('kind', 'asm')),
        )


@dataclass
class Map:
    """A contiguous block of instructions belonging to one method"""
    instructions: List[Instruction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'instructions': [i.to_dict() for i in self.instructions]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Map':
        return cls(instructions=[Instruction.from_dict(i) for i in data.get('instructions', [])])


@dataclass
class Method:
    """
    A disassembled method.

    A method is renderable when ``problem`` is empty and failed otherwise.
    ``native_code`` of 0 means the start address is unknown.
    """
    name: str                          # Fully qualified signature, e.g. "Ns.Type.Method(Int32)"
    native_code: int = 0
    problem: str = ""
    maps: List[Map] = field(default_factory=list)
    command_line: str = ""             # JIT/compiler invocation used, if any

    @property
    def is_renderable(self) -> bool:
        return not self.problem

    @property
    def has_problem(self) -> bool:
        return bool(self.problem)

    @property
    def instructions(self) -> List[Instruction]:
        """All instructions of all maps, in order"""
        return [ins for m in self.maps for ins in m.instructions]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'native_code': self.native_code,
            'problem': self.problem,
            'maps': [m.to_dict() for m in self.maps],
            'command_line': self.command_line,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Method':
        return cls(
            name=data['name'],
            native_code=parse_native_code(data.get('native_code', 0)),
            problem=data.get('problem') or '',
            maps=[Map.from_dict(m) for m in data.get('maps', [])],
            command_line=data.get('command_line') or '',
        )


@dataclass
class DisassemblyResult:
    """Everything disassembled for one benchmarked target"""
    methods: List[Method] = field(default_factory=list)

    def renderable_methods(self) -> List[Method]:
        return [m for m in self.methods if m.is_renderable]

    def failed_methods(self) -> List[Method]:
        return [m for m in self.methods if m.has_problem]

    def to_dict(self) -> Dict[str, Any]:
        return {'methods': [m.to_dict() for m in self.methods]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DisassemblyResult':
        return cls(methods=[Method.from_dict(m) for m in data.get('methods', [])])

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string"""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> 'DisassemblyResult':
        """Deserialize from JSON string"""
        return cls.from_dict(json.loads(json_str))


# =============================================================================
# LOADING UTILITIES
# =============================================================================

def load_result_from_json(path: Union[str, Path]) -> DisassemblyResult:
    """Load a disassembly result from a JSON file"""
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        return DisassemblyResult.from_dict(json.load(f))


def load_result_from_yaml(path: Union[str, Path]) -> DisassemblyResult:
    """Load a disassembly result from a YAML file"""
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        return DisassemblyResult.from_dict(yaml.safe_load(f) or {})


def save_result_to_json(result: DisassemblyResult, path: Union[str, Path]) -> None:
    """Save a disassembly result to a JSON file"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, indent=2)
