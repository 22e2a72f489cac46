"""
Disassembly Formatting Helpers

Pure functions shared by the disassembly exporters:
- format_method_address: native code address -> "00007ffb`a90f4560"
- get_short_name: "Ns.Type.Method(Int32)" -> "Method"
- build_cross_reference: method name -> native code lookup for hyperlinks
"""

from typing import Dict, Iterable

from asmreport.disassembly.schema import Method
from asmreport.exporters.config import DuplicateNamePolicy


ADDRESS_SEPARATOR = "`"

# Hex digits in one 32-bit half of an address
HALF_WIDTH = 8


def format_method_address(native_code: int) -> str:
    """
    Format a native code address the way debuggers print it.

    Args:
        native_code: Start address of the method, 0 if unknown

    Returns:
        "" for 0, "0000abcd" for 32-bit values, "00007ffb`a90f4560" otherwise
    """
    if native_code == 0:
        return ""

    digits = f"{native_code:x}"

    if len(digits) > HALF_WIDTH:  # 64 bit
        digits = digits[:-HALF_WIDTH] + ADDRESS_SEPARATOR + digits[-HALF_WIDTH:]
        return digits.rjust(2 * HALF_WIDTH + 1, "0")

    return digits.rjust(HALF_WIDTH, "0")


def get_short_name(full_method_signature: str) -> str:
    """
    Strip qualifiers and arguments from a method signature.

    Raises:
        ValueError: if the signature has no argument list
    """
    bracket_index = full_method_signature.find("(")
    if bracket_index < 0:
        raise ValueError(f"Malformed method signature (no '('): {full_method_signature!r}")

    without_arguments = full_method_signature[:bracket_index]
    return without_arguments[without_arguments.rfind(".") + 1:]


def build_cross_reference(
    methods: Iterable[Method],
    policy: DuplicateNamePolicy = DuplicateNamePolicy.LAST,
) -> Dict[str, int]:
    """
    Map the names of renderable methods to their native code.

    Failed methods are never link targets.

    Args:
        methods: Methods of one disassembly result, in result order
        policy: How to resolve two renderable methods with the same name

    Returns:
        Dictionary of method name -> native code

    Raises:
        ValueError: on a duplicate name when policy is REJECT
    """
    lookup: Dict[str, int] = {}

    for method in methods:
        if not method.is_renderable:
            continue

        if method.name in lookup:
            if policy == DuplicateNamePolicy.REJECT:
                raise ValueError(f"Duplicate method name in disassembly result: {method.name}")
            if policy == DuplicateNamePolicy.FIRST:
                continue

        lookup[method.name] = method.native_code

    return lookup
