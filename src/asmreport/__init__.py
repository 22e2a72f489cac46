"""
asmreport: cross-referenced HTML reports of benchmark disassembly.
"""

__version__ = "0.1.0"
