"""
Service Layer - DumpService.
"""

from codedump.services.dump_service import DumpResult, DumpService

__all__ = [
    "DumpService",
    "DumpResult",
]
