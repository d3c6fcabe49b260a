"""
CORE LAYER CONTRACT

This package contains core domain structures and abstractions of the archiver.

RULES:
- Defines data models and interfaces shared by all layers
- No business logic implementation
- No infrastructure dependencies
- Pure abstractions and contracts only

LAYER RESPONSIBILITY:
- Domain entities (batch units, date ranges, results, run report)
- Interfaces for packing, encryption, upload and run boundary storage

CROSS-LAYER RESTRICTIONS:
- No imports from services or orchestration
- No filesystem, OS, or network access

If you need concrete implementations, you are in the wrong layer.
"""
