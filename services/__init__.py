"""
SERVICES LAYER CONTRACT

This package contains the concrete archiving services.

RULES:
- Implements core.interfaces contracts (packer, encryptor, uploader, boundary store)
- Works with the filesystem, cryptography and S3
- May import from core and top-level config/errors
- No run-level decisions (date range, boundary advance)

LAYER RESPONSIBILITY:
- Directory traversal and date filtering
- Packing, encryption, upload and cleanup of one batch directory
- Persistence of the automatic-run boundary

CROSS-LAYER RESTRICTIONS:
- No imports from orchestration
- No CLI or presentation logic

If you need to decide what to archive, you are in the orchestration layer.
"""
