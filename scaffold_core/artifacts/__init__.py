"""scaffold_core.artifacts

Idempotent artifact writes (create / skip / back up) and their verification.
"""

from __future__ import annotations

from .tracker import ArtifactState, FileOperationTracker, classify

__all__ = ["ArtifactState", "FileOperationTracker", "classify"]
