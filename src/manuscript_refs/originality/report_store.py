"""Persistence of plagiarism reports, one report per article."""
import hashlib
import json
import logging
import os
import re
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from ..models import PlagiarismReport

logger = logging.getLogger(__name__)


class ReportStore(ABC):
    """Keeps the latest report per article id; a save replaces the previous one."""

    @abstractmethod
    def save(self, report: PlagiarismReport) -> None:
        """Store ``report`` as the latest for its article."""

    @abstractmethod
    def get(self, article_id: str) -> Optional[PlagiarismReport]:
        """The latest report for ``article_id``, or None."""


class InMemoryReportStore(ReportStore):
    """Process-local store; keeps serialized copies so callers can't mutate stored reports."""

    def __init__(self):
        self._reports: Dict[str, dict] = {}
        self._lock = threading.Lock()

    def save(self, report: PlagiarismReport) -> None:
        data = report.to_dict()
        with self._lock:
            self._reports[report.article_id] = data
        logger.info(f"Stored plagiarism report for article {report.article_id}")

    def get(self, article_id: str) -> Optional[PlagiarismReport]:
        with self._lock:
            data = self._reports.get(article_id)
        return PlagiarismReport.from_dict(data) if data is not None else None


class JsonFileReportStore(ReportStore):
    """One JSON file per article, replaced atomically on every save."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, article_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(article_id, threading.Lock())

    def path_for(self, article_id: str) -> Path:
        """File name is the sanitized id plus a short hash, so distinct ids never collide."""
        safe = re.sub(r"[^A-Za-z0-9._-]", "_", article_id)[:80]
        digest = hashlib.sha1(article_id.encode("utf-8")).hexdigest()[:8]
        return self.directory / f"{safe}-{digest}.json"

    def save(self, report: PlagiarismReport) -> None:
        target = self.path_for(report.article_id)
        with self._lock_for(report.article_id):
            # Atomic write: temp file + rename
            fd, temp_path = tempfile.mkstemp(suffix='.json.tmp', dir=str(self.directory))
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as tf:
                    json.dump(report.to_dict(), tf, indent=2, ensure_ascii=False, sort_keys=True)
                    tf.flush()
                    os.fsync(tf.fileno())
                os.replace(temp_path, target)
            except Exception:
                # Cleanup temp file on error
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise
        logger.info(f"Saved plagiarism report for article {report.article_id} to {target}")

    def get(self, article_id: str) -> Optional[PlagiarismReport]:
        path = self.path_for(article_id)
        if not path.exists():
            return None
        with self._lock_for(article_id):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    return PlagiarismReport.from_dict(json.load(f))
            except (OSError, ValueError, TypeError) as e:
                logger.error(f"Error loading report for article {article_id}: {e}")
                return None
