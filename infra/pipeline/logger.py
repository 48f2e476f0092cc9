"""
Per-upload run log.

Each run appends JSON lines to {log_dir}/{stage}.jsonl: a summary line, one
line per planned cut and one warning per review reason. The file is created
on the first entry that passes the level filter, so a run that logs nothing
leaves nothing behind.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

ENTRY_FIELDS = ('upload_id', 'stage', 'source', 'part', 'pages', 'filename', 'reason')


class JSONLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now().astimezone().isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        for name in ENTRY_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        return json.dumps(entry)


class PipelineLogger:
    """JSONL log for one upload at one stage."""

    def __init__(
        self,
        upload_id: str,
        stage: str,
        log_dir: Path,
        level: str = "INFO",
        filename: Optional[str] = None,
    ):
        self.upload_id = upload_id
        self.stage = stage
        self.log_dir = Path(log_dir)
        self.level = getattr(logging, level.upper())
        self.filename = filename or f"{stage}.jsonl"
        self.log_file = None
        self._logger = None

    def _open(self) -> logging.Logger:
        if self._logger is None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self.log_file = self.log_dir / self.filename

            handler = logging.FileHandler(self.log_file, mode='a')
            handler.setFormatter(JSONLineFormatter())

            run_logger = logging.getLogger(f"scoresplit.run.{self.upload_id}.{self.stage}.{id(self)}")
            run_logger.setLevel(self.level)
            run_logger.propagate = False
            run_logger.addHandler(handler)
            self._logger = run_logger
        return self._logger

    def _log(self, level: int, message: str, **fields):
        if level < self.level:
            return
        extra = {'upload_id': self.upload_id, 'stage': self.stage}
        extra.update(fields)
        self._open().log(level, message, extra=extra)

    def info(self, message: str, **fields):
        self._log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields):
        self._log(logging.WARNING, message, **fields)

    def cut(self, part: str, first_page: int, last_page: int, filename: Optional[str] = None):
        """Record one planned output file. Pages are 1-indexed."""
        self._log(
            logging.INFO,
            f"Cut {part} pages {first_page}-{last_page}",
            part=part,
            pages=[first_page, last_page],
            filename=filename,
        )

    def review(self, reason: str):
        """Record one reason the upload needs manual review."""
        self._log(logging.WARNING, f"Review required: {reason}", reason=reason)

    def close(self):
        if self._logger is not None:
            for handler in self._logger.handlers[:]:
                handler.close()
                self._logger.removeHandler(handler)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def create_logger(upload_id: str, stage: str, **kwargs) -> PipelineLogger:
    return PipelineLogger(upload_id, stage, **kwargs)
