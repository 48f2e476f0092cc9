import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from infra.config import get_log_dir, get_splitter_config
from infra.pipeline.logger import PipelineLogger, create_logger


def read_pdf_bytes(path_str: str) -> bytes:
    pdf_path = Path(path_str).expanduser()
    if not pdf_path.exists():
        print(f"❌ File not found: {pdf_path}")
        sys.exit(1)
    if pdf_path.suffix.lower() != '.pdf':
        print(f"❌ Not a PDF file: {pdf_path}")
        sys.exit(1)
    return pdf_path.read_bytes()


def read_json_file(path_str: str) -> Any:
    json_path = Path(path_str).expanduser()
    if not json_path.exists():
        print(f"❌ File not found: {json_path}")
        sys.exit(1)
    try:
        with open(json_path, 'r') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        print(f"❌ Invalid JSON in {json_path}: {e}")
        sys.exit(1)


def unwrap_instructions(data: Any) -> Any:
    """Accept a bare instruction array or a classifier response wrapping one."""
    if isinstance(data, dict):
        for key in ('cuttingInstructions', 'cutting_instructions'):
            if key in data:
                return data[key]
    return data


def read_header_strings(path_str: Optional[str]) -> Optional[List[Optional[str]]]:
    if not path_str:
        return None
    data = read_json_file(path_str)
    if not isinstance(data, list):
        print(f"❌ Header file must contain a JSON array of strings (one per page): {path_str}")
        sys.exit(1)
    return [item if isinstance(item, str) else None for item in data]


def open_run_logger(pdf_path: str, stage: str) -> PipelineLogger:
    """JSONL logger for one CLI run, keyed by the PDF's file name."""
    config = get_splitter_config()
    return create_logger(
        Path(pdf_path).stem,
        stage,
        log_dir=get_log_dir() / Path(pdf_path).stem,
        level=config.log_level,
    )
