"""JSON Schema validation for paper records."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from jsonschema import Draft202012Validator


class PaperValidator:
    def __init__(self, schema_path: str | Path):
        self.schema_path = Path(schema_path)
        if not self.schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {self.schema_path}")
        self.schema = json.loads(self.schema_path.read_text(encoding='utf-8'))
        self.validator = Draft202012Validator(self.schema)

    def validate(self, record: Dict[str, Any]) -> List[str]:
        errors = []
        for err in sorted(self.validator.iter_errors(record), key=lambda e: [str(p) for p in e.path]):
            path = '.'.join([str(p) for p in err.path]) or '$root'
            errors.append(f"{path}: {err.message}")
        return errors
