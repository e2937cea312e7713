"""
Config loader for the research graph demos.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv


class Config:
    """Load YAML config with env overlay."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        load_dotenv()
        self.data = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            raise FileNotFoundError(f"Config not found: {self.path}")
        with self.path.open('r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    @property
    def neo4j(self) -> Dict[str, Any]:
        cfg = dict(self.data.get('neo4j', {}))
        overlay = {
            'uri': 'NEO4J_URI',
            'username': 'NEO4J_USERNAME',
            'password': 'NEO4J_PASSWORD',
            'database': 'NEO4J_DATABASE',
        }
        for key, env_key in overlay.items():
            value = os.getenv(env_key)
            if value:
                cfg[key] = value
        return cfg

    @property
    def grobid(self) -> Dict[str, Any]:
        cfg = dict(self.data.get('grobid', {}))
        url = os.getenv('GROBID_URL')
        if url:
            cfg['url'] = url
        return cfg

    @property
    def logging(self) -> Dict[str, Any]:
        return self.data.get('logging', {})
