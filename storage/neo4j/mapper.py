"""Neo4j graph mapper for Paper / Author / Reference records."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union
from typing import TYPE_CHECKING

from core.grobid import PaperRecord
from storage.neo4j import queries

if TYPE_CHECKING:
    from core.validation import PaperValidator
    from storage.neo4j.neo4j_utils import Neo4jConnection

logger = logging.getLogger(__name__)


def _normalize_text(value: Any) -> str:
    return " ".join(str(value).strip().split())


def _dedupe(values: List[Any]) -> List[str]:
    seen = set()
    out: List[str] = []
    for value in values or []:
        if value is None:
            continue
        text = _normalize_text(value)
        if text and text not in seen:
            seen.add(text)
            out.append(text)
    return out


class GraphMapper:
    """Store one paper as a Paper node with MERGEd Author and Reference nodes.

    Authors and references are shared across papers (MERGE on name / title);
    the Paper node itself is always created, so storing the same record twice
    yields two Paper nodes.
    """

    def __init__(self, conn: Neo4jConnection, validator: Optional[PaperValidator] = None):
        self.conn = conn
        self.validator = validator

    def map(self, paper: Union[PaperRecord, Dict[str, Any]], filename: Optional[str] = None) -> Optional[Dict[str, Any]]:
        data = paper.to_dict() if isinstance(paper, PaperRecord) else dict(paper)
        if filename:
            data['filename'] = filename
        data.setdefault('authors', [])
        data.setdefault('references', [])
        label = data.get('filename') or '<unnamed>'

        if not data.get('title'):
            logger.warning(f"Skipping paper without title: {label}")
            return None

        if self.validator is not None:
            errors = self.validator.validate(data)
            if errors:
                logger.warning(f"Skipping invalid paper record {label}: {'; '.join(errors)}")
                return None

        rows = self.conn.run_cypher_query(queries.CREATE_PAPER, {
            'title': data['title'],
            'abstract': data.get('abstract'),
            'year': data.get('year'),
            'doi': data.get('doi'),
            'filename': data.get('filename'),
        })
        paper_id = rows[0]['paper_id']
        logger.info(f"Created paper: \"{data['title']}\"")

        authors = _dedupe(data['authors'])
        for name in authors:
            self.conn.run_cypher_query(queries.MERGE_AUTHOR, {'name': name, 'paper_id': paper_id})
            logger.info(f"  Added author: {name}")

        references = _dedupe(data['references'])
        for title in references:
            self.conn.run_cypher_query(queries.MERGE_REFERENCE, {'title': title, 'paper_id': paper_id})
            logger.info(f"  Added reference: {title[:50]}")

        return {
            'paper_id': paper_id,
            'title': data['title'],
            'authors': authors,
            'references': references,
        }
