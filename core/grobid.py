"""
GROBID 客户端 - 异步实现
用于调用 GROBID 服务从 PDF 中抽取论文头部元数据（TEI XML）
"""
import asyncio
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiohttp


logger = logging.getLogger(__name__)

EXTRACTED_FIELDS = ("title", "abstract", "authors", "year", "doi", "references")

_YEAR_RE = re.compile(r"^(\d{4})")


class GrobidServiceError(RuntimeError):
    """GROBID 返回非成功状态码"""

    def __init__(self, status: int, url: str):
        self.status = status
        self.url = url
        super().__init__(f"GROBID API error: {status} ({url})")


class TeiParseError(ValueError):
    """GROBID 返回的内容不是合法 XML"""


@dataclass
class PaperRecord:
    """论文元数据；未抽取到的字段为 None 或空列表"""

    title: Optional[str] = None
    abstract: Optional[str] = None
    authors: List[str] = field(default_factory=list)
    year: Optional[int] = None
    doi: Optional[str] = None
    references: List[str] = field(default_factory=list)
    filename: Optional[str] = None

    def missing_fields(self) -> List[str]:
        return [name for name in EXTRACTED_FIELDS if getattr(self, name) in (None, [])]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PaperRecord":
        return cls(
            title=data.get("title"),
            abstract=data.get("abstract"),
            authors=list(data.get("authors") or []),
            year=data.get("year"),
            doi=data.get("doi"),
            references=list(data.get("references") or []),
            filename=data.get("filename"),
        )


def _text(element: Optional[ET.Element]) -> Optional[str]:
    if element is None:
        return None
    text = " ".join("".join(element.itertext()).split())
    return text or None


def _strip_namespaces(root: ET.Element) -> ET.Element:
    for el in root.iter():
        if isinstance(el.tag, str) and "}" in el.tag:
            el.tag = el.tag.split("}", 1)[1]
    return root


class TeiHeaderExtractor:
    """从 TEI XML 中抽取论文字段，每个字段独立抽取，缺失即为 None"""

    @staticmethod
    def parse(xml_text: str, max_references: Optional[int] = 5) -> PaperRecord:
        if not xml_text or not xml_text.strip():
            return PaperRecord()
        try:
            root = _strip_namespaces(ET.fromstring(xml_text))
        except ET.ParseError as e:
            raise TeiParseError(f"Invalid TEI XML: {e}") from e

        header = root.find(".//teiHeader")
        if header is None:
            header = root

        return PaperRecord(
            title=TeiHeaderExtractor.extract_title(header),
            abstract=TeiHeaderExtractor.extract_abstract(header),
            authors=TeiHeaderExtractor.extract_authors(header),
            year=TeiHeaderExtractor.extract_year(header),
            doi=TeiHeaderExtractor.extract_doi(header),
            references=TeiHeaderExtractor.extract_references(root, max_references),
        )

    @staticmethod
    def extract_title(header: ET.Element) -> Optional[str]:
        for path in (".//titleStmt/title", ".//sourceDesc//analytic/title", ".//title"):
            title = _text(header.find(path))
            if title:
                return title
        return None

    @staticmethod
    def extract_abstract(header: ET.Element) -> Optional[str]:
        return _text(header.find(".//abstract"))

    @staticmethod
    def extract_doi(header: ET.Element) -> Optional[str]:
        for idno in header.iter("idno"):
            if (idno.get("type") or "").lower() == "doi":
                doi = _text(idno)
                if doi:
                    return doi
        return None

    @staticmethod
    def extract_year(header: ET.Element) -> Optional[int]:
        for date in header.iter("date"):
            match = _YEAR_RE.match(date.get("when") or "")
            if match:
                return int(match.group(1))
        return None

    @staticmethod
    def extract_authors(header: ET.Element) -> List[str]:
        """作者名 = 名 + 姓；缺少姓的作者跳过，保持原有顺序去重"""
        scope = header.find(".//sourceDesc")
        if scope is None:
            scope = header

        authors: List[str] = []
        for author in scope.iter("author"):
            pers_name = author.find("persName")
            if pers_name is None:
                continue
            surname = _text(pers_name.find("surname"))
            if not surname:
                continue
            forenames = [f for f in (_text(el) for el in pers_name.findall("forename")) if f]
            name = " ".join(forenames + [surname])
            if name not in authors:
                authors.append(name)
        return authors

    @staticmethod
    def extract_references(root: ET.Element, limit: Optional[int] = 5) -> List[str]:
        references: List[str] = []
        for bibl_list in root.iter("listBibl"):
            for bibl in bibl_list.findall("biblStruct"):
                if limit is not None and len(references) >= limit:
                    return references
                title = _text(bibl.find("analytic/title")) or _text(bibl.find("monogr/title"))
                if title:
                    references.append(title)
        return references


class GrobidClient:
    """异步 GROBID API 客户端，每个请求只尝试一次"""

    def __init__(self, config: Dict | None = None):
        self.config = config or {}
        self.base_url = str(self.config.get("url") or "http://localhost:8070").rstrip("/")
        # None 表示不设置超时
        self.timeout = self.config.get("timeout")
        self.max_references = self.config.get("max_references", 5)
        self.version: Optional[str] = None

        logger.debug(f"GROBID client initialised - url: {self.base_url}, timeout: {self.timeout}")

    def _session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))

    async def check_service(self) -> bool:
        """通过 /api/version 检查服务是否可用，失败时返回 False 而不抛出"""
        url = f"{self.base_url}/api/version"
        try:
            async with self._session() as session:
                async with session.get(url) as response:
                    if 200 <= response.status < 300:
                        self.version = (await response.text()).strip()
                        logger.info(f"GROBID service is running: {self.version}")
                        return True
                    logger.warning(f"GROBID version check failed - status: {response.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            logger.warning(f"GROBID service not available: {e}")
        return False

    async def process_pdf(self, pdf_path: str | Path) -> PaperRecord:
        """
        上传 PDF 到 /api/processHeaderDocument 并解析返回的 TEI

        Raises:
            FileNotFoundError: PDF 不存在
            GrobidServiceError: 非成功状态码
            TeiParseError: 返回内容不是合法 XML
        """
        path = Path(pdf_path)
        if not path.is_file():
            raise FileNotFoundError(f"PDF file not found: {path}")

        url = f"{self.base_url}/api/processHeaderDocument"
        form = aiohttp.FormData()
        form.add_field("input", path.read_bytes(), filename=path.name, content_type="application/pdf")

        async with self._session() as session:
            async with session.post(url, data=form) as response:
                if not 200 <= response.status < 300:
                    raise GrobidServiceError(response.status, url)
                body = await response.text()

        record = TeiHeaderExtractor.parse(body, max_references=self.max_references)
        record.filename = path.name
        missing = record.missing_fields()
        if missing:
            logger.debug(f"{path.name}: fields not found: {', '.join(missing)}")
        return record
