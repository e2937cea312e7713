import asyncio
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from core.grobid import GrobidServiceError, PaperRecord, TeiParseError
from core.validation import PaperValidator
from fakes import FakeConnection, FakeGrobid
from pipeline import demos, inspection
from pipeline.orchestrator import ResearchGraphBuilder
from pipeline.samples import RESEARCH_LABELS, SAMPLE_PAPERS
from storage.neo4j.mapper import GraphMapper

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "config" / "paper_schema.json"


class GraphMapperTest(unittest.TestCase):
    def setUp(self):
        self.conn = FakeConnection()

    def test_stores_paper_authors_and_references(self):
        result = GraphMapper(self.conn).map(SAMPLE_PAPERS[0], SAMPLE_PAPERS[0]['filename'])

        self.assertEqual(result['paper_id'], 'paper-1')
        created = self.conn.queries_containing('CREATE (p:Paper')[0]
        self.assertEqual(created['title'], SAMPLE_PAPERS[0]['title'])
        self.assertEqual(created['filename'], 'deep_learning_nlp.pdf')
        authors = self.conn.queries_containing('MERGE (a:Author')
        self.assertEqual([a['name'] for a in authors], SAMPLE_PAPERS[0]['authors'])
        self.assertTrue(all(a['paper_id'] == 'paper-1' for a in authors))
        self.assertEqual(len(self.conn.queries_containing('MERGE (r:Reference')), 3)

    def test_skips_paper_without_title(self):
        record = PaperRecord(authors=["Lena Schmidt"])
        self.assertIsNone(GraphMapper(self.conn).map(record, "untitled.pdf"))
        self.assertEqual(self.conn.queries, [])

    def test_deduplicates_authors(self):
        record = PaperRecord(title="T", authors=["Ann  Lee", "Ann Lee", "Bo Chen"])
        result = GraphMapper(self.conn).map(record)
        self.assertEqual(result['authors'], ["Ann Lee", "Bo Chen"])

    def test_validator_rejects_bad_record(self):
        mapper = GraphMapper(self.conn, PaperValidator(SCHEMA_PATH))
        self.assertIsNone(mapper.map({'title': 'T', 'authors': [], 'references': [], 'year': 'soon'}))
        self.assertEqual(self.conn.queries, [])

    def test_validator_accepts_sample_papers(self):
        validator = PaperValidator(SCHEMA_PATH)
        for paper in SAMPLE_PAPERS:
            self.assertEqual(validator.validate(paper), [])


class ResearchGraphBuilderTest(unittest.TestCase):
    def setUp(self):
        self.conn = FakeConnection()
        self.tmp = tempfile.TemporaryDirectory()
        self.sample_dir = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def build(self, grobid, sample_dir=None):
        return ResearchGraphBuilder(self.conn, grobid, sample_dir=sample_dir or self.sample_dir,
                                    enable_progress=False)

    def test_unavailable_service_falls_back_to_sample_data(self):
        grobid = FakeGrobid(available=False)
        result = asyncio.run(self.build(grobid).run())

        self.assertFalse(result['grobid_available'])
        self.assertEqual(result['source'], 'sample')
        self.assertEqual(result['stored'], 3)
        self.assertEqual(grobid.processed, [])
        self.assertEqual(self.conn.cleared, [RESEARCH_LABELS])
        titles = [p['title'] for p in self.conn.queries_containing('CREATE (p:Paper')]
        self.assertEqual(titles, [p['title'] for p in SAMPLE_PAPERS])
        self.assertEqual(set(result['report']), {
            'prolific_authors', 'papers_by_year', 'collaborations', 'cited_references'
        })

    def test_missing_directory_falls_back_to_sample_data(self):
        builder = self.build(FakeGrobid(), sample_dir=self.sample_dir / "absent")
        result = asyncio.run(builder.run())
        self.assertTrue(result['grobid_available'])
        self.assertEqual(result['source'], 'sample')
        self.assertEqual(result['stored'], 3)

    def test_processes_pdfs_and_skips_failures(self):
        for name in ("a.pdf", "b.pdf", "c.PDF", "notes.txt"):
            (self.sample_dir / name).write_bytes(b"%PDF")
        grobid = FakeGrobid(outcomes={
            "a.pdf": PaperRecord(title="Paper A", authors=["Ann Lee"], references=["Ref 1"]),
            "b.pdf": GrobidServiceError(500, "http://grobid/api/processHeaderDocument"),
            "c.PDF": TeiParseError("bad xml"),
        })

        result = asyncio.run(self.build(grobid).run())

        self.assertEqual(grobid.processed, ["a.pdf", "b.pdf", "c.PDF"])
        self.assertEqual(result['source'], 'grobid')
        self.assertEqual(result['stored'], 1)
        created = self.conn.queries_containing('CREATE (p:Paper')
        self.assertEqual([(p['title'], p['filename']) for p in created], [("Paper A", "a.pdf")])

    def test_report_queries_use_limit(self):
        builder = self.build(FakeGrobid())
        builder.query_research_graph()
        limits = [params.get('limit') for _, params in self.conn.queries]
        self.assertEqual(limits, [5, None, 5, 5])


class DemoTest(unittest.TestCase):
    def test_movie_demo_sequence(self):
        conn = mock.MagicMock()
        conn.run_cypher_query.return_value = []

        demos.run_movie_demo(conn)

        conn.clear_labels.assert_called_once_with(['Person', 'Movie'])
        self.assertEqual(conn.create_node.call_count, 5)
        self.assertEqual(conn.create_relationship.call_count, 5)
        conn.create_relationship.assert_any_call(
            'Person', {'name': 'Tom Hanks'}, 'Movie', {'title': 'Cast Away'}, 'ACTED_IN', {'roles': ['Chuck Noland']}
        )

    def test_quickstart_clears_before_creating(self):
        conn = mock.MagicMock()
        conn.find_nodes.return_value = [{'name': 'Alice', 'email': 'alice@example.com'}]
        conn.run_cypher_query.return_value = []

        result = demos.run_quickstart(conn)

        self.assertEqual(conn.method_calls[0], mock.call.clear_labels(['User', 'Product']))
        conn.create_relationship.assert_any_call(
            'User', {'name': 'Alice'}, 'User', {'name': 'Bob'}, 'FOLLOWS', {'since': '2023-12-01'}
        )
        self.assertEqual(result['users'], [{'name': 'Alice', 'email': 'alice@example.com'}])


class InspectionTest(unittest.TestCase):
    def test_check_results_omits_empty_labels(self):
        conn = mock.MagicMock()
        conn.count_nodes.side_effect = lambda label: {'User': 2, 'Movie': 1}.get(label, 0)
        conn.run_cypher_query.return_value = []

        result = inspection.check_results(conn)

        self.assertEqual(result['label_counts'], {'User': 2, 'Movie': 1})

    def test_check_connection(self):
        conn = mock.MagicMock()
        conn.server_info.return_value = {'test': 1, 'components': []}
        self.assertEqual(inspection.check_connection(conn)['test'], 1)


if __name__ == '__main__':
    unittest.main()
