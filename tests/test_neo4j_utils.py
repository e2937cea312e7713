import unittest

from fakes import FakeDriver, FakeResult
from storage.neo4j.neo4j_utils import (
    InvalidIdentifierError,
    Neo4jConnection,
    RelationshipMatchError,
    build_where_clause,
    validate_identifier,
)


def relationship_responder(from_count=1, to_count=1):
    def respond(query, params):
        if 'RETURN count(a)' in query:
            return [{'count': from_count}]
        if 'RETURN count(b)' in query:
            return [{'count': to_count}]
        if 'CREATE (a)-' in query:
            return [{
                'source': {'name': 'Alice'},
                'type': 'PURCHASED',
                'properties': params['rel_props'],
                'target': {'name': 'Laptop'},
            }]
        return []
    return respond


class IdentifierTest(unittest.TestCase):
    def test_accepts_plain_identifiers(self):
        self.assertEqual(validate_identifier("Paper"), "Paper")
        self.assertEqual(validate_identifier("ACTED_IN", kind="relationship type"), "ACTED_IN")

    def test_rejects_injection(self):
        for bad in ["User) DETACH DELETE (n", "a-b", "1abc", "", "Us`er", None]:
            with self.assertRaises(InvalidIdentifierError):
                validate_identifier(bad)

    def test_allow_list(self):
        with self.assertRaises(InvalidIdentifierError):
            validate_identifier("Movie", allowed={"User"})

    def test_where_clause_numbers_parameters(self):
        where, params = build_where_clause("n", {"name": "Alice", "age": 30}, "p")
        self.assertEqual(where, "n.`name` = $p0 AND n.`age` = $p1")
        self.assertEqual(params, {"p0": "Alice", "p1": 30})

    def test_empty_where_clause(self):
        self.assertEqual(build_where_clause("n", {}, "p"), ("", {}))


class Neo4jConnectionTest(unittest.TestCase):
    def make_conn(self, responder=None, **kwargs):
        self.driver = FakeDriver(responder)
        return Neo4jConnection(uri="bolt://test", user="u", password="p",
                               database="papers", driver=self.driver, **kwargs)

    def test_create_node_binds_properties(self):
        props = {'name': 'Alice', 'age': 30, 'tags': ['a', 'b']}
        conn = self.make_conn(lambda q, p: [{'n': dict(p['properties'])}])

        created = conn.create_node('User', props)

        self.assertEqual(created, props)
        query, params = self.driver.calls[0]
        self.assertEqual(query, "CREATE (n:`User` $properties) RETURN n")
        self.assertEqual(params, {'properties': props})
        self.assertEqual(self.driver.sessions[0].database, "papers")
        self.assertTrue(self.driver.sessions[0].closed)

    def test_create_node_rejects_unsafe_label_without_querying(self):
        conn = self.make_conn()
        with self.assertRaises(InvalidIdentifierError):
            conn.create_node("User) DETACH DELETE (x", {'name': 'x'})
        self.assertEqual(self.driver.calls, [])

    def test_create_node_enforces_allow_list(self):
        conn = self.make_conn(allowed_labels=['User'])
        with self.assertRaises(InvalidIdentifierError):
            conn.create_node('Movie', {'title': 'Cast Away'})

    def test_find_nodes_filters_with_and(self):
        conn = self.make_conn(lambda q, p: [{'n': {'name': 'Alice', 'age': 30}}])

        nodes = conn.find_nodes('User', {'name': 'Alice', 'age': 30})

        self.assertEqual(nodes, [{'name': 'Alice', 'age': 30}])
        query, params = self.driver.calls[0]
        self.assertEqual(query, "MATCH (n:`User`) WHERE n.`name` = $p0 AND n.`age` = $p1 RETURN n")
        self.assertEqual(params, {'p0': 'Alice', 'p1': 30})

    def test_find_nodes_without_filter(self):
        conn = self.make_conn()
        self.assertEqual(conn.find_nodes('User'), [])
        self.assertEqual(self.driver.calls[0][0], "MATCH (n:`User`) RETURN n")

    def test_find_nodes_rejects_unsafe_property_key(self):
        conn = self.make_conn()
        with self.assertRaises(InvalidIdentifierError):
            conn.find_nodes('User', {'name = 1 OR 1': 'x'})

    def test_create_relationship_unique_endpoints(self):
        conn = self.make_conn(relationship_responder())

        rel = conn.create_relationship('User', {'name': 'Alice'}, 'Product', {'name': 'Laptop'},
                                       'PURCHASED', {'date': '2024-01-15', 'quantity': 1})

        self.assertEqual(rel['type'], 'PURCHASED')
        self.assertEqual(rel['properties'], {'date': '2024-01-15', 'quantity': 1})
        create_query, params = self.driver.calls[-1]
        self.assertIn("MATCH (a:`User`) WHERE a.`name` = $from_0", create_query)
        self.assertIn("MATCH (b:`Product`) WHERE b.`name` = $to_0", create_query)
        self.assertIn("CREATE (a)-[r:`PURCHASED` $rel_props]->(b)", create_query)
        self.assertEqual(params['from_0'], 'Alice')
        self.assertEqual(params['to_0'], 'Laptop')
        self.assertEqual(len(self.driver.sessions), 1)

    def test_create_relationship_rejects_missing_source(self):
        conn = self.make_conn(relationship_responder(from_count=0))

        with self.assertRaises(RelationshipMatchError) as ctx:
            conn.create_relationship('User', {'name': 'Nobody'}, 'Product', {'name': 'Laptop'}, 'PURCHASED')

        self.assertEqual(ctx.exception.side, 'from')
        self.assertEqual(ctx.exception.count, 0)
        self.assertFalse(any('CREATE' in q for q, _ in self.driver.calls))

    def test_create_relationship_rejects_ambiguous_target(self):
        conn = self.make_conn(relationship_responder(to_count=2))

        with self.assertRaises(RelationshipMatchError) as ctx:
            conn.create_relationship('User', {'name': 'Alice'}, 'User', {'age': 25}, 'FOLLOWS')

        self.assertEqual(ctx.exception.side, 'to')
        self.assertEqual(ctx.exception.count, 2)
        self.assertEqual(ctx.exception.label, 'User')
        self.assertFalse(any('CREATE' in q for q, _ in self.driver.calls))

    def test_create_relationship_validates_type(self):
        conn = self.make_conn(allowed_relationship_types=['FOLLOWS'])
        with self.assertRaises(InvalidIdentifierError):
            conn.create_relationship('User', {'name': 'Alice'}, 'User', {'name': 'Bob'}, 'LIKES')
        self.assertEqual(self.driver.calls, [])

    def test_session_released_when_query_fails(self):
        def boom(query, params):
            raise RuntimeError("database unavailable")

        conn = self.make_conn(boom)
        with self.assertRaises(RuntimeError):
            conn.run_cypher_query("RETURN 1")
        self.assertTrue(self.driver.sessions[0].closed)

    def test_run_cypher_query_passthrough(self):
        conn = self.make_conn(lambda q, p: [{'value': p['x'] * 2}])
        self.assertEqual(conn.run_cypher_query("RETURN $x * 2 AS value", {'x': 21}), [{'value': 42}])

    def test_clear_labels_sums_deleted_nodes(self):
        conn = self.make_conn(lambda q, p: FakeResult(nodes_deleted=3))

        deleted = conn.clear_labels(['Paper', 'Author'])

        self.assertEqual(deleted, 6)
        self.assertEqual([q for q, _ in self.driver.calls], [
            "MATCH (n:`Paper`) DETACH DELETE n",
            "MATCH (n:`Author`) DETACH DELETE n",
        ])

    def test_count_nodes(self):
        conn = self.make_conn(lambda q, p: [{'count': 4}])
        self.assertEqual(conn.count_nodes('Movie'), 4)

    def test_server_info(self):
        def respond(query, params):
            if query == "RETURN 1 AS test":
                return [{'test': 1}]
            return [{'name': 'Neo4j Kernel', 'versions': ['5.20.0'], 'edition': 'community'}]

        info = self.make_conn(respond).server_info()

        self.assertEqual(info['test'], 1)
        self.assertEqual(info['components'], [
            {'name': 'Neo4j Kernel', 'version': '5.20.0', 'edition': 'community'}
        ])

    def test_context_manager_closes_driver(self):
        with self.make_conn() as conn:
            self.assertIs(conn.driver, self.driver)
        self.assertTrue(self.driver.closed)
        self.assertIsNone(conn.driver)

    def test_from_config_reads_allow_lists(self):
        cfg = {'uri': 'bolt://x', 'username': 'u', 'password': 'p', 'database': 'db',
               'allowed_labels': ['Paper']}
        conn = Neo4jConnection.from_config(cfg, driver=FakeDriver())
        self.assertEqual(conn.database, 'db')
        self.assertEqual(conn.allowed_labels, frozenset(['Paper']))


if __name__ == '__main__':
    unittest.main()
