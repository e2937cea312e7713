"""Read-only views over the database: connection check and demo data listings."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable

from pipeline.samples import DEMO_LABELS, MOVIES, PEOPLE, PRODUCTS, USERS
from storage.neo4j import queries
from storage.neo4j.neo4j_utils import Neo4jConnection

logger = logging.getLogger(__name__)


def check_connection(conn: Neo4jConnection) -> Dict[str, Any]:
    logger.info("Testing connection to Neo4j...")
    info = conn.server_info()
    logger.info(f"Connection successful! Test query returned: {info['test']}")
    logger.info("\nDatabase Information:")
    for component in info['components']:
        logger.info(f"  Name: {component['name']}")
        logger.info(f"  Version: {component['version']}")
        logger.info(f"  Edition: {component['edition']}")
    return info


def _format_relationship(row: Dict[str, Any]) -> str:
    rel = f"({row['from_label']}:{row['from_name']}) -[{row['rel_type']}"
    if row.get('rel_props'):
        rel += f" {json.dumps(row['rel_props'], default=str)}"
    return rel + f"]-> ({row['to_label']}:{row['to_name']})"


def check_results(conn: Neo4jConnection, labels: Iterable[str] = DEMO_LABELS) -> Dict[str, Any]:
    """Node counts per label (empty labels omitted), every node and every relationship."""
    counts = {}
    logger.info("Node counts by label:")
    for label in labels:
        count = conn.count_nodes(label)
        if count > 0:
            counts[label] = count
            logger.info(f"  {label}: {count} nodes")

    nodes = conn.run_cypher_query(queries.ALL_NODES)
    logger.info("\nAll nodes in the database:")
    for row in nodes:
        logger.info(f"\n  {':'.join(row['labels'])}")
        for key, value in row['props'].items():
            logger.info(f"    {key}: {value}")

    relationships = conn.run_cypher_query(queries.ALL_RELATIONSHIPS)
    logger.info("\nAll relationships:")
    for row in relationships:
        logger.info(f"  {_format_relationship(row)}")

    return {'label_counts': counts, 'nodes': nodes, 'relationships': relationships}


def check_demo_data(conn: Neo4jConnection) -> Dict[str, Any]:
    """Data written by the movie and quickstart demos, plus connection details."""
    people_names = [p['name'] for p in PEOPLE]
    movie_titles = [m['title'] for m in MOVIES]

    people = conn.run_cypher_query(queries.DEMO_PEOPLE, {'names': people_names})
    movies = conn.run_cypher_query(queries.DEMO_MOVIES, {'titles': movie_titles})
    movie_rels = conn.run_cypher_query(
        queries.DEMO_MOVIE_RELATIONSHIPS, {'names': people_names, 'titles': movie_titles}
    )
    users = conn.run_cypher_query(queries.DEMO_USERS, {'names': [u['name'] for u in USERS]})
    products = conn.run_cypher_query(queries.DEMO_PRODUCTS, {'names': [p['name'] for p in PRODUCTS]})
    user_rels = conn.run_cypher_query(queries.DEMO_USER_RELATIONSHIPS)

    logger.info("Movie demo data\n\nPeople:")
    for row in people:
        logger.info(f"  {row['name']} (born: {row['born']})")
    logger.info("\nMovies:")
    for row in movies:
        logger.info(f"  {row['title']} ({row['released']})\n    \"{row['tagline']}\"")
    logger.info("\nMovie relationships:")
    for row in movie_rels:
        role = f" as {row['roles'][0]}" if row.get('roles') else ''
        logger.info(f"  {row['person']} {row['rel_type']} {row['movie']}{role}")

    logger.info("\nUser/Product demo data\n\nUsers:")
    for row in users:
        logger.info(f"  {row['name']} (age: {row['age']}, email: {row['email']})")
    logger.info("\nProducts:")
    for row in products:
        logger.info(f"  {row['name']} - ${row['price']} ({row['category']})")
    logger.info("\nUser relationships:")
    for row in user_rels:
        logger.info(f"  {row['source']} {row['rel_type']} {row['target']}{_user_rel_details(row)}")

    connection = {'uri': conn.uri, 'database': conn.database, 'username': conn.user}
    logger.info(f"\nNeo4j connection: {connection['uri']} (database: {connection['database']}, user: {connection['username']})")

    return {
        'people': people,
        'movies': movies,
        'movie_relationships': movie_rels,
        'users': users,
        'products': products,
        'user_relationships': user_rels,
        'connection': connection,
    }


def _user_rel_details(row: Dict[str, Any]) -> str:
    if row.get('date'):
        return f" on {row['date']} (qty: {row['quantity']})"
    if row.get('since'):
        return f" since {row['since']}"
    return ''
