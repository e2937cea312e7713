"""Fixed-sequence demos over the graph CRUD helpers."""
from __future__ import annotations

import logging
from typing import Any, Dict

from pipeline.samples import (
    MOVIE_CREDITS,
    MOVIE_LABELS,
    MOVIES,
    PEOPLE,
    PRODUCTS,
    QUICKSTART_LABELS,
    USERS,
)
from storage.neo4j import queries
from storage.neo4j.neo4j_utils import Neo4jConnection

logger = logging.getLogger(__name__)


def run_quickstart(conn: Neo4jConnection) -> Dict[str, Any]:
    """Users, a product, PURCHASED / FOLLOWS edges and three read queries.

    User and Product nodes are cleared first so that relationship endpoints
    stay unique across repeated runs.
    """
    conn.clear_labels(QUICKSTART_LABELS)

    logger.info("Creating example nodes...")
    for user in USERS:
        props = conn.create_node('User', user)
        logger.info(f"  Created user: {props}")
    for product in PRODUCTS:
        props = conn.create_node('Product', product)
        logger.info(f"  Created product: {props}")

    logger.info("\nCreating relationships...")
    conn.create_relationship('User', {'name': 'Alice'}, 'Product', {'name': 'Laptop'},
                             'PURCHASED', {'date': '2024-01-15', 'quantity': 1})
    logger.info("  Alice purchased Laptop")
    conn.create_relationship('User', {'name': 'Alice'}, 'User', {'name': 'Bob'},
                             'FOLLOWS', {'since': '2023-12-01'})
    logger.info("  Alice follows Bob")

    users = conn.find_nodes('User')
    logger.info(f"\nFound {len(users)} users:")
    for user in users:
        logger.info(f"  - {user.get('name')} ({user.get('email')})")

    purchases = conn.run_cypher_query(queries.PURCHASE_HISTORY)
    logger.info("\nPurchase history:")
    for row in purchases:
        logger.info(f"  - {row['buyer']} bought {row['quantity']} {row['product']} on {row['date']}")

    connections = conn.run_cypher_query(queries.SOCIAL_CONNECTIONS)
    logger.info("\nSocial connections:")
    for row in connections:
        logger.info(f"  - {row['follower']} follows {row['following']} since {row['since']}")

    return {'users': users, 'purchases': purchases, 'connections': connections}


def run_movie_demo(conn: Neo4jConnection) -> Dict[str, Any]:
    logger.info("Clearing existing demo data...")
    conn.clear_labels(MOVIE_LABELS)

    logger.info("\nCreating nodes...")
    for person in PEOPLE:
        conn.create_node('Person', person)
        logger.info(f"  Created person: {person['name']}")
    for movie in MOVIES:
        conn.create_node('Movie', movie)
        logger.info(f"  Created movie: {movie['title']}")

    logger.info("\nCreating relationships...")
    for name, rel_type, title, props in MOVIE_CREDITS:
        conn.create_relationship('Person', {'name': name}, 'Movie', {'title': title}, rel_type, props)
        logger.info(f"  {name} {rel_type} {title}")

    starring = conn.run_cypher_query(queries.MOVIES_STARRING, {'name': 'Tom Hanks'})
    logger.info("\nMovies starring Tom Hanks:")
    for row in starring:
        role = row['roles'][0] if row.get('roles') else None
        logger.info(f"  {row['title']} ({row['year']}) - Role: {role}")

    connected = conn.run_cypher_query(queries.PEOPLE_CONNECTED_TO_MOVIE, {'title': 'Forrest Gump'})
    logger.info("\nPeople connected to Forrest Gump:")
    for row in connected:
        logger.info(f"  {row['name']} - {row['relationship']}")

    directed = conn.run_cypher_query(queries.MOVIES_DIRECTED_BY, {'name': 'Robert Zemeckis'})
    logger.info("\nMovies directed by Robert Zemeckis:")
    for row in directed:
        logger.info(f"  {row['title']} ({row['year']})")

    co_workers = conn.run_cypher_query(queries.CO_WORKERS, {'name': 'Tom Hanks'})
    logger.info("\nPeople who worked with Tom Hanks:")
    for row in co_workers:
        logger.info(f"  {row['name']} - {', '.join(row['relationships'])} in {', '.join(row['movies'])}")

    return {
        'starring': starring,
        'connected': connected,
        'directed': directed,
        'co_workers': co_workers,
    }
