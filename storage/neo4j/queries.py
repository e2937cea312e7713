"""Cypher used by the demos and the paper mapper."""

# Paper mapper
CREATE_PAPER = """
CREATE (p:Paper {
  title: $title,
  abstract: $abstract,
  year: $year,
  doi: $doi,
  filename: $filename
})
RETURN elementId(p) AS paper_id
"""

MERGE_AUTHOR = """
MERGE (a:Author {name: $name})
WITH a
MATCH (p:Paper) WHERE elementId(p) = $paper_id
MERGE (a)-[:AUTHORED]->(p)
"""

MERGE_REFERENCE = """
MERGE (r:Reference {title: $title})
WITH r
MATCH (p:Paper) WHERE elementId(p) = $paper_id
MERGE (p)-[:CITES]->(r)
"""

# Research graph report
PROLIFIC_AUTHORS = """
MATCH (a:Author)-[:AUTHORED]->(p:Paper)
RETURN a.name AS author, count(p) AS papers
ORDER BY papers DESC, author
LIMIT $limit
"""

PAPERS_BY_YEAR = """
MATCH (p:Paper)
WHERE p.year IS NOT NULL
RETURN p.year AS year, count(p) AS papers
ORDER BY year DESC
"""

AUTHOR_COLLABORATIONS = """
MATCH (a1:Author)-[:AUTHORED]->(p:Paper)<-[:AUTHORED]-(a2:Author)
WHERE a1.name < a2.name
RETURN a1.name AS author1, a2.name AS author2, count(p) AS collaborations
ORDER BY collaborations DESC, author1, author2
LIMIT $limit
"""

MOST_CITED_REFERENCES = """
MATCH (p:Paper)-[:CITES]->(r:Reference)
RETURN r.title AS reference, count(p) AS citations
ORDER BY citations DESC, reference
LIMIT $limit
"""

RESEARCH_NETWORK = "MATCH (n) WHERE n:Paper OR n:Author OR n:Reference RETURN n LIMIT 100"

# Quickstart (users / products)
PURCHASE_HISTORY = """
MATCH (u:User)-[r:PURCHASED]->(p:Product)
RETURN u.name AS buyer, p.name AS product, r.date AS date, r.quantity AS quantity
"""

SOCIAL_CONNECTIONS = """
MATCH (a:User)-[r:FOLLOWS]->(b:User)
RETURN a.name AS follower, b.name AS following, r.since AS since
"""

# Movie demo
MOVIES_STARRING = """
MATCH (p:Person {name: $name})-[r:ACTED_IN]->(m:Movie)
RETURN m.title AS title, m.released AS year, r.roles AS roles
ORDER BY m.released
"""

PEOPLE_CONNECTED_TO_MOVIE = """
MATCH (p:Person)-[r]->(m:Movie {title: $title})
RETURN p.name AS name, type(r) AS relationship
ORDER BY name
"""

MOVIES_DIRECTED_BY = """
MATCH (p:Person {name: $name})-[:DIRECTED]->(m:Movie)
RETURN m.title AS title, m.released AS year
ORDER BY m.released
"""

CO_WORKERS = """
MATCH (actor:Person {name: $name})-[:ACTED_IN]->(m:Movie)<-[r]-(p:Person)
WHERE p.name <> $name
RETURN p.name AS name, collect(DISTINCT type(r)) AS relationships, collect(DISTINCT m.title) AS movies
ORDER BY name
"""

# Inspection
ALL_NODES = """
MATCH (n)
RETURN labels(n) AS labels, properties(n) AS props
ORDER BY labels(n)[0]
"""

ALL_RELATIONSHIPS = """
MATCH (a)-[r]->(b)
RETURN labels(a)[0] AS from_label, a.name AS from_name,
       type(r) AS rel_type, properties(r) AS rel_props,
       labels(b)[0] AS to_label, coalesce(b.name, b.title) AS to_name
ORDER BY rel_type
"""

DEMO_PEOPLE = """
MATCH (p:Person)
WHERE p.name IN $names
RETURN p.name AS name, p.born AS born
ORDER BY p.name
"""

DEMO_MOVIES = """
MATCH (m:Movie)
WHERE m.title IN $titles
RETURN m.title AS title, m.released AS released, m.tagline AS tagline
ORDER BY m.released
"""

DEMO_MOVIE_RELATIONSHIPS = """
MATCH (p:Person)-[r]->(m:Movie)
WHERE p.name IN $names AND m.title IN $titles
RETURN p.name AS person, type(r) AS rel_type, m.title AS movie, r.roles AS roles
ORDER BY p.name, m.title
"""

DEMO_USERS = """
MATCH (u:User)
WHERE u.name IN $names
RETURN DISTINCT u.name AS name, u.age AS age, u.email AS email
ORDER BY u.name
"""

DEMO_PRODUCTS = """
MATCH (p:Product)
WHERE p.name IN $names
RETURN DISTINCT p.name AS name, p.price AS price, p.category AS category
ORDER BY p.name
"""

DEMO_USER_RELATIONSHIPS = """
MATCH (a:User)-[r]->(b)
WHERE b:Product OR b:User
RETURN DISTINCT a.name AS source, type(r) AS rel_type, b.name AS target,
       r.date AS date, r.quantity AS quantity, r.since AS since
ORDER BY rel_type, source
"""
