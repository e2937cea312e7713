"""Literal sample data used by the demos."""

SAMPLE_PAPERS = [
    {
        "title": "Deep Learning Approaches for Natural Language Processing",
        "abstract": "This paper presents a comprehensive survey of deep learning methods applied to natural language processing tasks.",
        "authors": ["Sarah Johnson", "Michael Chen", "David Rodriguez"],
        "year": 2023,
        "doi": "10.1000/sample.2023.001",
        "filename": "deep_learning_nlp.pdf",
        "references": [
            "Attention Is All You Need",
            "BERT: Pre-training of Deep Bidirectional Transformers",
            "GPT-3: Language Models are Few-Shot Learners",
        ],
    },
    {
        "title": "Graph Neural Networks for Knowledge Representation",
        "abstract": "We explore the application of graph neural networks to represent and reason over structured knowledge.",
        "authors": ["Michael Chen", "Alice Wang", "Robert Kim"],
        "year": 2023,
        "doi": "10.1000/sample.2023.002",
        "filename": "gnn_knowledge.pdf",
        "references": [
            "Graph Convolutional Networks",
            "GraphSAGE: Inductive Representation Learning",
            "Deep Learning Approaches for Natural Language Processing",
        ],
    },
    {
        "title": "Neo4j for Scientific Literature Analysis",
        "abstract": "This study demonstrates how graph databases can be used to analyze citation networks and research trends.",
        "authors": ["Alice Wang", "Sarah Johnson"],
        "year": 2024,
        "doi": "10.1000/sample.2024.001",
        "filename": "neo4j_analysis.pdf",
        "references": [
            "Graph Neural Networks for Knowledge Representation",
            "Network Analysis of Scientific Collaborations",
            "Citation Networks and Academic Impact",
        ],
    },
]

PEOPLE = [
    {"name": "Tom Hanks", "born": 1956},
    {"name": "Rita Wilson", "born": 1956},
    {"name": "Robert Zemeckis", "born": 1952},
]

MOVIES = [
    {"title": "Forrest Gump", "released": 1994, "tagline": "Life is like a box of chocolates"},
    {"title": "Cast Away", "released": 2000, "tagline": "At the edge of the world, his journey begins"},
]

# (person, relationship type, movie, relationship properties)
MOVIE_CREDITS = [
    ("Tom Hanks", "ACTED_IN", "Forrest Gump", {"roles": ["Forrest Gump"]}),
    ("Tom Hanks", "ACTED_IN", "Cast Away", {"roles": ["Chuck Noland"]}),
    ("Robert Zemeckis", "DIRECTED", "Forrest Gump", {}),
    ("Robert Zemeckis", "DIRECTED", "Cast Away", {}),
    ("Rita Wilson", "PRODUCED", "Cast Away", {}),
]

USERS = [
    {"name": "Alice", "age": 30, "email": "alice@example.com"},
    {"name": "Bob", "age": 25, "email": "bob@example.com"},
]

PRODUCTS = [
    {"name": "Laptop", "price": 999.99, "category": "Electronics"},
]

RESEARCH_LABELS = ["Paper", "Author", "Reference"]
MOVIE_LABELS = ["Person", "Movie"]
QUICKSTART_LABELS = ["User", "Product"]
DEMO_LABELS = QUICKSTART_LABELS + MOVIE_LABELS
