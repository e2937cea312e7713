"""CLI entrypoint for the Neo4j / GROBID research graph demos."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from core.config import Config
from core.grobid import GrobidClient
from core.validation import PaperValidator
from pipeline import demos, inspection
from pipeline.orchestrator import ResearchGraphBuilder
from storage.neo4j.mapper import GraphMapper
from storage.neo4j.neo4j_utils import Neo4jConnection

logger = logging.getLogger(__name__)

COMMANDS = ('test-connection', 'quickstart', 'movies', 'research', 'check-results', 'check-data')


def setup_logging(config: Config) -> None:
    cfg = config.logging
    level_name = str(cfg.get('level', 'INFO')).upper()
    fmt = cfg.get('console_format', '%(levelname)s: %(message)s')
    console_level_name = str(cfg.get('min_log_level_console', level_name)).upper()
    file_level_name = str(cfg.get('min_log_level_file', 'DEBUG')).upper()

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, console_level_name, logging.INFO))
    console_handler.setFormatter(logging.Formatter(fmt))
    root_logger.addHandler(console_handler)

    output_dir = cfg.get('output_dir')
    if output_dir:
        log_dir = Path(output_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_fmt = cfg.get('file_format', '%(asctime)s - %(levelname)s - %(name)s - %(message)s')
        file_handler = logging.FileHandler(log_dir / 'research_graph.log', encoding='utf-8')
        file_handler.setLevel(getattr(logging, file_level_name, logging.DEBUG))
        file_handler.setFormatter(logging.Formatter(file_fmt))
        root_logger.addHandler(file_handler)

    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('neo4j').setLevel(logging.WARNING)


def _build_research(config: Config, conn: Neo4jConnection) -> ResearchGraphBuilder:
    grobid_cfg = config.grobid
    validator = None
    schema_path = grobid_cfg.get('paper_schema')
    if schema_path:
        validator = PaperValidator(schema_path)
    return ResearchGraphBuilder(
        conn,
        GrobidClient(grobid_cfg),
        mapper=GraphMapper(conn, validator),
        sample_dir=grobid_cfg.get('sample_dir', './sample-papers'),
        enable_progress=bool(config.logging.get('enable_progress_bar', True)),
    )


def run_command(command: str, config: Config, conn: Neo4jConnection) -> None:
    if command == 'test-connection':
        inspection.check_connection(conn)
    elif command == 'quickstart':
        demos.run_quickstart(conn)
    elif command == 'movies':
        demos.run_movie_demo(conn)
    elif command == 'research':
        asyncio.run(_build_research(config, conn).run())
    elif command == 'check-results':
        inspection.check_results(conn)
    elif command == 'check-data':
        inspection.check_demo_data(conn)
    else:
        raise ValueError(f"Unknown command: {command}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Neo4j + GROBID research graph demos')
    parser.add_argument('command', choices=COMMANDS, help='Demo to run')
    parser.add_argument('--config', default='config/default.yaml', help='Config path')
    args = parser.parse_args(argv)

    config = Config(args.config)
    setup_logging(config)

    try:
        with Neo4jConnection.from_config(config.neo4j) as conn:
            run_command(args.command, config, conn)
    except Exception as exc:
        logger.error(f"Error: {exc}")
        return 1
    logger.info("\nCompleted successfully!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
