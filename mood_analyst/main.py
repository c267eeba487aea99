"""
Mood Analyst Main Application

Command line entry point: run the HTTP host, or answer a single command
without starting a server.
"""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

import structlog
import uvicorn
from dotenv import load_dotenv

from .agents.mood_agent import MoodAnalystAgent
from .api.client_factory import APIClientFactory
from .api.exceptions import CatalogError
from .models.agent_models import SystemConfig
from .utils.logging_config import setup_logging

logger = structlog.get_logger(__name__)


def serve(host: str, port: int) -> None:
    """Run the FastAPI backend under uvicorn."""
    logger.info("Starting Mood Analyst backend", host=host, port=port)
    uvicorn.run("mood_analyst.api.backend:app", host=host, port=port, log_level="info")


async def ask(task: str, system_config: SystemConfig, create_playlists: bool = True) -> int:
    """
    Authenticate, run one command and print the reply.

    Returns:
        Process exit code; 1 when authentication fails
    """
    client = APIClientFactory(system_config).create_spotify_client()

    async with client:
        try:
            await client.authenticate()
        except CatalogError as e:
            logger.error("Spotify authentication failed", error=str(e))
            print(f"Authentication failed: {e}", file=sys.stderr)
            return 1

        agent = MoodAnalystAgent(
            client,
            config=system_config.agent,
            create_playlists=create_playlists
        )
        print(await agent.process_task(task))

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mood-analyst",
        description="Recommend Spotify music from a described mood"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP backend")
    serve_parser.add_argument("--host", default=os.getenv("BACKEND_HOST", "127.0.0.1"))
    serve_parser.add_argument("--port", type=int, default=int(os.getenv("BACKEND_PORT", "8000")))

    ask_parser = subparsers.add_parser("ask", help="Run one agent command and print the reply")
    ask_parser.add_argument(
        "task",
        nargs="+",
        help="Command text, e.g. mood_analyzer I feel calm"
    )
    ask_parser.add_argument(
        "--no-playlist",
        action="store_true",
        help="Do not save recommendations as a playlist"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        serve(args.host, args.port)
        return 0

    try:
        system_config = SystemConfig.from_env()
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    setup_logging(
        log_dir=system_config.log_dir,
        log_level=system_config.log_level,
        enable_files=False
    )

    try:
        return asyncio.run(ask(" ".join(args.task), system_config, not args.no_playlist))
    except KeyboardInterrupt:
        logger.info("Application stopped by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
