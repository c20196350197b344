"""CLI entry point for agentloop."""

import argparse
import asyncio
import importlib
import logging
import sys

from agentloop.config import AgentLoopConfig
from agentloop.errors import AgentLoopError
from agentloop.orchestrator import Orchestrator
from agentloop.tools.protocol import ToolSource


def load_tool_source(path: str) -> ToolSource:
    """Import a tool source from a ``module:attribute`` path."""
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Expected 'module:attribute', got '{path}'")

    module = importlib.import_module(module_name)
    try:
        source = getattr(module, attribute)
    except AttributeError as e:
        raise ValueError(f"Module '{module_name}' has no attribute '{attribute}'") from e

    if not hasattr(source, "discover_tools"):
        raise ValueError(f"'{path}' is not a tool source")
    return source


async def run_prompt(args: argparse.Namespace) -> str:
    overrides = {}
    if args.model:
        overrides["openai_model"] = args.model
    if args.max_iterations:
        overrides["max_iterations"] = args.max_iterations
    if args.memory:
        overrides["memory_backend"] = args.memory
    config = AgentLoopConfig(**overrides)

    tool_source = load_tool_source(args.tool_source) if args.tool_source else None
    async with Orchestrator.from_config(config, tool_source=tool_source) as agent:
        result = await agent.run(
            args.prompt,
            tags=args.tags,
            memory_id=args.memory_id,
            system_message=args.system,
        )
    return result.text


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="agentloop",
        description="agentloop: tool-calling orchestration for chat models",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    run_parser = sub.add_parser("run", help="Answer one prompt, calling tools as needed")
    run_parser.add_argument("prompt", help="User message")
    run_parser.add_argument("--tags", help="Comma-separated tool tags to expose")
    run_parser.add_argument("--system", help="System message")
    run_parser.add_argument(
        "--tool-source",
        help="Tool source to load, as module:attribute",
    )
    run_parser.add_argument("--model", help="Chat model name (default from config)")
    run_parser.add_argument("--max-iterations", type=int, help="Model call limit")
    run_parser.add_argument(
        "--memory",
        choices=["none", "memory", "kuzu"],
        help="Session memory backend (default from config)",
    )
    run_parser.add_argument("--memory-id", help="Session id for memory")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "run":
        try:
            text = asyncio.run(run_prompt(args))
        except (AgentLoopError, ValueError, ImportError) as e:
            print(f"error: {e}", file=sys.stderr)
            sys.exit(2)
        print(text)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
