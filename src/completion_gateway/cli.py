"""completion-gateway operator CLI.

Provides the ``completion-gateway`` console script and the
``python -m completion_gateway`` entry point.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from completion_gateway.config import GatewaySettings
from completion_gateway.llm.errors import GatewayError
from completion_gateway.llm.gateway import CompletionGateway
from completion_gateway.llm.tokens import estimate_token_count
from completion_gateway.llm.types import ChatMessage, GenerationOptions
from completion_gateway.obs.setup import configure_logging
from completion_gateway.version import __version__

# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_OK = 0
EXIT_INVALID_KEY = 1
EXIT_BAD_ARGS = 2
EXIT_PROVIDER_ERROR = 3
EXIT_NOT_CONFIGURED = 4


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _output(data: Any, *, fmt: str = "json", pretty: bool = False) -> None:
    if fmt == "jsonl":
        if isinstance(data, list):
            for item in data:
                print(json.dumps(item, default=str))
        else:
            print(json.dumps(data, default=str))
    else:
        indent = 2 if pretty else None
        print(json.dumps(data, default=str, indent=indent))


def _err(msg: str) -> None:
    print(msg, file=sys.stderr)


def _make_gateway(settings: GatewaySettings) -> CompletionGateway:
    return CompletionGateway(settings)


def _settings_from_args(args: argparse.Namespace) -> GatewaySettings:
    overrides: dict[str, Any] = {}
    if getattr(args, "api_key", None):
        overrides["api_key"] = args.api_key
    if getattr(args, "base_url", None):
        overrides["base_url"] = args.base_url
    return GatewaySettings(**overrides)


def _parse_message(raw: str) -> ChatMessage:
    """Parse ``role:content``; a bare string is a user message."""
    role, sep, content = raw.partition(":")
    if sep and role in ("system", "user", "assistant"):
        return ChatMessage(role=role, content=content)
    return ChatMessage(role="user", content=raw)


def _messages_from_args(args: argparse.Namespace) -> list[ChatMessage]:
    messages: list[ChatMessage] = []
    if getattr(args, "system", None):
        messages.append(ChatMessage(role="system", content=args.system))
    messages.extend(_parse_message(m) for m in args.message)
    return messages


def _options_from_args(args: argparse.Namespace) -> GenerationOptions:
    return GenerationOptions(
        model=args.model,
        temperature=args.temperature,
        max_tokens=args.max_tokens,
        top_p=args.top_p,
    )


async def _with_gateway(args: argparse.Namespace, action: Any) -> int:
    try:
        gateway = _make_gateway(_settings_from_args(args))
    except RuntimeError as exc:
        _err(str(exc))
        return EXIT_NOT_CONFIGURED
    async with gateway:
        try:
            return await action(gateway)
        except GatewayError as exc:
            _err(f"{exc.kind.value}: {exc.message}")
            return EXIT_PROVIDER_ERROR


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _cmd_validate(args: argparse.Namespace) -> int:
    async def action(gateway: CompletionGateway) -> int:
        valid = await gateway.validate_api_key()
        _output({"valid": valid}, fmt=args.format, pretty=args.pretty)
        return EXIT_OK if valid else EXIT_INVALID_KEY

    return await _with_gateway(args, action)


async def _cmd_models(args: argparse.Namespace) -> int:
    async def action(gateway: CompletionGateway) -> int:
        models = await gateway.get_available_models()
        _output([m.model_dump(mode="json") for m in models], fmt=args.format, pretty=args.pretty)
        return EXIT_OK

    return await _with_gateway(args, action)


async def _cmd_chat(args: argparse.Namespace) -> int:
    messages = _messages_from_args(args)
    options = _options_from_args(args)

    async def action(gateway: CompletionGateway) -> int:
        if args.stream:
            stream = await gateway.create_streaming_chat_completion(messages, options)
            async with stream:
                async for chunk in stream:
                    sys.stdout.write(chunk)
                    sys.stdout.flush()
            sys.stdout.write("\n")
            return EXIT_OK
        result = await gateway.create_chat_completion(messages, options)
        _output(result.model_dump(mode="json"), fmt=args.format, pretty=args.pretty)
        return EXIT_OK

    return await _with_gateway(args, action)


async def _cmd_embed(args: argparse.Namespace) -> int:
    inputs: str | list[str] = args.text[0] if len(args.text) == 1 else list(args.text)

    async def action(gateway: CompletionGateway) -> int:
        result = await gateway.create_embedding(inputs, model=args.model)
        _output(result.model_dump(mode="json"), fmt=args.format, pretty=args.pretty)
        return EXIT_OK

    return await _with_gateway(args, action)


def _cmd_estimate(args: argparse.Namespace) -> int:
    messages = _messages_from_args(args)
    _output({"estimated_tokens": estimate_token_count(messages)}, fmt=args.format, pretty=args.pretty)
    return EXIT_OK


# ---------------------------------------------------------------------------
# Argument parser construction
# ---------------------------------------------------------------------------


def _add_message_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--system", default=None, help="System prompt")
    parser.add_argument(
        "message",
        nargs="+",
        help="Message as 'role:content' (role is system, user or assistant); "
        "plain text is sent as a user message",
    )


def _build_parser() -> argparse.ArgumentParser:
    # Common flags shared by all leaf subcommands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--format", choices=["json", "jsonl"], default="json", help="Output format"
    )
    common.add_argument("--pretty", action="store_true", default=False, help="Pretty-print output")
    common.add_argument("-v", "--verbose", action="store_true", help="Log gateway activity")

    # Flags for commands that talk to the provider
    remote = argparse.ArgumentParser(add_help=False)
    remote.add_argument("--api-key", default=None, help="API key override (default: OPENAI_API_KEY)")
    remote.add_argument("--base-url", default=None, help="API base URL override")

    parser = argparse.ArgumentParser(
        prog="completion-gateway",
        description="completion-gateway operator CLI",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("validate", parents=[common, remote], help="Check the configured API key")
    subparsers.add_parser("models", parents=[common, remote], help="List chat-capable models")

    chat = subparsers.add_parser("chat", parents=[common, remote], help="Run a chat completion")
    _add_message_args(chat)
    chat.add_argument("--model", default=None, help="Model override")
    chat.add_argument("--temperature", type=float, default=None, help="Sampling temperature")
    chat.add_argument("--max-tokens", type=int, default=None, help="Completion token limit")
    chat.add_argument("--top-p", type=float, default=None, help="Nucleus sampling mass")
    chat.add_argument("--stream", action="store_true", help="Print chunks as they arrive")

    embed = subparsers.add_parser("embed", parents=[common, remote], help="Embed one or more texts")
    embed.add_argument("text", nargs="+", help="Text to embed")
    embed.add_argument("--model", default=None, help="Embedding model override")

    estimate = subparsers.add_parser(
        "estimate", parents=[common], help="Estimate prompt tokens (offline)"
    )
    _add_message_args(estimate)

    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns an integer exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_BAD_ARGS

    if args.verbose:
        configure_logging(logging.DEBUG, secrets=[getattr(args, "api_key", None) or ""])

    if args.command == "estimate":
        return _cmd_estimate(args)
    if args.command == "validate":
        return asyncio.run(_cmd_validate(args))
    if args.command == "models":
        return asyncio.run(_cmd_models(args))
    if args.command == "chat":
        return asyncio.run(_cmd_chat(args))
    if args.command == "embed":
        return asyncio.run(_cmd_embed(args))

    parser.print_help()
    return EXIT_BAD_ARGS
