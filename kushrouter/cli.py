"""KushRouter CLI – quick completions, token counts, cost estimates and usage reports."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from kushrouter.client import DEFAULT_COMPLETE_MODEL, KushRouter
from kushrouter.errors import ConfigurationError, KushRouterError
from kushrouter.logging import configure_logging


async def _complete(router: KushRouter, args: argparse.Namespace) -> int:
    result = await router.complete(
        args.prompt,
        model=args.model,
        system=args.system,
        max_tokens=args.max_tokens,
        stream=args.stream,
    )
    if isinstance(result, str):
        print(result)
        return 0
    async for delta in result:
        print(delta, end="", flush=True)
    print()
    return 0


async def _tokenize(router: KushRouter, args: argparse.Namespace) -> int:
    result = await router.tokenize(args.text, model=args.model)
    print(f"{result.tokens} tokens ({result.model})")
    return 0


async def _cost(router: KushRouter, args: argparse.Namespace) -> int:
    cost = await router.estimate_cost({"model": args.model, "message": args.text, "max_tokens": args.max_tokens})
    print(f"~${cost:.6f} (estimate: assumes {args.max_tokens} output tokens)")
    return 0


async def _usage(router: KushRouter, args: argparse.Namespace) -> int:
    usage = await router.get_usage()
    print(f"Requests: {usage.total_requests}")
    print(f"Tokens:   {usage.total_tokens}")
    print(f"Cost:     ${usage.total_cost:.4f}")
    for r in usage.recent_requests:
        print(f"  {r.timestamp}  {r.model:<32} {r.tokens:>8}  ${r.cost:.4f}")
    return 0


async def _analytics(router: KushRouter, args: argparse.Namespace) -> int:
    report = await router.get_analytics(days=args.days, include_hourly=args.hourly, group_by=args.group_by)
    print(json.dumps({"success": report.success, "data": report.data, "meta": report.meta}, indent=2))
    return 0


async def _run(args: argparse.Namespace) -> int:
    async with KushRouter.from_env() as router:
        return await args.func(router, args)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="kushrouter", description="Command-line access to the KushRouter API")
    parser.add_argument("--log-level", help="Log level for request/retry events (default: WARNING)")
    sub = parser.add_subparsers(dest="command")

    comp = sub.add_parser("complete", help="Complete a single prompt")
    comp.add_argument("prompt", help="Prompt text")
    comp.add_argument("--model", "-m", default=DEFAULT_COMPLETE_MODEL, help="Model ID")
    comp.add_argument("--system", help="System prompt")
    comp.add_argument("--max-tokens", type=int, default=1000, help="Output token limit")
    comp.add_argument("--stream", "-s", action="store_true", help="Print text as it streams in")
    comp.set_defaults(func=_complete)

    tok = sub.add_parser("tokenize", help="Count tokens for a piece of text")
    tok.add_argument("text")
    tok.add_argument("--model", "-m", default=DEFAULT_COMPLETE_MODEL)
    tok.set_defaults(func=_tokenize)

    cost = sub.add_parser("cost", help="Estimate request cost from the static price table")
    cost.add_argument("text")
    cost.add_argument("--model", "-m", default=DEFAULT_COMPLETE_MODEL)
    cost.add_argument("--max-tokens", type=int, default=500, help="Assumed output tokens")
    cost.set_defaults(func=_cost)

    usage = sub.add_parser("usage", help="Show account usage")
    usage.set_defaults(func=_usage)

    ana = sub.add_parser("analytics", help="Show usage analytics as JSON")
    ana.add_argument("--days", type=int, default=30)
    ana.add_argument("--hourly", action="store_true", help="Include hourly distribution")
    ana.add_argument("--group-by", choices=["day", "hour", "model"], default="day")
    ana.set_defaults(func=_analytics)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(0)

    configure_logging(args.log_level)

    try:
        code = asyncio.run(_run(args))
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print("Set KUSHROUTER_API_KEY in your environment.", file=sys.stderr)
        code = 1
    except KushRouterError as exc:
        status = f" (HTTP {exc.status})" if exc.status else ""
        print(f"Error [{exc.kind.value}]{status}: {exc.message}", file=sys.stderr)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
