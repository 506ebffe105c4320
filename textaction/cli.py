import argparse
import os
import sys
from pathlib import Path

from rich.console import Console

from .action import run_action
from .catalog import fetch_models, render_models
from .errors import TextActionError
from .events import EventBus
from .options import DEFAULT_MODEL, ENV_VARS, OPENROUTER_MODELS_URL, RESPONSE_MODES, load_endpoint, load_options
from .sinks.console import ConsoleSink


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="textaction", description="Send selected text to a chat-completion API")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="complete the selected text")
    run.add_argument("text", nargs="?", help="selected text (default: POPCLIP_TEXT, then stdin)")
    run.add_argument("--mode", choices=RESPONSE_MODES, dest="response_handling", help="what to do with the reply")
    run.add_argument("--model", help="model id, e.g. google/gemini-3-flash-preview")
    run.add_argument("--system-prompt", dest="system_prompt", help="system message")
    run.add_argument("--user-prompt", dest="user_prompt", help="user prompt; {{text}} is replaced by the selection")
    run.add_argument("--temperature", help="sampling temperature, clamped to [0, 2]")
    run.add_argument("--max-tokens", dest="max_tokens", help="completion token limit")
    run.add_argument("--api-url", dest="api_url", help="chat completions endpoint")
    run.add_argument("--timeout-ms", dest="timeout_ms", help="request timeout in milliseconds")
    run.add_argument("--events", type=Path, help="write the event log to this JSON file")
    run.add_argument("--verbose", action="store_true", help="echo events to stderr")

    models = sub.add_parser("models", help="list available models")
    models.add_argument("filter", nargs="?", default="", help="optional substring filter on the model id")
    return parser


def read_selection(text, env=None, stdin=None) -> str:
    env = os.environ if env is None else env
    stdin = stdin or sys.stdin
    if text is not None:
        return text
    if env.get("POPCLIP_TEXT") is not None:
        return env["POPCLIP_TEXT"]
    if not stdin.isatty():
        return stdin.read().rstrip("\n")
    return ""


def cmd_run(args, env=None, sink=None, err_console=None) -> int:
    env = os.environ if env is None else env
    err_console = err_console or Console(stderr=True)
    verbose = args.verbose or env.get("TEXTACTION_DEBUG") == "1"
    events = EventBus(echo=err_console if verbose else None)

    overrides = {name: getattr(args, name, None) for name in ENV_VARS}
    options = load_options(env, overrides)
    endpoint = load_endpoint(env, {"api_url": args.api_url, "timeout_ms": args.timeout_ms})
    sink = sink or ConsoleSink(err_console=err_console)

    try:
        run_action(
            read_selection(args.text, env),
            options,
            sink,
            events=events,
            console=err_console,
            api_url=endpoint.api_url,
            timeout_ms=endpoint.timeout_ms,
            referer=endpoint.referer,
            title=endpoint.title,
        )
    except TextActionError:
        return 1
    finally:
        if args.events:
            events.flush_to(args.events)
    return 0


def cmd_models(args, env=None, console=None) -> int:
    env = os.environ if env is None else env
    options = load_options(env)
    url = env.get("TEXTACTION_MODELS_URL", "").strip() or OPENROUTER_MODELS_URL
    models = fetch_models(options.api_key.strip(), url)
    selected = (options.model or "").strip() or DEFAULT_MODEL
    render_models(models, args.filter or "", selected_model=selected, console=console)
    return 0


def main(argv=None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "run":
        return cmd_run(args)
    if args.command == "models":
        return cmd_models(args)
    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
