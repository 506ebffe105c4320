import os
import sys

from textaction.cli import main


def _probe(msg: str) -> None:
    if os.environ.get("TEXTACTION_DEBUG_PROBE") == "1":
        print(msg, file=sys.stderr)


if __name__ == "__main__":
    _probe("DEBUG PROBE [START]: launcher loaded")
    try:
        code = main()
    except Exception:
        import traceback

        print("CRITICAL ERROR CAUGHT:", file=sys.stderr)
        traceback.print_exc()
        sys.exit(1)
    _probe(f"DEBUG PROBE [EXIT]: code {code}")
    sys.exit(code)
