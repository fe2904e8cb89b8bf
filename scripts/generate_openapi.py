"""Write the chat API's OpenAPI schema for the frontend client generator."""

import argparse
import json
from pathlib import Path

from agentchat.main import app


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("openapi.json"),
        help="Where to write the schema (default: openapi.json)",
    )
    args = parser.parse_args()

    schema = app.openapi()
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(json.dumps(schema, indent=2, ensure_ascii=False) + "\n")
    operations = [op for path in schema["paths"].values() for op in path.values()]
    print(f"Generated {args.output} ({len(operations)} operations)")


if __name__ == "__main__":
    main()
