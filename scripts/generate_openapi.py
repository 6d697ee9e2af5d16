"""Write the service's OpenAPI document for front-end client generation."""

import argparse
import json
from pathlib import Path

from smart_tutor.main import app


def main() -> None:
    parser = argparse.ArgumentParser(description="Export openapi.json")
    parser.add_argument("--output", type=Path, default=Path("openapi.json"))
    args = parser.parse_args()

    schema = app.openapi()
    args.output.write_text(json.dumps(schema, indent=2, ensure_ascii=False) + "\n")
    print(f"Generated {args.output} ({len(schema['paths'])} paths)")


if __name__ == "__main__":
    main()
