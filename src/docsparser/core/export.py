"""Export: write the parsed API containers as a JSON document"""

import json
from pathlib import Path


def dump_api(containers: list[dict]) -> str:
    """Serialize containers with two-space indentation (DocumentationTag members encode as their str value)."""
    return json.dumps(containers, indent=2)


def write_api(containers: list[dict], output_dir: Path, out_file: str) -> Path:
    """Write containers to output_dir/out_file, creating output_dir. Returns the written path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / out_file
    path.write_text(dump_api(containers) + "\n", encoding='utf-8')
    return path
