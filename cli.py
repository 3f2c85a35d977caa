import sys
from pathlib import Path

from launchloom.services.layout import DocumentSpec
from launchloom.services.playbook_pipeline import render_playbook


def main() -> None:
    in_path = Path(sys.argv[1])
    out_path = Path(sys.argv[2])
    tier = sys.argv[3] if len(sys.argv) > 3 else "standard"
    title = sys.argv[4] if len(sys.argv) > 4 else in_path.stem
    raw = in_path.read_text(encoding="utf-8")
    spec = DocumentSpec(title=title, tier=tier)
    out_path.write_bytes(render_playbook(raw, spec))
    print(f"Wrote {spec.tier.value} playbook → {out_path}")


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python cli.py content.json output.pdf [free|standard|pro] [product name]")
        sys.exit(1)
    main()
