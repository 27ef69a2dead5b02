from pathlib import Path
import sys

REPO = Path(__file__).resolve().parents[1]
SRC = REPO / "src"
if str(SRC) not in sys.path:
  sys.path.insert(0, str(SRC))

from tip_tracker.cli import main

if __name__ == "__main__":
  raise SystemExit(main(["--root", str(REPO), *sys.argv[1:]]))
