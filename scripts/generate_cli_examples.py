from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--cols", "192", "--rows", "128", "--scale", "2", "--chunks", "16"]


@dataclass
class Example:
    name: str
    args: list[str]
    output: Path

    def full_args(self) -> list[str]:
        return [sys.executable, "mandel.py", *self.args, "--output", str(self.output)]


def _example(name: str, filename: str, *args: str) -> Example:
    return Example(name=name, args=[*BASE_ARGS, *args], output=EXAMPLES_ROOT / name / filename)


EXAMPLES: list[Example] = [
    _example("defaults", "reference.png"),
    _example("cols", "wide.png", "--cols", "288"),
    _example("rows", "short.png", "--rows", "64"),
    _example("scale", "no-supersampling.png", "--scale", "1"),
    _example("scale", "heavy-supersampling.png", "--scale", "6"),
    _example("workers", "single-worker.png", "--workers", "1"),
    _example("chunks", "one-chunk.png", "--chunks", "1"),
    _example("chunks", "more-chunks-than-rows.png", "--chunks", "1000"),
    _example("max-iterations", "shallow.png", "--max-iterations", "32"),
    _example("escape-radius", "classic-bound.png", "--escape-radius", "2"),
    _example("viewport", "seahorse-valley.png",
             "--real-min", "-0.8", "--real-max", "-0.7", "--imag-min", "0.05", "--imag-max", "0.15"),
    _example("lock-aspect", "locked.png", "--cols", "256", "--lock-aspect"),
    _example("backend", "pure-python.png", "--backend", "python", "--cols", "48", "--rows", "32"),
    _example("verbose", "diagnostic.png", "--verbose"),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    _ensure_clean({example.output.parent for example in EXAMPLES})
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}: {example.output.name}")
        example.output.parent.mkdir(parents=True, exist_ok=True)
        subprocess.run(example.full_args(), check=True)
        if not example.output.is_file():
            raise RuntimeError(f"Expected file {example.output} was not created")
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
