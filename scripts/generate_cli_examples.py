from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "120", "--height", "90"]


@dataclass
class Expected:
    path: Path
    header: str | None = None


@dataclass
class Example:
    name: str
    args: list[str]
    expected: list[Expected]
    clean: list[Path] | None = None

    def full_args(self) -> list[str]:
        return ["python", "render.py", *self.args]


EXAMPLES: list[Example] = [
    Example(
        name="default",
        args=[*BASE_ARGS, "--output", str(EXAMPLES_ROOT / "default" / "cardioid.pgm")],
        expected=[Expected(EXAMPLES_ROOT / "default" / "cardioid.pgm", header="P2")],
        clean=[EXAMPLES_ROOT / "default"],
    ),
    Example(
        name="naive",
        args=[*BASE_ARGS, "--naive", "--output", str(EXAMPLES_ROOT / "naive" / "cardioid.pgm")],
        expected=[Expected(EXAMPLES_ROOT / "naive" / "cardioid.pgm", header="P2")],
        clean=[EXAMPLES_ROOT / "naive"],
    ),
    Example(
        name="x-center",
        args=[*BASE_ARGS, "--x-center", "-1.25", "--zoom", "8", "--output", str(EXAMPLES_ROOT / "x-center" / "period-two.pgm")],
        expected=[Expected(EXAMPLES_ROOT / "x-center" / "period-two.pgm", header="P2")],
        clean=[EXAMPLES_ROOT / "x-center"],
    ),
    Example(
        name="y-center",
        args=[*BASE_ARGS, "--y-center", "0.65", "--zoom", "8", "--output", str(EXAMPLES_ROOT / "y-center" / "upper-bulb.pgm")],
        expected=[Expected(EXAMPLES_ROOT / "y-center" / "upper-bulb.pgm", header="P2")],
        clean=[EXAMPLES_ROOT / "y-center"],
    ),
    Example(
        name="max-iterations",
        args=[*BASE_ARGS, "--max-iterations", "1000", "--output", str(EXAMPLES_ROOT / "max-iterations" / "deep.pgm")],
        expected=[Expected(EXAMPLES_ROOT / "max-iterations" / "deep.pgm", header="P2")],
        clean=[EXAMPLES_ROOT / "max-iterations"],
    ),
    Example(
        name="png",
        args=[*BASE_ARGS, "--output", str(EXAMPLES_ROOT / "png" / "counts.png")],
        expected=[Expected(EXAMPLES_ROOT / "png" / "counts.png")],
        clean=[EXAMPLES_ROOT / "png"],
    ),
    Example(
        name="format",
        args=[*BASE_ARGS, "--format", "tiff", "--output", str(EXAMPLES_ROOT / "format" / "counts")],
        expected=[Expected(EXAMPLES_ROOT / "format" / "counts.tiff")],
        clean=[EXAMPLES_ROOT / "format"],
    ),
    Example(
        name="verbose",
        args=[*BASE_ARGS, "--verbose", "--output", str(EXAMPLES_ROOT / "verbose" / "diagnostic.pgm")],
        expected=[Expected(EXAMPLES_ROOT / "verbose" / "diagnostic.pgm", header="P2")],
        clean=[EXAMPLES_ROOT / "verbose"],
    ),
]


def _reset_outputs(example: Example) -> None:
    """Remove stale outputs of ``example`` and create the directories it writes into."""

    for stale in example.clean or []:
        if stale.is_dir():
            shutil.rmtree(stale)
        else:
            stale.unlink(missing_ok=True)
    for parent in {expected.path.parent for expected in example.expected}:
        parent.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    for expected in example.expected:
        if not expected.path.is_file():
            raise RuntimeError(f"Expected file {expected.path} was not created")
        if expected.header is not None:
            with expected.path.open() as handle:
                first_line = handle.readline().strip()
            if first_line != expected.header:
                raise RuntimeError(f"{expected.path} starts with {first_line!r}, expected {expected.header!r}")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _reset_outputs(example)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
