import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

GENERATOR_DIR = Path(__file__).resolve().parent.parent
if str(GENERATOR_DIR) not in sys.path:
    sys.path.insert(0, str(GENERATOR_DIR))

import swift_bindgen  # noqa: E402


class RecordingRunner:
    """Process runner that records invocations instead of spawning them."""

    def __init__(
        self, returncode: int = 0, stderr: str = "", error: OSError | None = None
    ):
        self.returncode = returncode
        self.stderr = stderr
        self.error = error
        self.calls: list[tuple[str, list[str]]] = []

    def __call__(
        self, program: str, args: Sequence[str]
    ) -> swift_bindgen.ProcessResult:
        self.calls.append((program, list(args)))
        if self.error is not None:
            raise self.error
        return swift_bindgen.ProcessResult(returncode=self.returncode, stderr=self.stderr)


@pytest.fixture
def make_runner() -> Callable[..., RecordingRunner]:
    return RecordingRunner


@pytest.fixture
def make_scanner() -> Callable[[dict[str, list[Path]]], swift_bindgen.DirectoryScanner]:
    def _make_scanner(listing: dict[str, list[Path]]) -> swift_bindgen.DirectoryScanner:
        def _scan(directory: Path, extension: str) -> list[Path]:
            return list(listing.get(extension, []))

        return _scan

    return _make_scanner


@pytest.fixture
def make_interface() -> Callable[..., swift_bindgen.ComponentInterface]:
    def _make_interface(
        namespace: str = "mylib",
        functions: tuple[swift_bindgen.Function, ...] | None = None,
    ) -> swift_bindgen.ComponentInterface:
        if functions is None:
            functions = (
                swift_bindgen.Function(
                    "add",
                    (
                        swift_bindgen.Argument("a", "u32"),
                        swift_bindgen.Argument("b", "u32"),
                    ),
                    "u32",
                ),
                swift_bindgen.Function("reset_all", ()),
            )
        return swift_bindgen.ComponentInterface(namespace, functions)

    return _make_interface


@pytest.fixture
def interface_manifest(tmp_path: Path) -> Path:
    manifest = tmp_path / "mylib.xml"
    manifest.write_text(
        '<interface namespace="mylib">\n'
        '  <function name="add" returns="u32">\n'
        '    <argument name="a" type="u32"/>\n'
        '    <argument name="b" type="u32"/>\n'
        "  </function>\n"
        '  <function name="reset_all"/>\n'
        "</interface>\n",
        encoding="utf-8",
    )
    return manifest
