from collections.abc import Callable
from pathlib import Path

import pytest

import swift_bindgen
from conftest import RecordingRunner


def test_run_without_out_dir_or_script_starts_bare_interpreter(
    make_runner: Callable[..., RecordingRunner],
) -> None:
    runner = make_runner()

    swift_bindgen.run_script(runner=runner)

    assert runner.calls == [("swift", [])]


def test_run_with_script_only_appends_script(
    make_runner: Callable[..., RecordingRunner],
) -> None:
    runner = make_runner()

    swift_bindgen.run_script(script_file=Path("check.swift"), runner=runner)

    assert runner.calls == [("swift", ["check.swift"])]


def test_run_with_empty_out_dir_has_only_base_flags(
    tmp_path: Path,
    make_runner: Callable[..., RecordingRunner],
) -> None:
    runner = make_runner()

    swift_bindgen.run_script(tmp_path, runner=runner)

    assert runner.calls == [("swift", ["-I", str(tmp_path), "-L", str(tmp_path)])]


def test_run_scans_out_dir_for_modules_and_libraries(
    tmp_path: Path,
    make_runner: Callable[..., RecordingRunner],
) -> None:
    (tmp_path / "beta.swiftmodule-dir").mkdir()
    (tmp_path / "alpha.swiftmodule-dir").mkdir()
    (tmp_path / "libbeta.so").write_bytes(b"")
    (tmp_path / "libalpha.dylib").write_bytes(b"")
    (tmp_path / "alpha.swift").write_text("", encoding="utf-8")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "libgamma.so").write_bytes(b"")
    script = tmp_path / "check.swift"
    runner = make_runner()

    swift_bindgen.run_script(tmp_path, script, runner=runner, platform="linux")

    assert runner.calls == [
        (
            "swift",
            [
                "-I",
                str(tmp_path),
                "-L",
                str(tmp_path),
                "-Xcc",
                f"-fmodule-map-file={tmp_path / 'alpha.swiftmodule-dir' / 'uniffi.modulemap'}",
                "-Xcc",
                f"-fmodule-map-file={tmp_path / 'beta.swiftmodule-dir' / 'uniffi.modulemap'}",
                f"-l{tmp_path / 'libalpha.dylib'}",
                f"-l{tmp_path / 'libbeta.so'}",
                str(script),
            ],
        )
    ]


def test_discover_build_products_sorts_injected_listing(
    make_scanner: Callable[[dict[str, list[Path]]], swift_bindgen.DirectoryScanner],
) -> None:
    scanner = make_scanner(
        {
            "swiftmodule-dir": [Path("/out/z.swiftmodule-dir"), Path("/out/a.swiftmodule-dir")],
            "so": [Path("/out/libz.so")],
            "dylib": [Path("/out/liba.dylib")],
            "dll": [Path("/out/ignored.dll")],
        }
    )

    products = swift_bindgen.discover_build_products(Path("/out"), scanner, platform="linux")

    assert products.module_dirs == (
        Path("/out/a.swiftmodule-dir"),
        Path("/out/z.swiftmodule-dir"),
    )
    assert products.libraries == (Path("/out/liba.dylib"), Path("/out/libz.so"))


def test_discover_build_products_on_windows_only_picks_dlls(
    make_scanner: Callable[[dict[str, list[Path]]], swift_bindgen.DirectoryScanner],
) -> None:
    scanner = make_scanner(
        {"so": [Path("/out/libz.so")], "dll": [Path("/out/mylib.dll")]}
    )

    products = swift_bindgen.discover_build_products(Path("/out"), scanner, platform="win32")

    assert products.libraries == (Path("/out/mylib.dll"),)


def test_run_script_uses_injected_scanner(
    make_runner: Callable[..., RecordingRunner],
    make_scanner: Callable[[dict[str, list[Path]]], swift_bindgen.DirectoryScanner],
) -> None:
    runner = make_runner()
    scanner = make_scanner({"swiftmodule-dir": [Path("/out/mylib.swiftmodule-dir")]})

    swift_bindgen.run_script(Path("/out"), runner=runner, scanner=scanner, platform="darwin")

    assert runner.calls == [
        (
            "swift",
            [
                "-I",
                "/out",
                "-L",
                "/out",
                "-Xcc",
                "-fmodule-map-file=/out/mylib.swiftmodule-dir/uniffi.modulemap",
            ],
        )
    ]


def test_run_missing_out_dir_is_an_io_error(
    tmp_path: Path,
    make_runner: Callable[..., RecordingRunner],
) -> None:
    runner = make_runner()
    missing = tmp_path / "missing"

    with pytest.raises(swift_bindgen.BindingsIOError) as exc_info:
        swift_bindgen.run_script(missing, runner=runner)

    assert exc_info.value.path == missing
    assert runner.calls == []


def test_run_nonzero_exit_is_a_toolchain_error(
    tmp_path: Path,
    make_runner: Callable[..., RecordingRunner],
) -> None:
    runner = make_runner(returncode=2)

    with pytest.raises(swift_bindgen.ToolchainError) as exc_info:
        swift_bindgen.run_script(tmp_path, tmp_path / "check.swift", runner=runner)

    assert exc_info.value.tool == "swift"
    assert exc_info.value.returncode == 2


def test_scan_directory_is_not_recursive(tmp_path: Path) -> None:
    (tmp_path / "libtop.so").write_bytes(b"")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "libdeep.so").write_bytes(b"")

    assert swift_bindgen.scan_directory(tmp_path, "so") == [tmp_path / "libtop.so"]
