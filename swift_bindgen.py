"""Swift bindings generator for native components.

Renders the bridging header, clang module map and Swift wrapper for a
component interface, then optionally drives `swiftc` and `swift` to build
and exercise the generated module.

Usage:
    python swift_bindgen.py generate path/to/mylib.xml --out-dir build
    python swift_bindgen.py compile path/to/mylib.xml --out-dir build
    python swift_bindgen.py run --out-dir build tests/check.swift
    python swift_bindgen.py test path/to/mylib.xml tests/check.swift
"""

import argparse
import re
import subprocess
import sys
import xml.etree.ElementTree as ET
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

# ===--- Errors ---=== #


class BindingsError(Exception):
    """Base class for every failure raised by the bindings pipeline."""


class RenderError(BindingsError):
    def __init__(self, artifact: str, reason: str):
        super().__init__(f"failed to render Swift {artifact}: {reason}")
        self.artifact = artifact
        self.reason = reason


class BindingsIOError(BindingsError):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class ToolchainError(BindingsError):
    def __init__(self, tool: str, returncode: int | None = None, diagnostics: str = ""):
        if returncode is None:
            message = f"running `{tool}` failed: could not start process"
        else:
            message = f"running `{tool}` failed with exit status {returncode}"
        if diagnostics:
            message = f"{message}\n{diagnostics.rstrip()}"
        super().__init__(message)
        self.tool = tool
        self.returncode = returncode
        self.diagnostics = diagnostics


# ===--- CLI config contracts ---=== #


@dataclass(frozen=True)
class GenerateConfig:
    interface_file: Path
    out_dir: Path


@dataclass(frozen=True)
class CompileConfig:
    interface_file: Path
    out_dir: Path
    swiftc: str


@dataclass(frozen=True)
class RunConfig:
    out_dir: Path | None
    script_file: Path | None
    swift: str


@dataclass(frozen=True)
class PipelineConfig:
    interface_file: Path
    out_dir: Path
    script_file: Path
    swiftc: str
    swift: str


CommandConfig = GenerateConfig | CompileConfig | RunConfig | PipelineConfig

VALID_ERROR_CODES = {
    "MISSING_INTERFACE",
    "PATH_NOT_FOUND",
    "INVALID_SCRIPT",
}


class ConfigError(Exception):
    def __init__(self, code: str, message: str, suggestion: str | None = None):
        if code not in VALID_ERROR_CODES:
            raise ValueError(f"Unknown config error code: {code}")
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate, compile and run Swift bindings for a native component"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="write the Swift artifacts")
    generate.add_argument("interface", type=Path)
    generate.add_argument("--out-dir", type=Path, default=None)

    compile_ = subparsers.add_parser("compile", help="build the generated module")
    compile_.add_argument("interface", type=Path)
    compile_.add_argument("--out-dir", type=Path, default=None)
    compile_.add_argument("--swiftc", type=str, default=SWIFTC)

    run = subparsers.add_parser("run", help="run a Swift script against built modules")
    run.add_argument("script", type=Path, nargs="?", default=None)
    run.add_argument("--out-dir", type=Path, default=None)
    run.add_argument("--swift", type=str, default=SWIFT)

    test = subparsers.add_parser("test", help="generate, compile, then run a script")
    test.add_argument("interface", type=Path)
    test.add_argument("script", type=Path)
    test.add_argument("--out-dir", type=Path, default=None)
    test.add_argument("--swiftc", type=str, default=SWIFTC)
    test.add_argument("--swift", type=str, default=SWIFT)

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_argument_parser()
    return parser.parse_args(argv)


def validate_interface_file(path: Path | None) -> Path:
    if path is None:
        raise ConfigError(
            "MISSING_INTERFACE",
            "An interface manifest is required.",
            "Pass the manifest path, e.g. swift_bindgen.py generate mylib.xml",
        )
    if not path.is_file():
        raise ConfigError(
            "PATH_NOT_FOUND",
            f"Interface manifest does not exist: {path}",
            "Provide an existing interface manifest file.",
        )
    return path


def validate_script_file(path: Path) -> Path:
    if not path.is_file():
        raise ConfigError(
            "INVALID_SCRIPT",
            f"Script file does not exist: {path}",
            "Pass the path of an existing .swift script, or omit it to start a REPL.",
        )
    return path


def validate_config(args: argparse.Namespace) -> CommandConfig:
    if args.command == "run":
        script_file = None
        if args.script is not None:
            script_file = validate_script_file(args.script)
        if args.out_dir is not None and not args.out_dir.is_dir():
            raise ConfigError(
                "PATH_NOT_FOUND",
                f"Output directory does not exist: {args.out_dir}",
                "Run `generate` and `compile` first, or pass an existing --out-dir.",
            )
        return RunConfig(out_dir=args.out_dir, script_file=script_file, swift=args.swift)

    interface_file = validate_interface_file(args.interface)
    out_dir = args.out_dir if args.out_dir is not None else interface_file.parent

    if args.command == "generate":
        return GenerateConfig(interface_file=interface_file, out_dir=out_dir)
    if args.command == "compile":
        return CompileConfig(
            interface_file=interface_file, out_dir=out_dir, swiftc=args.swiftc
        )
    return PipelineConfig(
        interface_file=interface_file,
        out_dir=out_dir,
        script_file=validate_script_file(args.script),
        swiftc=args.swiftc,
        swift=args.swift,
    )


def build_config(argv: list[str] | None = None) -> CommandConfig:
    return validate_config(parse_args(argv))


# ===--- Constants ---=== #

SWIFTC: str = "swiftc"
SWIFT: str = "swift"

MODULE_DIR_EXTENSION: str = "swiftmodule-dir"
"""Suffix of the per-namespace directory holding the header and module map.

Swift rejects more than one umbrella header declaration in a directory, so
each component gets its own directory."""

MODULE_MAP_FILENAME: str = "uniffi.modulemap"
SOURCE_EXTENSION: str = "swift"
HEADER_SUFFIX: str = "-Bridging-Header.h"

ARTIFACT_HEADER: str = "header"
ARTIFACT_LIBRARY: str = "library"
ARTIFACT_MODULE_MAP: str = "module-map"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def dylib_extension(platform: str = sys.platform) -> str:
    if platform == "darwin":
        return "dylib"
    if platform.startswith(("win32", "cygwin")):
        return "dll"
    return "so"


def shared_library_extensions(platform: str = sys.platform) -> tuple[str, ...]:
    """Extensions treated as shared libraries when scanning an output directory."""
    if platform.startswith(("win32", "cygwin")):
        return ("dll",)
    return ("dylib", "so")


# ===--- Interface model ---=== #


@dataclass(frozen=True)
class Argument:
    name: str
    type_name: str


@dataclass(frozen=True)
class Function:
    name: str
    arguments: tuple[Argument, ...]
    return_type: str | None = None


class InterfaceDescription(Protocol):
    """What the pipeline reads from an interface description."""

    def namespace(self) -> str: ...

    def functions(self) -> Sequence[Function]: ...


class ComponentInterface:
    """In-memory interface description of one native component."""

    def __init__(self, namespace: str, functions: Sequence[Function] = ()):
        self._namespace = namespace
        self._functions = tuple(functions)

    def namespace(self) -> str:
        return self._namespace

    def functions(self) -> tuple[Function, ...]:
        return self._functions

    def __repr__(self) -> str:
        return f"ComponentInterface({self._namespace!r}, {len(self._functions)} functions)"


def _require_identifier(value: str | None, what: str) -> str:
    if value is None or not _IDENTIFIER_RE.match(value):
        raise ValueError(f"Invalid {what}: {value!r}")
    return value


def parse_interface(root: ET.Element) -> ComponentInterface:
    """Build a ComponentInterface from a parsed <interface> manifest element.

    Manifest format:
        <interface namespace="mylib">
          <function name="add" returns="u32">
            <argument name="a" type="u32"/>
            <argument name="b" type="u32"/>
          </function>
        </interface>

    Raises:
        ValueError: Wrong root tag, or a namespace, function or argument name
            that is not an identifier, or an argument without a type.
    """
    if root.tag != "interface":
        raise ValueError(f"Expected <interface> root element, got <{root.tag}>")
    namespace = _require_identifier(root.get("namespace"), "namespace")

    functions: list[Function] = []
    for fn in root.findall("function"):
        fn_name = _require_identifier(fn.get("name"), "function name")
        arguments: list[Argument] = []
        for arg in fn.findall("argument"):
            arg_name = _require_identifier(arg.get("name"), f"argument name in {fn_name}")
            arg_type = arg.get("type")
            if not arg_type:
                raise ValueError(f"Argument {arg_name} of {fn_name} has no type")
            arguments.append(Argument(arg_name, arg_type))
        functions.append(Function(fn_name, tuple(arguments), fn.get("returns")))

    return ComponentInterface(namespace, tuple(functions))


def load_interface(path: Path) -> ComponentInterface:
    return parse_interface(ET.parse(path).getroot())


# ===--- Layout planning ---=== #


@dataclass(frozen=True)
class Layout:
    """On-disk locations of every artifact for one namespace.

    Attributes:
        out_dir: Output root all paths are derived from.
        module_dir: <out_dir>/<namespace>.swiftmodule-dir
        module_map_file: <module_dir>/uniffi.modulemap
        header_file: <module_dir>/<namespace>-Bridging-Header.h
        source_file: <out_dir>/<namespace>.swift
        dylib_file: <out_dir>/lib<namespace>.<dylib-ext>, produced by swiftc.
    """

    out_dir: Path
    module_dir: Path
    module_map_file: Path
    header_file: Path
    source_file: Path
    dylib_file: Path


def plan_layout(out_dir: Path, namespace: str, platform: str = sys.platform) -> Layout:
    out_dir = Path(out_dir)
    module_dir = out_dir / f"{namespace}.{MODULE_DIR_EXTENSION}"
    return Layout(
        out_dir=out_dir,
        module_dir=module_dir,
        module_map_file=module_dir / MODULE_MAP_FILENAME,
        header_file=module_dir / f"{namespace}{HEADER_SUFFIX}",
        source_file=out_dir / f"{namespace}.{SOURCE_EXTENSION}",
        dylib_file=out_dir / f"lib{namespace}.{dylib_extension(platform)}",
    )


# ===--- Type mapping ---=== #

# type name -> (C type, Swift type)
_PRIMITIVE_TYPES: dict[str, tuple[str, str]] = {
    "i8": ("int8_t", "Int8"),
    "i16": ("int16_t", "Int16"),
    "i32": ("int32_t", "Int32"),
    "i64": ("int64_t", "Int64"),
    "u8": ("uint8_t", "UInt8"),
    "u16": ("uint16_t", "UInt16"),
    "u32": ("uint32_t", "UInt32"),
    "u64": ("uint64_t", "UInt64"),
    "f32": ("float", "Float"),
    "f64": ("double", "Double"),
    "bool": ("bool", "Bool"),
}


def c_type(type_name: str | None) -> str:
    if type_name is None:
        return "void"
    try:
        return _PRIMITIVE_TYPES[type_name][0]
    except KeyError:
        raise ValueError(f"Unsupported type: {type_name}") from None


def swift_type(type_name: str) -> str:
    try:
        return _PRIMITIVE_TYPES[type_name][1]
    except KeyError:
        raise ValueError(f"Unsupported type: {type_name}") from None


def to_lower_camel_case(name: str) -> str:
    stripped = name.lstrip("_")
    prefix = name[: len(name) - len(stripped)]
    head, *rest = stripped.split("_")
    return prefix + head + "".join(part[:1].upper() + part[1:] for part in rest)


SWIFT_KEYWORDS: frozenset[str] = frozenset(
    {
        "as", "associatedtype", "break", "case", "catch", "class", "continue",
        "default", "defer", "deinit", "do", "else", "enum", "extension",
        "fallthrough", "false", "fileprivate", "for", "func", "guard", "if",
        "import", "in", "init", "inout", "internal", "is", "let", "nil",
        "open", "operator", "private", "protocol", "public", "repeat",
        "rethrows", "return", "self", "Self", "static", "struct", "subscript",
        "super", "switch", "throw", "throws", "true", "try", "typealias",
        "var", "where", "while", "Any",
    }
)


def swift_identifier(name: str) -> str:
    """lowerCamelCase name, wrapped in backticks when it is a Swift keyword."""
    identifier = to_lower_camel_case(name)
    if identifier in SWIFT_KEYWORDS:
        return f"`{identifier}`"
    return identifier


# ===--- Rendering ---=== #


@dataclass(frozen=True)
class Config:
    """Rendering settings derived from an interface description.

    Attributes:
        namespace: Component namespace, used as the Swift module name.
        ffi_module_name: Clang module exposing the bridging header to Swift.
        cdylib_name: Native library name passed to the linker with -l.
    """

    namespace: str
    ffi_module_name: str
    cdylib_name: str

    @classmethod
    def from_interface(cls, ci: InterfaceDescription) -> "Config":
        namespace = ci.namespace()
        return cls(
            namespace=namespace,
            ffi_module_name=f"{namespace}FFI",
            cdylib_name=f"uniffi_{namespace}",
        )


@dataclass(frozen=True)
class Bindings:
    header: str
    library: str


@dataclass(frozen=True)
class ArtifactSet:
    header: str
    library: str
    module_map: str


def ffi_symbol(config: Config, function: Function) -> str:
    return f"{config.namespace}_{function.name}"


def render_bridging_header(config: Config, ci: InterfaceDescription) -> str:
    lines: list[str] = [
        f"// Bridging header for the `{config.namespace}` component.",
        "// Generated by swift-bindgen. Do not edit.",
        "",
        "#pragma once",
        "",
        "#include <stdbool.h>",
        "#include <stdint.h>",
    ]
    functions = ci.functions()
    if functions:
        lines.append("")
    for fn in functions:
        params = ", ".join(f"{c_type(arg.type_name)} {arg.name}" for arg in fn.arguments)
        lines.append(f"{c_type(fn.return_type)} {ffi_symbol(config, fn)}({params or 'void'});")
    return "\n".join(lines) + "\n"


def render_swift_wrapper(config: Config, ci: InterfaceDescription) -> str:
    lines: list[str] = [
        f"// Swift bindings for the `{config.namespace}` component.",
        "// Generated by swift-bindgen. Do not edit.",
        "",
        "import Foundation",
        f"import {config.ffi_module_name}",
    ]
    seen: dict[str, str] = {}
    for fn in ci.functions():
        swift_name = swift_identifier(fn.name)
        if swift_name in seen:
            raise ValueError(
                f"Functions {seen[swift_name]} and {fn.name} both map to Swift name {swift_name}"
            )
        seen[swift_name] = fn.name
        params = ", ".join(
            f"{swift_identifier(arg.name)}: {swift_type(arg.type_name)}"
            for arg in fn.arguments
        )
        call_args = ", ".join(swift_identifier(arg.name) for arg in fn.arguments)
        call = f"{ffi_symbol(config, fn)}({call_args})"
        signature = f"public func {swift_name}({params})"
        lines.append("")
        if fn.return_type is None:
            lines.append(f"{signature} {{")
            lines.append(f"    {call}")
        else:
            lines.append(f"{signature} -> {swift_type(fn.return_type)} {{")
            lines.append(f"    return {call}")
        lines.append("}")
    return "\n".join(lines) + "\n"


def render_module_map(config: Config, header_path: Path) -> str:
    return "\n".join(
        [
            f"module {config.ffi_module_name} {{",
            f'    header "{header_path}"',
            "    export *",
            "}",
        ]
    ) + "\n"


def _render(artifact: str, render: Callable[[], str]) -> str:
    try:
        return render()
    except ValueError as err:
        raise RenderError(artifact, str(err)) from err


def generate_bindings(ci: InterfaceDescription) -> Bindings:
    """Render the bridging header and Swift wrapper for an interface.

    Raises:
        RenderError: Tagged "header" for a type with no C or Swift mapping
            (the header is rendered first, so it reports these), or
            "library" when two functions collapse to the same Swift name.
    """
    config = Config.from_interface(ci)
    header = _render(ARTIFACT_HEADER, lambda: render_bridging_header(config, ci))
    library = _render(ARTIFACT_LIBRARY, lambda: render_swift_wrapper(config, ci))
    return Bindings(header=header, library=library)


def generate_module_map(ci: InterfaceDescription, header_path: Path) -> str:
    """Render the module map. Only the namespace and header_path are read."""
    config = Config.from_interface(ci)
    return _render(ARTIFACT_MODULE_MAP, lambda: render_module_map(config, header_path))


def render_artifacts(ci: InterfaceDescription, header_path: Path) -> ArtifactSet:
    """Render all three artifacts; header_path must be the planned location."""
    bindings = generate_bindings(ci)
    return ArtifactSet(
        header=bindings.header,
        library=bindings.library,
        module_map=generate_module_map(ci, header_path),
    )


# ===--- Bindings writer ---=== #


@dataclass(frozen=True)
class FileWriteResult:
    """Result of writing a single generated file.

    Attributes:
        filename: Filename written, e.g. "mylib.swift" or "uniffi.modulemap".
        path: Path of the written file.
        line_count: Number of newline characters in the written content.
        byte_count: Number of bytes written (UTF-8 encoded).
    """

    filename: str
    path: Path
    line_count: int
    byte_count: int


@dataclass(frozen=True)
class BindingsWriteResult:
    """Result of write_bindings.

    files is ordered in write order: header, module map, source.
    """

    layout: Layout
    files: tuple[FileWriteResult, ...]

    @property
    def total_lines(self) -> int:
        return sum(f.line_count for f in self.files)


def write_artifact(path: Path, content: str) -> FileWriteResult:
    """Create or truncate path and write content to it.

    Raises:
        BindingsIOError: Wrapping the OSError of the failed write.
    """
    data = content.encode("utf-8")
    try:
        path.write_bytes(data)
    except OSError as err:
        raise BindingsIOError(path, err.strerror or str(err)) from err
    return FileWriteResult(
        filename=path.name,
        path=path,
        line_count=content.count("\n"),
        byte_count=len(data),
    )


def write_bindings(
    ci: InterfaceDescription, out_dir: Path, platform: str = sys.platform
) -> BindingsWriteResult:
    """Write the header, module map and Swift source for ci under out_dir.

    out_dir is made absolute first. Steps run strictly in order: plan layout, create the module directory
    (and missing parents), render every artifact, write header, module map
    and source. Nothing is rolled back on failure: a failed write leaves the
    module directory and any earlier files on disk.

    Raises:
        BindingsIOError: Directory creation or a file write failed.
        RenderError: Propagated from render_artifacts. Raised before any file
            is written.
    """
    # clang resolves a relative header path against the module map's directory.
    layout = plan_layout(Path(out_dir).resolve(), ci.namespace(), platform)

    try:
        layout.module_dir.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise BindingsIOError(layout.module_dir, err.strerror or str(err)) from err

    artifacts = render_artifacts(ci, layout.header_file)

    files = (
        write_artifact(layout.header_file, artifacts.header),
        write_artifact(layout.module_map_file, artifacts.module_map),
        write_artifact(layout.source_file, artifacts.library),
    )
    return BindingsWriteResult(layout=layout, files=files)


# ===--- Process and filesystem capabilities ---=== #


@dataclass(frozen=True)
class ProcessResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


ProcessRunner = Callable[[str, Sequence[str]], ProcessResult]
DirectoryScanner = Callable[[Path, str], list[Path]]


def run_process(
    program: str, args: Sequence[str], capture_output: bool = False
) -> ProcessResult:
    """Spawn program with args and wait for it to exit.

    stdio is inherited unless capture_output is set, so an interactive
    `swift` REPL stays usable. There is no timeout.

    Raises:
        OSError: The program could not be started (e.g. FileNotFoundError).
    """
    completed = subprocess.run(
        [program, *args],
        check=False,
        capture_output=capture_output,
        text=True,
    )
    return ProcessResult(
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )


def scan_directory(directory: Path, extension: str) -> list[Path]:
    """Return the immediate entries of directory whose suffix is .<extension>."""
    suffix = f".{extension}"
    return [entry for entry in Path(directory).iterdir() if entry.suffix == suffix]


def _invoke(runner: ProcessRunner, program: str, args: Sequence[str]) -> ProcessResult:
    try:
        result = runner(program, args)
    except OSError as err:
        raise ToolchainError(program, diagnostics=str(err)) from err
    if not result.success:
        raise ToolchainError(program, result.returncode, result.stderr)
    return result


def module_map_file_option(module_map_file: Path) -> str:
    return f"-fmodule-map-file={module_map_file}"


# ===--- Toolchain compiler ---=== #


def build_compile_args(config: Config, layout: Layout) -> list[str]:
    """Return the swiftc argument vector for a planned layout.

    `-emit-library -o <dylib>` is needed so the module can be imported from
    the REPL; without it lookups fail with "Couldn't lookup symbols".
    """
    return [
        "-module-name",
        config.namespace,
        "-emit-library",
        "-o",
        str(layout.dylib_file),
        "-emit-module",
        "-emit-module-path",
        str(layout.out_dir),
        "-parse-as-library",
        "-L",
        str(layout.out_dir),
        f"-l{config.cdylib_name}",
        "-Xcc",
        module_map_file_option(layout.module_map_file),
        str(layout.source_file),
    ]


def compile_bindings(
    ci: InterfaceDescription,
    out_dir: Path,
    swiftc: str = SWIFTC,
    runner: ProcessRunner = run_process,
    platform: str = sys.platform,
) -> Layout:
    """Compile previously written bindings into lib<namespace> and a module.

    Does not re-render. The module map and source written by write_bindings
    must already exist.

    Raises:
        BindingsIOError: The module map or Swift source is missing.
        ToolchainError: swiftc could not be started or exited non-zero.
    """
    config = Config.from_interface(ci)
    layout = plan_layout(out_dir, config.namespace, platform)
    for required in (layout.module_map_file, layout.source_file):
        if not required.is_file():
            raise BindingsIOError(required, "generated file not found; write bindings first")

    _invoke(runner, swiftc, build_compile_args(config, layout))
    return layout


# ===--- Script runner ---=== #


@dataclass(frozen=True)
class BuildProducts:
    """Module directories and shared libraries found in an output directory.

    Both tuples are sorted by entry name.
    """

    module_dirs: tuple[Path, ...] = ()
    libraries: tuple[Path, ...] = ()


def discover_build_products(
    out_dir: Path,
    scanner: DirectoryScanner = scan_directory,
    platform: str = sys.platform,
) -> BuildProducts:
    """Scan the immediate entries of out_dir for module dirs and libraries.

    Raises:
        BindingsIOError: out_dir is missing or cannot be listed.
    """
    out_dir = Path(out_dir)
    try:
        module_dirs = list(scanner(out_dir, MODULE_DIR_EXTENSION))
        libraries: list[Path] = []
        for extension in shared_library_extensions(platform):
            libraries.extend(scanner(out_dir, extension))
    except OSError as err:
        raise BindingsIOError(out_dir, err.strerror or str(err)) from err

    return BuildProducts(
        module_dirs=tuple(sorted(module_dirs, key=lambda p: p.name)),
        libraries=tuple(sorted(libraries, key=lambda p: p.name)),
    )


def build_run_args(
    out_dir: Path | None,
    script_file: Path | None,
    products: BuildProducts = BuildProducts(),
) -> list[str]:
    args: list[str] = []
    if out_dir is not None:
        args.extend(["-I", str(out_dir), "-L", str(out_dir)])
    for module_dir in products.module_dirs:
        args.extend(["-Xcc", module_map_file_option(module_dir / MODULE_MAP_FILENAME)])
    for library in products.libraries:
        args.append(f"-l{library}")
    if script_file is not None:
        args.append(str(script_file))
    return args


def run_script(
    out_dir: Path | None = None,
    script_file: Path | None = None,
    swift: str = SWIFT,
    runner: ProcessRunner = run_process,
    scanner: DirectoryScanner = scan_directory,
    platform: str = sys.platform,
) -> None:
    """Run swift against every module and library found in out_dir.

    Without a script the interpreter starts interactively.

    Raises:
        BindingsIOError: out_dir cannot be scanned.
        ToolchainError: swift could not be started or exited non-zero.
    """
    products = BuildProducts()
    if out_dir is not None:
        products = discover_build_products(out_dir, scanner, platform)
    _invoke(runner, swift, build_run_args(out_dir, script_file, products))


# ===--- Pipeline ---=== #


def run_generate(config: GenerateConfig) -> BindingsWriteResult:
    print(f"Parsing: {config.interface_file}")
    ci = load_interface(config.interface_file)
    print(f"  Interface: {ci.namespace()}, {len(ci.functions())} functions")

    result = write_bindings(ci, config.out_dir)
    for written in result.files:
        print(f"  Written: {written.path} ({written.line_count} lines)")
    return result


def run_compile(config: CompileConfig, runner: ProcessRunner = run_process) -> Layout:
    print(f"Parsing: {config.interface_file}")
    ci = load_interface(config.interface_file)
    print(f"  Compiling: {ci.namespace()} with {config.swiftc}")
    layout = compile_bindings(ci, config.out_dir, swiftc=config.swiftc, runner=runner)
    print(f"  Built: {layout.dylib_file}")
    return layout


def run_run(config: RunConfig, runner: ProcessRunner = run_process) -> None:
    target = config.script_file if config.script_file is not None else "REPL"
    print(f"  Running: {config.swift} {target}")
    run_script(config.out_dir, config.script_file, swift=config.swift, runner=runner)


def run_test(config: PipelineConfig, runner: ProcessRunner = run_process) -> None:
    """Write, compile and run in strict order; the first failure aborts."""
    run_generate(GenerateConfig(config.interface_file, config.out_dir))
    run_compile(CompileConfig(config.interface_file, config.out_dir, config.swiftc), runner)
    run_run(RunConfig(config.out_dir, config.script_file, config.swift), runner)


def dispatch(config: CommandConfig, runner: ProcessRunner = run_process) -> None:
    if isinstance(config, GenerateConfig):
        run_generate(config)
    elif isinstance(config, CompileConfig):
        run_compile(config, runner)
    elif isinstance(config, RunConfig):
        run_run(config, runner)
    else:
        run_test(config, runner)


# ===--- Main ---=== #


def main(argv: list[str] | None = None) -> None:
    try:
        config = build_config(argv)
    except ConfigError as err:
        print(f"Config error [{err.code}]: {err.message}")
        if err.suggestion:
            print(f"Hint: {err.suggestion}")
        raise SystemExit(1) from err

    try:
        dispatch(config)
    except BindingsError as err:
        print(f"Error: {err}")
        raise SystemExit(1) from err
    except (OSError, ET.ParseError, ValueError) as err:
        print(f"Error: {err}")
        raise SystemExit(1) from err


if __name__ == "__main__":
    main()
