#!/usr/bin/env python3
"""
llmclip - Paste-ready Project Context for LLM Prompts

Collects files and directories, either picked interactively with fzf or
passed on the command line, renders them as Markdown-style blocks and puts
the result on the system clipboard.

Architecture:
    CLI Args → Configuration → Target Selection → Discovery →
    Content Assembly → Clipboard / Stdout
"""

from __future__ import annotations

import argparse
import logging
import os
import shlex
import shutil
import subprocess
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import (
    Callable,
    Dict,
    List,
    Optional,
    Sequence,
    Tuple,
)

import pathspec
import pyperclip

# =============================================================================
# VERSION MANAGEMENT
# =============================================================================

__version__ = "1.0.0"


def get_version() -> str:
    """Get version from package metadata or fallback to hardcoded."""
    from importlib.metadata import PackageNotFoundError, version

    try:
        return version("llmclip")
    except PackageNotFoundError:
        return __version__


# =============================================================================
# CONSTANTS
# =============================================================================

# Excluded from every discovery pass, even with --hidden
ALWAYS_EXCLUDED: Tuple[str, ...] = (".git",)

IGNORE_FILES: Tuple[str, ...] = (".gitignore", ".ignore")

# Debian and Ubuntu ship fd as "fdfind"
FD_EXECUTABLES: Tuple[str, ...] = ("fd", "fdfind")
BAT_EXECUTABLES: Tuple[str, ...] = ("bat", "batcat")

PREVIEW_LINES = 200

DIR_HEADER = "# Directory: {path}"
FILE_HEADER = "## File: {path}"
SEPARATOR = "---"

# Tree display glyphs
GLYPH_CHILD = "├── "
GLYPH_LAST = "└── "
GLYPH_PIPE = "│   "
GLYPH_SPACE = "    "

# fzf exit codes meaning "nothing chosen"
FZF_NO_MATCH = 1
FZF_CANCELLED = 130


# =============================================================================
# ERRORS
# =============================================================================

class LlmclipError(Exception):
    """Base class for fatal llmclip errors."""


class DependencyError(LlmclipError):
    """A required external tool or clipboard backend is unavailable."""


class ClipboardError(LlmclipError):
    """The clipboard backend failed while writing."""


# =============================================================================
# DATA MODELS
# =============================================================================

@dataclass(frozen=True)
class FilterConfig:
    """Immutable discovery filter built from CLI flags."""
    exclude_patterns: Tuple[str, ...] = ()
    respect_ignore_files: bool = True
    include_hidden: bool = False


@dataclass(frozen=True)
class RunConfig:
    """Immutable configuration for one invocation."""
    root: Path
    targets: Tuple[str, ...]
    filter: FilterConfig
    print_output: bool = False
    tree_only: bool = False
    debug: bool = False


@dataclass(frozen=True)
class Target:
    """An existing file or directory to include in the payload."""
    path: Path
    display: str
    is_dir: bool

    @classmethod
    def from_raw(cls, raw: str, root: Path) -> Optional[Target]:
        """Resolve *raw* against the working directory; None if it does not exist."""
        path = Path(raw).expanduser()
        if not path.exists():
            return None
        path = path.resolve()
        return cls(path=path, display=display_path(path, root), is_dir=path.is_dir())


@dataclass
class AssemblyResult:
    """Assembled payload plus bookkeeping for the summary line."""
    payload: str = ""
    file_count: int = 0
    missing: List[str] = field(default_factory=list)


# =============================================================================
# PATH RESOLVER
# =============================================================================

def resolve_root(cwd: Optional[Path] = None) -> Path:
    """Return the enclosing git work tree, or *cwd* outside of one."""
    cwd = Path(cwd or os.getcwd()).resolve()
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        logging.debug(f"git unavailable ({e}), using {cwd} as root")
        return cwd

    top = result.stdout.strip()
    if result.returncode != 0 or not top:
        logging.debug(f"Not inside a git work tree, using {cwd} as root")
        return cwd
    return Path(top).resolve()


def display_path(path: Path, root: Path) -> str:
    """Path relative to *root* with forward slashes; the root itself is '.'."""
    try:
        return Path(os.path.relpath(path, root)).as_posix()
    except ValueError:
        # Different drive on Windows
        return Path(path).as_posix()


# =============================================================================
# CONFIGURATION BUILDER
# =============================================================================

def build_filter(
    ignore_patterns: Optional[Sequence[str]] = None,
    no_ignore: bool = False,
    hidden: bool = False,
) -> FilterConfig:
    """Translate filter flags into a FilterConfig. Patterns accumulate in order."""
    return FilterConfig(
        exclude_patterns=tuple(ignore_patterns or ()),
        respect_ignore_files=not no_ignore,
        include_hidden=hidden,
    )


class ConfigBuilder:
    """Builds RunConfig from CLI arguments."""

    @staticmethod
    def from_args(args: argparse.Namespace, cwd: Optional[Path] = None) -> RunConfig:
        """Create config from parsed arguments."""
        targets = tuple(args.paths or ())
        if not targets and args.tree_only:
            targets = (".",)

        return RunConfig(
            root=resolve_root(cwd),
            targets=targets,
            filter=build_filter(args.ignore, args.no_ignore, args.hidden),
            print_output=args.print_output,
            tree_only=args.tree_only,
            debug=args.debug,
        )


# =============================================================================
# DISCOVERY ENGINES
# =============================================================================

def _sorted_paths(paths: Sequence[Path]) -> List[Path]:
    return sorted(paths, key=lambda p: p.as_posix())


class DiscoveryEngine(ABC):
    """Lists entries below a directory while honoring a FilterConfig."""

    @abstractmethod
    def list(
        self,
        directory: Path,
        filter_: FilterConfig,
        kind: Optional[str] = None,
    ) -> List[Path]:
        """Return absolute paths below *directory*, sorted by path.

        *kind* restricts the listing to files ("f") or directories ("d").
        """


class FdDiscovery(DiscoveryEngine):
    """Discovery backed by the fd command line tool."""

    def __init__(self, executable: str):
        self.executable = executable

    def command(
        self,
        filter_: FilterConfig,
        kind: Optional[str] = None,
        absolute: bool = True,
    ) -> List[str]:
        """Build the fd argv for *filter_*, without the search pattern and path."""
        cmd = [self.executable, "--color", "never"]
        if absolute:
            cmd.append("--absolute-path")
        for name in ALWAYS_EXCLUDED:
            cmd.append(f"--exclude={name}")
        if filter_.include_hidden:
            cmd.append("--hidden")
        if not filter_.respect_ignore_files:
            cmd.append("--no-ignore")
        for pattern in filter_.exclude_patterns:
            cmd.append(f"--exclude={pattern}")
        if kind:
            cmd.extend(["--type", kind])
        return cmd

    def list(
        self,
        directory: Path,
        filter_: FilterConfig,
        kind: Optional[str] = None,
    ) -> List[Path]:
        cmd = self.command(filter_, kind) + [".", str(directory)]
        logging.debug(f"Running: {shlex.join(cmd)}")
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
        if result.returncode != 0:
            # Keep whatever fd managed to print
            logging.warning(
                f"{Path(self.executable).name} exited with {result.returncode}: "
                f"{result.stderr.strip()}"
            )
        paths = [
            Path(line.rstrip("/\\"))
            for line in result.stdout.splitlines()
            if line.strip()
        ]
        return _sorted_paths(paths)


class WalkDiscovery(DiscoveryEngine):
    """In-process discovery used when fd is not installed.

    Honors hidden-entry skipping, gitignore-style exclude globs and the
    .gitignore/.ignore files of the walked directories and their ancestors
    up to *root*. Ignore files apply root first, so a deeper negation can
    re-include what a parent file ignored. Only regular files are listed;
    symlinked directories are listed but not descended into.
    """

    def __init__(self, root: Optional[Path] = None):
        self.root = root

    def list(
        self,
        directory: Path,
        filter_: FilterConfig,
        kind: Optional[str] = None,
    ) -> List[Path]:
        directory = Path(directory)
        excludes = compile_patterns(filter_.exclude_patterns, "--ignore")

        # Insertion order is root first: ancestors, then os.walk top-down
        specs: Dict[Path, Optional[pathspec.PathSpec]] = {}
        if filter_.respect_ignore_files:
            for base in self._ancestors(directory):
                self._load_spec(base, specs)

        found: List[Path] = []
        for current, dirs, files in os.walk(directory):
            here = Path(current)
            if filter_.respect_ignore_files:
                self._load_spec(here, specs)

            kept = []
            for name in dirs:
                path = here / name
                if self._excluded(path, directory, filter_, excludes, specs, is_dir=True):
                    continue
                kept.append(name)
                if kind != "f":
                    found.append(path)
            # Prune in place so os.walk skips excluded subtrees
            dirs[:] = kept

            if kind == "d":
                continue
            for name in files:
                path = here / name
                # FIFOs, sockets and broken links would block or fail on read
                if not path.is_file():
                    continue
                if not self._excluded(path, directory, filter_, excludes, specs, is_dir=False):
                    found.append(path)

        return _sorted_paths(found)

    def _ancestors(self, directory: Path) -> List[Path]:
        """Directories between the root and *directory*, excluding *directory*."""
        if self.root is None:
            return []
        try:
            rel = directory.relative_to(self.root)
        except ValueError:
            return []
        bases = [self.root]
        for part in rel.parts[:-1]:
            bases.append(bases[-1] / part)
        return bases

    @staticmethod
    def _load_spec(base: Path, specs: Dict[Path, Optional[pathspec.PathSpec]]) -> None:
        if base in specs:
            return
        patterns: List[pathspec.Pattern] = []
        for name in IGNORE_FILES:
            ignore_file = base / name
            if not ignore_file.is_file():
                continue
            try:
                lines = ignore_file.read_text(encoding="utf-8").splitlines()
            except (OSError, UnicodeDecodeError) as e:
                logging.warning(f"Could not read {ignore_file}: {e}")
                continue
            compiled = compile_patterns(lines, str(ignore_file))
            if compiled is not None:
                patterns.extend(compiled.patterns)
        specs[base] = pathspec.GitIgnoreSpec(patterns) if patterns else None

    @staticmethod
    def _excluded(
        path: Path,
        directory: Path,
        filter_: FilterConfig,
        excludes: Optional[pathspec.PathSpec],
        specs: Dict[Path, Optional[pathspec.PathSpec]],
        is_dir: bool,
    ) -> bool:
        name = path.name
        if name in ALWAYS_EXCLUDED:
            return True
        if not filter_.include_hidden and name.startswith("."):
            return True

        rel = path.relative_to(directory).as_posix()
        if excludes is not None and excludes.match_file(rel + "/" if is_dir else rel):
            return True

        # Last matching pattern wins across all applicable ignore files
        ignored = False
        for base, spec in specs.items():
            if spec is None:
                continue
            try:
                rel_to_base = path.relative_to(base).as_posix()
            except ValueError:
                continue
            candidate = rel_to_base + "/" if is_dir else rel_to_base
            for pattern in spec.patterns:
                if pattern.include is not None and pattern.match_file(candidate) is not None:
                    ignored = pattern.include
        return ignored


def compile_patterns(lines: Sequence[str], source: str) -> Optional[pathspec.PathSpec]:
    """Compile gitignore-style lines, skipping any pathspec rejects.

    Returns None when nothing usable remains.
    """
    if not lines:
        return None
    try:
        return pathspec.GitIgnoreSpec.from_lines(lines)
    except ValueError:
        pass

    # Git silently drops malformed lines; do the same, one line at a time
    good: List[str] = []
    for line in lines:
        try:
            pathspec.GitIgnoreSpec.from_lines([line])
        except ValueError as e:
            logging.warning(f"Skipping invalid pattern {line!r} in {source}: {e}")
            continue
        good.append(line)
    return pathspec.GitIgnoreSpec.from_lines(good) if good else None


def find_fd() -> Optional[str]:
    """Locate fd on PATH under any of its packaged names."""
    for name in FD_EXECUTABLES:
        found = shutil.which(name)
        if found:
            return found
    return None


def find_discovery(root: Optional[Path] = None, require_fd: bool = False) -> DiscoveryEngine:
    """Prefer fd; fall back to the built-in walker unless fd is required."""
    fd = find_fd()
    if fd:
        logging.debug(f"Discovery engine: {fd}")
        return FdDiscovery(fd)
    if require_fd:
        raise DependencyError(
            "fd is required for interactive selection (https://github.com/sharkdp/fd)"
        )
    logging.debug("fd not found, using the built-in walker")
    return WalkDiscovery(root)


# =============================================================================
# TREE RENDERER
# =============================================================================

class TreeRenderer:
    """Renders a directory tree with `tree`, or synthesizes one from discovery."""

    def __init__(self, tree_command: Optional[str] = None):
        self.tree_command = tree_command

    @classmethod
    def detect(cls) -> TreeRenderer:
        return cls(shutil.which("tree"))

    def render(
        self,
        directory: Path,
        display: str,
        filter_: FilterConfig,
        discovery: DiscoveryEngine,
    ) -> str:
        if self.tree_command:
            rendered = self._run_tree(directory, display, filter_)
            if rendered:
                return rendered
        return self.synthesize(display, directory, discovery.list(directory, filter_))

    def _run_tree(self, directory: Path, display: str, filter_: FilterConfig) -> str:
        cmd = [self.tree_command, "--noreport", "--charset", "utf-8"]
        if filter_.include_hidden:
            cmd.append("-a")
        if filter_.respect_ignore_files:
            cmd.append("--gitignore")
        cmd.extend(["-I", "|".join(ALWAYS_EXCLUDED + filter_.exclude_patterns)])
        cmd.append(str(directory))

        logging.debug(f"Running: {shlex.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                check=False,
            )
        except OSError as e:
            logging.debug(f"tree failed ({e}), synthesizing")
            return ""
        if result.returncode != 0 or not result.stdout.strip():
            logging.debug(f"tree exited with {result.returncode}, synthesizing")
            return ""

        lines = result.stdout.splitlines()
        # tree echoes the absolute path it was given
        lines[0] = display
        return "\n".join(lines) + "\n"

    @staticmethod
    def synthesize(display: str, directory: Path, entries: Sequence[Path]) -> str:
        """Build tree-style text from a flat listing of *directory*."""
        tree: Dict[str, Dict] = {}
        dirs = set()
        for entry in entries:
            try:
                rel = Path(entry).relative_to(directory)
            except ValueError:
                continue
            node = tree
            for part in rel.parts:
                node = node.setdefault(part, {})
            if Path(entry).is_dir():
                dirs.add(rel)

        lines = [display]

        def _walk(node: Dict[str, Dict], prefix: str, base: Path) -> None:
            items = sorted(node.items())
            for i, (name, children) in enumerate(items):
                is_last = i == len(items) - 1
                rel = base / name
                connector = GLYPH_LAST if is_last else GLYPH_CHILD
                suffix = "/" if rel in dirs else ""
                lines.append(f"{prefix}{connector}{name}{suffix}")
                if children:
                    _walk(children, prefix + (GLYPH_SPACE if is_last else GLYPH_PIPE), rel)

        _walk(tree, "", Path())
        return "\n".join(lines) + "\n"


# =============================================================================
# INTERACTIVE SELECTOR
# =============================================================================

class InteractiveSelector(ABC):
    """Lets the user pick any number of candidates."""

    @abstractmethod
    def select(self, candidates: Sequence[str], preview: Optional[str] = None) -> List[str]:
        """Return the chosen candidates, or an empty list when cancelled."""


class FzfSelector(InteractiveSelector):
    """Multi-select picker driven by fzf.

    ctrl-d and ctrl-f swap the candidate list between directories and files
    by re-running the given shell commands.
    """

    HEADER = "TAB select | ctrl-a all | ctrl-d dirs | ctrl-f files | ctrl-/ preview"

    def __init__(self, executable: str, cwd: Path, file_command: str, dir_command: str):
        self.executable = executable
        self.cwd = cwd
        self.file_command = file_command
        self.dir_command = dir_command

    def build_command(self, preview: Optional[str] = None) -> List[str]:
        # reload: must come last in a binding since it consumes the rest
        cmd = [
            self.executable,
            "--multi",
            "--prompt", "file> ",
            "--header", self.HEADER,
            "--bind", "ctrl-a:toggle-all",
            "--bind", f"ctrl-d:change-prompt(dir> )+reload:{self.dir_command}",
            "--bind", f"ctrl-f:change-prompt(file> )+reload:{self.file_command}",
        ]
        if preview:
            cmd.extend([
                "--preview", preview,
                "--preview-window", "right:60%",
                "--bind", "ctrl-/:toggle-preview",
            ])
        return cmd

    def select(self, candidates: Sequence[str], preview: Optional[str] = None) -> List[str]:
        cmd = self.build_command(preview)
        logging.debug(f"Running: {shlex.join(cmd)}")
        result = subprocess.run(
            cmd,
            input="\n".join(candidates) + "\n",
            stdout=subprocess.PIPE,
            text=True,
            cwd=str(self.cwd),
            check=False,
        )
        if result.returncode in (FZF_NO_MATCH, FZF_CANCELLED):
            return []
        if result.returncode != 0:
            logging.warning(f"fzf exited with {result.returncode}")
            return []
        return [line for line in result.stdout.splitlines() if line]


def preview_command() -> str:
    """Shell snippet fzf runs for the highlighted candidate."""
    bat = None
    for name in BAT_EXECUTABLES:
        bat = shutil.which(name)
        if bat:
            break
    if bat:
        viewer = (
            f"{shlex.quote(bat)} --color=always --style=numbers "
            f"--line-range=:{PREVIEW_LINES}"
        )
    else:
        viewer = f"head -n {PREVIEW_LINES}"
    return f"if [ -d {{}} ]; then ls -la {{}}; else {viewer} {{}}; fi"


def select_interactively(root: Path, filter_: FilterConfig) -> List[str]:
    """Run the fuzzy picker over *root* and return absolute selected paths."""
    fzf = shutil.which("fzf")
    if not fzf:
        raise DependencyError(
            "fzf is required for interactive selection (https://github.com/junegunn/fzf)"
        )
    discovery = find_discovery(root, require_fd=True)

    files = [display_path(p, root) for p in discovery.list(root, filter_, "f")]
    file_command = "echo .; " + shlex.join(discovery.command(filter_, "f", absolute=False))
    dir_command = "echo .; " + shlex.join(discovery.command(filter_, "d", absolute=False))

    selector = FzfSelector(fzf, root, file_command, dir_command)
    selected = selector.select(["."] + files, preview_command())
    logging.debug(f"Selected {len(selected)} path(s)")
    return [str(root / line) for line in selected]


# =============================================================================
# CONTENT ASSEMBLER
# =============================================================================

def read_content(path: Path) -> str:
    """File content with undecodable bytes replaced; empty if unreadable."""
    try:
        return path.read_bytes().decode("utf-8", errors="replace")
    except OSError as e:
        logging.warning(f"Could not read {path}: {e}")
        return ""


class ContentAssembler:
    """Turns an ordered list of targets into one payload."""

    def __init__(self, root: Path, discovery: DiscoveryEngine, tree_renderer: TreeRenderer):
        self.root = root
        self.discovery = discovery
        self.tree_renderer = tree_renderer

    def assemble(
        self,
        raw_targets: Sequence[str],
        filter_: FilterConfig,
        tree_only: bool = False,
    ) -> AssemblyResult:
        result = AssemblyResult()
        blocks: List[str] = []

        for raw in raw_targets:
            target = Target.from_raw(raw, self.root)
            if target is None:
                logging.warning(f"Target not found: {raw}")
                result.missing.append(raw)
                continue

            if target.is_dir:
                block, count = self._directory_block(target, filter_, tree_only)
            else:
                block, count = self.file_block(target.path, target.display), 1
            logging.debug(f"{target.display}: {'directory' if target.is_dir else 'file'}, {count} file(s)")

            blocks.append(block + "\n\n")
            result.file_count += count

        result.payload = "".join(blocks)
        return result

    @staticmethod
    def file_block(path: Path, display: str) -> str:
        return f"{FILE_HEADER.format(path=display)}\n{SEPARATOR}\n{read_content(path)}\n"

    def _directory_block(
        self,
        target: Target,
        filter_: FilterConfig,
        tree_only: bool,
    ) -> Tuple[str, int]:
        tree = self.tree_renderer.render(target.path, target.display, filter_, self.discovery)
        parts = [f"{DIR_HEADER.format(path=target.display)}\n{SEPARATOR}\n\n{tree}"]
        if tree_only:
            return "".join(parts), 0

        # Counted from a files-only pass, independent of the tree listing
        files = self.discovery.list(target.path, filter_, "f")
        for path in files:
            parts.append("\n" + self.file_block(path, display_path(path, self.root)))
        return "".join(parts), len(files)


# =============================================================================
# CLIPBOARD
# =============================================================================

class ClipboardSink(ABC):
    """Destination for the finished payload."""

    @abstractmethod
    def write(self, text: str) -> None:
        pass


class PyperclipSink(ClipboardSink):
    """Clipboard backed by pyperclip's platform probing."""

    def __init__(self, copy: Callable[[str], None]):
        self._copy = copy

    @classmethod
    def detect(cls) -> PyperclipSink:
        """Pick the first working backend for this platform or fail."""
        copy, _paste = pyperclip.determine_clipboard()
        # pyperclip signals "no backend" with a falsy placeholder
        if not copy:
            raise DependencyError(
                "No clipboard backend found. Install pbcopy (macOS), "
                "wl-clipboard (Wayland), or xclip/xsel (X11)."
            )
        logging.debug(f"Clipboard backend: {getattr(copy, '__qualname__', type(copy).__name__)}")
        return cls(copy)

    def write(self, text: str) -> None:
        try:
            self._copy(text)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"Clipboard write failed: {e}") from e


# =============================================================================
# OUTPUT DISPATCHER
# =============================================================================

class OutputDispatcher:
    """Sends the payload to the clipboard and optionally to stdout."""

    def __init__(self, sink: ClipboardSink):
        self.sink = sink

    def dispatch(
        self,
        result: AssemblyResult,
        print_output: bool = False,
        tree_only: bool = False,
    ) -> None:
        self.sink.write(result.payload)

        # Tree-only output is always shown
        if print_output or tree_only:
            print(result.payload, end="")

        if not tree_only:
            print(f"Copied {result.file_count} file(s) to clipboard", file=sys.stderr)


# =============================================================================
# CLI PARSER
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="llmclip",
        description="Copy files and directory trees to the clipboard as LLM-ready Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        epilog="""
Examples:
  llmclip                      # Pick files interactively with fzf
  llmclip src README.md        # Copy a directory and a file
  llmclip -i '*.lock' .        # Skip lock files
  llmclip -t                   # Print and copy the tree of the current dir
        """,
    )

    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Files or directories to copy (default: interactive selection)",
    )

    # Filtering
    filt = parser.add_argument_group("Filtering")
    filt.add_argument("-i", "--ignore", action="append", metavar="PATTERN", help="Glob pattern to exclude (repeatable)")
    filt.add_argument("-n", "--no-ignore", action="store_true", help="Don't respect .gitignore/.ignore files")
    filt.add_argument("-H", "--hidden", action="store_true", help="Include hidden files and directories")

    # Output options
    out = parser.add_argument_group("Output Options")
    out.add_argument("-t", "--tree-only", action="store_true", help="Only directory trees; always printed (default target: .)")
    out.add_argument("-q", "--quiet", dest="print_output", action="store_false", default=False, help="Don't print the payload (default)")
    out.add_argument("-p", "--print", dest="print_output", action="store_true", default=False, help="Also print the payload to stdout")

    # Meta
    meta = parser.add_argument_group("Information")
    meta.add_argument("-h", "--help", action="help", help="Show this help message and exit")
    meta.add_argument("-v", "--version", action="version", version=f"%(prog)s {get_version()}")
    meta.add_argument("--debug", action="store_true", help="Trace internal steps on stderr")

    return parser


# =============================================================================
# MAIN
# =============================================================================

def run(config: RunConfig, sink: Optional[ClipboardSink] = None) -> int:
    """Select, assemble and dispatch for one invocation."""
    logging.debug(f"Root: {config.root}")

    # Fail before touching any target when there is nowhere to copy to
    if sink is None:
        sink = PyperclipSink.detect()

    targets = list(config.targets)
    if not targets:
        targets = select_interactively(config.root, config.filter)
        if not targets:
            logging.debug("Nothing selected")
            return 0

    assembler = ContentAssembler(
        config.root,
        find_discovery(config.root),
        TreeRenderer.detect(),
    )
    result = assembler.assemble(targets, config.filter, config.tree_only)
    OutputDispatcher(sink).dispatch(result, config.print_output, config.tree_only)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = ConfigBuilder.from_args(args)
        return run(config)
    except LlmclipError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
