"""libclang-backed front end producing resolved C/C++ declaration trees."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from clang import cindex

from ..logging import get_logger
from ..models import Declaration, DeclKind, TranslationUnit
from .base import Frontend, FrontendError

_LOGGER = get_logger("frontend.clang")

_AGGREGATE_KINDS = frozenset(
    {
        cindex.CursorKind.STRUCT_DECL,
        cindex.CursorKind.UNION_DECL,
        cindex.CursorKind.CLASS_DECL,
        cindex.CursorKind.CLASS_TEMPLATE,
        cindex.CursorKind.CLASS_TEMPLATE_PARTIAL_SPECIALIZATION,
    }
)

_FUNCTION_KINDS = {
    cindex.CursorKind.FUNCTION_DECL: DeclKind.FUNCTION,
    cindex.CursorKind.CXX_METHOD: DeclKind.METHOD,
    cindex.CursorKind.CONVERSION_FUNCTION: DeclKind.METHOD,
    cindex.CursorKind.CONSTRUCTOR: DeclKind.CONSTRUCTOR,
    cindex.CursorKind.DESTRUCTOR: DeclKind.DESTRUCTOR,
}

# Compiler-driver arguments that make no sense for a syntax-only parse.
_DROPPED_FLAGS = {"-c", "-S", "-E", "-M", "-MM", "-MD", "-MMD"}
_DROPPED_WITH_VALUE = {"-o", "-MF", "-MT", "-MQ"}


class ClangDeclaration:
    """Adapts a libclang cursor to the ``Declaration`` protocol."""

    __slots__ = ("cursor",)

    def __init__(self, cursor: cindex.Cursor) -> None:
        self.cursor = cursor

    @property
    def kind(self) -> DeclKind:
        cursor_kind = self.cursor.kind
        if cursor_kind in _AGGREGATE_KINDS:
            return DeclKind.AGGREGATE
        return _FUNCTION_KINDS.get(cursor_kind, DeclKind.OTHER)

    @property
    def name(self) -> str:
        return self.cursor.spelling or ""

    @property
    def qualified_name(self) -> str:
        names: List[str] = []
        cursor: Optional[cindex.Cursor] = self.cursor
        while cursor is not None and cursor.kind != cindex.CursorKind.TRANSLATION_UNIT:
            if cursor.spelling:
                names.append(cursor.spelling)
            cursor = cursor.semantic_parent
        return "::".join(reversed(names))

    def annotation(self) -> Optional[str]:
        # Only the first annotate attribute counts.
        for child in self.cursor.get_children():
            if child.kind == cindex.CursorKind.ANNOTATE_ATTR:
                return child.spelling
        return None

    def param_types(self) -> List[str]:
        function_type = self.cursor.type
        if function_type.kind != cindex.TypeKind.FUNCTIONPROTO:
            return []
        return [arg.spelling for arg in function_type.argument_types()]

    def return_type(self) -> str:
        return self.cursor.type.get_result().spelling

    def children(self) -> Iterator[ClangDeclaration]:
        return _declaration_children(self.cursor)

    def __repr__(self) -> str:
        return f"ClangDeclaration({self.cursor.kind.name}, {self.qualified_name!r})"


def _declaration_children(cursor: cindex.Cursor) -> Iterator[ClangDeclaration]:
    # Local declarations sit below statements, so descend through non-declarations.
    for child in cursor.get_children():
        kind = child.kind
        if kind.is_attribute() or kind.is_reference():
            continue
        if kind.is_declaration():
            yield ClangDeclaration(child)
        else:
            yield from _declaration_children(child)


def resolve_mangled_name(decl: Declaration) -> str:
    """Return the external symbol libclang computes for ``decl``."""
    if not isinstance(decl, ClangDeclaration):
        raise TypeError(f"Expected a ClangDeclaration, got {type(decl).__name__}")
    return decl.cursor.mangled_name or decl.qualified_name


class ClangFrontend(Frontend):
    """Parses C/C++ sources through libclang."""

    def __init__(
        self,
        *,
        args: Sequence[str] = (),
        build_path: Optional[Path] = None,
        library_file: Optional[Path] = None,
        skip_function_bodies: bool = False,
    ) -> None:
        if library_file is not None and not cindex.Config.loaded:
            cindex.Config.set_library_file(str(library_file))
        self._args = list(args)
        self._build_path = build_path
        self._skip_function_bodies = skip_function_bodies
        self._index: Optional[cindex.Index] = None
        self._database: Optional[cindex.CompilationDatabase] = None

    def parse(self, path: Path) -> TranslationUnit:
        source = Path(path).expanduser().resolve()
        if not source.is_file():
            raise FrontendError(f"Source file not found: {path}")

        args = self._arguments_for(source) + self._args
        options = 0
        if self._skip_function_bodies:
            options |= cindex.TranslationUnit.PARSE_SKIP_FUNCTION_BODIES

        _LOGGER.debug("Parsing %s with args %s", source, args)
        try:
            clang_tu = self._get_index().parse(str(source), args=args, options=options)
        except cindex.TranslationUnitLoadError as exc:
            raise FrontendError(f"libclang could not parse {path}: {exc}") from exc

        errors = 0
        for diagnostic in clang_tu.diagnostics:
            if diagnostic.severity < cindex.Diagnostic.Warning:
                continue
            _LOGGER.warning("%s: %s", _format_location(diagnostic.location), diagnostic.spelling)
            if diagnostic.severity >= cindex.Diagnostic.Error:
                errors += 1
        if errors:
            raise FrontendError(f"{path}: {errors} error(s) reported by the compiler front end")

        return TranslationUnit(
            path=source,
            root=ClangDeclaration(clang_tu.cursor),
            resolve_name=resolve_mangled_name,
        )

    def _get_index(self) -> cindex.Index:
        if self._index is None:
            try:
                self._index = cindex.Index.create()
            except cindex.LibclangError as exc:
                raise FrontendError(f"Failed to load libclang: {exc}") from exc
        return self._index

    def _arguments_for(self, source: Path) -> List[str]:
        if self._build_path is None:
            return []
        if self._database is None:
            try:
                self._database = cindex.CompilationDatabase.fromDirectory(str(self._build_path))
            except cindex.CompilationDatabaseError as exc:
                raise FrontendError(
                    f"No compilation database found in {self._build_path}"
                ) from exc
        commands = self._database.getCompileCommands(str(source))
        if not commands:
            _LOGGER.warning("No compile command for %s in %s", source, self._build_path)
            return []
        command = commands[0]
        return _compile_arguments(list(command.arguments), command.directory, source)


def _compile_arguments(arguments: Sequence[str], directory: str, source: Path) -> List[str]:
    """Strip the compiler, the input file and output-related flags from a compile command."""
    result: List[str] = ["-working-directory", directory]
    skip_next = False
    for argument in arguments[1:]:
        if skip_next:
            skip_next = False
            continue
        if argument in _DROPPED_WITH_VALUE:
            skip_next = True
            continue
        if argument in _DROPPED_FLAGS or _is_source_argument(argument, directory, source):
            continue
        result.append(argument)
    return result


def _is_source_argument(argument: str, directory: str, source: Path) -> bool:
    if argument.startswith("-"):
        return False
    candidate = Path(argument)
    if not candidate.is_absolute():
        candidate = Path(directory) / candidate
    return candidate.resolve() == source


def _format_location(location: cindex.SourceLocation) -> str:
    if location.file is None:
        return "<unknown>"
    return f"{location.file.name}:{location.line}:{location.column}"


__all__ = ["ClangDeclaration", "ClangFrontend", "resolve_mangled_name"]
