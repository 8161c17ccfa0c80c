"""Main Crowbar class - entry point for editing a Rust program."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from crowbar.config import CrowbarConfig
from crowbar.core.diff import generate_diff
from crowbar.core.results import ErrorResult, Result
from crowbar.exceptions import CrowbarError
from crowbar.syntax import parse
from crowbar.transformers import RenameIdentifier
from crowbar.variables import discover, inject

if TYPE_CHECKING:
    from crowbar.syntax import SyntaxTree
    from crowbar.variables import DiscoveredVariable

logger = logging.getLogger(__name__)


class Crowbar:
    """
    Main entry point for editing and running a Rust program.

    Holds one source buffer and the variables discovered in it. Every
    operation returns a Result; nothing here raises. A failed operation
    leaves the buffer and the variable list as they were.

    Parameters
    ----------
    code : str, optional
        Initial source buffer.
    path : str | Path | None, optional
        File the buffer belongs to, used by ``save()`` and in diffs.
    dry_run : bool, optional
        If True, rewriting operations report what they would do without
        changing the buffer or writing files. Defaults to False.
    config : CrowbarConfig | None, optional
        Session settings. Defaults to ``CrowbarConfig()``.

    Attributes
    ----------
    code : str
        The current source buffer.
    variables : list[DiscoveredVariable]
        Variables from the last successful discovery, in declaration order.

    Examples
    --------
    >>> cb = Crowbar()
    >>> cb.load("examples/main.rs")
    >>> cb.set_value("speed", 2.5)
    >>> cb.inject_values().diff
    >>> cb.rename("speed", "velocity")
    >>> print(cb.run().data.output)
    """

    def __init__(
        self,
        code: str = "",
        path: str | Path | None = None,
        dry_run: bool = False,
        config: CrowbarConfig | None = None,
    ):
        self.code = code
        self.path = Path(path) if isinstance(path, str) else path
        self.dry_run = dry_run
        self.config = config if config is not None else CrowbarConfig()
        self.variables: list[DiscoveredVariable] = []

    def __repr__(self) -> str:
        return f"Crowbar({self.path or '<buffer>'}, {len(self.variables)} variables)"

    @property
    def _diff_name(self) -> str:
        return self.path.name if self.path is not None else "main.rs"

    # =========================================================================
    # Loading and saving
    # =========================================================================

    def load(self, path: str | Path) -> Result:
        """
        Read a source file into the buffer and discover its variables.

        The buffer is replaced even if the file does not parse, so it can be
        fixed and re-discovered; the variable list is then cleared.

        Parameters
        ----------
        path : str | Path
            Rust source file.

        Returns
        -------
        Result
            Discovered variables in ``data`` on success.
        """
        file_path = Path(path)
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return ErrorResult(message=f"Failed to read {file_path}: {e}", operation="load", exception=e)

        self.code = content
        self.path = file_path
        self.variables = []
        logger.info("Loaded %s", file_path)
        return self.discover_variables()

    def save(self, path: str | Path | None = None) -> Result:
        """
        Write the buffer to ``path`` (default: the loaded file).

        Returns
        -------
        Result
            Diff against the file's previous content.
        """
        target = Path(path) if path is not None else self.path
        if target is None:
            return ErrorResult(message="No file to save to", operation="save")

        try:
            original = target.read_text(encoding="utf-8") if target.exists() else ""
        except (OSError, UnicodeDecodeError) as e:
            return ErrorResult(message=f"Failed to read {target}: {e}", operation="save", exception=e)

        diff = generate_diff(original, self.code, target.name)
        if self.dry_run:
            return Result(
                success=True,
                message=f"[DRY RUN] Would write {target}",
                files_changed=[target],
                diff=diff,
            )

        try:
            target.write_text(self.code, encoding="utf-8")
        except OSError as e:
            return ErrorResult(message=f"Write failed: {e}", operation="save", exception=e)
        self.path = target
        return Result(success=True, message=f"Wrote {target}", files_changed=[target], diff=diff)

    # =========================================================================
    # Analysis
    # =========================================================================

    def parse(self) -> Result:
        """
        Parse the buffer.

        Returns
        -------
        Result
            The SyntaxTree in ``data``, or ErrorResult with the ParseError.
        """
        try:
            tree = parse(self.code)
        except CrowbarError as e:
            return ErrorResult(message=f"Parse failed: {e}", operation="parse", exception=e)
        return Result(success=True, message="OK", data=tree)

    def discover_variables(self) -> Result:
        """
        Discover the typed local variables of the buffer.

        Replaces the variable list wholesale. On a parse failure the
        previous list is kept.

        Returns
        -------
        Result
            The new variable list in ``data``.
        """
        parsed = self.parse()
        if not parsed:
            return parsed

        self.variables = discover(parsed.data)
        return Result(
            success=True,
            message=f"Found {len(self.variables)} variables",
            data=self.variables,
        )

    def find_variable(self, name: str, occurrence: int = 0) -> DiscoveredVariable | None:
        """
        Find a discovered variable by name.

        Parameters
        ----------
        name : str
            Variable name.
        occurrence : int
            Which declaration to return when the name is declared more than
            once (shadowing), counting from 0 in declaration order.
        """
        matches = [v for v in self.variables if v.name == name]
        if 0 <= occurrence < len(matches):
            return matches[occurrence]
        return None

    def set_value(self, name: str, value: object, occurrence: int = 0) -> Result:
        """
        Set the value of a discovered variable.

        Parameters
        ----------
        name : str
            Variable name.
        value : object
            New value; strings are converted to the declared type.
        occurrence : int
            Which declaration of ``name`` to edit, counting from 0.
        """
        variable = self.find_variable(name, occurrence)
        if variable is None:
            return ErrorResult(message=f"Variable '{name}' not found", operation="set_value")
        return variable.assign(value)

    # =========================================================================
    # Rewriting
    # =========================================================================

    def inject_values(self) -> Result:
        """
        Write edited variable values into the buffer.

        After a successful injection the variables are re-discovered so
        their recorded positions match the new buffer.

        Returns
        -------
        Result
            The new source in ``data`` and a diff of the change.
        """
        try:
            new_code = inject(
                self.code,
                self.variables,
                only_modified=self.config.inject_only_modified,
                owned_text_constructor=self.config.owned_text_constructor,
            )
        except (CrowbarError, ValueError) as e:
            return ErrorResult(message=f"Injection failed: {e}", operation="inject_values", exception=e)

        return self._replace_code(new_code, "inject variable values")

    def rename(self, old_name: str, new_name: str) -> Result:
        """
        Rename every identifier spelled ``old_name`` to ``new_name``.

        The rename ignores scopes (see RenameIdentifier). Values edited but
        not yet injected carry over to the re-discovered variables, each to
        the same occurrence of its name.

        With ``config.skip_macro_bodies`` set (the default), uses of
        ``old_name`` inside macro arguments such as ``println!`` are not
        renamed, and the program may then fail to compile.

        Parameters
        ----------
        old_name : str
            Identifier to replace.
        new_name : str
            Replacement identifier.

        Returns
        -------
        Result
            The new source in ``data`` and a diff of the change.
        """
        if not old_name or not new_name:
            return ErrorResult(message="Both names must be non-empty", operation="rename")

        parsed = self.parse()
        if not parsed:
            return parsed

        transformer = RenameIdentifier(old_name, new_name, self.config.skip_macro_bodies)
        new_tree: SyntaxTree = transformer.transform(parsed.data)
        if new_tree.has_errors:
            return ErrorResult(
                message=f"Renaming '{old_name}' to '{new_name}' produces invalid source",
                operation="rename",
            )

        previous_code = self.code
        edited = _pending_edits(self.variables, old_name, new_name)
        result = self._replace_code(new_tree.unparse(), f"rename {old_name} to {new_name}")
        if result and not self.dry_run:
            if self.code != previous_code:
                self._carry_over(edited)
            result.message += f" ({transformer.replaced_count} occurrences)"
        return result

    def _carry_over(self, edited: dict) -> None:
        """Re-apply uninjected edits to the variables discovered after a rename.

        ``edited`` maps ``(renamed name, semantic type, occurrence)`` to the
        pending value, so each edit lands on the declaration it was made on.
        """
        seen: dict[tuple, int] = {}
        for variable in self.variables:
            key = (variable.name, variable.semantic_type)
            occurrence = seen.get(key, 0)
            seen[key] = occurrence + 1
            if (*key, occurrence) in edited:
                variable.value = edited[(*key, occurrence)]

    def _replace_code(self, new_code: str, operation: str) -> Result:
        """Swap in a rewritten buffer and re-discover, dry-run aware."""
        diff = generate_diff(self.code, new_code, self._diff_name)
        if new_code == self.code:
            return Result(success=True, message=f"No changes needed for {operation}", data=new_code, diff="")

        if self.dry_run:
            return Result(success=True, message=f"[DRY RUN] Would {operation}", data=new_code, diff=diff)

        try:
            tree = parse(new_code)
        except CrowbarError as e:
            return ErrorResult(message=f"Failed to {operation}: {e}", operation=operation, exception=e)

        self.code = new_code
        self.variables = discover(tree)
        logger.info("Completed %s", operation)
        return Result(success=True, message=f"Completed {operation}", data=new_code, diff=diff)

    # =========================================================================
    # Execution
    # =========================================================================

    def run(self) -> Result:
        """
        Inject edited values, then compile and run the buffer.

        Returns
        -------
        Result
            ExecutionResult in ``data``. Fails with the compiler diagnostics
            as message if the build fails.
        """
        from crowbar.runner import execute

        injected = self.inject_values()
        if not injected:
            return injected
        code = injected.data if self.dry_run else self.code

        try:
            execution = execute(code, self.config)
        except CrowbarError as e:
            return ErrorResult(message=str(e), operation="run", exception=e)

        if not execution.compiled:
            return ErrorResult(
                message=f"Compilation error:\n{execution.diagnostics}",
                operation="run",
                data=execution,
            )
        return Result(success=True, message=execution.output, data=execution)


def _pending_edits(variables: list[DiscoveredVariable], old_name: str, new_name: str) -> dict:
    """Modified values keyed by post-rename name, semantic type and occurrence."""
    edited = {}
    seen: dict[tuple, int] = {}
    for variable in variables:
        name = new_name if variable.name == old_name else variable.name
        key = (name, variable.semantic_type)
        occurrence = seen.get(key, 0)
        seen[key] = occurrence + 1
        if variable.is_modified:
            edited[(*key, occurrence)] = variable.value
    return edited
