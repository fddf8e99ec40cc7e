"""Generated resource file: intermediate model and C# rendering.

Generation runs in two passes. ``build_document`` turns a scanned tree into
a language-neutral ``Document`` of nested ``ClassBlock`` and ``Field``
nodes; ``render`` prints that document as C# source text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from assetwatch.codegen.naming import field_name, location_string
from assetwatch.config.schema import Settings
from assetwatch.errors import IdentifierCollisionError
from assetwatch.tree import TreeNode

INDENT = "    "


@dataclass
class Field:
    """One generated constant.

    ``wrapper`` is the typed asset wrapper for asset handles and None for
    plain string constants.
    """

    identifier: str
    location: str
    source: Path
    wrapper: str | None = None

    @property
    def is_asset(self) -> bool:
        return self.wrapper is not None


@dataclass
class ClassBlock:
    """A nested static class mirroring one directory."""

    name: str
    source: Path
    members: list[Field | ClassBlock] = field(default_factory=list)
    _names: dict[str, Path] = field(default_factory=dict, repr=False, compare=False)

    def add(self, member: Field | ClassBlock, qualified_name: str) -> None:
        name = member.identifier if isinstance(member, Field) else member.name
        previous = self._names.get(name)
        if previous is not None:
            raise IdentifierCollisionError(
                identifier=name,
                container=qualified_name,
                first=previous,
                second=member.source,
            )
        self._names[name] = member.source
        self.members.append(member)


@dataclass
class Document:
    usings: tuple[str, ...]
    namespace: str
    root: ClassBlock


def build_document(tree: TreeNode, settings: Settings) -> Document:
    """Build the intermediate model for a scanned tree.

    Directories without any file below them are pruned.

    Raises:
        IdentifierCollisionError: If two members of one class share a name.
    """
    root = ClassBlock(name=settings.root_class, source=tree.path)
    _fill(root, tree, settings, settings.root_class)
    return Document(usings=tuple(settings.usings), namespace=settings.namespace, root=root)


def _fill(block: ClassBlock, directory: TreeNode, settings: Settings, qualified: str) -> None:
    for child in directory.children:
        if child.is_directory:
            if not child.has_file():
                continue
            nested = ClassBlock(name=child.name, source=child.path)
            _fill(nested, child, settings, f"{qualified}.{child.name}")
            block.add(nested, qualified)
            continue

        assert child.relative_path is not None
        location = location_string(child.relative_path, settings.project_name)

        wrapper = settings.wrapper_for(child.path)
        if wrapper is not None:
            block.add(
                Field(
                    identifier=field_name(child.path, settings, asset=True),
                    location=location,
                    source=child.path,
                    wrapper=wrapper,
                ),
                qualified,
            )

        if settings.emit_strings:
            block.add(
                Field(
                    identifier=field_name(child.path, settings, asset=False),
                    location=location,
                    source=child.path,
                ),
                qualified,
            )


def quote(text: str) -> str:
    """C# regular string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _render_field(f: Field) -> str:
    if f.wrapper is not None:
        return (
            f"public static readonly Asset<{f.wrapper}> {f.identifier} = "
            f"ModContent.Request<{f.wrapper}>({quote(f.location)});"
        )
    return f"public static readonly string {f.identifier} = {quote(f.location)};"


def _render_block(block: ClassBlock, depth: int, lines: list[str]) -> None:
    pad = INDENT * depth
    lines.append(f"{pad}public static class {block.name}")
    lines.append(f"{pad}{{")
    previous: Field | ClassBlock | None = None
    for member in block.members:
        if isinstance(member, ClassBlock):
            if previous is not None:
                lines.append("")
            _render_block(member, depth + 1, lines)
        else:
            if isinstance(previous, ClassBlock):
                lines.append("")
            lines.append(f"{pad}{INDENT}{_render_field(member)}")
        previous = member
    lines.append(f"{pad}}}")


def render(document: Document) -> str:
    """Print a Document as C# source. Output always ends with a newline."""
    lines = [f"using {u};" for u in document.usings]
    if lines:
        lines.append("")
    lines.append(f"namespace {document.namespace};")
    lines.append("")
    _render_block(document.root, 0, lines)
    return "\n".join(lines) + "\n"


def render_tree(tree: TreeNode, settings: Settings) -> str:
    """Build and render in one call."""
    return render(build_document(tree, settings))
