"""Code generation for the resource reference file."""

from assetwatch.codegen.emitter import (
    ClassBlock,
    Document,
    Field,
    build_document,
    render,
    render_tree,
)
from assetwatch.codegen.naming import field_name, location_string

__all__ = [
    "ClassBlock",
    "Document",
    "Field",
    "build_document",
    "field_name",
    "location_string",
    "render",
    "render_tree",
]
