"""
View module generator for PCF controls.

Generates ``<Identifier>.tsx``: a React function component built from Fluent
UI v9 widgets, with one local state hook per bound field.
"""

import logging

from ....core import catalog, ir, resolver
from ...base import Generator, GeneratorResult
from ..naming import component_filename, control_name, props_interface_name, setter_name
from .emitters import ROOT_INDENT, EmitContext

logger = logging.getLogger(__name__)

BASE_IMPORTS = ("FluentProvider", "webLightTheme")


def collect_imports(tree: ir.WidgetTree) -> list[str]:
    """Sorted Fluent import names needed by the distinct widget types in ``tree``."""
    names = set(BASE_IMPORTS)
    for widget_type in tree.widget_types():
        if catalog.is_known_widget(widget_type):
            names.update(catalog.definition_of(widget_type).imports)
    return sorted(names)


def collect_bound_fields(document: ir.Document) -> list[ir.DeclaredField]:
    """Declared fields targeted by at least one binding, in declaration order."""
    referenced = {binding.field for node, _ in document.tree.walk() for binding in node.bindings}
    return [declared for declared in document.fields if declared.name in referenced]


class ViewModuleGenerator(Generator):
    """
    Generate the React view module.

    Creates:
    - <Identifier>.tsx
    """

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()
        name = control_name(self.document.metadata)

        ctx = EmitContext(
            tree=self.document.tree,
            fields={declared.name: declared for declared in self.document.fields},
        )
        jsx = self._build_jsx(ctx)
        result.add_file(component_filename(name), self._build_module(name, jsx))

        for warning in ctx.warnings:
            result.add_warning(warning)

        logger.debug(f"View module generated for {len(self.document.tree)} widgets")
        return result

    def _build_jsx(self, ctx: EmitContext) -> list[str]:
        if not self.document.tree.roots:
            return [f"{' ' * ROOT_INDENT}{{/* No components designed yet */}}"]
        lines: list[str] = []
        for root_id in self.document.tree.roots:
            lines.extend(ctx.render(root_id, ROOT_INDENT))
        return lines

    def _build_module(self, name: str, jsx: list[str]) -> str:
        props_name = props_interface_name(name)

        lines = ["import * as React from 'react';", "import {"]
        imports = collect_imports(self.document.tree)
        lines.append(",\n".join(f"  {item}" for item in imports))
        lines.extend(["} from '@fluentui/react-components';", ""])

        lines.append(f"export interface {props_name} {{")
        for declared in self.document.fields:
            optional = "" if declared.required else "?"
            lines.append(f"  {declared.name}{optional}: {resolver.ts_type(declared.type)};")
        lines.extend(["  onChange?: (propertyName: string, value: unknown) => void;", "}", ""])

        lines.append(f"export const {name}: React.FC<{props_name}> = (props) => {{")
        state = [
            f"  const [{declared.name}, {setter_name(declared.name)}] = React.useState(props.{declared.name});"
            for declared in collect_bound_fields(self.document)
        ]
        if state:
            lines.extend(state)
            lines.append("")

        lines.extend(
            [
                "  return (",
                "    <FluentProvider theme={webLightTheme}>",
                "      <div style={{ display: 'flex', flexDirection: 'column', gap: '8px' }}>",
                *jsx,
                "      </div>",
                "    </FluentProvider>",
                "  );",
                "};",
                "",
                f"export default {name};",
                "",
            ]
        )
        return "\n".join(lines)
