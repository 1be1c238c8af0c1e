"""
Host adapter generator for PCF controls.

Generates ``index.ts``, the class the PCF runtime instantiates. It reads
input/bound fields from the context into the view's props, keeps a private
slot per output/bound field, and reports those slots through ``getOutputs``.

Virtual controls return a React element from ``updateView`` and let the
platform render it; standard controls own a React root in their container.
"""

from ....core import ir, resolver
from ....core.config import CONTROL_TYPES
from ...base import Generator, GeneratorResult
from ...base.utils import js_string
from ..naming import INDEX_FILENAME, adapter_class_name, control_name


class HostAdapterGenerator(Generator):
    """
    Generate the host adapter.

    Creates:
    - index.ts
    """

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()
        if self.config.control_type not in CONTROL_TYPES:
            result.add_error(
                f"Unsupported control type '{self.config.control_type}' (expected one of {', '.join(CONTROL_TYPES)})"
            )
            return result
        result.add_file(INDEX_FILENAME, self._build_adapter(control_name(self.document.metadata)))
        return result

    @property
    def _is_virtual(self) -> bool:
        return self.config.control_type == "virtual"

    def _build_adapter(self, name: str) -> str:
        inputs = [f for f in self.document.fields if f.usage.reads_input]
        outputs = [f for f in self.document.fields if f.usage.writes_output]
        control_interface = "ReactControl" if self._is_virtual else "StandardControl"

        lines = [
            'import { IInputs, IOutputs } from "./generated/ManifestTypes";',
            f'import {{ {name} }} from "./{name}";',
            'import * as React from "react";',
        ]
        if not self._is_virtual:
            lines.append('import * as ReactDOM from "react-dom/client";')
        lines.extend(
            [
                "",
                f"export class {adapter_class_name(name)} implements ComponentFramework.{control_interface}<IInputs, IOutputs> {{",
            ]
        )
        if not self._is_virtual:
            lines.append("  private _root: ReactDOM.Root | null = null;")
        lines.append("  private _notifyOutputChanged: () => void;")
        for declared in outputs:
            lines.append(f"  private _{declared.name}: {resolver.ts_type(declared.type)} | undefined;")
        lines.append("")

        lines.extend(self._build_init())
        lines.extend(self._build_update_view(name, inputs))
        lines.extend(self._build_handle_change(outputs))
        lines.extend(self._build_get_outputs(outputs))
        lines.extend(self._build_destroy())
        lines.extend(["}", ""])
        return "\n".join(lines)

    def _build_init(self) -> list[str]:
        lines = [
            "  /**",
            "   * Used to initialize the control instance. Controls can kick off remote server calls",
            "   * and other initialization actions here.",
            "   */",
            "  public init(",
            "    context: ComponentFramework.Context<IInputs>,",
            "    notifyOutputChanged: () => void,",
        ]
        if self._is_virtual:
            lines.append("    state: ComponentFramework.Dictionary")
        else:
            lines.extend(["    state: ComponentFramework.Dictionary,", "    container: HTMLDivElement"])
        lines.extend(["  ): void {", "    this._notifyOutputChanged = notifyOutputChanged;"])
        if not self._is_virtual:
            lines.append("    this._root = ReactDOM.createRoot(container);")
        lines.extend(["  }", ""])
        return lines

    def _build_update_view(self, name: str, inputs: list[ir.DeclaredField]) -> list[str]:
        return_type = "React.ReactElement" if self._is_virtual else "void"
        lines = [
            "  /**",
            "   * Called when any value in the property bag has changed.",
            "   */",
            f"  public updateView(context: ComponentFramework.Context<IInputs>): {return_type} {{",
            "    const props = {",
        ]
        for declared in inputs:
            lines.append(f"      {declared.name}: context.parameters.{declared.name}.raw ?? undefined,")
        lines.extend(["      onChange: this.handleChange.bind(this),", "    };", ""])
        if self._is_virtual:
            lines.append(f"    return React.createElement({name}, props);")
        else:
            lines.append(f"    this._root?.render(React.createElement({name}, props));")
        lines.extend(["  }", ""])
        return lines

    def _build_handle_change(self, outputs: list[ir.DeclaredField]) -> list[str]:
        lines = [
            "  /**",
            "   * Handles property changes from the React component.",
            "   */",
            "  private handleChange(propertyName: string, value: unknown): void {",
            "    switch (propertyName) {",
        ]
        for declared in outputs:
            lines.extend(
                [
                    f"      case {js_string(declared.name)}:",
                    f"        this._{declared.name} = value as {resolver.ts_type(declared.type)};",
                    "        break;",
                ]
            )
        lines.extend(
            [
                "      default:",
                "        return;",
                "    }",
                "    this._notifyOutputChanged();",
                "  }",
                "",
            ]
        )
        return lines

    def _build_get_outputs(self, outputs: list[ir.DeclaredField]) -> list[str]:
        lines = [
            "  /**",
            "   * Returns an object based on the output schema defined in the manifest.",
            "   */",
            "  public getOutputs(): IOutputs {",
            "    return {",
        ]
        for declared in outputs:
            lines.append(f"      {declared.name}: this._{declared.name},")
        lines.extend(["    };", "  }", ""])
        return lines

    def _build_destroy(self) -> list[str]:
        lines = [
            "  /**",
            "   * Called when the control is to be removed from the DOM tree.",
            "   */",
            "  public destroy(): void {",
        ]
        if not self._is_virtual:
            lines.extend(
                [
                    "    if (this._root) {",
                    "      this._root.unmount();",
                    "      this._root = null;",
                    "    }",
                ]
            )
        lines.append("  }")
        return lines
