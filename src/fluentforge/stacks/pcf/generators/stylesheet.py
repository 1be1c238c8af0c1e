"""
Auxiliary stylesheet generator for PCF controls.

Widgets whose layout cannot be expressed with inline styles alone declare a
stylesheet in the catalog. Each distinct stylesheet used by the tree is
emitted once and referenced from the manifest's ``<css>`` resources.
"""

from ....core.catalog import LAYOUT_STYLESHEET
from ...base import Generator, GeneratorResult
from .emitters import FLEX_CLASS, GRID_CLASS
from .manifest import collect_stylesheets

LAYOUT_CSS = f"""/* Layout containers */
.{FLEX_CLASS} {{
  display: flex;
  flex-direction: row;
  flex-wrap: wrap;
  align-items: flex-start;
}}

.{GRID_CLASS} {{
  display: grid;
  align-items: start;
}}

.{FLEX_CLASS} > *,
.{GRID_CLASS} > * {{
  min-width: 0;
}}
"""

STYLESHEETS: dict[str, str] = {
    LAYOUT_STYLESHEET: LAYOUT_CSS,
}


class StylesheetGenerator(Generator):
    """
    Generate auxiliary stylesheets.

    Creates:
    - css/layout.css (when Flex or Grid is used)

    Uses the manifest's ``stylesheets`` artifact when run after it, so the
    files written always match the manifest's ``<css>`` entries.
    """

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()
        stylesheets = self.artifacts.get("stylesheets")
        if stylesheets is None:
            stylesheets = collect_stylesheets(self.document.tree)
        for path in stylesheets:
            content = STYLESHEETS.get(path)
            if content is None:
                result.add_warning(f"No content registered for stylesheet '{path}'")
                continue
            result.add_file(path, content)
        return result
