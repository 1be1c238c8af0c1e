"""Tests for the base generator classes."""

from fluentforge.core.ir import Document
from fluentforge.stacks.base import CompositeGenerator, Generator, GeneratorResult


class _Emit(Generator):
    def __init__(self, document: Document, path: str, error: str | None = None, warning: str | None = None):
        super().__init__(document)
        self.path = path
        self.error = error
        self.warning = warning

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()
        result.add_file(self.path, self.path.upper())
        if self.error:
            result.add_error(self.error)
        if self.warning:
            result.add_warning(self.warning)
        return result


class _Pipeline(CompositeGenerator):
    def __init__(self, children: list[Generator]):
        super().__init__(Document())
        self.children = children

    def get_generators(self) -> list[Generator]:
        return self.children


class TestGeneratorResult:
    def test_warnings_are_deduplicated(self) -> None:
        result = GeneratorResult()
        result.add_warning("a")
        result.add_warning("a")
        other = GeneratorResult(warnings=["a", "b"])
        result.merge(other)
        assert result.warnings == ["a", "b"]

    def test_success(self) -> None:
        result = GeneratorResult()
        assert result.success
        result.add_error("broken")
        assert not result.success


class TestCompositeGenerator:
    def test_merges_children(self) -> None:
        document = Document()
        result = _Pipeline([_Emit(document, "a.ts", warning="w"), _Emit(document, "b.ts", warning="w")]).generate()
        assert result.files == {"a.ts": "A.TS", "b.ts": "B.TS"}
        assert result.warnings == ["w"]

    def test_stops_after_failing_child(self) -> None:
        document = Document()
        result = _Pipeline(
            [_Emit(document, "a.ts"), _Emit(document, "b.ts", error="boom"), _Emit(document, "c.ts")]
        ).generate()
        assert list(result.files) == ["a.ts", "b.ts"]
        assert result.errors == ["boom"]
        assert not result.success

    def test_children_see_earlier_artifacts(self) -> None:
        document = Document()
        seen: list[dict[str, object]] = []

        class _Share(Generator):
            def generate(self) -> GeneratorResult:
                result = GeneratorResult()
                result.add_artifact("names", ["a"])
                return result

        class _Read(Generator):
            def generate(self) -> GeneratorResult:
                seen.append(dict(self.artifacts))
                return GeneratorResult()

        result = _Pipeline([_Read(document), _Share(document), _Read(document)]).generate()
        assert seen == [{}, {"names": ["a"]}]
        assert result.artifacts == {"names": ["a"]}
