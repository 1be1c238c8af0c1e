"""Property-based tests for tree invariants and undo/redo."""

from hypothesis import given, settings
from hypothesis import strategies as st

from fluentforge.core import catalog
from fluentforge.core.ir import Document, WidgetTree
from fluentforge.core.mutations import create_widget
from fluentforge.core.session import DesignerSession
from fluentforge.core.validator import validate_tree
from fluentforge.stacks.pcf import generate_control

WIDGET_TYPES = catalog.widget_types()

# (op, widget type, target pick, parent pick, index)
operations = st.lists(
    st.tuples(
        st.sampled_from(["add", "remove", "move"]),
        st.sampled_from(WIDGET_TYPES),
        st.integers(min_value=0, max_value=50),
        st.integers(min_value=-1, max_value=50),
        st.integers(min_value=0, max_value=5),
    ),
    max_size=25,
)


def _pick(ids: list[str], n: int) -> str | None:
    """Pick an id by index; negative means the root list."""
    if n < 0 or not ids:
        return None
    return ids[n % len(ids)]


def _run(session: DesignerSession, ops: list[tuple[str, str, int, int, int]]) -> list[WidgetTree]:
    """Apply ``ops`` and return the tree after each recorded edit (the first is the start)."""
    states = [session.document.tree]
    for op, widget_type, target, parent, index in ops:
        ids = sorted(session.document.tree.nodes)
        if op == "add":
            result = session.add_widget(create_widget(widget_type), parent_id=_pick(ids, parent))
        elif op == "remove":
            result = session.remove_widget(_pick(ids, target) or "missing")
        else:
            node_id = _pick(ids, target)
            if node_id is None:
                continue
            result = session.move_widget(node_id, _pick(ids, parent), index)
        if result.success and result.changed:
            states.append(session.document.tree)
    return states


def _check_consistent(tree: WidgetTree) -> None:
    reachable = [node.id for node, _ in tree.walk()]
    assert len(reachable) == len(set(reachable))
    assert set(reachable) == set(tree.nodes)
    assert set(tree.parents) == set(tree.nodes)
    for node_id in tree.nodes:
        assert node_id in tree.children_of(tree.parent_of(node_id))
    errors, _ = validate_tree(Document(tree=tree))
    assert errors == []


class TestTreeProperties:
    @settings(max_examples=60, deadline=None)
    @given(operations)
    def test_edits_keep_tree_consistent(self, ops: list[tuple[str, str, int, int, int]]) -> None:
        session = DesignerSession(history_capacity=100)
        for tree in _run(session, ops):
            _check_consistent(tree)

    @settings(max_examples=60, deadline=None)
    @given(operations)
    def test_undo_redo_walks_every_state(self, ops: list[tuple[str, str, int, int, int]]) -> None:
        session = DesignerSession(history_capacity=100)
        states = _run(session, ops)
        assert len(session.history) == len(states) - 1

        for expected in reversed(states[:-1]):
            assert session.undo()
            assert session.document.tree == expected
        assert not session.undo()

        for expected in states[1:]:
            assert session.redo()
            assert session.document.tree == expected
        assert not session.redo()

    @settings(max_examples=30, deadline=None)
    @given(operations)
    def test_generation_is_deterministic(self, ops: list[tuple[str, str, int, int, int]]) -> None:
        session = DesignerSession(history_capacity=100)
        _run(session, ops)
        assert generate_control(session.document).files() == generate_control(session.document).files()
