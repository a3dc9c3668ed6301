"""Test HierarchyController"""
import json

import pytest
from unittest.mock import Mock

from hierview.config import LayoutSettings
from hierview.controller import HierarchyController
from hierview.exceptions import PersistenceError
from hierview.services.transition import TransitionKind
from hierview.services.tree_store import JsonFileStore, MemoryStore


@pytest.fixture
def mock_toast():
    """Mock ToastManager"""
    toast = Mock()
    toast.error = Mock()
    return toast


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def controller(store, mock_toast, sample_tree):
    controller = HierarchyController(store=store, toast_manager=mock_toast)
    controller.set_root(sample_tree)
    return controller


@pytest.fixture
def nested_controller(store, mock_toast, nested_tree):
    controller = HierarchyController(store=store, toast_manager=mock_toast)
    controller.set_root(nested_tree)
    return controller


class TestLoad:
    def test_load_default_when_store_empty(self, store):
        controller = HierarchyController(store=store)
        plan = controller.load()

        assert controller.root.name == "root"
        assert controller.node_count() == 7
        assert plan.source_id == controller.root.id
        assert plan.entering == controller.layout().ids()
        # Loading alone is not a structural change
        assert store.save_count == 0

    def test_load_from_store(self, sample_tree):
        store = MemoryStore(sample_tree.to_data())
        controller = HierarchyController(store=store)
        controller.load()

        assert [n.id for n in controller.root.walk()] == ["root", "a", "l1", "l2"]
        # Collapse state is not part of the stored tree
        assert controller.layout().ids() == ["root", "a", "l1", "l2"]

    def test_load_failure_falls_back_to_default(self, mock_toast):
        store = Mock()
        store.load.side_effect = PersistenceError("disk gone")
        controller = HierarchyController(store=store, toast_manager=mock_toast)

        controller.load()

        assert controller.root.name == "root"
        mock_toast.error.assert_called_once()

    def test_load_numeric_ids(self, tmp_path):
        path = tmp_path / "tree.json"
        path.write_text(
            json.dumps(
                {
                    "id": 1,
                    "name": "mine",
                    "children": [{"id": 2, "name": "kid", "value": 3}],
                }
            ),
            encoding="utf-8",
        )
        controller = HierarchyController(store=JsonFileStore(path))

        controller.load()
        plan = controller.insert_child("1", "x")

        assert controller.root.name == "mine"
        assert plan is not None
        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved["name"] == "mine"
        assert [c["name"] for c in saved["children"]] == ["kid", "x"]

    def test_failed_load_never_overwrites_store(self, tmp_path, mock_toast):
        path = tmp_path / "tree.json"
        path.write_text("{corrupt", encoding="utf-8")
        controller = HierarchyController(store=JsonFileStore(path), toast_manager=mock_toast)

        controller.load()
        assert controller.read_only

        plan = controller.insert_child(controller.root.id, "x")

        # The edit still shows, the broken file is left alone
        assert plan is not None
        assert controller.root.children[-1].name == "x"
        assert path.read_text(encoding="utf-8") == "{corrupt"
        assert mock_toast.error.call_count == 2

    def test_reload_after_failed_load_enables_saving(self, sample_tree):
        store = Mock()
        store.load.side_effect = [PersistenceError("locked"), sample_tree]
        controller = HierarchyController(store=store)

        controller.load()
        controller.insert_child("root", "x")
        store.save.assert_not_called()

        controller.load()
        assert not controller.read_only
        controller.insert_child("root", "y")
        store.save.assert_called_once()

    def test_load_with_collapsed_ids(self, nested_tree):
        controller = HierarchyController(store=MemoryStore(nested_tree.to_data()))
        controller.load(collapsed=["b", "missing", "c"])

        assert controller.collapsed_ids() == ["b"]
        assert controller.layout().ids() == ["root", "a", "b", "a2", "c"]

    def test_layout_requires_root(self):
        with pytest.raises(RuntimeError):
            HierarchyController().layout()


class TestToggle:
    def test_scenario_expand_collapsed_child(self, controller):
        assert controller.layout().ids() == ["root", "a"]

        plan = controller.toggle("a")

        result = controller.layout()
        assert result.ids() == ["root", "a", "l1", "l2"]
        assert result.get("a").hidden_children is None
        assert plan.source_id == "a"
        assert plan.entering == ["l1", "l2"]

    def test_toggle_is_own_inverse(self, nested_controller):
        b = nested_controller.find("b")
        original = b.children
        original_ids = [n.id for n in original]

        nested_controller.toggle("b")
        assert b.children is None
        assert b.hidden_children is original

        nested_controller.toggle("b")
        assert b.children is original
        assert b.hidden_children is None
        assert [n.id for n in b.children] == original_ids

    def test_toggle_unknown_id_is_noop(self, controller):
        before = controller.root.to_data()
        assert controller.toggle("nope") is None
        assert controller.root.to_data() == before
        assert controller.collapsed_ids() == ["a"]

    def test_toggle_leaf_is_noop(self, controller):
        controller.toggle("a")
        assert controller.toggle("l1") is None
        assert controller.find("l1").is_leaf

    def test_toggle_does_not_persist(self, controller, store):
        controller.toggle("a")
        assert store.save_count == 0

    def test_collapse_exits_toward_source(self, nested_controller):
        plan = nested_controller.toggle("a")

        assert plan.exiting == ["b", "b1", "b2", "a2"]
        a_position = plan.layout.get("a").position
        assert plan.get("b1").end.position == a_position


class TestInsertChild:
    def test_insert_adds_one_leaf(self, nested_controller, store):
        before = nested_controller.node_count()

        plan = nested_controller.insert_child("c", "X")

        assert nested_controller.node_count() == before + 1
        c = nested_controller.find("c")
        new_node = c.children[0]
        assert new_node.name == "X"
        assert new_node.is_leaf
        assert new_node.value == 5
        assert plan.source_id == "c"
        assert plan.entering == [new_node.id]
        assert store.save_count == 1
        assert store.data["children"][1]["children"][0]["name"] == "X"

    def test_insert_under_leaf_clears_its_value(self, nested_controller, store):
        total = nested_controller.root.total_value()

        nested_controller.insert_child("c", "X")

        c = nested_controller.find("c")
        assert c.value is None
        assert "value" not in store.data["children"][1]
        # c's weight of 4 is replaced by the new leaf's default 5
        assert nested_controller.root.total_value() == total - 4 + 5

    def test_insert_trims_name(self, nested_controller):
        nested_controller.insert_child("root", "  Padded  ")
        assert nested_controller.root.children[-1].name == "Padded"

    def test_blank_name_is_noop(self, controller, store):
        before = controller.node_count()
        assert controller.insert_child("a", "  ") is None
        assert controller.node_count() == before
        assert store.save_count == 0

    def test_cancelled_prompt_is_noop(self, controller, store):
        assert controller.insert_child("a", None) is None
        assert store.save_count == 0

    def test_unknown_parent_is_noop(self, controller, store):
        before = controller.root.to_data()
        assert controller.insert_child("missing", "X") is None
        assert controller.root.to_data() == before
        assert store.save_count == 0

    def test_insert_expands_collapsed_parent(self, controller):
        plan = controller.insert_child("a", "L3")

        a = controller.find("a")
        assert a.hidden_children is None
        assert [n.name for n in a.children] == ["L1", "L2", "L3"]
        assert len(plan.entering) == 3

    def test_insert_into_collapsed_root(self, controller):
        controller.toggle("root")
        assert controller.layout().ids() == ["root"]

        controller.insert_child("root", "New")

        names = [entry.name for entry in controller.layout().nodes]
        assert "New" in names
        assert controller.root.children is not None
        assert controller.root.hidden_children is None

    def test_insert_expands_parent_only(self, nested_controller):
        nested_controller.toggle("b")
        nested_controller.toggle("a")

        nested_controller.insert_child("a", "A3")

        assert nested_controller.find("a").children is not None
        assert nested_controller.find("b").is_collapsed

    def test_new_ids_are_unique(self, nested_controller):
        for i in range(5):
            nested_controller.insert_child("root", f"N{i}")
        ids = [n.id for n in nested_controller.root.walk()]
        assert len(ids) == len(set(ids))

    def test_ids_not_reused_after_reload(self, store, nested_tree):
        controller = HierarchyController(store=store)
        controller.set_root(nested_tree)
        controller.insert_child("root", "First")
        first_id = controller.root.children[-1].id

        reloaded = HierarchyController(store=store)
        reloaded.load()
        reloaded.insert_child("root", "Second")

        assert reloaded.root.children[-1].id != first_id
        assert reloaded.find(first_id).name == "First"

    def test_save_failure_surfaces_and_keeps_tree(self, mock_toast, nested_tree):
        store = Mock()
        store.save.side_effect = PersistenceError("read-only")
        controller = HierarchyController(store=store, toast_manager=mock_toast)
        controller.set_root(nested_tree)

        plan = controller.insert_child("c", "X")

        assert plan is not None
        assert controller.find("c").children[0].name == "X"
        mock_toast.error.assert_called_once_with("Failed to save tree")
        store.save.assert_called_once()


class TestBulkOperations:
    def test_collapse_all_keeps_root_open(self, nested_controller):
        plan = nested_controller.collapse_all()

        assert nested_controller.collapsed_ids() == ["a", "b"]
        assert nested_controller.layout().ids() == ["root", "a", "c"]
        assert plan.source_id == "root"

    def test_expand_all(self, nested_controller):
        nested_controller.collapse_all()
        nested_controller.expand_all()

        assert nested_controller.collapsed_ids() == []
        assert len(nested_controller.layout().nodes) == 7

    def test_noop_returns_none(self, nested_controller):
        assert nested_controller.expand_all() is None
        nested_controller.collapse_all()
        assert nested_controller.collapse_all() is None

    def test_restore_collapsed(self, nested_controller):
        plan = nested_controller.restore_collapsed(["b", "c", "unknown"])

        assert plan is not None
        assert nested_controller.collapsed_ids() == ["b"]
        assert nested_controller.restore_collapsed(["b"]) is None


class TestContinuity:
    def test_previous_position_matches_prior_pass(self, nested_controller):
        before = {e.id: e.position for e in nested_controller.layout().nodes}

        plan = nested_controller.toggle("b")

        for entry in plan.layout.nodes:
            assert entry.previous_position == before[entry.id]
        for node_id in plan.persisting:
            assert plan.get(node_id).start.position == before[node_id]

    def test_layout_is_idempotent(self, nested_controller):
        assert nested_controller.layout().positions() == nested_controller.layout().positions()

    def test_mid_animation_change_starts_from_displayed_state(self, nested_tree):
        controller = HierarchyController(
            store=MemoryStore(), settings=LayoutSettings(), animated=True
        )
        controller.set_root(nested_tree)
        controller.finish()

        controller.toggle("a")
        halfway = controller.advance(0.5)

        plan = controller.toggle("a")

        # Still-fading nodes are matched again instead of entering
        assert plan.entering == []
        for node_id, state in halfway.nodes.items():
            item = plan.get(node_id)
            assert item.kind == TransitionKind.UPDATE
            assert item.start == state
        for link in plan.links:
            assert link.start == halfway.links[link.child_id]

    def test_animated_plan_starts_at_zero(self, nested_tree):
        controller = HierarchyController(animated=True)
        plan = controller.set_root(nested_tree)

        root_state = controller.displayed_nodes["root"]
        assert root_state.opacity == 0.0
        assert plan.entering == controller.layout().ids()

        controller.finish()
        assert controller.displayed_nodes["root"].opacity == 1.0

    def test_exited_nodes_leave_displayed_state(self, nested_controller):
        nested_controller.toggle("a")
        assert set(nested_controller.displayed_nodes) == {"root", "a", "c"}
        assert set(nested_controller.displayed_links) == {"a", "c"}
