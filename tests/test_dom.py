"""Tests for the live tree used as rendering target."""

import unittest

from chaindom import dom
from chaindom.dom import CommentNode, ElementNode, TextNode
from chaindom.errors import StructureError


def _names(node):
    return [child.name for child in node.children]


class TestTreeOperations(unittest.TestCase):
    def setUp(self):
        self.root = ElementNode("div")
        self.a = ElementNode("a")
        self.b = ElementNode("b")
        self.c = ElementNode("c")

    def test_append_child_links_siblings(self):
        self.root.append_child(self.a)
        self.root.append_child(self.b)
        assert _names(self.root) == ["a", "b"]
        assert self.a.parent is self.root
        assert self.a.next_sibling is self.b
        assert self.b.previous_sibling is self.a
        assert self.b.next_sibling is None

    def test_prepend_child(self):
        self.root.append_child(self.a)
        dom.prepend_child(self.root, self.b)
        assert _names(self.root) == ["b", "a"]
        assert self.b.next_sibling is self.a
        assert self.a.previous_sibling is self.b

    def test_insert_after_middle_and_end(self):
        self.root.append_child(self.a)
        self.root.append_child(self.c)
        dom.insert_after(self.a, self.b)
        assert _names(self.root) == ["a", "b", "c"]
        d = ElementNode("d")
        dom.insert_after(self.c, d)
        assert _names(self.root) == ["a", "b", "c", "d"]
        assert self.c.next_sibling is d

    def test_insert_after_moves_existing_child(self):
        for node in (self.a, self.b, self.c):
            self.root.append_child(node)
        dom.insert_after(self.c, self.a)
        assert _names(self.root) == ["b", "c", "a"]
        assert self.b.previous_sibling is None
        assert self.a.previous_sibling is self.c

    def test_insert_after_detached_reference_raises(self):
        with self.assertRaises(StructureError):
            dom.insert_after(self.a, self.b)

    def test_insert_before_requires_child_reference(self):
        with self.assertRaises(StructureError):
            self.root.insert_before(self.a, self.b)

    def test_remove_from_parent(self):
        self.root.append_child(self.a)
        self.root.append_child(self.b)
        dom.remove_from_parent(self.a)
        assert _names(self.root) == ["b"]
        assert self.a.parent is None
        assert self.b.previous_sibling is None
        # Removing a detached node is a no-op
        dom.remove_from_parent(self.a)

    def test_circular_reference_rejected(self):
        self.root.append_child(self.a)
        self.a.append_child(self.b)
        with self.assertRaises(StructureError):
            self.b.append_child(self.root)
        with self.assertRaises(StructureError):
            self.a.append_child(self.a)

    def test_iter_tree_is_preorder(self):
        self.root.append_child(self.a)
        self.a.append_child(self.b)
        self.root.append_child(self.c)
        assert [n.name for n in self.root.iter_tree()] == ["div", "a", "b", "c"]

    def test_text_content(self):
        self.root.append_child(TextNode("one "))
        self.root.append_child(self.a)
        self.a.append_child(TextNode("two"))
        self.root.append_child(CommentNode("ignored"))
        assert self.root.text_content == "one two"
        self.root.text_content = "replaced"
        assert len(self.root.children) == 1
        assert self.root.text_content == "replaced"

    def test_empty_name_rejected(self):
        with self.assertRaises(ValueError):
            ElementNode("")


class TestCharacterData(unittest.TestCase):
    def test_append_and_replace(self):
        node = TextNode("ab")
        node.append_data("cd")
        assert node.data == "abcd"
        node.text_content = "x"
        assert node.data == "x"

    def test_comment_repr(self):
        assert repr(CommentNode("hi")) == "CommentNode('hi')"

    def test_serialize_subtree(self):
        div = dom.create_element("div")
        dom.append_child(div, dom.create_comment("c"))
        dom.append_child(div, dom.create_text("t"))
        assert dom.serialize_subtree(div) == "<div><!--c-->t</div>"


class TestElementHelpers(unittest.TestCase):
    def test_attributes(self):
        el = ElementNode("input")
        el.set_attribute("value", 3)
        assert el.get_attribute("value") == "3"
        assert el.has_attribute("value")
        el.remove_attribute("value")
        el.remove_attribute("value")
        assert not el.has_attribute("value")

    def test_class_list(self):
        el = ElementNode("p")
        el.class_list.add("a", "b")
        el.class_list.add("a")
        assert el.attrs["class"] == "a b"
        assert el.class_list.toggle("c") is True
        assert el.class_list.toggle("a") is False
        assert list(el.class_list) == ["b", "c"]
        assert "b" in el.class_list
        el.class_list.remove("b", "c")
        assert "class" not in el.attrs

    def test_dataset_uses_kebab_case_attributes(self):
        el = ElementNode("p")
        el.dataset["userId"] = 7
        assert el.attrs["data-user-id"] == "7"
        assert dict(el.dataset) == {"userId": "7"}
        del el.dataset["userId"]
        assert el.attrs == {}

    def test_style_mapping(self):
        el = ElementNode("p")
        el.set_attribute("style", "color: red")
        el.style["marginTop"] = "1px"
        assert el.attrs["style"] == "color: red; margin-top: 1px;"
        assert el.style["color"] == "red"
        del el.style["color"]
        del el.style["margin-top"]
        assert "style" not in el.attrs


class TestEvents(unittest.TestCase):
    def test_dispatch_bubbles_to_ancestors(self):
        outer = ElementNode("div")
        inner = ElementNode("span")
        outer.append_child(inner)
        seen = []
        outer.add_event_listener("click", lambda e: seen.append(("outer", e.target, e.current_target)))
        inner.add_event_listener("click", lambda e: seen.append(("inner", e.target, e.current_target)))
        assert inner.dispatch_event(dom.Event("click")) is True
        assert seen == [("inner", inner, inner), ("outer", inner, outer)]

    def test_stop_propagation(self):
        outer = ElementNode("div")
        inner = ElementNode("span")
        outer.append_child(inner)
        seen = []
        outer.add_event_listener("click", lambda e: seen.append("outer"))
        inner.add_event_listener("click", lambda e: e.stop_propagation())
        assert inner.dispatch_event(dom.Event("click")) is False
        assert seen == []

    def test_non_bubbling_event(self):
        outer = ElementNode("div")
        inner = ElementNode("span")
        outer.append_child(inner)
        seen = []
        outer.add_event_listener("focus", lambda e: seen.append("outer"))
        inner.dispatch_event(dom.Event("focus", bubbles=False))
        assert seen == []

    def test_listener_removed_during_dispatch_still_completes_round(self):
        el = ElementNode("div")
        seen = []

        def first(e):
            seen.append("first")
            el.remove_event_listener("click", second)

        def second(e):
            seen.append("second")

        el.add_event_listener("click", first)
        el.add_event_listener("click", second)
        el.dispatch_event(dom.Event("click"))
        assert seen == ["first", "second"]
        el.dispatch_event(dom.Event("click"))
        assert seen == ["first", "second", "first"]


if __name__ == "__main__":
    unittest.main()
