from marginaltrees.tree import Node


def make_tree() -> Node:
    a = Node(nr=0, name="A", height=0.0)
    b = Node(nr=1, name="B", height=0.5)
    return Node(nr=2, children=[a, b], name="R", height=2.0)


def test_traverse_is_preorder():
    root = make_tree()

    assert [node.nr for node in root.traverse()] == [2, 0, 1]
    assert root.get_current_order() == ("A", "B")


def test_lengths_derive_from_heights():
    root = make_tree()

    assert root.left.length == 2.0
    assert root.right.length == 1.5
    assert root.length is None
    assert root.to_newick() == "(A:2.000000,B:1.500000)R;"
    assert root.to_newick(lengths=False) == "(A,B)R;"


def test_append_child_invalidates_caches():
    root = make_tree()
    assert len(root.get_leaves()) == 2

    c = Node(nr=3, name="C")
    root.left.append_child(c)

    assert c.parent is root.left
    assert c.get_root() is root
    assert [leaf.name for leaf in root.get_leaves()] == ["C", "B"]


def test_to_dict():
    root = make_tree()

    d = root.to_dict()
    assert d["height"] == 2.0
    assert [child["name"] for child in d["children"]] == ["A", "B"]
