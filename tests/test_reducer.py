from __future__ import annotations

import pytest

from storefront import cart as Ct
from storefront.cart import CartItem, ItemType


def item(id: str, price: int = 100, title: str | None = None) -> CartItem:
    return CartItem(id=id, title=title or id.upper(), price=price, type=ItemType.COURSE)


def test_add_appends_new_item_with_incoming_quantity() -> None:
    state = Ct.reduce(Ct.EMPTY, Ct.AddItem(item("a"), quantity=3))

    assert [(i.id, i.quantity) for i in state.items] == [("a", 3)]


def test_repeated_adds_keep_one_line_per_id_with_summed_quantity() -> None:
    adds = [("a", 1), ("b", 2), ("a", 4), ("c", 1), ("b", 1), ("a", 1)]

    state = Ct.EMPTY
    for item_id, quantity in adds:
        state = Ct.reduce(state, Ct.AddItem(item(item_id), quantity))

    assert [i.id for i in state.items] == ["a", "b", "c"]
    assert {i.id: i.quantity for i in state.items} == {"a": 6, "b": 3, "c": 1}


def test_add_existing_keeps_existing_metadata() -> None:
    state = Ct.reduce(Ct.EMPTY, Ct.AddItem(item("a", price=100, title="Old")))
    state = Ct.reduce(state, Ct.AddItem(item("a", price=999, title="New")))

    (line,) = state.items
    assert line.title == "Old"
    assert line.price == 100
    assert line.quantity == 2


def test_add_rejects_non_positive_quantity() -> None:
    with pytest.raises(ValueError):
        Ct.AddItem(item("a"), quantity=0)


def test_remove_filters_and_ignores_absent() -> None:
    state = Ct.reduce(Ct.EMPTY, Ct.AddItem(item("a")))
    state = Ct.reduce(state, Ct.AddItem(item("b")))

    state = Ct.reduce(state, Ct.RemoveItem("a"))
    assert [i.id for i in state.items] == ["b"]

    assert Ct.reduce(state, Ct.RemoveItem("zzz")) == state


@pytest.mark.parametrize("quantity", [0, -1, -50])
def test_update_to_non_positive_removes(quantity: int) -> None:
    state = Ct.reduce(Ct.EMPTY, Ct.AddItem(item("a"), 2))

    state = Ct.reduce(state, Ct.UpdateQuantity("a", quantity))

    assert state.items == ()


def test_update_sets_exact_quantity_in_place() -> None:
    state = Ct.reduce(Ct.EMPTY, Ct.AddItem(item("a")))
    state = Ct.reduce(state, Ct.AddItem(item("b")))

    state = Ct.reduce(state, Ct.UpdateQuantity("a", 7))

    assert [(i.id, i.quantity) for i in state.items] == [("a", 7), ("b", 1)]


def test_clear_and_load() -> None:
    state = Ct.reduce(Ct.EMPTY, Ct.AddItem(item("a")))
    assert Ct.reduce(state, Ct.ClearCart()).items == ()

    loaded = Ct.reduce(state, Ct.LoadCart((item("x"), item("y"))))
    assert [i.id for i in loaded.items] == ["x", "y"]


def test_load_merges_repeated_ids_and_drops_empty_lines() -> None:
    loaded = Ct.reduce(Ct.EMPTY, Ct.LoadCart((
        item("a"),
        item("b"),
        CartItem(id="a", title="A", price=100, type=ItemType.COURSE, quantity=2),
        CartItem(id="z", title="Z", price=100, type=ItemType.COURSE, quantity=0),
    )))

    assert [(i.id, i.quantity) for i in loaded.items] == [("a", 3), ("b", 1)]



def test_open_actions_touch_only_visibility() -> None:
    state = Ct.reduce(Ct.EMPTY, Ct.AddItem(item("a")))

    opened = Ct.reduce(state, Ct.SetOpen(True))
    assert opened.is_open is True
    assert opened.items == state.items

    toggled = Ct.reduce(opened, Ct.ToggleOpen())
    assert toggled.is_open is False
    assert toggled.items == state.items


def test_derived_totals() -> None:
    state = Ct.CartState(items=(
        CartItem(id="a", title="A", price=1000, type=ItemType.COURSE, quantity=2),
        CartItem(id="b", title="B", price=500, type=ItemType.EBOOK, quantity=1),
    ))

    assert state.count == 3
    assert state.subtotal == 2500
    assert state.total == 2500
    assert state.find("b") is not None
    assert state.find("zzz") is None
