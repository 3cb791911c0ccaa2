"""Collapse/expand state for the product sidebar, driven by playback time.

Each product is Expanded or Collapsed, with an orthogonal manual override
flag. On every tick, for every product, in order:

1. Entering its window (inactive on the previous tick, or first tick
   after a reset): clear the override and expand.
2. Still inside its window: leave it alone.
3. Past its window: collapse, unless a manual override is set.
4. Before its window: leave it alone.

A user toggle flips collapsed and sets the override. Entering is
positional, so seeking backward into a window counts as entering.

The reducers are pure: they return a new state and whether anything a
renderer cares about changed.
"""

from dataclasses import dataclass, field

from ..models.product import Product, ProductKey


@dataclass(frozen=True)
class CollapseState:
    """Sparse per-product UI state. Missing keys mean collapsed, no override."""

    collapsed: dict[ProductKey, bool] = field(default_factory=dict)
    manual_override: dict[ProductKey, bool] = field(default_factory=dict)
    active: frozenset[ProductKey] = frozenset()  # keys active on the previous tick
    evaluated: bool = False                       # False until the first tick after a reset

    def is_collapsed(self, key: ProductKey) -> bool:
        return self.collapsed.get(key, True)

    def is_overridden(self, key: ProductKey) -> bool:
        return self.manual_override.get(key, False)


@dataclass(frozen=True)
class TickResult:
    state: CollapseState
    changed: bool


def initial_state(products: list[Product] | None = None) -> CollapseState:
    """Fresh state for a new product list: everything collapsed."""
    return CollapseState(collapsed={p.key: True for p in products or []})


def reduce_tick(state: CollapseState, products: list[Product], t: float) -> TickResult:
    """Reconcile every product's state against playback time t."""
    collapsed = dict(state.collapsed)
    overrides = dict(state.manual_override)
    active: set[ProductKey] = set()

    for product in products:
        key = product.key

        if product.is_active_at(t):
            active.add(key)
            entering = not state.evaluated or key not in state.active
            if entering:
                overrides.pop(key, None)
                collapsed[key] = False
            # Inside the window with no transition: keep whatever the user left
            continue

        if t > product.end:
            if overrides.get(key):
                continue
            collapsed[key] = True

        # t < start: no automatic action

    new_state = CollapseState(
        collapsed=collapsed,
        manual_override=overrides,
        active=frozenset(active),
        evaluated=True,
    )
    return TickResult(state=new_state, changed=_differs(state, new_state))


def reduce_toggle(state: CollapseState, key: ProductKey) -> CollapseState:
    """Flip a product's collapsed flag and record the manual override."""
    collapsed = dict(state.collapsed)
    collapsed[key] = not state.is_collapsed(key)
    overrides = dict(state.manual_override)
    overrides[key] = True
    return CollapseState(
        collapsed=collapsed,
        manual_override=overrides,
        active=state.active,
        evaluated=state.evaluated,
    )


def _differs(old: CollapseState, new: CollapseState) -> bool:
    """Compare resolved flags, treating missing keys as their defaults."""
    keys = old.collapsed.keys() | new.collapsed.keys()
    if any(old.is_collapsed(k) != new.is_collapsed(k) for k in keys):
        return True
    keys = old.manual_override.keys() | new.manual_override.keys()
    return any(old.is_overridden(k) != new.is_overridden(k) for k in keys)


class CollapseController:
    """Owns a CollapseState and the product list it tracks."""

    def __init__(self, products: list[Product] | None = None):
        self.products: list[Product] = []
        self.state = initial_state()
        self.reset(products or [])

    def reset(self, products: list[Product]):
        """Start over for a new product list."""
        self.products = list(products)
        self.state = initial_state(self.products)

    def tick(self, t: float) -> bool:
        """Apply a time update. Returns True if a re-render is needed."""
        result = reduce_tick(self.state, self.products, t)
        self.state = result.state
        return result.changed

    def toggle(self, key: ProductKey):
        self.state = reduce_toggle(self.state, key)

    def is_collapsed(self, key: ProductKey) -> bool:
        return self.state.is_collapsed(key)

    def is_overridden(self, key: ProductKey) -> bool:
        return self.state.is_overridden(key)
