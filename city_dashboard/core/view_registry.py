from __future__ import annotations
from typing import Dict, List, Optional, Tuple, Type

from .base_view import BaseView
from .snapshot import DashboardSnapshot, RankedCities


class ViewRegistry:
    """
    Ordered collection of the dashboard's tab views.

    The Dash layer never imports a concrete view: it asks the registry for
    the tab bar entries and for a view instance by tab id.

    Rules:
    - only {@link BaseView} subclasses are accepted
    - tab ids are unique
    - registration order is tab order
    - classes are stored; a fresh view is built for every render
    """

    def __init__(self):
        self._by_id: Dict[str, Type[BaseView]] = {}

    def register(self, view_cls: Type[BaseView]) -> None:
        """
        Add a tab view at the end of the tab bar

        Raises:
            TypeError: view_cls is not a {@link BaseView} subclass
            ValueError: another view already uses the same tab id
        """
        if not isinstance(view_cls, type) or not issubclass(view_cls, BaseView):
            raise TypeError(f"Cannot register {view_cls!r}: views must subclass BaseView")

        if view_cls.id in self._by_id:
            raise ValueError(f"Tab id '{view_cls.id}' is already taken by {self._by_id[view_cls.id].__name__}")

        self._by_id[view_cls.id] = view_cls

    def __contains__(self, view_id: object) -> bool:
        return view_id in self._by_id

    def create(
        self,
        view_id: str,
        snapshot: DashboardSnapshot,
        ranking: Optional[RankedCities] = None,
    ) -> BaseView:
        """
        Build the view behind a tab for one render pass
        :param view_id: tab id, as stored in AppState.active_tab
        :param snapshot: the loaded dashboard data
        :param ranking: last gateway ranking, only read by the comparisons tab

        Raises:
            KeyError: no view is registered under view_id
        """
        view_cls = self._by_id.get(view_id)
        if view_cls is None:
            raise KeyError(f"No tab registered with id '{view_id}'")
        return view_cls(snapshot, ranking=ranking)

    def all_classes(self) -> List[Type[BaseView]]:
        return list(self._by_id.values())

    def tabs(self) -> List[Tuple[str, str]]:
        """(id, label) pairs for the tab bar, in registration order."""
        return [(view_cls.id, view_cls.label) for view_cls in self._by_id.values()]
