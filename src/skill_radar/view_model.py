from __future__ import annotations

from typing import Callable, Dict, FrozenSet, Iterable, List, Literal, Mapping, Optional, Tuple

from skill_radar.config import DEFAULT_PENDING_MS, AppConfig
from skill_radar.core import RadarPoint, SkillRecord, TrendPoint
from skill_radar.store import LoadError, NotFoundError, SkillStore
from skill_radar.validation import ScoreValidation, validate_score
from skill_radar.views import build_radar, build_trend


FieldName = Literal["records", "status", "errors", "pending", "selected", "dark_mode"]
Subscriber = Callable[[object], None]
UiDispatch = Callable[[Callable[[], None], Optional[int]], None]

_FIELDS: Tuple[FieldName, ...] = ("records", "status", "errors", "pending", "selected", "dark_mode")


class DashboardViewModel:
    """
    Observable, caller-owned UI state around a SkillStore.

    The store only holds scores. Everything a screen needs on top of that lives
    here:
      - records: Tuple[SkillRecord, ...] (latest snapshot)
      - status: str
      - errors: Mapping[name, message] for rejected score input
      - pending: FrozenSet[name] of records showing the optimistic-update marker
      - selected: Optional[SkillRecord] shown in the detail view
      - dark_mode: bool
    Subscribers can listen to individual fields and receive updates when values change.
    """

    def __init__(
        self,
        store: Optional[SkillStore] = None,
        *,
        pending_ms: int = DEFAULT_PENDING_MS,
        ui_dispatch: Optional[UiDispatch] = None,
    ) -> None:
        self.store = store or SkillStore()
        self.pending_ms = pending_ms
        self.ui_dispatch = ui_dispatch

        self.records: Tuple[SkillRecord, ...] = self.store.snapshot()
        self.status: str = ""
        self.errors: Mapping[str, str] = {}
        self.pending: FrozenSet[str] = frozenset()
        self.dark_mode: bool = False
        self._selected_name: Optional[str] = None
        self._subscribers: Dict[FieldName, List[Subscriber]] = {f: [] for f in _FIELDS}

    @classmethod
    def from_config(
        cls,
        cfg: AppConfig,
        store: Optional[SkillStore] = None,
        *,
        ui_dispatch: Optional[UiDispatch] = None,
    ) -> "DashboardViewModel":
        return cls(store, pending_ms=cfg.pending_ms, ui_dispatch=ui_dispatch)

    def subscribe(self, field: FieldName, fn: Subscriber) -> Callable[[], None]:
        """
        Subscribe to a field; returns an unsubscribe callable.
        Invokes the callback immediately with the current value.
        """
        if field not in self._subscribers:
            raise ValueError(f"Unknown field '{field}'")

        self._subscribers[field].append(fn)
        fn(self._get_value(field))

        def unsubscribe() -> None:
            try:
                self._subscribers[field].remove(fn)
            except ValueError:
                pass

        return unsubscribe

    # ---- derived (recomputed on every read) ----

    @property
    def radar(self) -> List[RadarPoint]:
        return build_radar(self.store.snapshot())

    @property
    def trend(self) -> List[TrendPoint]:
        return build_trend(self.store.snapshot())

    @property
    def selected(self) -> Optional[SkillRecord]:
        if self._selected_name is None:
            return None
        return self.store.get(self._selected_name)

    # ---- mutations ----

    def set_status(self, status: str) -> None:
        if status == self.status:
            return
        self.status = status
        self._notify("status")

    def load(self, records: Iterable[SkillRecord]) -> bool:
        try:
            self.store.load(records)
        except LoadError as e:
            self.store.load([])
            self._refresh_records()
            self.set_status(f"error:load:{e}")
            return False

        self._refresh_records()
        self._set_errors({})
        self._set_pending(frozenset())
        if self._selected_name is not None and self._selected_name not in self.store:
            self.clear_selection()
        self.set_status(f"loaded {len(self.store)} skills" if len(self.store) else "no skills found")
        return True

    def load_failed(self, message: str) -> None:
        self.store.load([])
        self._refresh_records()
        self.set_status(f"error:load:{message}")

    def submit_score(self, name: str, raw: str) -> ScoreValidation:
        """
        Validate raw input and commit it when valid.

        Rejected input keeps the old score and sets an inline error; incomplete
        input (e.g. "" or ".") is held without an error. Raises NotFoundError
        for names the store never loaded.
        """
        result = validate_score(raw)

        if not result.ok:
            if name not in self.store:
                raise NotFoundError(name)
            if result.incomplete:
                self._clear_error(name)
            else:
                self._set_errors({**self.errors, name: result.message})
            return result

        self.store.set_score(name, result.value)  # type: ignore[arg-type]
        self._clear_error(name)
        self._refresh_records()
        if self._selected_name == name:
            self._notify("selected")
        self._mark_pending(name)
        return result

    def select(self, name: str) -> None:
        if name not in self.store:
            raise ValueError(f"Unknown skill '{name}'")
        self._selected_name = name
        self._notify("selected")

    def clear_selection(self) -> None:
        if self._selected_name is None:
            return
        self._selected_name = None
        self._notify("selected")

    def toggle_dark_mode(self) -> None:
        self.dark_mode = not self.dark_mode
        self._notify("dark_mode")

    # ---- internal ----

    def _refresh_records(self) -> None:
        self.records = self.store.snapshot()
        self._notify("records")

    def _set_errors(self, errors: Mapping[str, str]) -> None:
        if dict(errors) == dict(self.errors):
            return
        self.errors = dict(errors)
        self._notify("errors")

    def _clear_error(self, name: str) -> None:
        if name in self.errors:
            self._set_errors({k: v for k, v in self.errors.items() if k != name})

    def _set_pending(self, pending: FrozenSet[str]) -> None:
        if pending == self.pending:
            return
        self.pending = pending
        self._notify("pending")

    def _mark_pending(self, name: str) -> None:
        if self.ui_dispatch is None:
            return
        self._set_pending(self.pending | {name})

        def clear() -> None:
            self._set_pending(self.pending - {name})

        self.ui_dispatch(clear, self.pending_ms)

    def _notify(self, field: FieldName) -> None:
        value = self._get_value(field)
        for fn in list(self._subscribers[field]):
            fn(value)

    def _get_value(self, field: FieldName):
        if field == "records":
            return self.records
        if field == "status":
            return self.status
        if field == "errors":
            return self.errors
        if field == "pending":
            return self.pending
        if field == "selected":
            return self.selected
        if field == "dark_mode":
            return self.dark_mode
        raise ValueError(f"Unknown field '{field}'")
