from typing import Callable, NamedTuple, Optional

from category_service import CategoryOrderService
from diary_service import DiaryService
from view_selector import ALL_CATEGORIES, ViewSelector


class NavigationEvent(NamedTuple):
    screen: str
    active: str
    exercise_id: Optional[str]
    chrome_visible: bool


class Navigator:
    """Build the home and detail screens and notify observers.

    The global chrome (header and category tabs) is visible on the home
    screen and hidden on the detail screen.
    """

    def __init__(
        self,
        service: DiaryService,
        order_service: CategoryOrderService,
        history_limit: int = 4,
    ) -> None:
        self.service = service
        self.order_service = order_service
        self.history_limit = history_limit
        self.observers: list[Callable[[NavigationEvent], None]] = []
        self.current: Optional[NavigationEvent] = None

    def subscribe(self, observer: Callable[[NavigationEvent], None]) -> None:
        self.observers.append(observer)

    def unsubscribe(self, observer: Callable[[NavigationEvent], None]) -> None:
        if observer in self.observers:
            self.observers.remove(observer)

    def _notify(self, event: NavigationEvent) -> None:
        self.current = event
        for observer in list(self.observers):
            observer(event)

    def show_home(self, active: str = ALL_CATEGORIES) -> dict:
        order = self.order_service.order()
        if active != ALL_CATEGORIES and active not in order:
            active = ALL_CATEGORIES
        exercises = self.service.exercises
        view = {
            "screen": "home",
            "active": active,
            "tabs": ViewSelector.category_tabs(exercises, order, active),
            "sections": ViewSelector.home_sections(exercises, order, active),
        }
        self._notify(NavigationEvent("home", active, None, True))
        return view

    def show_detail(self, exercise_id: str) -> dict:
        exercise = self.service.get_exercise(exercise_id)
        if exercise is None:
            return self.show_home(ALL_CATEGORIES)
        view = {"screen": "detail"}
        view.update(ViewSelector.exercise_detail(exercise, self.history_limit))
        self._notify(NavigationEvent("detail", ALL_CATEGORIES, exercise_id, False))
        return view


class NavigationHistory:
    """Observer recording visited screens so the caller can go back."""

    def __init__(self, navigator: Navigator) -> None:
        self.navigator = navigator
        self.events: list[NavigationEvent] = []
        self._replaying = False
        navigator.subscribe(self)

    def __call__(self, event: NavigationEvent) -> None:
        if not self._replaying:
            self.events.append(event)

    def back(self) -> Optional[dict]:
        """Re-open the previous screen, or return None at the start."""
        if len(self.events) < 2:
            return None
        self.events.pop()
        previous = self.events[-1]
        self._replaying = True
        try:
            if previous.screen == "detail":
                return self.navigator.show_detail(previous.exercise_id)
            return self.navigator.show_home(previous.active)
        finally:
            self._replaying = False
