"""One-shot admin notices for the current request."""

from collections.abc import Callable

from markupsafe import Markup

NoticeRenderer = Callable[[], Markup]


class AdminNotices:
    """Collects notice renderers and renders each of them once."""

    def __init__(self):
        self._renderers: list[NoticeRenderer] = []

    def add(self, renderer: NoticeRenderer) -> None:
        if not self.has(renderer):
            self._renderers.append(renderer)

    def has(self, renderer: NoticeRenderer) -> bool:
        return renderer in self._renderers

    def render(self) -> list[Markup]:
        renderers, self._renderers = self._renderers, []
        return [renderer() for renderer in renderers]
