from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Resize
from textual.screen import ModalScreen
from textual.widgets import Label


class ResizeScreenPromptModal(ModalScreen[None]):
    """
    Covers the app while the terminal is too small for the layout.
    Goes away on its own once the window is big enough again.
    """

    def __init__(self, min_width: int = 60, min_height: int = 20) -> None:
        super().__init__()
        self.min_width = min_width
        self.min_height = min_height

    def compose(self) -> ComposeResult:
        with Container(id="div-resize"):
            yield Label(
                f"Please resize the terminal to at least "
                f"{self.min_width}x{self.min_height}",
                id="prompt",
            )

    def on_resize(self, event: Resize) -> None:
        if (
            event.size.width >= self.min_width
            and event.size.height >= self.min_height
        ):
            self.dismiss()
