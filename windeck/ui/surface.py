"""
surface.py - Stand-in for the embedded web view.

Rendering is not part of this program; HeadlessSurface implements the calls
the shell and the UI bridge make and logs them, so the rest of the
application runs unchanged. A real web view only has to offer the same
methods.
"""


class HeadlessSurface:
    def __init__(self, log, title: str = "WinDeck Nexus"):
        self.log = log
        self.title = title
        self.visible = False
        self.current_page = None
        self.sent_messages: list[str] = []
        self._on_message = None

    def create_environment(self):
        self.log.debug(f"[UI] {self.title}: environment created")

    def create_controller(self, on_message=None):
        self._on_message = on_message
        self.log.debug(f"[UI] {self.title}: controller created")

    def navigate(self, page: str, on_complete=None):
        self.current_page = page
        self.log.info(f"[UI] {self.title}: navigate {page}")
        if on_complete is not None:
            on_complete()

    def post_message(self, text: str):
        self.sent_messages.append(text)
        self.log.debug(f"[UI] {self.title}: post {len(text)} chars")

    def receive(self, text: str):
        """Deliver a message as if the page had sent it."""
        if self._on_message is not None:
            self._on_message(text)

    def show(self):
        self.visible = True
        self.log.info(f"[UI] {self.title}: shown")

    def hide(self):
        self.visible = False
        self.log.info(f"[UI] {self.title}: hidden")

    def close(self):
        self.visible = False
        self.log.debug(f"[UI] {self.title}: closed")
