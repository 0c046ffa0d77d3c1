from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Fired after the auth store accepted a login, the app then routes to the
    user's landing screen
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    Fired when the user asks to log out
    """

    bubble = True


class SessionExpiredMessage(Message):
    """
    Fired when the backend answered 401, stored credentials are already gone
    """

    bubble = True


class NewOrderMessage(Message):
    """
    Fired when checkout went through, customers are then taken to their orders
    """

    bubble = True


class NavigateMessage(Message):
    """
    Ask the app to go to a route; guards decide where we actually end up
    """

    bubble = True

    def __init__(self, route: str) -> None:
        super().__init__()
        self.route = route
