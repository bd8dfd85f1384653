"""Message formatting used when no localization layer is plugged in."""


class PlainTranslator:
    """
    Implements Translator protocol without a message catalog.

    Positional arguments are interpolated with ``%`` formatting, matching
    the ``%s`` placeholders used throughout the domain messages.
    """

    def t(self, message: str, *args: object) -> str:
        if not args:
            return message
        return message % args
