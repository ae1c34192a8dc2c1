"""Exception hierarchy for the answering pipeline."""


class FontesQAError(Exception):
    """Base class for all errors raised by fontes_qa."""


class InputError(FontesQAError):
    """The question is empty or malformed. Never retried."""


class CorpusUnavailable(FontesQAError):
    """The corpus directory is missing or holds no valid documents."""


class ProviderError(FontesQAError):
    """An embedding or completion call failed.

    The underlying exception is chained as ``__cause__``.
    """

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
