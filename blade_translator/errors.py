class BladeTranslatorError(RuntimeError):
    pass


class ConfigError(BladeTranslatorError):
    pass


class InputError(BladeTranslatorError):
    pass


class DictionaryError(BladeTranslatorError):
    pass


class TranslationError(BladeTranslatorError):
    pass


class RateLimitError(TranslationError):
    """Raised on HTTP 429 so the retry loop can back off."""
