"""Exceptions raised when address text cannot be parsed."""


class AddressError(ValueError):
    """Base class for all address parsing failures.

    `text` holds the input that failed, for diagnostics.
    """

    def __init__(self, message: str, text: str = ""):
        super().__init__(message)
        self.text = text


class EmptyAddressError(AddressError):
    """Sanitized input was empty where an address was required."""


class GrammarMismatchError(AddressError):
    """No prefix of the text matches the address grammar."""


class TrailingCharactersError(AddressError):
    """An address was parsed but unconsumed text follows it."""

    def __init__(self, message: str, text: str, parsed, remainder: str):
        super().__init__(message, text)
        self.parsed = parsed
        self.remainder = remainder


class EncodedWordError(AddressError):
    """An RFC 2047 encoded word in a display name could not be decoded."""


class AddressListError(AddressError):
    """An address list could not be parsed as a whole."""

    def __init__(self, message: str, address_list: str):
        super().__init__(message, address_list)
        self.address_list = address_list


class ListSeparatorError(AddressListError):
    """Text after a parsed list entry does not start with a comma."""

    def __init__(self, message: str, address_list: str, remainder: str):
        super().__init__(message, address_list)
        self.remainder = remainder
