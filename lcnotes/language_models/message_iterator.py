"""
Iterators that feed messages to a fake chat model.

The 'Debug' model source is a LangChain GenericFakeChatModel, which
answers each call with the next item of an iterator. The iterators
here provide numbered messages, a constant message, or a fixed script
of messages.
"""

from collections.abc import Iterable
from typing import Iterator


class MessageIterator:
    """
    An infinite iterator of messages of the form "{prefix} {counter}",
    where counter starts at 1.
    """

    def __init__(self, prefix: str = "Message") -> None:
        self.prefix = prefix
        self.counter = 1

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        message = f"{self.prefix} {self.counter}"
        self.counter += 1
        return message


class ConstantMessageIterator:
    """
    An infinite iterator that repeats the message with which it was
    initialized. The counter records how many messages were produced.
    """

    def __init__(self, message: str = "Message") -> None:
        self.message = message
        self.counter = 0

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        self.counter += 1
        return self.message


def yield_message(prefix: str = "Message") -> MessageIterator:
    """
    Create an iterator of numbered messages.

    Example:
        >>> iterator = yield_message("Alert")
        >>> next(iterator)
        'Alert 1'
        >>> next(iterator)
        'Alert 2'
    """
    return MessageIterator(prefix)


def yield_constant_message(
    message: str = "Message",
) -> ConstantMessageIterator:
    """
    Create an iterator that returns the same message indefinitely.

    Example:
        >>> iterator = yield_constant_message("Alert")
        >>> next(iterator)
        'Alert'
        >>> next(iterator)
        'Alert'
    """
    return ConstantMessageIterator(message)


def yield_scripted_messages(messages: Iterable[str]) -> Iterator[str]:
    """
    Create an iterator over a fixed sequence of messages. The fake
    model raises StopIteration when called after the script ends.

    Example:
        >>> iterator = yield_scripted_messages(["not json", '{"a": 1}'])
        >>> next(iterator)
        'not json'
    """
    return iter(list(messages))
