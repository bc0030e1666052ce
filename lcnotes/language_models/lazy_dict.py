"""
The utility class `LazyLoadingDict` stores memoized objects, such as
chat model clients or prompt definitions, produced by a factory
function from their definition.

The dictionary is created by providing the factory function in the
constructor. The factory function takes one argument of the type of
the dictionary key (the definition of the object) and returns the
object that is stored as value. The object is created the first time
its key is looked up, and the same instance is returned afterwards.

Invalid definitions are signalled at the time of the lookup: either
by the validation of the key, when the key is a pydantic model, or by
the factory function itself.

Example:
    ```python
    from pydantic import BaseModel, ConfigDict

    class ClientDefinition(BaseModel):
        model_name: str
        temperature: float = 0.7

        # frozen models are hashable and can be used as keys
        model_config = ConfigDict(frozen=True)

    def create_client(spec: ClientDefinition) -> ChatOpenAI:
        return ChatOpenAI(
            model=spec.model_name, temperature=spec.temperature
        )

    clients = LazyLoadingDict(create_client)
    model = clients[ClientDefinition(model_name="gpt-4o-mini")]
    ```
"""

from collections.abc import Callable
from typing import TypeVar

ValueT = TypeVar('ValueT')
KeyT = TypeVar('KeyT')


class LazyLoadingDict(dict[KeyT, ValueT]):
    """A dictionary that creates its values on first access with a
    factory function, and memoizes them.

    Values may also be assigned directly, bypassing the factory, but
    an existing key is never silently overwritten. Deleting a key (or
    clearing the dictionary) releases the value by calling the
    destructor function if given, or else the value's `close` method
    if it has one.

    Expected behaviour: may raise ValidationError and ValueErrors.
    """

    def __init__(
        self,
        key_creator_func: Callable[[KeyT], ValueT],
        destructor_func: Callable[[ValueT], None] | None = None,
    ):
        super().__init__()
        self._key_creator_func = key_creator_func
        self._destructor_func = destructor_func

    def _destroy_value(self, value: ValueT) -> None:
        if self._destructor_func:
            self._destructor_func(value)
        elif hasattr(value, "close") and callable(value.close):  # type: ignore
            value.close()  # type: ignore

    def __getitem__(self, key: KeyT) -> ValueT:
        if key in self:
            return super().__getitem__(key)

        value: ValueT = self._key_creator_func(key)
        super().__setitem__(key, value)
        return value

    def __setitem__(self, key: KeyT, value: ValueT) -> None:
        """Set a value directly, bypassing the factory function.

        Raises:
            ValueError: If the key already exists in the dictionary.
        """
        if key in self:
            raise ValueError(
                f"Key '{key}' already exists. Delete it first to overwrite."
            )
        super().__setitem__(key, value)

    def __delitem__(self, key: KeyT) -> None:
        if key in self:
            self._destroy_value(super().__getitem__(key))
        super().__delitem__(key)

    def clear(self) -> None:
        for value in list(self.values()):
            self._destroy_value(value)
        super().clear()
