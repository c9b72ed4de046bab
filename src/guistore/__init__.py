"""guistore: reactive key-value stores backing GUI checkboxes and option sets."""

from importlib.metadata import version as _version

__version__ = _version("guistore")

from guistore.errors import (
    StoreError,
    InvalidStore,
    InvalidKey,
    SerializerError,
    WatcherError,
    RegistrationTimingError,
    ReentrantMutationError,
)
from guistore.registry import Shape, StoreRegistry
from guistore.manager import StoreManager
from guistore.store import Store, KeyedStore, ScalarStore, DerivedStore
from guistore.watch import WatchHandle
from guistore.elements import Element, by_player
from guistore.checkbox import Checkbox, RadioButton
from guistore.options import Controls, OptionSet
# textual NOT auto-imported — opt-in only

__all__ = [
    "StoreError",
    "InvalidStore",
    "InvalidKey",
    "SerializerError",
    "WatcherError",
    "RegistrationTimingError",
    "ReentrantMutationError",
    "Shape",
    "StoreRegistry",
    "StoreManager",
    "Store",
    "KeyedStore",
    "ScalarStore",
    "DerivedStore",
    "WatchHandle",
    "Element",
    "by_player",
    "Checkbox",
    "RadioButton",
    "Controls",
    "OptionSet",
]
