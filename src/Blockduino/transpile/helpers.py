"""Program header declarations and the helper-function cache."""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterator, List, Optional, Sequence, Union

from .names import PROCEDURE, NameManager

logger = logging.getLogger(__name__)

FUNCTION_NAME_PLACEHOLDER = "{leCUI8hutHZI4480Dc}"
HELPER_KEY_PREFIX = "%"

_LEADING_INDENT_RE = re.compile(r"^((?:  )+)", re.MULTILINE)


class DeclarationTable:
    """Ordered mapping of declaration key -> text flushed into the header."""

    def __init__(self) -> None:
        self._entries: Dict[str, str] = {}

    def reset(self) -> None:
        self._entries.clear()

    def set(self, key: str, text: str) -> None:
        self._entries[key] = text

    def setdefault(self, key: str, text: str) -> str:
        return self._entries.setdefault(key, text)

    def get(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def values(self) -> List[str]:
        return list(self._entries.values())

    def render(self) -> str:
        return "\n\n".join(self._entries.values())


def _reindent(code: str, indent: str) -> str:
    """Swap the two-space indents of a template for ``indent``."""

    if indent == "  ":
        return code
    return _LEADING_INDENT_RE.sub(lambda m: indent * (len(m.group(1)) // 2), code)


class HelperCache:
    """Emit each helper routine at most once per pass.

    A helper is named by a canonical key such as ``"mathRandomInt"``.  The
    first request reserves a unique identifier through the name manager;
    every later request, including calls made before the body is known,
    gets that same identifier back.
    """

    def __init__(
        self,
        names: NameManager,
        definitions: DeclarationTable,
        indent: str = "  ",
    ) -> None:
        self._names = names
        self._definitions = definitions
        self._indent = indent
        self._assigned: Dict[str, str] = {}

    def reset(self) -> None:
        self._assigned.clear()

    def reserve(self, key: str, name_hint: Optional[str] = None) -> str:
        """Return the identifier for ``key``, built from ``name_hint`` on first use."""

        name = self._assigned.get(key)
        if name is None:
            name = self._names.assign(PROCEDURE, key, key if name_hint is None else name_hint)
            self._assigned[key] = name
        return name

    def name_of(self, key: str) -> Optional[str]:
        return self._assigned.get(key)

    def is_defined(self, key: str) -> bool:
        return HELPER_KEY_PREFIX + key in self._definitions

    def provide(
        self,
        key: str,
        template: Union[str, Sequence[str]],
        *,
        name_hint: Optional[str] = None,
        reindent: bool = True,
    ) -> str:
        """Register ``template`` under ``key`` and return the helper's name.

        Templates are written with two-space indents; ``reindent=False``
        keeps bodies that were already rendered with the session indent.
        Distinct keys always get distinct names, even when their hints agree.
        """

        name = self.reserve(key, name_hint)
        if self.is_defined(key):
            return name
        code = template if isinstance(template, str) else "\n".join(template)
        code = code.replace(FUNCTION_NAME_PLACEHOLDER, name)
        if reindent:
            code = _reindent(code, self._indent)
        self._definitions.set(HELPER_KEY_PREFIX + key, code)
        logger.debug("Registered helper %s as %s", key, name)
        return name

    def declarations(self) -> Dict[str, str]:
        """Helper bodies registered so far, keyed by canonical key."""

        prefix = len(HELPER_KEY_PREFIX)
        return {
            key[prefix:]: self._definitions.get(key) or ""
            for key in self._definitions
            if key.startswith(HELPER_KEY_PREFIX)
        }

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.is_defined(key)

    def __len__(self) -> int:
        return sum(1 for key in self._definitions if key.startswith(HELPER_KEY_PREFIX))
