"""Identifier allocation for user-visible names and generated temporaries."""

from __future__ import annotations

import logging
import re
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Set, Tuple
from urllib.parse import quote

logger = logging.getLogger(__name__)

VARIABLE = "VARIABLE"
DEVELOPER_VARIABLE = "DEVELOPER_VARIABLE"
PROCEDURE = "PROCEDURE"
PARAMETER = "PARAMETER"

RESERVED_WORDS: FrozenSet[str] = frozenset(
    (
        # C / C++ keywords
        "auto,bool,break,case,catch,char,class,const,continue,default,delete,do,"
        "double,else,enum,explicit,export,extern,false,float,for,friend,goto,if,"
        "inline,int,long,mutable,namespace,new,nullptr,operator,private,protected,"
        "public,register,return,short,signed,sizeof,static,struct,switch,template,"
        "this,throw,true,try,typedef,typename,union,unsigned,using,virtual,void,"
        "volatile,while,"
        # keywords carried over from the block editor's own list
        "debugger,extends,finally,function,import,in,instanceof,super,typeof,var,"
        "with,yield,implements,interface,let,package,await,null,arguments,"
        # names the device skeleton and runtime claim
        "setup,loop,_setup,_loop,user_main,board_init,main,delay,delay_sec,wait,"
        "random,LedMaritx"
    ).split(",")
)

# encodeURI leaves these characters untouched.
_URI_SAFE = ";,/?:@&=+$-_.!~*'()#"
_NON_WORD_RE = re.compile(r"[^A-Za-z0-9_]")


def safe_name(name: Optional[str]) -> str:
    """Turn an arbitrary user name into a legal identifier.

    Non-ASCII characters are percent-escaped before the remaining punctuation
    is replaced, so distinct names stay distinct: ``"音乐"`` becomes
    ``"_E9_9F_B3_E4_B9_90"``.
    """

    if not name:
        return "unnamed"
    escaped = quote(name.replace(" ", "_"), safe=_URI_SAFE)
    cleaned = _NON_WORD_RE.sub("_", escaped)
    if cleaned[0].isdigit():
        cleaned = f"my_{cleaned}"
    return cleaned


class NameManager:
    """Hand out collision-free identifiers for one generation pass.

    ``assign`` is idempotent per ``(category, raw name)`` pair.  Every
    identifier handed out, including temporaries, is tracked so that later
    requests never reuse it.
    """

    def __init__(self, reserved_words: Iterable[str] = RESERVED_WORDS) -> None:
        self._reserved: Set[str] = set(reserved_words)
        self._assigned: Dict[Tuple[str, str], str] = {}
        self._taken: Set[str] = set()
        self._variable_map: Dict[str, str] = {}

    def reset(self) -> None:
        self._assigned.clear()
        self._taken.clear()
        self._variable_map.clear()

    def add_reserved_words(self, words: Iterable[str]) -> None:
        self._reserved.update(words)

    def set_variable_map(self, mapping: Mapping[str, str]) -> None:
        """Install the editor's variable id -> display name table."""

        self._variable_map = dict(mapping)

    def is_taken(self, identifier: str) -> bool:
        return identifier in self._taken or identifier in self._reserved

    def assign(
        self, category: str, raw_name: Optional[str], display: Optional[str] = None
    ) -> str:
        """Identifier for ``raw_name``; ``display`` overrides the text it is built from."""

        key = (category, raw_name or "")
        existing = self._assigned.get(key)
        if existing is not None:
            return existing
        if display is None:
            display = raw_name
            if category == VARIABLE and raw_name in self._variable_map:
                display = self._variable_map[raw_name]
        identifier = self._distinct(safe_name(display))
        self._assigned[key] = identifier
        return identifier

    def fresh_temporary(self, hint: str) -> str:
        """Mint an identifier that was never handed out in this pass."""

        return self._distinct(safe_name(hint))

    def _distinct(self, base: str) -> str:
        candidate = base
        suffix = 1
        while self.is_taken(candidate):
            suffix += 1
            candidate = f"{base}{suffix}"
        if candidate != base:
            logger.debug("Renamed %r to %r to avoid a collision", base, candidate)
        self._taken.add(candidate)
        return candidate
