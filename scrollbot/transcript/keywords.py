from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List

from scrollbot.transcript.types import Author, Message

_NON_WORD = re.compile(r"[^\w\s'-]")
_SPLIT = re.compile(r"\s+")
_DIGITS = re.compile(r"^\d+$")

MAX_KEYWORDS = 20

STOP_WORDS = frozenset("""
the a an and or but in on at to for of with by from as is was are were been
be have has had do does did will would could should may might must shall can need
i me my you your he she it we they this that these those what which who whom
when where why how all each every both few more most other some such no not only
own same so than too very just also now here there then if else because about into
through during before after above below between under again further once any out up down
off over well ok okay yes hi hello hey please thanks thank sure like really
want know think make get go see look come take use find give tell try ask work seem
feel let put keep begin help show hear play run move live believe hold bring happen
write provide sit stand lose pay meet include continue set learn change lead understand watch
follow stop create speak read allow add spend grow open walk win offer remember love consider
appear buy wait serve die send expect build stay fall cut reach kill remain suggest raise
pass sell require report decide pull mean im dont cant wont its thats whats hows lets
""".split())

# Reality-transurfing vocabulary the palette surfaces even when seen once
PRIORITY_KEYWORDS = frozenset("""
transurfing tufti plait pendulum pendulums frame intention reality film director script importance
awareness consciousness screen screens outer inner alternatives space wave fortune harmony balance
energy overseer soul mind heart goal slide visualization mirror reflection composition meditation
practice exercise technique method transform awaken
""".split())


@dataclass(frozen=True)
class Keyword:
    word: str
    count: int


def _tokens(text: str) -> List[str]:
    words = _SPLIT.split(_NON_WORD.sub(" ", (text or "").lower()))
    out = []
    for w in words:
        if len(w) < 3 or len(w) > 20:
            continue
        if w in STOP_WORDS or _DIGITS.match(w):
            continue
        out.append(w.replace("'", "").replace("-", ""))
    return out


def extract_keywords(messages: Iterable[Message]) -> List[Keyword]:
    """
    Count words across the user's own messages. A word qualifies if it was
    used at least twice or is a priority term; priority terms sort first,
    then by count. Returns at most MAX_KEYWORDS.
    """
    counts: Dict[str, int] = {}
    for msg in messages:
        if msg.author is not Author.USER or not msg.content:
            continue
        for w in _tokens(msg.content):
            counts[w] = counts.get(w, 0) + 1

    found = [Keyword(w, c) for w, c in counts.items() if c >= 2 or w in PRIORITY_KEYWORDS]
    # stable sort keeps first-seen order among ties
    found.sort(key=lambda k: (k.word not in PRIORITY_KEYWORDS, -k.count))
    return found[:MAX_KEYWORDS]


def extract_keywords_from_text(text: str) -> List[str]:
    return list(dict.fromkeys(_tokens(text)))


def is_priority_keyword(word: str) -> bool:
    return (word or "").lower() in PRIORITY_KEYWORDS
