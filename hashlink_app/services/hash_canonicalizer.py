"""
Canonical form for custom hashes.

Custom hashes are meant to be case-insensitive, but every casing of a
hash can't realistically be checked against the database. Instead each
custom hash is folded to camelCase before it is validated or stored, so
"Hello", "HELLO" and "hello" all become "hello" and "my-link" becomes
"myLink". Letters from any script are kept ("café bar" -> "caféBar").
"""

import re
import unicodedata

# Runs of letters and digits (combining marks stay attached to their letter).
# Everything else separates words.
RUN_RE = re.compile(r"[^\W_](?:[^\W_]|[\u0300-\u036f])*")
ORDINAL_LOWER_RE = re.compile(r"[0-9]*(?:1st|2nd|3rd|(?![123])[0-9]th)")
ORDINAL_UPPER_RE = re.compile(r"[0-9]*(?:1ST|2ND|3RD|(?![123])[0-9]TH)")


def _is_lower(char: str) -> bool:
    """Lowercase or caseless (CJK, combining marks, ...)"""
    return not char.isupper() and not char.isdigit()


def _match_ordinal(run: str, start: int):
    """End of an ordinal (1st, 22ND, 4th) starting at `start`, or None"""
    match = ORDINAL_LOWER_RE.match(run, start)
    if match and (match.end() == len(run) or run[match.end()].isupper()):
        return match.end()
    match = ORDINAL_UPPER_RE.match(run, start)
    if match and (match.end() == len(run) or _is_lower(run[match.end()])):
        return match.end()
    return None


def _split_run(run: str) -> list:
    words = []
    i, n = 0, len(run)
    while i < n:
        char = run[i]
        end = _match_ordinal(run, i) if char.isdigit() else None
        if end is not None:
            words.append(run[i:end])
            i = end
            continue

        j = i + 1
        if char.isdigit():
            while j < n and run[j].isdigit():
                j += 1
        elif char.isupper():
            while j < n and run[j].isupper():
                j += 1
            if j < n and _is_lower(run[j]):
                if j - i > 1:
                    # XMLHttp: the last capital starts the next word
                    j -= 1
                else:
                    while j < n and _is_lower(run[j]):
                        j += 1
        else:
            while j < n and _is_lower(run[j]):
                j += 1
        words.append(run[i:j])
        i = j
    return words


def split_words(text: str) -> list:
    """
    Split text into words the way lodash's `words` does.

    Words break on separators, lower-to-upper transitions, acronym
    boundaries (XMLHttp -> XML, Http) and digit runs, except that
    ordinals stay whole (1st, 2ND).
    """
    text = unicodedata.normalize("NFC", text or "")
    words = []
    for run in RUN_RE.findall(text):
        words.extend(_split_run(run))
    return words


def _is_ordinal(word: str) -> bool:
    return not word.isdigit() and ORDINAL_LOWER_RE.fullmatch(word.lower()) is not None


def _capitalize(word: str) -> str:
    word = word.lower()
    first = word[:1].upper()
    # Only capitalize when it round-trips (ß -> SS does not)
    if len(first) == 1 and first.isupper() and first.lower() == word[:1]:
        return first + word[1:]
    return word


def camel_case(text: str) -> str:
    """
    Fold text to camelCase.

    Examples:
        camel_case("Hello") -> "hello"
        camel_case("my link") -> "myLink"
        camel_case("XMLHttp-request") -> "xmlHttpRequest"
        camel_case("abc123def") -> "abc123Def"
        camel_case("1st place") -> "1stPlace"
        camel_case("café bar") -> "caféBar"

    The result is a fixed point: camel_case(camel_case(x)) == camel_case(x).
    """
    words = split_words(text)
    pieces = [word.lower() if index == 0 else _capitalize(word) for index, word in enumerate(words)]

    for index, word in enumerate(words[:-1]):
        following = pieces[index + 1]
        # A lowercase ordinal only reads back as one word before a capital
        if _is_ordinal(word) and not following[:1].isupper():
            suffix = pieces[index][-2:]
            pieces[index] = pieces[index][:-2] + suffix[0].upper() + suffix[1]

    return "".join(pieces)
