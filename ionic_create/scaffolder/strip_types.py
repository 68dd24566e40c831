"""Remove TypeScript type syntax from ``.ts`` sources.

The stripper is a single forward scan over the source that understands just
enough of the language to find type positions: it tracks strings, template
literals, comments, regular expressions and bracket nesting, and records the
character spans that hold type syntax.  The output is the input with those
spans removed; spans that were the only content on their lines take the
whole lines with them.

Handled: ``import type`` / ``export type``, inline ``type`` specifiers,
``interface`` and ``type`` declarations, ``declare`` statements,
annotations on variables, parameters, return types and class fields,
optional ``?`` markers, TS-only modifiers, generic parameter lists, type
arguments on calls, ``implements`` clauses, ``as`` / ``satisfies``,
non-null ``!``, and bodyless overload signatures of functions, methods and
constructors.  Constructor parameter properties (``constructor(private
x: T)``) become plain parameters plus ``this.x = x;`` at the top of the
body.  ``enum`` and ``namespace`` are left alone.

Stripping already stripped output changes nothing.
"""

from __future__ import annotations

import re

_IDENT = re.compile(r"[A-Za-z_$\u0080-￿][\w$\u0080-￿]*")
_IDENT_START = re.compile(r"[A-Za-z_$\u0080-￿#]")
_NUMBER = re.compile(r"-?(?:0[xXbBoO][\da-fA-F_]+|\d[\d_]*(?:\.\d*)?(?:[eE][+-]?\d+)?|\.\d+)n?")
_TYPE_SPECIFIER = re.compile(r"^type\s+(?!as\s+[\w$]+$)[\w$]")

CONTROL_KEYWORDS = frozenset({"if", "for", "while", "switch", "with"})
BLOCK_KEYWORDS = frozenset({"else", "try", "finally", "do", "static"})
REGEX_KEYWORDS = frozenset({
    "return", "typeof", "instanceof", "in", "of", "new", "delete", "void",
    "throw", "case", "do", "else", "yield", "await",
})
EXPRESSION_KEYWORDS = REGEX_KEYWORDS | frozenset({
    "export", "import", "default", "extends", "const", "let", "var",
    "function", "class", "if", "for", "while", "switch", "catch", "try",
    "finally",
})
TS_MODIFIERS = frozenset({
    "public", "private", "protected", "readonly", "declare", "abstract", "override",
})
JS_MODIFIERS = frozenset({"static", "async", "get", "set", "accessor"})
TYPE_PREFIXES = frozenset({"keyof", "typeof", "readonly", "unique", "infer", "asserts", "new"})
DECLARABLE = frozenset({
    "const", "let", "var", "function", "class", "module", "namespace", "global",
    "type", "interface", "enum", "abstract", "async",
})

_PAIRS = {"(": ")", "[": "]", "{": "}"}


class _Token:
    """The last significant token seen by the scanner."""

    __slots__ = ("kind", "text", "end")

    def __init__(self, kind: str, text: str, end: int) -> None:
        self.kind = kind  # "ident" | "value" | "close" | "punct"
        self.text = text
        self.end = end

    @property
    def completes(self) -> bool:
        return self.kind in ("value", "close") or (
            self.kind == "ident" and self.text not in EXPRESSION_KEYWORDS
        )


class _Stripper:
    def __init__(self, source: str) -> None:
        self.src = source
        self.n = len(source)
        self.removals: list[tuple[int, int]] = []
        self.insertions: list[tuple[int, str]] = []

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def remove(self, start: int, end: int) -> None:
        if end <= start:
            return
        src = self.src
        line_start = src.rfind("\n", 0, start) + 1
        line_end = src.find("\n", end)
        if line_end < 0:
            line_end = self.n
        if not src[line_start:start].strip() and not src[end:line_end].strip():
            start = line_start
            end = line_end + 1 if line_end < self.n else line_end
        self.removals.append((start, end))

    def render(self) -> str:
        edits = [(start, end, "") for start, end in self.removals]
        edits.extend((at, at, text) for at, text in self.insertions)
        pieces: list[str] = []
        cursor = 0
        for start, end, text in sorted(edits, key=lambda edit: (edit[0], edit[1])):
            if text:
                # Text inserted inside a removed span goes with it.
                if start >= cursor:
                    pieces.append(self.src[cursor:start])
                    pieces.append(text)
                    cursor = start
                continue
            if end <= cursor:
                continue
            if start > cursor:
                pieces.append(self.src[cursor:start])
            cursor = max(cursor, end)
        pieces.append(self.src[cursor:])
        return "".join(pieces)

    # ------------------------------------------------------------------
    # Lexical helpers
    # ------------------------------------------------------------------

    def skip_trivia(self, pos: int) -> int:
        src, n = self.src, self.n
        while pos < n:
            char = src[pos]
            if char.isspace():
                pos += 1
            elif src.startswith("//", pos):
                newline = src.find("\n", pos)
                pos = n if newline < 0 else newline
            elif src.startswith("/*", pos):
                close = src.find("*/", pos + 2)
                pos = n if close < 0 else close + 2
            else:
                break
        return pos

    def skip_string(self, pos: int) -> int:
        src, quote = self.src, self.src[pos]
        pos += 1
        while pos < self.n:
            char = src[pos]
            if char == "\\":
                pos += 2
                continue
            if char == quote or char == "\n":
                return pos + 1
            pos += 1
        return self.n

    def skip_template(self, pos: int, scan: bool) -> int:
        src = self.src
        pos += 1
        while pos < self.n:
            char = src[pos]
            if char == "\\":
                pos += 2
                continue
            if char == "`":
                return pos + 1
            if src.startswith("${", pos):
                end = self.scan(pos + 2, "}", "expr") if scan else self.match(pos + 1)
                pos = end + 1
                continue
            pos += 1
        return self.n

    def regex_allowed(self, pos: int) -> bool:
        src = self.src
        back = pos - 1
        while back >= 0 and src[back].isspace():
            back -= 1
        if back < 0:
            return True
        char = src[back]
        if char in ")]}'\"`":
            return False
        if char.isalnum() or char in "_$":
            start = back
            while start >= 0 and (src[start].isalnum() or src[start] in "_$"):
                start -= 1
            return src[start + 1:back + 1] in REGEX_KEYWORDS
        return True

    def skip_regex(self, pos: int) -> int:
        src = self.src
        cursor = pos + 1
        in_class = False
        while cursor < self.n:
            char = src[cursor]
            if char == "\\":
                cursor += 2
                continue
            if char == "\n":
                return pos + 1
            if in_class:
                if char == "]":
                    in_class = False
            elif char == "[":
                in_class = True
            elif char == "/":
                cursor += 1
                while cursor < self.n and src[cursor].isalnum():
                    cursor += 1
                return cursor
            cursor += 1
        return self.n

    def match(self, pos: int) -> int:
        """Index of the bracket closing the one at *pos*, without rewriting."""
        src = self.src
        stack = [_PAIRS[src[pos]]]
        cursor = pos + 1
        while cursor < self.n:
            char = src[cursor]
            if char in "'\"":
                cursor = self.skip_string(cursor)
                continue
            if char == "`":
                cursor = self.skip_template(cursor, scan=False)
                continue
            if char == "/":
                if src.startswith("//", cursor) or src.startswith("/*", cursor):
                    cursor = self.skip_trivia(cursor)
                    continue
                if self.regex_allowed(cursor):
                    cursor = self.skip_regex(cursor)
                    continue
            if char in _PAIRS:
                stack.append(_PAIRS[char])
            elif char in ")]}":
                stack.pop()
                if not stack:
                    return cursor
            cursor += 1
        return self.n

    def match_angle(self, pos: int) -> int | None:
        """Index of the ``>`` closing a type parameter/argument list, if it is one."""
        src = self.src
        depth = 0
        cursor = pos
        while cursor < self.n:
            char = src[cursor]
            if char in "'\"":
                cursor = self.skip_string(cursor)
                continue
            if char == "`":
                cursor = self.skip_template(cursor, scan=False)
                continue
            if char == "<":
                depth += 1
            elif char == ">":
                depth -= 1
                if depth == 0:
                    return cursor
            elif src.startswith("=>", cursor):
                cursor += 2
                continue
            elif char in _PAIRS:
                cursor = self.match(cursor) + 1
                continue
            elif char in ")]};+*/%^~!" or src.startswith(("&&", "||", "=="), cursor):
                return None
            cursor += 1
        return None

    def word_at(self, pos: int) -> str:
        found = _IDENT.match(self.src, pos)
        return found.group() if found else ""

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def skip_type(self, pos: int) -> int:
        """End of the type expression starting at (or after) *pos*."""
        src, n = self.src, self.n
        end = pos
        expect_atom = True
        conditional = 0
        cursor = self.skip_trivia(pos)
        while cursor < n:
            char = src[cursor]
            if expect_atom:
                if char in "|&":
                    cursor = self.skip_trivia(cursor + 1)
                    continue
                if char == "(":
                    close = self.match(cursor)
                    after = self.skip_trivia(close + 1)
                    if src.startswith("=>", after):
                        cursor = self.skip_trivia(after + 2)
                        continue
                    end, cursor, expect_atom = close + 1, after, False
                    continue
                if char == "<":
                    close = self.match_angle(cursor)
                    if close is None:
                        break
                    cursor = self.skip_trivia(close + 1)
                    continue
                if char in "[{":
                    end = self.match(cursor) + 1
                elif char in "'\"":
                    end = self.skip_string(cursor)
                elif char == "`":
                    end = self.skip_template(cursor, scan=False)
                elif char == "-" or char.isdigit():
                    number = _NUMBER.match(src, cursor)
                    if not number:
                        break
                    end = number.end()
                else:
                    word = self.word_at(cursor)
                    if not word:
                        break
                    if word in TYPE_PREFIXES and _IDENT_START.match(
                        src, self.skip_trivia(cursor + len(word))
                    ):
                        cursor = self.skip_trivia(cursor + len(word))
                        continue
                    end = cursor + len(word)
                    while end < n:
                        if src[end] == "." and self.word_at(end + 1):
                            end += 1 + len(self.word_at(end + 1))
                        elif src[end] == "<":
                            close = self.match_angle(end)
                            if close is None:
                                break
                            end = close + 1
                        else:
                            break
                cursor = self.skip_trivia(end)
                expect_atom = False
                continue

            word = self.word_at(cursor)
            if char == "[" and "\n" not in src[end:cursor]:
                end = self.match(cursor) + 1
                cursor = self.skip_trivia(end)
            elif char in "|&" and not src.startswith(("||", "&&"), cursor):
                cursor = self.skip_trivia(cursor + 1)
                expect_atom = True
            elif word == "extends":
                conditional += 1
                cursor = self.skip_trivia(cursor + len(word))
                expect_atom = True
            elif word == "is":
                cursor = self.skip_trivia(cursor + len(word))
                expect_atom = True
            elif char == "?" and conditional and not src.startswith(("?.", "??"), cursor):
                cursor = self.skip_trivia(cursor + 1)
                expect_atom = True
            elif char == ":" and conditional:
                conditional -= 1
                cursor = self.skip_trivia(cursor + 1)
                expect_atom = True
            else:
                break
        return end

    def annotation_end(self, name_end: int) -> int | None:
        """If a ``: Type`` follows *name_end*, return where the type ends."""
        colon = self.skip_trivia(name_end)
        if colon < self.n and self.src[colon] == ":" and not self.src.startswith("::", colon):
            return self.skip_type(colon + 1)
        return None

    # ------------------------------------------------------------------
    # Statements that are removed or rewritten as a whole
    # ------------------------------------------------------------------

    def statement_end(self, pos: int) -> int:
        src, n = self.src, self.n
        cursor = pos
        while cursor < n:
            char = src[cursor]
            if char == ";":
                return cursor + 1
            if char == "\n":
                back = cursor - 1
                while back >= pos and src[back] in " \t\r":
                    back -= 1
                ahead = self.skip_trivia(cursor)
                last = src[back] if back >= pos else ";"
                if last not in "=,|&(:<{[" and (ahead >= n or src[ahead] not in ".|&=?:"):
                    return cursor
                cursor += 1
                continue
            if char in "'\"":
                cursor = self.skip_string(cursor)
                continue
            if char == "`":
                cursor = self.skip_template(cursor, scan=False)
                continue
            if src.startswith(("//", "/*"), cursor):
                if src.startswith("//", cursor):
                    newline = src.find("\n", cursor)
                    cursor = n if newline < 0 else newline
                else:
                    cursor = self.skip_trivia(cursor)
                continue
            if char in _PAIRS:
                cursor = self.match(cursor) + 1
                if char == "{":
                    return self.optional_semicolon(cursor)
                continue
            cursor += 1
        return n

    def optional_semicolon(self, pos: int) -> int:
        cursor = pos
        while cursor < self.n and self.src[cursor] in " \t":
            cursor += 1
        if cursor < self.n and self.src[cursor] == ";":
            return cursor + 1
        return pos

    def module_clause_end(self, pos: int) -> int:
        """End of an optional ``from '...'`` clause and semicolon after *pos*."""
        cursor = self.skip_trivia(pos)
        if self.word_at(cursor) == "from":
            cursor = self.skip_trivia(cursor + 4)
            if cursor < self.n and self.src[cursor] in "'\"":
                return self.optional_semicolon(self.skip_string(cursor))
        return self.optional_semicolon(pos)

    def type_alias_end(self, name_pos: int) -> int:
        name_end = name_pos + len(self.word_at(name_pos))
        cursor = self.skip_trivia(name_end)
        if cursor < self.n and self.src[cursor] == "<":
            close = self.match_angle(cursor)
            cursor = self.skip_trivia(close + 1 if close is not None else cursor + 1)
        if cursor < self.n and self.src[cursor] == "=":
            cursor += 1
        return self.optional_semicolon(self.skip_type(cursor))

    def interface_end(self, name_pos: int) -> int:
        open_brace = self.src.find("{", name_pos)
        if open_brace < 0:
            return self.statement_end(name_pos)
        return self.optional_semicolon(self.match(open_brace) + 1)

    def specifier_list(self, open_brace: int) -> tuple[int, bool]:
        """Drop ``type`` specifiers from ``{ ... }``; report whether any value ones remain."""
        close = self.match(open_brace)
        specs: list[tuple[int, int, bool]] = []
        cursor = open_brace + 1
        for piece in self.src[open_brace + 1:close].split(","):
            stripped = piece.strip()
            if stripped:
                start = cursor + piece.index(stripped)
                specs.append((start, start + len(stripped), bool(_TYPE_SPECIFIER.match(stripped))))
            cursor += len(piece) + 1

        kept = [spec for spec in specs if not spec[2]]
        for index, (start, end, is_type) in enumerate(specs):
            if not is_type:
                continue
            following = [spec for spec in specs[index + 1:] if not spec[2]]
            preceding = [spec for spec in specs[:index] if not spec[2]]
            if following:
                self.removals.append((start, specs[index + 1][0]))
            elif preceding:
                self.removals.append((preceding[-1][1], end))
        return close, bool(kept)

    def import_statement(self, start: int) -> int:
        src = self.src
        cursor = self.skip_trivia(start + len("import"))
        word = self.word_at(cursor)
        if word == "type":
            after = self.skip_trivia(cursor + 4)
            if after < self.n and (src[after] in "{*" or self.word_at(after) not in ("", "from")):
                end = self.import_end(cursor)
                self.remove(start, end)
                return end

        has_default = bool(word) and word != "type"
        has_namespace = False
        brace = None
        lookahead = cursor
        while lookahead < self.n and src[lookahead] not in "'\";":
            if src[lookahead] == "{":
                brace = lookahead
                break
            if src[lookahead] == "*":
                has_namespace = True
            lookahead += 1

        if brace is None:
            return self.import_end(cursor)

        close, has_values = self.specifier_list(brace)
        end = self.import_end(close + 1)
        if not has_values:
            if has_default or has_namespace:
                comma = src.rfind(",", cursor, brace)
                self.removals.append((comma if comma >= 0 else brace, close + 1))
            else:
                self.remove(start, end)
        return end

    def import_end(self, pos: int) -> int:
        cursor = pos
        while cursor < self.n:
            char = self.src[cursor]
            if char in "'\"":
                return self.optional_semicolon(self.skip_string(cursor))
            if char == "{":
                cursor = self.match(cursor) + 1
                continue
            if char == ";":
                return cursor + 1
            cursor += 1
        return self.n

    def export_statement(self, start: int) -> int:
        """Handle ``export``; returns where ordinary scanning resumes."""
        src = self.src
        cursor = self.skip_trivia(start + len("export"))
        word = self.word_at(cursor)
        if word == "type":
            after = self.skip_trivia(cursor + 4)
            if after < self.n and src[after] == "{":
                end = self.module_clause_end(self.match(after) + 1)
            elif after < self.n and src[after] == "*":
                end = self.statement_end(after)
            else:
                end = self.type_alias_end(after)
            self.remove(start, end)
            return end
        if word == "interface":
            end = self.interface_end(cursor)
            self.remove(start, end)
            return end
        if word == "declare":
            end = self.statement_end(cursor)
            self.remove(start, end)
            return end
        if word == "function":
            end = self.overload_end(cursor + len(word))
            if end is not None:
                self.remove(start, end)
                return end
        if word == "abstract":
            self.remove(cursor, self.skip_trivia(cursor + len(word)))
            return self.skip_trivia(cursor + len(word))
        if cursor < self.n and src[cursor] == "{":
            close, has_values = self.specifier_list(cursor)
            end = self.module_clause_end(close + 1)
            if not has_values:
                self.remove(start, end)
            return end
        return cursor

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def declarator(self, pos: int) -> int:
        """Strip the annotation of one variable declarator starting at *pos*."""
        src = self.src
        cursor = self.skip_trivia(pos)
        if cursor >= self.n:
            return cursor
        if src[cursor] in "{[":
            name_end = self.match(cursor) + 1
        else:
            word = self.word_at(cursor)
            if not word:
                return pos
            name_end = cursor + len(word)
        after = name_end
        if after < self.n and src[after] == "!":
            after += 1
        type_end = self.annotation_end(after)
        if type_end is not None:
            self.remove(name_end, type_end)
            return type_end
        if after != name_end:
            self.remove(name_end, after)
        return after

    def params(self, open_paren: int, close: int, properties: list[str] | None = None) -> None:
        """Strip annotations and TS modifiers from a parameter list.

        When *properties* is given (a constructor), the names of parameters
        that carried a modifier are appended to it.
        """
        src = self.src
        cursor = open_paren + 1
        while True:
            cursor = self.skip_trivia(cursor)
            if cursor >= close:
                return
            word = self.word_at(cursor)
            modified = False
            while word in TS_MODIFIERS:
                after = self.skip_trivia(cursor + len(word))
                if not (_IDENT_START.match(src, after) or src[after] in "{["):
                    break
                self.remove(cursor, after)
                modified = True
                cursor = after
                word = self.word_at(cursor)
            if modified and properties is not None and word:
                properties.append(word)

            if word == "this" and self.annotation_end(cursor + 4) is not None:
                type_end = self.annotation_end(cursor + 4)
                after = self.skip_trivia(type_end)
                if after < close and src[after] == ",":
                    after = self.skip_trivia(after + 1)
                self.remove(cursor, after)
                cursor = after
                continue

            if src.startswith("...", cursor):
                cursor = self.skip_trivia(cursor + 3)
                word = self.word_at(cursor)
            if src[cursor] in "{[":
                name_end = self.match(cursor) + 1
            elif word:
                name_end = cursor + len(word)
            else:
                name_end = cursor

            after = name_end
            if after < close and src[after] == "?":
                after += 1
            type_end = self.annotation_end(after)
            if type_end is not None:
                self.remove(name_end, type_end)
                after = type_end
            elif after != name_end:
                self.remove(name_end, after)

            cursor = self.skip_trivia(after)
            if cursor < close and src[cursor] != ",":
                cursor = self.scan(cursor, ",)", "expr")
            if cursor >= close or src[cursor] == ")":
                return
            cursor += 1

    def classify_paren(self, open_paren: int, close: int, prev: _Token | None) -> tuple[bool, tuple[int, int] | None]:
        """Decide whether ``( ... )`` is a parameter list, and find a return type."""
        src = self.src
        if prev is not None and prev.kind == "ident" and prev.text in CONTROL_KEYWORDS:
            return False, None
        named = prev is not None and prev.kind == "ident"
        after = self.skip_trivia(close + 1)
        if src.startswith("=>", after):
            return True, None
        if after < self.n and src[after] == "{" and named:
            return True, None
        if after < self.n and src[after] == ":":
            type_end = self.skip_type(after + 1)
            following = self.skip_trivia(type_end)
            if src.startswith("=>", following) or (
                following < self.n and src[following] == "{" and named
            ):
                return True, (close + 1, type_end)
        return False, None

    def function_head(self, pos: int) -> tuple[int, _Token]:
        src = self.src
        cursor = self.skip_trivia(pos)
        if cursor < self.n and src[cursor] == "*":
            cursor = self.skip_trivia(cursor + 1)
        word = self.word_at(cursor)
        token = _Token("ident", "function", pos)
        if word:
            cursor += len(word)
            token = _Token("ident", word, cursor)
        cursor = self.strip_type_parameters(cursor)
        return cursor, token

    def strip_type_parameters(self, pos: int) -> int:
        """Remove ``<...>`` directly after *pos*; returns the position after it."""
        cursor = self.skip_trivia(pos)
        if cursor < self.n and self.src[cursor] == "<":
            close = self.match_angle(cursor)
            if close is not None:
                self.remove(pos, close + 1)
                return close + 1
        return pos

    def class_head(self, pos: int) -> int:
        """Strip generics and ``implements`` from a class header; returns the ``{``."""
        src = self.src
        cursor = self.skip_trivia(pos)
        word = self.word_at(cursor)
        if word and word not in ("extends", "implements"):
            cursor = self.skip_trivia(self.strip_type_parameters(cursor + len(word)))
            word = self.word_at(cursor)

        if word == "extends":
            cursor = self.skip_trivia(cursor + len(word))
            while cursor < self.n and src[cursor] != "{" and self.word_at(cursor) != "implements":
                char = src[cursor]
                if char in "([":
                    cursor = self.match(cursor) + 1
                elif char == "<":
                    close = self.match_angle(cursor)
                    if close is None:
                        break
                    self.remove(cursor, close + 1)
                    cursor = close + 1
                elif self.word_at(cursor):
                    cursor += len(self.word_at(cursor))
                else:
                    cursor += 1
                cursor = self.skip_trivia(cursor)

        if self.word_at(cursor) == "implements":
            back = cursor
            while back > 0 and src[back - 1] in " \t":
                back -= 1
            type_end = cursor + len("implements")
            while True:
                type_end = self.skip_type(type_end)
                following = self.skip_trivia(type_end)
                if following < self.n and src[following] == ",":
                    type_end = following + 1
                    continue
                break
            self.remove(back, type_end)
            cursor = self.skip_trivia(type_end)
        return cursor

    def class_member(self, pos: int) -> tuple[int, _Token | None]:
        """Strip the head of a class member; scanning resumes at the returned position."""
        src = self.src
        start = cursor = pos
        whole_member = False
        while True:
            word = self.word_at(cursor)
            if word not in TS_MODIFIERS and word not in JS_MODIFIERS:
                break
            after = self.skip_trivia(cursor + len(word))
            if after >= self.n or not (_IDENT_START.match(src, after) or src[after] in "[*'\""):
                break
            if word in ("declare", "abstract"):
                whole_member = True
            elif word in TS_MODIFIERS:
                self.remove(cursor, after)
            cursor = after

        if whole_member:
            end = self.statement_end(start)
            self.remove(start, end)
            return end, _Token("punct", ";", end)

        if cursor < self.n and src[cursor] == "*":
            cursor = self.skip_trivia(cursor + 1)
        if cursor >= self.n:
            return cursor, None
        char = src[cursor]
        if char == "#":
            cursor += 1
            char = src[cursor] if cursor < self.n else ""
        if char in "'\"":
            name_end = self.skip_string(cursor)
        elif char == "[":
            name_end = self.scan(cursor + 1, "]", "expr") + 1
        elif self.word_at(cursor):
            name_end = cursor + len(self.word_at(cursor))
        else:
            return pos, None
        token = _Token("ident", src[cursor:name_end], name_end)

        after = name_end
        if after < self.n and src[after] in "?!":
            after += 1
        type_end = self.annotation_end(after)
        if type_end is not None:
            self.remove(name_end, type_end)
            return type_end, _Token("value", "", type_end)
        if after != name_end:
            self.remove(name_end, after)
        after = self.strip_type_parameters(after)
        paren = self.skip_trivia(after)
        if paren < self.n and src[paren] == "(":
            end = self.signature_end(paren)
            if end is not None:
                self.remove(start, end)
                return end, _Token("punct", ";", end)
        return after, token

    def signature_end(self, open_paren: int) -> int | None:
        """End of an overload signature whose parameter list opens at *open_paren*.

        ``None`` when a body follows, i.e. this is an implementation.
        """
        src = self.src
        end = self.match(open_paren) + 1
        colon = self.skip_trivia(end)
        if colon < self.n and src[colon] == ":":
            end = self.skip_type(colon + 1)
        following = self.skip_trivia(end)
        if following < self.n and (src[following] == "{" or src.startswith("=>", following)):
            return None
        return self.optional_semicolon(end)

    def overload_end(self, pos: int) -> int | None:
        """Like :meth:`signature_end`, for ``function name<T>(...)`` after the keyword."""
        src = self.src
        cursor = self.skip_trivia(pos)
        if cursor < self.n and src[cursor] == "*":
            cursor = self.skip_trivia(cursor + 1)
        word = self.word_at(cursor)
        if not word:
            return None
        cursor = self.skip_trivia(cursor + len(word))
        if cursor < self.n and src[cursor] == "<":
            close = self.match_angle(cursor)
            if close is None:
                return None
            cursor = self.skip_trivia(close + 1)
        if cursor >= self.n or src[cursor] != "(":
            return None
        return self.signature_end(cursor)

    def parameter_properties(self, body_open: int, names: list[str]) -> None:
        """Emit ``this.name = name;`` for constructor parameter properties.

        The assignments go first in the body, or right after a leading
        ``super(...)`` call.
        """
        src = self.src
        close = self.match(body_open)
        line_start = src.rfind("\n", 0, body_open) + 1
        indent = re.match(r"[ \t]*", src[line_start:]).group()
        inner = indent + ("\t" if "\t" in indent else "  ")
        assignments = "".join(f"\n{inner}this.{name} = {name};" for name in names)

        at = body_open + 1
        first = self.skip_trivia(at)
        if self.word_at(first) == "super" and src.startswith("(", self.skip_trivia(first + 5)):
            at = self.statement_end(first)
        if not src[at:close].strip():
            if at < close:
                self.removals.append((at, close))
            assignments += "\n" + indent
        self.insertions.append((at, assignments))

    # ------------------------------------------------------------------
    # Main scan
    # ------------------------------------------------------------------

    def scan(self, pos: int, closers: str | None, mode: str) -> int:
        """Rewrite tokens from *pos* until one of *closers* at this nesting level.

        *mode* is ``"stmt"`` for statement lists, ``"class"`` for class bodies
        and ``"expr"`` for everything else.  Returns the closer's index.
        """
        src, n = self.src, self.n
        prev: _Token | None = None
        member_start = mode == "class"
        in_declaration = False
        cursor = pos

        while True:
            start = self.skip_trivia(cursor)
            crossed_newline = "\n" in src[cursor:start]
            cursor = start
            if cursor >= n:
                return n
            char = src[cursor]
            if closers and char in closers:
                return cursor

            if crossed_newline and prev is not None and prev.completes:
                in_declaration = False
                if mode == "class":
                    member_start = True
            at_statement = mode == "stmt" and (
                prev is None
                or (prev.kind == "punct" and prev.text == ";")
                or (prev.kind == "close" and prev.text == "}")
                or (crossed_newline and prev.completes)
            )

            if member_start:
                member_start = False
                resumed, token = self.class_member(cursor)
                if token is not None:
                    cursor, prev = resumed, token
                    if token.kind == "punct":
                        member_start = True
                    continue

            if char in "'\"":
                cursor = self.skip_string(cursor)
                prev = _Token("value", "", cursor)
                continue
            if char == "`":
                cursor = self.skip_template(cursor, scan=True)
                prev = _Token("value", "", cursor)
                continue
            if char == "/" and self.regex_allowed(cursor):
                end = self.skip_regex(cursor)
                prev = _Token("value" if end > cursor + 1 else "punct", "/", end)
                cursor = end
                continue
            if char.isdigit() or (char == "." and src[cursor + 1:cursor + 2].isdigit()):
                number = _NUMBER.match(src, cursor)
                cursor = number.end() if number else cursor + 1
                prev = _Token("value", "", cursor)
                continue

            word = self.word_at(cursor)
            if word:
                after_word = cursor + len(word)
                after_dot = prev is not None and prev.kind == "punct" and prev.text in (".", "?.")
                if not after_dot:
                    handled = self.keyword(word, cursor, after_word, mode, at_statement, prev)
                    if handled is not None:
                        cursor, prev, declaring, class_body = handled
                        in_declaration = in_declaration or declaring
                        if class_body:
                            end = self.scan(cursor + 1, "}", "class")
                            cursor = end + 1
                            prev = _Token("close", "}", cursor)
                        continue
                    if src.startswith("<", after_word):
                        close = self.match_angle(after_word)
                        if close is not None:
                            following = self.skip_trivia(close + 1)
                            if following < n and src[following] in "(`":
                                self.remove(after_word, close + 1)
                                cursor = close + 1
                                prev = _Token("ident", word, cursor)
                                continue
                cursor = after_word
                prev = _Token("ident", word, cursor)
                continue

            if char == "!":
                if (
                    prev is not None
                    and prev.end == cursor
                    and (prev.kind == "close" or (prev.kind == "ident" and prev.text not in EXPRESSION_KEYWORDS))
                    and not src.startswith("!=", cursor)
                ):
                    self.remove(cursor, cursor + 1)
                    cursor += 1
                    continue
                cursor += 1
                prev = _Token("punct", "!", cursor)
                continue

            if char == "(":
                close = self.match(cursor)
                is_params, return_type = self.classify_paren(cursor, close, prev)
                if is_params:
                    properties: list[str] | None = None
                    if mode == "class" and prev is not None and prev.text == "constructor":
                        properties = []
                    self.params(cursor, close, properties)
                    cursor = close + 1
                    body = self.skip_trivia(cursor)
                    if properties and body < n and src[body] == "{":
                        self.parameter_properties(body, properties)
                else:
                    cursor = self.scan(cursor + 1, ")", "expr") + 1
                if return_type is not None:
                    self.remove(*return_type)
                    cursor = return_type[1]
                prev = _Token("close", ")", cursor)
                continue

            if char == "<" and (prev is None or not prev.completes):
                close = self.match_angle(cursor)
                if close is not None:
                    following = self.skip_trivia(close + 1)
                    if following < n and src[following] == "(":
                        paren_close = self.match(following)
                        arrow = self.skip_trivia(paren_close + 1)
                        if src.startswith(("=>", ":"), arrow):
                            self.remove(cursor, close + 1)
                            cursor = close + 1
                            continue

            if char == "[":
                cursor = self.scan(cursor + 1, "]", "expr") + 1
                prev = _Token("close", "]", cursor)
                continue

            if char == "{":
                block = prev is None or (
                    prev.kind == "close" and prev.text == ")"
                ) or (
                    prev.kind == "ident" and prev.text in BLOCK_KEYWORDS
                ) or (
                    prev.kind == "punct" and prev.text in (";", "=>")
                ) or at_statement
                end = self.scan(cursor + 1, "}", "stmt" if block else "expr")
                cursor = end + 1
                prev = _Token("close", "}", cursor)
                if mode == "class":
                    member_start = True
                continue

            if char == ";":
                in_declaration = False
                cursor += 1
                prev = _Token("punct", ";", cursor)
                if mode == "class":
                    member_start = True
                continue

            if char == "," and in_declaration:
                cursor = self.declarator(cursor + 1)
                prev = _Token("value", "", cursor)
                continue

            if src.startswith("=>", cursor):
                cursor += 2
                prev = _Token("punct", "=>", cursor)
                continue
            if src.startswith("?.", cursor):
                cursor += 2
                prev = _Token("punct", "?.", cursor)
                continue

            cursor += 1
            prev = _Token("punct", char, cursor)

    def keyword(
        self,
        word: str,
        start: int,
        after: int,
        mode: str,
        at_statement: bool,
        prev: _Token | None,
    ) -> tuple[int, _Token | None, bool, bool] | None:
        """Handle a keyword-led construct.

        Returns ``(resume, prev, starts_declaration, opens_class_body)`` or
        ``None`` when *word* is an ordinary identifier here.
        """
        src = self.src
        following = self.skip_trivia(after)
        next_char = src[following] if following < self.n else ""
        next_word = self.word_at(following)
        boundary = _Token("punct", ";", start)

        if at_statement:
            if word == "import" and next_char not in "(.":
                end = self.import_statement(start)
                return end, _Token("punct", ";", end), False, False
            if word == "export":
                end = self.export_statement(start)
                return end, _Token("punct", ";", end), False, False
            if word == "type" and next_word:
                name_end = self.skip_trivia(following + len(next_word))
                if name_end < self.n and src[name_end] in "=<":
                    end = self.type_alias_end(following)
                    self.remove(start, end)
                    return end, boundary, False, False
            if word == "interface" and next_word:
                end = self.interface_end(following)
                self.remove(start, end)
                return end, boundary, False, False
            if word == "declare" and next_word in DECLARABLE:
                end = self.statement_end(start)
                self.remove(start, end)
                return end, boundary, False, False
            if word == "abstract" and next_word == "class":
                self.remove(start, following)
                return following, prev, False, False

        if word in ("let", "const", "var") and (next_char in "{[" or (next_word and next_word != "enum")):
            end = self.declarator(after)
            return end, _Token("value", "", end), True, False

        if word == "function":
            overload = self.overload_end(after) if at_statement else None
            if overload is not None:
                self.remove(start, overload)
                return overload, boundary, False, False
            end, token = self.function_head(after)
            return end, token, False, False

        if word == "class" and next_char != "(":
            brace = self.class_head(after)
            if brace < self.n and src[brace] == "{":
                return brace, None, False, True
            return brace, _Token("ident", "class", brace), False, False

        if (
            word in ("as", "satisfies")
            and prev is not None
            and prev.completes
            and next_char not in ",;)=}"
            and (next_word or next_char in "{[('\"`<-")
        ):
            type_end = self.skip_type(after)
            self.remove(prev.end, type_end)
            return type_end, _Token("value", "", type_end), False, False

        return None


def strip_types(source: str) -> str:
    """Return *source* with TypeScript type syntax removed."""
    stripper = _Stripper(source)
    stripper.scan(0, None, "stmt")
    return stripper.render()


def typed_to_untyped_name(filename: str) -> str:
    """``+page.ts`` -> ``+page.js``; other names are returned unchanged."""
    if filename.endswith(".ts") and not filename.endswith(".d.ts"):
        return filename[: -len(".ts")] + ".js"
    return filename
