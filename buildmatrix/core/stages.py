from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Literal, Tuple, Union

SOURCE_EXTENSIONS: Tuple[str, ...] = (".ts", ".tsx", ".jsx")

NODE_ENV_TOKEN = "process.env.NODE_ENV"

EnvMode = Literal["development", "production"]
ReportKind = Literal["html", "json"]


@dataclass(frozen=True)
class Transpile:
    kind: ClassVar[str] = "transpile"
    plugin: ClassVar[str] = "babel"

    babel_helpers: str = "bundled"
    exclude: str = "node_modules"
    extensions: Tuple[str, ...] = SOURCE_EXTENSIONS

    def to_dict(self) -> Dict[str, Any]:
        return {
            "babelHelpers": self.babel_helpers,
            "exclude": self.exclude,
            "extensions": list(self.extensions),
        }


@dataclass(frozen=True)
class ModuleResolve:
    kind: ClassVar[str] = "resolve"
    plugin: ClassVar[str] = "node-resolve"

    extensions: Tuple[str, ...] = SOURCE_EXTENSIONS

    def to_dict(self) -> Dict[str, Any]:
        return {"extensions": list(self.extensions)}


@dataclass(frozen=True)
class EnvironmentReplace:
    """Whole-token textual substitution of the NODE_ENV conditional.

    Delimiters are empty, so the token is matched literally rather than
    through a template marker. ``apply`` is the reference rendition of that
    contract: exact token only, never inside string literals or comments, and
    never on the left-hand side of a plain assignment.
    """

    kind: ClassVar[str] = "replace"
    plugin: ClassVar[str] = "replace"

    mode: EnvMode
    token: str = NODE_ENV_TOKEN
    delimiters: Tuple[str, str] = ("", "")
    prevent_assignment: bool = True

    @property
    def replacement(self) -> str:
        return json.dumps(self.mode)

    def to_dict(self) -> Dict[str, Any]:
        return {
            self.token: self.replacement,
            "delimiters": list(self.delimiters),
            "preventAssignment": self.prevent_assignment,
        }

    def apply(self, source: str) -> str:
        needle = self.delimiters[0] + self.token + self.delimiters[1]
        runs = _split_code(source)
        out: List[str] = []
        for k, (is_code, chunk) in enumerate(runs):
            if not is_code or needle not in chunk:
                out.append(chunk)
                continue
            out.append(self._replace_in_code(chunk, needle, _code_after(runs, k)))
        return "".join(out)

    def _replace_in_code(self, code: str, needle: str, tail: str = "") -> str:
        # `...token` (spread) is code; `x.token` is a longer member chain
        pattern = re.compile(r"(?<![\w$])(?<!(?<!\.)\.)" + re.escape(needle) + r"(?![\w$])")

        def _sub(m: "re.Match[str]") -> str:
            rest = code[m.end():]
            if not rest.strip():
                rest += tail
            if self.prevent_assignment and _ASSIGNMENT_RE.match(rest):
                return m.group(0)
            return self.replacement

        return pattern.sub(_sub, code)


# `=` but not `==` / `=>`
_ASSIGNMENT_RE = re.compile(r"\s*=(?![=>])")


def _is_comment(text: str) -> bool:
    return text.startswith("//") or text.startswith("/*")


def _code_after(runs: List[Tuple[bool, str]], k: int) -> str:
    """First code run after runs[k], looking through comments only."""
    for is_code, text in runs[k + 1:]:
        if is_code:
            return text
        if not _is_comment(text):
            return ""
    return ""


def _split_code(source: str) -> List[Tuple[bool, str]]:
    """Split JS source into (is_code, text) runs.

    Strings and comments are not code; `${...}` inside a template literal is.
    """
    runs: List[Tuple[bool, str]] = []
    _scan(source, 0, runs, nested=False)
    return [(is_code, text) for is_code, text in runs if text]


def _scan(src: str, i: int, runs: List[Tuple[bool, str]], *, nested: bool) -> int:
    # nested: stop at the `}` closing a template interpolation, return its index
    n = len(src)
    start, depth = i, 0
    while i < n:
        ch = src[i]
        if nested and ch == "{":
            depth += 1
        elif nested and ch == "}":
            if depth == 0:
                break
            depth -= 1

        if ch in "'\"":
            end = _quoted_end(src, i)
        elif ch == "`":
            runs.append((True, src[start:i]))
            i = start = _template(src, i, runs)
            continue
        elif src.startswith("//", i):
            nl = src.find("\n", i)
            end = n if nl == -1 else nl
        elif src.startswith("/*", i):
            close = src.find("*/", i + 2)
            end = n if close == -1 else close + 2
        else:
            i += 1
            continue
        runs.append((True, src[start:i]))
        runs.append((False, src[i:end]))
        i = start = end
    runs.append((True, src[start:i]))
    return i


def _quoted_end(src: str, i: int) -> int:
    quote, j, n = src[i], i + 1, len(src)
    while j < n:
        if src[j] == "\\":
            j += 2
            continue
        if src[j] == quote:
            break
        j += 1
    return min(j + 1, n)


def _template(src: str, i: int, runs: List[Tuple[bool, str]]) -> int:
    n = len(src)
    seg, j = i, i + 1
    while j < n:
        if src[j] == "\\":
            j += 2
        elif src[j] == "`":
            j += 1
            break
        elif src.startswith("${", j):
            runs.append((False, src[seg:j + 2]))
            j = _scan(src, j + 2, runs, nested=True)
            seg = j
            j += 1
        else:
            j += 1
    j = min(j, n)
    runs.append((False, src[seg:j]))
    return j


@dataclass(frozen=True)
class Minify:
    kind: ClassVar[str] = "minify"
    plugin: ClassVar[str] = "terser"

    mangle: bool = True
    compress: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"mangle": self.mangle, "compress": self.compress}


@dataclass(frozen=True)
class Analyze:
    kind: ClassVar[str] = "analyze"
    plugin: ClassVar[str] = "visualizer"

    filename: str
    report: ReportKind = "html"
    gzip_size: bool = True

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"filename": self.filename, "gzipSize": self.gzip_size}
        if self.report == "json":
            out["json"] = True
        return out


TransformStage = Union[Transpile, ModuleResolve, EnvironmentReplace, Minify, Analyze]
