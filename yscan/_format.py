from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional, Tuple, Type

from yscan.errors import InvalidFormatError

FORMAT_WHITESPACE = " \t\n\r\f\v"


class Specifier(str, Enum):
    INT32 = "d"
    UINT32 = "u"
    INT64 = "lld"
    UINT64 = "llu"
    DOUBLE = "f"
    TOKEN = "s"
    CHAR = "c"

    @property
    def result_type(self) -> Type:
        if self == Specifier.TOKEN:
            return str
        if self == Specifier.CHAR:
            return bytes
        if self == Specifier.DOUBLE:
            return float
        return int

    @property
    def honors_whitespace_skip(self) -> bool:
        return self != Specifier.CHAR


SPECIFIERS = {
    "d": Specifier.INT32,
    "u": Specifier.UINT32,
    "lld": Specifier.INT64,
    "llu": Specifier.UINT64,
    "f": Specifier.DOUBLE,
    "e": Specifier.DOUBLE,
    "g": Specifier.DOUBLE,
    "lf": Specifier.DOUBLE,
    "s": Specifier.TOKEN,
    "c": Specifier.CHAR,
}


class DirectiveType(str, Enum):
    WHITESPACE = "WHITESPACE"
    LITERAL = "LITERAL"
    CONVERSION = "CONVERSION"


@dataclass(frozen=True)
class Directive:
    type: DirectiveType
    position: int
    text: str
    specifier: Optional[Specifier] = None


@dataclass(frozen=True)
class FormatSpec:
    fmt: str
    directives: Tuple[Directive, ...]

    @property
    def specifiers(self) -> Tuple[Specifier, ...]:
        return tuple(
            directive.specifier for directive in self.directives if directive.specifier is not None
        )

    @property
    def arity(self) -> int:
        return len(self.specifiers)

    @property
    def result_types(self) -> Tuple[Type, ...]:
        return tuple(specifier.result_type for specifier in self.specifiers)


class FormatCompiler:
    fmt: str
    index: int

    def __init__(self, fmt: str) -> None:
        self.fmt = fmt
        self.index = 0

    def compile(self) -> FormatSpec:
        directives = []
        while self.index < len(self.fmt):
            look = self.fmt[self.index]
            if look in FORMAT_WHITESPACE:
                directives.append(self.__whitespace())
            elif look == "%":
                directives.append(self.__conversion())
            else:
                directives.append(Directive(DirectiveType.LITERAL, self.index, look))
                self.index += 1
        return FormatSpec(self.fmt, tuple(directives))

    def __whitespace(self) -> Directive:
        start = self.index
        while self.index < len(self.fmt) and self.fmt[self.index] in FORMAT_WHITESPACE:
            self.index += 1
        return Directive(DirectiveType.WHITESPACE, start, self.fmt[start : self.index])

    def __conversion(self) -> Directive:
        start = self.index
        self.index += 1
        text = ""
        # "l" and "ll" are length prefixes, anything else ends the specifier
        while self.index < len(self.fmt):
            text += self.fmt[self.index]
            self.index += 1
            if text not in ("l", "ll"):
                break

        if not text or text in ("l", "ll"):
            raise InvalidFormatError(fmt=self.fmt, position=start, error_message="truncated conversion specifier")
        specifier = SPECIFIERS.get(text)
        if specifier is None:
            raise InvalidFormatError(
                fmt=self.fmt, position=start, error_message=f"unsupported conversion specifier '%{text}'"
            )
        return Directive(DirectiveType.CONVERSION, start, "%" + text, specifier)


@lru_cache(maxsize=256)
def compile_format(fmt: str) -> FormatSpec:
    if not isinstance(fmt, str):
        raise InvalidFormatError(fmt=repr(fmt), position=0, error_message="format should be a string")
    return FormatCompiler(fmt).compile()
