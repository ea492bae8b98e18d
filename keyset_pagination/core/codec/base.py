"""Bidirectional codec abstraction and composition.

A codec maps values of an input type ``I`` to an output type ``O`` and back.
Both directions are coroutines so codecs that do I/O or CPU-heavy work
(key derivation, external stores) compose with purely in-memory ones.

Composition validates, at construction time, that each codec's
``output_type`` is accepted by the next codec's ``input_type``:

    codec = CodecPipeline(RichJsonCodec(), Base64UrlCodec())
    token = await codec.encode({"id": 5})
    assert await codec.decode(token) == {"id": 5}
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

from keyset_pagination.core.exceptions import CodecCompositionError

I = TypeVar("I")  # noqa: E741
O = TypeVar("O")  # noqa: E741


class Codec(ABC, Generic[I, O]):
    """Base class for reversible value transforms.

    Subclasses declare ``input_type`` and ``output_type`` so pipelines can be
    checked at runtime; ``object`` accepts any value.

    Laws:
        ``await decode(await encode(x)) == x`` for every supported ``x``.
        ``decode`` raises ``CodecError`` on malformed input.
    """

    input_type: ClassVar[type] = object
    output_type: ClassVar[type] = object

    @abstractmethod
    async def encode(self, value: I) -> O:
        """Transform a value into its encoded form."""
        ...

    @abstractmethod
    async def decode(self, value: O) -> I:
        """Reverse ``encode``."""
        ...

    def __or__(self, other: Codec[Any, Any]) -> CodecPipeline:
        return CodecPipeline(self, other)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class CodecPipeline(Codec[Any, Any]):
    """Chain codecs end to end.

    ``encode`` runs left to right, ``decode`` right to left. The pipeline's
    own input/output types are those of its first and last codec, so
    pipelines can be nested inside other pipelines.
    """

    def __init__(self, *codecs: Codec[Any, Any]) -> None:
        if not codecs:
            raise CodecCompositionError("A codec pipeline needs at least one codec")

        for left, right in zip(codecs, codecs[1:]):
            if not issubclass(left.output_type, right.input_type):
                raise CodecCompositionError(
                    f"{left!r} produces {left.output_type.__name__} but "
                    f"{right!r} expects {right.input_type.__name__}",
                    extra={
                        "left": type(left).__name__,
                        "right": type(right).__name__,
                    },
                )

        self.codecs: tuple[Codec[Any, Any], ...] = tuple(codecs)

    @property
    def input_type(self) -> type:  # type: ignore[override]
        return self.codecs[0].input_type

    @property
    def output_type(self) -> type:  # type: ignore[override]
        return self.codecs[-1].output_type

    async def encode(self, value: Any) -> Any:
        for codec in self.codecs:
            value = await codec.encode(value)
        return value

    async def decode(self, value: Any) -> Any:
        for codec in reversed(self.codecs):
            value = await codec.decode(value)
        return value

    def __or__(self, other: Codec[Any, Any]) -> CodecPipeline:
        return CodecPipeline(*self.codecs, other)

    def __repr__(self) -> str:
        inner = ", ".join(repr(codec) for codec in self.codecs)
        return f"CodecPipeline({inner})"


def pipe(*codecs: Codec[Any, Any]) -> CodecPipeline:
    """Compose codecs; shorthand for ``CodecPipeline(*codecs)``."""
    return CodecPipeline(*codecs)


__all__ = ["Codec", "CodecPipeline", "pipe"]
