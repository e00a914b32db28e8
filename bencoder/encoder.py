import io
import logging
from typing import Any, overload

from .convert import from_python
from .values import Sink

logger = logging.getLogger(__name__)


class Encoder:
    @overload
    def encode(self, obj: Any) -> bytes: ...

    @overload
    def encode(self, obj: Any, sink: Sink) -> None: ...

    def encode(self, obj: Any, sink: Sink | None = None) -> bytes | None:
        """Bencode obj, a value tree or plain bytes/str/int/list/dict.

        Without a sink the encoded bytes are returned, otherwise they are
        written to the sink. A composite value that contains itself raises
        CircularReferenceError before anything is written.
        """
        if sink is None:
            return self.encode_bytes(obj)

        value = from_python(obj)
        logger.debug(f"Encoding {type(value).__name__}")
        value.encode(sink)
        return None

    def encode_bytes(self, obj: Any) -> bytes:
        buf = io.BytesIO()
        self.encode(obj, buf)
        return buf.getvalue()
