"""
JSON codec for IDL documents and JSON-RPC envelopes
"""

import json
from typing import Any, IO, List, Literal, Optional, Union

from pydantic import BaseModel, StrictStr, ValidationError

from idlrpc_core.constants import JSONRPC_VERSION
from idlrpc_core.exceptions import ErrorKind, SchemaError
from idlrpc_core.model.message import RpcRequest, RpcResponse


class RequestEnvelope(BaseModel):
    """Shape of one decoded JSON-RPC request object."""
    jsonrpc: Optional[Literal["2.0"]] = None
    method: StrictStr
    params: List[Any] = []
    id: Any = None


Source = Union[bytes, str, IO]


class JsonCodec:
    """
    Decodes IDL documents and requests, encodes responses.

    Malformed bytes are PARSE_ERROR; well-formed JSON that is not a
    request object is INVALID_REQUEST.
    """

    def __init__(self, indent: Optional[int] = None):
        self.indent = indent

    @staticmethod
    def _read(source: Source) -> Any:
        if hasattr(source, "read"):
            source = source.read()
        if isinstance(source, bytes):
            source = source.decode("utf-8")
        return json.loads(source)

    def read_idl(self, source: Source) -> List[dict]:
        """
        Decode an IDL JSON document into its list of entries.

        Raises:
            SchemaError: If the document is not JSON or not a list
        """
        try:
            idl = self._read(source)
        except (ValueError, UnicodeDecodeError, RecursionError) as e:
            raise SchemaError(f"IDL is not valid JSON: {e}")
        if not isinstance(idl, list):
            raise SchemaError(f"IDL must be a JSON array, got {type(idl).__name__}")
        return idl

    def read_request(self, data: Source) -> Any:
        """
        Decode raw request bytes to a JSON value (object or batch list).

        Raises:
            RpcError: PARSE_ERROR if the bytes are not JSON
        """
        try:
            return self._read(data)
        except (ValueError, UnicodeDecodeError, RecursionError) as e:
            raise ErrorKind.PARSE_ERROR.exc(f"Unable to parse request: {e}")

    def parse_request(self, obj: Any) -> RpcRequest:
        """
        Turn one decoded request object into an RpcRequest.

        Raises:
            RpcError: INVALID_REQUEST if the object is not a request
        """
        if not isinstance(obj, dict):
            raise ErrorKind.INVALID_REQUEST.exc(f"Request must be an object, got {type(obj).__name__}")
        try:
            envelope = RequestEnvelope.model_validate(obj)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ErrorKind.INVALID_REQUEST.exc(f"Invalid request: {problems}")
        return RpcRequest(method=envelope.method, params=list(envelope.params), id=envelope.id)

    @staticmethod
    def response_to_dict(resp: RpcResponse) -> dict:
        out = {"jsonrpc": JSONRPC_VERSION, "id": resp.id}
        if resp.error is not None:
            out["error"] = resp.error.to_dict()
        else:
            out["result"] = resp.result
        return out

    def write_response(self, resp: Union[RpcResponse, List[RpcResponse]]) -> bytes:
        """
        Encode a response, or a batch of responses, to UTF-8 JSON.

        Raises:
            TypeError, ValueError: If a result or error data is not JSON encodable
        """
        if isinstance(resp, list):
            payload = [self.response_to_dict(r) for r in resp]
        else:
            payload = self.response_to_dict(resp)
        return json.dumps(payload, indent=self.indent).encode("utf-8")
