"""Chain state RPC access.

This module queries key-value pairs under a storage prefix through the
node's HTTP JSON-RPC endpoint.
"""

from __future__ import annotations

import itertools
from typing import Any, Protocol

import requests
from requests.adapters import HTTPAdapter

from core.constants import CHUNK_FANOUT, STATE_GET_PAIRS_METHOD
from core.errors import ForkOffRpcError
from core.hex_strings import is_hex_string
from core.types import KeyValuePair


class StatePairsSource(Protocol):
    """Anything that can list storage pairs under a key prefix."""

    def get_pairs(self, prefix: str, block_hash: str | None) -> list[KeyValuePair]:
        """Return all pairs whose key starts with ``prefix``."""


class SubstrateRpcClient:
    """Minimal JSON-RPC 2.0 client over a pooled HTTP session.

    The session pool is sized for one full leaf fan-out so concurrent
    chunk queries reuse connections instead of opening new ones.
    """

    def __init__(
        self,
        endpoint: str,
        timeout_seconds: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._timeout_seconds = timeout_seconds
        self._session = session or _build_session()
        self._request_ids = itertools.count(1)

    def get_pairs(self, prefix: str, block_hash: str | None) -> list[KeyValuePair]:
        """Fetch every storage pair under ``prefix``, optionally at a block.

        Raises:
            ForkOffRpcError: If the request fails or returns malformed pairs.
        """
        params: list[str] = [prefix] if block_hash is None else [prefix, block_hash]
        result = self.call(STATE_GET_PAIRS_METHOD, params)
        return _parse_pairs(prefix, result)

    def call(self, method: str, params: list[Any]) -> Any:
        """Issue one JSON-RPC call and return its ``result`` field."""
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }
        try:
            response = self._session.post(
                self._endpoint, json=payload, timeout=self._timeout_seconds
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as error:
            raise ForkOffRpcError(
                f"RPC {method} to {self._endpoint} failed: {error}. "
                "Check HTTP_RPC_ENDPOINT and that the node exposes unsafe RPC methods."
            ) from error
        except ValueError as error:
            raise ForkOffRpcError(
                f"RPC {method} to {self._endpoint} returned a non-JSON body: {error}."
            ) from error
        if not isinstance(body, dict):
            raise ForkOffRpcError(f"RPC {method} returned an unexpected payload: {body!r}.")
        if body.get("error") is not None:
            error_payload = body["error"]
            raise ForkOffRpcError(f"RPC {method} returned an error: {error_payload}.")
        return body.get("result")

    def close(self) -> None:
        self._session.close()


def _build_session() -> requests.Session:
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=1, pool_maxsize=CHUNK_FANOUT)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _parse_pairs(prefix: str, result: object) -> list[KeyValuePair]:
    if result is None:
        return []
    if not isinstance(result, list):
        raise ForkOffRpcError(
            f"{STATE_GET_PAIRS_METHOD} for prefix {prefix} returned {type(result).__name__}, "
            "expected a list of pairs."
        )
    pairs: list[KeyValuePair] = []
    for item in result:
        if (
            not isinstance(item, (list, tuple))
            or len(item) != 2
            or not is_hex_string(item[0])
            or not is_hex_string(item[1])
        ):
            raise ForkOffRpcError(
                f"{STATE_GET_PAIRS_METHOD} for prefix {prefix} returned a malformed pair: {item!r}."
            )
        pairs.append((item[0], item[1]))
    return pairs
