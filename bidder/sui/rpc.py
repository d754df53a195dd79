"""
Sui JSON-RPC client

Only the read APIs needed to fetch auction objects and transactions are provided.
https://docs.sui.io/sui-api-ref
"""
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

import requests

# max number of object IDs that can be looked up per `sui_multiGetObjects` request
MULTI_GET_OBJECTS_MAX = 50

DEFAULT_TX_OPTIONS: dict[str, bool] = {
    "showInput": True,
    "showEffects": True,
    "showObjectChanges": True,
}

DEFAULT_OBJECT_OPTIONS: dict[str, bool] = {
    "showContent": True,
    "showDisplay": True,
    "showType": True,
    "showOwner": True,
}


@dataclass(slots=True)
class SuiRpcError(Exception):
    """
    Raised when the node returns a JSON-RPC error, or the HTTP request fails
    """

    method: str
    message: str
    code: int | None = None

    def __str__(self) -> str:
        return f"[{self.method}] {self.message} (code={self.code})"


class SuiRpc(Protocol):
    """
    Network collaborator used to fetch raw transaction and object records
    """

    def get_transaction_block(
        self, digest: str, options: dict[str, bool] | None = None
    ) -> dict[str, Any]:
        """
        :return: SuiTransactionBlockResponse
        """
        ...

    def multi_get_objects(
        self, object_ids: Sequence[str], options: dict[str, bool] | None = None
    ) -> list[dict[str, Any]]:
        """
        :return: SuiObjectResponse for each object ID, in the same order
        """
        ...

    def query_transaction_blocks(
        self,
        tx_filter: dict[str, Any],
        options: dict[str, bool] | None = None,
        cursor: str | None = None,
        limit: int | None = None,
        descending_order: bool = True,
    ) -> dict[str, Any]:
        """
        :return: page of SuiTransactionBlockResponse: {"data": [...], "nextCursor": ..., "hasNextPage": ...}
        """
        ...

    def get_owned_objects(
        self,
        owner: str,
        object_filter: dict[str, Any] | None = None,
        options: dict[str, bool] | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> dict[str, Any]:
        """
        :return: page of SuiObjectResponse: {"data": [...], "nextCursor": ..., "hasNextPage": ...}
        """
        ...

    def dev_inspect_transaction_block(self, sender: str, tx_bytes: str) -> dict[str, Any]:
        """
        :param tx_bytes: base64 encoded BCS `TransactionKind`
        :return: DevInspectResults
        """
        ...


class SuiClient:
    """
    JSON-RPC 2.0 over HTTP implementation of `SuiRpc`
    """

    def __init__(
        self,
        rpc_url: str,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ):
        self._rpc_url = rpc_url
        self._session = session if session else requests.Session()
        self._timeout = timeout
        self._request_ids = itertools.count(1)
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    def call(self, method: str, params: list[Any]) -> Any:
        """
        Invokes the JSON-RPC method

        :exception SuiRpcError: if the request fails or the node responds with an error
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }
        self._logger.debug("%s %s", method, params)
        try:
            response = self._session.post(
                self._rpc_url, json=payload, timeout=self._timeout
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as err:
            raise SuiRpcError(method, str(err)) from err

        if "error" in body:
            error = body["error"]
            raise SuiRpcError(method, error.get("message", ""), error.get("code"))
        return body["result"]

    def get_transaction_block(
        self, digest: str, options: dict[str, bool] | None = None
    ) -> dict[str, Any]:
        return self.call(
            "sui_getTransactionBlock", [digest, options or DEFAULT_TX_OPTIONS]
        )

    def multi_get_objects(
        self, object_ids: Sequence[str], options: dict[str, bool] | None = None
    ) -> list[dict[str, Any]]:
        """
        Object IDs are looked up in batches of `MULTI_GET_OBJECTS_MAX`
        """
        results: list[dict[str, Any]] = []
        for i in range(0, len(object_ids), MULTI_GET_OBJECTS_MAX):
            batch = list(object_ids[i : i + MULTI_GET_OBJECTS_MAX])
            results.extend(
                self.call(
                    "sui_multiGetObjects", [batch, options or DEFAULT_OBJECT_OPTIONS]
                )
            )
        return results

    def query_transaction_blocks(
        self,
        tx_filter: dict[str, Any],
        options: dict[str, bool] | None = None,
        cursor: str | None = None,
        limit: int | None = None,
        descending_order: bool = True,
    ) -> dict[str, Any]:
        return self.call(
            "suix_queryTransactionBlocks",
            [
                {"filter": tx_filter, "options": options or DEFAULT_TX_OPTIONS},
                cursor,
                limit,
                descending_order,
            ],
        )

    def get_owned_objects(
        self,
        owner: str,
        object_filter: dict[str, Any] | None = None,
        options: dict[str, bool] | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> dict[str, Any]:
        query: dict[str, Any] = {"options": options or DEFAULT_OBJECT_OPTIONS}
        if object_filter:
            query["filter"] = object_filter
        return self.call("suix_getOwnedObjects", [owner, query, cursor, limit])

    def dev_inspect_transaction_block(self, sender: str, tx_bytes: str) -> dict[str, Any]:
        """
        Gas price and epoch default to the node's reference gas price and current epoch
        """
        return self.call("sui_devInspectTransactionBlock", [sender, tx_bytes, None, None])
