"""
HTTP client for the product metadata backend.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

from models.errors import MalformedResponseError, MetadataConnectionError, ProductNotFoundError
from models.inventory import ProductInfo


class MetadataClient:
    """
    Read-only client for ``GET <base_url>/product/:id`` and ``GET <base_url>/product``.

    404 maps to ProductNotFoundError; any other failure to reach a usable
    answer maps to MetadataConnectionError.
    """

    def __init__(
        self,
        base_url: str,
        timeout_s: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout_s)

    def get_product(self, product_id: str) -> ProductInfo:
        body = self._get_json(f"/product/{quote(product_id, safe='')}", product_id=product_id)
        if not isinstance(body, dict):
            raise MalformedResponseError(f"Product {product_id}: expected an object")
        try:
            return ProductInfo.from_dict(body)
        except (KeyError, ValueError) as e:
            raise MalformedResponseError(f"Product {product_id}: invalid record ({e})") from e

    def list_products(self) -> List[ProductInfo]:
        """All known products, in the backend's order (newest first)."""
        body = self._get_json("/product")
        if not isinstance(body, list):
            raise MalformedResponseError("Product list: expected an array")
        try:
            return [ProductInfo.from_dict(row) for row in body]
        except (KeyError, ValueError, TypeError) as e:
            raise MalformedResponseError(f"Product list: invalid record ({e})") from e

    def _get_json(self, path: str, product_id: Optional[str] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._client.get(url, timeout=self.timeout_s)
        except httpx.HTTPError as e:
            logging.warning(f"Metadata request to {url} failed: {e}")
            raise MetadataConnectionError(f"Metadata request failed: {e}") from e

        if response.status_code == 404 and product_id is not None:
            raise ProductNotFoundError(product_id)
        if not 200 <= response.status_code < 300:
            raise MetadataConnectionError(
                f"Metadata backend returned HTTP {response.status_code} for {path}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(f"Metadata response for {path} is not valid JSON") from e

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "MetadataClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
