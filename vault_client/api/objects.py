"""
Vault Objects API - listing configured object records.
"""

from typing import Any, Dict, List

from ._http import HTTPClient
from ._result import format_args


class VaultObjectsAPI:
    """
    API for Vault object records (products, countries, studies, ...).
    """

    def __init__(self, http: HTTPClient):
        self._http = http

    def list(self, object_type: str) -> List[Dict[str, Any]]:
        """
        Get all records of a Vault object type.

        Args:
            object_type: Object type name, e.g. ``product__v``,
                ``country__v`` or ``study__v``

        Returns:
            List of records, each with at least ``id``
        """
        result = self._http.request(
            "GET",
            f"vobjects/{object_type}",
            call="get_vault_objects",
            args=format_args(object_type=object_type),
        )
        return result.get("data", [])

    def products(self) -> List[Dict[str, Any]]:
        """Get all products defined in the Vault."""
        return self.list("product__v")

    def countries(self) -> List[Dict[str, Any]]:
        """Get all countries defined in the Vault."""
        return self.list("country__v")
