"""Map session: view-model over the gateway plus the public country lookup."""

from orbitalview.client.gateway import CountryLookup, GatewayClient
from orbitalview.client.session import MapSession, synthetic_pass_arc, visibility_label

__all__ = ["CountryLookup", "GatewayClient", "MapSession", "synthetic_pass_arc", "visibility_label"]
