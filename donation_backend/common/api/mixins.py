# common/api/mixins.py

from common.services.gateway import PersistenceGateway


class GatewayMixin:
    """
    One PersistenceGateway per inbound HTTP request.
    Views hand it to the engines they construct; nothing else opens storage.
    """

    gateway_alias = "default"

    def get_gateway(self) -> PersistenceGateway:
        gateway = getattr(self, "_gateway", None)
        if gateway is None:
            gateway = self._gateway = PersistenceGateway(using=self.gateway_alias)
        return gateway
