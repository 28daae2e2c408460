"""Clients for downstream HTTP services."""

from engine.services.downstream.base_downstream_client import BaseDownstreamClient
from engine.services.downstream.sms_gateway_client import SmsGatewayClient

__all__ = ["BaseDownstreamClient", "SmsGatewayClient"]
