"""Pick the broker an admin request has to go to."""
from __future__ import annotations

import logging
from typing import Callable

from kafka import errors as Errors

from kafka_admin.core.config import ConnectionConfig
from kafka_admin.core.exceptions import NoAvailableBrokersError
from kafka_admin.infra.kafka.admin import ClusterClient
from kafka_admin.infra.kafka.broker import Broker

Connector = Callable[[str, dict], Broker]


class BrokerLocator:
    """Resolves the controller, or the first reachable bootstrap broker.

    Parameters
    ----------
    config : ConnectionConfig
        Supplies the bootstrap addresses and the client configuration.
    connector : callable, optional
        ``(address, client_config) -> Broker``; defaults to :meth:`Broker.open`.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        client_config: dict | None = None,
        connector: Connector = Broker.open,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._client_config = client_config
        self._connect = connector
        self._log = logger or logging.getLogger(__name__)

    def controller(self, cluster: ClusterClient) -> Broker:
        """Only the controller accepts topic and partition mutations."""
        return cluster.controller()

    def available_broker(self) -> Broker:
        """Return the first bootstrap broker that accepts a connection.

        The caller owns the returned broker and must close it.
        """
        if self._client_config is None:
            self._client_config = self._config.derive_client_config()
        addresses = self._config.bootstrap_servers
        self._log.debug("Looking for brokers @ %s", addresses)
        for address in addresses:
            try:
                return self._connect(address, self._client_config)
            except (Errors.KafkaError, OSError) as exc:
                self._log.warning("Broker @ %s cannot be reached: %s", address, exc)
        raise NoAvailableBrokersError(addresses)
