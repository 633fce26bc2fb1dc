"""Wires the Hinova actions into an :class:`IntegrationBlockExecutor`."""

from typing import Optional, Sequence

from flowblocks.blocks.base import ActionHandler
from flowblocks.blocks.dispatcher import IntegrationBlockExecutor
from flowblocks.blocks.http import HttpTransport
from flowblocks.callbacks.base import BlockCallback
from flowblocks.config import FlowblocksConfig
from flowblocks.credentials.resolver import CredentialResolver
from flowblocks.integrations.hinova.busca_associado import busca_associado
from flowblocks.integrations.hinova.busca_boleto import busca_boleto
from flowblocks.integrations.hinova.consulta_veiculo import consulta_veiculo
from flowblocks.integrations.hinova.schema import (
    BLOCK_TYPE, HinovaAction, HinovaCredentials, hinova_options_adapter,
)

HANDLERS: dict[HinovaAction, ActionHandler] = {
    HinovaAction.CONSULTA_VEICULO: consulta_veiculo,
    HinovaAction.BUSCA_BOLETO: busca_boleto,
    HinovaAction.BUSCA_ASSOCIADO: busca_associado,
}


def build_hinova_executor(
    credential_resolver: CredentialResolver,
    transport: Optional[HttpTransport] = None,
    config: Optional[FlowblocksConfig] = None,
    callbacks: Optional[Sequence[BlockCallback]] = None,
) -> IntegrationBlockExecutor:
    """Build the executor for ``Hinova`` blocks."""
    return IntegrationBlockExecutor(
        block_type=BLOCK_TYPE,
        actions=HinovaAction,
        options_adapter=hinova_options_adapter,
        handlers=HANDLERS,
        credentials_schema=HinovaCredentials,
        credential_resolver=credential_resolver,
        transport=transport,
        config=config,
        callbacks=callbacks,
    )
