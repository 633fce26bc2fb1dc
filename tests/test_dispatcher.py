"""IntegrationBlockExecutor: option validation, credential flow, dispatch, callbacks."""

from enum import Enum
from typing import Optional

import pytest

from flowblocks.blocks.dispatcher import IntegrationBlockExecutor
from flowblocks.blocks.registry import BlockRegistry
from flowblocks.callbacks.base import BaseCallback
from flowblocks.credentials.resolver import Credential
from flowblocks.exceptions import BlockNotSupported, ConfigurationError, CredentialCorruption
from flowblocks.integrations import build_registry
from flowblocks.integrations.hinova import HANDLERS, HinovaAction, build_hinova_executor
from flowblocks.integrations.hinova.schema import (
    BuscaAssociadoOptions, ConsultaVeiculoOptions, HinovaCredentials,
    InitialHinovaOptions, hinova_options_adapter,
)
from flowblocks.types import Block, CredentialRecord, CredentialType, ExecutionResult, LogStatus


WORKSPACE_ID = "ws-test-001"


class RecordingCallback(BaseCallback):
    def __init__(self):
        self.events = []

    async def on_block_start(self, block, state, **kwargs):
        self.events.append(("start", block.id))

    async def on_block_complete(self, block, result, **kwargs):
        self.events.append(("complete", block.id, result))

    async def on_error(self, error, context, **kwargs):
        self.events.append(("error", type(error).__name__, context))


class GarbageResolver:
    """Resolves every reference to a record whose payload cannot be decrypted."""

    def __init__(self, vault):
        self.vault = vault

    def resolve(self, credential_id: str, workspace_id: str) -> Optional[Credential]:
        record = CredentialRecord(
            id=credential_id,
            workspace_id=workspace_id,
            name="broken",
            credential_type=CredentialType.HINOVA,
            data="AAAA",
            iv="AAAAAAAAAAAAAAAA",
        )
        return Credential(record, self.vault)


# ── Options schema ───────────────────────────────────────────────────────────


def test_options_discriminate_on_action():
    parsed = hinova_options_adapter.validate_python(
        {"action": "Consulta Veículo", "credentialsId": "c1", "placa": "{{placa}}"}
    )
    assert isinstance(parsed, ConsultaVeiculoOptions)
    assert parsed.action is HinovaAction.CONSULTA_VEICULO
    assert parsed.credentials_id == "c1"

    parsed = hinova_options_adapter.validate_python({"action": "Busca Associado", "cpf": "1"})
    assert isinstance(parsed, BuscaAssociadoOptions)


def test_options_without_action_are_initial():
    parsed = hinova_options_adapter.validate_python({"credentialsId": "c1"})
    assert isinstance(parsed, InitialHinovaOptions)
    assert parsed.action is None


def test_options_accept_snake_case_names():
    parsed = hinova_options_adapter.validate_python(
        {"action": "Consulta Veículo", "credentials_id": "c1", "codigo_veiculo_variable_id": "v"}
    )
    assert parsed.codigo_veiculo_variable_id == "v"


# ── Construction ─────────────────────────────────────────────────────────────


def test_every_action_has_a_handler():
    assert set(HANDLERS) == set(HinovaAction)


def _build(resolver, handlers):
    return IntegrationBlockExecutor(
        block_type="Hinova",
        actions=HinovaAction,
        options_adapter=hinova_options_adapter,
        handlers=handlers,
        credentials_schema=HinovaCredentials,
        credential_resolver=resolver,
    )


def test_missing_handler_fails_at_construction(resolver):
    handlers = dict(HANDLERS)
    del handlers[HinovaAction.BUSCA_BOLETO]
    with pytest.raises(ConfigurationError) as exc_info:
        _build(resolver, handlers)
    assert exc_info.value.details["missing"] == ["Busca Boleto"]


def test_unknown_handler_fails_at_construction(resolver):
    class Other(str, Enum):
        EXTRA = "Extra"

    handlers = {**HANDLERS, Other.EXTRA: HANDLERS[HinovaAction.BUSCA_BOLETO]}
    with pytest.raises(ConfigurationError) as exc_info:
        _build(resolver, handlers)
    assert exc_info.value.details["unknown"]


# ── State machine ────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_no_options_passes_through(executor, state, block_factory, hinova_api):
    result = await executor.execute(block_factory(None), state)
    assert result == ExecutionResult(outgoing_edge_id="edge-next")
    assert hinova_api.requests == []


@pytest.mark.asyncio
async def test_no_action_passes_through(executor, state, block_factory, hinova_api):
    result = await executor.execute(block_factory({"credentialsId": "whatever"}), state)
    assert result.outgoing_edge_id == "edge-next"
    assert result.logs == []
    assert result.new_session_state is None
    assert hinova_api.requests == []


@pytest.mark.asyncio
async def test_missing_credentials_id(executor, state, block_factory, hinova_api):
    result = await executor.execute(block_factory({"action": "Consulta Veículo", "placa": "ABC1234"}), state)
    assert [(e.status, e.description) for e in result.logs] == [(LogStatus.ERROR, "Missing credentialsId")]
    assert result.outgoing_edge_id == "edge-next"
    assert result.new_session_state is None
    assert hinova_api.requests == []


@pytest.mark.asyncio
async def test_empty_credentials_id_counts_as_missing(executor, state, block_factory):
    result = await executor.execute(
        block_factory({"action": "Consulta Veículo", "credentialsId": "", "placa": "ABC1234"}), state,
    )
    assert result.logs[0].description == "Missing credentialsId"


@pytest.mark.asyncio
async def test_credentials_not_found(executor, state, block_factory, hinova_api):
    result = await executor.execute(
        block_factory({"action": "Busca Associado", "credentialsId": "nope", "cpf": "1"}), state,
    )
    assert [(e.status, e.description) for e in result.logs] == [(LogStatus.ERROR, "Credentials not found")]
    assert result.new_session_state is None
    assert hinova_api.requests == []


@pytest.mark.asyncio
async def test_credentials_from_other_workspace_not_found(executor, vault, state, block_factory):
    record = vault.store(
        workspace_id="ws-other", name="h", credential_type=CredentialType.HINOVA, data={"token": "t"},
    )
    result = await executor.execute(
        block_factory({"action": "Busca Associado", "credentialsId": record.id, "cpf": "1"}),
        state,
    )
    assert result.logs[0].description == "Credentials not found"


@pytest.mark.asyncio
async def test_invalid_action_is_logged(executor, state, block_factory):
    result = await executor.execute(block_factory({"action": "Teleport", "credentialsId": "c"}), state)
    assert result.logs[0].status == LogStatus.ERROR
    assert result.logs[0].description == "Invalid block options"
    assert result.outgoing_edge_id == "edge-next"


@pytest.mark.asyncio
async def test_wrong_block_type_raises(executor, state):
    with pytest.raises(BlockNotSupported):
        await executor.execute(Block(type="OpenAI", options={}), state)


@pytest.mark.asyncio
async def test_dispatches_to_action_handler(executor, state, block_factory, hinova_credential, hinova_api, values):
    hinova_api.add("GET", "/veiculo/buscar/ABC1234", json_body=[
        {"codigo_veiculo": 42, "codigo_fipe": "001", "descricao_situacao": "ATIVO", "placa": "ABC1234"},
    ])
    block = block_factory({
        "action": "Consulta Veículo",
        "credentialsId": hinova_credential,
        "placa": "{{placa}}",
        "codigoVeiculoVariableId": "v-codigo",
    })

    result = await executor.execute(block, state)

    assert result.logs[-1].status == LogStatus.SUCCESS
    assert values(result.new_session_state)["v-codigo"] == "42"
    request = hinova_api.requests[0]
    assert request.headers["Authorization"] == "Bearer hinova-test-token"


@pytest.mark.asyncio
async def test_handler_result_is_returned_unchanged(resolver, transport, config, state, block_factory, hinova_credential):
    sentinel = ExecutionResult(outgoing_edge_id="custom-edge")
    seen = {}

    async def fake_handler(options, ctx):
        seen["options"] = options
        seen["ctx"] = ctx
        return sentinel

    handlers = {action: fake_handler for action in HinovaAction}
    executor = IntegrationBlockExecutor(
        block_type="Hinova",
        actions=HinovaAction,
        options_adapter=hinova_options_adapter,
        handlers=handlers,
        credentials_schema=HinovaCredentials,
        credential_resolver=resolver,
        transport=transport,
        config=config,
    )

    result = await executor.execute(
        block_factory({"action": "Busca Boleto", "credentialsId": hinova_credential, "codigoVeiculo": "7"}), state,
    )

    assert result is sentinel
    assert seen["options"].codigo_veiculo == "7"
    assert seen["ctx"].token == "hinova-test-token"
    assert seen["ctx"].block_id == "blk-hinova"
    assert seen["ctx"].state is state


@pytest.mark.asyncio
async def test_corrupted_credential_propagates(vault, transport, config, state, block_factory, hinova_api):
    callback = RecordingCallback()
    executor = build_hinova_executor(GarbageResolver(vault), transport=transport, config=config, callbacks=[callback])

    with pytest.raises(CredentialCorruption):
        await executor.execute(
            block_factory({"action": "Consulta Veículo", "credentialsId": "c1", "placa": "ABC1234"}), state,
        )

    assert hinova_api.requests == []
    assert callback.events[0] == ("start", "blk-hinova")
    assert callback.events[-1][0] == "error"
    assert callback.events[-1][1] == "CredentialCorruption"
    assert not any(e[0] == "complete" for e in callback.events)


@pytest.mark.asyncio
async def test_secret_not_matching_schema_propagates(executor, vault, state, block_factory):
    record = vault.store(
        workspace_id=WORKSPACE_ID, name="h", credential_type=CredentialType.HINOVA, data={"api_key": "x"},
    )
    with pytest.raises(CredentialCorruption):
        await executor.execute(
            block_factory({"action": "Busca Associado", "credentialsId": record.id, "cpf": "1"}), state,
        )


@pytest.mark.asyncio
async def test_callbacks_fire_in_order(resolver, transport, config, state, block_factory):
    callback = RecordingCallback()
    executor = build_hinova_executor(resolver, transport=transport, config=config, callbacks=[callback])

    result = await executor.execute(block_factory(None), state)

    assert [e[0] for e in callback.events] == ["start", "complete"]
    assert callback.events[1][2] is result


# ── Registry ─────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_registry_routes_by_block_type(resolver, transport, config, state, block_factory):
    registry = build_registry(resolver, transport=transport, config=config)
    assert registry.list_block_types() == ["Hinova"]
    result = await registry.execute(block_factory(None), state)
    assert result.outgoing_edge_id == "edge-next"


@pytest.mark.asyncio
async def test_registry_unknown_type_raises(state):
    registry = BlockRegistry()
    with pytest.raises(BlockNotSupported) as exc_info:
        await registry.execute(Block(type="Zapier"), state)
    assert exc_info.value.block_type == "Zapier"


def test_registry_register_replaces(resolver):
    registry = BlockRegistry()
    first = build_hinova_executor(resolver)
    second = build_hinova_executor(resolver)
    registry.register(first)
    registry.register(second)
    assert registry.get("Hinova") is second
