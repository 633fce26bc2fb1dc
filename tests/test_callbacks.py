"""LoggingCallback: structured audit lines on flowblocks.audit."""

import json
import logging

import pytest

from flowblocks.callbacks import BaseCallback, BlockCallback, LoggingCallback
from flowblocks.exceptions import CredentialCorruption
from flowblocks.types import ExecutionResult, LogEntry, LogStatus


def _events(caplog):
    return [json.loads(r.getMessage()) for r in caplog.records if r.name == "flowblocks.audit"]


def test_callbacks_satisfy_protocol():
    assert isinstance(BaseCallback(), BlockCallback)
    assert isinstance(LoggingCallback(), BlockCallback)


@pytest.mark.asyncio
async def test_block_start_masks_sensitive_options(caplog, state, block_factory):
    block = block_factory({"action": "Busca Associado", "credentialsId": "c1", "token": "leak"})

    with caplog.at_level(logging.INFO, logger="flowblocks.audit"):
        await LoggingCallback().on_block_start(block, state)

    (event,) = _events(caplog)
    assert event["event"] == "block_start"
    assert event["block_type"] == "Hinova"
    assert event["workspace_id"] == "ws-test-001"
    assert event["action"] == "Busca Associado"
    assert event["option_keys"] == ["action", "credentialsId", "token"]
    assert "leak" not in caplog.text


@pytest.mark.asyncio
async def test_block_complete_summarizes_result(caplog, block_factory):
    result = ExecutionResult(
        outgoing_edge_id="edge-next",
        logs=[LogEntry(status=LogStatus.INFO, description="Nenhum veículo encontrado")],
    )

    with caplog.at_level(logging.INFO, logger="flowblocks.audit"):
        await LoggingCallback().on_block_complete(block_factory(None), result)

    (event,) = _events(caplog)
    assert event["event"] == "block_complete"
    assert event["state_changed"] is False
    assert event["variables_set"] == 0
    assert event["logs"] == [{"status": "info", "description": "Nenhum veículo encontrado"}]


@pytest.mark.asyncio
async def test_error_logged_at_error_level(caplog):
    with caplog.at_level(logging.INFO, logger="flowblocks.audit"):
        await LoggingCallback().on_error(CredentialCorruption("bad"), {"block_id": "b1"})

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    event = json.loads(record.getMessage())
    assert event["error_type"] == "CredentialCorruption"
    assert event["context"] == {"block_id": "b1"}


@pytest.mark.asyncio
async def test_executor_emits_start_and_complete(caplog, resolver, transport, config, state, block_factory):
    from flowblocks.integrations.hinova import build_hinova_executor

    executor = build_hinova_executor(resolver, transport=transport, config=config, callbacks=[LoggingCallback()])
    with caplog.at_level(logging.INFO, logger="flowblocks.audit"):
        await executor.execute(block_factory({"action": "Busca Boleto", "codigoVeiculo": "1"}), state)

    events = _events(caplog)
    assert [e["event"] for e in events] == ["block_start", "block_complete"]
    assert events[1]["logs"] == [{"status": "error", "description": "Missing credentialsId"}]
