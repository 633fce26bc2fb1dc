"""Consulta Veículo — look a vehicle up by licence plate.

Old-format plates (ABC1234) may be registered upstream in the Mercosul
format (ABC1C34). When the plate as typed matches nothing, the lookup is
retried exactly once with the converted plate before giving up.
"""

import logging
import string
from typing import Any

from flowblocks.blocks.base import (
    ActionContext, describe_error, error_result, finish, log,
    resolve_options, resolve_required, stage_update,
)
from flowblocks.integrations.hinova.schema import NO_RECORD, ConsultaVeiculoOptions
from flowblocks.types import ExecutionResult, LogEntry, LogStatus, VariableUpdate

logger = logging.getLogger(__name__)


def to_mercosul(placa: str) -> str:
    """Convert an old-format plate to Mercosul: ABC1234 → ABC1C34.

    The second digit becomes the letter at that index of the alphabet.
    Plates with fewer than two digits come back uppercased and unspaced.
    """
    chars = list("".join(placa.upper().split()))
    digits_seen = 0
    for i, ch in enumerate(chars):
        if ch in string.digits:
            digits_seen += 1
            if digits_seen == 2:
                chars[i] = string.ascii_uppercase[int(ch)]
                break
    return "".join(chars)


def _as_records(payload: Any) -> list[dict]:
    """Normalize the lookup payload: a list, a single object, or nothing."""
    if isinstance(payload, list):
        return [r for r in payload if isinstance(r, dict)]
    if isinstance(payload, dict):
        return [payload]
    return []


async def _lookup(placa: str, ctx: ActionContext) -> list[dict]:
    url = f"{ctx.config.hinova_base_url}/veiculo/buscar/{placa}"
    return _as_records(await ctx.transport.get_json(url, ctx.token))


async def consulta_veiculo(options: ConsultaVeiculoOptions, ctx: ActionContext) -> ExecutionResult:
    logs: list[LogEntry] = []
    parsed = resolve_options(options, ctx)

    if not parsed.placa:
        return error_result(ctx, "Placa não informada")

    placa = resolve_required(parsed.placa, ctx)
    if not placa:
        return error_result(ctx, "Placa inválida")

    outputs = (
        (options.codigo_veiculo_variable_id, "codigo_veiculo"),
        (options.codigo_fipe_variable_id, "codigo_fipe"),
        (options.descricao_situacao_variable_id, "descricao_situacao"),
    )

    try:
        veiculos = await _lookup(placa, ctx)

        if not veiculos:
            placa_mercosul = to_mercosul(placa)
            logs.append(log(
                LogStatus.INFO,
                f"Placa original não encontrada, tentando com padrão Mercosul: {placa_mercosul}",
            ))
            veiculos = await _lookup(placa_mercosul, ctx)
    except Exception as exc:
        logger.warning("[Hinova] Vehicle lookup failed for block %s: %s", ctx.block_id, exc)
        logs.append(describe_error(exc, "Ao consultar veículo"))
        return finish(ctx, [], logs)

    updates: list[VariableUpdate] = []

    if not veiculos:
        logs.append(log(LogStatus.INFO, "Nenhum veículo encontrado"))
        for variable_id, _field in outputs:
            stage_update(updates, ctx, variable_id, NO_RECORD)
        return finish(ctx, updates, logs)

    veiculo = veiculos[0]
    logs.append(log(LogStatus.SUCCESS, f"Veículo encontrado: {veiculo.get('placa', placa)}"))
    for variable_id, field in outputs:
        stage_update(updates, ctx, variable_id, str(veiculo.get(field) or ""))
    return finish(ctx, updates, logs)
