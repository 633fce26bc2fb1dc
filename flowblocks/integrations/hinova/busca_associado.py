"""Busca Associado — list a member's vehicles by CPF."""

import json
import logging
import re
from typing import Any

from flowblocks.blocks.base import (
    ActionContext, describe_error, error_result, finish, log,
    resolve_options, resolve_required, stage_update,
)
from flowblocks.integrations.hinova.schema import BuscaAssociadoOptions
from flowblocks.types import ExecutionResult, LogEntry, LogStatus, VariableUpdate

logger = logging.getLogger(__name__)

_CPF_FORMATTING_RE = re.compile(r"[.\-\s]")
_VEICULO_FIELDS = ("codigo_veiculo", "placa", "descricao_modelo", "situacao")


def clean_cpf(cpf: str) -> str:
    """Strip dots, dashes and whitespace: 123.456.789-09 → 12345678909."""
    return _CPF_FORMATTING_RE.sub("", cpf)


def encode_veiculos(veiculos: list[dict]) -> str:
    """Serialize the vehicle list into a single variable value."""
    return json.dumps(
        [{field: v.get(field) for field in _VEICULO_FIELDS} for v in veiculos],
        ensure_ascii=False,
        separators=(",", ":"),
    )


async def busca_associado(options: BuscaAssociadoOptions, ctx: ActionContext) -> ExecutionResult:
    logs: list[LogEntry] = []
    parsed = resolve_options(options, ctx)

    if not parsed.cpf:
        return error_result(ctx, "CPF não informado")

    cpf = resolve_required(parsed.cpf, ctx)
    if not cpf:
        return error_result(ctx, "CPF inválido")

    url = f"{ctx.config.hinova_base_url}/associado/buscar/{clean_cpf(cpf)}"

    try:
        associado: Any = await ctx.transport.get_json(url, ctx.token)
    except Exception as exc:
        logger.warning("[Hinova] Member lookup failed for block %s: %s", ctx.block_id, exc)
        logs.append(describe_error(exc, "Ao buscar associado"))
        return finish(ctx, [], logs)

    veiculos = associado.get("veiculos") if isinstance(associado, dict) else None
    veiculos = [v for v in veiculos if isinstance(v, dict)] if isinstance(veiculos, list) else []
    if not veiculos:
        logs.append(log(LogStatus.INFO, "Nenhum veículo encontrado para o associado"))
        return finish(ctx, [], logs)

    logs.append(log(LogStatus.SUCCESS, f"{len(veiculos)} veículo(s) encontrado(s)"))

    updates: list[VariableUpdate] = []
    stage_update(updates, ctx, options.veiculos_variable_id, encode_veiculos(veiculos))
    return finish(ctx, updates, logs)
