"""Busca Boleto — list a vehicle's invoices due within a date window."""

import logging
from datetime import date, timedelta
from typing import Any

from flowblocks.blocks.base import (
    ActionContext, describe_error, error_result, finish, log,
    resolve_options, resolve_required, stage_update,
)
from flowblocks.integrations.hinova.schema import BuscaBoletoOptions
from flowblocks.types import ExecutionResult, LogEntry, LogStatus, VariableUpdate

logger = logging.getLogger(__name__)

DEFAULT_DIAS_ANTES = 0
DEFAULT_DIAS_DEPOIS = 15


def _today() -> date:
    return date.today()


def format_date(d: date) -> str:
    """DD/MM/YYYY, as the upstream API expects."""
    return d.strftime("%d/%m/%Y")


def build_request_body(codigo_veiculo: str, dias_antes: int, dias_depois: int, today: date) -> dict[str, str]:
    return {
        "codigo_veiculo": codigo_veiculo,
        "data_vencimento_original_inicial": format_date(today - timedelta(days=dias_antes)),
        "data_vencimento_original_final": format_date(today + timedelta(days=dias_depois)),
    }


async def busca_boleto(options: BuscaBoletoOptions, ctx: ActionContext) -> ExecutionResult:
    logs: list[LogEntry] = []
    parsed = resolve_options(options, ctx)

    if not parsed.codigo_veiculo:
        return error_result(ctx, "Código do veículo não informado")

    codigo_veiculo = resolve_required(parsed.codigo_veiculo, ctx)
    if not codigo_veiculo:
        return error_result(ctx, "Código do veículo inválido")

    dias_antes = DEFAULT_DIAS_ANTES if options.dias_antes is None else options.dias_antes
    dias_depois = DEFAULT_DIAS_DEPOIS if options.dias_depois is None else options.dias_depois
    body = build_request_body(codigo_veiculo, dias_antes, dias_depois, _today())
    url = f"{ctx.config.hinova_base_url}/listar/boleto-associado-veiculo"

    try:
        boletos: Any = await ctx.transport.post_json(url, ctx.token, body)
    except Exception as exc:
        logger.warning("[Hinova] Invoice lookup failed for block %s: %s", ctx.block_id, exc)
        logs.append(describe_error(exc, "Ao buscar boleto"))
        return finish(ctx, [], logs)

    if not isinstance(boletos, list) or not boletos:
        logs.append(log(LogStatus.INFO, "Nenhum boleto encontrado no período especificado"))
        return finish(ctx, [], logs)

    boleto: dict = boletos[0] if isinstance(boletos[0], dict) else {}
    pix = boleto.get("pix") or {}
    pix_copia_cola = pix.get("copia_cola") if isinstance(pix, dict) else None

    logs.append(log(
        LogStatus.SUCCESS,
        f"{len(boletos)} boleto(s) encontrado(s). Processando o primeiro: {boleto.get('nosso_numero')}",
    ))
    logs.append(log(
        LogStatus.INFO,
        f"Boleto dados: situacao={boleto.get('situacao_boleto')}, "
        f"vencimento={boleto.get('data_vencimento')}, "
        f"link={boleto.get('link_boleto') or 'não informado'}, "
        f"pix={'presente' if pix_copia_cola else 'não presente'}",
    ))

    updates: list[VariableUpdate] = []
    outputs = (
        (options.situacao_boleto_variable_id, boleto.get("situacao_boleto")),
        (options.data_vencimento_variable_id, boleto.get("data_vencimento")),
        (options.pix_copia_cola_variable_id, pix_copia_cola),
        (options.link_boleto_variable_id, boleto.get("link_boleto")),
        (options.linha_digitavel_variable_id, boleto.get("linha_digitavel")),
        (options.nosso_numero_variable_id, boleto.get("nosso_numero")),
        (options.valor_boleto_variable_id, boleto.get("valor_boleto")),
    )
    for variable_id, value in outputs:
        stage_update(updates, ctx, variable_id, str(value or ""))
    return finish(ctx, updates, logs)
