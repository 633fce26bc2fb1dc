"""Hinova (SGA) vehicle and billing lookups."""

from flowblocks.integrations.hinova.executor import HANDLERS, build_hinova_executor
from flowblocks.integrations.hinova.schema import (
    BLOCK_TYPE, NO_RECORD, BuscaAssociadoOptions, BuscaBoletoOptions,
    ConsultaVeiculoOptions, HinovaAction, HinovaCredentials, InitialHinovaOptions,
)

__all__ = [
    "HANDLERS", "build_hinova_executor",
    "BLOCK_TYPE", "NO_RECORD", "HinovaAction", "HinovaCredentials",
    "InitialHinovaOptions", "ConsultaVeiculoOptions", "BuscaBoletoOptions", "BuscaAssociadoOptions",
]
