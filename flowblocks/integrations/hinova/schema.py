"""Hinova block options: one model per action, discriminated by ``action``.

Options arrive camelCased from stored workflows (``credentialsId``,
``codigoVeiculoVariableId``); both spellings validate.
"""

from enum import Enum
from typing import Annotated, Any, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Tag, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

BLOCK_TYPE = "Hinova"

# Written to output variables when a lookup succeeds but matches nothing.
NO_RECORD = "sem registro"


class HinovaAction(str, Enum):
    CONSULTA_VEICULO = "Consulta Veículo"
    BUSCA_BOLETO = "Busca Boleto"
    BUSCA_ASSOCIADO = "Busca Associado"


class HinovaCredentials(BaseModel):
    """Decrypted secret fields of a Hinova credential."""
    token: str


class HinovaOptionsBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    credentials_id: Optional[str] = None


class InitialHinovaOptions(HinovaOptionsBase):
    """Block dropped into a flow, no action picked yet."""
    action: None = None


class _ActionOptions(HinovaOptionsBase):
    kind: ClassVar[HinovaAction]
    action: HinovaAction

    @field_validator("action")
    @classmethod
    def match_kind(cls, v):
        if v != cls.kind:
            raise ValueError(f"expected action '{cls.kind.value}', got '{v.value}'")
        return v


class ConsultaVeiculoOptions(_ActionOptions):
    kind = HinovaAction.CONSULTA_VEICULO
    placa: Optional[str] = None
    codigo_veiculo_variable_id: Optional[str] = None
    codigo_fipe_variable_id: Optional[str] = None
    descricao_situacao_variable_id: Optional[str] = None


class BuscaBoletoOptions(_ActionOptions):
    kind = HinovaAction.BUSCA_BOLETO
    codigo_veiculo: Optional[str] = None
    dias_antes: Optional[int] = None
    dias_depois: Optional[int] = None
    situacao_boleto_variable_id: Optional[str] = None
    data_vencimento_variable_id: Optional[str] = None
    pix_copia_cola_variable_id: Optional[str] = None
    link_boleto_variable_id: Optional[str] = None
    linha_digitavel_variable_id: Optional[str] = None
    nosso_numero_variable_id: Optional[str] = None
    valor_boleto_variable_id: Optional[str] = None


class BuscaAssociadoOptions(_ActionOptions):
    kind = HinovaAction.BUSCA_ASSOCIADO
    cpf: Optional[str] = None
    veiculos_variable_id: Optional[str] = None


def _action_tag(value: Any) -> str:
    action = value.get("action") if isinstance(value, dict) else getattr(value, "action", None)
    if action is None:
        return "initial"
    return action.value if isinstance(action, HinovaAction) else str(action)


HinovaOptions = Annotated[
    Union[
        Annotated[ConsultaVeiculoOptions, Tag(HinovaAction.CONSULTA_VEICULO.value)],
        Annotated[BuscaBoletoOptions, Tag(HinovaAction.BUSCA_BOLETO.value)],
        Annotated[BuscaAssociadoOptions, Tag(HinovaAction.BUSCA_ASSOCIADO.value)],
        Annotated[InitialHinovaOptions, Tag("initial")],
    ],
    Discriminator(_action_tag),
]

hinova_options_adapter: TypeAdapter = TypeAdapter(HinovaOptions)
