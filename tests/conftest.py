"""Test fixtures: test workspace, sample session, fake Hinova API, vault.

All tests should use these fixtures for consistency.
"""

import json
from typing import Any, Optional

import httpx
import pytest

from flowblocks.blocks.base import ActionContext
from flowblocks.blocks.http import HttpTransport
from flowblocks.config import FlowblocksConfig
from flowblocks.credentials.encryption import CredentialEncryption
from flowblocks.integrations.hinova.schema import BLOCK_TYPE, HinovaCredentials
from flowblocks.types import Block, CredentialType, SessionState, TypebotInQueue, Variable

_TEST_KEY = CredentialEncryption.generate_key()

WORKSPACE_ID = "ws-test-001"
BASE_URL = "https://hinova.test/api/sga/v2"
TOKEN = "hinova-test-token"


@pytest.fixture
def config():
    """Test configuration pointing at the fake Hinova API."""
    return FlowblocksConfig(
        credential_encryption_key=_TEST_KEY,
        http_timeout_seconds=5.0,
        hinova_base_url=BASE_URL,
    )


# ── Session ───────────────────────────────────────────────────────────────────


def _make_state(*variables: Variable, workspace_id: str = WORKSPACE_ID, **kwargs: Any) -> SessionState:
    return SessionState(
        workspace_id=workspace_id,
        typebots_queue=(TypebotInQueue(typebot_id="tb-1", result_id="res-1", variables=variables),),
        **kwargs,
    )


@pytest.fixture
def variables():
    """Variables of a typical vehicle-support flow."""
    return (
        Variable(id="v-placa", name="placa", value="ABC1234"),
        Variable(id="v-cpf", name="cpf", value="123.456.789-09"),
        Variable(id="v-codigo", name="codigoVeiculo"),
        Variable(id="v-fipe", name="codigoFipe"),
        Variable(id="v-situacao", name="situacao", value="antigo"),
        Variable(id="v-boleto-situacao", name="situacaoBoleto"),
        Variable(id="v-vencimento", name="vencimento"),
        Variable(id="v-pix", name="pix"),
        Variable(id="v-link", name="link"),
        Variable(id="v-linha", name="linhaDigitavel"),
        Variable(id="v-nosso-numero", name="nossoNumero"),
        Variable(id="v-valor", name="valor"),
        Variable(id="v-veiculos", name="veiculos"),
        Variable(id="v-vazio", name="vazio"),
    )


@pytest.fixture
def state(variables):
    return _make_state(*variables)


def _values_by_id(state: SessionState) -> dict[str, Optional[str]]:
    return {v.id: v.value for v in state.variables}


# ── Fake Hinova API ───────────────────────────────────────────────────────────


class FakeHinova:
    """Routes requests to canned responses keyed by (method, path).

    A route answers with ``json_body`` (or raw ``text``) and ``status``, or
    raises ``exc``. Every request is recorded in ``requests``.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, *, status: int = 200, json_body: Any = None,
            text: Optional[str] = None, exc: Optional[Exception] = None) -> None:
        self.routes[(method, BASE_URL + path)] = {"status": status, "json": json_body, "text": text, "exc": exc}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, str(request.url)))
        if route is None:
            return httpx.Response(404, json={"message": "no route"})
        if route["exc"] is not None:
            raise route["exc"]
        if route["text"] is not None:
            return httpx.Response(route["status"], text=route["text"])
        return httpx.Response(route["status"], json=route["json"])

    def body_of(self, index: int) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def hinova_api():
    return FakeHinova()


@pytest.fixture
def transport(hinova_api):
    """HttpTransport whose wire is the fake Hinova API."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(hinova_api.handler))
    return HttpTransport(timeout_seconds=5.0, client=client)


@pytest.fixture
def make_ctx(state, transport, config):
    """Factory for handler contexts; defaults to the sample session."""
    def _make(session: Optional[SessionState] = None) -> ActionContext:
        return ActionContext(
            block_id="blk-hinova",
            state=session or state,
            secret=HinovaCredentials(token=TOKEN),
            outgoing_edge_id="edge-next",
            transport=transport,
            config=config,
        )
    return _make


# ── Credentials ───────────────────────────────────────────────────────────────


@pytest.fixture
def encryption():
    """CredentialEncryption backed by the session test key."""
    return CredentialEncryption(key=_TEST_KEY)


@pytest.fixture
def vault(encryption):
    """In-memory CredentialVault."""
    from flowblocks.credentials.vault import CredentialVault
    return CredentialVault(encryption=encryption)


@pytest.fixture
def resolver(vault):
    from flowblocks.credentials.resolver import VaultCredentialResolver
    return VaultCredentialResolver(vault)


@pytest.fixture
def hinova_credential(vault):
    """ID of a stored Hinova credential in the test workspace."""
    record = vault.store(
        workspace_id=WORKSPACE_ID,
        name="hinova",
        credential_type=CredentialType.HINOVA,
        data={"token": TOKEN},
    )
    return record.id


@pytest.fixture
def executor(resolver, transport, config):
    from flowblocks.integrations.hinova import build_hinova_executor
    return build_hinova_executor(resolver, transport=transport, config=config)


def _make_block(options: Optional[dict] = None, block_id: str = "blk-hinova") -> Block:
    return Block(id=block_id, type=BLOCK_TYPE, outgoing_edge_id="edge-next", options=options)


@pytest.fixture
def state_factory():
    """``state_factory(*variables, **fields)`` builds a one-context SessionState."""
    return _make_state


@pytest.fixture
def block_factory():
    """``block_factory(options)`` builds a Hinova block leading to ``edge-next``."""
    return _make_block


@pytest.fixture
def values():
    """``values(state)`` maps variable ids to their current values."""
    return _values_by_id
