"""
Pytest configuration and fixtures for cnaerisk tests.

Provides factory helpers and a small rule table mirroring the concrete
scenarios the classifier must reproduce.
"""
import pytest

from cnaerisk.engine import RiskClassifier, RuleTable
from cnaerisk.models import CnaeRule, Competence, RiskLevel
from cnaerisk.store import InMemoryRuleStore


# =============================================================================
# Factory Helpers
# =============================================================================

def make_rule(
    cnae: str,
    risk: RiskLevel = RiskLevel.BAIXO,
    description: str = None,
    competence: Competence = Competence.MUNICIPAL,
    requires_pba: bool = False,
    question: str = None,
    risk_if_yes: RiskLevel = None,
    risk_if_no: RiskLevel = None,
) -> CnaeRule:
    """Create a CnaeRule with sensible defaults."""
    return CnaeRule(
        cnae=cnae,
        description=description or f"Atividade {cnae}",
        risk=risk,
        competence=competence,
        requires_pba=requires_pba,
        question=question,
        risk_if_yes=risk_if_yes,
        risk_if_no=risk_if_no,
    )


def make_conditional_rule(
    cnae: str,
    question: str = None,
    risk_if_yes: RiskLevel = RiskLevel.ALTO,
    risk_if_no: RiskLevel = RiskLevel.BAIXO,
    **kwargs,
) -> CnaeRule:
    """Create a CONDICIONADO rule."""
    return make_rule(
        cnae,
        risk=RiskLevel.CONDICIONADO,
        question=question,
        risk_if_yes=risk_if_yes,
        risk_if_no=risk_if_no,
        **kwargs,
    )


def make_table(*rules: CnaeRule, store: InMemoryRuleStore = None) -> RuleTable:
    """Create a READY rule table holding the given rules."""
    return RuleTable(rules=list(rules), store=store)


# Rules used across the classifier tests
PHARMACY = "4771700"
HOSPITAL = "8610101"
DENTAL = "8630504"
BAKERY = "1091101"
SALON = "9602501"


def standard_rules() -> list[CnaeRule]:
    return [
        make_rule("4771-7/00", RiskLevel.BAIXO, description="Comércio varejista de produtos farmacêuticos"),
        make_conditional_rule(
            "8610-1/01",
            question="Realiza internação?",
            description="Atendimento hospitalar",
            competence=Competence.STATE,
            requires_pba=True,
        ),
        make_conditional_rule(
            "8630-5/04",
            description="Atividade odontológica",
            risk_if_yes=None,
            risk_if_no=None,
        ),
        make_rule(
            "1091-1/01",
            RiskLevel.ALTO,
            description="Panificação industrial",
            competence=Competence.STATE,
            requires_pba=True,
        ),
        make_rule("9602-5/01", RiskLevel.MEDIO, description="Cabeleireiros"),
    ]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def rules() -> list[CnaeRule]:
    return standard_rules()


@pytest.fixture
def store() -> InMemoryRuleStore:
    return InMemoryRuleStore()


@pytest.fixture
def table(rules, store) -> RuleTable:
    return RuleTable(rules=rules, store=store)


@pytest.fixture
def classifier(table) -> RiskClassifier:
    return RiskClassifier(table, ready_timeout=0)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from CNAERISK_* variables in the environment."""
    from cnaerisk.config import reset_settings

    for name in (
        "CNAERISK_LOG_LEVEL",
        "CNAERISK_LOG_FORMAT",
        "CNAERISK_RULES_PATH",
        "CNAERISK_READY_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()
