"""
Model Tests

Tests cover:
- Enum parsing, severity ordering and audit labels
- CnaeRule construction rules and defaults
- Stored (camelCase) forms of results
- Placeholder results and content hashing
"""
import pytest

from cnaerisk.engine import RiskClassifier, RuleTable
from cnaerisk.models import (
    DEFAULT_CONDITION_QUESTION,
    CnaeRule,
    CodeDetail,
    Competence,
    Override,
    ResolutionSource,
    RiskAnalysisResult,
    RiskLevel,
    TableState,
)

from tests.conftest import HOSPITAL, PHARMACY, make_conditional_rule, make_rule


# =============================================================================
# Enums
# =============================================================================

class TestRiskLevel:
    """Tier labels and ordering."""

    def test_stored_labels(self):
        assert RiskLevel.MEDIO.value == "MÉDIO"
        assert RiskLevel.PENDENTE.value == "PENDENTE DE ANÁLISE"

    def test_severity_order(self):
        ordered = sorted(
            [RiskLevel.ALTO, RiskLevel.BAIXO, RiskLevel.CONDICIONADO, RiskLevel.MEDIO],
            key=lambda level: level.severity,
        )
        assert ordered == [
            RiskLevel.BAIXO, RiskLevel.MEDIO, RiskLevel.CONDICIONADO, RiskLevel.ALTO,
        ]

    @pytest.mark.parametrize("value,expected", [
        ("MÉDIO", RiskLevel.MEDIO),
        ("MEDIO", RiskLevel.MEDIO),
        (" alto ", RiskLevel.ALTO),
        (RiskLevel.BAIXO, RiskLevel.BAIXO),
        ("GRAVE", None),
        (None, None),
        (1, None),
    ])
    def test_parse(self, value, expected):
        assert RiskLevel.parse(value) is expected

    def test_sentinels(self):
        assert RiskLevel.PENDENTE.is_sentinel
        assert RiskLevel.INDEFINIDO.is_sentinel
        assert not RiskLevel.CONDICIONADO.is_sentinel


class TestCompetence:

    def test_parse(self):
        assert Competence.parse("ESTADO") is Competence.STATE
        assert Competence.parse("MUNICÍPIO") is Competence.MUNICIPAL
        assert Competence.parse("federal") is None


class TestResolutionSource:

    def test_audit_labels(self):
        assert ResolutionSource.RULE.audit_label == "SESA 1034/2020"
        assert ResolutionSource.ANSWER.audit_label == "DECISÃO MANUAL DO AGENTE"
        assert ResolutionSource.FALLBACK.audit_label == "ANALOGIA (REGRA 1)"
        assert ResolutionSource.PENDING.audit_label == "AGUARDANDO RESPOSTA"

    def test_detail_sources(self, classifier):
        result = classifier.analyze(
            ["4771-7/00", "8630-5/04", "9999-9/99", "8610-1/01"],
            {HOSPITAL: RiskLevel.ALTO},
        )
        assert [d.source for d in result.cnae_details] == [
            ResolutionSource.RULE,
            ResolutionSource.PENDING,
            ResolutionSource.FALLBACK,
            ResolutionSource.ANSWER,
        ]


# =============================================================================
# CnaeRule
# =============================================================================

class TestCnaeRule:
    """Rule construction and derived values."""

    def test_labels_coerced_to_members(self):
        rule = CnaeRule(
            cnae="8610-1/01",
            description="Hospital",
            risk="CONDICIONADO",
            competence="ESTADO",
            risk_if_yes="ALTO",
            risk_if_no="MÉDIO",
        )

        assert rule.risk is RiskLevel.CONDICIONADO
        assert rule.competence is Competence.STATE
        assert rule.risk_if_yes is RiskLevel.ALTO
        assert rule.risk_if_no is RiskLevel.MEDIO
        assert rule.to_dict()["competence"] == "ESTADO"

    def test_label_rules_usable_by_table_and_classifier(self):
        table = RuleTable(rules=[])
        table.upsert(CnaeRule(cnae="4771-7/00", description="Farmácia", risk="ALTO"))
        table.upsert(CnaeRule(cnae="9602-5/01", description="Salão", risk="MÉDIO"))

        result = RiskClassifier(table, ready_timeout=0).analyze(["4771700", "9602501"])

        assert result.risk_level == RiskLevel.ALTO

    @pytest.mark.parametrize("field,value", [
        ("risk", "GRAVE"),
        ("risk", "PENDENTE DE ANÁLISE"),
        ("competence", "FEDERAL"),
        ("risk_if_yes", "INDEFINIDO"),
        ("risk_if_no", 3),
    ])
    def test_unknown_labels_rejected(self, field, value):
        kwargs = {"cnae": "1111111", "description": "x", "risk": "CONDICIONADO", field: value}
        with pytest.raises(ValueError):
            CnaeRule(**kwargs)

    def test_code_normalized(self):
        assert make_rule("47.71-7/01").code == "4771701"

    def test_sentinel_risk_rejected(self):
        with pytest.raises(ValueError):
            make_rule("1111111", RiskLevel.PENDENTE)

    def test_manual_analysis_competence_rejected(self):
        with pytest.raises(ValueError):
            make_rule("1111111", competence=Competence.MANUAL_ANALYSIS)

    def test_default_question(self):
        assert make_conditional_rule("8630-5/04").question_text == DEFAULT_CONDITION_QUESTION

    def test_to_dict_omits_unset_condition_fields(self):
        data = make_rule("4771-7/00").to_dict()

        assert data == {
            "cnae": "4771-7/00",
            "description": "Atividade 4771-7/00",
            "risk": "BAIXO",
            "competence": "MUNICÍPIO",
            "requiresPba": False,
        }

    def test_round_trip_conditional(self):
        rule = make_conditional_rule(
            "8610-1/01",
            question="Realiza internação?",
            risk_if_no=RiskLevel.MEDIO,
            competence=Competence.STATE,
            requires_pba=True,
        )
        assert type(rule).from_dict(rule.to_dict()) == rule


# =============================================================================
# Results
# =============================================================================

class TestRiskAnalysisResult:
    """Verdict properties and stored form."""

    def test_stored_form_keys(self, classifier):
        data = classifier.analyze(["4771-7/00"]).to_dict()

        assert data["riskLevel"] == "BAIXO"
        assert data["competence"] == "MUNICÍPIO"
        assert data["requiresPba"] is False
        assert data["cnaeDetails"][0]["code"] == "4771-7/00"
        assert data["pendingResolutions"] == []
        assert data["ruleTableState"] == "ready"
        assert "override" not in data

    def test_pending_round_trip(self, classifier):
        result = classifier.analyze(["8610-1/01", "4771-7/00"])

        restored = RiskAnalysisResult.from_dict(result.to_dict())

        assert restored == result
        assert restored.pending_resolutions[0].question == "Realiza internação?"

    def test_legacy_record_without_table_state(self):
        restored = RiskAnalysisResult.from_dict({
            "riskLevel": "ALTO",
            "competence": "ESTADO",
            "cnaeDetails": [{"code": PHARMACY, "risk": "INDEFINIDO"}],
        })

        assert restored.rule_table_state == TableState.READY
        assert restored.cnae_details[0].risk == RiskLevel.INDEFINIDO
        assert restored.requires_pba is False

    def test_placeholder(self):
        result = RiskAnalysisResult.placeholder("Processo importado")

        assert result.is_pending
        assert result.competence == Competence.MANUAL_ANALYSIS
        assert result.cnae_details == ()
        assert result.pending_resolutions == ()
        assert result.observation == "Processo importado"

    def test_content_hash_stable(self, classifier):
        first = classifier.analyze(["4771-7/00", "1091-1/01"])
        second = classifier.analyze(["4771-7/00", "1091-1/01"])

        assert first.content_hash() == second.content_hash()
        assert len(first.content_hash()) == 64

    def test_content_hash_changes_with_override(self, classifier):
        result = classifier.analyze(["4771-7/00"])
        overridden = RiskAnalysisResult(
            risk_level=RiskLevel.ALTO,
            competence=result.competence,
            cnae_details=result.cnae_details,
            observation=result.observation,
            override=Override(RiskLevel.BAIXO, RiskLevel.ALTO, "vistoria"),
        )
        assert overridden.content_hash() != result.content_hash()

    def test_has_fallback(self, classifier):
        assert classifier.analyze(["9999-9/99"]).has_fallback
        assert not classifier.analyze(["4771-7/00"]).has_fallback

    def test_rules_loaded(self):
        result = RiskAnalysisResult(
            risk_level=RiskLevel.MEDIO,
            competence=Competence.MUNICIPAL,
            rule_table_state=TableState.UNINITIALIZED,
        )
        assert result.rules_loaded is False


class TestCodeDetail:

    def test_normalized_code(self):
        detail = CodeDetail(code="4771-7/00", risk=RiskLevel.BAIXO)
        assert detail.normalized_code == "4771700"
