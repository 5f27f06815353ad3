"""
Unit tests for the evidence aggregator
"""

from unittest.mock import Mock

from hscode_centrovert.config.region_policies import SAUDI_CONNECTOR, SINGAPORE_CONNECTOR, UAE_CONNECTOR
from hscode_centrovert.models.hs_models import ConnectorOutcome, ConnectorStatus, RetrievalTool, TargetRegion
from hscode_centrovert.services.evidence_service import EvidenceAggregator


def _connector(outcome=None, side_effect=None):
    connector = Mock()
    connector.lookup.return_value = outcome
    connector.lookup.side_effect = side_effect
    return connector


MATCH = ConnectorOutcome("singapore_hsa", ConnectorStatus.MATCH, "Match found in Singapore HSA Database: []")


class TestEvidenceAggregator:
    """Test cases for EvidenceAggregator.gather"""

    def test_singapore_uses_connector_and_search(self):
        """Test that Singapore queries its connector and enables search grounding"""
        sg = _connector(MATCH)
        aggregator = EvidenceAggregator(connectors={SINGAPORE_CONNECTOR: sg})

        context = aggregator.gather(TargetRegion.SINGAPORE, "headphones")

        sg.lookup.assert_called_once_with("headphones")
        assert context.evidence.text == MATCH.evidence
        assert context.evidence.has_match
        assert context.tool_selection == frozenset({RetrievalTool.WEB_SEARCH})
        assert "TradeNet" in context.instruction_block

    def test_region_without_connector(self):
        """Test that India relies on search only"""
        aggregator = EvidenceAggregator(connectors={})
        context = aggregator.gather(TargetRegion.INDIA, "tea")
        assert context.evidence.text == ""
        assert not context.evidence.connectors_ran
        assert RetrievalTool.WEB_SEARCH in context.tool_selection

    def test_gcc_state_falls_back_to_dubai(self):
        """Test that Gulf states without their own source use the Dubai connector"""
        uae = _connector(ConnectorOutcome(UAE_CONNECTOR, ConnectorStatus.NO_MATCH))
        aggregator = EvidenceAggregator(connectors={UAE_CONNECTOR: uae})

        context = aggregator.gather(TargetRegion.QATAR, "dates")

        uae.lookup.assert_called_once_with("dates")
        assert context.evidence.text == ""
        assert context.evidence.connectors_ran
        assert not context.evidence.has_match
        assert context.tool_selection == frozenset()

    def test_global_uses_fallback_connector(self):
        """Test that Global, having no dedicated source, queries the Dubai fallback"""
        uae = _connector(ConnectorOutcome(UAE_CONNECTOR, ConnectorStatus.MATCH, "Match found in Dubai Customs Database: [1]"))
        aggregator = EvidenceAggregator(connectors={UAE_CONNECTOR: uae})

        context = aggregator.gather(TargetRegion.GLOBAL, "tea")

        uae.lookup.assert_called_once_with("tea")
        assert context.evidence.has_match
        assert context.tool_selection == frozenset()
        assert "6-digit" in context.instruction_block

    def test_connector_exception_is_swallowed(self):
        """Test that an unexpected connector error never aborts gathering"""
        saudi = _connector(side_effect=RuntimeError("boom"))
        aggregator = EvidenceAggregator(connectors={SAUDI_CONNECTOR: saudi})

        context = aggregator.gather(TargetRegion.SAUDI_ARABIA, "dates")

        assert context.evidence.text == ""
        assert "ZATCA" in context.instruction_block

    def test_missing_connector_registration(self):
        """Test that a policy referencing an unregistered connector degrades to no evidence"""
        aggregator = EvidenceAggregator(connectors={})
        context = aggregator.gather(TargetRegion.UAE, "dates")
        assert context.evidence.outcomes == []

    def test_status_label_emitted(self):
        """Test that the region's search label is sent to the status sink"""
        statuses = []
        aggregator = EvidenceAggregator(connectors={SINGAPORE_CONNECTOR: _connector(MATCH)})
        aggregator.gather(TargetRegion.SINGAPORE, "headphones", statuses.append)
        assert statuses == ["Searching Singapore TradeNet & AHTN..."]

    def test_tuple_form(self):
        """Test the (evidence, instructions, tools) convenience form"""
        aggregator = EvidenceAggregator(connectors={SINGAPORE_CONNECTOR: _connector(MATCH)})
        evidence, instructions, tools = aggregator.select_policy_and_gather_evidence(TargetRegion.SINGAPORE, "x")
        assert evidence == MATCH.evidence
        assert instructions.strip()
        assert RetrievalTool.WEB_SEARCH in tools
